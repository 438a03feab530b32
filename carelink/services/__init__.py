"""CareLink services.

- safety_service: emergency keyword detection, runs on every user message
- chat_service: demo assistant chat and the emergency chats review queue
"""
