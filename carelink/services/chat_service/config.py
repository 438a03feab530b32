"""Chat Service configuration and canned assistant text."""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ChatConfig:
    """Configuration for the demo chat flow."""

    # Load the sample conversations on startup
    seed_demo_chats: bool = True

    # Publish an event for every flagged user message
    publish_emergencies: bool = True


WELCOME_MESSAGE = "Hello! I'm your AI therapy assistant. How are you feeling today?"

CRISIS_ESCALATION_REPLY = (
    "I notice you may be going through a crisis. Remember, you're not alone. "
    "Would you like me to connect you with a human counselor immediately?"
)

SUPPORTIVE_RESPONSES: Tuple[str, ...] = (
    "I understand you're going through a difficult time. Could you tell me more about what you're experiencing?",
    "Thank you for sharing that with me. It takes courage to talk about these things.",
    "It sounds like you're feeling overwhelmed. Let's explore some coping strategies that might help.",
    "Your feelings are valid. Many people go through similar experiences.",
    "Have you tried deep breathing exercises when you feel anxious? It can help calm your nervous system.",
    "Remember that healing is not linear. Some days will be better than others, and that's okay.",
    "Would it help to talk about what triggered these feelings?",
    "Self-care is important. What activities bring you joy or peace?",
    "I'm here to support you through this journey. You don't have to face this alone.",
)

# Sample conversations shown on the dashboard before any live chat exists.
# Each line is (sender, content); user lines go through the detector.
DEMO_CHATS = (
    {
        "id": "1",
        "user_id": "user1",
        "counselor_id": "1",
        "lines": (
            ("user", "I've been feeling really anxious lately."),
            ("counselor", "I'm sorry to hear that. Could you tell me more about when you notice this anxiety?"),
        ),
    },
    {
        "id": "2",
        "user_id": "user2",
        "counselor_id": "2",
        "lines": (
            ("user", "I don't know if I can continue like this. I don't want to live anymore."),
            ("counselor", "I'm very concerned about what you're sharing. Your life matters and I want to help. Can we talk about what's going on right now?"),
        ),
    },
)
