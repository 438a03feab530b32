"""Safety Service: emergency keyword detection.

Every user chat message is classified here before the assistant replies.
A match flags the message, which flags its chat for the emergency review
queue and switches the assistant to the crisis-escalation reply.

Components:
- config.py: Emergency keyword taxonomy and detector configuration
- detector.py: EmergencyDetector (classify / find_match)
- emergency_publisher.py: Kinesis event publishing for flagged messages
- handler.py: Flask HTTP endpoints (/health, /ready, /classify)

Usage:
    from carelink.services.safety_service import classify
    classify("I don't want to live anymore.")  # True
"""

from .config import DetectorConfig, EMERGENCY_KEYWORDS, freeze_taxonomy
from .detector import EmergencyDetector, EmergencyMatch, classify, find_match
from .emergency_publisher import EmergencyEventPublisher, EmergencyFlaggedEvent

__all__ = [
    "DetectorConfig",
    "EMERGENCY_KEYWORDS",
    "freeze_taxonomy",
    "EmergencyDetector",
    "EmergencyMatch",
    "classify",
    "find_match",
    "EmergencyEventPublisher",
    "EmergencyFlaggedEvent",
]
