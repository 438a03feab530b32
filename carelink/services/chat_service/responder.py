"""Canned assistant replies for the demo chat.

The assistant has no model behind it: it picks a supportive reply at
random, or the fixed crisis-escalation reply when the user's message was
flagged.
"""
import random
from typing import Optional, Sequence

from .config import CRISIS_ESCALATION_REPLY, SUPPORTIVE_RESPONSES


class AssistantResponder:
    """Chooses the assistant's reply to a user message."""

    def __init__(
        self,
        responses: Sequence[str] = SUPPORTIVE_RESPONSES,
        crisis_reply: str = CRISIS_ESCALATION_REPLY,
        rng: Optional[random.Random] = None,
    ):
        """Initialize responder.

        Args:
            responses: Supportive replies, picked uniformly at random
            crisis_reply: Reply used for flagged messages
            rng: Random source (seed one for reproducible tests)

        Raises:
            ValueError: If responses is empty
        """
        if not responses:
            raise ValueError("At least one supportive response is required")
        self.responses = tuple(responses)
        self.crisis_reply = crisis_reply
        self._rng = rng or random.Random()

    def reply(self, is_emergency: bool) -> str:
        if is_emergency:
            return self.crisis_reply
        return self._rng.choice(self.responses)
