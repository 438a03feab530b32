"""Emergency text detector.

Decides whether a chat message contains language indicating a safety
emergency (suicide, self-harm, violence, abuse). Runs synchronously on
every user message before the assistant replies.

The check is plain case-insensitive substring containment against a static
taxonomy. There is no tokenization, stemming or negation handling, and a
match is absolute: there is no score or confidence.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from .config import EMERGENCY_KEYWORDS, Taxonomy, freeze_taxonomy


@dataclass(frozen=True)
class EmergencyMatch:
    """The first taxonomy entry found in a message."""
    category: str
    phrase: str

    def to_dict(self) -> Dict[str, str]:
        return {"category": self.category, "phrase": self.phrase}


class EmergencyDetector:
    """Keyword-based emergency classifier.

    Holds only a read-only taxonomy, so one instance can be shared across
    threads and requests.
    """

    def __init__(self, taxonomy: Optional[Mapping[str, Iterable[str]]] = None):
        """Initialize detector.

        Args:
            taxonomy: Category -> trigger phrases. Defaults to
                EMERGENCY_KEYWORDS. Copied into a read-only mapping.
        """
        if taxonomy is None:
            self.taxonomy: Taxonomy = EMERGENCY_KEYWORDS
        else:
            self.taxonomy = freeze_taxonomy(taxonomy)

    @property
    def phrase_count(self) -> int:
        return sum(len(phrases) for phrases in self.taxonomy.values())

    def find_match(self, text: str) -> Optional[EmergencyMatch]:
        """Return the first (category, phrase) contained in text, or None.

        Categories and phrases are scanned in taxonomy order.
        """
        lowered = text.lower()
        for category, phrases in self.taxonomy.items():
            for phrase in phrases:
                if phrase in lowered:
                    return EmergencyMatch(category=category, phrase=phrase)
        return None

    def classify(self, text: str) -> bool:
        """Return True if text contains any trigger phrase.

        Any string is valid input; "" returns False.
        """
        return self.find_match(text) is not None


_default_detector = EmergencyDetector()


def classify(text: str) -> bool:
    """Classify text against the default taxonomy."""
    return _default_detector.classify(text)


def find_match(text: str) -> Optional[EmergencyMatch]:
    """Explain a classification against the default taxonomy."""
    return _default_detector.find_match(text)
