"""Safety Service configuration and emergency keyword taxonomy."""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple


@dataclass(frozen=True)
class DetectorConfig:
    """Configuration for the emergency detector."""

    # Version tracking for the taxonomy, reported with every flag
    detector_version: str = "2023.06.15"


Taxonomy = Mapping[str, Tuple[str, ...]]


def freeze_taxonomy(taxonomy: Mapping[str, Iterable[str]]) -> Taxonomy:
    """Build a read-only category -> phrases mapping.

    Phrases are lower-cased and kept in their original order.

    Raises:
        ValueError: If a category name or phrase is empty
    """
    frozen: Dict[str, Tuple[str, ...]] = {}
    for category, phrases in taxonomy.items():
        if not category:
            raise ValueError("Taxonomy category names must be non-empty")
        if isinstance(phrases, str):
            raise ValueError(f"Phrases for {category!r} must be a list, not a string")
        lowered = tuple(phrase.lower() for phrase in phrases)
        if any(not phrase for phrase in lowered):
            # "" is a substring of everything
            raise ValueError(f"Empty trigger phrase in category {category!r}")
        frozen[category] = lowered
    return MappingProxyType(frozen)


# Category -> trigger phrases. Matching is case-insensitive substring
# containment only: "hit me" does not match "hitting me".
EMERGENCY_KEYWORDS: Taxonomy = freeze_taxonomy({
    "suicide": [
        "kill myself",
        "end my life",
        "suicide",
        "don't want to live",
        "better off dead",
    ],
    "self-harm": [
        "cut myself",
        "hurt myself",
        "self-harm",
        "harming myself",
    ],
    "violence": [
        "hurt someone",
        "kill someone",
        "attack",
        "violent thoughts",
    ],
    "abuse": [
        "being abused",
        "abusing me",
        "hit me",
        "hurting me",
    ],
})
