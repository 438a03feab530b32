"""Tests for the emergency keyword taxonomy."""
import pytest

from carelink.services.safety_service.config import (
    DetectorConfig,
    EMERGENCY_KEYWORDS,
    freeze_taxonomy,
)


class TestDefaultTaxonomy:
    """The built-in taxonomy."""

    def test_categories_in_order(self):
        assert list(EMERGENCY_KEYWORDS) == ["suicide", "self-harm", "violence", "abuse"]

    def test_phrases_are_lowercase(self):
        for phrases in EMERGENCY_KEYWORDS.values():
            for phrase in phrases:
                assert phrase == phrase.lower()

    def test_suicide_phrases(self):
        assert EMERGENCY_KEYWORDS["suicide"] == (
            "kill myself",
            "end my life",
            "suicide",
            "don't want to live",
            "better off dead",
        )

    def test_mapping_is_read_only(self):
        with pytest.raises(TypeError):
            EMERGENCY_KEYWORDS["new"] = ("phrase",)

    def test_phrase_lists_are_tuples(self):
        for phrases in EMERGENCY_KEYWORDS.values():
            assert isinstance(phrases, tuple)


class TestFreezeTaxonomy:
    """freeze_taxonomy validation."""

    def test_lowercases_and_keeps_order(self):
        frozen = freeze_taxonomy({"b": ["Two", "One"], "a": ["THREE"]})
        assert list(frozen) == ["b", "a"]
        assert frozen["b"] == ("two", "one")

    def test_empty_phrase_rejected(self):
        with pytest.raises(ValueError):
            freeze_taxonomy({"test": ["ok", ""]})

    def test_empty_category_rejected(self):
        with pytest.raises(ValueError):
            freeze_taxonomy({"": ["phrase"]})

    def test_string_instead_of_list_rejected(self):
        with pytest.raises(ValueError):
            freeze_taxonomy({"test": "phrase"})


class TestDetectorConfig:

    def test_default_version(self):
        assert DetectorConfig().detector_version == "2023.06.15"

    def test_config_is_immutable(self):
        config = DetectorConfig()
        with pytest.raises(Exception):  # FrozenInstanceError
            config.detector_version = "other"
