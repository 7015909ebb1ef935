"""
Unit tests for the mode filter and the generation admission gate.
"""

import dataclasses
import logging

import pytest

from alexandria_core.nsfw import (
    FilterMode,
    Severity,
    filter_by_mode,
    matches_mode,
    should_suppress_generation,
)
from alexandria_core.nsfw.modes import (
    SUPPRESSION_MESSAGES,
    build_generation_prompt,
    count_hidden_by_mode,
    normalize_nsfw_mode,
    resolve_mode,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def mixed_records(explicit_record):
    return [
        explicit_record,
        {"identifier": "gore-1", "title": "beheading footage"},
        {"identifier": "art-1", "title": "nude portrait study"},
        {"identifier": "apollo11", "title": "Apollo 11 mission audio"},
    ]


def _clean_records(count):
    return [{"identifier": f"steam-{i}", "title": f"Steam locomotive {i}"} for i in range(count)]


class TestModeNames:
    """Test mode aliases"""
    
    @pytest.mark.parametrize("value,expected", [
        ("safe", FilterMode.SAFE),
        (" Moderate ", FilterMode.MODERATE),
        ("off", FilterMode.UNRESTRICTED),
        ("none", FilterMode.UNRESTRICTED),
        ("no_filter", FilterMode.UNRESTRICTED),
        ("nsfw-only", FilterMode.NSFW_ONLY),
        ("only_nsfw", FilterMode.NSFW_ONLY),
        ("NSFW", FilterMode.NSFW_ONLY),
        ("adults", FilterMode.NSFW_ONLY),
        (FilterMode.MODERATE, FilterMode.MODERATE),
    ])
    def test_aliases(self, value, expected):
        assert normalize_nsfw_mode(value) is expected
    
    @pytest.mark.parametrize("value", ["strict", "", None, 3])
    def test_unknown(self, value):
        assert normalize_nsfw_mode(value) is None
        assert resolve_mode(value) is FilterMode.SAFE


class TestMatchesMode:
    """Test the visibility table"""
    
    @pytest.mark.parametrize("mode,visible", [
        ("safe", {"apollo11"}),
        ("moderate", {"art-1", "apollo11"}),
        ("unrestricted", {"tape-0042", "gore-1", "art-1", "apollo11"}),
        ("nsfw-only", {"tape-0042", "gore-1", "art-1"}),
        ("bogus", {"apollo11"}),
    ])
    def test_mode_table(self, mixed_records, mode, visible):
        shown = {record["identifier"] for record in mixed_records if matches_mode(record, mode)}
        assert shown == visible
    
    def test_stale_annotation_ignored(self, explicit_record):
        stale = dict(explicit_record, nsfw=False)
        assert matches_mode(stale, "safe") is False
        clean = {"title": "Apollo 11", "nsfw": True, "nsfwLevel": "explicit"}
        assert matches_mode(clean, "safe") is True


class TestFilterByMode:
    """Test list filtering and hidden counts"""
    
    def test_safe(self, mixed_records):
        result = filter_by_mode(mixed_records, "safe")
        assert [item["identifier"] for item in result.items] == ["apollo11"]
        assert result.hidden_count == 3
        assert result.fallback_applied is False
    
    def test_moderate_keeps_order(self, mixed_records):
        result = filter_by_mode(mixed_records, FilterMode.MODERATE)
        assert [item["identifier"] for item in result.items] == ["art-1", "apollo11"]
        assert result.hidden_count == 2
    
    def test_items_annotated(self, mixed_records):
        items = filter_by_mode(mixed_records, "unrestricted").items
        assert [item["nsfw"] for item in items] == [True, True, True, False]
        assert [item.get("nsfwLevel") for item in items] == ["explicit", "violent", "mild", None]
    
    def test_input_not_modified(self, mixed_records):
        filter_by_mode(mixed_records, "safe")
        assert all("nsfw" not in record for record in mixed_records)
    
    def test_non_mapping_entries_skipped(self):
        result = filter_by_mode([None, "text", {"title": "Apollo"}], "safe")
        assert len(result.items) == 1
        assert result.hidden_count == 0
    
    def test_nsfw_only_without_fallback(self, mixed_records):
        result = filter_by_mode(mixed_records, "nsfw-only")
        assert len(result.items) == 3
        assert result.hidden_count == 1
        assert result.fallback_applied is False
    
    def test_nsfw_only_fallback(self, caplog):
        with caplog.at_level(logging.INFO, logger="alexandria_core.nsfw.modes"):
            result = filter_by_mode(_clean_records(15), "nsfw-only")
        assert result.fallback_applied is True
        assert [item["identifier"] for item in result.items] == [f"steam-{i}" for i in range(10)]
        assert result.hidden_count == 5
        assert all(item["nsfw"] is False for item in result.items)
        assert "No NSFW records matched" in caplog.text
    
    def test_nsfw_only_fallback_size_configurable(self, engine_config):
        config = dataclasses.replace(engine_config, nsfw_only_fallback=3)
        result = filter_by_mode(_clean_records(5), "nsfw-only", config)
        assert len(result.items) == 3
        assert result.hidden_count == 2
    
    def test_nsfw_only_empty_input(self):
        result = filter_by_mode([], "nsfw-only")
        assert result.items == []
        assert result.fallback_applied is False


class TestCountHidden:
    """Test hidden-record counting"""
    
    @pytest.mark.parametrize("mode,expected", [
        ("safe", 3),
        ("moderate", 2),
        ("unrestricted", 0),
        ("nsfw-only", 0),
    ])
    def test_counts(self, mixed_records, mode, expected):
        assert count_hidden_by_mode(mixed_records, mode) == expected


class TestShouldSuppressGeneration:
    """Test the generation admission gate"""
    
    @pytest.mark.parametrize("text,mode,suppressed,severity", [
        ("nude portraits", "safe", True, Severity.MILD),
        ("steam engines", "safe", False, None),
        ("nude portraits", "moderate", False, None),
        ("xxx tapes", "moderate", True, Severity.EXPLICIT),
        ("beheading video", "moderate", True, Severity.VIOLENT),
        ("steam engines", "nsfw-only", True, None),
        ("nude portraits", "nsfw-only", False, None),
        ("xxx tapes", "unrestricted", False, None),
        ("steam engines", "unrestricted", False, None),
    ])
    def test_policy(self, text, mode, suppressed, severity):
        decision = should_suppress_generation(text, mode)
        assert decision.suppressed is suppressed
        assert decision.severity is severity
    
    def test_messages(self):
        decision = should_suppress_generation("xxx tapes", "moderate")
        assert decision.message == SUPPRESSION_MESSAGES[FilterMode.MODERATE]
        assert "Moderate" in decision.message
        assert should_suppress_generation("nude", "safe").message == SUPPRESSION_MESSAGES[FilterMode.SAFE]
        assert should_suppress_generation("steam", "safe").message is None
    
    @pytest.mark.parametrize("mode", ["safe", "moderate", "nsfw-only", "unrestricted"])
    def test_blank_text_never_suppressed(self, mode):
        assert should_suppress_generation("   ", mode).suppressed is False
    
    def test_unknown_mode_is_safe(self):
        assert should_suppress_generation("nude portraits", "strict").suppressed is True


class TestGenerationPrompt:
    """Test prompt prefixing"""
    
    def test_layout(self):
        prompt = build_generation_prompt("moderate", "  jazz records ")
        lines = prompt.splitlines()
        assert lines[0].startswith('NSFW mode is currently set to: "moderate".')
        assert lines[1] == "User: jazz records"
        assert lines[2] == "AI:"
    
    def test_unknown_mode(self):
        assert '"safe"' in build_generation_prompt("whatever", "jazz")
