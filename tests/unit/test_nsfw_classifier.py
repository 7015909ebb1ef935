"""
Unit tests for NSFW classification and record annotation.
"""

import logging

import pytest

from alexandria_core.config import EngineConfig
from alexandria_core.lexicon import KeywordGroups
from alexandria_core.nsfw import (
    NSFWClassification,
    Severity,
    annotate_record,
    classify_record,
    classify_text,
)
from alexandria_core.nsfw.classifier import (
    UNFLAGGED,
    analyze_text,
    harvest_record_strings,
    is_nsfw_content,
)

pytestmark = pytest.mark.unit


def _nested(value, levels):
    for _ in range(levels):
        value = [value]
    return value


class TestClassifyText:
    """Test free-text classification"""
    
    @pytest.mark.parametrize("text,flagged,term", [
        ("archived cumshot scenes", True, "cum"),
        ("notes on safe anal sex practices", True, "anal"),
        ("climate analysis and reconstruction studies", False, None),
        ("cumulative climate data", False, None),
    ])
    def test_reference_strings(self, text, flagged, term):
        result = classify_text(text)
        assert result.flagged is flagged
        if term:
            assert result.severity is Severity.EXPLICIT
            assert term in result.matches
    
    def test_explicit_morphology_match(self):
        result = classify_text("cumshot compilation")
        assert result.flagged is True
        assert result.severity is Severity.EXPLICIT
        assert result.matches == ("cum",)
    
    def test_bare_anal_flagged(self):
        result = classify_text("anal")
        assert result.flagged is True
        assert result.severity is Severity.EXPLICIT
    
    @pytest.mark.parametrize("text", [
        "climate analysis and reconstruction studies",
        "cumulative rainfall records",
        "magna cum laude graduates",
        "apollo 11 mission audio",
    ])
    def test_clean_text(self, text):
        assert classify_text(text) == UNFLAGGED
    
    @pytest.mark.parametrize("text", ["", "   ", None, 12, []])
    def test_blank_input(self, text):
        assert classify_text(text).flagged is False
    
    def test_list_input(self):
        result = classify_text(["Family album", "", 5, "nude study"])
        assert result.severity is Severity.MILD
        assert result.matches == ("nude",)
    
    def test_is_nsfw_content(self):
        assert is_nsfw_content("x-rated") is True
        assert is_nsfw_content("field recordings") is False


class TestSeverity:
    """Test tier precedence and match aggregation"""
    
    def test_mild_only(self):
        result = classify_text("nude figure drawing")
        assert result.severity is Severity.MILD
        assert result.matches == ("nude",)
    
    def test_violent_beats_mild(self):
        result = classify_text("nude beheading")
        assert result.severity is Severity.VIOLENT
        assert result.matches == ("beheading", "nude")
    
    def test_explicit_beats_violent(self):
        result = classify_text("nude beheading porn")
        assert result.severity is Severity.EXPLICIT
        assert result.matches == ("porn", "nude", "beheading")
    
    def test_matches_deduplicated(self):
        result = classify_text(["xxx", "XXX tape"])
        assert result.matches == ("xxx",)
    
    def test_to_dict(self):
        assert classify_text("xxx").to_dict() == {
            "flagged": True,
            "severity": "explicit",
            "matches": ["xxx"],
        }
        assert UNFLAGGED.to_dict() == {"flagged": False, "severity": None, "matches": []}


class TestKeywordDocuments:
    """Test keyword document normalization"""
    
    def test_tiered_document(self):
        groups = KeywordGroups.from_document({
            "explicit": [" Porn ", "porn"],
            "adult": ["Nude"],
            "violent": ["Gore Video"],
        })
        assert groups.explicit == ("porn",)
        assert groups.adult == ("nude",)
        assert groups.violent == ("gore video",)
    
    def test_categories_document(self):
        groups = KeywordGroups.from_document({
            "categories": {"explicit": ["XXX"], "mild": ["xxx", "nude"], "violent": ["beheading"]},
        })
        assert groups.explicit == ("xxx",)
        assert groups.adult == ("nude",)
        assert groups.violent == ("beheading",)
    
    def test_flat_keyword_list_is_explicit(self):
        groups = KeywordGroups.from_document({"keywords": ["Foo", " foo ", 3, None]})
        assert groups.explicit == ("foo",)
        assert groups.adult == ()
    
    def test_malformed_entries_ignored(self):
        groups = KeywordGroups.from_document({"explicit": "porn", "adult": None, "categories": []})
        assert groups == KeywordGroups()
    
    def test_non_mapping_document(self, caplog):
        with caplog.at_level(logging.WARNING):
            groups = KeywordGroups.from_document(["porn"])
        assert groups == KeywordGroups()
        assert "not an object" in caplog.text
    
    def test_custom_groups_drive_classification(self):
        config = EngineConfig.from_documents({"categories": {"violent": ["duel"]}})
        result = classify_text("a duel at dawn", config)
        assert result.severity is Severity.VIOLENT
        assert classify_text("xxx", config).flagged is False


class TestClassifyRecord:
    """Test record field harvesting"""
    
    def test_title(self, explicit_record):
        result = classify_record(explicit_record)
        assert result.severity is Severity.EXPLICIT
        assert set(result.matches) == {"xxx", "hardcore"}
    
    def test_clean_record(self, climate_record):
        assert classify_record(climate_record) == UNFLAGGED
    
    def test_nested_metadata_tags(self):
        record = {"title": "Family photos", "metadata": {"tags": ["beach", ["nude"]]}}
        assert classify_record(record).severity is Severity.MILD
    
    def test_unlisted_field_ignored(self):
        assert classify_record({"title": "Tape", "notes": "xxx"}).flagged is False
        assert classify_record({"title": "Tape", "metadata": {"notes": "xxx"}}).flagged is False
    
    def test_links(self):
        record = {"title": "Mirror", "links": {"original": "https://example.com/xxx/123"}}
        assert classify_record(record).severity is Severity.EXPLICIT
    
    def test_url_fields(self):
        assert classify_record({"originalUrl": "https://example.com/nude-gallery"}).flagged is True
    
    def test_self_referencing_value(self):
        tags = ["beach"]
        tags.append(tags)
        tags.append("nude")
        assert classify_record({"tags": tags}).severity is Severity.MILD
    
    def test_depth_bound(self):
        assert classify_record({"subject": _nested("nude", 3)}).flagged is True
        assert classify_record({"subject": _nested("nude", 10)}).flagged is False
    
    def test_harvest_order(self):
        record = {"tags": ["b"], "title": "a", "links": {"original": "d"}, "metadata": {"tags": "c"}}
        assert harvest_record_strings(record) == ["a", "b", "c", "d"]
    
    def test_non_mapping_record(self):
        assert classify_record(None) == UNFLAGGED


class TestAnnotateRecord:
    """Test nsfw / nsfwLevel / nsfwMatches annotation"""
    
    def test_flagged_record(self, explicit_record):
        annotated = annotate_record(explicit_record)
        assert annotated["nsfw"] is True
        assert annotated["nsfwLevel"] == "explicit"
        assert "xxx" in annotated["nsfwMatches"]
        assert annotated["title"] == explicit_record["title"]
    
    def test_input_not_modified(self, explicit_record):
        snapshot = dict(explicit_record)
        annotate_record(explicit_record)
        assert explicit_record == snapshot
    
    def test_stale_annotation_cleared(self, climate_record):
        stale = dict(climate_record, nsfw=True, nsfwLevel="explicit", nsfwMatches=["xxx"])
        annotated = annotate_record(stale)
        assert annotated["nsfw"] is False
        assert "nsfwLevel" not in annotated
        assert "nsfwMatches" not in annotated
    
    def test_stale_clean_flag_ignored(self, explicit_record):
        annotated = annotate_record(dict(explicit_record, nsfw=False))
        assert annotated["nsfw"] is True
    
    def test_idempotent(self, explicit_record, climate_record):
        for record in (explicit_record, climate_record):
            once = annotate_record(record)
            assert annotate_record(once) == once


class TestAnalyzeText:
    """Test per-tier prompt analysis"""
    
    def test_all_tiers(self):
        analysis = analyze_text("nude beheading porn")
        assert (analysis.has_explicit, analysis.has_violent, analysis.has_mild) == (True, True, True)
        assert analysis.severity is Severity.EXPLICIT
        assert analysis.matches == ["porn", "beheading", "nude"]
    
    def test_clean(self):
        analysis = analyze_text("steam locomotives")
        assert analysis.flagged is False
        assert analysis.severity is None
        assert analysis.matches == []
    
    def test_blank(self):
        assert analyze_text("  ").flagged is False
    
    def test_classification_type(self):
        assert isinstance(classify_text("nude"), NSFWClassification)
