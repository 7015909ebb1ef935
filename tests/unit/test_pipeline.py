"""
Unit tests for end-to-end result ranking.
"""

import copy
import dataclasses
import logging
from unittest.mock import Mock

import pytest

from alexandria_core import rank_results
from alexandria_core.pipeline import score_result
from alexandria_core.reranking import BaseEmbeddingProvider

pytestmark = pytest.mark.unit

CURRENT_YEAR = 2026
QUERY = "climate change research"


@pytest.fixture
def page(climate_record, weather_record, explicit_record):
    """Search page in archive order: weather, explicit, climate"""
    return [weather_record, explicit_record, climate_record]


class TestScoreResult:
    """Test scoring fields attached to a single record"""
    
    def test_attached_fields(self, climate_record):
        item = score_result(climate_record, QUERY, current_year=CURRENT_YEAR)
        
        assert item["score"] == item["truth_breakdown"]["combinedScore"]
        assert item["score_breakdown"]["combinedScore"] == pytest.approx(0.985)
        assert item["truth_breakdown"]["trustLevel"] == "high"
        assert item["availability"] == "archived-only"
        assert item["source_trust"] == "high"
        assert item["language"] is None
        assert item["title"] == climate_record["title"]
    
    def test_record_not_modified(self, climate_record):
        snapshot = copy.deepcopy(climate_record)
        score_result(climate_record, QUERY, current_year=CURRENT_YEAR)
        assert climate_record == snapshot


class TestRankResults:
    """Test filter, score and order"""
    
    def test_safe_mode_scenario(self, page):
        result = rank_results(page, QUERY, mode="safe", current_year=CURRENT_YEAR)
        
        assert [item["title"] for item in result.items] == [
            "Climate Change Research Archive",
            "Weather observations in the arctic",
        ]
        assert result.hidden_count == 1
        assert result.fallback_applied is False
        assert result.alternate_queries == []
        assert result.items[0]["score"] == pytest.approx(0.673, abs=0.002)
        assert result.items[0]["source_trust"] == "high"
        assert result.items[1]["source_trust"] == "low"
    
    def test_items_annotated(self, page):
        result = rank_results(page, QUERY, mode="safe", current_year=CURRENT_YEAR)
        assert all(item["nsfw"] is False for item in result.items)
    
    def test_input_not_modified(self, page):
        snapshot = copy.deepcopy(page)
        rank_results(page, QUERY, mode="unrestricted", current_year=CURRENT_YEAR)
        assert page == snapshot
    
    def test_unrestricted_keeps_everything(self, page):
        result = rank_results(page, QUERY, mode="off", current_year=CURRENT_YEAR)
        assert len(result.items) == 3
        assert result.hidden_count == 0
        explicit = next(item for item in result.items if item.get("identifier") == "tape-0042")
        assert explicit["nsfwLevel"] == "explicit"
    
    def test_scores_descending(self, page):
        result = rank_results(page, QUERY, mode="unrestricted", current_year=CURRENT_YEAR)
        scores = [item["score"] for item in result.items]
        assert scores == sorted(scores, reverse=True)
    
    def test_default_mode_from_config(self, page, engine_config):
        assert len(rank_results(page, QUERY, current_year=CURRENT_YEAR).items) == 2
        
        permissive = dataclasses.replace(engine_config, default_mode="unrestricted")
        result = rank_results(page, QUERY, config=permissive, current_year=CURRENT_YEAR)
        assert len(result.items) == 3
    
    def test_nsfw_only_fallback(self, climate_record, weather_record):
        result = rank_results(
            [weather_record, climate_record], QUERY, mode="nsfw-only", current_year=CURRENT_YEAR
        )
        assert result.fallback_applied is True
        assert result.hidden_count == 0
        assert result.items[0]["title"] == climate_record["title"]
    
    def test_empty_page_suggests_alternatives(self, explicit_record):
        result = rank_results([explicit_record], "climate", mode="safe", current_year=CURRENT_YEAR)
        assert result.items == []
        assert result.hidden_count == 1
        assert "weather" in result.alternate_queries
    
    def test_no_records(self):
        result = rank_results([], "", mode="safe")
        assert result.items == []
        assert result.alternate_queries == []


class TestRankResultsRerank:
    """Test the optional re-rank stage"""
    
    def test_provider_failure_keeps_score_order(self, page, caplog):
        failing = Mock(spec=BaseEmbeddingProvider)
        failing.embed.side_effect = ConnectionError("embedding service down")
        
        with caplog.at_level(logging.WARNING):
            result = rank_results(page, QUERY, mode="safe", provider=failing, current_year=CURRENT_YEAR)
        
        assert [item["title"] for item in result.items] == [
            "Climate Change Research Archive",
            "Weather observations in the arctic",
        ]
        assert "Semantic re-rank unavailable" in caplog.text
    
    def test_rerank_limit(self, page):
        provider = Mock(spec=BaseEmbeddingProvider)
        provider.embed.side_effect = lambda texts: [[1.0, 0.0] for _ in texts]
        
        result = rank_results(
            page, QUERY, mode="safe", provider=provider, rerank_limit=1, current_year=CURRENT_YEAR
        )
        
        embedded = provider.embed.call_args[0][0]
        assert embedded == [QUERY, "Climate Change Research Archive Comprehensive report on climate change findings."]
        assert "ai_rank_score" in result.items[0]
