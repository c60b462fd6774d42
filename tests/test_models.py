"""
Tests for research data records.

Validates:
- validity predicates for Fact, Summary and Evaluation
- dict round-trips tolerate string and Enum keys
- Fact identity and immutability
"""
import dataclasses
from enum import Enum

import pytest

from ghresearch.models import Evaluation, Fact, Summary
from ghresearch.validation import extract_errors


class Field(Enum):
    SOURCE_URL = "source_url"
    FACTS = "facts"
    CONFIDENCE = "confidence"
    COVERAGE_SCORE = "coverage_score"


def valid_evaluation_dict(**overrides):
    data = {
        "coverage_score": 0.8,
        "confidence_score": 0.7,
        "source_diversity": 0.5,
        "aspect_completion": 1.0,
        "missing_aspects": [],
        "notes": [],
    }
    data.update(overrides)
    return data


class TestFact:
    """Tests for Fact."""

    def test_defaults(self):
        fact = Fact(text="Test fact")
        assert fact.confidence == 0.5
        assert fact.extracted_at is None
        assert fact.aspect_id is None
        assert fact.source_url is None
        assert fact.id.startswith("fact_")

    def test_id_is_deterministic_on_text(self):
        first = Fact(text="Same text", source_url="url1")
        second = Fact(text="Same text", source_url="url2")
        assert first.id == second.id
        assert len(first.id) == len("fact_") + 16

    def test_explicit_id_is_kept(self):
        assert Fact(text="x", id="fact_custom").id == "fact_custom"

    def test_fact_is_immutable(self):
        fact = Fact(text="Immutable")
        with pytest.raises(dataclasses.FrozenInstanceError):
            fact.text = "changed"

    def test_validity(self):
        assert Fact(text="Valid fact", confidence=0.8).is_valid()
        assert not Fact(text="   ").is_valid()
        assert not Fact(text="Too confident", confidence=1.5).is_valid()

    def test_out_of_range_confidence_is_not_rejected_on_construction(self):
        fact = Fact(text="Stored as given", confidence=1.5)
        assert fact.confidence == 1.5

    def test_token_count(self):
        assert Fact(text="abcdefghi").token_count() == 3
        assert Fact(text="").token_count() == 0

    def test_from_dict_keeps_zero_confidence(self):
        fact = Fact.from_dict({"text": "Zero", "confidence": 0.0})
        assert fact.confidence == 0.0

    def test_round_trip(self):
        fact = Fact(text="Round trip", confidence=0.9, aspect_id="A1",
                    source_url="https://github.com/acme/api/issues/1",
                    extracted_at="2026-01-01T00:00:00+00:00")
        assert Fact.from_dict(fact.to_dict()) == fact


class TestSummary:
    """Tests for Summary."""

    def test_blank_source_url_is_invalid(self):
        assert not Summary(source_url="", facts=[], topics=[]).is_valid()

    def test_well_formed_summary_is_valid(self):
        summary = Summary(source_url="https://github.com/acme/api/issues/1",
                          facts=["A fact"], topics=["ci"], confidence=0.5)
        assert summary.is_valid()

    def test_confidence_above_one_is_invalid(self):
        summary = Summary(source_url="https://github.com/acme/api/issues/1", confidence=1.2)
        assert not summary.is_valid()
        assert any("confidence" in error for error in summary.validation_errors())

    def test_non_list_facts_is_invalid(self):
        summary = Summary(source_url="https://x", facts="not a list")
        assert not summary.is_valid()

    def test_from_dict_defaults(self):
        summary = Summary.from_dict({"source_url": "https://x"})
        assert summary.facts == []
        assert summary.topics == []
        assert summary.confidence == 0.5

    def test_from_dict_accepts_enum_keys(self):
        summary = Summary.from_dict({
            Field.SOURCE_URL: "https://x",
            Field.FACTS: ["one"],
            Field.CONFIDENCE: 0.9,
        })
        assert summary.source_url == "https://x"
        assert summary.facts == ["one"]
        assert summary.confidence == 0.9

    def test_string_key_wins_over_enum_key(self):
        summary = Summary.from_dict({Field.SOURCE_URL: "https://enum", "source_url": "https://str"})
        assert summary.source_url == "https://str"

    def test_to_dict_field_names(self):
        summary = Summary(source_url="https://x", facts=["f"], topics=["t"], confidence=0.4)
        assert summary.to_dict() == {
            "source_url": "https://x",
            "facts": ["f"],
            "topics": ["t"],
            "confidence": 0.4,
        }


class TestEvaluation:
    """Tests for Evaluation."""

    def test_all_scores_in_range_is_valid(self):
        evaluation = Evaluation.from_dict(valid_evaluation_dict(
            missing_aspects=["A3"], notes=["needs more sources"]
        ))
        assert evaluation.is_valid()

    @pytest.mark.parametrize("score", [
        "coverage_score", "confidence_score", "source_diversity", "aspect_completion"
    ])
    def test_missing_score_is_invalid(self, score):
        data = valid_evaluation_dict()
        del data[score]
        evaluation = Evaluation.from_dict(data)
        assert getattr(evaluation, score) is None
        assert not evaluation.is_valid()

    @pytest.mark.parametrize("value", [-0.1, 1.01, "0.5", True])
    def test_out_of_range_or_non_numeric_score_is_invalid(self, value):
        evaluation = Evaluation.from_dict(valid_evaluation_dict(source_diversity=value))
        assert not evaluation.is_valid()

    def test_boundaries_are_valid(self):
        evaluation = Evaluation.from_dict(valid_evaluation_dict(coverage_score=0, aspect_completion=1))
        assert evaluation.is_valid()

    def test_enum_keys(self):
        data = valid_evaluation_dict()
        data[Field.COVERAGE_SCORE] = data.pop("coverage_score")
        assert Evaluation.from_dict(data).coverage_score == 0.8

    def test_extract_errors_reports_problems(self):
        evaluation = Evaluation.from_dict({})
        errors = extract_errors(evaluation)
        assert len(errors) == 4
        assert "coverage_score is missing" in errors
