"""
Unit Tests for the Assessment Engine

Tests full recomputation from one snapshot, the optional FJS-12 and pain
modules, summaries and export.
"""
import pytest

from vte_manager.core.clinical import (
    INCOMPLETE,
    AssessmentEngine,
    ClinicalFlags,
    PainCategory,
    ProtocolCategory,
    RiskGroup,
)
from vte_manager.utils import InvalidInputError


@pytest.fixture
def engine():
    return AssessmentEngine()


class TestAssess:
    """Tests for AssessmentEngine.assess."""

    def test_vte_only(self, engine, sample_patient, arthroplasty_flags, sample_selections):
        result = engine.assess(sample_patient, arthroplasty_flags, sample_selections)

        assert result.bmi == 25.0
        assert result.is_obese is False
        assert result.age_points == 2
        assert result.risk_score == 18
        assert result.risk_group == RiskGroup.HIGH
        assert result.protocol.category == ProtocolCategory.HIGH_RISK_SCORE
        assert result.outcome_score is INCOMPLETE
        assert result.outcome_complete is False
        assert result.benchmark is None
        assert result.pain is None

    def test_completed_fjs_with_benchmark(self, engine, sample_patient, arthroplasty_flags):
        result = engine.assess(sample_patient, arthroplasty_flags, fjs_answers=[0] * 12, period_id="1y")

        assert result.outcome_score == 100.0
        assert result.outcome_complete is True
        assert result.benchmark.meets_pass is True
        assert result.benchmark.is_forgotten_joint is True

    def test_incomplete_fjs_skips_benchmark(self, engine, sample_patient, arthroplasty_flags):
        answers = [1] * 11 + [None]
        result = engine.assess(sample_patient, arthroplasty_flags, fjs_answers=answers, period_id="1y")

        assert result.outcome_score is INCOMPLETE
        assert result.period_id == "1y"
        assert result.benchmark is None

    def test_unknown_period_rejected(self, engine, sample_patient, arthroplasty_flags):
        with pytest.raises(InvalidInputError):
            engine.assess(sample_patient, arthroplasty_flags, period_id="5y")

    def test_pain_band(self, engine, sample_patient, arthroplasty_flags):
        result = engine.assess(sample_patient, arthroplasty_flags, pain_score=5)
        assert result.pain.category == PainCategory.MODERATE

    def test_invalid_pain_rejected(self, engine, sample_patient, arthroplasty_flags):
        with pytest.raises(InvalidInputError):
            engine.assess(sample_patient, arthroplasty_flags, pain_score=11)

    def test_optional_modules_do_not_change_vte_result(
        self, engine, sample_patient, arthroplasty_flags, sample_selections
    ):
        bare = engine.assess(sample_patient, arthroplasty_flags, sample_selections)
        full = engine.assess(
            sample_patient, arthroplasty_flags, sample_selections,
            fjs_answers=[2] * 12, pain_score=8, period_id="6m",
        )
        assert bare.risk_score == full.risk_score
        assert bare.risk_group == full.risk_group
        assert bare.protocol == full.protocol

    def test_same_snapshot_same_result(self, engine, sample_patient, sample_selections):
        flags = ClinicalFlags(is_arthroplasty=True, has_cv_history=True, is_taking_antiplatelet=True)
        first = engine.assess(sample_patient, flags, sample_selections, fjs_answers=[3] * 12, pain_score=2)
        second = engine.assess(sample_patient, flags, sample_selections, fjs_answers=[3] * 12, pain_score=2)
        assert first == second
        assert first.protocol.category == ProtocolCategory.SWITCHING_STRATEGY

    def test_to_dict_keeps_incomplete_literal(self, engine, sample_patient, arthroplasty_flags):
        data = engine.assess(sample_patient, arthroplasty_flags).to_dict()
        assert data["fjs_score"] == "Incomplete"
        assert data["protocol"]["category"] == "standard_protocol"
        assert data["risk_group"] == "Standard Risk Group"


class TestSummariseAndExport:
    """Tests for summarise and export."""

    def test_summarise(self, engine, sample_patient, arthroplasty_flags):
        summary = AssessmentEngine.summarise(engine.assess(sample_patient, arthroplasty_flags, pain_score=1))
        assert summary == {
            "caprini_score": 7,
            "risk_group": "Standard Risk Group",
            "protocol": "Standard Protocol (Low Risk)",
            "alert": "success",
            "fjs_score": "Incomplete",
            "pain_category": "Mild",
        }

    def test_export_uses_period_label(self, engine, sample_patient, arthroplasty_flags, fixed_timestamp):
        result = engine.assess(
            sample_patient, arthroplasty_flags, fjs_answers=[1] * 12, pain_score=4, period_id="1y"
        )
        record = engine.export(sample_patient, arthroplasty_flags, result, timestamp=fixed_timestamp)

        assert record.period == "1 year"
        assert record.caprini_score == result.risk_score
        assert record.fjs_score == 75.0
        assert record.pain_score == 4
        assert record.pain_category == "Moderate"

    def test_export_without_optional_modules(self, engine, sample_patient, arthroplasty_flags):
        result = engine.assess(sample_patient, arthroplasty_flags)
        record = engine.export(sample_patient, arthroplasty_flags, result)

        assert record.period == ""
        assert record.fjs_score == "Incomplete"
        assert record.pain_score == ""
