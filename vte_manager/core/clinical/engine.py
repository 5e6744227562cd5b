"""
Clinical Assessment Engine

Central dispatcher. Takes one input snapshot (patient, flags, checklist,
optional FJS-12 answers and pain rating) and recomputes every derived value.

Usage:
    from vte_manager.core.clinical import AssessmentEngine

    engine = AssessmentEngine()
    result = engine.assess(patient, flags, selections, fjs_answers=answers, pain_score=3)
    print(result.risk_score, result.protocol.title)
    record = engine.export(patient, flags, result)

The VTE part always runs. The FJS-12 and pain parts are optional modules:
leaving them out yields an INCOMPLETE outcome score and no pain band,
without touching the VTE result.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Sequence

from vte_manager.utils import get_logger
from .base import (
    ClinicalFlags,
    OutcomeScore,
    OutcomeStatus,
    PainClassification,
    PatientRecord,
    ProtocolRecommendation,
    RiskFactorSelection,
    RiskGroup,
    outcome_to_json,
)
from .metrics import (
    BenchmarkComparison,
    age_band_points,
    classify_pain,
    compare_to_benchmark,
    compute_bmi,
    compute_outcome_score,
    compute_risk_score,
    get_benchmark,
    is_obese,
)
from .protocol import classify_protocol, risk_group_label
from .reference import CAPRINI_CATALOG, RiskFactorCatalog

if TYPE_CHECKING:
    from vte_manager.core.reports.export_record import ExportRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssessmentResult:
    """Everything derived from one input snapshot."""
    bmi: float
    is_obese: bool
    age_points: int
    risk_score: int
    risk_group: RiskGroup
    protocol: ProtocolRecommendation
    outcome_score: OutcomeScore
    period_id: Optional[str] = None
    benchmark: Optional[BenchmarkComparison] = None
    pain: Optional[PainClassification] = None

    @property
    def outcome_complete(self) -> bool:
        return not isinstance(self.outcome_score, OutcomeStatus)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bmi": self.bmi,
            "is_obese": self.is_obese,
            "age_points": self.age_points,
            "risk_score": self.risk_score,
            "risk_group": self.risk_group.value,
            "protocol": self.protocol.to_dict(),
            "fjs_score": outcome_to_json(self.outcome_score),
            "period_id": self.period_id,
            "benchmark": self.benchmark.to_dict() if self.benchmark else None,
            "pain": self.pain.to_dict() if self.pain else None,
        }


class AssessmentEngine:
    """
    Turns an input snapshot into an AssessmentResult.

    Stateless apart from the (immutable) catalog, so one instance can be
    shared by concurrent requests.
    """

    def __init__(self, catalog: RiskFactorCatalog = CAPRINI_CATALOG):
        self.catalog = catalog

    def assess(
        self,
        patient: PatientRecord,
        flags: ClinicalFlags,
        selections: Iterable[RiskFactorSelection] = (),
        fjs_answers: Optional[Sequence[Optional[int]]] = None,
        pain_score: Optional[int] = None,
        period_id: Optional[str] = None,
    ) -> AssessmentResult:
        """
        Recompute all derived values.

        Args:
            patient:     Demographics and body measurements.
            flags:       Arthroplasty / cardiovascular history flags.
            selections:  Checked Caprini items; unknown items are ignored.
            fjs_answers: Twelve answers (0-4, None = unanswered) or None
                         when the outcome module is not used.
            pain_score:  0-10 rating or None when not assessed.
            period_id:   Recovery period for the FJS benchmark comparison.

        Raises:
            InvalidInputError: unparseable numbers, pain outside 0-10,
                               FJS answers outside 0-4, unknown period.
        """
        bmi = compute_bmi(patient.height_cm, patient.weight_kg)
        risk_score = compute_risk_score(patient.age, bmi, flags, selections, self.catalog)

        outcome = compute_outcome_score(fjs_answers if fjs_answers is not None else [])

        benchmark = None
        if period_id:
            get_benchmark(period_id)
            if not isinstance(outcome, OutcomeStatus):
                benchmark = compare_to_benchmark(outcome, period_id)

        pain = classify_pain(pain_score) if pain_score is not None else None

        result = AssessmentResult(
            bmi=bmi,
            is_obese=is_obese(bmi),
            age_points=age_band_points(patient.age),
            risk_score=risk_score,
            risk_group=risk_group_label(flags, risk_score),
            protocol=classify_protocol(flags, risk_score),
            outcome_score=outcome,
            period_id=period_id or None,
            benchmark=benchmark,
            pain=pain,
        )
        logger.debug(
            f"AssessmentEngine: caprini={result.risk_score} group={result.risk_group.value} "
            f"protocol={result.protocol.category.value} fjs={outcome_to_json(outcome)}"
        )
        return result

    def export(
        self,
        patient: PatientRecord,
        flags: ClinicalFlags,
        result: AssessmentResult,
        timestamp: Optional[datetime] = None,
    ) -> ExportRecord:
        """Snapshot an assessment into the canonical export row."""
        # reports depends on this package, so resolve it at call time
        from vte_manager.core.reports.export_record import build_export_record

        period_label = get_benchmark(result.period_id).label if result.period_id else ""
        return build_export_record(
            patient=patient,
            flags=flags,
            risk_score=result.risk_score,
            outcome_score=result.outcome_score,
            pain_score=result.pain.score if result.pain else None,
            period_label=period_label,
            timestamp=timestamp,
        )

    @staticmethod
    def summarise(result: AssessmentResult) -> Dict[str, Any]:
        """
        Build a compact summary dict for dashboards and JSON responses.

        Example output:
        {
            "caprini_score": 9,
            "risk_group": "Standard Risk Group",
            "protocol": "Standard Protocol (Low Risk)",
            "alert": "success",
            "fjs_score": "Incomplete",
            "pain_category": None
        }
        """
        return {
            "caprini_score": result.risk_score,
            "risk_group": result.risk_group.value,
            "protocol": result.protocol.title,
            "alert": result.protocol.alert.value,
            "fjs_score": outcome_to_json(result.outcome_score),
            "pain_category": result.pain.category.value if result.pain else None,
        }
