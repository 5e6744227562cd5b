"""
Clinical Decision Layer

Transforms patient input into VTE risk scores, prophylaxis protocols,
FJS-12 outcome scores and pain bands.

Usage:
    from vte_manager.core.clinical import AssessmentEngine, ClinicalFlags

    engine = AssessmentEngine()
    result = engine.assess(patient, ClinicalFlags(is_arthroplasty=True))
"""
from .engine import AssessmentEngine, AssessmentResult
from .base import (
    INCOMPLETE,
    AlertLevel,
    ClinicalFlags,
    OutcomeStatus,
    PainCategory,
    PainClassification,
    PatientRecord,
    ProtocolCategory,
    ProtocolRecommendation,
    RiskFactorGroup,
    RiskFactorSelection,
    RiskGroup,
    Sex,
)
from .metrics import (
    BenchmarkComparison,
    age_band_points,
    classify_pain,
    compare_to_benchmark,
    compute_bmi,
    compute_outcome_score,
    compute_risk_score,
)
from .protocol import classify_protocol, risk_group_label
from .reference import CAPRINI_CATALOG, PERIOD_BENCHMARKS, RiskFactorCatalog

__all__ = [
    "AssessmentEngine",
    "AssessmentResult",
    "INCOMPLETE",
    "AlertLevel",
    "ClinicalFlags",
    "OutcomeStatus",
    "PainCategory",
    "PainClassification",
    "PatientRecord",
    "ProtocolCategory",
    "ProtocolRecommendation",
    "RiskFactorGroup",
    "RiskFactorSelection",
    "RiskGroup",
    "Sex",
    "BenchmarkComparison",
    "age_band_points",
    "classify_pain",
    "compare_to_benchmark",
    "compute_bmi",
    "compute_outcome_score",
    "compute_risk_score",
    "classify_protocol",
    "risk_group_label",
    "CAPRINI_CATALOG",
    "PERIOD_BENCHMARKS",
    "RiskFactorCatalog",
]
