"""
Derived Metrics Calculator

Pure functions turning raw form input into derived clinical metrics:

    compute_bmi            weight / height^2, one decimal, 0.0 when not computable
    compute_risk_score     Caprini-style weighted sum (age, BMI, arthroplasty, checklist)
    compute_outcome_score  FJS-12, inverted 0-100 scale, or INCOMPLETE
    classify_pain          0-10 numeric rating -> Mild / Moderate / Severe
    compare_to_benchmark   FJS score vs. the population of a recovery period

Every function is deterministic and keeps no state, so recomputing on each
input change is always safe.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Sequence

from vte_manager.utils import InvalidInputError, get_logger
from .base import (
    INCOMPLETE,
    ClinicalFlags,
    OutcomeScore,
    OutcomeStatus,
    PainClassification,
    RiskFactorSelection,
)
from .reference import (
    AGE_BANDS,
    ARTHROPLASTY_POINTS,
    BMI_OBESITY_THRESHOLD,
    CAPRINI_CATALOG,
    FJS_MAX_ANSWER,
    FJS_MAX_RAW,
    FJS_MIN_ANSWER,
    FJS_QUESTIONS,
    FORGOTTEN_JOINT_THRESHOLD,
    PAIN_BANDS,
    PAIN_MAX,
    PAIN_MIN,
    PASS_THRESHOLD,
    PERIOD_BENCHMARKS,
    PeriodBenchmark,
    RiskFactorCatalog,
)

logger = get_logger(__name__)


# ── Helpers ───────────────────────────────────────────────────────────────────

def round_half_up(value: float, digits: int = 1) -> float:
    """Round like a clinician would (2.25 -> 2.3), not banker's rounding."""
    if not math.isfinite(value):
        raise ValueError(f"cannot round non-finite value {value!r}")
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _to_number(value: Any, field: str) -> Optional[float]:
    """Parse a numeric form value. Blank means absent; garbage is an error."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number, got a boolean", field=field)
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidInputError(
                f"{field} is not a number: {value!r}", field=field, details={"value": value}
            )
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        raise InvalidInputError(
            f"{field} must be a number, got {type(value).__name__}", field=field
        )

    if math.isnan(number) or math.isinf(number):
        raise InvalidInputError(f"{field} must be finite", field=field, details={"value": value})
    return number


def _to_integer(value: Any, field: str) -> int:
    number = _to_number(value, field)
    if number is None:
        raise InvalidInputError(f"{field} is required", field=field)
    if not number.is_integer():
        raise InvalidInputError(
            f"{field} must be a whole number, got {value!r}", field=field, details={"value": value}
        )
    return int(number)


# ── BMI ───────────────────────────────────────────────────────────────────────

def compute_bmi(height_cm: Any, weight_kg: Any) -> float:
    """
    Body-mass index rounded to one decimal.

    Returns 0.0 when height or weight is missing, zero or negative. Callers
    treat 0.0 as "no BMI available", which also suppresses the obesity point.
    Positive values so extreme that the quotient is not a finite number
    raise InvalidInputError.
    """
    height = _to_number(height_cm, "height_cm")
    weight = _to_number(weight_kg, "weight_kg")
    if not height or not weight or height <= 0 or weight <= 0:
        return 0.0

    try:
        bmi = weight / (height / 100) ** 2
    except (ZeroDivisionError, OverflowError):
        raise InvalidInputError(
            f"height_cm is out of range: {height_cm!r}", field="height_cm", details={"value": height_cm}
        )
    if not math.isfinite(bmi):
        raise InvalidInputError(
            f"weight_kg is out of range for height {height_cm!r}: {weight_kg!r}",
            field="weight_kg",
            details={"value": weight_kg},
        )
    return round_half_up(bmi, 1)


def is_obese(bmi: Any) -> bool:
    value = _to_number(bmi, "bmi") or 0.0
    return value > BMI_OBESITY_THRESHOLD


# ── Caprini score ─────────────────────────────────────────────────────────────

def age_band_points(age: Any) -> int:
    """0 below 41, +1 for 41-60, +2 for 61-74, +3 from 75. Age is whole years."""
    years = _to_integer(age, "age")
    if years < 0:
        raise InvalidInputError(f"age cannot be negative: {age}", field="age")
    for min_age, points in AGE_BANDS:
        if years >= min_age:
            return points
    return 0


def checklist_points(
    selections: Iterable[RiskFactorSelection],
    catalog: RiskFactorCatalog = CAPRINI_CATALOG,
) -> int:
    """
    Sum of group points over the distinct, valid selections.

    Duplicates count once. Selections not found in the catalog count zero
    and are logged, never raised.
    """
    total = 0
    for selection in set(selections):
        points = catalog.points_for(selection)
        if points == 0:
            logger.warning(
                f"Unknown checklist selection ignored: "
                f"{getattr(selection.group, 'value', selection.group)}/{selection.item_id}"
            )
            continue
        total += points
    return total


def compute_risk_score(
    age: Any,
    bmi: Any,
    flags: ClinicalFlags,
    selections: Iterable[RiskFactorSelection] = (),
    catalog: RiskFactorCatalog = CAPRINI_CATALOG,
) -> int:
    """
    Caprini VTE risk score.

    Purely additive, so the result never depends on the order in which
    selections are supplied. There is no upper bound.
    """
    score = age_band_points(age)
    if is_obese(bmi):
        score += 1
    if flags.is_arthroplasty:
        score += ARTHROPLASTY_POINTS
    score += checklist_points(selections, catalog)

    logger.debug(f"compute_risk_score: age={age} bmi={bmi} arthroplasty={flags.is_arthroplasty} → {score}")
    return score


# ── Forgotten Joint Score ─────────────────────────────────────────────────────

def compute_outcome_score(answers: Sequence[Optional[int]]) -> OutcomeScore:
    """
    FJS-12 score: 100 - (sum / 48) * 100, rounded to one decimal.

    Lower raw answers mean less joint awareness and a better score: all
    zeros give 100.0, all fours give 0.0. Any unanswered item (None, or a
    list shorter than 12) yields INCOMPLETE rather than a partial score.
    """
    if len(answers) > len(FJS_QUESTIONS):
        raise InvalidInputError(
            f"FJS-12 has {len(FJS_QUESTIONS)} items, got {len(answers)} answers",
            field="fjs_answers",
        )

    values = []
    for position, answer in enumerate(answers, start=1):
        if answer is None:
            continue
        value = _to_integer(answer, f"fjs_answers[{position}]")
        if not FJS_MIN_ANSWER <= value <= FJS_MAX_ANSWER:
            raise InvalidInputError(
                f"FJS answer {position} must be between {FJS_MIN_ANSWER} and {FJS_MAX_ANSWER}, got {value}",
                field=f"fjs_answers[{position}]",
            )
        values.append(value)

    if len(values) < len(FJS_QUESTIONS):
        return INCOMPLETE

    return round_half_up(100 - (sum(values) / FJS_MAX_RAW) * 100, 1)


@dataclass(frozen=True)
class BenchmarkComparison:
    """
    Where a completed FJS score sits against its recovery-period population.

    meets_pass / is_forgotten_joint are None when the fixed thresholds are
    not applicable to the period.
    """
    benchmark: PeriodBenchmark
    score: float
    difference: float
    z_score: Optional[float]
    meets_pass: Optional[bool]
    is_forgotten_joint: Optional[bool]

    def to_dict(self) -> dict:
        return {
            "period_id": self.benchmark.period_id,
            "period": self.benchmark.label,
            "population_mean": self.benchmark.mean,
            "population_sd": self.benchmark.sd,
            "score": self.score,
            "difference": self.difference,
            "z_score": self.z_score,
            "thresholds_apply": self.benchmark.thresholds_apply,
            "meets_pass": self.meets_pass,
            "is_forgotten_joint": self.is_forgotten_joint,
        }


def get_benchmark(period_id: str) -> PeriodBenchmark:
    benchmark = PERIOD_BENCHMARKS.get(period_id)
    if benchmark is None:
        raise InvalidInputError(
            f"Unknown recovery period: {period_id!r}",
            field="period",
            details={"known_periods": list(PERIOD_BENCHMARKS)},
        )
    return benchmark


def compare_to_benchmark(score: OutcomeScore, period_id: str) -> BenchmarkComparison:
    benchmark = get_benchmark(period_id)
    if isinstance(score, OutcomeStatus):
        raise InvalidInputError(
            "Cannot compare an incomplete FJS-12 questionnaire", field="fjs_answers"
        )

    z_score = None
    if benchmark.sd > 0:
        z_score = round_half_up((score - benchmark.mean) / benchmark.sd, 2)

    meets_pass = is_forgotten = None
    if benchmark.thresholds_apply:
        meets_pass = score >= PASS_THRESHOLD
        is_forgotten = score >= FORGOTTEN_JOINT_THRESHOLD

    return BenchmarkComparison(
        benchmark=benchmark,
        score=score,
        difference=round_half_up(score - benchmark.mean, 1),
        z_score=z_score,
        meets_pass=meets_pass,
        is_forgotten_joint=is_forgotten,
    )


# ── Pain ──────────────────────────────────────────────────────────────────────

def classify_pain(score: Any) -> PainClassification:
    """
    Map a 0-10 numeric pain rating to its band.

    Bands are inclusive and cover the whole range: 0-3 Mild, 4-6 Moderate,
    7-10 Severe. Anything outside 0-10 is rejected.
    """
    value = _to_integer(score, "pain_score")
    if not PAIN_MIN <= value <= PAIN_MAX:
        raise InvalidInputError(
            f"pain_score must be between {PAIN_MIN} and {PAIN_MAX}, got {value}",
            field="pain_score",
        )
    for low, high, category, guidance in PAIN_BANDS:
        if low <= value <= high:
            return PainClassification(score=value, category=category, guidance=guidance)
    # PAIN_BANDS covers PAIN_MIN..PAIN_MAX
    raise AssertionError(f"pain band table has a gap at {value}")
