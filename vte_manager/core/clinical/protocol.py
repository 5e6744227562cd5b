"""
VTE Prophylaxis Protocol Rules

Maps cardiovascular history flags and the Caprini score to one of four
mutually exclusive prophylaxis pathways.

Rule ordering (first match wins):
    1. Switching strategy   CV history + currently on antiplatelet
    2. High risk (history)  CV history, no antiplatelet
    3. High risk (score)    no CV history, Caprini >= 10
    4. Standard protocol    everyone else

Rules 1 and 2 must run before rule 3: a patient with CV history is never
routed by score, however high it is.

The protocol is not gated by arthroplasty; only the displayed risk group
is (see risk_group_label).
"""
from __future__ import annotations

from typing import Callable, List, Optional

from vte_manager.utils import get_logger
from .base import (
    AlertLevel,
    ClinicalFlags,
    ProtocolCategory,
    ProtocolRecommendation,
    RiskGroup,
)
from .reference import HIGH_RISK_SCORE

logger = get_logger(__name__)


# ── Rule 1: Switching Strategy ────────────────────────────────────────────────

def rule_switching_strategy(flags: ClinicalFlags, score: int) -> Optional[ProtocolRecommendation]:
    if not (flags.has_cv_history and flags.is_taking_antiplatelet):
        return None
    return ProtocolRecommendation(
        category=ProtocolCategory.SWITCHING_STRATEGY,
        title="Special: Switching Strategy",
        summary="Cardiovascular history and currently taking an antiplatelet agent",
        actions=(
            "Pre-op: discontinue aspirin 5-7 days before surgery",
            "Post-op: DOAC monotherapy + IPC",
        ),
        alert=AlertLevel.WARNING,
    )


# ── Rule 2: High Risk (History) ───────────────────────────────────────────────

def rule_high_risk_history(flags: ClinicalFlags, score: int) -> Optional[ProtocolRecommendation]:
    if not flags.has_cv_history or flags.is_taking_antiplatelet:
        return None
    return ProtocolRecommendation(
        category=ProtocolCategory.HIGH_RISK_HISTORY,
        title="High Risk (History)",
        summary="High-risk group with cardiovascular or cerebrovascular history",
        actions=("Recommended: DOAC monotherapy + IPC + early ambulation",),
        alert=AlertLevel.DANGER,
    )


# ── Rule 3: High Risk (Score) ─────────────────────────────────────────────────

def rule_high_risk_score(flags: ClinicalFlags, score: int) -> Optional[ProtocolRecommendation]:
    if flags.has_cv_history or score < HIGH_RISK_SCORE:
        return None
    return ProtocolRecommendation(
        category=ProtocolCategory.HIGH_RISK_SCORE,
        title=f"High Risk (Score ≥ {HIGH_RISK_SCORE})",
        summary="Caprini high-risk group",
        actions=("Recommended: LMWH/DOAC + IPC",),
        alert=AlertLevel.DANGER,
    )


# ── Rule 4: Standard Protocol ─────────────────────────────────────────────────

def rule_standard_protocol(flags: ClinicalFlags, score: int) -> Optional[ProtocolRecommendation]:
    return ProtocolRecommendation(
        category=ProtocolCategory.STANDARD_PROTOCOL,
        title="Standard Protocol (Low Risk)",
        summary="Standard risk group",
        actions=("Recommended: Aspirin + IPC + early ambulation",),
        alert=AlertLevel.SUCCESS,
    )


# Priority order is part of the contract
PROTOCOL_RULES: List[Callable[[ClinicalFlags, int], Optional[ProtocolRecommendation]]] = [
    rule_switching_strategy,
    rule_high_risk_history,
    rule_high_risk_score,
    rule_standard_protocol,
]


def classify_protocol(flags: ClinicalFlags, risk_score: int) -> ProtocolRecommendation:
    """Return the recommendation of the first rule that matches."""
    for rule in PROTOCOL_RULES:
        recommendation = rule(flags, risk_score)
        if recommendation is not None:
            logger.debug(f"classify_protocol: {rule.__name__} matched (score={risk_score})")
            return recommendation
    # rule_standard_protocol always matches
    raise AssertionError("no protocol rule matched")


def risk_group_label(flags: ClinicalFlags, risk_score: int) -> RiskGroup:
    """
    High / Standard split, only for planned arthroplasty.

    Without a major joint replacement the score is reported ungrouped.
    """
    if not flags.is_arthroplasty:
        return RiskGroup.UNGROUPED
    if risk_score >= HIGH_RISK_SCORE:
        return RiskGroup.HIGH
    return RiskGroup.STANDARD
