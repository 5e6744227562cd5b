"""
Clinical Decision Layer: Base Types

Value objects shared by the reference data, the metric calculators, the
protocol classifier and the export builder. All of them are immutable
snapshots owned by the caller; nothing here holds state between calls.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple, Union


class Sex(str, Enum):
    """Biological sex. Informational only, never used in scoring."""
    MALE   = "male"
    FEMALE = "female"


class RiskFactorGroup(str, Enum):
    """Caprini checklist severity tier. The value is the stable group key."""
    GROUP_1 = "group1"
    GROUP_2 = "group2"
    GROUP_3 = "group3"
    GROUP_5 = "group5"

    @property
    def points(self) -> int:
        return _GROUP_POINTS[self]


_GROUP_POINTS = {
    RiskFactorGroup.GROUP_1: 1,
    RiskFactorGroup.GROUP_2: 2,
    RiskFactorGroup.GROUP_3: 3,
    RiskFactorGroup.GROUP_5: 5,
}


class RiskGroup(str, Enum):
    """
    Two-way risk split shown next to the numeric score.

    UNGROUPED is reported when no arthroplasty is planned: the score is
    shown without a group because the cut-off is only validated for the
    major joint replacement population.
    """
    HIGH      = "High Risk Group"
    STANDARD  = "Standard Risk Group"
    UNGROUPED = "Score Calculated"


class ProtocolCategory(str, Enum):
    """Recommended prophylaxis pathway, in decision-table priority order."""
    SWITCHING_STRATEGY = "switching_strategy"
    HIGH_RISK_HISTORY  = "high_risk_history"
    HIGH_RISK_SCORE    = "high_risk_score"
    STANDARD_PROTOCOL  = "standard_protocol"


class AlertLevel(str, Enum):
    """How prominently the recommendation is presented."""
    WARNING = "warning"
    DANGER  = "danger"
    SUCCESS = "success"


class PainCategory(str, Enum):
    MILD     = "Mild"
    MODERATE = "Moderate"
    SEVERE   = "Severe"


class OutcomeStatus(str, Enum):
    """Explicit marker for a questionnaire with unanswered items."""
    INCOMPLETE = "Incomplete"


INCOMPLETE = OutcomeStatus.INCOMPLETE

# A completed FJS-12 score, or the INCOMPLETE marker
OutcomeScore = Union[float, OutcomeStatus]


@dataclass(frozen=True)
class PatientRecord:
    patient_id: str = ""
    name: str = ""
    age: int = 0
    sex: Sex = Sex.MALE
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    op_date: date = field(default_factory=date.today)


@dataclass(frozen=True)
class ClinicalFlags:
    """
    Procedure and cardiovascular history flags.

    is_taking_antiplatelet is only meaningful when has_cv_history is set;
    the classifier never looks at it otherwise.
    """
    is_arthroplasty: bool = True
    has_cv_history: bool = False
    is_taking_antiplatelet: bool = False


@dataclass(frozen=True)
class RiskFactorSelection:
    """One checked checklist item, addressed by (group, item id)."""
    group: RiskFactorGroup
    item_id: str

    def to_dict(self) -> dict:
        return {"group": self.group.value, "item_id": self.item_id}


@dataclass(frozen=True)
class PainClassification:
    score: int
    category: PainCategory
    guidance: str

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "category": self.category.value,
            "guidance": self.guidance,
        }


@dataclass(frozen=True)
class ProtocolRecommendation:
    """
    The pathway selected by the protocol decision table.

    `actions` is the guidance text shown verbatim to the clinician, one
    bullet per entry.
    """
    category: ProtocolCategory
    title: str
    summary: str
    actions: Tuple[str, ...]
    alert: AlertLevel

    @property
    def guidance_text(self) -> str:
        return "; ".join(self.actions)

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "title": self.title,
            "summary": self.summary,
            "actions": list(self.actions),
            "guidance_text": self.guidance_text,
            "alert": self.alert.value,
        }


def outcome_to_json(score: OutcomeScore) -> Union[float, str]:
    """Serialise an outcome score, keeping the 'Incomplete' literal."""
    if isinstance(score, OutcomeStatus):
        return score.value
    return score
