"""
Clinical Reference Data

Static, immutable rule tables consumed by the metric calculators:

    - Caprini risk-factor checklist (4 severity tiers: 1 / 2 / 3 / 5 points)
    - Age-band bonus thresholds
    - Forgotten Joint Score (FJS-12) items and answer scale
    - FJS population benchmarks per recovery period
    - Numeric pain rating bands

Nothing in this module is mutated at runtime. A custom catalog can be
built by passing different CatalogGroups to RiskFactorCatalog.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from vte_manager.utils import get_logger
from .base import PainCategory, RiskFactorGroup, RiskFactorSelection

logger = get_logger(__name__)


# ── Caprini checklist ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RiskFactorItem:
    item_id: str
    label: str


@dataclass(frozen=True)
class CatalogGroup:
    group: RiskFactorGroup
    title: str
    items: Tuple[RiskFactorItem, ...]

    @property
    def points(self) -> int:
        return self.group.points


class RiskFactorCatalog:
    """
    Ordered mapping from severity tier to checklist items.

    Item ids are unique across the whole catalog, so every item belongs to
    exactly one group. Construction fails if that does not hold.
    """

    def __init__(self, groups: Iterable[CatalogGroup]):
        self._groups: Dict[RiskFactorGroup, CatalogGroup] = {}
        self._item_group: Dict[str, RiskFactorGroup] = {}

        for cg in groups:
            if cg.group in self._groups:
                raise ValueError(f"Duplicate catalog group: {cg.group.value}")
            for item in cg.items:
                if item.item_id in self._item_group:
                    raise ValueError(
                        f"Item id '{item.item_id}' appears in both "
                        f"{self._item_group[item.item_id].value} and {cg.group.value}"
                    )
                self._item_group[item.item_id] = cg.group
            self._groups[cg.group] = cg

    @property
    def groups(self) -> List[CatalogGroup]:
        return list(self._groups.values())

    def group_of(self, item_id: str) -> Optional[RiskFactorGroup]:
        return self._item_group.get(item_id)

    def is_valid(self, selection: RiskFactorSelection) -> bool:
        return self._item_group.get(selection.item_id) == selection.group

    def points_for(self, selection: RiskFactorSelection) -> int:
        """Points contributed by one selection; 0 when it is not in the catalog."""
        if not self.is_valid(selection):
            return 0
        return self._item_group[selection.item_id].points

    def item_count(self) -> int:
        return len(self._item_group)

    def parse_selections(
        self, pairs: Iterable[Tuple[str, str]]
    ) -> FrozenSet[RiskFactorSelection]:
        """
        Turn raw (group key, item id) pairs from a form into selections.

        Pairs naming an unknown group or an item outside that group are
        logged and dropped so that older clients keep working after the
        catalog changes.
        """
        selections = set()
        for group_key, item_id in pairs:
            try:
                group = RiskFactorGroup(group_key)
            except ValueError:
                logger.warning(f"Ignoring selection with unknown group '{group_key}' (item '{item_id}')")
                continue
            selection = RiskFactorSelection(group, item_id)
            if not self.is_valid(selection):
                logger.warning(f"Ignoring unknown checklist item '{item_id}' in {group.value}")
                continue
            selections.add(selection)
        return frozenset(selections)

    def to_dict(self) -> dict:
        return {
            "groups": [
                {
                    "group": cg.group.value,
                    "points": cg.points,
                    "title": cg.title,
                    "items": [{"id": i.item_id, "label": i.label} for i in cg.items],
                }
                for cg in self._groups.values()
            ]
        }


CAPRINI_CATALOG = RiskFactorCatalog([
    CatalogGroup(
        group=RiskFactorGroup.GROUP_1,
        title="1-point factors (minor risk)",
        items=(
            RiskFactorItem("swollen", "Swollen legs (current)"),
            RiskFactorItem("varicose", "Varicose veins"),
            RiskFactorItem("bed_rest_minor", "Bed rest under 3 days (walking limited to 10 m)"),
            RiskFactorItem("pregnancy", "Pregnant or postpartum (within 1 month)"),
            RiskFactorItem("hormone", "Oral contraceptives or hormone therapy"),
            RiskFactorItem("miscarriage", "Unexplained stillbirth or recurrent miscarriage (3 or more)"),
            RiskFactorItem("lung", "Serious lung disease incl. pneumonia (within 1 month)"),
            RiskFactorItem("heart", "Acute myocardial infarction or heart failure (within 1 month)"),
            RiskFactorItem("sepsis", "Sepsis (within 1 month)"),
            RiskFactorItem("minor_surgery", "Other minor surgery planned"),
        ),
    ),
    CatalogGroup(
        group=RiskFactorGroup.GROUP_2,
        title="2-point factors (moderate risk)",
        items=(
            RiskFactorItem("cancer", "Malignancy (present or previous)"),
            RiskFactorItem("bed_rest_major", "Confined to bed (over 72 hours)"),
            RiskFactorItem("cline", "Central venous access"),
            RiskFactorItem("major_surgery", "Open abdominal or urological surgery planned (>45 min)"),
        ),
    ),
    CatalogGroup(
        group=RiskFactorGroup.GROUP_3,
        title="3-point factors (high risk)",
        items=(
            RiskFactorItem("dvt_history", "History of deep vein thrombosis (DVT)"),
            RiskFactorItem("pe_history", "History of pulmonary embolism (PE)"),
            RiskFactorItem("family_history", "Family history of thrombosis"),
            RiskFactorItem("thrombophilia", "Positive thrombophilia (e.g. Factor V Leiden)"),
            RiskFactorItem("hit", "Heparin-induced thrombocytopenia (HIT)"),
        ),
    ),
    CatalogGroup(
        group=RiskFactorGroup.GROUP_5,
        title="5-point factors (highest risk)",
        items=(
            RiskFactorItem("stroke", "Stroke (within 1 month)"),
            RiskFactorItem("fracture", "Hip, pelvis or leg fracture (within 1 month)"),
            RiskFactorItem("spinal_cord", "Acute spinal cord injury (paralysis)"),
        ),
    ),
])


# ── Age bands ─────────────────────────────────────────────────────────────────
# (minimum age, points), checked top-down; first match wins
AGE_BANDS: Tuple[Tuple[int, int], ...] = (
    (75, 3),
    (61, 2),
    (41, 1),
)

BMI_OBESITY_THRESHOLD = 25.0      # strictly greater than qualifies
ARTHROPLASTY_POINTS   = 5
HIGH_RISK_SCORE       = 10        # score >= this is high risk


# ── Forgotten Joint Score (FJS-12) ────────────────────────────────────────────

FJS_QUESTIONS: Tuple[str, ...] = (
    "Are you aware of your artificial joint in bed at night?",
    "...when you are sitting on a chair for more than 1 hour?",
    "...when you are walking for more than 15 minutes?",
    "...when you are taking a bath or shower?",
    "...when you are travelling in a car?",
    "...when you are climbing stairs?",
    "...when you are walking on uneven ground?",
    "...when you are standing up from a low-sitting position?",
    "...when you are standing for long periods of time?",
    "...when you are doing housework or gardening?",
    "...when you are taking a walk or hiking?",
    "...when you are doing your favourite sport?",
)

FJS_ANSWER_OPTIONS: Tuple[Tuple[int, str], ...] = (
    (0, "Never"),
    (1, "Almost never"),
    (2, "Seldom"),
    (3, "Sometimes"),
    (4, "Mostly"),
)

FJS_MIN_ANSWER = 0
FJS_MAX_ANSWER = 4
FJS_MAX_RAW = len(FJS_QUESTIONS) * FJS_MAX_ANSWER   # 48

# Universal benchmarks on the 0-100 FJS scale
PASS_THRESHOLD            = 40.0   # patient acceptable symptom state
FORGOTTEN_JOINT_THRESHOLD = 70.0   # joint effectively "forgotten"


@dataclass(frozen=True)
class PeriodBenchmark:
    """
    Population FJS-12 distribution for one recovery period.

    thresholds_apply marks the periods for which the fixed PASS and
    forgotten-joint thresholds are clinically meaningful; before 6 months
    recovery is still expected to be in progress.
    """
    period_id: str
    label: str
    mean: float
    sd: float
    description: str
    thresholds_apply: bool

    def to_dict(self) -> dict:
        return {
            "period_id": self.period_id,
            "label": self.label,
            "mean": self.mean,
            "sd": self.sd,
            "description": self.description,
            "thresholds_apply": self.thresholds_apply,
        }


PERIOD_BENCHMARKS: Dict[str, PeriodBenchmark] = {
    pb.period_id: pb
    for pb in (
        PeriodBenchmark("preop", "Pre-operative", 20.0, 18.0,
                        "Baseline before surgery; native joint awareness is usually high.", False),
        PeriodBenchmark("6w", "6 weeks", 28.0, 20.0,
                        "Early recovery; swelling and stiffness dominate awareness.", False),
        PeriodBenchmark("3m", "3 months", 38.0, 24.0,
                        "Rehabilitation phase; daily activities largely resumed.", False),
        PeriodBenchmark("6m", "6 months", 47.0, 26.0,
                        "Most functional gain achieved; benchmarks start to apply.", True),
        PeriodBenchmark("1y", "1 year", 56.0, 27.0,
                        "Standard reporting time point for arthroplasty outcomes.", True),
        PeriodBenchmark("2y", "2 years", 60.0, 28.0,
                        "Long-term follow-up; scores are generally stable.", True),
    )
}


# ── Numeric pain rating scale ─────────────────────────────────────────────────
# (low, high, category, guidance); inclusive bounds covering 0-10 without gaps
PAIN_MIN = 0
PAIN_MAX = 10

PAIN_BANDS: Tuple[Tuple[int, int, PainCategory, str], ...] = (
    (0, 3, PainCategory.MILD,
     "Mild pain: continue the current analgesic plan and encourage mobilisation."),
    (4, 6, PainCategory.MODERATE,
     "Moderate pain: review multimodal analgesia and reassess within 1 hour."),
    (7, 10, PainCategory.SEVERE,
     "Severe pain: escalate analgesia and inform the responsible surgeon for review."),
)
