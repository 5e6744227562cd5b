"""
Unit Tests for the Clinical Reference Data

Catalog invariants, boundary parsing of selections, and static tables.
"""
import logging

import pytest

from vte_manager.core.clinical import (
    CAPRINI_CATALOG,
    PERIOD_BENCHMARKS,
    RiskFactorCatalog,
    RiskFactorGroup,
    RiskFactorSelection,
)
from vte_manager.core.clinical.reference import (
    FJS_ANSWER_OPTIONS,
    FJS_MAX_RAW,
    FJS_QUESTIONS,
    PAIN_BANDS,
    PAIN_MAX,
    PAIN_MIN,
    CatalogGroup,
    RiskFactorItem,
)


class TestRiskFactorCatalog:
    """Tests for RiskFactorCatalog."""

    def test_group_order_and_points(self):
        assert [cg.points for cg in CAPRINI_CATALOG.groups] == [1, 2, 3, 5]

    def test_item_ids_unique(self):
        ids = [item.item_id for cg in CAPRINI_CATALOG.groups for item in cg.items]
        assert len(ids) == len(set(ids)) == CAPRINI_CATALOG.item_count() == 22

    def test_group_of(self):
        assert CAPRINI_CATALOG.group_of("fracture") == RiskFactorGroup.GROUP_5
        assert CAPRINI_CATALOG.group_of("unknown") is None

    def test_validity_requires_matching_group(self):
        assert CAPRINI_CATALOG.is_valid(RiskFactorSelection(RiskFactorGroup.GROUP_2, "cline"))
        assert not CAPRINI_CATALOG.is_valid(RiskFactorSelection(RiskFactorGroup.GROUP_1, "cline"))
        assert CAPRINI_CATALOG.points_for(RiskFactorSelection(RiskFactorGroup.GROUP_1, "cline")) == 0

    def test_duplicate_item_across_groups_rejected(self):
        with pytest.raises(ValueError):
            RiskFactorCatalog([
                CatalogGroup(RiskFactorGroup.GROUP_1, "one", (RiskFactorItem("a", "A"),)),
                CatalogGroup(RiskFactorGroup.GROUP_2, "two", (RiskFactorItem("a", "A again"),)),
            ])

    def test_duplicate_group_rejected(self):
        with pytest.raises(ValueError):
            RiskFactorCatalog([
                CatalogGroup(RiskFactorGroup.GROUP_1, "one", (RiskFactorItem("a", "A"),)),
                CatalogGroup(RiskFactorGroup.GROUP_1, "one again", (RiskFactorItem("b", "B"),)),
            ])

    def test_to_dict_shape(self):
        data = CAPRINI_CATALOG.to_dict()
        first = data["groups"][0]
        assert first["group"] == "group1"
        assert first["points"] == 1
        assert {"id": "swollen", "label": first["items"][0]["label"]} == first["items"][0]


class TestParseSelections:
    """Boundary conversion of raw (group, item) pairs."""

    def test_valid_pairs(self):
        parsed = CAPRINI_CATALOG.parse_selections([("group3", "hit"), ("group1", "sepsis")])
        assert parsed == frozenset({
            RiskFactorSelection(RiskFactorGroup.GROUP_3, "hit"),
            RiskFactorSelection(RiskFactorGroup.GROUP_1, "sepsis"),
        })

    def test_unknown_pairs_dropped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            parsed = CAPRINI_CATALOG.parse_selections([
                ("group4", "hit"),
                ("group1", "hit"),
                ("group2", "cancer"),
            ])
        assert parsed == frozenset({RiskFactorSelection(RiskFactorGroup.GROUP_2, "cancer")})
        assert "group4" in caplog.text
        assert "'hit'" in caplog.text

    def test_duplicates_collapse(self):
        parsed = CAPRINI_CATALOG.parse_selections([("group5", "stroke")] * 3)
        assert len(parsed) == 1


class TestStaticTables:
    """FJS-12, benchmarks and pain bands."""

    def test_fjs_has_twelve_items(self):
        assert len(FJS_QUESTIONS) == 12
        assert FJS_MAX_RAW == 48
        assert [v for v, _ in FJS_ANSWER_OPTIONS] == [0, 1, 2, 3, 4]

    def test_benchmarks_well_formed(self):
        for period_id, benchmark in PERIOD_BENCHMARKS.items():
            assert benchmark.period_id == period_id
            assert 0 <= benchmark.mean <= 100
            assert benchmark.sd > 0

    def test_thresholds_apply_from_six_months(self):
        applies = {pid: pb.thresholds_apply for pid, pb in PERIOD_BENCHMARKS.items()}
        assert applies == {"preop": False, "6w": False, "3m": False, "6m": True, "1y": True, "2y": True}

    def test_pain_bands_cover_range_without_gaps(self):
        covered = []
        for low, high, _, _ in PAIN_BANDS:
            covered.extend(range(low, high + 1))
        assert covered == list(range(PAIN_MIN, PAIN_MAX + 1))
