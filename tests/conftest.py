"""
Pytest Configuration and Fixtures

Shared fixtures for the VTE assessment tests.
"""
import pytest
from datetime import date, datetime, timezone
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from vte_manager.core.clinical import (
    ClinicalFlags,
    PatientRecord,
    RiskFactorGroup,
    RiskFactorSelection,
    Sex,
)


@pytest.fixture
def sample_patient() -> PatientRecord:
    """65-year-old, 165 cm / 68 kg (BMI exactly 25.0)."""
    return PatientRecord(
        patient_id="12345678",
        name="Hong Gildong",
        age=65,
        sex=Sex.MALE,
        height_cm=165,
        weight_kg=68,
        op_date=date(2026, 3, 2),
    )


@pytest.fixture
def arthroplasty_flags() -> ClinicalFlags:
    return ClinicalFlags(is_arthroplasty=True, has_cv_history=False, is_taking_antiplatelet=False)


@pytest.fixture
def sample_selections():
    """One item from each severity tier: 1 + 2 + 3 + 5 = 11 points."""
    return [
        RiskFactorSelection(RiskFactorGroup.GROUP_1, "varicose"),
        RiskFactorSelection(RiskFactorGroup.GROUP_2, "cancer"),
        RiskFactorSelection(RiskFactorGroup.GROUP_3, "dvt_history"),
        RiskFactorSelection(RiskFactorGroup.GROUP_5, "stroke"),
    ]


@pytest.fixture
def fixed_timestamp() -> datetime:
    return datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def assessment_payload():
    """JSON body accepted by the assessment and export endpoints."""
    return {
        "patient": {
            "id": "12345678",
            "name": "Hong Gildong",
            "age": 80,
            "sex": "male",
            "height_cm": 170,
            "weight_kg": 73,
            "op_date": "2026-03-02",
        },
        "clinical": {
            "is_arthroplasty": True,
            "has_cv_history": False,
            "is_taking_antiplatelet": False,
        },
        "selections": [],
    }
