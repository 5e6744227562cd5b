"""
API request/response schemas.

Range checks that belong to the clinical rules (pain 0-10, FJS answers 0-4)
are left to the core so the API and direct callers get the same errors.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from vte_manager.core.clinical import ClinicalFlags, PatientRecord, Sex


class PatientInput(BaseModel):
    """Patient demographics as entered on the form."""
    id: str = ""
    name: str = ""
    age: int = Field(..., ge=0, le=130)
    sex: Sex = Sex.MALE
    height_cm: Optional[float] = Field(default=None, ge=0, le=300, description="Height in cm; blank or 0 disables BMI")
    weight_kg: Optional[float] = Field(default=None, ge=0, le=700, description="Weight in kg; blank or 0 disables BMI")
    op_date: date = Field(default_factory=date.today)

    def to_record(self) -> PatientRecord:
        return PatientRecord(
            patient_id=self.id,
            name=self.name,
            age=self.age,
            sex=self.sex,
            height_cm=self.height_cm,
            weight_kg=self.weight_kg,
            op_date=self.op_date,
        )


class ClinicalInput(BaseModel):
    is_arthroplasty: bool = True
    has_cv_history: bool = False
    is_taking_antiplatelet: bool = False

    def to_flags(self) -> ClinicalFlags:
        return ClinicalFlags(
            is_arthroplasty=self.is_arthroplasty,
            has_cv_history=self.has_cv_history,
            is_taking_antiplatelet=self.is_taking_antiplatelet,
        )


class SelectionInput(BaseModel):
    group: str
    item_id: str


class AssessmentRequest(BaseModel):
    """One complete input snapshot."""
    patient: PatientInput
    clinical: ClinicalInput = Field(default_factory=ClinicalInput)
    selections: List[SelectionInput] = Field(default_factory=list)
    fjs_answers: Optional[List[Optional[int]]] = None
    pain_score: Optional[int] = None
    period: Optional[str] = None

    def selection_pairs(self) -> List[Tuple[str, str]]:
        return [(s.group, s.item_id) for s in self.selections]

    class Config:
        json_schema_extra = {"example": {
            "patient": {"id": "12345678", "name": "Hong Gildong", "age": 65,
                        "sex": "male", "height_cm": 165, "weight_kg": 68,
                        "op_date": "2026-03-02"},
            "clinical": {"is_arthroplasty": True, "has_cv_history": False,
                         "is_taking_antiplatelet": False},
            "selections": [{"group": "group1", "item_id": "varicose"}],
            "fjs_answers": [0, 1, 1, 0, 0, 2, 1, 1, 0, 1, 2, None],
            "pain_score": 3,
            "period": "1y",
        }}


class SheetExportRequest(AssessmentRequest):
    sheet_url: Optional[str] = Field(
        default=None,
        description="Operator-supplied endpoint; ignored when VTE_SHEET_URL is set",
    )


class AssessmentResponse(BaseModel):
    bmi: float
    is_obese: bool
    age_points: int
    risk_score: int
    risk_group: str
    protocol: Dict[str, Any]
    fjs_score: Union[float, str]
    period_id: Optional[str] = None
    benchmark: Optional[Dict[str, Any]] = None
    pain: Optional[Dict[str, Any]] = None
    selections: List[Dict[str, str]] = Field(default_factory=list)


class ExportResponse(BaseModel):
    record: Dict[str, Any]
    field_order: List[str]
    clipboard_text: str
    filename: str


class SheetExportResponse(BaseModel):
    status: str
    message: str
    status_code: Optional[int] = None
    record: Dict[str, Any]


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    uptime_seconds: float
    sheet_configured: bool
