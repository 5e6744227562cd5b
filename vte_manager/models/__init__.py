from .assessment import (
    PatientInput,
    ClinicalInput,
    SelectionInput,
    AssessmentRequest,
    SheetExportRequest,
    AssessmentResponse,
    ExportResponse,
    SheetExportResponse,
    HealthResponse,
)

__all__ = [
    "PatientInput",
    "ClinicalInput",
    "SelectionInput",
    "AssessmentRequest",
    "SheetExportRequest",
    "AssessmentResponse",
    "ExportResponse",
    "SheetExportResponse",
    "HealthResponse",
]
