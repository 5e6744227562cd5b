"""
VTE Manager - FastAPI Application

Point-of-care API for the assessment front end:
- Reference data for rendering the forms (Caprini checklist, FJS-12, benchmarks)
- Assessment: Caprini score, risk group, prophylaxis protocol, FJS-12, pain band
- Export: canonical record as JSON, clipboard text, CSV download, remote sheet
"""
from datetime import datetime
from typing import FrozenSet, Optional
from urllib.parse import quote

import httpx
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vte_manager import __version__
from vte_manager.config import Settings, load_settings
from vte_manager.core.clinical import (
    CAPRINI_CATALOG,
    AssessmentEngine,
    AssessmentResult,
    RiskFactorSelection,
)
from vte_manager.core.clinical.reference import (
    FJS_ANSWER_OPTIONS,
    FJS_QUESTIONS,
    FORGOTTEN_JOINT_THRESHOLD,
    PAIN_BANDS,
    PASS_THRESHOLD,
    PERIOD_BENCHMARKS,
)
from vte_manager.core.reports import (
    EXPORT_FIELDS,
    ExportRecord,
    export_filename,
    to_clipboard_text,
    to_delimited,
)
from vte_manager.models import (
    AssessmentRequest,
    AssessmentResponse,
    ExportResponse,
    HealthResponse,
    SheetExportRequest,
    SheetExportResponse,
)
from vte_manager.services import SheetSink
from vte_manager.utils import (
    ConfigurationMissingError,
    InvalidInputError,
    VTEManagerError,
    get_logger,
    setup_logging,
)

_settings = load_settings()
setup_logging(_settings.log_level, _settings.log_file)
logger = get_logger(__name__)


# ---- FastAPI Application ----

app = FastAPI(
    title="VTE Manager API",
    description="Caprini VTE risk assessment, prophylaxis protocol and FJS-12 outcome tracking",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

START_TIME = datetime.now()
_engine = AssessmentEngine(catalog=CAPRINI_CATALOG)

_ERROR_STATUS = {
    InvalidInputError: 422,
    ConfigurationMissingError: 400,
}


# ---- Dependencies ----

def get_settings() -> Settings:
    return _settings


def get_sheet_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Default network transport; overridden in tests."""
    return None


@app.exception_handler(VTEManagerError)
async def vte_error_handler(request: Request, exc: VTEManagerError):
    status_code = _ERROR_STATUS.get(type(exc), 500)
    logger.warning(f"{request.url.path}: {exc.code} - {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# ---- Utility Functions ----

def _run_assessment(request: AssessmentRequest, selections: FrozenSet[RiskFactorSelection]) -> AssessmentResult:
    return _engine.assess(
        patient=request.patient.to_record(),
        flags=request.clinical.to_flags(),
        selections=selections,
        fjs_answers=request.fjs_answers,
        pain_score=request.pain_score,
        period_id=request.period,
    )


def _build_record(request: AssessmentRequest) -> ExportRecord:
    selections = CAPRINI_CATALOG.parse_selections(request.selection_pairs())
    result = _run_assessment(request, selections)
    return _engine.export(
        patient=request.patient.to_record(),
        flags=request.clinical.to_flags(),
        result=result,
    )


# ---- API Endpoints ----

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root(settings: Settings = Depends(get_settings)):
    """API root - health check."""
    return await health_check(settings)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
        sheet_configured=bool(settings.sheet_url.strip()),
    )


@app.get("/api/v1/reference/catalog", tags=["Reference"])
async def get_catalog():
    """Caprini checklist grouped by severity tier."""
    return CAPRINI_CATALOG.to_dict()


@app.get("/api/v1/reference/questionnaire", tags=["Reference"])
async def get_questionnaire():
    """FJS-12 prompts and answer scale."""
    return {
        "questions": [
            {"position": i, "prompt": prompt}
            for i, prompt in enumerate(FJS_QUESTIONS, start=1)
        ],
        "answer_options": [{"value": v, "label": label} for v, label in FJS_ANSWER_OPTIONS],
    }


@app.get("/api/v1/reference/benchmarks", tags=["Reference"])
async def get_benchmarks():
    """FJS-12 population benchmarks per recovery period."""
    return {
        "periods": [pb.to_dict() for pb in PERIOD_BENCHMARKS.values()],
        "pass_threshold": PASS_THRESHOLD,
        "forgotten_joint_threshold": FORGOTTEN_JOINT_THRESHOLD,
    }


@app.get("/api/v1/reference/pain-scale", tags=["Reference"])
async def get_pain_scale():
    return {
        "bands": [
            {"min": low, "max": high, "category": category.value, "guidance": guidance}
            for low, high, category, guidance in PAIN_BANDS
        ]
    }


@app.post("/api/v1/assessment", response_model=AssessmentResponse, tags=["Assessment"])
async def run_assessment(request: AssessmentRequest):
    """
    Recompute every derived value from one input snapshot.
    """
    selections = CAPRINI_CATALOG.parse_selections(request.selection_pairs())
    result = _run_assessment(request, selections)
    return AssessmentResponse(
        **result.to_dict(),
        selections=[s.to_dict() for s in sorted(selections, key=lambda s: (s.group.value, s.item_id))],
    )


@app.post("/api/v1/export", response_model=ExportResponse, tags=["Export"])
async def export_record(request: AssessmentRequest):
    """Canonical export record plus tab-separated clipboard text."""
    record = _build_record(request)
    return ExportResponse(
        record=record.to_dict(),
        field_order=list(EXPORT_FIELDS),
        clipboard_text=to_clipboard_text(record),
        filename=export_filename(record),
    )


@app.post("/api/v1/export/csv", tags=["Export"])
async def export_csv(request: AssessmentRequest):
    """Downloadable CSV: header row + one value row, UTF-8."""
    record = _build_record(request)
    filename = export_filename(record)
    return Response(
        content=to_delimited(record, delimiter=",").encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@app.post("/api/v1/export/sheet", response_model=SheetExportResponse, tags=["Export"])
async def export_to_sheet(
    request: SheetExportRequest,
    settings: Settings = Depends(get_settings),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_sheet_transport),
):
    """
    Submit the export record to the remote sheet.

    Missing configuration is rejected (400) before any network attempt.
    Transport failures are reported in the response body, never retried.
    """
    sink_config = settings.sink_config(request.sheet_url)
    if not sink_config.is_configured:
        raise ConfigurationMissingError(
            "Set VTE_SHEET_URL or supply sheet_url before sending", setting="VTE_SHEET_URL"
        )

    record = _build_record(request)
    result = await SheetSink(sink_config, transport=transport).send(record)
    return SheetExportResponse(**result.to_dict(), record=record.to_dict())


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=_settings.api_host, port=_settings.api_port)
