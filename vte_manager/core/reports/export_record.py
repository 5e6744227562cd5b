"""
Export Record Builder

Assembles patient data and computed scores into one immutable, field-ordered
snapshot, and renders it for the external sinks:

    - delimited text (CSV download / tab-separated clipboard text)
    - JSON body for the remote sheet endpoint

Field order is fixed because spreadsheet rows are positional. Every field is
always present: blank identifiers stay "", an unanswered FJS-12 becomes the
literal "Incomplete".
"""
from __future__ import annotations

import csv
import io
import json
import re
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from vte_manager.core.clinical.base import (
    ClinicalFlags,
    OutcomeScore,
    PatientRecord,
    outcome_to_json,
)
from vte_manager.core.clinical.metrics import classify_pain
from vte_manager.core.clinical.protocol import classify_protocol, risk_group_label
from vte_manager.utils import get_logger, mask_identifier

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExportRecord:
    """One row of the assessment spreadsheet. Never mutated after creation."""
    timestamp: str
    patient_id: str
    name: str
    age: int
    op_date: str
    period: str
    caprini_score: int
    risk_group: str
    protocol: str
    fjs_score: Union[float, str]
    pain_score: Union[int, str]
    pain_category: str

    def to_dict(self) -> Dict[str, Any]:
        """Field name -> value, in export order."""
        return {name: getattr(self, name) for name in EXPORT_FIELDS}

    def values(self) -> List[Any]:
        return [getattr(self, name) for name in EXPORT_FIELDS]


EXPORT_FIELDS = tuple(f.name for f in fields(ExportRecord))


def build_export_record(
    patient: PatientRecord,
    flags: ClinicalFlags,
    risk_score: int,
    outcome_score: OutcomeScore,
    pain_score: Optional[int],
    period_label: str = "",
    timestamp: Optional[datetime] = None,
) -> ExportRecord:
    """
    Snapshot constructor for the export row.

    The pain score is validated before anything is assembled, so either a
    complete record comes back or InvalidInputError is raised.
    """
    pain = classify_pain(pain_score) if pain_score is not None else None
    protocol = classify_protocol(flags, risk_score)
    group = risk_group_label(flags, risk_score)

    ts = timestamp or datetime.now(timezone.utc)

    record = ExportRecord(
        timestamp=ts.isoformat(),
        patient_id=patient.patient_id or "",
        name=patient.name or "",
        age=patient.age,
        op_date=patient.op_date.isoformat() if patient.op_date else "",
        period=period_label or "",
        caprini_score=risk_score,
        risk_group=group.value,
        protocol=protocol.category.value,
        fjs_score=outcome_to_json(outcome_score),
        pain_score=pain.score if pain else "",
        pain_category=pain.category.value if pain else "",
    )
    logger.info(
        f"Export record built: patient={mask_identifier(record.patient_id)} "
        f"caprini={record.caprini_score} protocol={record.protocol} fjs={record.fjs_score}"
    )
    return record


# ── Renderers ─────────────────────────────────────────────────────────────────

def to_delimited(record: ExportRecord, delimiter: str = ",") -> str:
    """Header row + value row. Fields containing the delimiter are quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator="\n")
    writer.writerow(EXPORT_FIELDS)
    writer.writerow(record.values())
    return buffer.getvalue()


def to_clipboard_text(record: ExportRecord) -> str:
    """Tab-separated, so a paste lands in spreadsheet cells."""
    return to_delimited(record, delimiter="\t")


def to_json(record: ExportRecord) -> str:
    return json.dumps(record.to_dict(), ensure_ascii=False)


def export_filename(record: ExportRecord) -> str:
    """Download name, e.g. Caprini_Hong Gildong.csv."""
    safe_name = re.sub(r'[\\/:*?"<>|\r\n]+', "_", record.name).strip() or "patient"
    return f"Caprini_{safe_name}.csv"
