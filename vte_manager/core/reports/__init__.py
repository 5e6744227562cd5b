"""
Export Module

Builds the canonical export record and renders it for CSV, clipboard and JSON sinks.
"""
from .export_record import (
    EXPORT_FIELDS,
    ExportRecord,
    build_export_record,
    export_filename,
    to_clipboard_text,
    to_delimited,
    to_json,
)

__all__ = [
    "EXPORT_FIELDS",
    "ExportRecord",
    "build_export_record",
    "export_filename",
    "to_clipboard_text",
    "to_delimited",
    "to_json",
]
