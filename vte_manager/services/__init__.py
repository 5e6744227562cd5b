"""
External sinks for export records.
"""
from .sheet_sink import SheetSink, TransmissionResult, TransmissionStatus

__all__ = ["SheetSink", "TransmissionResult", "TransmissionStatus"]
