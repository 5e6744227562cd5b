"""
Remote sheet sink.

Submits one ExportRecord as a JSON body to a spreadsheet web-app endpoint
(e.g. a Google Apps Script deployment). Exactly one attempt per call: the
sink never retries, and a transport failure never propagates into the
scoring core. The caller gets a TransmissionResult it can show to the
operator.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from vte_manager.config import SheetSinkConfig
from vte_manager.core.reports import ExportRecord, to_json
from vte_manager.utils import ConfigurationMissingError, mask_identifier

logger = logging.getLogger(__name__)


class TransmissionStatus(str, Enum):
    SENT        = "sent"          # endpoint answered 2xx
    REJECTED    = "rejected"      # endpoint answered with an error status
    UNCONFIRMED = "unconfirmed"   # timeout / network error; delivery unknown


@dataclass(frozen=True)
class TransmissionResult:
    status: TransmissionStatus
    message: str
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == TransmissionStatus.SENT

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "message": self.message,
            "status_code": self.status_code,
        }


class SheetSink:
    """
    Async writer for the remote spreadsheet.

    The endpoint comes in through SheetSinkConfig at construction; a custom
    httpx transport can be injected for tests.
    """

    def __init__(
        self,
        config: SheetSinkConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self._transport = transport

    async def send(self, record: ExportRecord) -> TransmissionResult:
        """
        POST the record once.

        Raises:
            ConfigurationMissingError: no endpoint configured. Raised before
                any network activity.
        """
        if not self.config.is_configured:
            raise ConfigurationMissingError(
                "Sheet endpoint URL is not configured",
                setting="VTE_SHEET_URL",
            )

        url = self.config.endpoint_url.strip()
        logger.info(f"Submitting export record for patient={mask_identifier(record.patient_id)} to sheet")

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                # Apps Script web apps accept text/plain bodies without a CORS preflight
                response = await client.post(
                    url,
                    content=to_json(record).encode("utf-8"),
                    headers={"Content-Type": "text/plain;charset=utf-8"},
                )
        except httpx.TimeoutException as e:
            logger.error(f"Sheet submission timed out after {self.config.timeout_seconds}s: {e}")
            return TransmissionResult(
                status=TransmissionStatus.UNCONFIRMED,
                message="Timed out waiting for the sheet endpoint; the row may or may not have been written.",
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Sheet submission failed: {e}")
            return TransmissionResult(
                status=TransmissionStatus.UNCONFIRMED,
                message=f"Could not reach the sheet endpoint ({type(e).__name__}); check the URL.",
            )

        if response.is_success:
            logger.info(f"Sheet submission accepted (HTTP {response.status_code})")
            return TransmissionResult(
                status=TransmissionStatus.SENT,
                message="Sent to sheet.",
                status_code=response.status_code,
            )

        logger.error(f"Sheet endpoint rejected submission: HTTP {response.status_code}")
        return TransmissionResult(
            status=TransmissionStatus.REJECTED,
            message=f"Sheet endpoint returned HTTP {response.status_code}.",
            status_code=response.status_code,
        )
