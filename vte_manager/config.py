"""
VTE Manager Configuration
=========================
Centralised settings for logging, the API server and the remote sheet sink.
Loads overrides from the project-level .env file.

The core scoring engine never reads these values. The sheet endpoint is
handed to the sink explicitly as a SheetSinkConfig at call time.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# ── Paths ───────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")

# ── Defaults ────────────────────────────────────────────────────────────
DEFAULT_SHEET_TIMEOUT = 10.0     # seconds; a single attempt, never retried
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000


@dataclass(frozen=True)
class SheetSinkConfig:
    """Where and how to submit an export record to the remote sheet."""
    endpoint_url: str = ""
    timeout_seconds: float = DEFAULT_SHEET_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint_url.strip())


@dataclass(frozen=True)
class Settings:
    """Snapshot of the environment at load time."""
    sheet_url: str = ""
    sheet_timeout: float = DEFAULT_SHEET_TIMEOUT
    log_level: str = "INFO"
    log_file: Optional[str] = None
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT

    def sink_config(self, operator_url: Optional[str] = None) -> SheetSinkConfig:
        """
        Resolve the sheet endpoint for one submission.

        The administrator URL from the environment takes precedence; the
        operator-supplied URL (remembered by the front end) is the fallback.
        """
        url = self.sheet_url.strip() or (operator_url or "").strip()
        return SheetSinkConfig(endpoint_url=url, timeout_seconds=self.sheet_timeout)


def load_settings() -> Settings:
    """Read settings from environment variables (after .env has been loaded)."""
    return Settings(
        sheet_url=os.getenv("VTE_SHEET_URL", ""),
        sheet_timeout=float(os.getenv("VTE_SHEET_TIMEOUT", DEFAULT_SHEET_TIMEOUT)),
        log_level=os.getenv("VTE_LOG_LEVEL", "INFO"),
        log_file=os.getenv("VTE_LOG_FILE") or None,
        api_host=os.getenv("VTE_API_HOST", DEFAULT_API_HOST),
        api_port=int(os.getenv("VTE_API_PORT", DEFAULT_API_PORT)),
    )
