from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any


class MissingConfigError(EnvironmentError):
    """Raised when the analytics property or its credentials are not configured."""


def repo_root() -> Path:
    return Path(__file__).resolve().parent.parent


def ga4_property_id() -> str:
    return os.environ.get("GA4_PROPERTY_ID", "").strip()


def ga4_property_path(property_id: str | None = None) -> str:
    # Accept both "123456" and "properties/123456".
    pid = (property_id if property_id is not None else ga4_property_id()).strip()
    if not pid:
        raise MissingConfigError("GA4_PROPERTY_ID is not configured in .env")
    if pid.startswith("properties/"):
        return pid
    return f"properties/{pid}"


def credentials_file() -> Path:
    raw = os.environ.get("GA4_CREDENTIALS_FILE", "").strip()
    if raw:
        return Path(raw)
    return repo_root() / "credentials.json"


def inline_credentials() -> dict[str, Any] | None:
    """Service-account info from GOOGLE_CREDENTIALS (cloud deployments), if set."""
    raw = os.environ.get("GOOGLE_CREDENTIALS", "").strip()
    if not raw:
        return None
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MissingConfigError("GOOGLE_CREDENTIALS is not valid JSON") from exc
    if not isinstance(info, dict):
        raise MissingConfigError("GOOGLE_CREDENTIALS must be a JSON object")
    return info


def api_base_url() -> str:
    return os.environ.get("PURCHASEOPS_API_URL", "http://localhost:3000").rstrip("/")


def server_port() -> int:
    try:
        return int(os.environ.get("PORT", "3000"))
    except ValueError:
        return 3000


def configure_logging(level: str | None = None) -> None:
    lvl = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, lvl, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
