"""HTTP client for the ``/api/report`` endpoint."""
from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from purchaseops.config import api_base_url

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"


class ReportFetchError(Exception):
    """A report fetch failed; the message is what the dashboard shows."""


class TotalsPayload(BaseModel):
    totalRevenue: float = 0.0
    totalTransactions: int = 0
    totalItems: int = 0


class ReportPayload(BaseModel):
    rows: list[dict[str, Any]] = Field(default_factory=list)
    totals: TotalsPayload = Field(default_factory=TotalsPayload)
    rowCount: int = 0


def error_message(body: Any) -> str:
    if isinstance(body, dict):
        for key in ("details", "error"):
            value = body.get(key)
            if value:
                return str(value)
    return UNKNOWN_ERROR


class ReportClient:
    def __init__(self, base_url: str | None = None, *, http: httpx.Client | None = None, timeout: float = 120.0):
        self.base_url = (base_url or api_base_url()).rstrip("/")
        self._http = http or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> ReportClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def fetch(self, start_date: str, end_date: str) -> ReportPayload:
        url = f"{self.base_url}/api/report"
        try:
            resp = self._http.get(url, params={"startDate": start_date, "endDate": end_date})
        except httpx.HTTPError as exc:
            logger.error("Report request to %s failed: %s", url, exc)
            raise ReportFetchError(str(exc) or UNKNOWN_ERROR) from exc

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.status_code >= 400:
            msg = error_message(body)
            logger.warning("Report request returned %s: %s", resp.status_code, msg)
            raise ReportFetchError(msg)

        try:
            return ReportPayload.model_validate(body)
        except ValidationError as exc:
            raise ReportFetchError(f"Malformed report response: {exc.error_count()} errors") from exc
