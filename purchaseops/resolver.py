from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from purchaseops.ga4 import ReportQuery, ReportRow, run_report
from purchaseops.util import to_float

logger = logging.getLogger(__name__)

NOT_SET = "(not set)"
NONE = "(none)"

PRIMARY_QUERY = ReportQuery(
    dimensions=(
        "date",
        "transactionId",
        "firstUserSource",
        "firstUserMedium",
        "firstUserCampaignName",
        "sessionSource",
        "sessionMedium",
        "sessionCampaignName",
        "itemName",
    ),
    metrics=("itemRevenue",),
    required_dimension="transactionId",
    order_by_dimension="date",
    order_desc=True,
)

# Landing page does not fit in the primary query (9-dimension cap).
LANDING_PAGE_QUERY = ReportQuery(
    dimensions=("transactionId", "landingPagePlusQueryString"),
    metrics=("itemRevenue",),
    required_dimension="transactionId",
)

_WIRE_KEYS = {
    "date": "date",
    "transaction_id": "transactionId",
    "first_source": "firstSource",
    "first_medium": "firstMedium",
    "first_campaign": "firstCampaign",
    "source": "source",
    "medium": "medium",
    "campaign": "campaign",
    "landing_page": "landingPage",
    "item_name": "itemName",
    "revenue": "revenue",
}


@dataclass(frozen=True)
class PurchaseRow:
    date: str
    transaction_id: str
    first_source: str
    first_medium: str
    first_campaign: str
    source: str
    medium: str
    campaign: str
    landing_page: str
    item_name: str
    revenue: float

    def to_dict(self) -> dict[str, Any]:
        return {_WIRE_KEYS[k]: v for k, v in asdict(self).items()}


def is_unset(value: str | None) -> bool:
    return not value or value in (NOT_SET, NONE)


def pick_attribution(session_value: str, first_touch_value: str) -> str:
    return first_touch_value if is_unset(session_value) else session_value


def normalize_date(raw: str) -> str:
    if len(raw) == 8:
        return f"{raw[0:4]}-{raw[4:6]}-{raw[6:8]}"
    return raw


def parse_revenue(raw: Any) -> float:
    # Negative item revenue (refund adjustments) is kept as reported.
    return to_float(raw)


def build_landing_page_map(rows: Iterable[ReportRow]) -> dict[str, str]:
    """Map transaction id -> landing page.

    A sentinel only fills an empty slot; any informative value overwrites,
    so the last informative value in result order wins.
    """
    lookup: dict[str, str] = {}
    for row in rows:
        tx_id, landing_page = row.dimensions[0], row.dimensions[1]
        if not lookup.get(tx_id) or landing_page != NOT_SET:
            lookup[tx_id] = landing_page
    return lookup


def resolve_row(row: ReportRow, landing_pages: dict[str, str]) -> PurchaseRow:
    (
        raw_date,
        tx_id,
        first_source,
        first_medium,
        first_campaign,
        sess_source,
        sess_medium,
        sess_campaign,
        item_name,
    ) = row.dimensions[:9]
    return PurchaseRow(
        date=normalize_date(raw_date),
        transaction_id=tx_id,
        first_source=first_source,
        first_medium=first_medium,
        first_campaign=first_campaign,
        source=pick_attribution(sess_source, first_source),
        medium=pick_attribution(sess_medium, first_medium),
        campaign=pick_attribution(sess_campaign, first_campaign),
        landing_page=landing_pages.get(tx_id) or NOT_SET,
        item_name=item_name,
        revenue=parse_revenue(row.metrics[0] if row.metrics else None),
    )


def resolve_rows(primary: Iterable[ReportRow], landing_pages: dict[str, str]) -> list[PurchaseRow]:
    return [resolve_row(r, landing_pages) for r in primary]


def fetch_purchase_rows(client: Any, property_path: str, start_date: str, end_date: str) -> list[PurchaseRow]:
    """Run both queries and join them. Either query failing aborts the whole fetch."""
    primary = run_report(client, property_path, start_date, end_date, PRIMARY_QUERY)
    secondary = run_report(client, property_path, start_date, end_date, LANDING_PAGE_QUERY)
    landing_pages = build_landing_page_map(secondary.rows)
    rows = resolve_rows(primary.rows, landing_pages)
    logger.info(
        "Resolved %d purchase rows (%d landing pages) for %s..%s",
        len(rows),
        len(landing_pages),
        start_date,
        end_date,
    )
    return rows
