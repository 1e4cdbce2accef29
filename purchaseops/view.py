"""Dashboard view state and its transitions.

One ``ClientViewState`` holds everything the dashboard shows. Only
``load_report`` talks to the network; search, sort and paging work over the
rows already fetched.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from purchaseops.aggregate import ReportTotals
from purchaseops.charts import ChartSet, build_charts
from purchaseops.client import ReportFetchError, ReportPayload
from purchaseops.util import stringify, to_float

logger = logging.getLogger(__name__)

PAGE_SIZE = 50
NUMERIC_COLUMNS = frozenset({"revenue", "quantity"})
MISSING_DATES_MESSAGE = "יש לבחור תאריך התחלה ותאריך סיום"

SortDirection = Literal["asc", "desc"]
Row = Mapping[str, Any]
Fetcher = Callable[[str, str], ReportPayload]


class ViewStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    POPULATED = "populated"


@dataclass
class ClientViewState:
    all_rows: tuple[Row, ...] = ()
    filtered_rows: list[Row] = field(default_factory=list)
    sort_column: str = "date"
    sort_direction: SortDirection = "desc"
    current_page: int = 1
    page_size: int = PAGE_SIZE
    query: str = ""
    status: ViewStatus = ViewStatus.IDLE
    error_message: str | None = None
    totals: ReportTotals | None = None
    charts: ChartSet | None = None
    start_date: str = ""
    end_date: str = ""
    controls_enabled: bool = True

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.filtered_rows), self.page_size)


# ── pure helpers ──────────────────────────────────────────────────────────────

def filter_rows(rows: tuple[Row, ...] | list[Row], query: str) -> list[Row]:
    q = (query or "").strip().lower()
    if not q:
        return list(rows)
    return [r for r in rows if any(q in stringify(v).lower() for v in r.values())]


def _sort_key(column: str) -> Callable[[Row], Any]:
    if column in NUMERIC_COLUMNS:
        return lambda r: to_float(r.get(column))
    return lambda r: stringify(r.get(column)).lower()


def sort_rows(rows: list[Row], column: str, direction: SortDirection) -> list[Row]:
    # desc is the exact reverse of the stable asc order, ties included.
    ordered = sorted(rows, key=_sort_key(column))
    if direction == "desc":
        ordered.reverse()
    return ordered


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, count: int, page_size: int = PAGE_SIZE) -> int:
    return min(max(1, int(page)), total_pages(count, page_size))


def page_slice(rows: list[Row], page: int, page_size: int = PAGE_SIZE) -> list[Row]:
    page = clamp_page(page, len(rows), page_size)
    start = (page - 1) * page_size
    return rows[start : start + page_size]


# ── transitions ──────────────────────────────────────────────────────────────

def _refresh_view(state: ClientViewState) -> None:
    state.filtered_rows = sort_rows(filter_rows(state.all_rows, state.query), state.sort_column, state.sort_direction)
    state.current_page = 1


def begin_loading(state: ClientViewState, start_date: str, end_date: str) -> None:
    state.start_date = start_date
    state.end_date = end_date
    state.status = ViewStatus.LOADING
    state.error_message = None
    state.controls_enabled = False
    state.all_rows = ()
    state.filtered_rows = []
    state.totals = None
    state.charts = None
    state.current_page = 1


def fail(state: ClientViewState, message: str) -> None:
    state.status = ViewStatus.ERROR
    state.error_message = message


def populate(state: ClientViewState, payload: ReportPayload) -> None:
    state.all_rows = tuple(payload.rows)
    state.totals = ReportTotals.from_dict(payload.totals.model_dump())
    # A fresh fetch starts unfiltered.
    state.query = ""
    # Charts from a previous fetch are dropped, not updated.
    state.charts = None
    if not state.all_rows:
        state.filtered_rows = []
        state.current_page = 1
        state.status = ViewStatus.EMPTY
        return
    state.filtered_rows = sort_rows(list(state.all_rows), state.sort_column, state.sort_direction)
    state.current_page = 1
    state.charts = build_charts(state.all_rows)
    state.status = ViewStatus.POPULATED


def load_report(state: ClientViewState, fetcher: Fetcher, start_date: str, end_date: str) -> ClientViewState:
    if not start_date or not end_date:
        fail(state, MISSING_DATES_MESSAGE)
        return state

    begin_loading(state, start_date, end_date)
    try:
        payload = fetcher(start_date, end_date)
        populate(state, payload)
    except ReportFetchError as exc:
        fail(state, str(exc))
    finally:
        state.controls_enabled = True
    logger.info("View %s with %d rows", state.status.value, len(state.all_rows))
    return state


def apply_search(state: ClientViewState, text: str) -> None:
    state.query = text or ""
    _refresh_view(state)


def toggle_sort(state: ClientViewState, column: str) -> None:
    if state.sort_column == column:
        # filtered_rows is already ordered by this column.
        state.sort_direction = "asc" if state.sort_direction == "desc" else "desc"
        state.filtered_rows = list(reversed(state.filtered_rows))
    else:
        state.sort_column = column
        state.sort_direction = "asc"
        state.filtered_rows = sort_rows(state.filtered_rows, column, "asc")
    state.current_page = 1


def go_to_page(state: ClientViewState, page: int) -> None:
    state.current_page = clamp_page(page, len(state.filtered_rows), state.page_size)


def next_page(state: ClientViewState) -> None:
    go_to_page(state, state.current_page + 1)


def previous_page(state: ClientViewState) -> None:
    go_to_page(state, state.current_page - 1)


def page_rows(state: ClientViewState) -> list[Row]:
    return page_slice(state.filtered_rows, state.current_page, state.page_size)
