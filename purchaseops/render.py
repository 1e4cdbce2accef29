"""HTML rendering for the dashboard regions.

Every function takes the slice of ``ClientViewState`` it needs and returns
the markup for the region it owns.
"""
from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from html import escape
from typing import Any

from purchaseops.aggregate import ReportTotals, average_transaction_value, source_medium_summary
from purchaseops.charts import ChartSet
from purchaseops.columns import COLUMNS, SOURCE_COLUMNS, Column
from purchaseops.palette import badge_class
from purchaseops.resolver import is_unset
from purchaseops.util import format_count, format_currency, stringify, to_float
from purchaseops.view import ClientViewState, ViewStatus, page_rows

EMPTY_MARK = "-"
CHART_JS_URL = "https://cdn.jsdelivr.net/npm/chart.js"


def escape_html(value: Any) -> str:
    return escape(stringify(value), quote=True)


def _cell(column: Column, value: Any) -> str:
    key = column.key
    if key == "revenue":
        return f'<td class="revenue">{escape_html(format_currency(to_float(value)))}</td>'
    if column.attribution and is_unset(value):
        return f'<td class="empty-utm">{EMPTY_MARK}</td>'
    if key in SOURCE_COLUMNS:
        return f'<td><span class="badge {badge_class(value)}">{escape_html(value)}</span></td>'
    return f"<td>{escape_html(value)}</td>"


def render_row(row: Mapping[str, Any]) -> str:
    return "<tr>" + "".join(_cell(c, row.get(c.key)) for c in COLUMNS) + "</tr>"


def render_table_head(sort_column: str, sort_direction: str) -> str:
    cells = []
    for c in COLUMNS:
        cls = "sortable"
        if c.key == sort_column:
            cls += f" {sort_direction}"
        cells.append(f'<th class="{cls}" data-col="{c.key}">{escape_html(c.label)}</th>')
    return "<thead><tr>" + "".join(cells) + "</tr></thead>"


def render_pagination(current: int, total: int) -> str:
    if total <= 1:
        return ""
    prev_disabled = " disabled" if current <= 1 else ""
    next_disabled = " disabled" if current >= total else ""
    buttons = [f'<button class="page-btn" data-page="{current - 1}"{prev_disabled}>&lsaquo;</button>']
    for n in range(1, total + 1):
        active = " active" if n == current else ""
        buttons.append(f'<button class="page-btn{active}" data-page="{n}">{n}</button>')
    buttons.append(f'<button class="page-btn" data-page="{current + 1}"{next_disabled}>&rsaquo;</button>')
    return '<div class="pagination">' + "".join(buttons) + "</div>"


def render_table(state: ClientViewState) -> str:
    body = "".join(render_row(r) for r in page_rows(state))
    return (
        '<table class="data-table">'
        + render_table_head(state.sort_column, state.sort_direction)
        + f'<tbody id="tableBody">{body}</tbody>'
        + "</table>"
        + render_pagination(state.current_page, state.total_pages)
    )


def render_summary_cards(totals: ReportTotals) -> str:
    cards = [
        ("totalRevenue", "סה״כ הכנסות", format_currency(totals.total_revenue)),
        ("totalTransactions", "עסקאות", format_count(totals.total_transactions)),
        ("totalItems", "פריטים", format_count(totals.total_items)),
        ("avgTransaction", "ממוצע לעסקה", format_currency(average_transaction_value(totals))),
    ]
    return (
        '<div class="summary-cards" id="summaryCards">'
        + "".join(
            f'<div class="card"><div class="card-label">{escape_html(label)}</div>'
            f'<div class="card-value" id="{key}">{escape_html(value)}</div></div>'
            for key, label, value in cards
        )
        + "</div>"
    )


def render_source_summary(rows: Iterable[Mapping[str, Any]]) -> str:
    items = []
    for g in source_medium_summary(rows):
        width = max(g.share, 1.0)
        source = EMPTY_MARK if is_unset(g.source) else escape_html(g.source)
        medium = EMPTY_MARK if is_unset(g.medium) else escape_html(g.medium)
        items.append(
            '<div class="source-row">'
            f'<span class="source-name"><span class="badge {badge_class(g.source)}">{source}</span> / {medium}</span>'
            f'<span class="source-revenue">{escape_html(format_currency(g.revenue))}</span>'
            f'<span class="source-tx">{g.transactions}</span>'
            f'<div class="bar"><div class="bar-fill" style="width: {width:.2f}%"></div></div>'
            f'<span class="source-share">{g.share:.1f}%</span>'
            "</div>"
        )
    return '<div class="source-summary" id="sourceSummary">' + "".join(items) + "</div>"


def render_charts(charts: ChartSet) -> str:
    # "</" is escaped so the JSON cannot close the script element.
    payload = json.dumps({"sources": charts.sources, "timeline": charts.timeline}, ensure_ascii=False).replace("</", "<\\/")
    return (
        '<div class="charts">'
        '<canvas id="sourceChart"></canvas>'
        '<canvas id="timelineChart"></canvas>'
        "</div>"
        f'<script src="{CHART_JS_URL}"></script>'
        "<script>"
        f"const charts = {payload};"
        "new Chart(document.getElementById('sourceChart'), charts.sources);"
        "new Chart(document.getElementById('timelineChart'), charts.timeline);"
        "</script>"
    )


def render_status(state: ClientViewState) -> str:
    if state.status is ViewStatus.LOADING:
        return '<div class="loading" id="loading">טוען נתונים...</div>'
    if state.status is ViewStatus.ERROR:
        return f'<div class="error-msg" id="errorMsg">{escape_html(state.error_message or "")}</div>'
    if state.status is ViewStatus.EMPTY:
        return '<div class="empty-state" id="emptyState">לא נמצאו רכישות בטווח התאריכים</div>'
    return ""


def render_page(state: ClientViewState, title: str = "דוח רכישות לפי מקור") -> str:
    parts = [render_status(state)]
    if state.status is ViewStatus.POPULATED and state.totals is not None:
        parts.append(render_summary_cards(state.totals))
        parts.append(render_source_summary(state.all_rows))
        if state.charts is not None:
            parts.append(render_charts(state.charts))
        parts.append(f'<div class="table-wrapper" id="tableWrapper">{render_table(state)}</div>')
    range_label = f"{escape_html(state.start_date)} - {escape_html(state.end_date)}" if state.start_date else ""
    return (
        "<!DOCTYPE html>"
        '<html lang="he" dir="rtl"><head><meta charset="utf-8" />'
        f"<title>{escape_html(title)}</title></head><body>"
        f"<h1>{escape_html(title)}</h1>"
        f'<div class="range">{range_label}</div>'
        + "".join(parts)
        + "</body></html>"
    )
