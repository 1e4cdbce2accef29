from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from purchaseops.aggregate import revenue_by_date, revenue_by_source
from purchaseops.palette import source_color

REVENUE_LABEL = "הכנסה"


@dataclass(frozen=True)
class ChartSet:
    """Chart.js configurations built from one fetch. Replaced, never mutated."""

    sources: dict[str, Any]
    timeline: dict[str, Any]


def source_chart_config(rows: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    buckets = revenue_by_source(rows)
    labels = [name or "(not set)" for name, _ in buckets]
    return {
        "type": "doughnut",
        "data": {
            "labels": labels,
            "datasets": [
                {
                    "data": [value for _, value in buckets],
                    "backgroundColor": [source_color(name, i) for i, (name, _) in enumerate(buckets)],
                    "borderWidth": 2,
                }
            ],
        },
        "options": {
            "responsive": True,
            "plugins": {"legend": {"position": "bottom"}},
        },
    }


def timeline_chart_config(rows: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    points = revenue_by_date(rows)
    return {
        "type": "line",
        "data": {
            "labels": [d for d, _ in points],
            "datasets": [
                {
                    "label": REVENUE_LABEL,
                    "data": [v for _, v in points],
                    "borderColor": "#6366F1",
                    "backgroundColor": "rgba(99, 102, 241, 0.1)",
                    "fill": True,
                    "tension": 0.3,
                }
            ],
        },
        "options": {
            "responsive": True,
            "plugins": {"legend": {"display": False}},
            "scales": {"y": {"beginAtZero": True}},
        },
    }


def build_charts(rows: Iterable[Mapping[str, Any]]) -> ChartSet:
    rows = list(rows)
    return ChartSet(sources=source_chart_config(rows), timeline=timeline_chart_config(rows))
