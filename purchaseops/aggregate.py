from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from purchaseops.util import round_money, safe_div, to_float

T = TypeVar("T")
K = TypeVar("K")
A = TypeVar("A")

Row = Mapping[str, Any]

OTHER_SOURCE = "אחר"
TOP_SOURCES = 8


def group_by(
    rows: Iterable[T],
    key: Callable[[T], K],
    initial: Callable[[], A],
    step: Callable[[A, T], A],
) -> dict[K, A]:
    """Reduce ``rows`` into one accumulator per key, in first-seen key order."""
    out: dict[K, A] = {}
    for row in rows:
        k = key(row)
        acc = out[k] if k in out else initial()
        out[k] = step(acc, row)
    return out


def _revenue(row: Row) -> float:
    return to_float(row.get("revenue"))


def _sum_revenue(acc: float, row: Row) -> float:
    return acc + _revenue(row)


@dataclass(frozen=True)
class ReportTotals:
    total_revenue: float
    total_transactions: int
    total_items: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRevenue": self.total_revenue,
            "totalTransactions": self.total_transactions,
            "totalItems": self.total_items,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReportTotals:
        return cls(
            total_revenue=to_float(data.get("totalRevenue")),
            total_transactions=int(data.get("totalTransactions") or 0),
            total_items=int(data.get("totalItems") or 0),
        )


def compute_totals(rows: Iterable[Row]) -> ReportTotals:
    rows = list(rows)
    total = sum(_revenue(r) for r in rows)
    return ReportTotals(
        total_revenue=round_money(total),
        total_transactions=len({str(r.get("transactionId")) for r in rows}),
        total_items=len(rows),
    )


def average_transaction_value(totals: ReportTotals) -> float:
    avg = safe_div(totals.total_revenue, float(totals.total_transactions))
    return avg if avg is not None else 0.0


@dataclass
class SourceGroup:
    revenue: float = 0.0
    transactions: set[str] = field(default_factory=set)


def _add_to_source_group(acc: SourceGroup, row: Row) -> SourceGroup:
    acc.revenue += _revenue(row)
    acc.transactions.add(str(row.get("transactionId")))
    return acc


@dataclass(frozen=True)
class SourceMediumSummary:
    source: str
    medium: str
    revenue: float
    transactions: int
    share: float


def source_medium_summary(rows: Iterable[Row]) -> list[SourceMediumSummary]:
    rows = list(rows)
    groups = group_by(
        rows,
        key=lambda r: (str(r.get("firstSource") or ""), str(r.get("firstMedium") or "")),
        initial=SourceGroup,
        step=_add_to_source_group,
    )
    total = sum(_revenue(r) for r in rows)
    out = [
        SourceMediumSummary(
            source=source,
            medium=medium,
            revenue=round_money(g.revenue),
            transactions=len(g.transactions),
            share=round((safe_div(g.revenue, total) or 0.0) * 100.0, 2),
        )
        for (source, medium), g in groups.items()
    ]
    out.sort(key=lambda s: s.revenue, reverse=True)
    return out


def revenue_by_source(rows: Iterable[Row], top_n: int = TOP_SOURCES) -> list[tuple[str, float]]:
    sums = group_by(rows, key=lambda r: str(r.get("firstSource") or ""), initial=float, step=_sum_revenue)
    ranked = sorted(sums.items(), key=lambda kv: kv[1], reverse=True)
    top = [(name, round_money(value)) for name, value in ranked[:top_n]]
    rest = sum(value for _, value in ranked[top_n:])
    if rest > 0:
        top.append((OTHER_SOURCE, round_money(rest)))
    return top


def revenue_by_date(rows: Iterable[Row]) -> list[tuple[str, float]]:
    sums = group_by(rows, key=lambda r: str(r.get("date") or ""), initial=float, step=_sum_revenue)
    return [(d, round_money(v)) for d, v in sorted(sums.items())]
