from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    attribution: bool = False


# Display and export order. Labels are in the dashboard's display language.
COLUMNS: tuple[Column, ...] = (
    Column("date", "תאריך"),
    Column("transactionId", "מזהה עסקה"),
    Column("firstSource", "מקור ראשון", attribution=True),
    Column("firstMedium", "ערוץ ראשון", attribution=True),
    Column("firstCampaign", "קמפיין ראשון", attribution=True),
    Column("source", "מקור סשן", attribution=True),
    Column("medium", "ערוץ סשן", attribution=True),
    Column("campaign", "קמפיין (UTM)", attribution=True),
    Column("landingPage", "דף נחיתה", attribution=True),
    Column("itemName", "שם מוצר"),
    Column("revenue", "הכנסה"),
)

SOURCE_COLUMNS = frozenset({"firstSource", "source"})
