from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

import pandas as pd
from pydantic import computed_field
from pydantic.alias_generators import to_camel

from .records import (
    AMOUNT_FIELDS,
    MEMO_FIELDS,
    PeriodRecord,
    ProjectionModel,
    parse_amount,
    parse_memo,
)


class EnrichedRecord(PeriodRecord):
    gross_profit: int | float
    total_cost: int | float
    operating_profit: int | float
    profit_margin: float
    accumulated_sales: int | float
    accumulated_total_cost: int | float

    @computed_field(alias="profitMarginDisplay")
    @property
    def profit_margin_display(self) -> str:
        return format_pct(self.profit_margin)


class Summary(ProjectionModel):
    total_sales: int | float = 0
    total_cost: int | float = 0
    total_profit: int | float = 0
    profit_margin_pct: float = 0.0

    @property
    def profit_margin_display(self) -> str:
        return format_pct(self.profit_margin_pct)


def format_pct(val: float | None) -> str:
    return f"{(val or 0.0):.1f}"


def _row(record: Any) -> dict:
    if isinstance(record, PeriodRecord):
        return {name: getattr(record, name) for name in PeriodRecord.model_fields}
    src = record if isinstance(record, Mapping) else {}
    row = {}
    for name in PeriodRecord.model_fields:
        val = src.get(to_camel(name), src.get(name))
        if name in MEMO_FIELDS:
            row[name] = parse_memo(val)
        elif name in AMOUNT_FIELDS:
            row[name] = parse_amount(val)
        else:
            row[name] = int(parse_amount(val))
    return row


def _native(val):
    val = val.item() if hasattr(val, "item") else val
    if isinstance(val, float) and val.is_integer():
        return int(val)
    return val


def derive_view(records: Iterable[Any]) -> tuple[list[EnrichedRecord], Summary]:
    """Compute the enriched monthly view and the portfolio summary.

    Records are folded in the order given; keeping the sequence chronological
    is the caller's job, running totals are not re-sorted here. Amounts are
    re-parsed with the default-zero policy so plain mappings with malformed
    cells are accepted too, and bad cell values never raise.
    """
    rows = [_row(r) for r in records]
    if not rows:
        return [], Summary()

    df = pd.DataFrame(rows)
    for col in AMOUNT_FIELDS:
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0)

    df["gross_profit"] = df["sales"] - df["cogs"]
    df["total_cost"] = df["cogs"] + df["fixed_cost"] + df["spot_cost"] + df["personnel"]
    df["operating_profit"] = df["sales"] - df["total_cost"]
    positive = df["sales"] > 0
    margin = df["operating_profit"] / df["sales"].where(positive) * 100
    df["profit_margin"] = margin.where(positive, 0.0)
    df["accumulated_sales"] = df["sales"].cumsum()
    df["accumulated_total_cost"] = df["total_cost"].cumsum()

    enriched = []
    for row in df.to_dict("records"):
        data = {k: _native(v) for k, v in row.items()}
        data["profit_margin"] = float(data["profit_margin"])
        enriched.append(EnrichedRecord.model_construct(**data))
    return enriched, summarize(df)


def summarize(df: pd.DataFrame) -> Summary:
    if df.empty:
        return Summary()
    total_sales = _native(df["sales"].sum())
    total_cost = _native(df["total_cost"].sum())
    total_profit = _native(total_sales - total_cost)
    margin = total_profit / total_sales * 100 if total_sales > 0 else 0.0
    return Summary(
        total_sales=total_sales,
        total_cost=total_cost,
        total_profit=total_profit,
        profit_margin_pct=float(margin),
    )


def break_even_month_key(enriched: Iterable[EnrichedRecord]) -> str | None:
    """First month where cumulative sales catch up with cumulative cost."""
    for rec in enriched:
        if rec.accumulated_sales >= rec.accumulated_total_cost:
            return rec.month_key
    return None


def view_frame(enriched: Iterable[EnrichedRecord]) -> pd.DataFrame:
    rows = [r.model_dump(by_alias=True) for r in enriched]
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows).set_index("monthKey")
