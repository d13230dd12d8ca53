from __future__ import annotations

import math
from typing import Mapping, NamedTuple

from .records import PeriodRecord

DEFAULT_ANCHOR = (2025, 9)
DEFAULT_MONTHS = 16
BASE_SALES = 3_000_000
COGS_RATIO = 0.35
FIXED_COST = 800_000
SPOT_COST = 200_000
PERSONNEL = 600_000


class Seasonality(NamedTuple):
    multiplier: float
    memo: str


# Sample seasonality for a shop with New Year and graduation peaks.
SEASONALITY: dict[int, Seasonality] = {
    1: Seasonality(2.5, "New Year peak"),
    3: Seasonality(1.8, "graduation season"),
    8: Seasonality(0.8, "summer lull"),
    10: Seasonality(1.5, "autumn peak"),
    11: Seasonality(1.5, "autumn peak"),
}
_FLAT = Seasonality(1.0, "")


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def _add_months(year: int, month: int, offset: int) -> tuple[int, int]:
    idx = year * 12 + (month - 1) + offset
    return idx // 12, idx % 12 + 1


def generate_seed(
    anchor_year: int = DEFAULT_ANCHOR[0],
    anchor_month: int = DEFAULT_ANCHOR[1],
    count: int = DEFAULT_MONTHS,
    *,
    base_sales: int | float = BASE_SALES,
    cogs_ratio: float = COGS_RATIO,
    fixed_cost: int | float = FIXED_COST,
    spot_cost: int | float = SPOT_COST,
    personnel: int | float = PERSONNEL,
    seasonality: Mapping[int, Seasonality] | None = None,
) -> list[PeriodRecord]:
    """Build ``count`` consecutive default months starting at the anchor.

    Used whenever the remote store has nothing (or nothing usable) to offer.
    Ids run ``0..count-1`` in month order. Deterministic for a given set of
    arguments; ``count <= 0`` gives an empty list.
    """
    table = SEASONALITY if seasonality is None else seasonality
    out = []
    for i in range(max(0, count)):
        year, month = _add_months(anchor_year, anchor_month, i)
        season = table.get(month, _FLAT)
        sales = base_sales * season.multiplier
        out.append(
            PeriodRecord(
                id=i,
                year=year,
                month=month,
                sales=_round_half_up(sales),
                cogs=_round_half_up(sales * cogs_ratio),
                fixed_cost=fixed_cost,
                spot_cost=spot_cost,
                personnel=personnel,
                memo=season.memo,
            )
        )
    return out
