from __future__ import annotations

import math
from typing import Annotated, Any, Iterable

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

AMOUNT_FIELDS = ("sales", "cogs", "fixed_cost", "spot_cost", "personnel")
MEMO_FIELDS = ("fixed_cost_memo", "spot_cost_memo", "personnel_memo", "memo")


def parse_amount(val: Any) -> int | float:
    """Parse a cell value into a number, falling back to 0.

    Accepts ints, floats and numeric strings (surrounding whitespace is
    ignored). Missing, non-numeric and non-finite values become 0; booleans
    are not amounts. Integral values come back as ``int``.
    """
    if val is None or isinstance(val, bool):
        return 0
    if isinstance(val, int):
        return val
    if isinstance(val, str):
        text = val.strip()
        if not text:
            return 0
        try:
            val = float(text)
        except ValueError:
            return 0
    try:
        num = float(val)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(num):
        return 0
    return int(num) if num.is_integer() else num


def parse_memo(val: Any) -> str:
    return "" if val is None else str(val)


def format_month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


Amount = Annotated[int | float, BeforeValidator(parse_amount)]
Memo = Annotated[str, BeforeValidator(parse_memo)]


class ProjectionModel(BaseModel):
    """Immutable base; snake_case attributes with camelCase wire aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PeriodRecord(ProjectionModel):
    """One calendar month of projection inputs.

    ``monthKey`` is derived from ``year``/``month``; it is written out but
    never read back (neither is the older ``monthStr`` spelling).
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    year: int = Field(ge=1)
    month: int = Field(ge=1, le=12)
    sales: Amount = 0
    cogs: Amount = 0
    fixed_cost: Amount = 0
    fixed_cost_memo: Memo = ""
    spot_cost: Amount = 0
    spot_cost_memo: Memo = ""
    personnel: Amount = 0
    personnel_memo: Memo = ""
    memo: Memo = ""

    @computed_field(alias="monthKey")
    @property
    def month_key(self) -> str:
        return format_month_key(self.year, self.month)


def serialize_records(records: Iterable[PeriodRecord]) -> list[dict]:
    return [r.model_dump(mode="json", by_alias=True) for r in records]
