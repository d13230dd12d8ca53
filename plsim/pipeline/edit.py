from __future__ import annotations

from enum import Enum
from typing import Any, Sequence

from .records import PeriodRecord, parse_amount, parse_memo


class EditableField(str, Enum):
    """Mutable attributes of a period record, by wire name.

    ``id``, ``year`` and ``month`` are fixed once a record exists.
    """

    SALES = "sales"
    COGS = "cogs"
    FIXED_COST = "fixedCost"
    FIXED_COST_MEMO = "fixedCostMemo"
    SPOT_COST = "spotCost"
    SPOT_COST_MEMO = "spotCostMemo"
    PERSONNEL = "personnel"
    PERSONNEL_MEMO = "personnelMemo"
    MEMO = "memo"

    @property
    def attr(self) -> str:
        return _ATTRS[self]

    @property
    def is_memo(self) -> bool:
        return self in _MEMOS


_ATTRS = {
    EditableField.SALES: "sales",
    EditableField.COGS: "cogs",
    EditableField.FIXED_COST: "fixed_cost",
    EditableField.FIXED_COST_MEMO: "fixed_cost_memo",
    EditableField.SPOT_COST: "spot_cost",
    EditableField.SPOT_COST_MEMO: "spot_cost_memo",
    EditableField.PERSONNEL: "personnel",
    EditableField.PERSONNEL_MEMO: "personnel_memo",
    EditableField.MEMO: "memo",
}
_MEMOS = frozenset(
    {EditableField.FIXED_COST_MEMO, EditableField.SPOT_COST_MEMO, EditableField.PERSONNEL_MEMO, EditableField.MEMO}
)


def parse_field_value(field: EditableField | str, value: Any) -> int | float | str:
    field = EditableField(field)
    return parse_memo(value) if field.is_memo else parse_amount(value)


def apply_edit(
    records: Sequence[PeriodRecord],
    record_id: int,
    field: EditableField | str,
    value: Any,
) -> Sequence[PeriodRecord]:
    """Return a copy of ``records`` with one field of one record replaced.

    Unknown ``record_id`` is a no-op: the input sequence itself is returned.
    Neither the input sequence nor any record in it is modified; untouched
    records are shared with the result. Raises ``ValueError`` when ``field``
    is not an :class:`EditableField`.
    """
    field = EditableField(field)
    for idx, rec in enumerate(records):
        if rec.id == record_id:
            updated = rec.model_copy(update={field.attr: parse_field_value(field, value)})
            out = list(records)
            out[idx] = updated
            return out
    return records
