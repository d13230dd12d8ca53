from typing import Tuple, List, Sequence

from .records import PeriodRecord

def validate_sequence(records: Sequence[PeriodRecord]) -> Tuple[bool, List[str]]:
    reasons = []
    seen_ids = set()
    prev = None
    for rec in records:
        if rec.id in seen_ids:
            reasons.append(f"duplicate id {rec.id}")
        seen_ids.add(rec.id)
        if prev is not None:
            if rec.month_key == prev.month_key:
                reasons.append(f"duplicate month {rec.month_key}")
            elif (rec.year, rec.month) < (prev.year, prev.month):
                reasons.append(f"month {rec.month_key} out of order after {prev.month_key}")
        prev = rec
    return (len(reasons) == 0), reasons
