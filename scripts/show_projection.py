from pathlib import Path
import os
import sys

import pandas as pd

# Ensure repo root is on sys.path and is the working directory.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
os.chdir(ROOT)

from plsim.logging import setup_logging
from plsim.pipeline.derive import break_even_month_key, derive_view, view_frame
from plsim.pipeline.store import StoreClient

COLUMNS = ["sales", "totalCost", "operatingProfit", "profitMargin", "accumulatedSales", "accumulatedTotalCost", "memo"]


def main():
    setup_logging()
    result = StoreClient().load()
    if result.warning:
        print("WARNING:", result.warning)
    enriched, summary = derive_view(result.records)
    frame = view_frame(enriched)
    with pd.option_context("display.width", 200, "display.max_columns", None):
        print(frame[COLUMNS].to_string(float_format=lambda v: f"{v:,.1f}") if not frame.empty else "(no records)")
    print()
    print("source:", result.source)
    print(f"total sales:  {summary.total_sales:,}")
    print(f"total cost:   {summary.total_cost:,}")
    print(f"total profit: {summary.total_profit:,}")
    print(f"margin:       {summary.profit_margin_display}%")
    print("break-even:  ", break_even_month_key(enriched) or "not within projection")


if __name__ == '__main__':
    main()
