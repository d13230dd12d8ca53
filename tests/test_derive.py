import unittest

from plsim.pipeline.derive import break_even_month_key, derive_view, format_pct, view_frame
from plsim.pipeline.records import PeriodRecord
from plsim.pipeline.seed import generate_seed


def _rec(rid, month, sales=0, cogs=0, fixed=0, spot=0, personnel=0, year=2025):
    return PeriodRecord(
        id=rid,
        year=year,
        month=month,
        sales=sales,
        cogs=cogs,
        fixed_cost=fixed,
        spot_cost=spot,
        personnel=personnel,
    )


class DeriveViewTests(unittest.TestCase):
    def test_single_month_figures(self):
        rec = _rec(0, 9, sales=3000000, cogs=1050000, fixed=800000, spot=200000, personnel=600000)
        (row,), _ = derive_view([rec])
        self.assertEqual(row.gross_profit, 1950000)
        self.assertEqual(row.total_cost, 2650000)
        self.assertEqual(row.operating_profit, 350000)
        self.assertAlmostEqual(row.profit_margin, 350000 / 3000000 * 100)
        self.assertEqual(row.profit_margin_display, "11.7")
        self.assertEqual(row.month_key, "2025-09")
        self.assertEqual(row.fixed_cost, 800000)

    def test_display_margin_serialized(self):
        (row,), _ = derive_view([_rec(0, 9, sales=1000, cogs=1426)])
        dumped = row.model_dump(mode="json", by_alias=True)
        self.assertEqual(dumped["profitMarginDisplay"], "-42.6")
        self.assertEqual(dumped["monthKey"], "2025-09")

    def test_summary_over_two_months(self):
        records = [_rec(0, 9, sales=1000000, cogs=900000), _rec(1, 10, sales=2000000, cogs=1700000)]
        _, summary = derive_view(records)
        self.assertEqual(summary.total_sales, 3000000)
        self.assertEqual(summary.total_cost, 2600000)
        self.assertEqual(summary.total_profit, 400000)
        self.assertAlmostEqual(summary.profit_margin_pct, 400000 / 3000000 * 100)
        self.assertEqual(summary.profit_margin_display, "13.3")

    def test_zero_sales_has_zero_margin(self):
        (row,), summary = derive_view([_rec(0, 9, sales=0, cogs=100, fixed=50)])
        self.assertEqual(row.profit_margin, 0)
        self.assertEqual(row.operating_profit, -150)
        self.assertEqual(summary.profit_margin_pct, 0)
        self.assertEqual(summary.total_profit, -150)

    def test_negative_sales_has_zero_margin(self):
        (row,), summary = derive_view([_rec(0, 9, sales=-500, cogs=100)])
        self.assertEqual(row.profit_margin, 0)
        self.assertEqual(summary.profit_margin_pct, 0)

    def test_accumulation_follows_sequence_order(self):
        seed = generate_seed(2025, 9, 16)
        enriched, summary = derive_view(seed)
        self.assertEqual(enriched[0].accumulated_sales, seed[0].sales)
        self.assertEqual(enriched[0].accumulated_total_cost, enriched[0].total_cost)
        for i in range(1, len(enriched)):
            self.assertEqual(enriched[i].accumulated_sales, enriched[i - 1].accumulated_sales + enriched[i].sales)
            self.assertEqual(
                enriched[i].accumulated_total_cost,
                enriched[i - 1].accumulated_total_cost + enriched[i].total_cost,
            )
        self.assertEqual(enriched[-1].accumulated_sales, summary.total_sales)
        self.assertEqual(enriched[-1].accumulated_total_cost, summary.total_cost)

    def test_not_resorted(self):
        later = _rec(0, 12, sales=10)
        earlier = _rec(1, 1, sales=5, year=2025)
        enriched, _ = derive_view([later, earlier])
        self.assertEqual([r.id for r in enriched], [0, 1])
        self.assertEqual([r.accumulated_sales for r in enriched], [10, 15])

    def test_each_pass_starts_from_zero(self):
        records = [_rec(0, 9, sales=100), _rec(1, 10, sales=200)]
        first, _ = derive_view(records)
        second, _ = derive_view(records)
        self.assertEqual([r.accumulated_sales for r in second], [100, 300])
        self.assertEqual(first, second)

    def test_malformed_mapping_cells_count_as_zero(self):
        rows = [
            {"id": 0, "year": 2025, "month": 9, "sales": "1000", "cogs": "abc", "fixedCost": None, "memo": None},
            {"id": 1, "year": 2025, "month": 10, "sales": "", "spotCost": "50"},
        ]
        enriched, summary = derive_view(rows)
        self.assertEqual(enriched[0].sales, 1000)
        self.assertEqual(enriched[0].cogs, 0)
        self.assertEqual(enriched[0].total_cost, 0)
        self.assertEqual(enriched[0].memo, "")
        self.assertEqual(enriched[1].sales, 0)
        self.assertEqual(enriched[1].total_cost, 50)
        self.assertEqual(summary.total_sales, 1000)
        self.assertEqual(summary.total_cost, 50)

    def test_empty_sequence(self):
        enriched, summary = derive_view([])
        self.assertEqual(enriched, [])
        self.assertEqual(summary.total_sales, 0)
        self.assertEqual(summary.profit_margin_pct, 0)
        self.assertEqual(summary.profit_margin_display, "0.0")

    def test_input_untouched(self):
        seed = generate_seed(2025, 9, 4)
        before = [r.model_dump() for r in seed]
        derive_view(seed)
        self.assertEqual([r.model_dump() for r in seed], before)


class ViewHelpersTests(unittest.TestCase):
    def test_break_even_month(self):
        records = [
            _rec(0, 9, sales=100, fixed=300),
            _rec(1, 10, sales=400, fixed=100),
            _rec(2, 11, sales=50, fixed=100),
        ]
        enriched, _ = derive_view(records)
        self.assertEqual(break_even_month_key(enriched), "2025-10")

    def test_break_even_never(self):
        enriched, _ = derive_view([_rec(0, 9, sales=100, fixed=300)])
        self.assertIsNone(break_even_month_key(enriched))

    def test_view_frame_indexed_by_month(self):
        enriched, _ = derive_view(generate_seed(2025, 9, 3))
        frame = view_frame(enriched)
        self.assertEqual(list(frame.index), ["2025-09", "2025-10", "2025-11"])
        self.assertIn("operatingProfit", frame.columns)
        self.assertIn("accumulatedTotalCost", frame.columns)
        self.assertTrue(view_frame([]).empty)

    def test_format_pct(self):
        self.assertEqual(format_pct(11.666), "11.7")
        self.assertEqual(format_pct(0), "0.0")
        self.assertEqual(format_pct(None), "0.0")
        self.assertEqual(format_pct(-4.26), "-4.3")


if __name__ == "__main__":
    unittest.main()
