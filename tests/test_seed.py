import unittest

from plsim.pipeline.seed import Seasonality, generate_seed
from plsim.pipeline.validation import validate_sequence


class SeedTests(unittest.TestCase):
    def test_default_span(self):
        seed = generate_seed(2025, 9, 16)
        keys = [r.month_key for r in seed]
        self.assertEqual(len(seed), 16)
        self.assertEqual(keys[0], "2025-09")
        self.assertEqual(keys[-1], "2026-12")
        self.assertEqual(keys[4], "2026-01")
        self.assertEqual([r.id for r in seed], list(range(16)))
        self.assertEqual(validate_sequence(seed), (True, []))

    def test_seasonal_months(self):
        by_key = {r.month_key: r for r in generate_seed(2025, 9, 16)}
        jan = by_key["2026-01"]
        self.assertEqual(jan.sales, 7500000)
        self.assertEqual(jan.cogs, 2625000)
        self.assertEqual(jan.memo, "New Year peak")
        self.assertEqual(by_key["2026-03"].sales, 5400000)
        self.assertEqual(by_key["2026-03"].memo, "graduation season")
        self.assertEqual(by_key["2026-08"].sales, 2400000)
        self.assertEqual(by_key["2025-10"].sales, 4500000)
        self.assertEqual(by_key["2025-11"].memo, "autumn peak")
        plain = by_key["2025-09"]
        self.assertEqual(plain.sales, 3000000)
        self.assertEqual(plain.cogs, 1050000)
        self.assertEqual(plain.memo, "")

    def test_fixed_defaults(self):
        for rec in generate_seed(2025, 9, 3):
            self.assertEqual(rec.fixed_cost, 800000)
            self.assertEqual(rec.spot_cost, 200000)
            self.assertEqual(rec.personnel, 600000)
            self.assertEqual(rec.fixed_cost_memo, "")
            self.assertEqual(rec.spot_cost_memo, "")
            self.assertEqual(rec.personnel_memo, "")

    def test_deterministic(self):
        self.assertEqual(generate_seed(2025, 9, 16), generate_seed(2025, 9, 16))

    def test_non_positive_count(self):
        self.assertEqual(generate_seed(2025, 9, 0), [])
        self.assertEqual(generate_seed(2025, 9, -4), [])

    def test_custom_table(self):
        seed = generate_seed(2025, 12, 2, base_sales=1000, seasonality={12: Seasonality(2.0, "xmas")})
        self.assertEqual([r.sales for r in seed], [2000, 1000])
        self.assertEqual([r.memo for r in seed], ["xmas", ""])
        self.assertEqual(seed[1].month_key, "2026-01")

    def test_halves_round_up(self):
        (jan,) = generate_seed(2026, 1, 1, base_sales=5)
        self.assertEqual(jan.sales, 13)
        (flat,) = generate_seed(2025, 9, 1, base_sales=5, cogs_ratio=0.5, seasonality={})
        self.assertEqual(flat.sales, 5)
        self.assertEqual(flat.cogs, 3)


if __name__ == "__main__":
    unittest.main()
