import unittest
from datetime import date, timedelta

from app.pipeline.cadence import cadence_months, detect_cadence, is_projectable
from app.pipeline.models import Cadence


def _spaced(start: date, gap_days: int, count: int = 4):
    return [start + timedelta(days=gap_days * i) for i in range(count)]


class DetectCadenceTests(unittest.TestCase):
    def test_fewer_than_two_dates_is_unknown(self):
        self.assertEqual(detect_cadence([]), Cadence.UNKNOWN)
        self.assertEqual(detect_cadence(["2024-01-15"]), Cadence.UNKNOWN)

    def test_quarterly(self):
        dates = ["2024-01-15", "2024-04-15", "2024-07-15", "2024-10-15"]
        self.assertEqual(detect_cadence(dates), Cadence.QUARTERLY)
        self.assertEqual(detect_cadence(_spaced(date(2024, 1, 1), 91)), Cadence.QUARTERLY)

    def test_monthly(self):
        dates = ["2024-01-15", "2024-02-15", "2024-03-15", "2024-04-15"]
        self.assertEqual(detect_cadence(dates), Cadence.MONTHLY)
        self.assertEqual(detect_cadence(_spaced(date(2024, 1, 1), 30)), Cadence.MONTHLY)

    def test_annual(self):
        dates = ["2022-01-15", "2023-01-15", "2024-01-15"]
        self.assertEqual(detect_cadence(dates), Cadence.ANNUAL)

    def test_long_annual_history_across_leap_years(self):
        dates = [date(2002 + i, 3, 15) for i in range(23)]
        gaps = {(b - a).days for a, b in zip(dates, dates[1:])}
        self.assertEqual(gaps, {365, 366})
        self.assertEqual(detect_cadence(dates), Cadence.ANNUAL)
        self.assertEqual(detect_cadence([d.isoformat() for d in reversed(dates)]), Cadence.ANNUAL)

    def test_irregular(self):
        dates = ["2024-01-15", "2024-03-01", "2024-09-15"]
        self.assertEqual(detect_cadence(dates), Cadence.IRREGULAR)

    def test_gaps_between_monthly_and_quarterly_bands_are_irregular(self):
        for gap in (36, 50, 60, 75):
            self.assertEqual(detect_cadence(_spaced(date(2024, 1, 1), gap)), Cadence.IRREGULAR, gap)

    def test_band_edges(self):
        start = date(2020, 1, 1)
        self.assertEqual(detect_cadence(_spaced(start, 25)), Cadence.MONTHLY)
        self.assertEqual(detect_cadence(_spaced(start, 35)), Cadence.MONTHLY)
        self.assertEqual(detect_cadence(_spaced(start, 76)), Cadence.QUARTERLY)
        self.assertEqual(detect_cadence(_spaced(start, 106)), Cadence.QUARTERLY)
        self.assertEqual(detect_cadence(_spaced(start, 107)), Cadence.IRREGULAR)
        self.assertEqual(detect_cadence(_spaced(start, 334)), Cadence.IRREGULAR)
        self.assertEqual(detect_cadence(_spaced(start, 335)), Cadence.ANNUAL)
        self.assertEqual(detect_cadence(_spaced(start, 395)), Cadence.ANNUAL)
        self.assertEqual(detect_cadence(_spaced(start, 396)), Cadence.IRREGULAR)

    def test_unsorted_input_is_sorted_first(self):
        dates = ["2024-07-15", "2024-01-15", "2024-10-15", "2024-04-15"]
        self.assertEqual(detect_cadence(dates), Cadence.QUARTERLY)

    def test_mixed_gaps_fall_to_irregular(self):
        dates = ["2024-01-15", "2024-02-15", "2024-05-15"]
        self.assertEqual(detect_cadence(dates), Cadence.IRREGULAR)

    def test_same_day_payments_are_irregular(self):
        self.assertEqual(detect_cadence([date(2024, 1, 15), date(2024, 1, 15)]), Cadence.IRREGULAR)


class CadenceMonthsTests(unittest.TestCase):
    def test_steps(self):
        self.assertEqual(cadence_months(Cadence.MONTHLY), 1)
        self.assertEqual(cadence_months(Cadence.QUARTERLY), 3)
        self.assertEqual(cadence_months(Cadence.ANNUAL), 12)
        self.assertIsNone(cadence_months(Cadence.IRREGULAR))
        self.assertIsNone(cadence_months(Cadence.UNKNOWN))

    def test_projectable(self):
        self.assertTrue(is_projectable(Cadence.QUARTERLY))
        self.assertFalse(is_projectable(Cadence.IRREGULAR))


if __name__ == "__main__":
    unittest.main()
