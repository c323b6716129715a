import unittest
from datetime import date, datetime
from decimal import Decimal

from app.pipeline.models import DividendRecord
from app.pipeline.projections import project_monthly_income
from app.utils import add_months

TODAY = date(2025, 6, 15)


def _div(month_offset: int, amount: str = "10", status: str = "paid", ticker: str = "VTI", account_id: str = "acc1"):
    return DividendRecord(
        account_id=account_id,
        account_name="Roth IRA",
        ticker=ticker,
        total_amount=Decimal(amount),
        pay_date=add_months(TODAY, month_offset),
        status=status,
    )


def _by_month(result):
    return {(p.year, p.month): p.projected_income for p in result}


class ProjectMonthlyIncomeTests(unittest.TestCase):
    def test_length_and_order(self):
        result = project_monthly_income([], 12, TODAY)
        self.assertEqual(len(result), 12)
        self.assertEqual((result[0].year, result[0].month), (2025, 7))
        self.assertEqual((result[-1].year, result[-1].month), (2026, 6))

    def test_crosses_year_boundary(self):
        result = project_monthly_income([], 3, date(2025, 11, 20))
        self.assertEqual([(p.year, p.month) for p in result], [(2025, 12), (2026, 1), (2026, 2)])

    def test_no_history_is_all_zero(self):
        result = project_monthly_income([], 6, TODAY)
        self.assertTrue(all(p.projected_income == 0 for p in result))

    def test_single_record_is_all_zero(self):
        result = project_monthly_income([_div(-1)], 6, TODAY)
        self.assertEqual(len(result), 6)
        self.assertTrue(all(p.projected_income == 0 for p in result))

    def test_zero_months(self):
        self.assertEqual(project_monthly_income([_div(-3), _div(-6)], 0, TODAY), [])

    def test_quarterly_payer_lands_on_cadence_months(self):
        result = _by_month(project_monthly_income([_div(-9), _div(-6), _div(-3)], 12, TODAY))
        nonzero = {k: v for k, v in result.items() if v > 0}
        self.assertEqual(sorted(nonzero), [(2025, 9), (2025, 12), (2026, 3), (2026, 6)])
        self.assertTrue(all(v == Decimal("10") for v in nonzero.values()))

    def test_scheduled_month_is_not_double_counted(self):
        dividends = [_div(-6), _div(-3), _div(3, status="scheduled")]
        result = _by_month(project_monthly_income(dividends, 12, TODAY))
        self.assertEqual(result[(2025, 9)], 0)
        self.assertEqual(result[(2025, 12)], Decimal("10"))

    def test_monthly_payer_every_month(self):
        dividends = [_div(-3, "5"), _div(-2, "5"), _div(-1, "5")]
        result = project_monthly_income(dividends, 6, TODAY)
        self.assertEqual([p.projected_income for p in result], [Decimal("5")] * 6)

    def test_uses_last_paid_amount(self):
        dividends = [_div(-2, "5"), _div(-1, "7.25")]
        result = project_monthly_income(dividends, 2, TODAY)
        self.assertEqual([p.projected_income for p in result], [Decimal("7.25")] * 2)

    def test_holdings_accumulate(self):
        dividends = [
            _div(-2, "5", ticker="O"),
            _div(-1, "5", ticker="O"),
            _div(-6, "10", ticker="VTI"),
            _div(-3, "10", ticker="VTI"),
        ]
        result = _by_month(project_monthly_income(dividends, 3, TODAY))
        self.assertEqual(result[(2025, 7)], Decimal("5"))
        self.assertEqual(result[(2025, 9)], Decimal("15"))

    def test_same_ticker_in_two_accounts_is_two_holdings(self):
        dividends = [
            _div(-2, "5", account_id="acc1"),
            _div(-1, "5", account_id="acc1"),
            _div(-2, "3", account_id="acc2"),
            _div(-1, "3", account_id="acc2"),
        ]
        result = project_monthly_income(dividends, 1, TODAY)
        self.assertEqual(result[0].projected_income, Decimal("8"))

    def test_irregular_holding_is_skipped(self):
        dividends = [_div(-8), _div(-6), _div(-1)]
        result = project_monthly_income(dividends, 12, TODAY)
        self.assertTrue(all(p.projected_income == 0 for p in result))

    def test_deterministic(self):
        dividends = [_div(-9), _div(-6), _div(-3), _div(3, status="scheduled")]
        self.assertEqual(
            project_monthly_income(dividends, 12, TODAY),
            project_monthly_income(dividends, 12, TODAY),
        )

    def test_datetime_today_matches_its_date(self):
        dividends = [_div(-9), _div(-6), _div(-3)]
        at_noon = datetime(2025, 6, 15, 12)
        self.assertEqual(
            project_monthly_income(dividends, 12, at_noon),
            project_monthly_income(dividends, 12, TODAY),
        )


if __name__ == "__main__":
    unittest.main()
