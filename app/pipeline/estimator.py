from datetime import date
from decimal import Decimal
from typing import Iterable

from dateutil.relativedelta import relativedelta

from ..utils import parse_date
from .holdings import paid_sorted
from .models import ZERO, coerce_records

RECENT_WINDOW = 4
YEAR_AGO_TOLERANCE_DAYS = 60
GROWTH_CAP = Decimal("0.30")
GROWTH_WEIGHT = Decimal("0.5")


def _clamp(val: Decimal, lo: Decimal, hi: Decimal) -> Decimal:
    return max(lo, min(hi, val))


def blended_projection_amount(records: Iterable, today: date | None = None) -> Decimal:
    """Next payout estimate for one holding: recent average nudged by half of the
    year-over-year growth, with growth capped at +/-30%.

    Only paid records are considered. Holdings with fewer than two payouts in the
    trailing twelve months fall back to the most recent paid amount.
    """
    paid = paid_sorted(coerce_records(records))
    if not paid:
        return ZERO
    if len(paid) == 1:
        return paid[0].total_amount

    today = parse_date(today) or date.today()
    ttm_start = today - relativedelta(years=1)
    recent_count = sum(1 for rec in paid if rec.pay_date >= ttm_start)
    if recent_count < 2:
        return paid[-1].total_amount

    recent = paid[-RECENT_WINDOW:]
    recent_avg = sum((rec.total_amount for rec in recent), ZERO) / len(recent)

    most_recent = paid[-1]
    target = most_recent.pay_date - relativedelta(years=1)
    candidates = [
        rec for rec in paid if abs((rec.pay_date - target).days) <= YEAR_AGO_TOLERANCE_DAYS
    ]
    if not candidates:
        return recent_avg
    year_ago = min(candidates, key=lambda rec: abs((rec.pay_date - target).days))

    if year_ago.total_amount == 0:
        return recent_avg
    raw_growth = (most_recent.total_amount - year_ago.total_amount) / year_ago.total_amount
    growth = _clamp(raw_growth, -GROWTH_CAP, GROWTH_CAP)
    return recent_avg * (1 + growth * GROWTH_WEIGHT)
