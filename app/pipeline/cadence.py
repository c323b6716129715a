from typing import Iterable

from ..utils import parse_date
from .models import Cadence

# (target gap in days, tolerance); checked in this order. Gaps of 36-75 and
# 107-334 days match no band and resolve to irregular.
CADENCE_BANDS = [
    (Cadence.MONTHLY, 30, 5),
    (Cadence.QUARTERLY, 91, 15),
    (Cadence.ANNUAL, 365, 30),
]

_CADENCE_MONTHS = {
    Cadence.MONTHLY: 1,
    Cadence.QUARTERLY: 3,
    Cadence.ANNUAL: 12,
}


def _gaps_in_days(pay_dates) -> list[int]:
    ordered = sorted(pay_dates)
    return [(b - a).days for a, b in zip(ordered[:-1], ordered[1:])]


def detect_cadence(pay_dates: Iterable) -> Cadence:
    dates = [parse_date(d) for d in pay_dates]
    dates = [d for d in dates if d is not None]
    if len(dates) < 2:
        return Cadence.UNKNOWN
    gaps = _gaps_in_days(dates)
    for cadence, target, tol in CADENCE_BANDS:
        if all(abs(gap - target) <= tol for gap in gaps):
            return cadence
    return Cadence.IRREGULAR


def cadence_months(cadence: Cadence) -> int | None:
    return _CADENCE_MONTHS.get(cadence)


def is_projectable(cadence: Cadence) -> bool:
    return cadence in _CADENCE_MONTHS
