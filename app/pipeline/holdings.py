from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Tuple

import structlog

from ..utils import abs_month
from .cadence import cadence_months, detect_cadence, is_projectable
from .models import Cadence, DividendRecord, DividendStatus, ZERO

log = structlog.get_logger()


def group_by_holding(records: List[DividendRecord]) -> Dict[str, List[DividendRecord]]:
    """Group records by account_id:ticker. First-seen order of holdings is kept."""
    groups: Dict[str, List[DividendRecord]] = {}
    for rec in records:
        groups.setdefault(rec.holding_key, []).append(rec)
    return groups


def paid_sorted(records: List[DividendRecord]) -> List[DividendRecord]:
    paid = [rec for rec in records if rec.status is DividendStatus.PAID]
    paid.sort(key=lambda rec: rec.pay_date)
    return paid


def forward_amounts_by_month(records: List[DividendRecord]) -> Dict[Tuple[int, int], Decimal]:
    """Sum of scheduled/projected amounts per (year, month) for one holding."""
    totals: Dict[Tuple[int, int], Decimal] = defaultdict(lambda: ZERO)
    for rec in records:
        if rec.status.is_forward:
            totals[rec.year_month] += rec.total_amount
    return dict(totals)


@dataclass(frozen=True)
class HoldingModel:
    """Last-paid + cadence model for a single holding."""

    cadence: Cadence
    step_months: int
    paid: List[DividendRecord]
    forward_by_month: Dict[Tuple[int, int], Decimal] = field(default_factory=dict)

    @property
    def last_paid(self) -> DividendRecord:
        return self.paid[-1]

    @property
    def last_abs_month(self) -> int:
        last = self.last_paid.pay_date
        return abs_month(last.year, last.month)

    def lands_in(self, year: int, month: int) -> bool:
        diff = abs_month(year, month) - self.last_abs_month
        return diff > 0 and diff % self.step_months == 0

    def has_forward(self, year: int, month: int) -> bool:
        return (year, month) in self.forward_by_month

    @classmethod
    def from_paid(cls, paid: List[DividendRecord], forward_by_month=None):
        if len(paid) < 2:
            return None
        cadence = detect_cadence([rec.pay_date for rec in paid])
        if not is_projectable(cadence):
            return None
        return cls(
            cadence=cadence,
            step_months=cadence_months(cadence),
            paid=paid,
            forward_by_month=forward_by_month or {},
        )


def build_holding_model(group: List[DividendRecord]) -> HoldingModel | None:
    paid = paid_sorted(group)
    model = HoldingModel.from_paid(paid, forward_amounts_by_month(group))
    if model is None and group:
        log.debug(
            "holding_not_projectable",
            holding_key=group[0].holding_key,
            paid_count=len(paid),
        )
    return model
