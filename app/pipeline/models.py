from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ZERO = Decimal("0")


class DividendStatus(str, Enum):
    PAID = "paid"
    SCHEDULED = "scheduled"
    PROJECTED = "projected"

    @property
    def is_forward(self) -> bool:
        return self is not DividendStatus.PAID


class Cadence(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"
    IRREGULAR = "irregular"
    UNKNOWN = "unknown"


class _Model(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class DividendRecord(_Model):
    id: str | None = None
    account_id: str
    account_name: str = ""
    ticker: str
    amount_per_share: Decimal = ZERO
    total_amount: Decimal
    pay_date: dt.date
    status: DividendStatus = DividendStatus.SCHEDULED

    @property
    def holding_key(self) -> str:
        return f"{self.account_id}:{self.ticker}"

    @property
    def year_month(self) -> tuple[int, int]:
        return self.pay_date.year, self.pay_date.month


class MonthlyProjection(_Model):
    year: int
    month: int
    projected_income: Decimal


class ProjectionMonthDetail(_Model):
    ticker: str
    account_name: str
    amount: Decimal
    status: DividendStatus


class ProjectionChartMonth(_Model):
    year: int
    month: int
    actual: Decimal | None
    projected: Decimal
    is_past: bool
    detail: list[ProjectionMonthDetail]


class HoldingProjection(_Model):
    holding_key: str
    ticker: str
    account_name: str
    cadence: Cadence
    next_pay_date: dt.date
    next_pay_amount: Decimal
    projected_annual: Decimal
    pct_of_total: Decimal


class ExcludedHolding(_Model):
    ticker: str
    account_name: str
    reason: str


class CalendarDay(_Model):
    date: dt.date
    dividends: list[DividendRecord]


class ProjectionSummary(_Model):
    ttm_income: Decimal
    projected_annual: Decimal
    trend: Decimal
    trend_pct: Decimal
    chart_data: list[ProjectionChartMonth]
    holding_projections: list[HoldingProjection]
    excluded: list[ExcludedHolding]


def coerce_records(records: Iterable | None) -> list[DividendRecord]:
    """Accept DividendRecord instances or plain dicts (camelCase or snake_case keys)."""
    if not records:
        return []
    out = []
    for rec in records:
        if isinstance(rec, DividendRecord):
            out.append(rec)
        else:
            out.append(DividendRecord.model_validate(rec))
    return out
