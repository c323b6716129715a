from typing import Annotated, Optional, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from ..utils import round_money

# Money and percent values leave the service with two decimals.
Money = Annotated[float, BeforeValidator(round_money)]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    ok: bool
    db: Literal['ok']
    dividends: int


class MonthlyProjectionOut(ApiModel):
    year: int
    month: int
    projected_income: Money


class ProjectionDetailOut(ApiModel):
    ticker: str
    account_name: str
    amount: Money
    status: Literal['paid', 'projected']


class ChartMonthOut(ApiModel):
    year: int
    month: int
    actual: Optional[Money] = None
    projected: Money
    is_past: bool
    detail: list[ProjectionDetailOut]


class HoldingProjectionOut(ApiModel):
    holding_key: str
    ticker: str
    account_name: str
    cadence: str
    next_pay_date: str
    next_pay_amount: Money
    projected_annual: Money
    pct_of_total: Money


class ExcludedHoldingOut(ApiModel):
    ticker: str
    account_name: str
    reason: str


class DividendOut(ApiModel):
    id: Optional[str] = None
    account_id: str
    account_name: str
    ticker: str
    amount_per_share: str
    total_amount: str
    pay_date: str
    status: Literal['paid', 'scheduled', 'projected']


class CalendarDayOut(ApiModel):
    date: str
    dividends: list[DividendOut]


class ProjectionSummaryOut(ApiModel):
    ttm_income: Money
    projected_annual: Money
    trend: Money
    trend_pct: Money
    chart_data: list[ChartMonthOut]
    holding_projections: list[HoldingProjectionOut]
    excluded: list[ExcludedHoldingOut]
