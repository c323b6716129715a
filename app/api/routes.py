from datetime import date
from typing import Optional
from fastapi import APIRouter, HTTPException, Query
from .schemas import (
    HealthResponse,
    MonthlyProjectionOut,
    CalendarDayOut,
    ExcludedHoldingOut,
    ProjectionSummaryOut,
)
from ..pipeline.dividends import load_dividends, count_dividends
from ..pipeline.projections import (
    build_projection_summary,
    project_monthly_income,
    build_dividend_calendar,
    build_excluded,
)
from ..config import settings
from ..db import get_conn, migrate
from ..utils import local_today

router = APIRouter()

def _conn():
    conn = get_conn(settings.db_path)
    migrate(conn)
    return conn

def _today(as_of: str | None) -> date:
    if not as_of:
        return local_today(settings.local_tz, settings.daily_cutover)
    try:
        return date.fromisoformat(as_of)
    except ValueError:
        raise HTTPException(400, 'as_of must be YYYY-MM-DD')

def _dividends(account_id: list[str] | None):
    conn = _conn()
    try:
        return load_dividends(conn, account_id)
    finally:
        conn.close()

def _out(schema, model):
    return schema.model_validate(model.model_dump(mode="json"))

@router.get(
    '/health',
    response_model=HealthResponse,
    summary="Health check",
    description="Returns service and DB connectivity plus the stored dividend count.",
    tags=["Health"],
)
def health():
    try:
        conn = _conn()
        try:
            total = count_dividends(conn)
        finally:
            conn.close()
        return HealthResponse(ok=True, db='ok', dividends=total)
    except Exception as e:
        raise HTTPException(503, f'db_error: {e}')

@router.get(
    '/projections',
    response_model=ProjectionSummaryOut,
    summary="Income projections",
    description=(
        "TTM income, projected annual income and trend, the 24-month actual/projected "
        "chart series, per-holding projections and holdings excluded for lack of history. "
        "Optional as_of=YYYY-MM-DD replaces today's local date."
    ),
    tags=["Projections"],
)
def projections(account_id: Optional[list[str]] = Query(default=None), as_of: str | None = None):
    today = _today(as_of)
    summary = build_projection_summary(_dividends(account_id), today)
    return _out(ProjectionSummaryOut, summary)

@router.get(
    '/projections/monthly',
    response_model=list[MonthlyProjectionOut],
    summary="Monthly income projection",
    description="Projected income per month for the next `months` months (starting next month).",
    tags=["Projections"],
)
def projections_monthly(
    months: int | None = None,
    account_id: Optional[list[str]] = Query(default=None),
    as_of: str | None = None,
):
    months = settings.projection_months_default if months is None else months
    if months < 1 or months > settings.projection_months_max:
        raise HTTPException(400, f'months must be between 1 and {settings.projection_months_max}')
    today = _today(as_of)
    rows = project_monthly_income(_dividends(account_id), months, today)
    return [_out(MonthlyProjectionOut, row) for row in rows]

@router.get(
    '/projections/calendar/{year}/{month}',
    response_model=list[CalendarDayOut],
    summary="Dividend calendar",
    description="Dividends in the given month grouped by pay date.",
    tags=["Projections"],
)
def projections_calendar(year: int, month: int, account_id: Optional[list[str]] = Query(default=None)):
    if month < 1 or month > 12:
        raise HTTPException(400, 'month must be 1..12')
    days = build_dividend_calendar(_dividends(account_id), year, month)
    return [_out(CalendarDayOut, day) for day in days]

@router.get(
    '/projections/excluded',
    response_model=list[ExcludedHoldingOut],
    summary="Excluded holdings",
    description="Holdings with fewer than two paid dividends.",
    tags=["Projections"],
)
def projections_excluded(account_id: Optional[list[str]] = Query(default=None)):
    return [_out(ExcludedHoldingOut, row) for row in build_excluded(_dividends(account_id))]
