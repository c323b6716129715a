from collections import defaultdict
from datetime import date
from typing import Iterable

import structlog

from ..utils import add_months, month_end, month_start, parse_date
from .chart import build_chart_data
from .estimator import blended_projection_amount
from .holdings import build_holding_model, group_by_holding
from .models import (
    CalendarDay,
    DividendStatus,
    ExcludedHolding,
    HoldingProjection,
    MonthlyProjection,
    ProjectionSummary,
    ZERO,
    coerce_records,
)

log = structlog.get_logger()

HOLDING_HORIZON_MONTHS = 12


def project_monthly_income(records: Iterable, months_forward: int, today: date | None = None) -> list[MonthlyProjection]:
    """Aggregate last-paid-amount projection for the months after ``today``'s month.

    Months where a holding already has scheduled/projected entries are left out
    for that holding.
    """
    records = coerce_records(records)
    anchor = month_start(parse_date(today) or date.today())
    slots = []
    for i in range(1, max(0, months_forward) + 1):
        d = add_months(anchor, i)
        slots.append([d.year, d.month, ZERO])

    if len(records) >= 2:
        for group in group_by_holding(records).values():
            model = build_holding_model(group)
            if model is None:
                continue
            last_amount = model.last_paid.total_amount
            for slot in slots:
                year, month = slot[0], slot[1]
                if model.has_forward(year, month):
                    continue
                if model.lands_in(year, month):
                    slot[2] += last_amount

    return [MonthlyProjection(year=y, month=m, projected_income=amt) for y, m, amt in slots]


def build_holding_projections(records: Iterable, today: date) -> list[HoldingProjection]:
    """Per-holding income over the window (today, today + 12 months], largest first.

    Candidate pay dates reuse the last paid day-of-month, clamped to month end.
    """
    records = coerce_records(records)
    today = parse_date(today)
    window_end = add_months(today, HOLDING_HORIZON_MONTHS)
    anchor = month_start(today)
    rows = []

    for holding_key, group in group_by_holding(records).items():
        model = build_holding_model(group)
        if model is None:
            continue
        blended = blended_projection_amount(group, today)
        pay_day = model.last_paid.pay_date.day

        projected_annual = ZERO
        next_pay_date = None
        next_pay_amount = ZERO
        for offset in range(0, HOLDING_HORIZON_MONTHS + 1):
            slot = add_months(anchor, offset)
            pay_date = slot.replace(day=min(pay_day, month_end(slot).day))
            if not (today < pay_date <= window_end):
                continue
            if model.has_forward(slot.year, slot.month):
                amount = model.forward_by_month[(slot.year, slot.month)]
            elif model.lands_in(slot.year, slot.month):
                amount = blended
            else:
                amount = ZERO
            if amount <= 0:
                continue
            projected_annual += amount
            if next_pay_date is None:
                next_pay_date = pay_date
                next_pay_amount = amount

        if projected_annual == 0 or next_pay_date is None:
            continue
        rows.append(
            {
                "holding_key": holding_key,
                "ticker": group[0].ticker,
                "account_name": group[0].account_name,
                "cadence": model.cadence,
                "next_pay_date": next_pay_date,
                "next_pay_amount": next_pay_amount,
                "projected_annual": projected_annual,
            }
        )

    rows.sort(key=lambda row: row["projected_annual"], reverse=True)
    total = sum((row["projected_annual"] for row in rows), ZERO)
    return [
        HoldingProjection(
            **row,
            pct_of_total=(row["projected_annual"] / total * 100) if total > 0 else ZERO,
        )
        for row in rows
    ]


def build_excluded(records: Iterable) -> list[ExcludedHolding]:
    records = coerce_records(records)
    excluded = []
    for group in group_by_holding(records).values():
        paid_count = sum(1 for rec in group if rec.status is DividendStatus.PAID)
        if paid_count >= 2:
            continue
        if paid_count == 0:
            reason = "No paid dividends logged"
        else:
            reason = f"Insufficient history ({paid_count} dividend logged)"
        excluded.append(
            ExcludedHolding(ticker=group[0].ticker, account_name=group[0].account_name, reason=reason)
        )
    return excluded


def build_dividend_calendar(records: Iterable, year: int, month: int) -> list[CalendarDay]:
    by_date = defaultdict(list)
    for rec in coerce_records(records):
        if rec.year_month == (year, month):
            by_date[rec.pay_date].append(rec)
    return [CalendarDay(date=day, dividends=by_date[day]) for day in sorted(by_date)]


def build_projection_summary(records: Iterable, today: date) -> ProjectionSummary:
    records = coerce_records(records)
    today = parse_date(today)
    chart_data = build_chart_data(records, today)
    holding_projections = build_holding_projections(records, today)
    excluded = build_excluded(records)

    ttm_income = sum((m.actual for m in chart_data if m.is_past and m.actual is not None), ZERO)
    projected_annual = sum((h.projected_annual for h in holding_projections), ZERO)
    trend = projected_annual - ttm_income
    trend_pct = trend / ttm_income * 100 if ttm_income > 0 else ZERO

    log.info(
        "projections_built",
        records=len(records),
        holdings=len(holding_projections),
        excluded=len(excluded),
        today=today.isoformat(),
    )
    return ProjectionSummary(
        ttm_income=ttm_income,
        projected_annual=projected_annual,
        trend=trend,
        trend_pct=trend_pct,
        chart_data=chart_data,
        holding_projections=holding_projections,
        excluded=excluded,
    )
