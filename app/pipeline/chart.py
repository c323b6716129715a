from datetime import date
from typing import Iterable

import structlog

from ..utils import add_months, month_start, parse_date
from .estimator import blended_projection_amount
from .holdings import HoldingModel, build_holding_model, group_by_holding
from .models import (
    DividendStatus,
    ProjectionChartMonth,
    ProjectionMonthDetail,
    ZERO,
    coerce_records,
)

log = structlog.get_logger()

# Slots run from 11 months back through 12 months ahead; the current month is past.
CHART_FIRST_OFFSET = -11
CHART_LAST_OFFSET = 12


def _empty_slots(today: date) -> list[dict]:
    anchor = month_start(today)
    slots = []
    for offset in range(CHART_FIRST_OFFSET, CHART_LAST_OFFSET + 1):
        d = add_months(anchor, offset)
        is_past = offset <= 0
        slots.append(
            {
                "year": d.year,
                "month": d.month,
                "actual": ZERO if is_past else None,
                "projected": ZERO,
                "is_past": is_past,
                "detail": [],
            }
        )
    return slots


def _detail(ticker: str, account_name: str, amount, status: DividendStatus) -> dict:
    return {"ticker": ticker, "account_name": account_name, "amount": amount, "status": status}


def _fill_actuals(slots: list[dict], records) -> None:
    index = {(s["year"], s["month"]): s for s in slots if s["is_past"]}
    for rec in records:
        if rec.status is not DividendStatus.PAID:
            continue
        slot = index.get(rec.year_month)
        if slot is None:
            continue
        slot["actual"] += rec.total_amount
        slot["detail"].append(
            _detail(rec.ticker, rec.account_name, rec.total_amount, DividendStatus.PAID)
        )


def _fill_forecast(slot: dict, model: HoldingModel, blended, ticker: str, account_name: str) -> None:
    year, month = slot["year"], slot["month"]
    if model.has_forward(year, month):
        amount = model.forward_by_month[(year, month)]
    elif model.lands_in(year, month):
        amount = blended
    else:
        return
    slot["projected"] += amount
    slot["detail"].append(_detail(ticker, account_name, amount, DividendStatus.PROJECTED))


def _fill_retrodiction(slot: dict, model: HoldingModel, ticker: str, account_name: str) -> None:
    slot_date = date(slot["year"], slot["month"], 1)
    prior = HoldingModel.from_paid([rec for rec in model.paid if rec.pay_date < slot_date])
    if prior is None or not prior.lands_in(slot["year"], slot["month"]):
        return
    amount = prior.last_paid.total_amount
    slot["projected"] += amount
    already_paid = any(
        d["ticker"] == ticker and d["account_name"] == account_name and d["status"] is DividendStatus.PAID
        for d in slot["detail"]
    )
    if not already_paid:
        slot["detail"].append(_detail(ticker, account_name, amount, DividendStatus.PROJECTED))


def build_chart_data(records: Iterable, today: date) -> list[ProjectionChartMonth]:
    """24 monthly slots of realized vs. modelled income.

    Past slots carry the paid total in ``actual`` and, in ``projected``, what the
    last-paid + cadence model would have predicted from payments strictly before
    that month. Future slots carry scheduled amounts where logged, otherwise the
    blended estimate on cadence months.
    """
    records = coerce_records(records)
    today = parse_date(today)
    slots = _empty_slots(today)
    _fill_actuals(slots, records)

    for group in group_by_holding(records).values():
        model = build_holding_model(group)
        if model is None:
            continue
        ticker = group[0].ticker
        account_name = group[0].account_name
        blended = blended_projection_amount(group, today)
        for slot in slots:
            if slot["is_past"]:
                _fill_retrodiction(slot, model, ticker, account_name)
            else:
                _fill_forecast(slot, model, blended, ticker, account_name)

    log.debug("chart_data_built", records=len(records), today=today.isoformat())
    return [
        ProjectionChartMonth(
            year=s["year"],
            month=s["month"],
            actual=s["actual"],
            projected=s["projected"],
            is_past=s["is_past"],
            detail=[ProjectionMonthDetail(**d) for d in s["detail"]],
        )
        for s in slots
    ]
