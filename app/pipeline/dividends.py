import sqlite3
import uuid
from datetime import date
from typing import Iterable

import structlog

from ..utils import now_utc_iso, parse_date, parse_decimal
from .models import DividendRecord, DividendStatus
from .validation import validate_dividend_row

log = structlog.get_logger()


def upsert_account(conn: sqlite3.Connection, account_id: str, name: str):
    conn.execute(
        """
        INSERT INTO accounts(account_id, name, created_at_utc) VALUES(?,?,?)
        ON CONFLICT(account_id) DO UPDATE SET name=excluded.name
        """,
        (account_id, name, now_utc_iso()),
    )


def insert_dividend(
    conn: sqlite3.Connection,
    account_id: str,
    ticker: str,
    total_amount,
    pay_date,
    status: str = DividendStatus.SCHEDULED.value,
    amount_per_share="0",
    dividend_id: str | None = None,
) -> str:
    if isinstance(pay_date, date):
        pay_date = parse_date(pay_date).isoformat()
    ok, reasons = validate_dividend_row(
        {
            "account_id": account_id,
            "ticker": ticker,
            "total_amount": total_amount,
            "pay_date": pay_date,
            "status": status,
            "amount_per_share": amount_per_share,
        }
    )
    if not ok:
        log.warning("dividend_insert_rejected", account_id=account_id, ticker=ticker, reasons=reasons)
        raise ValueError("; ".join(reasons))

    dividend_id = dividend_id or str(uuid.uuid4())
    now = now_utc_iso()
    pay = parse_date(pay_date)
    conn.execute(
        """
        INSERT INTO dividends (
          dividend_id, account_id, ticker, amount_per_share, total_amount,
          pay_date, status, created_at_utc, updated_at_utc
        ) VALUES (?,?,?,?,?,?,?,?,?)
        """,
        (
            dividend_id,
            account_id,
            ticker.strip().upper(),
            str(parse_decimal(amount_per_share) or 0),
            str(parse_decimal(total_amount)),
            pay.isoformat(),
            DividendStatus(str(status).strip().lower()).value,
            now,
            now,
        ),
    )
    return dividend_id


def count_dividends(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM dividends").fetchone()[0]


def load_dividends(conn: sqlite3.Connection, account_ids: Iterable[str] | None = None) -> list[DividendRecord]:
    """Dividends joined with account names, ordered by pay date. Invalid rows are skipped."""
    sql = """
        SELECT d.dividend_id, d.account_id, a.name, d.ticker, d.amount_per_share,
               d.total_amount, d.pay_date, d.status
        FROM dividends d
        JOIN accounts a ON a.account_id = d.account_id
    """
    params: list = []
    ids = [str(a) for a in account_ids] if account_ids else []
    if ids:
        sql += f" WHERE d.account_id IN ({','.join('?' for _ in ids)})"
        params.extend(ids)
    sql += " ORDER BY d.pay_date ASC, d.dividend_id ASC"

    out = []
    skipped = 0
    for row in conn.execute(sql, params).fetchall():
        data = {
            "id": row[0],
            "account_id": row[1],
            "account_name": row[2] or "",
            "ticker": row[3],
            "amount_per_share": row[4],
            "total_amount": row[5],
            "pay_date": row[6],
            "status": row[7],
        }
        ok, reasons = validate_dividend_row(data)
        if not ok:
            skipped += 1
            log.warning("dividend_row_skipped", dividend_id=row[0], reasons=reasons)
            continue
        data["amount_per_share"] = parse_decimal(data["amount_per_share"]) or 0
        data["total_amount"] = parse_decimal(data["total_amount"])
        data["pay_date"] = parse_date(data["pay_date"])
        data["status"] = DividendStatus(str(data["status"] or "scheduled").lower())
        out.append(DividendRecord(**data))
    log.debug("dividends_loaded", count=len(out), skipped=skipped)
    return out
