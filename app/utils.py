import calendar
from datetime import datetime, date, time, timedelta, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from dateutil import tz

_CENT = Decimal("0.01")


def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_local_date(dt_utc: datetime, local_tz: str, cutover_hhmm: str) -> date:
    tzinfo = tz.gettz(local_tz)
    loc = dt_utc.astimezone(tzinfo)
    hh, mm = cutover_hhmm.split(":"); cut = time(int(hh), int(mm))
    # If before cutover treat as previous local date
    if loc.timetz() < cut.replace(tzinfo=loc.tzinfo):
        loc = (loc - timedelta(days=1))
    return loc.date()


def local_today(local_tz: str, cutover_hhmm: str) -> date:
    return to_local_date(datetime.now(timezone.utc), local_tz, cutover_hhmm)


def parse_date(val) -> date | None:
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    text = str(val).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_decimal(val) -> Decimal | None:
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, Decimal):
        return val
    try:
        out = Decimal(str(val).strip())
    except (InvalidOperation, ValueError):
        return None
    return out if out.is_finite() else None


def month_start(d: date) -> date:
    return d.replace(day=1)


def month_end(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def add_months(d: date, months: int) -> date:
    year = d.year + (d.month - 1 + months) // 12
    month = (d.month - 1 + months) % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def abs_month(year: int, month: int) -> int:
    return year * 12 + (month - 1)


def round_money(val):
    if val is None:
        return None
    amount = parse_decimal(val)
    if amount is None:
        return None
    return float(amount.quantize(_CENT, rounding=ROUND_HALF_UP))
