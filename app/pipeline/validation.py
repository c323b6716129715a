from typing import Tuple, List

from ..utils import parse_date, parse_decimal
from .models import DividendStatus

REQUIRED_FIELDS = [
    "account_id",
    "ticker",
    "total_amount",
    "pay_date",
]

_STATUSES = {s.value for s in DividendStatus}

def validate_dividend_row(row: dict) -> Tuple[bool, List[str]]:
    """Check a stored/imported dividend row before it reaches the projection engine."""
    reasons = []
    for key in REQUIRED_FIELDS:
        val = row.get(key)
        if val is None or str(val).strip() == "":
            reasons.append(f"missing {key}")
    if reasons:
        return False, reasons

    pay_date = row.get("pay_date")
    if parse_date(pay_date) is None or len(str(pay_date).strip()) != 10:
        reasons.append(f"bad pay_date {pay_date!r}")

    total = parse_decimal(row.get("total_amount"))
    if total is None:
        reasons.append(f"bad total_amount {row.get('total_amount')!r}")
    elif total < 0:
        reasons.append("negative total_amount")

    per_share = row.get("amount_per_share")
    if per_share not in (None, "") and parse_decimal(per_share) is None:
        reasons.append(f"bad amount_per_share {per_share!r}")

    status = row.get("status")
    if status not in (None, "") and str(status).strip().lower() not in _STATUSES:
        reasons.append(f"bad status {status!r}")

    return len(reasons) == 0, reasons
