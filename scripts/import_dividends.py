"""Import dividends from a CSV file.

Columns: account_id,account_name,ticker,amount_per_share,total_amount,pay_date,status
"""
from pathlib import Path
import argparse
import csv
import os
import sys

# Ensure repo root is on sys.path and is the working directory.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
os.chdir(ROOT)

import structlog

from app.db import get_conn, migrate
from app.config import settings
from app.logging import setup_logging
from app.pipeline.dividends import upsert_account, insert_dividend
from app.pipeline.validation import validate_dividend_row

log = structlog.get_logger()


def import_csv(conn, path: Path) -> tuple[int, int]:
    imported = skipped = 0
    with open(path, newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            row = {k.strip(): (v or "").strip() for k, v in row.items() if k}
            ok, reasons = validate_dividend_row(row)
            if not ok:
                skipped += 1
                log.warning("csv_row_skipped", line=line_no, reasons=reasons)
                continue
            upsert_account(conn, row["account_id"], row.get("account_name") or row["account_id"])
            insert_dividend(
                conn,
                row["account_id"],
                row["ticker"],
                row["total_amount"],
                row["pay_date"],
                status=row.get("status") or "paid",
                amount_per_share=row.get("amount_per_share") or "0",
            )
            imported += 1
    return imported, skipped


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Import dividends from CSV")
    parser.add_argument("csv_path")
    args = parser.parse_args()
    setup_logging()
    conn = get_conn(settings.db_path)
    migrate(conn)
    imported, skipped = import_csv(conn, Path(args.csv_path))
    print('Imported', imported, '| skipped', skipped)
