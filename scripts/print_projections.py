from pathlib import Path
import argparse
import json
import os
import sys
from datetime import date

# Ensure repo root is on sys.path and is the working directory.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
os.chdir(ROOT)

from app.db import get_conn, migrate
from app.config import settings
from app.logging import setup_logging
from app.pipeline.dividends import load_dividends
from app.pipeline.projections import build_projection_summary
from app.utils import local_today

if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Print the projection summary as JSON")
    parser.add_argument("--today", help="YYYY-MM-DD; defaults to today's local date")
    parser.add_argument("--account", action="append", help="limit to account_id (repeatable)")
    args = parser.parse_args()
    setup_logging("WARNING", fmt="console")
    today = date.fromisoformat(args.today) if args.today else local_today(settings.local_tz, settings.daily_cutover)
    conn = get_conn(settings.db_path)
    migrate(conn)
    summary = build_projection_summary(load_dividends(conn, args.account), today)
    print(json.dumps(summary.model_dump(mode="json", by_alias=True), indent=2))
