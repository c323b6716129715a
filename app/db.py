import sqlite3
from pathlib import Path

def get_conn(db_path: str) -> sqlite3.Connection:
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, isolation_level=None)  # autocommit
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn

DDL = [
    """
CREATE TABLE IF NOT EXISTS accounts (
  account_id TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  created_at_utc TEXT NOT NULL
);
""",

    # Amounts stay decimal TEXT; never REAL.
    """
CREATE TABLE IF NOT EXISTS dividends (
  dividend_id TEXT PRIMARY KEY,
  account_id TEXT NOT NULL REFERENCES accounts(account_id) ON DELETE CASCADE,
  ticker TEXT NOT NULL,
  amount_per_share TEXT NOT NULL DEFAULT '0',
  total_amount TEXT NOT NULL,
  pay_date TEXT NOT NULL,           -- YYYY-MM-DD
  status TEXT NOT NULL DEFAULT 'scheduled'
    CHECK (status IN ('paid', 'scheduled', 'projected')),
  created_at_utc TEXT NOT NULL,
  updated_at_utc TEXT NOT NULL
);
""",
    "CREATE INDEX IF NOT EXISTS ix_dividends_account ON dividends(account_id);",
    "CREATE INDEX IF NOT EXISTS ix_dividends_pay_date ON dividends(pay_date);",
]

def migrate(conn: sqlite3.Connection):
    cur = conn.cursor()
    for stmt in DDL:
        cur.execute(stmt)
    conn.commit()
