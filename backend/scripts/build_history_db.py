"""
Build a SQLite history snapshot for baseline lookups.

Creates table: procurement_history (see argus.services.history_store)
and loads past records into it. Re-running with the same tender ids
replaces those rows.

Usage:
    python -m scripts.build_history_db history_records.jsonl --db history.db
"""

import argparse
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

from argus.services.history_store import ensure_schema, insert_records
from argus.services.record_io import RecordFileError, load_records


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Load historical procurement records into SQLite")
    parser.add_argument("input", type=Path, help="Records file (JSON array or JSON Lines)")
    parser.add_argument("--db", type=Path, required=True, help="SQLite database to create or update")
    args = parser.parse_args(argv)

    print("=" * 60)
    print("ARGUS: Build History Snapshot")
    print("=" * 60)
    print(f"\nInput: {args.input}")
    print(f"Database: {args.db}")

    try:
        records = load_records(args.input)
    except RecordFileError as exc:
        print(f"ERROR: {exc}")
        return 1

    start = datetime.now()
    conn = sqlite3.connect(args.db, timeout=60)
    try:
        ensure_schema(conn)
        written = insert_records(conn, records)
        total = conn.execute("SELECT COUNT(*) FROM procurement_history").fetchone()[0]
    finally:
        conn.close()

    elapsed = (datetime.now() - start).total_seconds()
    print(f"\nWrote {written:,} records ({total:,} in table) in {elapsed:.1f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
