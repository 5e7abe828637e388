"""dbhelper command-line entry point."""

import argparse
import logging
import sys

import psycopg2

from .database import DatabaseHelper
from .log_config import setup_logging

logger = logging.getLogger(__name__)


def check_connectivity(db: DatabaseHelper):
    """Print the server version."""
    row = db.fetch_one("SELECT version() AS version")
    print(f"  Server: {row['version']}")
    return row["version"]


def run_query(db: DatabaseHelper, sql: str, params):
    """Run a SELECT and print each row as a plain dict."""
    rows = db.execute_query(sql, params or None)
    for row in rows:
        # RealDictRow repr is noisy
        print(dict(row))
    print(f"({len(rows)} rows)")
    return rows


def run_update(db: DatabaseHelper, sql: str, params, commit: bool = False):
    """Run a write statement, then commit or roll back."""
    count = db.execute_update(sql, params or None)
    if commit:
        db.commit()
    else:
        db.rollback()
        print("Rolled back (pass --commit to keep changes)")
    print(f"{count} rows affected")
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run SQL against PostgreSQL")
    parser.add_argument("--url", help="Connection URL (defaults to DATABASE_URL)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--log-dir", help="Also write the SQL log to a rotating file here")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("check", help="Verify connectivity")

    query = sub.add_parser("query", help="Run a SELECT and print the rows")
    query.add_argument("sql")
    query.add_argument("-p", "--param", action="append", default=[], help="Positional parameter")

    update = sub.add_parser("update", help="Run an INSERT/UPDATE/DELETE/DDL statement")
    update.add_argument("sql")
    update.add_argument("-p", "--param", action="append", default=[], help="Positional parameter")
    update.add_argument("--commit", action="store_true", help="Commit instead of rolling back")

    return parser


def main(argv=None):
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_dir=args.log_dir)

    try:
        with DatabaseHelper(url=args.url) as db:
            if args.command == "check":
                check_connectivity(db)
            elif args.command == "query":
                run_query(db, args.sql, args.param)
            else:
                run_update(db, args.sql, args.param, commit=args.commit)
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except psycopg2.Error as e:
        logger.error("Database error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
