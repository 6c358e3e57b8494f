"""Command line entry point: expose one database over HTTP."""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import uvicorn

from dbstudio.dialects import Dialect


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="db-studio",
        description="Database server CLI - expose a SQL database via HTTP",
    )
    parser.add_argument(
        "--db",
        required=True,
        help="Database type: sqlite, postgresql, or mysql",
    )
    parser.add_argument("--port", type=int, default=3000, help="Port to listen on")
    parser.add_argument("--host", default="localhost", help="Hostname to listen on")

    # SQLite options
    parser.add_argument("--path", help="SQLite database file path")

    # PostgreSQL/MySQL options
    parser.add_argument("--url", help="Database connection URL (PostgreSQL/MySQL)")
    parser.add_argument("--db-host", help="Database host (PostgreSQL/MySQL)")
    parser.add_argument("--db-port", type=int, help="Database port (PostgreSQL/MySQL)")
    parser.add_argument("--db-user", help="Database user (PostgreSQL/MySQL)")
    parser.add_argument("--db-password", help="Database password (PostgreSQL/MySQL)")
    parser.add_argument("--db-name", help="Database name (PostgreSQL/MySQL)")
    parser.add_argument(
        "--log-level", default=os.getenv("LOG_LEVEL", "INFO"), help="Logging level"
    )
    return parser


def export_settings(args: argparse.Namespace, dialect: Dialect) -> None:
    """Translate CLI flags into the environment read by app.settings."""
    env = {
        "DB_TYPE": dialect.value,
        "HOST": args.host,
        "PORT": str(args.port),
        "LOG_LEVEL": args.log_level.upper(),
    }
    if dialect is Dialect.SQLITE:
        if args.path:
            env["SQLITE_PATH"] = str(Path(args.path).resolve())
    else:
        optional = {
            "DATABASE_URL": args.url,
            "DB_HOST": args.db_host,
            "DB_PORT": str(args.db_port) if args.db_port else None,
            "DB_USER": args.db_user,
            "DB_PASSWORD": args.db_password,
            "DB_NAME": args.db_name,
        }
        env.update({k: v for k, v in optional.items() if v})
    os.environ.update(env)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        dialect = Dialect.parse(args.db)
    except ValueError:
        print(
            f"Invalid database type: {args.db}. "
            "Must be one of: sqlite, postgresql, mysql",
            file=sys.stderr,
        )
        return 1

    export_settings(args, dialect)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"[start] serving {dialect.value} on http://{args.host}:{args.port}", flush=True)
    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
