"""Command-line interface for gridcalc."""

import argparse
import asyncio
import logging
import sys
from typing import Optional

import uvicorn

from .config import settings


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="gridcalc - Spreadsheet grid backend with formula evaluation"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Database command
    init_parser = subparsers.add_parser("init-db", help="Create the cell table")
    init_parser.add_argument("--db", help="Database path (default: DATABASE_PATH)")

    # Evaluate command
    eval_parser = subparsers.add_parser(
        "eval", help="Evaluate a formula against the stored grid"
    )
    eval_parser.add_argument("formula", help='Formula text, e.g. "=A1+B1"')
    eval_parser.add_argument("--db", help="Database path (default: DATABASE_PATH)")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "init-db":
        asyncio.run(run_init_db(args.db))
    elif args.command == "eval":
        sys.exit(asyncio.run(run_eval(args.formula, args.db)))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "gridcalc.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


async def run_init_db(db_path: Optional[str] = None):
    """Create the database and cell table."""
    from .store import CellStore

    store = CellStore(db_path)
    await store.initialize()
    await store.close()
    print(f"Cell table ready at {store.db_path}")


async def run_eval(formula: str, db_path: Optional[str] = None) -> int:
    """Evaluate a formula and print the result. Returns the exit code."""
    from .formula import EvaluationError
    from .store import CellStore
    from .table import TableService

    store = CellStore(db_path)
    await store.initialize()
    try:
        service = TableService(
            store,
            honor_root=settings.honor_sqrt_root,
            max_formula_length=settings.max_formula_length,
        )
        try:
            result = await service.evaluate(formula)
        except EvaluationError as e:
            print(f"Error: {e}")
            return 1
        print(result)
        return 0
    finally:
        await store.close()


if __name__ == "__main__":
    main()
