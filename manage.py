#!/usr/bin/env python3
"""
Stockbook management CLI.

Usage:
    python manage.py migrate           Apply pending schema migrations
    python manage.py migrate --status  Show applied and pending migrations
    python manage.py seed              Load the demo catalog (clears existing data)
    python manage.py serve             Start the API server
"""

import argparse
import asyncio
import sys

from stockbook.config import configure_logging, get_settings
from stockbook.core.exceptions import DatabaseError


def cmd_migrate(args: argparse.Namespace) -> None:
    from stockbook.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        run_migrations,
    )

    if args.status:
        status = asyncio.run(get_migration_status())
        if not status["exists"]:
            print("Database does not exist yet.")
        else:
            print(f"Current version: {status['current_version'] or 'none'}")
            print(f"Applied: {', '.join(status['applied_migrations']) or 'none'}")
        print(f"Pending: {', '.join(status['pending_migrations']) or 'none'}")
        return

    try:
        results = asyncio.run(run_migrations(create_backup_before=not args.no_backup))
    except DatabaseError as e:
        print(f"Migration aborted: {e.message}")
        sys.exit(1)
    if not results:
        print("Database is up to date.")
        return
    for result in results:
        state = "ok" if result.success else f"FAILED ({result.error})"
        print(f"  v{result.version} {result.name}: {state} [{result.execution_time_ms}ms]")
    if not all(r.success for r in results):
        sys.exit(1)


async def _seed(clear_existing: bool) -> None:
    from stockbook.application.seed import seed_database
    from stockbook.application.services import (
        get_material_registry_service,
        get_stock_ledger_service,
    )
    from stockbook.infrastructure.storage.sqlite import close_pool
    from stockbook.infrastructure.storage.sqlite.migrations import run_migrations

    await run_migrations(create_backup_before=False)
    try:
        registry = await get_material_registry_service()
        ledger = await get_stock_ledger_service()
        result = await seed_database(registry, ledger, clear_existing=clear_existing)
    finally:
        await close_pool()

    print(f"Materials:  {result.materials}")
    print(f"Movements:  {result.movements}")
    print("Categories:")
    for category, count in sorted(result.categories.items()):
        print(f"  - {category}: {count}")


def cmd_seed(args: argparse.Namespace) -> None:
    asyncio.run(_seed(clear_existing=not args.keep_existing))


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    settings = get_settings()
    host = args.host or settings.api.host
    port = args.port or settings.api.port

    print(f"Starting server on {host}:{port}...")
    uvicorn.run(
        "stockbook.api.main:app",
        host=host,
        port=port,
        reload=args.reload or settings.api.debug,
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Stockbook management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override LOG_LEVEL for this run",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply schema migrations")
    p_migrate.add_argument("--status", action="store_true", help="Only report migration status")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # seed
    p_seed = sub.add_parser("seed", help="Load the demo catalog")
    p_seed.add_argument(
        "--keep-existing",
        action="store_true",
        help="Do not delete existing materials first",
    )
    p_seed.set_defaults(func=cmd_seed)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
