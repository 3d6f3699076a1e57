"""Command line entry point: serve the API and run out-of-band maintenance."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn
from pydantic import TypeAdapter, ValidationError

from travel_packages.core.logging_config import configure_logging
from travel_packages.core.settings import Settings, get_settings
from travel_packages.db.session import AppContext
from travel_packages.schemas.packages import PackageCreate
from travel_packages.services import auth as auth_service
from travel_packages.services import catalog

logger = logging.getLogger(__name__)

_PACKAGE_LIST = TypeAdapter(list[PackageCreate])


def _serve(settings: Settings, args: argparse.Namespace) -> int:
    uvicorn.run(
        "travel_packages.api.main:create_app",
        factory=True,
        host=args.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def _init_db(settings: Settings, args: argparse.Namespace) -> int:
    context = AppContext.open(settings)
    try:
        context.database.create_all()
    finally:
        context.close()
    logger.info("Database tables created")
    return 0


def _load_packages(settings: Settings, args: argparse.Namespace) -> int:
    path = Path(args.file)
    try:
        packages = _PACKAGE_LIST.validate_json(path.read_bytes())
    except OSError as exc:
        logger.error("Cannot read %s: %s", path, exc)
        return 1
    except ValidationError as exc:
        logger.error("Invalid package file %s:\n%s", path, exc)
        return 1

    context = AppContext.open(settings)
    try:
        with context.database.session() as db:
            for payload in packages:
                catalog.create_package(db, payload)
    finally:
        context.close()
    logger.info("Loaded %d packages from %s", len(packages), path)
    return 0


def _purge_sessions(settings: Settings, args: argparse.Namespace) -> int:
    context = AppContext.open(settings)
    try:
        with context.database.session() as db:
            auth_service.purge_expired_sessions(db)
    finally:
        context.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="travel-packages", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API on $PORT")
    serve.add_argument("--host", default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)")
    serve.set_defaults(handler=_serve)

    sub.add_parser("init-db", help="Create all database tables").set_defaults(handler=_init_db)

    load = sub.add_parser("load-packages", help="Insert packages from a JSON array file")
    load.add_argument("file", help="Path to a JSON file holding a list of packages")
    load.set_defaults(handler=_load_packages)

    sub.add_parser("purge-sessions", help="Delete expired sessions").set_defaults(handler=_purge_sessions)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    return args.handler(settings, args)


if __name__ == "__main__":
    sys.exit(main())
