# src/career_connect/scripts/migrate.py
"""Apply Alembic migrations, or create the schema directly for local development."""
from __future__ import annotations

import argparse
import logging
import os

from alembic import command
from alembic.config import Config

from career_connect.core.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def alembic_config(url: str | None = None) -> Config:
    """Build an Alembic config pointed at the project's migrations folder."""
    cfg = Config(os.path.join(MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    cfg.set_main_option("sqlalchemy.url", url or settings.effective_database_url)
    return cfg


def run_upgrade_head(url: str | None = None) -> None:
    command.upgrade(alembic_config(url), "head")


def main() -> None:
    parser = argparse.ArgumentParser(description="Bring the configured database schema up to date")
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    parser.add_argument(
        "--create-all",
        action="store_true",
        help="Create tables from the ORM metadata instead of running migrations.",
    )
    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level.upper())

    if args.create_all:
        from sqlalchemy import create_engine

        from career_connect.db.session import create_tables

        url = args.url or settings.effective_database_url
        engine = create_engine(url)
        try:
            create_tables(engine)
        finally:
            engine.dispose()
        logger.info("Created tables on %s", url)
        return

    run_upgrade_head(args.url)
    logger.info("Database upgraded to head")


if __name__ == "__main__":
    main()
