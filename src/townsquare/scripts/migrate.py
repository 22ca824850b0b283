# src/townsquare/scripts/migrate.py
"""Apply the Alembic migrations to the configured database."""
from __future__ import annotations

import argparse
import os

from alembic import command
from alembic.config import Config

from townsquare.core.settings import settings

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def alembic_config(database_url: str | None = None) -> Config:
    """Build an Alembic config pointing at the bundled migrations."""
    cfg = Config(os.path.join(MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    cfg.set_main_option("sqlalchemy.url", database_url or settings.database_url_sync)
    return cfg


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Upgrade the Townsquare schema")
    parser.add_argument("revision", nargs="?", default="head")
    parser.add_argument(
        "--sql",
        action="store_true",
        help="Print the SQL instead of running it.",
    )
    args = parser.parse_args(argv)
    command.upgrade(alembic_config(), args.revision, sql=args.sql)


if __name__ == "__main__":
    main()
