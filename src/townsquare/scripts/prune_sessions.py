"""Remove expired login sessions from the configured database."""
from __future__ import annotations

import argparse
import logging
import sys

from townsquare.core.errors import StoreUnavailableError
from townsquare.db.session import SessionLocal
from townsquare.services.session_store import DatabaseSessionStore

logger = logging.getLogger("townsquare.prune_sessions")


def prune_sessions(create_table: bool = False) -> int:
    """Delete expired sessions and return how many rows were removed."""
    with SessionLocal() as db:
        store = DatabaseSessionStore(db)
        if create_table:
            store.create_table_if_missing()
        return store.prune_expired()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Prune expired login sessions")
    parser.add_argument(
        "--create-table",
        action="store_true",
        help="Create the sessions table first if it does not exist.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[prune_sessions] %(message)s")

    try:
        removed = prune_sessions(create_table=args.create_table)
    except StoreUnavailableError as exc:
        logger.error("database unavailable during %s", exc.operation)
        sys.exit(1)
    logger.info("removed %d expired sessions", removed)


if __name__ == "__main__":
    main()
