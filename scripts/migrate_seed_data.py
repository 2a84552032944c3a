#!/usr/bin/env python3
"""CLI script to load the mock seed data into the database.

Usage:
    python scripts/migrate_seed_data.py
    python scripts/migrate_seed_data.py --data-dir ./data

Connects directly to the database using DATABASE_URL from environment or .env file.
Creates the planner tables if needed, then migrates users, events, tracks,
tasks, meetings and meeting notes from the JSON files in the data directory.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Ensure project root is on sys.path so we can import src.eventdesk
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv  # noqa: E402

# Load .env from project root
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))


async def migrate(data_dir: str) -> None:
    """Run the seed migration against the configured database."""
    from src.eventdesk.api.middleware.logging import configure_structlog
    from src.eventdesk.core.database import close_db, get_session, init_db
    from src.eventdesk.planner.repository import PlannerRepository
    from src.eventdesk.seed.migration import migrate_mock_data

    configure_structlog()
    await init_db()

    print(f"Migrating seed data from: {data_dir}")
    try:
        summary = await migrate_mock_data(PlannerRepository(session_factory=get_session), data_dir)
    finally:
        await close_db()

    print("Migration completed successfully:")
    for entity, counts in summary.model_dump().items():
        print(f"  {entity:<14} created={counts['created']} skipped={counts['skipped']}")


def main() -> None:
    from src.eventdesk.config import get_settings

    parser = argparse.ArgumentParser(description="Load mock seed data into the database")
    parser.add_argument(
        "--data-dir",
        default=get_settings().SEED_DATA_DIR,
        help="Directory holding users.json, events.json, ... (default: SEED_DATA_DIR)",
    )
    args = parser.parse_args()

    asyncio.run(migrate(args.data_dir))


if __name__ == "__main__":
    main()
