#!/usr/bin/env python3
"""
Create the words table and its text-search index.

Usage:
    python scripts/setup_database.py

Uses DATABASE_URL from the environment or .env. Safe to run repeatedly.
"""

import asyncio
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.exc import SQLAlchemyError

from sanakota.config import configure_logging, get_settings
from sanakota.database import database_session
from sanakota.exceptions import StoreError
from sanakota.repositories.words import WordRepository


async def run() -> int:
    settings = get_settings()
    print("Setting up Sanakota database...")

    try:
        async with database_session(settings) as session:
            stats = await WordRepository(session).get_stats()
    except (SQLAlchemyError, StoreError, OSError) as exc:
        print(f"Database setup failed: {exc}")
        return 1

    print("Tables and indexes created")
    print(f"Total words in database: {stats.total_words}")
    return 0


def main():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
