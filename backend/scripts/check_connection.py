#!/usr/bin/env python3
"""
Check that the configured database is reachable and report the words count.

Usage:
    python scripts/check_connection.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect

from sanakota.config import get_settings
from sanakota.database import check_connection, create_engine, create_session_maker
from sanakota.exceptions import StoreError
from sanakota.repositories.words import WordRepository


async def run() -> int:
    settings = get_settings()
    engine = create_engine(settings)
    print("Testing database connection...")
    print(f"  URL: {engine.url.render_as_string()}")

    try:
        if not await check_connection(engine):
            print("Connection failed")
            return 1
        print("Connected to database successfully!")

        async with engine.connect() as conn:
            has_table = await conn.run_sync(lambda sync_conn: inspect(sync_conn).has_table("words"))
        if not has_table:
            print("Words table does not exist. Run: python scripts/setup_database.py")
            return 1

        async with create_session_maker(engine)() as session:
            stats = await WordRepository(session).get_stats()
        print(f"Words table exists with {stats.total_words} records")
        return 0
    except StoreError as exc:
        print(f"Query failed: {exc}")
        return 1
    finally:
        await engine.dispose()


def main():
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
