#!/usr/bin/env python3
"""
Generate inflected forms for words using omorfi via hfst-lookup.

Usage:
    python scripts/generate_inflections.py [options]

Options:
    --only-missing  Only words whose inflection map is empty
    --limit         Number of words to process (default: 500)
    --offset        Skip this many words first (default: 0)
    --pos           Only this part of speech (noun, verb, adjective, adverb)
    --dry-run       Print generated forms instead of saving them

Requires OMORFI_GENERATOR_PATH to point at omorfi's generator .hfstol file.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sanakota.config import configure_logging, get_settings
from sanakota.database import database_session
from sanakota.exceptions import MorphologyError
from sanakota.importer.morphology import HfstLookupGenerator, generate_inflections
from sanakota.repositories.words import WordRepository


def parse_args():
    parser = argparse.ArgumentParser(description="Generate inflections with omorfi")
    parser.add_argument("--only-missing", action="store_true", help="Skip words that already have inflections")
    parser.add_argument("--limit", type=int, default=500, help="Number of words to process (default: 500)")
    parser.add_argument("--offset", type=int, default=0, help="Words to skip (default: 0)")
    parser.add_argument("--pos", default=None, help="Only this part of speech")
    parser.add_argument("--dry-run", action="store_true", help="Print forms instead of saving")
    return parser.parse_args()


async def run(args) -> int:
    settings = get_settings()
    generator = HfstLookupGenerator.from_settings(settings)
    try:
        generator.ensure_configured()
    except MorphologyError as exc:
        print(exc)
        return 1

    async with database_session(settings) as session:
        report = await generate_inflections(
            WordRepository(session),
            generator,
            pos=args.pos,
            only_missing=args.only_missing,
            limit=args.limit,
            offset=args.offset,
            dry_run=args.dry_run,
        )

    print(f"Processed {report.processed} words: {report.updated} updated, {report.unchanged} unchanged")
    return 0


def main():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    sys.exit(asyncio.run(run(parse_args())))


if __name__ == "__main__":
    main()
