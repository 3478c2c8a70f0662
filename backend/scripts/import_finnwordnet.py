#!/usr/bin/env python3
"""
Import FinnWordNet synsets into the words table.

Usage:
    python scripts/import_finnwordnet.py [options]

Options:
    --synsets    Path to fiwn-synsets-extra.tsv
    --relations  Path to fiwn-semrels-extra.tsv
    --clear      Delete existing words before importing

Each synset becomes one word: its first synonym is the lemma, the rest go to
synonyms and form_<n> inflection slots. Rows that fail are logged and
skipped; the import keeps going.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import func, select

from sanakota.config import configure_logging, get_settings
from sanakota.database import database_session
from sanakota.importer.finnwordnet import import_synsets, read_tsv
from sanakota.models.word import Word
from sanakota.repositories.words import WordRepository

DATA_DIR = Path(__file__).parent.parent / "FinnWordNet"


def parse_args():
    parser = argparse.ArgumentParser(description="Import FinnWordNet into the words table")
    parser.add_argument(
        "--synsets",
        type=Path,
        default=DATA_DIR / "fiwn-synsets-extra.tsv",
        help="Synsets TSV file",
    )
    parser.add_argument(
        "--relations",
        type=Path,
        default=DATA_DIR / "fiwn-semrels-extra.tsv",
        help="Semantic relations TSV file",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete existing words before importing",
    )
    return parser.parse_args()


async def run(args) -> int:
    settings = get_settings()

    if not args.synsets.exists():
        print(f"Synsets file not found: {args.synsets}")
        return 1

    synsets = read_tsv(args.synsets)
    print(f"Found {len(synsets)} synsets")
    relations = read_tsv(args.relations) if args.relations.exists() else []
    print(f"Found {len(relations)} semantic relations")

    async with database_session(settings) as session:
        report = await import_synsets(WordRepository(session), synsets, relations, clear=args.clear)

        total = (await session.execute(select(func.count()).select_from(Word))).scalar_one()
        sample = await WordRepository(session).find_all()

    print("\nImport completed!")
    print(f"  Imported: {report.imported} words")
    print(f"  Skipped:  {report.skipped} words")
    print(f"  Total processed: {report.total} synsets")
    print(f"Total words in database: {total}")

    print("\nSample imported words:")
    for word in sample[:5]:
        print(f"  - {word.lemma} ({word.pos}): {word.translation or 'No translation'}")
    return 0


def main():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    sys.exit(asyncio.run(run(parse_args())))


if __name__ == "__main__":
    main()
