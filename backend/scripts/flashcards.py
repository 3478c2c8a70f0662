#!/usr/bin/env python3
"""
Review words as flashcards in the terminal.

Usage:
    python scripts/flashcards.py [--pos noun] [--limit 20] [--api http://localhost:8000]

Keys: Enter flips the card, n = next, p = previous, s = reshuffle, q = quit.
"""

import argparse
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sanakota.client import ApiError, WordsClient
from sanakota.config import get_settings
from sanakota.flashcards import load_deck, render_back, render_front


def parse_args():
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Flashcard review of dictionary words")
    parser.add_argument("--pos", default=None, help="Only this part of speech")
    parser.add_argument("--limit", type=int, default=20, help="Number of cards (default: 20)")
    parser.add_argument("--api", default=settings.API_BASE_URL, help="API base URL")
    return parser.parse_args()


def main():
    args = parse_args()

    with WordsClient(args.api) as client:
        try:
            deck = load_deck(client, pos=args.pos, limit=args.limit)
        except ApiError as exc:
            print(f"Failed to load: {exc}")
            sys.exit(1)

    if deck.current is None:
        print("No words found.")
        return

    while True:
        card = deck.current
        print()
        print(f"[{deck.index + 1}/{len(deck.cards)}]")
        print(render_back(card) if deck.flipped else render_front(card))

        command = input("> ").strip().lower()
        if command == "q":
            break
        elif command == "n":
            deck.next()
        elif command == "p":
            deck.prev()
        elif command == "s":
            deck.shuffle()
        else:
            deck.flip()


if __name__ == "__main__":
    main()
