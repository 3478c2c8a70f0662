"""Flashcard deck for reviewing words: shuffle, flip, step forward and back."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

from sanakota.client import WordsClient


@dataclass
class FlashcardDeck:
    cards: list[dict]
    index: int = 0
    flipped: bool = False
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def from_words(cls, words: list[dict], rng: Optional[random.Random] = None) -> "FlashcardDeck":
        rng = rng or random.Random()
        cards = list(words)
        rng.shuffle(cards)
        return cls(cards=cards, rng=rng)

    @property
    def current(self) -> Optional[dict]:
        if not self.cards:
            return None
        return self.cards[self.index]

    def flip(self) -> None:
        self.flipped = not self.flipped

    def next(self) -> None:
        if not self.cards:
            return
        self.index = (self.index + 1) % len(self.cards)
        self.flipped = False

    def prev(self) -> None:
        if not self.cards:
            return
        self.index = (self.index - 1) % len(self.cards)
        self.flipped = False

    def shuffle(self) -> None:
        self.rng.shuffle(self.cards)
        self.index = 0
        self.flipped = False


def load_deck(client: WordsClient, pos: Optional[str] = None, limit: int = 20) -> FlashcardDeck:
    """Fetch words (newest first, or by part of speech) and shuffle them."""
    if pos:
        response = client.list_by_pos(pos, limit=limit, offset=0)
    else:
        response = client.list(limit=limit, offset=0)
    return FlashcardDeck.from_words(response.get("data", []))


def render_front(card: dict) -> str:
    return f"{card['lemma']}  ({card['pos']})"


def render_back(card: dict) -> str:
    lines = [render_front(card)]
    if card.get("translation"):
        lines.append(f"  translation: {card['translation']}")
    if card.get("definition"):
        lines.append(f"  definition:  {card['definition']}")
    if card.get("synonyms"):
        lines.append(f"  synonyms:    {', '.join(card['synonyms'])}")
    for label, form in (card.get("inflections") or {}).items():
        lines.append(f"  {label}: {form}")
    for sentence in card.get("example_sentences") or []:
        lines.append(f"  - {sentence}")
    return "\n".join(lines)
