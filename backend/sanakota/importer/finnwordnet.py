"""
FinnWordNet importer.

Reads the two tab-separated FinnWordNet files (synsets and semantic
relations), turns every synset into one word entry and inserts it through
the word repository. Inserts are not wrapped in a transaction: a row that
fails is logged and counted as skipped, rows before it stay committed.

Synset columns:   synset_id, pos, synonyms, definition, english_synonyms,
                  hypernyms, lexicographer_file
Relation columns: source_id, source_synonyms, relation, _, target_id,
                  target_synonyms
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from sanakota.exceptions import StoreError
from sanakota.models.word import WordCreate
from sanakota.repositories.words import WordRepository

logger = logging.getLogger(__name__)

# Part of speech tags in FinnWordNet -> ours
POS_MAPPING = {
    "N": "noun",
    "V": "verb",
    "A": "adjective",
    "Adv": "adverb",
}

# Relations whose target words are folded into the synonym list
SYNONYM_RELATIONS = frozenset({"similar to"})

TAG_RE = re.compile(r"<[^>]*>")
PROGRESS_EVERY = 1000


@dataclass
class SemanticRelation:
    source_id: str
    relation: str
    target_id: str
    target_words: list[str]


@dataclass
class ImportReport:
    imported: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.imported + self.skipped


def map_pos(tag: str) -> str:
    return POS_MAPPING.get(tag, tag.lower())


def parse_synonyms(value: Optional[str]) -> list[str]:
    """Split a ``|``-separated synonym list, stripping markup and blanks."""
    if not value or not value.strip():
        return []
    words = (TAG_RE.sub("", part).strip() for part in value.split("|"))
    return [word for word in words if word]


def dedupe(words: Iterable[str]) -> list[str]:
    """Drop repeated words, keeping first occurrences in order."""
    seen: set[str] = set()
    unique = []
    for word in words:
        if word not in seen:
            seen.add(word)
            unique.append(word)
    return unique


def extract_main_lemma(value: Optional[str]) -> Optional[str]:
    synonyms = parse_synonyms(value)
    return synonyms[0] if synonyms else None


def create_inflections(synonyms: list[str]) -> dict[str, str]:
    """Map every synonym after the headword to a ``form_<n>`` slot."""
    return {f"form_{index}": word for index, word in enumerate(synonyms) if index > 0}


def read_tsv(path: Path) -> list[list[str]]:
    """Read non-blank lines of a TSV file as lists of columns."""
    logger.info("Reading file: %s", path)
    with open(path, "r", encoding="utf-8") as f:
        return [line.rstrip("\r\n").split("\t") for line in f if line.strip()]


def parse_relation(row: list[str]) -> Optional[SemanticRelation]:
    if len(row) < 6 or not row[0]:
        return None
    return SemanticRelation(
        source_id=row[0],
        relation=row[2].strip(),
        target_id=row[4],
        target_words=parse_synonyms(row[5]),
    )


def group_relations(rows: Iterable[list[str]]) -> dict[str, list[SemanticRelation]]:
    """Group relations by source synset id."""
    grouped: dict[str, list[SemanticRelation]] = {}
    for row in rows:
        relation = parse_relation(row)
        if relation is not None:
            grouped.setdefault(relation.source_id, []).append(relation)
    return grouped


def synset_to_word(row: list[str], relations: Iterable[SemanticRelation] = ()) -> Optional[WordCreate]:
    """Build the word entry for one synset row, or None if it lacks id, pos or words."""
    synset_id, pos, synonym_string, definition, english, _hypernyms, lexicographer_file = (
        row + [""] * 7
    )[:7]
    if not synset_id or not pos or not synonym_string:
        return None

    own_synonyms = dedupe(parse_synonyms(synonym_string))
    if not own_synonyms:
        return None

    related = [
        word
        for relation in relations
        if relation.relation in SYNONYM_RELATIONS
        for word in relation.target_words
    ]
    translation = ", ".join(parse_synonyms(english))

    return WordCreate(
        lemma=own_synonyms[0],
        pos=map_pos(pos.strip()),
        translation=translation or None,
        definition=definition.strip() or None,
        synonyms=dedupe(own_synonyms + related),
        inflections=create_inflections(own_synonyms),
        lexical_category=lexicographer_file.strip() or None,
        example_sentences=[],
    )


async def import_synsets(
    repository: WordRepository,
    synset_rows: Iterable[list[str]],
    relation_rows: Iterable[list[str]] = (),
    clear: bool = False,
) -> ImportReport:
    """Insert one word per synset row and report imported/skipped counts."""
    relations_by_synset = group_relations(relation_rows)
    logger.info("Grouped semantic relations for %d synsets", len(relations_by_synset))

    if clear:
        deleted = await repository.delete_all()
        logger.info("Cleared %d existing words", deleted)

    report = ImportReport()
    for row in synset_rows:
        synset_id = row[0] if row else ""
        word = synset_to_word(row, relations_by_synset.get(synset_id, []))
        if word is None:
            logger.warning("Skipping synset %r: missing id, pos or synonyms", synset_id)
            report.skipped += 1
            continue

        try:
            await repository.create(word)
        except StoreError as exc:
            logger.error("Error importing synset %s: %s", synset_id, exc)
            report.skipped += 1
            continue

        report.imported += 1
        if report.imported % PROGRESS_EVERY == 0:
            logger.info("Imported %d words...", report.imported)

    logger.info(
        "Import completed: %d imported, %d skipped, %d processed",
        report.imported,
        report.skipped,
        report.total,
    )
    return report
