"""
Inflection generation with a morphological generator.

The generator is a capability: ``generate(lemma, paradigm_tag)`` returns a
surface form or None. ``HfstLookupGenerator`` implements it by running
omorfi's generator transducer through ``hfst-lookup`` once per query.
A failing lookup skips that paradigm slot; it never aborts the batch.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Protocol

from sanakota.config import Settings
from sanakota.exceptions import MorphologyError
from sanakota.repositories.words import WordRepository

logger = logging.getLogger(__name__)

# Paradigm slots generated per part of speech: label -> omorfi tag string
PARADIGM_TARGETS: dict[str, dict[str, str]] = {
    "noun": {
        "Sg_Nom": "+N+Sg+Nom",
        "Sg_Gen": "+N+Sg+Gen",
        "Sg_Par": "+N+Sg+Par",
        "Pl_Nom": "+N+Pl+Nom",
        "Pl_Gen": "+N+Pl+Gen",
        "Pl_Par": "+N+Pl+Par",
        "Sg_Ine": "+N+Sg+Ine",
        "Sg_Ill": "+N+Sg+Ill",
    },
    "verb": {
        "Inf1": "+V+Inf",
        "Pres_3Sg": "+V+Act+Ind+Prs+Sg3",
        "Past_3Sg": "+V+Act+Ind+Prt+Sg3",
        "Cond_3Sg": "+V+Act+Cond+Sg3",
        "Potn_3Sg": "+V+Act+Pot+Sg3",
        "Imp_2Sg": "+V+Act+Imprt+Sg2",
        "Prs_Part_Act": "+V+Act+PrsPrc",
        "Pst_Part_Act": "+V+Act+Prc",
    },
    "adjective": {
        "Pos_Sg_Nom": "+A+Pos+Sg+Nom",
        "Comp_Sg_Nom": "+A+Cmp+Sg+Nom",
        "Sup_Sg_Nom": "+A+Sup+Sg+Nom",
        "Sg_Par": "+A+Sg+Par",
    },
    "adverb": {
        "Base": "+Adv",
    },
}

PROGRESS_EVERY = 50


def tags_for_pos(pos: Optional[str]) -> dict[str, str]:
    """Paradigm targets for a part of speech; unknown ones use the noun paradigm."""
    return PARADIGM_TARGETS.get((pos or "").lower(), PARADIGM_TARGETS["noun"])


class MorphologyGenerator(Protocol):
    def generate(self, lemma: str, paradigm_tag: str) -> Optional[str]:
        ...


def parse_lookup_output(output: str) -> list[str]:
    """Extract candidate surface forms from hfst-lookup output.

    Each result line is ``query<TAB>form<TAB>weight``. Unknown queries come
    back as ``??`` or with a ``+?`` suffix and are dropped.
    """
    forms = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line.startswith(">>>"):
            continue
        parts = [part.strip() for part in line.split("\t")]
        if len(parts) < 2:
            continue
        surface = parts[1].split("/")[0].strip()
        if surface and surface != "??" and not surface.endswith("+?"):
            forms.append(surface)
    return forms


class HfstLookupGenerator:
    """Morphology generator backed by the ``hfst-lookup`` command."""

    def __init__(self, generator_path: str, lookup_bin: str = "hfst-lookup", timeout: Optional[float] = 30.0):
        self.generator_path = generator_path
        self.lookup_bin = lookup_bin
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "HfstLookupGenerator":
        return cls(settings.OMORFI_GENERATOR_PATH, settings.OMORFI_LOOKUP_BIN)

    def ensure_configured(self) -> None:
        if not self.generator_path:
            raise MorphologyError(
                "OMORFI_GENERATOR_PATH is not set. Point it at your omorfi generator .hfstol file."
            )

    def generate(self, lemma: str, paradigm_tag: str) -> Optional[str]:
        """Return the first surface form for ``lemma + paradigm_tag``, if any."""
        self.ensure_configured()
        try:
            result = subprocess.run(
                [self.lookup_bin, self.generator_path],
                input=f"{lemma}{paradigm_tag}\n",
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise MorphologyError(f"{self.lookup_bin} not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise MorphologyError(f"{self.lookup_bin} timed out after {self.timeout}s") from exc

        if result.returncode != 0:
            raise MorphologyError(
                f"{self.lookup_bin} exited with code {result.returncode}: {result.stderr.strip()}"
            )

        forms = parse_lookup_output(result.stdout)
        return forms[0] if forms else None


def generate_inflections_for(generator: MorphologyGenerator, lemma: str, pos: Optional[str]) -> dict[str, str]:
    """Generate every paradigm slot for one word, skipping slots that fail."""
    inflections = {}
    for label, tags in tags_for_pos(pos).items():
        try:
            form = generator.generate(lemma, tags)
        except MorphologyError as exc:
            logger.debug("Skipping %s %s: %s", lemma, label, exc)
            continue
        if form:
            inflections[label] = form
    return inflections


@dataclass
class InflectionReport:
    processed: int = 0
    updated: int = 0
    unchanged: int = 0


async def generate_inflections(
    repository: WordRepository,
    generator: MorphologyGenerator,
    pos: Optional[str] = None,
    only_missing: bool = False,
    limit: Optional[int] = 500,
    offset: int = 0,
    dry_run: bool = False,
) -> InflectionReport:
    """Fill in inflections for a page of words, oldest first.

    Generated forms are merged over the existing map, so slots the
    generator cannot produce keep their current value.
    """
    words = await repository.find_for_inflection(pos, only_missing, limit, offset)
    logger.info("Will process %d words", len(words))

    report = InflectionReport()
    for word in words:
        generated = generate_inflections_for(generator, word.lemma, word.pos)
        report.processed += 1

        if not generated:
            report.unchanged += 1
        elif dry_run:
            logger.info("%s (%s) => %s", word.lemma, word.pos, generated)
            report.updated += 1
        else:
            merged = {**(word.inflections or {}), **generated}
            await repository.update(word.id, {"inflections": merged})
            report.updated += 1

        if report.processed % PROGRESS_EVERY == 0:
            logger.info("Processed %d", report.processed)

    logger.info(
        "Done: %d processed, %d updated, %d unchanged",
        report.processed,
        report.updated,
        report.unchanged,
    )
    return report
