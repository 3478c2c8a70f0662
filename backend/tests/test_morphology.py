"""Tests for inflection generation with a stand-in generator."""
import pytest

from sanakota.exceptions import MorphologyError
from sanakota.importer.morphology import (
    PARADIGM_TARGETS,
    HfstLookupGenerator,
    generate_inflections,
    generate_inflections_for,
    parse_lookup_output,
    tags_for_pos,
)


class DictGenerator:
    """Answers from a fixed table; raises for tags listed in ``failing``."""

    def __init__(self, forms, failing=()):
        self.forms = forms
        self.failing = set(failing)
        self.queries = []

    def generate(self, lemma, paradigm_tag):
        self.queries.append(lemma + paradigm_tag)
        if paradigm_tag in self.failing:
            raise MorphologyError("lookup failed")
        return self.forms.get(lemma + paradigm_tag)


def fake_lookup(tmp_path, body):
    """Write an executable shell script standing in for hfst-lookup."""
    script = tmp_path / "hfst-lookup"
    script.write_text(f"#!/bin/sh\n{body}\n")
    script.chmod(0o755)
    return str(script)


KALA_FORMS = {
    "kala+N+Sg+Nom": "kala",
    "kala+N+Sg+Gen": "kalan",
    "kala+N+Pl+Par": "kaloja",
}


def test_parse_lookup_output():
    output = (
        ">>> kala+N+Sg+Gen\n"
        "kala+N+Sg+Gen\tkalan\t0.000000\n"
        "kala+N+Sg+Gen\tkalan/alt\t1.000000\n"
        "\n"
        "foo+N+Sg+Gen\tfoo+N+Sg+Gen+?\tinf\n"
        "bar+N\t??\tinf\n"
        "garbage\n"
    )

    assert parse_lookup_output(output) == ["kalan", "kalan"]


def test_tags_for_pos():
    assert tags_for_pos("Verb") == PARADIGM_TARGETS["verb"]
    assert tags_for_pos("interjection") == PARADIGM_TARGETS["noun"]
    assert tags_for_pos(None) == PARADIGM_TARGETS["noun"]
    assert len(PARADIGM_TARGETS["adverb"]) == 1


class TestGenerateFor:
    def test_collects_known_forms(self):
        generator = DictGenerator(KALA_FORMS)

        inflections = generate_inflections_for(generator, "kala", "noun")

        assert inflections == {"Sg_Nom": "kala", "Sg_Gen": "kalan", "Pl_Par": "kaloja"}
        assert len(generator.queries) == len(PARADIGM_TARGETS["noun"])

    def test_failed_slot_is_skipped(self):
        generator = DictGenerator(KALA_FORMS, failing={"+N+Sg+Gen"})

        inflections = generate_inflections_for(generator, "kala", "noun")

        assert "Sg_Gen" not in inflections
        assert inflections["Sg_Nom"] == "kala"


class TestHfstLookupGenerator:
    def test_unconfigured(self):
        generator = HfstLookupGenerator("")

        with pytest.raises(MorphologyError, match="OMORFI_GENERATOR_PATH"):
            generator.generate("kala", "+N+Sg+Gen")

    def test_missing_binary(self, tmp_path):
        generator = HfstLookupGenerator(
            str(tmp_path / "generator.hfstol"), lookup_bin=str(tmp_path / "no-such-hfst-lookup")
        )

        with pytest.raises(MorphologyError, match="not found"):
            generator.generate("kala", "+N+Sg+Gen")

    def test_non_zero_exit(self, tmp_path):
        generator = HfstLookupGenerator(
            str(tmp_path / "generator.hfstol"),
            lookup_bin=fake_lookup(tmp_path, "echo 'cannot open transducer' >&2\nexit 1"),
        )

        with pytest.raises(MorphologyError, match="exited with code 1: cannot open transducer"):
            generator.generate("kala", "+N+Sg+Gen")

    def test_reads_first_form_from_lookup(self, tmp_path):
        generator = HfstLookupGenerator(
            str(tmp_path / "generator.hfstol"),
            lookup_bin=fake_lookup(tmp_path, "cat > /dev/null\nprintf 'kala+N+Sg+Gen\\tkalan\\t0.0\\n'"),
        )

        assert generator.generate("kala", "+N+Sg+Gen") == "kalan"

    def test_failing_lookup_skips_every_slot(self, tmp_path):
        generator = HfstLookupGenerator(
            str(tmp_path / "generator.hfstol"), lookup_bin=fake_lookup(tmp_path, "exit 2")
        )

        assert generate_inflections_for(generator, "kala", "noun") == {}

    def test_from_settings(self, settings):
        generator = HfstLookupGenerator.from_settings(settings)

        assert generator.generator_path == ""
        assert generator.lookup_bin == settings.OMORFI_LOOKUP_BIN


class TestGenerateInflections:
    async def test_merges_over_existing(self, repository):
        word = await repository.create(
            {"lemma": "kala", "pos": "noun", "inflections": {"form_1": "kalanen", "Sg_Nom": "old"}}
        )

        report = await generate_inflections(repository, DictGenerator(KALA_FORMS))

        stored = await repository.find_by_id(word.id)
        assert stored.inflections == {
            "form_1": "kalanen",
            "Sg_Nom": "kala",
            "Sg_Gen": "kalan",
            "Pl_Par": "kaloja",
        }
        assert (report.processed, report.updated, report.unchanged) == (1, 1, 0)

    async def test_dry_run_writes_nothing(self, repository):
        word = await repository.create({"lemma": "kala", "pos": "noun"})

        report = await generate_inflections(repository, DictGenerator(KALA_FORMS), dry_run=True)

        assert report.updated == 1
        assert (await repository.find_by_id(word.id)).inflections == {}

    async def test_only_missing_and_pos(self, repository):
        await repository.create({"lemma": "kala", "pos": "noun", "inflections": {"Sg_Nom": "kala"}})
        await repository.create({"lemma": "talo", "pos": "noun"})
        await repository.create({"lemma": "juosta", "pos": "verb"})
        generator = DictGenerator({})

        report = await generate_inflections(repository, generator, pos="noun", only_missing=True)

        assert report.processed == 1
        assert report.unchanged == 1
        assert all(query.startswith("talo+") for query in generator.queries)
