"""Tests for the linguistic drift engine.

Verifies:
- Proto-language seed grammar
- evolve() ages by exactly n and is deterministic under a fixed seed
- Phonetic, lexical, grammatical and semantic change rules
- Dialects, loanwords, cultural vocabulary
- Translation by exact meaning and linguistic distance
"""

from __future__ import annotations

import random

import pytest

from civitas.errors import InvalidStateError, ValidationError
from civitas.ids import SequentialIds
from civitas.language import (
    DIALECT_SHIFT_PAIRS,
    Dialect,
    Language,
    LinguisticDriftEngine,
    Word,
    create_proto_language,
)
from civitas.language.engine import SEMANTIC_SHIFT_MARKERS, TENSE_CANDIDATES, WORD_ORDERS

VOCABULARY = (
    ("ka", "water"),
    ("tere", "fire"),
    ("mono", "earth"),
    ("sila", "sky"),
    ("pan", "bread"),
    ("lumi", "light"),
    ("roka", "stone"),
    ("nati", "kin"),
    ("sepa", "path"),
    ("koli", "gather"),
)


class FixedRandom(random.Random):
    """Random source whose draws all come from one fixed value."""

    value = 0.5

    def random(self) -> float:
        return self.value


def _fixed(value: float) -> FixedRandom:
    rng = FixedRandom(0)
    rng.value = value
    return rng


def _seeded_language(seed: int, evolution_rate: float = 0.01) -> LinguisticDriftEngine:
    ids = SequentialIds()
    engine = LinguisticDriftEngine(
        create_proto_language("Old Tongue", "Indo-Synthetic", ids=ids),
        rng=random.Random(seed),
        ids=ids,
        evolution_rate=evolution_rate,
    )
    for form, meaning in VOCABULARY:
        engine.add_word(Word(form=form, meaning=meaning))
    return engine


class TestProtoLanguage:
    """Test create_proto_language."""

    def test_identity(self):
        language = create_proto_language("Old Tongue", "Indo-Synthetic", ids=SequentialIds())
        assert language.id == "lang_0001"
        assert language.branch == "proto"
        assert language.origin == "primordial"
        assert language.age == 0
        assert language.lexicon == {}

    def test_seed_grammar(self):
        language = create_proto_language("Old Tongue", "Indo-Synthetic")
        assert language.phonology.consonants == ["p", "t", "k", "m", "n", "s", "l", "r"]
        assert language.phonology.vowels == ["a", "e", "i", "o", "u"]
        assert language.phonology.syllable_structure == "(C)V(C)"
        assert language.morphology.type == "agglutinative"
        assert language.morphology.cases == 6
        assert language.morphology.tenses == ["past", "present", "future"]
        assert language.syntax.word_order == "SVO"
        assert language.semantics.color_terms == 3
        assert language.pragmatics.politeness_system == "simple"

    def test_ids_unique(self):
        ids = SequentialIds()
        first = create_proto_language("A", "F", ids=ids)
        second = create_proto_language("B", "F", ids=ids)
        assert first.id != second.id

    def test_default_ids_unique(self):
        first = create_proto_language("Old Aurelic", "F")
        second = create_proto_language("Old Vesnic", "F")
        assert first.id != second.id


class TestEvolve:
    """Test evolve() ticking and determinism."""

    @pytest.mark.parametrize("generations", [0, 1, 7, 100])
    def test_age_increases_by_exactly_n(self, language, generations):
        language.language.age = 3
        language.evolve(generations)
        assert language.language.age == 3 + generations

    def test_negative_generations_rejected(self, language):
        with pytest.raises(ValidationError):
            language.evolve(-1)

    def test_deterministic_with_equal_seeds(self):
        """A 10-word language evolved 100 generations twice with seed 7 matches."""
        first = _seeded_language(7, evolution_rate=0.2)
        second = _seeded_language(7, evolution_rate=0.2)

        first.evolve(100)
        second.evolve(100)

        assert first.language.to_dict() == second.language.to_dict()

    def test_zero_rate_changes_nothing_but_age(self, language):
        language.evolution_rate = 0.0
        before = language.language.to_dict()

        language.evolve(50)

        after = language.language.to_dict()
        assert after["age"] == 50
        after["age"] = before["age"]
        assert after == before

    def test_high_rate_drifts(self):
        engine = _seeded_language(3, evolution_rate=0.5)
        before = engine.language.to_dict()
        engine.evolve(40)
        assert engine.language.to_dict()["lexicon"] != before["lexicon"]


class TestPhoneticShift:
    """Test phonetic_shift()."""

    def test_rewrites_forms_and_keeps_keys(self, language):
        before = {key: word.form for key, word in language.language.lexicon.items()}

        source, target = language.phonetic_shift()

        assert set(language.language.lexicon) == set(before)
        for key, word in language.language.lexicon.items():
            if source in before[key]:
                assert word.form == before[key].replace(source, target)
                assert word.etymology.endswith(
                    f" < *{key} (phonetic shift: {source} > {target})"
                )
            else:
                assert word.form == before[key]

    def test_forms_never_empty(self, language):
        for _ in range(50):
            language.phonetic_shift()
            for word in language.language.lexicon.values():
                assert word.form != ""

    def test_empty_lexicon(self):
        engine = LinguisticDriftEngine(create_proto_language("A", "F"), rng=random.Random(1))
        engine.phonetic_shift()
        assert engine.language.lexicon == {}


class TestLexicalChange:
    """Test lexical_change()."""

    def test_size_changes_by_zero_or_one(self, language):
        for _ in range(200):
            size = len(language.language.lexicon)
            language.lexical_change()
            assert len(language.language.lexicon) - size in (0, 1)

    def test_coin_branch_adds_word(self, language):
        language.rng = _fixed(0.1)
        size = len(language.language.lexicon)

        language.lexical_change()

        assert len(language.language.lexicon) in (size, size + 1)
        neologisms = [w for w in language.language.lexicon.values() if w.etymology == "neologism"]
        assert len(neologisms) == 1
        assert neologisms[0].frequency == 10
        assert neologisms[0].meaning == "new concept"

    def test_archaism_branch(self, language):
        language.rng = _fixed(0.9)
        size = len(language.language.lexicon)

        language.lexical_change()

        archaic = [w for w in language.language.lexicon.values() if w.register == "archaic"]
        assert len(language.language.lexicon) == size
        assert len(archaic) == 1
        assert archaic[0].frequency == 30

    def test_archaism_frequency_floor(self, language):
        for word in language.language.lexicon.values():
            word.frequency = 5
        language.rng = _fixed(0.9)

        language.lexical_change()

        archaic = [w for w in language.language.lexicon.values() if w.register == "archaic"]
        assert archaic[0].frequency == 0

    def test_archaism_on_empty_lexicon_is_noop(self):
        engine = LinguisticDriftEngine(create_proto_language("A", "F"), rng=_fixed(0.9))
        engine.lexical_change()
        assert engine.language.lexicon == {}


class TestGrammaticalAndSemanticChange:
    """Test grammatical_change() and semantic_shift()."""

    def test_grammar_stays_valid(self, language):
        for _ in range(300):
            language.grammatical_change()
            morphology = language.language.morphology
            assert morphology.cases >= 0
            assert len(morphology.tenses) == len(set(morphology.tenses))
            assert language.language.syntax.word_order in WORD_ORDERS

        assert language.language.morphology.cases == 0
        assert set(language.language.morphology.tenses) == set(TENSE_CANDIDATES)

    def test_semantic_shift_marks_one_word(self, language):
        language.semantic_shift()

        shifted = [
            w
            for w in language.language.lexicon.values()
            if any(w.meaning.endswith(marker) for marker in SEMANTIC_SHIFT_MARKERS)
        ]
        assert len(shifted) == 1

    def test_semantic_shift_on_empty_lexicon(self):
        engine = LinguisticDriftEngine(create_proto_language("A", "F"), rng=random.Random(1))
        engine.semantic_shift()
        assert engine.language.lexicon == {}


class TestWordGeneration:
    """Test generate_word()."""

    def test_syllables_from_inventory(self, language):
        phonology = language.language.phonology
        for _ in range(50):
            word = language.generate_word()
            assert 2 <= len(word.form) <= 6
            assert len(word.form) % 2 == 0
            for index, char in enumerate(word.form):
                inventory = phonology.consonants if index % 2 == 0 else phonology.vowels
                assert char in inventory

    def test_no_vowels_raises(self, language):
        language.language.phonology.vowels = []
        with pytest.raises(InvalidStateError):
            language.generate_word()


class TestVocabulary:
    """Test loanwords, cultural concepts, taboos and honorifics."""

    def test_borrow_word(self, language):
        word = language.borrow_word("kafe", "coffee", "lang_0099")

        assert language.language.lexicon["kafe"] is word
        assert word.etymology == "< lang_0099"
        assert word.frequency == 30
        assert word.register == "neutral"
        assert language.language.loanwords == {"kafe": "lang_0099"}

    def test_add_cultural_concept(self, language):
        assert language.add_cultural_concept("shared memory", "kolimemo") is True
        assert language.add_cultural_concept("shared memory", "other") is False

        assert language.language.cultural_concepts == ["shared memory"]
        word = language.language.lexicon["kolimemo"]
        assert word.connotation == "positive"
        assert word.frequency == 50
        assert "other" not in language.language.lexicon

    def test_taboo_and_honorific(self, language):
        language.add_taboo_word("roka")
        language.add_taboo_word("roka")
        language.set_honorific("elder", "-sama")

        assert language.language.taboo_words == ["roka"]
        assert language.language.honorifics == {"elder": "-sama"}


class TestDialects:
    """Test create_dialect() and Dialect.render()."""

    def test_dialect_identity(self, language):
        dialect = language.create_dialect("highlands", speakers=120)

        assert dialect.id == f"{language.language.id}_highlands"
        assert dialect.base_language == language.language.id
        assert dialect.region == "highlands"
        assert dialect.speakers == 120
        assert language.language.dialects == [dialect.id]

    def test_overrides_drawn_from_tables(self, language):
        dialect = language.create_dialect("coast", speakers=10)

        allowed = dict(DIALECT_SHIFT_PAIRS)
        assert 1 <= len(dialect.phonetic_shifts) <= 3
        for source, target in dialect.phonetic_shifts.items():
            assert allowed[source] == target
        assert 1 <= len(dialect.lexical_differences) <= 5
        assert set(dialect.lexical_differences) <= set(language.language.lexicon)

    def test_id_registered_once(self, language):
        language.create_dialect("coast", speakers=10)
        language.create_dialect("coast", speakers=20)
        assert language.language.dialects == [f"{language.language.id}_coast"]
        assert language.get_dialect(f"{language.language.id}_coast").speakers == 20

    def test_empty_lexicon_has_no_lexical_differences(self):
        engine = LinguisticDriftEngine(create_proto_language("A", "F"), rng=random.Random(1))
        dialect = engine.create_dialect("coast", speakers=5)
        assert dialect.lexical_differences == {}

    def test_get_dialect_returns_copy(self, language):
        dialect = language.create_dialect("coast", speakers=10)
        fetched = language.get_dialect(dialect.id)
        fetched.speakers = 999
        assert language.get_dialect(dialect.id).speakers == 10
        assert language.get_dialect("missing") is None
        assert [d.id for d in language.dialects()] == [dialect.id]

    def test_render(self):
        dialect = Dialect(
            id="lang_0001_coast",
            name="Old Tongue (coast)",
            base_language="lang_0001",
            region="coast",
            phonetic_shifts={"k": "g", "a": "o"},
            lexical_differences={"tere": "luma"},
        )
        assert dialect.render("tere", "tere") == "luma"
        assert dialect.render("ka", "ka") == "go"
        assert dialect.render("mono", "mono") == "mono"


class TestTranslationAndDistance:
    """Test translate() and calculate_distance()."""

    def test_translate_by_meaning(self, language):
        other = create_proto_language("New Tongue", "Indo-Synthetic")
        other.lexicon["aqa"] = Word(form="aqa", meaning="water")

        assert language.translate("ka", other) == "aqa"
        assert language.translate("tere", other) is None
        assert language.translate("unknown", other) is None

    def test_translate_is_exact_match(self, language):
        other = create_proto_language("New Tongue", "Indo-Synthetic")
        other.lexicon["aqa"] = Word(form="aqa", meaning="water (narrowed)")
        assert language.translate("ka", other) is None

    def test_translate_accepts_engine(self, language):
        other = LinguisticDriftEngine(language.language.copy(), rng=random.Random(2))
        assert language.translate("ka", other) == "ka"

    def test_distance_to_clone_is_zero(self, language):
        assert language.calculate_distance(language.language.copy()) == 0

    def test_distance_after_drift_uses_keys(self, language):
        clone = LinguisticDriftEngine(language.language.copy(), rng=random.Random(4))
        for _ in range(5):
            clone.phonetic_shift()
        assert language.calculate_distance(clone) == 0

    def test_distance_components(self, language):
        other = create_proto_language("Far Tongue", "Sino-Synthetic")
        other.branch = "western"
        other.lexicon["ka"] = Word(form="ka", meaning="water")

        # 50 family + 30 branch + (1 - 1/10) * 20
        assert language.calculate_distance(other) == pytest.approx(98.0)

    def test_distance_clamped(self, language):
        other = create_proto_language("Far Tongue", "Sino-Synthetic")
        other.branch = "western"
        assert language.calculate_distance(other) == 100

    def test_distance_with_empty_lexicons(self):
        empty = LinguisticDriftEngine(create_proto_language("A", "F"), rng=random.Random(1))
        also_empty = create_proto_language("B", "F")
        assert empty.calculate_distance(also_empty) == 0

        also_empty.lexicon["ka"] = Word(form="ka", meaning="water")
        assert empty.calculate_distance(also_empty) == 20

    def test_distance_always_in_range(self, language):
        other = _seeded_language(5, evolution_rate=0.3)
        other.evolve(60)
        distance = language.calculate_distance(other)
        assert 0 <= distance <= 100


class TestLanguageState:
    """Test summaries and export/import."""

    def test_summary(self, language):
        summary = language.get_summary()
        assert "LANGUAGE: Old Tongue" in summary
        assert "- Words: 10" in summary
        assert "- Word Order: SVO" in summary

    def test_export_import_roundtrip(self, language):
        language.evolve(30)
        language.borrow_word("kafe", "coffee", "lang_0099")
        language.create_dialect("coast", speakers=10)

        restored = LinguisticDriftEngine.import_state(language.export_state())

        assert restored.export_state() == language.export_state()
        assert restored.get_dialect(f"{language.language.id}_coast") is not None

    def test_roundtrip_keeps_drift_rates(self):
        engine = LinguisticDriftEngine(
            create_proto_language("A", "F"),
            rng=random.Random(1),
            evolution_rate=0.5,
            loanword_frequency=12.0,
            dialect_phonetic_shifts=1,
        )

        restored = LinguisticDriftEngine.import_state(engine.export_state())

        assert restored.evolution_rate == 0.5
        assert restored.loanword_frequency == 12.0
        assert restored.dialect_phonetic_shifts == 1
        assert restored.settings() == engine.settings()

    def test_export_is_detached(self, language):
        state = language.export_state()
        state["language"]["lexicon"]["ka"]["meaning"] = "changed"
        assert language.language.lexicon["ka"].meaning == "water"

    def test_language_from_dict(self, language):
        rebuilt = Language.from_dict(language.language.to_dict())
        assert rebuilt == language.language
