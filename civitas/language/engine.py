"""Linguistic drift engine: generation-by-generation language evolution.

Each generation tick ages the language and, with fixed independent
probabilities, applies zero or more of:
1. Phonetic shift: a sound change applied across the lexicon
2. Lexical change: a new word is coined or an old one becomes archaic
3. Grammatical change: case loss, a new tense, or a new word order
4. Semantic shift: a word's meaning narrows, broadens or extends

Also covers dialect derivation, loanword borrowing, cultural vocabulary,
exact-meaning translation lookup, and linguistic distance.
"""

from __future__ import annotations

import copy
import logging
import random
from typing import TYPE_CHECKING

from civitas.errors import InvalidStateError, ValidationError
from civitas.ids import IdGenerator, ShortUuidIds
from civitas.language.types import (
    Dialect,
    Language,
    Morphology,
    Phonology,
    Pragmatics,
    Semantics,
    Syntax,
    Word,
)

if TYPE_CHECKING:
    from civitas.config import CivitasConfig

logger = logging.getLogger(__name__)


# --- Rule tables ---

PHONETIC_SHIFT_RULES: tuple[tuple[str, str], ...] = (
    ("p", "f"),
    ("t", "s"),
    ("k", "h"),
    ("a", "e"),
    ("o", "u"),
)

DIALECT_SHIFT_PAIRS: tuple[tuple[str, str], ...] = (
    ("p", "b"),
    ("t", "d"),
    ("k", "g"),
    ("a", "o"),
    ("e", "i"),
    ("o", "u"),
)

SEMANTIC_SHIFT_MARKERS: tuple[str, ...] = (" (narrowed)", " (broadened)", " (metaphorical)")

TENSE_CANDIDATES: tuple[str, ...] = ("past", "present", "future", "perfect", "pluperfect")

WORD_ORDERS: tuple[str, ...] = ("SVO", "SOV", "VSO", "VOS", "OVS", "OSV")


def create_proto_language(name: str, family: str, ids: IdGenerator | None = None) -> Language:
    """Create an ancestral language with a fixed seed grammar and empty lexicon.

    Args:
        name: Language name
        family: Language family (e.g., "Indo-Synthetic")
        ids: Id generator for the language id (random short ids if omitted)

    Returns:
        Language at age 0
    """
    ids = ids or ShortUuidIds()
    return Language(
        id=ids.next_id("lang"),
        name=name,
        family=family,
        branch="proto",
        speakers=0,
        origin="primordial",
        age=0,
        phonology=Phonology(
            consonants=["p", "t", "k", "m", "n", "s", "l", "r"],
            vowels=["a", "e", "i", "o", "u"],
            tones=0,
            syllable_structure="(C)V(C)",
            allowed_clusters=["st", "sp", "sk", "tr", "pr", "kr"],
            stress="fixed",
            intonation="simple",
        ),
        morphology=Morphology(
            type="agglutinative",
            prefixes=[],
            suffixes=["-s", "-ed", "-ing"],
            infixes=[],
            cases=6,
            genders=0,
            numbers=["singular", "plural"],
            tenses=["past", "present", "future"],
            aspects=["perfective", "imperfective"],
            moods=["indicative", "imperative"],
        ),
        syntax=Syntax(
            word_order="SVO",
            headedness="head-initial",
            subordination="finite",
            relative_clauses="postnominal",
            subject_verb_agreement=True,
            noun_adjective_agreement=False,
        ),
        semantics=Semantics(
            color_terms=3,
            kinship_system="descriptive",
            spatial_system="relative",
            common_metaphors={"time": "space", "understanding": "seeing", "argument": "war"},
            polysemy_types=["metaphor", "metonymy"],
        ),
        pragmatics=Pragmatics(
            politeness_system="simple",
            formality=["informal", "formal"],
            topic_prominence=False,
            evidentiality=False,
            common_speech_acts=["statement", "question", "command", "request"],
        ),
    )


def _language_of(other: LinguisticDriftEngine | Language) -> Language:
    return other.language if isinstance(other, LinguisticDriftEngine) else other


class LinguisticDriftEngine:
    """Evolves one Language in place.

    Per-tick change rates derive from ``evolution_rate``: phonetic shifts at
    1x, lexical changes at 2x, grammatical changes at 0.5x and semantic
    shifts at 1.5x. All draws come from the injected rng, so a fixed seed
    reproduces the same drift.
    """

    def __init__(
        self,
        language: Language,
        rng: random.Random | None = None,
        ids: IdGenerator | None = None,
        evolution_rate: float = 0.01,
        archaic_frequency_penalty: float = 20.0,
        loanword_frequency: float = 30.0,
        cultural_word_frequency: float = 50.0,
        dialect_phonetic_shifts: int = 3,
        dialect_lexical_differences: int = 5,
    ):
        self.language = language
        self.rng = rng or random.Random()
        self.ids = ids or ShortUuidIds()
        self.evolution_rate = evolution_rate
        self.archaic_frequency_penalty = archaic_frequency_penalty
        self.loanword_frequency = loanword_frequency
        self.cultural_word_frequency = cultural_word_frequency
        self.dialect_phonetic_shifts = dialect_phonetic_shifts
        self.dialect_lexical_differences = dialect_lexical_differences

        self._dialects: dict[str, Dialect] = {}

    @classmethod
    def from_config(
        cls,
        language: Language,
        config: CivitasConfig,
        rng: random.Random | None = None,
        ids: IdGenerator | None = None,
    ) -> LinguisticDriftEngine:
        """Build an engine with rates taken from config."""
        return cls(
            language,
            rng=rng,
            ids=ids,
            evolution_rate=config.language_evolution_rate,
            archaic_frequency_penalty=config.archaic_frequency_penalty,
            loanword_frequency=config.loanword_frequency,
            cultural_word_frequency=config.cultural_word_frequency,
            dialect_phonetic_shifts=config.dialect_phonetic_shifts,
            dialect_lexical_differences=config.dialect_lexical_differences,
        )

    # =========================================================================
    # Evolution
    # =========================================================================

    def evolve(self, generations: int) -> None:
        """Advance the language by ``generations`` ticks.

        Raises:
            ValidationError: If generations is negative
        """
        if generations < 0:
            raise ValidationError(f"generations must be >= 0, got {generations}")

        for _ in range(generations):
            self.language.age += 1

            if self.rng.random() < self.evolution_rate:
                self.phonetic_shift()
            if self.rng.random() < self.evolution_rate * 2:
                self.lexical_change()
            if self.rng.random() < self.evolution_rate * 0.5:
                self.grammatical_change()
            if self.rng.random() < self.evolution_rate * 1.5:
                self.semantic_shift()

    def phonetic_shift(self) -> tuple[str, str]:
        """Apply one sound change to every word containing the source sound.

        Returns:
            The (from, to) rule applied
        """
        source, target = self.rng.choice(PHONETIC_SHIFT_RULES)

        shifted = 0
        for key, word in self.language.lexicon.items():
            if source in word.form:
                word.form = word.form.replace(source, target)
                word.etymology += f" < *{key} (phonetic shift: {source} > {target})"
                shifted += 1

        logger.debug(f"{self.language.id}: phonetic shift {source} > {target} ({shifted} words)")
        return source, target

    def lexical_change(self) -> None:
        """Coin a new word, or mark a random existing word archaic."""
        if self.rng.random() < 0.5:
            word = self.generate_word()
            self.language.lexicon[word.form] = word
            logger.debug(f"{self.language.id}: coined '{word.form}'")
            return

        if not self.language.lexicon:
            return

        word = self.rng.choice(list(self.language.lexicon.values()))
        if word.register != "archaic":
            word.register = "archaic"
            word.frequency = max(0.0, word.frequency - self.archaic_frequency_penalty)

    def grammatical_change(self) -> None:
        """Apply one of: case loss, tense gain, word-order change."""
        change = self.rng.randrange(3)
        morphology = self.language.morphology

        if change == 0:
            if morphology.cases > 0:
                morphology.cases -= 1
        elif change == 1:
            for tense in TENSE_CANDIDATES:
                if tense not in morphology.tenses:
                    morphology.tenses.append(tense)
                    break
        else:
            self.language.syntax.word_order = self.rng.choice(WORD_ORDERS)

    def semantic_shift(self) -> None:
        """Narrow, broaden, or metaphorically extend a random word's meaning."""
        if not self.language.lexicon:
            return

        word = self.rng.choice(list(self.language.lexicon.values()))
        word.meaning += self.rng.choice(SEMANTIC_SHIFT_MARKERS)

    def generate_word(self) -> Word:
        """Synthesize a 1-3 syllable word from the language's sound inventory.

        Raises:
            InvalidStateError: If the phonology has no vowels
        """
        phonology = self.language.phonology
        if not phonology.vowels:
            raise InvalidStateError(f"{self.language.id} has no vowels to build words from")

        syllables = self.rng.randint(1, 3)
        form = ""
        for _ in range(syllables):
            consonant = self.rng.choice(phonology.consonants) if phonology.consonants else ""
            vowel = self.rng.choice(phonology.vowels)
            form += consonant + vowel

        return Word(
            form=form,
            meaning="new concept",
            part_of_speech="noun",
            etymology="neologism",
            frequency=10.0,
            register="neutral",
            connotation="neutral",
        )

    # =========================================================================
    # Lexicon and culture
    # =========================================================================

    def add_word(self, word: Word) -> None:
        """Insert a word under its current form."""
        self.language.lexicon[word.form] = word

    def borrow_word(self, word: str, meaning: str, source_language: str) -> Word:
        """Borrow a word from another language."""
        loanword = Word(
            form=word,
            meaning=meaning,
            part_of_speech="noun",
            etymology=f"< {source_language}",
            frequency=self.loanword_frequency,
            register="neutral",
            connotation="neutral",
        )
        self.language.lexicon[word] = loanword
        self.language.loanwords[word] = source_language
        return loanword

    def add_cultural_concept(self, concept: str, word: str) -> bool:
        """Add a cultural concept and a positive word naming it.

        Returns:
            True if added, False if the concept was already known
        """
        if concept in self.language.cultural_concepts:
            return False

        self.language.cultural_concepts.append(concept)
        self.language.lexicon[word] = Word(
            form=word,
            meaning=concept,
            part_of_speech="noun",
            etymology="cultural innovation",
            frequency=self.cultural_word_frequency,
            register="neutral",
            connotation="positive",
        )
        return True

    def add_taboo_word(self, word: str) -> None:
        """Mark a word as forbidden (idempotent)."""
        if word not in self.language.taboo_words:
            self.language.taboo_words.append(word)

    def set_honorific(self, status: str, marker: str) -> None:
        """Register the marker used to address someone of ``status``."""
        self.language.honorifics[status] = marker

    # =========================================================================
    # Dialects
    # =========================================================================

    def create_dialect(self, region: str, speakers: int) -> Dialect:
        """Derive a regional dialect with a few sound and word overrides.

        Args:
            region: Region the dialect is spoken in
            speakers: Number of speakers

        Returns:
            The new Dialect (also retained by this engine)
        """
        language = self.language
        dialect = Dialect(
            id=f"{language.id}_{region}",
            name=f"{language.name} ({region})",
            base_language=language.id,
            region=region,
            speakers=speakers,
        )

        for _ in range(self.dialect_phonetic_shifts):
            source, target = self.rng.choice(DIALECT_SHIFT_PAIRS)
            dialect.phonetic_shifts[source] = target

        keys = list(language.lexicon.keys())
        if keys:
            for _ in range(self.dialect_lexical_differences):
                key = self.rng.choice(keys)
                dialect.lexical_differences[key] = self.generate_word().form

        if dialect.id not in language.dialects:
            language.dialects.append(dialect.id)
        self._dialects[dialect.id] = dialect

        logger.info(f"Derived dialect {dialect.id} ({speakers} speakers)")
        return dialect

    def get_dialect(self, dialect_id: str) -> Dialect | None:
        dialect = self._dialects.get(dialect_id)
        return copy.deepcopy(dialect) if dialect else None

    def dialects(self) -> list[Dialect]:
        return [copy.deepcopy(d) for d in self._dialects.values()]

    # =========================================================================
    # Cross-language queries
    # =========================================================================

    def translate(self, word: str, target: LinguisticDriftEngine | Language) -> str | None:
        """Find the target-language word with exactly the same meaning string.

        Matching is byte-equality on free-text meanings, not semantic
        similarity: a shifted meaning such as "water (narrowed)" no longer
        matches "water".

        Returns:
            Target lexicon key, or None if no exact match
        """
        source_word = self.language.lexicon.get(word)
        if source_word is None:
            return None

        for target_key, target_word in _language_of(target).lexicon.items():
            if target_word.meaning == source_word.meaning:
                return target_key
        return None

    def calculate_distance(self, other: LinguisticDriftEngine | Language) -> float:
        """Linguistic distance in [0, 100].

        +50 for a different family, +30 for a different branch, plus up to
        20 for vocabulary not shared with ``other``.
        """
        own = self.language
        theirs = _language_of(other)
        distance = 0.0

        if own.family != theirs.family:
            distance += 50
        if own.branch != theirs.branch:
            distance += 30

        if own.lexicon:
            shared = sum(1 for key in own.lexicon if key in theirs.lexicon)
            distance += (1 - shared / len(own.lexicon)) * 20
        elif theirs.lexicon:
            distance += 20

        return min(100.0, distance)

    # =========================================================================
    # Summary and persistence
    # =========================================================================

    def get_summary(self) -> str:
        """Human-readable language profile."""
        language = self.language
        return "\n".join(
            [
                f"LANGUAGE: {language.name}",
                "",
                f"Family: {language.family} > {language.branch}",
                f"Speakers: {language.speakers}",
                f"Age: {language.age} generations",
                "",
                "Typology:",
                f"- Word Order: {language.syntax.word_order}",
                f"- Morphology: {language.morphology.type}",
                f"- Cases: {language.morphology.cases}",
                f"- Tenses: {', '.join(language.morphology.tenses)}",
                "",
                "Phonology:",
                f"- Consonants: {len(language.phonology.consonants)}",
                f"- Vowels: {len(language.phonology.vowels)}",
                f"- Tones: {language.phonology.tones}",
                "",
                "Lexicon:",
                f"- Words: {len(language.lexicon)}",
                f"- Loanwords: {len(language.loanwords)}",
                f"- Dialects: {len(language.dialects)}",
                "",
                "Cultural:",
                f"- Unique Concepts: {len(language.cultural_concepts)}",
                f"- Taboo Words: {len(language.taboo_words)}",
            ]
        )

    def settings(self) -> dict:
        """Return the drift rates this engine was built with."""
        return {
            "evolution_rate": self.evolution_rate,
            "archaic_frequency_penalty": self.archaic_frequency_penalty,
            "loanword_frequency": self.loanword_frequency,
            "cultural_word_frequency": self.cultural_word_frequency,
            "dialect_phonetic_shifts": self.dialect_phonetic_shifts,
            "dialect_lexical_differences": self.dialect_lexical_differences,
        }

    def export_state(self) -> dict:
        """Export the language, its dialect records and the drift rates as a plain dict."""
        return {
            "language": self.language.to_dict(),
            "dialect_records": {key: d.to_dict() for key, d in self._dialects.items()},
            "settings": self.settings(),
        }

    @classmethod
    def import_state(
        cls,
        data: dict,
        rng: random.Random | None = None,
        ids: IdGenerator | None = None,
    ) -> LinguisticDriftEngine:
        """Rebuild an engine from ``export_state`` output."""
        data = copy.deepcopy(data)
        engine = cls(
            Language.from_dict(data["language"]),
            rng=rng,
            ids=ids,
            **data.get("settings", {}),
        )
        for key, record in data.get("dialect_records", {}).items():
            engine._dialects[key] = Dialect.from_dict(record)
        return engine
