"""Language data model.

A Language bundles five linguistic subsystems (phonology, morphology,
syntax, semantics, pragmatics) with a lexicon and its cultural context.
Lexicon keys are the citation form a word was entered under; sound
changes rewrite ``Word.form`` but never the key.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class Phonology:
    """Sound inventory, phonotactics and prosody."""

    consonants: list[str] = field(default_factory=list)
    vowels: list[str] = field(default_factory=list)
    tones: int = 0  # 0 = no tones, 1-5 = number of tones
    syllable_structure: str = "(C)V(C)"
    allowed_clusters: list[str] = field(default_factory=list)
    stress: str = "fixed"  # fixed | free | pitch
    intonation: str = "simple"  # simple | complex


@dataclass
class Morphology:
    type: str = "agglutinative"  # isolating | agglutinative | fusional | polysynthetic
    prefixes: list[str] = field(default_factory=list)
    suffixes: list[str] = field(default_factory=list)
    infixes: list[str] = field(default_factory=list)
    cases: int = 0  # 0-15
    genders: int = 0  # 0-3
    numbers: list[str] = field(default_factory=list)
    tenses: list[str] = field(default_factory=list)
    aspects: list[str] = field(default_factory=list)
    moods: list[str] = field(default_factory=list)


@dataclass
class Syntax:
    word_order: str = "SVO"  # SVO | SOV | VSO | VOS | OVS | OSV | free
    headedness: str = "head-initial"
    subordination: str = "finite"
    relative_clauses: str = "postnominal"
    subject_verb_agreement: bool = True
    noun_adjective_agreement: bool = False


@dataclass
class Semantics:
    color_terms: int = 3  # 2-11
    kinship_system: str = "descriptive"
    spatial_system: str = "relative"
    common_metaphors: dict[str, str] = field(default_factory=dict)  # source -> target domain
    polysemy_types: list[str] = field(default_factory=list)


@dataclass
class Pragmatics:
    politeness_system: str = "simple"  # simple | complex | hierarchical
    formality: list[str] = field(default_factory=list)
    topic_prominence: bool = False
    evidentiality: bool = False
    common_speech_acts: list[str] = field(default_factory=list)


@dataclass
class Word:
    """A lexicon entry."""

    form: str
    meaning: str
    part_of_speech: str = "noun"
    etymology: str = ""
    frequency: float = 50.0  # 0-100
    register: str = "neutral"  # colloquial | neutral | formal | technical | archaic
    connotation: str = "neutral"  # positive | neutral | negative

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Word:
        return cls(**data)


@dataclass
class Dialect:
    """A regional derivative of a language: phonetic and lexical overrides only."""

    id: str
    name: str
    base_language: str
    region: str
    speakers: int = 0
    phonetic_shifts: dict[str, str] = field(default_factory=dict)
    lexical_differences: dict[str, str] = field(default_factory=dict)  # lexicon key -> local form
    grammatical_features: list[str] = field(default_factory=list)

    def render(self, key: str, form: str) -> str:
        """Render a word as spoken in this dialect."""
        if key in self.lexical_differences:
            return self.lexical_differences[key]
        return "".join(self.phonetic_shifts.get(ch, ch) for ch in form)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Dialect:
        return cls(
            id=data["id"],
            name=data["name"],
            base_language=data["base_language"],
            region=data["region"],
            speakers=data.get("speakers", 0),
            phonetic_shifts=dict(data.get("phonetic_shifts", {})),
            lexical_differences=dict(data.get("lexical_differences", {})),
            grammatical_features=list(data.get("grammatical_features", [])),
        )


@dataclass
class Language:
    """Per-population linguistic record."""

    id: str
    name: str
    family: str
    branch: str = "proto"
    speakers: int = 0
    origin: str = "primordial"
    age: int = 0  # generations since creation

    phonology: Phonology = field(default_factory=Phonology)
    morphology: Morphology = field(default_factory=Morphology)
    syntax: Syntax = field(default_factory=Syntax)
    semantics: Semantics = field(default_factory=Semantics)
    pragmatics: Pragmatics = field(default_factory=Pragmatics)

    lexicon: dict[str, Word] = field(default_factory=dict)

    parent_language: str | None = None
    dialects: list[str] = field(default_factory=list)
    loanwords: dict[str, str] = field(default_factory=dict)  # borrowed form -> source language

    cultural_concepts: list[str] = field(default_factory=list)
    taboo_words: list[str] = field(default_factory=list)
    honorifics: dict[str, str] = field(default_factory=dict)  # status -> marker

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary (no live references)."""
        data = asdict(self)
        data["lexicon"] = {key: word.to_dict() for key, word in self.lexicon.items()}
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Language:
        """Rebuild a Language from ``to_dict`` output."""
        return cls(
            id=data["id"],
            name=data["name"],
            family=data["family"],
            branch=data.get("branch", "proto"),
            speakers=data.get("speakers", 0),
            origin=data.get("origin", "primordial"),
            age=data.get("age", 0),
            phonology=Phonology(**data.get("phonology", {})),
            morphology=Morphology(**data.get("morphology", {})),
            syntax=Syntax(**data.get("syntax", {})),
            semantics=Semantics(**data.get("semantics", {})),
            pragmatics=Pragmatics(**data.get("pragmatics", {})),
            lexicon={
                key: Word.from_dict(word) for key, word in data.get("lexicon", {}).items()
            },
            parent_language=data.get("parent_language"),
            dialects=list(data.get("dialects", [])),
            loanwords=dict(data.get("loanwords", {})),
            cultural_concepts=list(data.get("cultural_concepts", [])),
            taboo_words=list(data.get("taboo_words", [])),
            honorifics=dict(data.get("honorifics", {})),
        )

    def copy(self) -> Language:
        """Return a deep copy of this language."""
        return Language.from_dict(self.to_dict())
