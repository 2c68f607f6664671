"""Language: proto-language creation and generational linguistic drift.

- Language / Word / Dialect: the linguistic data model
- LinguisticDriftEngine: phonetic, lexical, grammatical and semantic drift,
  dialects, loanwords, translation lookup and linguistic distance
- create_proto_language: ancestral language with a fixed seed grammar
"""

from __future__ import annotations

from civitas.language.engine import (
    DIALECT_SHIFT_PAIRS,
    PHONETIC_SHIFT_RULES,
    LinguisticDriftEngine,
    create_proto_language,
)
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

__all__ = [
    "DIALECT_SHIFT_PAIRS",
    "PHONETIC_SHIFT_RULES",
    "Dialect",
    "Language",
    "LinguisticDriftEngine",
    "Morphology",
    "Phonology",
    "Pragmatics",
    "Semantics",
    "Syntax",
    "Word",
    "create_proto_language",
]
