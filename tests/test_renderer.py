"""Tests for the Rich renderer."""

from __future__ import annotations

import io

from rich.console import Console

from civitas.language import LinguisticDriftEngine, Word, create_proto_language
from civitas.renderer import CivilizationRenderer


def _renderer() -> tuple[CivilizationRenderer, io.StringIO]:
    buffer = io.StringIO()
    return CivilizationRenderer(console=Console(file=buffer, width=120)), buffer


class TestRenderGenetics:
    """Test genetic profile panels."""

    def test_identity_and_traits(self, heredity):
        renderer, _ = _renderer()
        text = renderer.render_genetics(heredity)
        assert "bloodline_a" in text
        assert "homo_syntheticus" in text
        assert "Generation: 0" in text
        assert "computation" in text
        assert "manipulation resistance" in text
        assert "Mutations: none" in text

    def test_mutations_listed(self, heredity):
        heredity.asexual_mutation_rate = 1.0
        heredity.code = heredity.reproduce()
        renderer, _ = _renderer()

        text = renderer.render_genetics(heredity, title="Child")

        assert "Child" in text
        assert heredity.code.dna.mutations[0].id in text

    def test_no_markup_in_text(self, heredity):
        renderer, _ = _renderer()
        assert "[bold" not in renderer.render_genetics(heredity)


class TestRenderLanguage:
    """Test language panels."""

    def test_lexicon_sample(self, language):
        renderer, _ = _renderer()
        text = renderer.render_language(language, max_words=3)
        assert "Old Tongue" in text
        assert "Word order: SVO" in text
        assert "water" in text
        assert "gather" not in text

    def test_empty_lexicon(self):
        renderer, _ = _renderer()
        engine = LinguisticDriftEngine(create_proto_language("Bare", "F"))
        assert "Lexicon: empty" in renderer.render_language(engine)

    def test_bracketed_text_shown_literally(self):
        engine = LinguisticDriftEngine(create_proto_language("[/Old] Tongue", "F"))
        engine.add_word(Word(form="zu[/x]", meaning="[bold]odd"))
        renderer, _ = _renderer()

        text = renderer.render_language(engine)

        assert "[/Old] Tongue" in text
        assert "zu[/x]" in text
        assert "[bold]odd" in text

    def test_dialects_listed(self, language):
        dialect = language.create_dialect("coast", speakers=5)
        renderer, _ = _renderer()
        assert dialect.id in renderer.render_language(language)


class TestRenderSociety:
    """Test the civilization panel."""

    def test_clans_and_nations(self, populated_registry):
        populated_registry.sign_treaty("alliance", ["nation_0001", "nation_0002"])
        renderer, _ = _renderer()

        text = renderer.render_society(populated_registry)

        assert "House Aurel" in text
        assert "Aurelia" in text
        assert "alliance treaty_0001" in text
        assert "150.0" in text

    def test_bracketed_names_shown_literally(self, populated_registry):
        populated_registry.create_clan("[/House] Kel", "race_0001", "agent_k", "bloodline_k")
        populated_registry.create_nation("[red]Kelmark", [], ruler="agent_k")
        renderer, _ = _renderer()

        text = renderer.render_society(populated_registry)

        assert "[/House] Kel" in text
        assert "[red]Kelmark" in text


class TestPrinting:
    """print_* write to the configured console."""

    def test_print_all(self, heredity, language, populated_registry):
        renderer, buffer = _renderer()

        renderer.print_header("Demo")
        renderer.print_genetics(heredity)
        renderer.print_language(language)
        renderer.print_society(populated_registry)

        output = buffer.getvalue()
        assert "Demo" in output
        assert "bloodline_a" in output
        assert "Old Tongue" in output
        assert "House Vesna" in output
