"""Rich terminal renderer for genetics, languages, and the social hierarchy."""

from __future__ import annotations

import io
import sys
from typing import TYPE_CHECKING

from rich.console import Console, RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from civitas.heredity.engine import HeredityEngine
    from civitas.language.engine import LinguisticDriftEngine
    from civitas.society.registry import SocialHierarchyRegistry


def _make_console() -> Console:
    """Create a Rich Console that works on Windows (force UTF-8)."""
    if sys.platform == "win32" and hasattr(sys.stdout, "buffer"):
        utf8_stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
        return Console(file=utf8_stdout, force_terminal=True)
    return Console()


MUTATION_STYLES = {
    "beneficial": "green",
    "neutral": "white",
    "detrimental": "red",
}


class CivilizationRenderer:
    """Builds Rich panels for engine state.

    ``build_*`` return renderables, ``render_*`` return them as plain text
    (for logs and tests), and ``print_*`` write them to the console.
    """

    def __init__(self, console: Console | None = None, width: int = 100, bar_length: int = 20):
        self.console = console or _make_console()
        self.width = width
        self.bar_length = bar_length

    def _bar(self, value: float) -> str:
        filled = int(value / 100 * self.bar_length)
        empty = self.bar_length - filled
        return f"[{'█' * filled}{'░' * empty}] {value:5.1f}"

    def _to_text(self, renderable: RenderableType) -> str:
        buffer = io.StringIO()
        Console(file=buffer, width=self.width, color_system=None).print(renderable)
        return buffer.getvalue()

    # --- Genetics ---

    def build_genetics(self, engine: HeredityEngine, title: str = "") -> Panel:
        """Panel with identity, trait bars and mutations for one genetic code."""
        code = engine.code

        table = Table(show_header=True, header_style="bold", expand=False)
        table.add_column("Trait")
        table.add_column("Value")
        for name, value in code.rna.aptitudes.as_dict().items():
            table.add_row(escape(name), self._bar(value))
        for name, value in code.rna.resistances.as_dict().items():
            table.add_row(f"{name} resistance", self._bar(value))

        lines = [
            f"Species: {escape(code.dna.species)} | Race: {code.dna.race.value} "
            f"| Generation: {code.dna.generation}",
        ]
        if code.dna.mutations:
            for mutation in code.dna.mutations:
                style = MUTATION_STYLES[mutation.type.value]
                entry = escape(f"{mutation.id}: {mutation.effect}")
                lines.append(f"[{style}]{entry}[/{style}]")
        else:
            lines.append("Mutations: none")

        group = Table.grid()
        group.add_row("\n".join(lines))
        group.add_row(table)
        return Panel(group, title=escape(title or code.dna.bloodline), border_style="cyan")

    def render_genetics(self, engine: HeredityEngine, title: str = "") -> str:
        return self._to_text(self.build_genetics(engine, title))

    # --- Language ---

    def build_language(self, engine: LinguisticDriftEngine, max_words: int = 10) -> Panel:
        """Panel with typology and a sample of the lexicon."""
        language = engine.language

        header = (
            f"{escape(language.family)} > {escape(language.branch)} | age {language.age}\n"
            f"Word order: {language.syntax.word_order} | Cases: {language.morphology.cases} "
            f"| Tenses: {escape(', '.join(language.morphology.tenses))}"
        )
        if language.dialects:
            header += f"\nDialects: {escape(', '.join(language.dialects))}"

        table = Table(show_header=True, header_style="bold")
        table.add_column("Key")
        table.add_column("Form")
        table.add_column("Meaning")
        table.add_column("Register")
        for key, word in list(language.lexicon.items())[:max_words]:
            cells = (key, word.form, word.meaning, word.register)
            table.add_row(*(escape(cell) for cell in cells))

        group = Table.grid()
        group.add_row(header)
        group.add_row(table if language.lexicon else "Lexicon: empty")
        return Panel(group, title=escape(language.name), border_style="magenta")

    def render_language(self, engine: LinguisticDriftEngine, max_words: int = 10) -> str:
        return self._to_text(self.build_language(engine, max_words))

    # --- Society ---

    def build_society(self, registry: SocialHierarchyRegistry) -> Panel:
        """Panel listing clans and nations with power scores and relations."""
        clans = Table(title="Clans", show_header=True, header_style="bold")
        clans.add_column("Clan")
        clans.add_column("Symbol")
        clans.add_column("Members", justify="right")
        clans.add_column("Power", justify="right")
        clans.add_column("Allies / Rivals")
        for clan in registry.clans():
            clans.add_row(
                escape(clan.name),
                escape(clan.symbol),
                str(len(clan.members)),
                f"{registry.calculate_clan_power(clan.id):.1f}",
                f"{len(clan.allied_clans)} / {len(clan.rival_clans)}",
            )

        nations = Table(title="Nations", show_header=True, header_style="bold")
        nations.add_column("Nation")
        nations.add_column("Government")
        nations.add_column("Power", justify="right")
        nations.add_column("Allies")
        nations.add_column("Treaties")
        for nation in registry.nations():
            nations.add_row(
                escape(nation.name),
                escape(nation.government_type),
                f"{registry.calculate_nation_power(nation.id):.1f}",
                escape(", ".join(nation.allies)) or "-",
                escape(", ".join(f"{t.type.value} {t.id}" for t in nation.treaties)) or "-",
            )

        group = Table.grid()
        group.add_row(clans)
        group.add_row(nations)
        return Panel(group, title="Civilization", border_style="green")

    def render_society(self, registry: SocialHierarchyRegistry) -> str:
        return self._to_text(self.build_society(registry))

    # --- Printing ---

    def print_genetics(self, engine: HeredityEngine, title: str = "") -> None:
        self.console.print(self.build_genetics(engine, title))

    def print_language(self, engine: LinguisticDriftEngine) -> None:
        self.console.print(self.build_language(engine))

    def print_society(self, registry: SocialHierarchyRegistry) -> None:
        self.console.print(self.build_society(registry))

    def print_header(self, text: str) -> None:
        self.console.print(f"\n  [bold cyan]═══ {escape(text)} ═══[/bold cyan]")
