from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from rich.console import Console

    from ...application.models import AcceptResult, AutoMapResult
    from ...domain.entities.mapping import StandardizedMapping
    from ...domain.entities.terms import SourceTerm
    from ...domain.services.correction_application import (
        CorrectionApplicationResult,
    )
    from ...domain.services.mapping_queries import MappingStats

MAX_MEMBERS_SHOWN = 5


def _members_label(texts: Sequence[str]) -> str:
    shown = ", ".join(escape(text) for text in texts[:MAX_MEMBERS_SHOWN])
    hidden = len(texts) - MAX_MEMBERS_SHOWN
    if hidden > 0:
        shown += f" [dim](+{hidden} more)[/dim]"
    return shown


class SummaryPresenter:
    pass

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.console = console

    def present_run(self, result: AutoMapResult) -> None:
        self.console.print()
        if result.suggestions:
            table = Table(
                title="Mapping Suggestions",
                show_header=True,
                header_style="bold cyan",
                border_style="bright_blue",
                title_style="bold magenta",
            )
            table.add_column("Standardized Name", style="cyan", no_wrap=True)
            table.add_column("Confidence", justify="right", style="yellow")
            table.add_column("Terms", justify="right")
            table.add_column("Members", overflow="fold")
            for suggestion in result.suggestions:
                table.add_row(
                    escape(suggestion.standardized_name),
                    f"{suggestion.confidence:.0%}",
                    str(len(suggestion.members)),
                    _members_label(suggestion.member_texts),
                )
            self.console.print(table)
        else:
            self.console.print("[yellow]No suggestions above the threshold[/yellow]")

        matched = sum(len(s.members) for s in result.suggestions)
        self.console.print(
            f"[bold]Matched:[/bold] [green]{matched}[/green]  "
            f"[bold]Unmatched:[/bold] [yellow]{len(result.unmatched)}[/yellow]"
        )

    def present_accept(self, result: AcceptResult) -> None:
        if not result.changed_mapping_ids:
            self.console.print("[dim]Nothing to accept[/dim]")
            return
        if result.created_mapping_ids:
            self.console.print(
                f"[green]✓[/green] Created {len(result.created_mapping_ids)} mappings"
            )
        if result.extended_mapping_ids:
            self.console.print(
                "[green]✓[/green] Extended "
                f"{len(result.extended_mapping_ids)} mappings"
            )

    def present_mappings(self, mappings: Sequence[StandardizedMapping]) -> None:
        if not mappings:
            self.console.print("[dim]No mappings[/dim]")
            return
        table = Table(title="Standardized Mappings", header_style="bold cyan")
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Standardized Name", style="cyan")
        table.add_column("Terms", justify="right")
        table.add_column("Members", overflow="fold")
        for mapping in mappings:
            table.add_row(
                mapping.id,
                escape(mapping.standardized_name),
                str(len(mapping.source_terms)),
                _members_label([term.text for term in mapping.source_terms]),
            )
        self.console.print(table)

    def present_corrections(self, corrections: Mapping[str, str]) -> None:
        if not corrections:
            self.console.print("[dim]No learned corrections[/dim]")
            return
        table = Table(title="Learned Corrections", header_style="bold cyan")
        table.add_column("Original", style="white")
        table.add_column("Corrected", style="cyan")
        for original, corrected in sorted(corrections.items()):
            table.add_row(escape(original), escape(corrected))
        self.console.print(table)

    def present_unmapped(self, terms: Sequence[SourceTerm]) -> None:
        if not terms:
            self.console.print("[green]All terms are mapped[/green]")
            return
        table = Table(title="Unmapped Terms", header_style="bold cyan")
        table.add_column("Term", style="white")
        table.add_column("Source", style="dim")
        table.add_column("Frequency", justify="right", style="yellow")
        for term in terms:
            table.add_row(
                escape(term.text), escape(term.source_id), str(term.frequency)
            )
        self.console.print(table)

    def present_stats(self, stats: MappingStats) -> None:
        self.console.print(
            f"[bold]Mappings:[/bold] {stats.total_mappings}  "
            f"[bold]Mapped terms:[/bold] {stats.total_source_terms}  "
            f"[bold]Unmapped:[/bold] {stats.total_unmapped}  "
            f"[bold]Avg terms/mapping:[/bold] {stats.average_terms_per_mapping:.1f}"
        )
        if stats.most_common_unmapped_source:
            self.console.print(
                "[dim]Most unmapped terms come from "
                f"{escape(stats.most_common_unmapped_source)}[/dim]"
            )

    def present_corrections_applied(self, result: CorrectionApplicationResult) -> None:
        self.console.print(
            f"[green]✓[/green] Applied {result.corrections_applied} corrections "
            f"across {result.rows_processed} rows"
        )
        for term, count in sorted(result.terms_updated.items()):
            self.console.print(f"  [dim]{escape(term)}: {count}[/dim]")
