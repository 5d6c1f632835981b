"""Commands that inspect and edit the mapping store."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from ...domain.entities.terms import SourceTerm
from ...domain.exceptions import SurveyMapperError
from ...domain.services.mapping_queries import (
    calculate_mapping_stats,
    filter_learned_corrections,
    filter_mappings,
    filter_unmapped_terms,
)
from ...infrastructure.io.term_extraction import TermFileOptions
from ..helpers import build_container, store_options
from ..presenters.summary import SummaryPresenter

console = Console()


@click.command()
@store_options
@click.option("--search", default="", help="Only mappings matching these words")
def list_mappings_command(
    config_file: Path | None, store_path: Path | None, verbose: int, search: str
) -> None:
    """List standardized mappings."""
    container = build_container(
        console, config_file=config_file, store_path=store_path, verbose=verbose
    )
    try:
        use_case = container.create_auto_mapping_use_case()
        use_case.load()
        mappings = filter_mappings(use_case.store.mappings, search)
        SummaryPresenter(console).present_mappings(mappings)
    except SurveyMapperError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        container.shutdown()


@click.command()
@click.argument("name")
@store_options
@click.option("--term", "terms", multiple=True, help="Member term text (repeatable)")
@click.option(
    "--source", default="default", show_default=True, help="Source id of the terms"
)
def create_mapping_command(
    name: str,
    config_file: Path | None,
    store_path: Path | None,
    verbose: int,
    terms: tuple[str, ...],
    source: str,
) -> None:
    """Create a standardized mapping called NAME."""
    container = build_container(
        console, config_file=config_file, store_path=store_path, verbose=verbose
    )
    try:
        use_case = container.create_auto_mapping_use_case()
        use_case.load()
        members = [SourceTerm(text=text, source_id=source) for text in terms]
        mapping = use_case.create_mapping(name, members)
        console.print(f"[green]✓[/green] Created mapping {mapping.id}")
    except SurveyMapperError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        container.shutdown()


@click.command()
@click.argument("mapping_id")
@store_options
def delete_mapping_command(
    mapping_id: str, config_file: Path | None, store_path: Path | None, verbose: int
) -> None:
    """Delete a mapping; its terms become unmapped again."""
    container = build_container(
        console, config_file=config_file, store_path=store_path, verbose=verbose
    )
    try:
        use_case = container.create_auto_mapping_use_case()
        use_case.load()
        mapping = use_case.delete_mapping(mapping_id)
        console.print(
            f"[green]✓[/green] Deleted {mapping.standardized_name!r} "
            f"({len(mapping.source_terms)} terms unmapped)"
        )
    except SurveyMapperError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        container.shutdown()


@click.command()
@store_options
@click.option("--search", default="", help="Only corrections matching these words")
def list_learned_command(
    config_file: Path | None, store_path: Path | None, verbose: int, search: str
) -> None:
    """List learned corrections."""
    container = build_container(
        console, config_file=config_file, store_path=store_path, verbose=verbose
    )
    try:
        use_case = container.create_auto_mapping_use_case()
        use_case.load()
        corrections = filter_learned_corrections(
            use_case.store.learned_corrections, search
        )
        SummaryPresenter(console).present_corrections(corrections)
    except SurveyMapperError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        container.shutdown()


@click.command()
@click.argument("original")
@click.argument("corrected")
@store_options
def learn_command(
    original: str,
    corrected: str,
    config_file: Path | None,
    store_path: Path | None,
    verbose: int,
) -> None:
    """Always map the term ORIGINAL to CORRECTED."""
    container = build_container(
        console, config_file=config_file, store_path=store_path, verbose=verbose
    )
    try:
        use_case = container.create_auto_mapping_use_case()
        use_case.load()
        use_case.record_learned_correction(original, corrected)
        console.print(f"[green]✓[/green] Learned {original!r} -> {corrected!r}")
    except SurveyMapperError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        container.shutdown()


@click.command()
@click.argument("original")
@store_options
def forget_command(
    original: str, config_file: Path | None, store_path: Path | None, verbose: int
) -> None:
    """Remove the learned correction for ORIGINAL."""
    container = build_container(
        console, config_file=config_file, store_path=store_path, verbose=verbose
    )
    try:
        use_case = container.create_auto_mapping_use_case()
        use_case.load()
        if not use_case.remove_learned_correction(original):
            raise click.ClickException(f"No learned correction for {original!r}")
        console.print(f"[green]✓[/green] Forgot {original!r}")
    except SurveyMapperError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        container.shutdown()


@click.command()
@click.argument(
    "terms_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@store_options
@click.option("--search", default="", help="Only terms matching these words")
@click.option("--source-id", help="Only terms from this source")
@click.option("--min-frequency", type=click.IntRange(min=0), help="Minimum frequency")
def list_unmapped_command(
    terms_file: Path,
    config_file: Path | None,
    store_path: Path | None,
    verbose: int,
    search: str,
    source_id: str | None,
    min_frequency: int | None,
) -> None:
    """List the terms in TERMS_FILE that no mapping covers."""
    container = build_container(
        console, config_file=config_file, store_path=store_path, verbose=verbose
    )
    try:
        use_case = container.create_auto_mapping_use_case()
        use_case.load()
        terms = container.create_term_reader().read_terms(
            terms_file, TermFileOptions()
        )
        unmapped = use_case.unmapped_terms(terms)
        presenter = SummaryPresenter(console)
        presenter.present_unmapped(
            filter_unmapped_terms(
                unmapped,
                search=search,
                source_id=source_id,
                min_frequency=min_frequency,
            )
        )
        presenter.present_stats(
            calculate_mapping_stats(use_case.store.mappings, unmapped)
        )
    except SurveyMapperError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        container.shutdown()


@click.command()
@store_options
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def reset_command(
    config_file: Path | None, store_path: Path | None, verbose: int, yes: bool
) -> None:
    """Delete every mapping and learned correction."""
    if not yes:
        click.confirm("Delete all mappings and learned corrections?", abort=True)
    container = build_container(
        console, config_file=config_file, store_path=store_path, verbose=verbose
    )
    try:
        use_case = container.create_auto_mapping_use_case()
        use_case.load()
        use_case.reset()
        console.print("[green]✓[/green] Mapping store cleared")
    except SurveyMapperError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        container.shutdown()
