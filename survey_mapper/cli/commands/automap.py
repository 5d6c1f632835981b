"""Auto-map command: suggest standardized mappings for a term list.

A thin adapter between click and :class:`AutoMappingUseCase`:
1. Reads the term file and the mapping store
2. Runs matching in the background with a progress bar
3. Prints the suggestions and optionally accepts them
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import cast

import click
from rich.console import Console

from ...domain.entities.auto_mapping_config import SimilarityMetric
from ...domain.exceptions import SurveyMapperError
from ...infrastructure.io.term_extraction import TermFileOptions
from ..helpers import build_container, store_options
from ..presenters.progress import ProgressPresenter
from ..presenters.summary import SummaryPresenter

console = Console()


@dataclass(frozen=True)
class AutoMapCommandOptions:
    config_file: Path | None
    store_path: Path | None
    threshold: float | None
    metric: str | None
    use_fuzzy_matching: bool
    use_synonyms: bool
    use_existing_mappings: bool
    accept: bool
    learn: bool
    default_source: str
    verbose: int

    @classmethod
    def from_kwargs(cls, options: dict[str, object]) -> AutoMapCommandOptions:
        return cls(
            config_file=cast("Path | None", options.get("config_file")),
            store_path=cast("Path | None", options.get("store_path")),
            threshold=cast("float | None", options.get("threshold")),
            metric=cast("str | None", options.get("metric")),
            use_fuzzy_matching=cast("bool", options["use_fuzzy_matching"]),
            use_synonyms=cast("bool", options["use_synonyms"]),
            use_existing_mappings=cast("bool", options["use_existing_mappings"]),
            accept=cast("bool", options["accept"]),
            learn=cast("bool", options["learn"]),
            default_source=cast("str", options["default_source"]),
            verbose=cast("int", options["verbose"]),
        )

    def config_overrides(self) -> dict[str, object]:
        overrides: dict[str, object] = {
            "use_fuzzy_matching": self.use_fuzzy_matching,
            "use_synonyms": self.use_synonyms,
            "use_existing_mappings": self.use_existing_mappings,
        }
        if self.threshold is not None:
            overrides["confidence_threshold"] = self.threshold
        if self.metric is not None:
            overrides["similarity_metric"] = self.metric
        return overrides


@click.command()
@click.argument(
    "terms_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@store_options
@click.option(
    "--threshold",
    type=click.FloatRange(0.0, 1.0),
    help="Minimum confidence for a suggestion (default: from config, 0.8)",
)
@click.option(
    "--metric",
    type=click.Choice([m.value for m in SimilarityMetric]),
    help="String-similarity metric for fuzzy matching (default: dice)",
)
@click.option(
    "--fuzzy/--no-fuzzy",
    "use_fuzzy_matching",
    default=True,
    show_default=True,
    help="Score terms by string similarity",
)
@click.option(
    "--synonyms/--no-synonyms",
    "use_synonyms",
    default=True,
    show_default=True,
    help="Score terms that share a synonym group",
)
@click.option(
    "--existing/--no-existing",
    "use_existing_mappings",
    default=True,
    show_default=True,
    help="Match against existing mappings (learned corrections always apply)",
)
@click.option("--accept", is_flag=True, help="Save every suggestion to the store")
@click.option(
    "--learn",
    is_flag=True,
    help="With --accept, remember accepted terms as learned corrections",
)
@click.option(
    "--source",
    "default_source",
    default="default",
    show_default=True,
    help="Source id for rows without a 'source' column",
)
def automap_command(terms_file: Path, **options: object) -> None:
    """Suggest standardized mappings for the unmapped terms in TERMS_FILE.

    TERMS_FILE is a CSV file with a 'term' column and optional 'source',
    'frequency' and 'kind' columns. Terms already in a mapping are skipped.

    Examples:

    \b
        # Preview suggestions
        survey-mapper automap specialties.csv

    \b
        # Stricter matching, saved straight to the store
        survey-mapper automap specialties.csv --threshold 0.9 --accept
    """
    command_options = AutoMapCommandOptions.from_kwargs(dict(options))
    container = build_container(
        console,
        config_file=command_options.config_file,
        store_path=command_options.store_path,
        verbose=command_options.verbose,
    )
    presenter = SummaryPresenter(console)
    try:
        config = container.settings.auto_mapping_config(
            **command_options.config_overrides()
        )
        use_case = container.create_auto_mapping_use_case()
        use_case.load()
        terms = container.create_term_reader().read_terms(
            terms_file, TermFileOptions(default_source=command_options.default_source)
        )
        unmapped = use_case.unmapped_terms(terms)
        if not unmapped:
            console.print("[green]All terms are already mapped[/green]")
            return

        with ProgressPresenter(console, len(unmapped)) as progress:
            result = use_case.run_auto_map(
                unmapped, config, on_progress=progress.update
            )
        if result is None:
            raise click.ClickException("Auto-map run was superseded")
        presenter.present_run(result)

        if command_options.accept:
            accepted = use_case.accept_suggestions(
                result.suggestions, learn=command_options.learn
            )
            presenter.present_accept(accepted)
    except SurveyMapperError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        container.shutdown()
