from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from ...domain.exceptions import SurveyMapperError
from ...domain.services.correction_application import apply_learned_corrections
from ..helpers import build_container, store_options
from ..presenters.summary import SummaryPresenter

console = Console()


@click.command()
@click.argument(
    "data_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--column", required=True, help="Column holding the raw terms")
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to write the corrected CSV (default: overwrite DATA_FILE)",
)
@store_options
def apply_corrections_command(
    data_file: Path,
    column: str,
    output_file: Path | None,
    config_file: Path | None,
    store_path: Path | None,
    verbose: int,
) -> None:
    """Rewrite COLUMN of DATA_FILE using the learned corrections."""
    container = build_container(
        console, config_file=config_file, store_path=store_path, verbose=verbose
    )
    try:
        use_case = container.create_auto_mapping_use_case()
        use_case.load()
        frame = container.create_term_reader().read(
            data_file, required_column=column
        )
        result = apply_learned_corrections(
            frame, column, use_case.store.learned_corrections
        )
        target = output_file or data_file
        try:
            result.frame.to_csv(target, index=False)
        except OSError as exc:
            raise click.ClickException(f"Failed to write {target}: {exc}") from exc
        SummaryPresenter(console).present_corrections_applied(result)
    except SurveyMapperError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        container.shutdown()
