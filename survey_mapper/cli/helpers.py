"""Shared option decorators and wiring for the CLI commands."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from ..config import ConfigLoader, MapperSettings
from ..infrastructure.container import DependencyContainer

if TYPE_CHECKING:
    from rich.console import Console

type Decorator = Callable[[Callable[..., Any]], Callable[..., Any]]


def store_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Add ``--config``, ``--store`` and ``-v`` to a command."""
    decorators: list[Decorator] = [
        click.option(
            "--config",
            "config_file",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="Path to a survey_mapper.toml config file "
            "(default: ./survey_mapper.toml)",
        ),
        click.option(
            "--store",
            "store_path",
            type=click.Path(dir_okay=False, path_type=Path),
            help="Mapping store JSON file (overrides config)",
        ),
        click.option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity level (e.g., -v, -vv)",
        ),
    ]
    for decorator in reversed(decorators):
        command = decorator(command)
    return command


def load_settings(config_file: Path | None, store_path: Path | None) -> MapperSettings:
    settings = ConfigLoader.load(config_file=config_file)
    if store_path is None:
        return settings
    return replace(settings, store_path=store_path)


def build_container(
    console: Console,
    *,
    config_file: Path | None,
    store_path: Path | None,
    verbose: int,
) -> DependencyContainer:
    try:
        settings = load_settings(config_file, store_path)
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    return DependencyContainer(settings=settings, verbose=verbose, console=console)
