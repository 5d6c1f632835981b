from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import override

from rich.console import Console
from rich.markup import escape

from ...application.ports.services import LoggerPort


class LogLevel(IntEnum):
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


@dataclass(slots=True)
class LogContext:
    request_id: int | None = None
    term_kind: str = ""
    source_id: str = ""
    operation: str = ""
    start_time: datetime = field(default_factory=datetime.now)

    def elapsed_ms(self) -> float:
        return (datetime.now() - self.start_time).total_seconds() * 1000


def _empty_stats() -> dict[str, int]:
    return {
        "runs_started": 0,
        "runs_completed": 0,
        "suggestions": 0,
        "stale_responses": 0,
        "mapping_changes": 0,
        "warnings": 0,
        "errors": 0,
    }


class ConsoleLogger(LoggerPort):
    pass

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        super().__init__()
        self.console = console or Console()
        self.verbosity = verbosity
        self._context: LogContext | None = None
        self._stats: dict[str, int] = _empty_stats()

    def set_context(self, **kwargs: object) -> None:
        if self._context is None:
            self._context = LogContext()
        for key, value in kwargs.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

    def clear_context(self) -> None:
        self._context = None

    @override
    def info(self, message: str, *, level: int = LogLevel.NORMAL) -> None:
        if self.verbosity >= level:
            prefix = self._get_prefix()
            self.console.print(f"{prefix}{message}")

    @override
    def verbose(self, message: str) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            prefix = self._get_prefix()
            self.console.print(f"[dim]{prefix}{message}[/dim]")

    @override
    def debug(self, message: str) -> None:
        if self.verbosity >= LogLevel.DEBUG:
            prefix = self._get_prefix()
            self.console.print(f"[dim cyan]{prefix}{message}[/dim cyan]")

    @override
    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    @override
    def warning(self, message: str) -> None:
        self._stats["warnings"] += 1
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    @override
    def error(self, message: str) -> None:
        self._stats["errors"] += 1
        self.console.print(f"[red]✗[/red] {message}")

    @override
    def log_run_start(
        self, request_id: int, term_count: int, mapping_count: int, threshold: float
    ) -> None:
        self.set_context(request_id=request_id, operation="auto-map")
        self._stats["runs_started"] += 1
        self.verbose(
            f"Auto-mapping {term_count:,} terms against {mapping_count:,} mappings"
        )
        self.debug(f"  Confidence threshold: {threshold:.1%}")

    @override
    def log_run_complete(
        self, request_id: int, suggestion_count: int, unmatched_count: int
    ) -> None:
        self._stats["runs_completed"] += 1
        self._stats["suggestions"] += suggestion_count
        elapsed = self._context.elapsed_ms() if self._context else None
        msg = f"Request {request_id}: {suggestion_count} suggestions"
        if unmatched_count:
            msg += f", {unmatched_count} terms left unmapped"
        self.verbose(msg)
        if elapsed is not None and self.verbosity >= LogLevel.DEBUG:
            self.debug(f"  Elapsed: {elapsed:.0f} ms")
        self.clear_context()

    @override
    def log_stale_response(self, request_id: int, latest_request_id: int) -> None:
        self._stats["stale_responses"] += 1
        self.debug(
            f"Discarding response for request {request_id} "
            f"(latest is {latest_request_id})"
        )

    @override
    def log_mapping_change(self, reason: str, mapping_ids: tuple[str, ...]) -> None:
        self._stats["mapping_changes"] += 1
        count = len(mapping_ids)
        noun = "mapping" if count == 1 else "mappings"
        self.verbose(f"Mappings {reason}: {count} {noun}")
        if self.verbosity >= LogLevel.DEBUG:
            for mapping_id in mapping_ids:
                self.debug(f"    {mapping_id}")

    def log_final_stats(self) -> None:
        if self.verbosity >= LogLevel.VERBOSE:
            self.console.print()
            self.console.print("[dim]Mapping Statistics:[/dim]")
            self.console.print(
                f"[dim]  Runs completed: {self._stats['runs_completed']}[/dim]"
            )
            self.console.print(
                f"[dim]  Suggestions: {self._stats['suggestions']:,}[/dim]"
            )
            if self._stats["stale_responses"] > 0:
                self.console.print(
                    f"[dim]  Stale responses discarded: "
                    f"{self._stats['stale_responses']}[/dim]"
                )
            if self._stats["warnings"] > 0:
                self.console.print(
                    f"[dim yellow]  Warnings: {self._stats['warnings']}[/dim yellow]"
                )
            if self._stats["errors"] > 0:
                self.console.print(
                    f"[dim red]  Errors: {self._stats['errors']}[/dim red]"
                )

    def get_stats(self) -> dict[str, int]:
        return self._stats.copy()

    def reset_stats(self) -> None:
        self._stats = _empty_stats()

    def _get_prefix(self) -> str:
        if self._context is None or self.verbosity < LogLevel.DEBUG:
            return ""
        parts: list[str] = []
        if self._context.request_id is not None:
            parts.append(f"#{self._context.request_id}")
        if self._context.term_kind:
            parts.append(self._context.term_kind)
        return escape(f"[{':'.join(parts)}] ") if parts else ""
