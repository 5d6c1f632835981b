from __future__ import annotations

from typing import TYPE_CHECKING

from rich.progress import BarColumn, Progress, TaskID, TaskProgressColumn, TextColumn

if TYPE_CHECKING:
    from types import TracebackType

    from rich.console import Console

    from ...application.models import ProgressMessage


class ProgressPresenter:
    """Shows worker progress for one auto-map run.

    ``update`` may be called from the host's pump thread.
    """

    def __init__(self, console: Console, term_count: int) -> None:
        super().__init__()
        self.console = console
        self.term_count = term_count
        self.last_progress = 0.0
        self.updates = 0
        self._progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        )
        self._task: TaskID | None = None

    def __enter__(self) -> ProgressPresenter:
        self._progress.start()
        self._task = self._progress.add_task(
            f"Matching {self.term_count:,} terms", total=100.0
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def update(self, message: ProgressMessage) -> None:
        self.updates += 1
        self.last_progress = message.progress
        if self._task is not None:
            self._progress.update(self._task, completed=message.progress)

    @property
    def is_complete(self) -> bool:
        return self.last_progress >= 100.0
