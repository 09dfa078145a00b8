"""terminal output for resolving and installing pods."""

import sys
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressManager:
    """
    owns the console the installer reports through.

    live displays are only used on a terminal; piped output gets one plain
    line per step instead, so logs stay readable.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._enabled = sys.stdout.isatty() and not sys.stdout.closed

    def print(self, *args, **kwargs):
        self.console.print(*args, **kwargs)

    @contextmanager
    def spinner(self, description: str, transient: bool = True) -> Iterator[Optional[TaskID]]:
        if not self._enabled:
            self.console.print(f"{description}...")
            yield None
            return

        columns = (SpinnerColumn(), TextColumn("{task.description}"))
        with Progress(*columns, console=self.console, transient=transient) as progress:
            yield progress.add_task(description, total=None)

    @contextmanager
    def package_progress(self, description: str, total: int) -> Iterator[Tuple[object, Optional[TaskID]]]:
        """
        count pods through a step such as downloading.

        yields (progress, task_id); task_id is None when nothing is displayed,
        and the progress object then ignores every call.
        """
        if total == 0 or not self._enabled:
            if total:
                self.console.print(f"{description} ({total})...")
            yield _DummyProgress(), None
            return

        columns = (
            TextColumn("{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
        )
        with Progress(*columns, console=self.console) as progress:
            yield progress, progress.add_task(description, total=total)


class _DummyProgress:
    """accepts the Progress calls the installer makes and does nothing."""

    def add_task(self, description: str, total: Optional[int] = None, **kwargs) -> TaskID:
        return TaskID(0)

    def update(self, task_id: TaskID, **kwargs):
        pass

    def advance(self, task_id: TaskID, advance: float = 1):
        pass
