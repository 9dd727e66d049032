# Path: packager/cli/progress_display.py
"""
Progress Display

Renders engine progress events with rich.
Determinate operations get a bar with percentage and ETA; operations of
unknown size get a spinner. Finished bars are cleared from the screen.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from packager.core.logger import console as shared_console
from packager.engine.progress import (
    ProgressEvent,
    KIND_START,
    KIND_ADVANCE,
    KIND_FINISH,
    KIND_FAIL,
)


class RichProgressReporter:
    """
    Consumes ProgressEvents; one rich task per label.

    Example:
        with RichProgressReporter() as reporter:
            coordinator = PackageCoordinator(progress=reporter.handle)
            await coordinator.run(versions)
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console if console else shared_console
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[blue]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
        )
        self._tasks: dict[str, TaskID] = {}

    def handle(self, event: ProgressEvent) -> None:
        """Progress callback for engine components."""
        if event.kind == KIND_START:
            self._remove(event.label)
            self._tasks[event.label] = self.progress.add_task(
                event.label,
                total=event.total,
            )
        elif event.kind == KIND_ADVANCE:
            task_id = self._tasks.get(event.label)
            if task_id is not None:
                self.progress.advance(task_id, event.advance)
        elif event.kind == KIND_FINISH:
            self._remove(event.label)
        elif event.kind == KIND_FAIL:
            if self._remove(event.label):
                self.console.print(f"[red]✗ {escape(event.label)} failed[/red]")

    def _remove(self, label: str) -> bool:
        task_id = self._tasks.pop(label, None)
        if task_id is None:
            return False
        self.progress.remove_task(task_id)
        return True

    def __enter__(self):
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.progress.stop()


__all__ = ['RichProgressReporter']
