# Path: packager/engine/progress.py
"""
Progress Events

Long-running operations report progress as events to a callback instead of
drawing on the terminal themselves. The CLI renders them (see
packager/cli/progress_display.py); tests collect them in a list.

Event lifecycle per label:
    start (total known or None) -> advance* -> finish | fail
"""

from dataclasses import dataclass
from typing import Callable, Optional

KIND_START = 'start'
KIND_ADVANCE = 'advance'
KIND_FINISH = 'finish'
KIND_FAIL = 'fail'


@dataclass(frozen=True)
class ProgressEvent:
    """
    Attributes:
        label: Operation being reported (e.g., 'Downloading 86Box')
        kind: start, advance, finish or fail
        completed: Units done so far (bytes or entries)
        total: Units expected; None means indeterminate
        advance: Units added by this event
    """
    label: str
    kind: str
    completed: int = 0
    total: Optional[int] = None
    advance: int = 0

    @property
    def determinate(self) -> bool:
        return self.total is not None

    @property
    def fraction(self) -> Optional[float]:
        if not self.total:
            return None
        return min(self.completed / self.total, 1.0)


ProgressCallback = Callable[[ProgressEvent], None]


class ProgressTracker:
    """
    Emits events for one operation.

    A tracker with no callback is a no-op, so engine code never has to
    check whether anyone is listening.
    """

    def __init__(self, label: str, callback: Optional[ProgressCallback] = None):
        self.label = label
        self.callback = callback
        self.completed = 0
        self.total: Optional[int] = None

    def start(self, total: Optional[int] = None) -> None:
        self.total = total
        self.completed = 0
        self._emit(KIND_START)

    def advance(self, amount: int = 1) -> None:
        self.completed += amount
        self._emit(KIND_ADVANCE, advance=amount)

    def finish(self) -> None:
        self._emit(KIND_FINISH)

    def fail(self) -> None:
        self._emit(KIND_FAIL)

    def _emit(self, kind: str, advance: int = 0) -> None:
        if self.callback is None:
            return
        self.callback(ProgressEvent(
            label=self.label,
            kind=kind,
            completed=self.completed,
            total=self.total,
            advance=advance,
        ))


__all__ = [
    'ProgressEvent',
    'ProgressCallback',
    'ProgressTracker',
    'KIND_START',
    'KIND_ADVANCE',
    'KIND_FINISH',
    'KIND_FAIL',
]
