"""Progress and cancellation controls for arrange runs."""

import threading
from typing import TYPE_CHECKING, Callable, Optional

from bedarrange.nesting.arranger import ArrangeCtl

if TYPE_CHECKING:
    from bedarrange.arrange.task import ArrangeTask


class TwoStepArrangeCtl:
    """Wraps the caller's control for the printable pass.

    Remaining counts from the printable pass are offset by the number of
    unprintable items still to come, so the caller sees one counter that
    never goes up between the two passes. Cancellation is forwarded as is.
    """

    def __init__(self, parent: ArrangeCtl, task: "ArrangeTask"):
        self._parent = parent
        self._task = task

    def update_status(self, remaining: int) -> None:
        self._parent.update_status(remaining + len(self._task.unprintable.selected))

    def was_cancelled(self) -> bool:
        return self._parent.was_cancelled()


class EventCtl:
    """
    Control driven by a callback and a ``threading.Event``.

    Example:
        cancel = threading.Event()
        ctl = EventCtl(on_status=lambda n: print(f"{n} left"), cancel_event=cancel)
        result = task.process(ctl)
    """

    def __init__(
        self,
        on_status: Optional[Callable[[int], None]] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self._on_status = on_status
        self.cancel_event = cancel_event or threading.Event()
        self.last_status: Optional[int] = None

    def update_status(self, remaining: int) -> None:
        self.last_status = remaining
        if self._on_status:
            self._on_status(remaining)

    def was_cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self) -> None:
        """Ask the running arrange to stop after the current placement."""
        self.cancel_event.set()
