"""Packing engine and progress control interfaces.

Any object with a matching ``arrange`` method can be used as a packing
engine; the arrange task never depends on a concrete solver.
"""

from typing import List, Protocol, Sequence, runtime_checkable

from bedarrange.models import ArrangeItem, BedShape


class ArrangeError(Exception):
    """Unrecoverable packing engine failure (e.g. degenerate geometry)."""


@runtime_checkable
class ArrangeCtl(Protocol):
    """Progress and cancellation channel between caller and engine."""

    def update_status(self, remaining: int) -> None:
        """Report how many items are still waiting to be placed."""
        ...

    def was_cancelled(self) -> bool:
        """Check whether the caller asked to stop."""
        ...


class NullCtl:
    """Control that ignores progress and never cancels."""

    def update_status(self, remaining: int) -> None:
        pass

    def was_cancelled(self) -> bool:
        return False


@runtime_checkable
class Arranger(Protocol):
    """Protocol for packing engines."""

    def arrange(
        self,
        movable: List[ArrangeItem],
        fixed: Sequence[ArrangeItem],
        bed: BedShape,
        ctl: ArrangeCtl,
    ) -> None:
        """Place ``movable`` items in place around the ``fixed`` obstacles.

        Every movable item ends either arranged (position and bed index) or
        unarranged. Items are never reordered, dropped or duplicated. The
        engine polls ``ctl.was_cancelled()`` before each placement.
        """
        ...
