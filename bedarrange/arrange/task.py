"""Two-pass arrange task.

Printable items are arranged first, around every unselected item. Unprintable
items are then arranged on their own beds, numbered after the last bed that
holds printable content, so no bed mixes printable and unprintable parts.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from bedarrange.arrange.control import TwoStepArrangeCtl
from bedarrange.arrange.result import ArrangeResult
from bedarrange.arrange.scene import DefaultItemConverter, ItemConverter, Scene
from bedarrange.models import (
    INSET_EPSILON,
    ArrangeItem,
    ArrangeSettings,
    BedShape,
    get_bed_count,
)
from bedarrange.nesting import ArrangeCtl, Arranger, NullCtl, create_arranger
from bedarrange.utils import get_logger

logger = get_logger("arrange.task")


@dataclass
class PartitionGroup:
    """Selected and unselected items of one printability class."""
    selected: List[ArrangeItem] = field(default_factory=list)
    unselected: List[ArrangeItem] = field(default_factory=list)

    def swap(self) -> None:
        """Exchange the selected and unselected items."""
        self.selected, self.unselected = self.unselected, self.selected

    def __len__(self) -> int:
        return len(self.selected) + len(self.unselected)


def extract_selected(
    task: "ArrangeTask",
    scene: Scene,
    converter: ItemConverter,
) -> None:
    """
    Sort the scene's objects into the task's four item groups.

    Each object lands in exactly one group, keyed by its printable and
    selected flags, in enumeration order. Unselected objects are converted
    with a small negative inset. If nothing is selected, everything is.

    Args:
        task: Task whose groups are filled
        scene: Scene to enumerate
        converter: Object to item converter
    """

    def visit(obj) -> None:
        selected = obj.is_selected()
        printable = obj.is_printable()

        item = converter.convert(obj, 0.0 if selected else -INSET_EPSILON)

        group = task.printable if printable else task.unprintable
        if selected:
            group.selected.append(item)
        else:
            group.unselected.append(item)

    scene.for_each_arrangeable(visit)

    # If the selection was empty arrange everything
    if not task.printable.selected and not task.unprintable.selected:
        task.printable.swap()
        task.unprintable.swap()
        if len(task.printable) + len(task.unprintable):
            logger.info("Nothing selected, arranging all objects")

    logger.debug(
        f"Partitioned printable {len(task.printable.selected)}/{len(task.printable.unselected)}, "
        f"unprintable {len(task.unprintable.selected)}/{len(task.unprintable.unselected)} "
        f"(selected/unselected)"
    )


def compute_bed_shift(printable: PartitionGroup) -> int:
    """Index of the first bed free of printable content, at least 1.

    Bed 0 is kept for printable parts even when there are none.
    """
    return max(
        1,
        get_bed_count(printable.selected),
        get_bed_count(printable.unselected),
    )


def prepare_fixed_unselected(items: List[ArrangeItem], shift: int) -> None:
    """
    Move fixed items down by ``shift`` beds, in place.

    Items that end up below bed 0 sit on beds reserved for printable parts;
    they cannot collide with the unprintable pass and are removed.
    """
    for item in items:
        item.bed_idx -= shift

    items[:] = [item for item in items if item.is_arranged]


@dataclass
class ArrangeTask:
    """
    Arrange request built from a scene snapshot.

    Example:
        task = ArrangeTask.create(scene)
        result = task.process()
        result.apply_on(scene)
    """
    settings: ArrangeSettings = field(default_factory=ArrangeSettings)
    bed: BedShape = field(default_factory=BedShape)
    printable: PartitionGroup = field(default_factory=PartitionGroup)
    unprintable: PartitionGroup = field(default_factory=PartitionGroup)
    _processed: bool = field(default=False, init=False, repr=False)

    @classmethod
    def create(
        cls,
        scene: Scene,
        converter: Optional[ItemConverter] = None,
    ) -> "ArrangeTask":
        """
        Build a task from a scene.

        Args:
            scene: Scene snapshot providing settings, bed and objects
            converter: Object to item converter (defaults to DefaultItemConverter)

        Returns:
            A task ready to process

        Raises:
            SceneError: If the scene is malformed
        """
        task = cls(settings=scene.settings(), bed=scene.bed())
        extract_selected(task, scene, converter or DefaultItemConverter())
        return task

    @property
    def selected_count(self) -> int:
        """Number of items that will be arranged."""
        return len(self.printable.selected) + len(self.unprintable.selected)

    def process(
        self,
        ctl: Optional[ArrangeCtl] = None,
        arranger: Optional[Arranger] = None,
    ) -> ArrangeResult:
        """
        Arrange the selected items.

        Args:
            ctl: Progress and cancellation control
            arranger: Packing engine (defaults to one built from the task settings)

        Returns:
            Placement of every selected item, printable items first

        Raises:
            ArrangeError: If the packing engine fails
            RuntimeError: If the task was already processed
        """
        if self._processed:
            raise RuntimeError("ArrangeTask has already been processed")
        self._processed = True

        ctl = ctl or NullCtl()
        arranger = arranger or create_arranger(self.settings)
        start_time = time.monotonic()

        logger.info(
            f"Arranging {len(self.printable.selected)} printable and "
            f"{len(self.unprintable.selected)} unprintable items"
        )

        subctl = TwoStepArrangeCtl(ctl, self)

        fixed_items = list(self.printable.unselected)

        # Unselected unprintable objects must not be overlapped by movable
        # printable ones either
        fixed_items.extend(self.unprintable.unselected)

        arranger.arrange(self.printable.selected, fixed_items, self.bed, subctl)
        logger.debug(f"Printable pass done, {get_bed_count(self.printable.selected)} beds used")

        # Unprintable items go to the first bed without printable items
        shift = compute_bed_shift(self.printable)
        prepare_fixed_unselected(self.unprintable.unselected, shift)
        logger.debug(
            f"Unprintable beds start at {shift}, "
            f"{len(self.unprintable.unselected)} fixed unprintable items kept"
        )

        arranger.arrange(self.unprintable.selected, self.unprintable.unselected, self.bed, ctl)

        result = ArrangeResult()
        result.add_items(self.printable.selected)

        for item in self.unprintable.selected:
            if item.is_arranged:
                item.bed_idx += shift

            result.add_item(item)

        result.cancelled = ctl.was_cancelled()
        result.processing_time = time.monotonic() - start_time

        logger.info(
            f"Arranged {len(result.arranged)}/{len(result)} items on {result.bed_count} beds"
            + (" (cancelled)" if result.cancelled else "")
        )
        return result


def arrange_scene(
    scene: Scene,
    ctl: Optional[ArrangeCtl] = None,
    arranger: Optional[Arranger] = None,
    apply: bool = True,
) -> ArrangeResult:
    """
    Arrange a scene in one call.

    Args:
        scene: Scene to arrange
        ctl: Progress and cancellation control
        arranger: Packing engine
        apply: Write placements back onto the scene objects

    Returns:
        Arrange result
    """
    task = ArrangeTask.create(scene)
    result = task.process(ctl, arranger)
    if apply:
        result.apply_on(scene)
    return result
