"""Arrange module for laying out a scene across multiple beds.

Splits a scene into printable and unprintable items, arranges them in two
passes and merges both into one bed numbering.
"""

from bedarrange.arrange.control import (
    EventCtl,
    TwoStepArrangeCtl,
)
from bedarrange.arrange.result import (
    ArrangeResult,
    ResultItem,
)
from bedarrange.arrange.scene import (
    Arrangeable,
    DefaultItemConverter,
    ItemConverter,
    ModelScene,
    Scene,
    SceneError,
    SceneObject,
    load_scene,
    save_scene,
)
from bedarrange.arrange.task import (
    ArrangeTask,
    PartitionGroup,
    arrange_scene,
    compute_bed_shift,
    extract_selected,
    prepare_fixed_unselected,
)

__all__ = [
    "EventCtl",
    "TwoStepArrangeCtl",
    "ArrangeResult",
    "ResultItem",
    "Arrangeable",
    "DefaultItemConverter",
    "ItemConverter",
    "ModelScene",
    "Scene",
    "SceneError",
    "SceneObject",
    "load_scene",
    "save_scene",
    "ArrangeTask",
    "PartitionGroup",
    "arrange_scene",
    "compute_bed_shift",
    "extract_selected",
    "prepare_fixed_unselected",
]
