"""Nesting module for placing part footprints on beds.

Provides the packing engine interface and the default multi-bed nester.
"""

from bedarrange.nesting.arranger import (
    ArrangeCtl,
    ArrangeError,
    Arranger,
    NullCtl,
)
from bedarrange.nesting.batch_nester import (
    BatchNester,
    create_arranger,
)

__all__ = [
    "ArrangeCtl",
    "ArrangeError",
    "Arranger",
    "NullCtl",
    "BatchNester",
    "create_arranger",
]
