"""Batch nesting of part footprints across multiple beds.

Bottom-left rectangle packing: every part goes to the lowest-indexed bed
that has room for it, at the lowest then left-most free position.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

from bedarrange.models import ArrangeItem, ArrangeSettings, BedShape, NestingStrategy
from bedarrange.nesting.arranger import ArrangeCtl, ArrangeError, NullCtl
from bedarrange.utils import get_logger

logger = get_logger("nesting.batch_nester")

# (x, y, width, depth) padded by the part spacing on the far sides
Rect = Tuple[float, float, float, float]

# Tolerance for comparing positions against the usable area bounds
_TOLERANCE = 1e-9


class BatchNester:
    """
    Multi-bed batch nester.

    Arranges movable parts around fixed obstacles, opening new beds when
    the current ones are full.
    """

    def __init__(self, config: Optional[ArrangeSettings] = None):
        """
        Initialize batch nester.

        Args:
            config: Arrange settings (spacing, margin, strategy, rotation)
        """
        self.config = config or ArrangeSettings()

    def arrange(
        self,
        movable: List[ArrangeItem],
        fixed: Sequence[ArrangeItem],
        bed: BedShape,
        ctl: Optional[ArrangeCtl] = None,
    ) -> None:
        """
        Arrange movable parts on the beds, in place.

        Args:
            movable: Parts to place; their positions and bed indices are overwritten
            fixed: Obstacles that keep their current bed and position
            bed: Shape shared by every bed
            ctl: Progress and cancellation control

        Raises:
            ArrangeError: If the bed has no usable area or a part has a degenerate footprint
        """
        ctl = ctl or NullCtl()
        bounds = self._usable_bounds(bed)

        for item in movable:
            if not (item.width > 0 and item.depth > 0):
                raise ArrangeError(
                    f"Degenerate footprint for {item.id}: {item.width}x{item.depth}mm"
                )

        occupied: Dict[int, List[Rect]] = {}
        for item in fixed:
            if item.is_arranged and item.x is not None and item.y is not None:
                occupied.setdefault(item.bed_idx, []).append(self._padded_rect(item))

        for item in movable:
            item.set_unarranged()

        order = self._sort_parts(movable)
        remaining = len(order)
        ctl.update_status(remaining)

        for item in order:
            if ctl.was_cancelled():
                logger.info(f"Arrange cancelled with {remaining} parts left")
                break

            placement = self._place_part(item, occupied, bounds)
            if placement:
                bed_idx, x, y, rotation = placement
                item.place(x, y, bed_idx, rotation)
                occupied.setdefault(bed_idx, []).append(self._padded_rect(item))
            else:
                logger.warning(f"Could not place {item.id} ({item.width:.1f}x{item.depth:.1f}mm)")

            remaining -= 1
            ctl.update_status(remaining)

    def _usable_bounds(self, bed: BedShape) -> Tuple[float, float, float, float]:
        """Usable area of a bed as (min_x, min_y, max_x, max_y)."""
        margin = self.config.edge_margin
        if bed.width <= 2 * margin or bed.depth <= 2 * margin:
            raise ArrangeError(
                f"Bed {bed.width}x{bed.depth}mm has no usable area with {margin}mm edge margin"
            )
        return (margin, margin, bed.width - margin, bed.depth - margin)

    def _padded_rect(self, item: ArrangeItem) -> Rect:
        spacing = self.config.part_spacing
        return (item.x, item.y, item.placed_width + spacing, item.placed_depth + spacing)

    def _sort_parts(self, parts: Sequence[ArrangeItem]) -> List[ArrangeItem]:
        """Order parts based on nesting strategy. The input is left untouched."""
        if self.config.strategy == NestingStrategy.DENSITY:
            # Sort by area (largest first)
            return sorted(parts, key=lambda p: p.width * p.depth, reverse=True)

        elif self.config.strategy == NestingStrategy.HEIGHT:
            # Sort by height (tallest first)
            return sorted(parts, key=lambda p: p.height, reverse=True)

        elif self.config.strategy == NestingStrategy.SPACING:
            # Sort by diagonal (largest first)
            return sorted(
                parts,
                key=lambda p: math.sqrt(p.width**2 + p.depth**2),
                reverse=True
            )

        else:  # SEQUENTIAL
            return list(parts)

    def _orientations(
        self,
        item: ArrangeItem,
        bounds: Tuple[float, float, float, float],
    ) -> List[Tuple[float, float, float]]:
        """Orientations (width, depth, rotation) that fit an empty bed."""
        min_x, min_y, max_x, max_y = bounds
        candidates = [(item.width, item.depth, 0.0)]
        if self.config.allow_rotation and item.width != item.depth:
            candidates.append((item.depth, item.width, 90.0))

        return [
            (w, d, rot) for w, d, rot in candidates
            if w <= max_x - min_x + _TOLERANCE and d <= max_y - min_y + _TOLERANCE
        ]

    def _place_part(
        self,
        item: ArrangeItem,
        occupied: Dict[int, List[Rect]],
        bounds: Tuple[float, float, float, float],
    ) -> Optional[Tuple[int, float, float, float]]:
        """Find (bed_idx, x, y, rotation) for a part, or None if it cannot go anywhere."""
        orientations = self._orientations(item, bounds)
        if not orientations:
            return None

        bed_idx = 0
        while self.config.max_beds is None or bed_idx < self.config.max_beds:
            on_bed = occupied.get(bed_idx, [])
            for width, depth, rotation in orientations:
                position = self._find_position(width, depth, on_bed, bounds)
                if position:
                    return (bed_idx, position[0], position[1], rotation)
            # An empty bed always has room, so this ends past the last occupied bed
            bed_idx += 1

        return None

    def _find_position(
        self,
        width: float,
        depth: float,
        occupied: List[Rect],
        bounds: Tuple[float, float, float, float],
    ) -> Optional[Tuple[float, float]]:
        """Find a position for a part using bottom-left algorithm."""
        min_x, min_y, max_x, max_y = bounds
        spacing = self.config.part_spacing

        xs = sorted({min_x} | {ox + ow for ox, _, ow, _ in occupied})
        ys = sorted({min_y} | {oy + od for _, oy, _, od in occupied})

        for y in ys:
            if y < min_y or y + depth > max_y + _TOLERANCE:
                continue
            for x in xs:
                if x < min_x or x + width > max_x + _TOLERANCE:
                    continue
                if self._can_place(x, y, width + spacing, depth + spacing, occupied):
                    return (x, y)

        return None

    def _can_place(
        self,
        x: float,
        y: float,
        width: float,
        depth: float,
        occupied: List[Rect],
    ) -> bool:
        """Check if a part can be placed at the given position."""
        for ox, oy, ow, od in occupied:
            # Check for overlap
            if (x < ox + ow and x + width > ox and
                y < oy + od and y + depth > oy):
                return False
        return True

    def plate_utilization(self, items: Sequence[ArrangeItem], bed: BedShape) -> Dict[int, float]:
        """Utilization percentage of each used bed's usable area."""
        min_x, min_y, max_x, max_y = self._usable_bounds(bed)
        usable_area = (max_x - min_x) * (max_y - min_y)

        used: Dict[int, float] = {}
        for item in items:
            if item.is_arranged:
                used[item.bed_idx] = used.get(item.bed_idx, 0.0) + item.width * item.depth

        return {
            bed_idx: min(100.0, (area / usable_area) * 100)
            for bed_idx, area in sorted(used.items())
        }


def create_arranger(settings: Optional[ArrangeSettings] = None) -> BatchNester:
    """Create the default packing engine for the given settings."""
    return BatchNester(config=settings)
