"""Core data types shared by the arrange task and the packing engines.

Bed indices are signed integers. ``UNARRANGED`` marks an item that has no
bed; every non-negative index names a logical bed of identical shape.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from bedarrange.config import Settings

# Bed index of an item that is not placed on any bed
UNARRANGED = -1

# Inset (mm) applied to unselected items when converted, so fixed obstacles
# never reject a movable neighbour that touches them exactly
INSET_EPSILON = 1e-4


class NestingStrategy(str, Enum):
    """Order in which the packing engine visits movable items."""
    DENSITY = "density"  # Largest footprint first
    HEIGHT = "height"  # Tallest first
    SPACING = "spacing"  # Largest diagonal first
    SEQUENTIAL = "sequential"  # Enumeration order


@dataclass(frozen=True)
class BedShape:
    """Rectangular bed outline. All beds of a plan share this shape."""
    width: float = 256.0
    depth: float = 256.0

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("Bed width must be positive")
        if self.depth <= 0:
            raise ValueError("Bed depth must be positive")

    @property
    def area(self) -> float:
        """Total bed area in mm^2."""
        return self.width * self.depth

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"width": self.width, "depth": self.depth}

    @classmethod
    def from_settings(cls, settings: Settings) -> "BedShape":
        """Create the default bed from application settings."""
        return cls(width=settings.plate_width, depth=settings.plate_depth)


@dataclass(frozen=True)
class ArrangeSettings:
    """Settings handed to the packing engine for one arrange run."""
    part_spacing: float = 5.0  # Minimum gap between parts
    edge_margin: float = 10.0  # Unusable border around each bed
    strategy: NestingStrategy = NestingStrategy.DENSITY
    allow_rotation: bool = True  # Allow 90 degree rotations
    max_beds: Optional[int] = None  # None means as many beds as needed

    def __post_init__(self) -> None:
        if isinstance(self.strategy, str) and not isinstance(self.strategy, NestingStrategy):
            object.__setattr__(self, "strategy", NestingStrategy(self.strategy))
        if self.part_spacing < 0:
            raise ValueError("Part spacing must be non-negative")
        if self.edge_margin < 0:
            raise ValueError("Edge margin must be non-negative")
        if self.max_beds is not None and self.max_beds < 1:
            raise ValueError("max_beds must be at least 1")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "part_spacing": self.part_spacing,
            "edge_margin": self.edge_margin,
            "strategy": self.strategy.value,
            "allow_rotation": self.allow_rotation,
            "max_beds": self.max_beds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ArrangeSettings":
        """Create from dictionary."""
        return cls(
            part_spacing=data.get("part_spacing", 5.0),
            edge_margin=data.get("edge_margin", 10.0),
            strategy=NestingStrategy(data.get("strategy", "density")),
            allow_rotation=data.get("allow_rotation", True),
            max_beds=data.get("max_beds"),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ArrangeSettings":
        """Create from application settings."""
        return cls(
            part_spacing=settings.part_spacing,
            edge_margin=settings.edge_margin,
            strategy=NestingStrategy(settings.strategy),
            allow_rotation=settings.allow_rotation,
            max_beds=settings.max_beds,
        )


@dataclass
class ArrangeItem:
    """A packable footprint converted from a scene object.

    ``width`` and ``depth`` describe the unrotated footprint with the
    conversion inset already applied. ``x``/``y`` is the lower-left corner of
    the placed footprint in bed coordinates, or None when unplaced.
    """
    id: str
    width: float
    depth: float
    height: float = 0.0
    x: Optional[float] = None
    y: Optional[float] = None
    bed_idx: int = UNARRANGED
    rotation: float = 0.0  # 0 or 90 degrees about Z
    printable: bool = True
    inset: float = 0.0

    @property
    def is_arranged(self) -> bool:
        """Check if the item sits on a bed."""
        return self.bed_idx > UNARRANGED

    @property
    def placed_width(self) -> float:
        """Footprint width as placed (accounts for rotation)."""
        return self.depth if self.rotation == 90.0 else self.width

    @property
    def placed_depth(self) -> float:
        """Footprint depth as placed (accounts for rotation)."""
        return self.width if self.rotation == 90.0 else self.depth

    def place(self, x: float, y: float, bed_idx: int, rotation: float = 0.0) -> None:
        """Put the item on a bed."""
        self.x = x
        self.y = y
        self.bed_idx = bed_idx
        self.rotation = rotation

    def set_unarranged(self) -> None:
        """Take the item off any bed."""
        self.x = None
        self.y = None
        self.bed_idx = UNARRANGED

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "width": self.width,
            "depth": self.depth,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "bed_idx": self.bed_idx,
            "rotation": self.rotation,
            "printable": self.printable,
        }


def get_bed_count(items: Iterable[ArrangeItem]) -> int:
    """Number of beds spanned by the arranged items.

    Returns the highest bed index among arranged items plus one, or 0 when
    nothing is arranged.
    """
    return max((item.bed_idx for item in items if item.is_arranged), default=UNARRANGED) + 1
