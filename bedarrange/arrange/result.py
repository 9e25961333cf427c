"""Result of an arrange run."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from bedarrange.models import UNARRANGED, ArrangeItem
from bedarrange.utils import get_logger

logger = get_logger("arrange.result")


@dataclass
class ResultItem:
    """Final placement of one item, keyed by the scene object id."""
    item_id: str
    x: Optional[float] = None
    y: Optional[float] = None
    bed_idx: int = UNARRANGED
    rotation: float = 0.0
    inset: float = 0.0  # Conversion inset, undone when applied to the scene

    @property
    def is_arranged(self) -> bool:
        """Check if the item was placed on a bed."""
        return self.bed_idx > UNARRANGED

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.item_id,
            "x": self.x,
            "y": self.y,
            "bed_idx": self.bed_idx,
            "rotation": self.rotation,
            "arranged": self.is_arranged,
        }


@dataclass
class ArrangeResult:
    """Placements produced by an arrange task, in merge order."""
    items: List[ResultItem] = field(default_factory=list)
    cancelled: bool = False
    processing_time: float = 0.0

    def add_item(self, item: ArrangeItem) -> None:
        """Record the current placement of an item."""
        if item.is_arranged:
            self.items.append(ResultItem(
                item_id=item.id,
                x=item.x,
                y=item.y,
                bed_idx=item.bed_idx,
                rotation=item.rotation,
                inset=item.inset,
            ))
        else:
            self.items.append(ResultItem(item_id=item.id, inset=item.inset))

    def add_items(self, items: Iterable[ArrangeItem]) -> None:
        """Record the current placement of several items."""
        for item in items:
            self.add_item(item)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ResultItem]:
        return iter(self.items)

    def get(self, item_id: str) -> Optional[ResultItem]:
        """Look up the placement of an item by id."""
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    @property
    def arranged(self) -> List[ResultItem]:
        """Items placed on a bed."""
        return [item for item in self.items if item.is_arranged]

    @property
    def unarranged(self) -> List[ResultItem]:
        """Items that could not be placed."""
        return [item for item in self.items if not item.is_arranged]

    @property
    def bed_count(self) -> int:
        """Number of beds spanned by the placements."""
        return max((item.bed_idx for item in self.items if item.is_arranged), default=UNARRANGED) + 1

    def apply_on(self, scene) -> int:
        """
        Write placements back onto the scene objects.

        Unplaced items keep their previous placement.

        Args:
            scene: Scene whose objects carry ``id``, ``x``, ``y``, ``bed_idx`` and ``rotation``

        Returns:
            Number of objects updated
        """
        objects: Dict[str, object] = {}
        scene.for_each_arrangeable(lambda obj: objects.setdefault(obj.id, obj))

        updated = 0
        for item in self.items:
            if not item.is_arranged:
                continue
            obj = objects.get(item.item_id)
            if obj is None:
                logger.warning(f"No scene object for arranged item {item.item_id}")
                continue

            obj.x = item.x + item.inset
            obj.y = item.y + item.inset
            obj.bed_idx = item.bed_idx
            obj.rotation = item.rotation
            updated += 1

        return updated

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "items": [item.to_dict() for item in self.items],
            "bed_count": self.bed_count,
            "unarranged": [item.item_id for item in self.unarranged],
            "cancelled": self.cancelled,
            "processing_time": self.processing_time,
        }
