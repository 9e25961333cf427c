"""Scene snapshots consumed by the arrange task.

A scene exposes the arrange settings, the bed shape and an enumeration of
arrangeable objects. ``ModelScene`` is an in-memory scene that can be read
from and written to JSON.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Union, runtime_checkable

from bedarrange.config import get_settings
from bedarrange.models import UNARRANGED, ArrangeItem, ArrangeSettings, BedShape
from bedarrange.utils import get_logger

logger = get_logger("arrange.scene")


class SceneError(ValueError):
    """Malformed scene snapshot."""


@runtime_checkable
class Arrangeable(Protocol):
    """An object that can take part in an arrange run."""

    def is_selected(self) -> bool:
        ...

    def is_printable(self) -> bool:
        ...


@runtime_checkable
class Scene(Protocol):
    """Snapshot of a design: settings, bed and arrangeable objects."""

    def settings(self) -> ArrangeSettings:
        ...

    def bed(self) -> BedShape:
        ...

    def for_each_arrangeable(self, visit: Callable[[Arrangeable], None]) -> None:
        ...


class ItemConverter(Protocol):
    """Turns a scene object into a packable item."""

    def convert(self, obj: Arrangeable, inset: float) -> ArrangeItem:
        ...


@dataclass
class SceneObject:
    """A design object with a rectangular footprint."""
    id: str
    width: float  # Footprint along X before rotation
    depth: float  # Footprint along Y before rotation
    height: float = 0.0
    x: Optional[float] = None  # Lower-left corner on its bed
    y: Optional[float] = None
    bed_idx: int = UNARRANGED
    rotation: float = 0.0
    selected: bool = False
    printable: bool = True

    def __post_init__(self):
        """Validate geometry."""
        if not self.id:
            raise SceneError("Object id must not be empty")
        if self.width <= 0 or self.depth <= 0:
            raise SceneError(f"Object {self.id} has non-positive footprint {self.width}x{self.depth}")
        if self.rotation not in (0.0, 90.0):
            raise SceneError(f"Object {self.id} rotation must be 0 or 90, got {self.rotation}")
        if self.bed_idx > UNARRANGED and (self.x is None or self.y is None):
            raise SceneError(f"Object {self.id} is on bed {self.bed_idx} without a position")

    def is_selected(self) -> bool:
        return self.selected

    def is_printable(self) -> bool:
        return self.printable

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
            "selected": self.selected,
            "printable": self.printable,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SceneObject":
        """Create from dictionary."""
        if not isinstance(data, dict):
            raise SceneError(f"Object entry must be a JSON object, got {data!r}")

        missing = [key for key in ("id", "width", "depth") if key not in data]
        if missing:
            raise SceneError(f"Object is missing {', '.join(missing)}: {data}")

        try:
            return cls(
                id=str(data["id"]),
                width=float(data["width"]),
                depth=float(data["depth"]),
                height=float(data.get("height", 0.0)),
                x=None if data.get("x") is None else float(data["x"]),
                y=None if data.get("y") is None else float(data["y"]),
                bed_idx=int(data.get("bed_idx", UNARRANGED)),
                rotation=float(data.get("rotation", 0.0)),
                selected=_flag(data, "selected", False),
                printable=_flag(data, "printable", True),
            )
        except SceneError:
            raise
        except (TypeError, ValueError) as e:
            raise SceneError(f"Invalid object {data.get('id')}: {e}") from e


def _flag(data: Dict[str, Any], key: str, default: bool) -> bool:
    """Read a boolean field. Only JSON true/false are accepted."""
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise SceneError(f"Object {data.get('id')} field {key} must be true or false, got {value!r}")
    return value


class DefaultItemConverter:
    """Converts ``SceneObject``-like objects into ``ArrangeItem``s.

    A negative inset shrinks the footprint on every side, keeping it centred
    on the object's original outline.
    """

    def convert(self, obj: Arrangeable, inset: float) -> ArrangeItem:
        placed = obj.bed_idx > UNARRANGED and obj.x is not None and obj.y is not None
        return ArrangeItem(
            id=obj.id,
            width=obj.width + 2 * inset,
            depth=obj.depth + 2 * inset,
            height=obj.height,
            x=obj.x - inset if placed else None,
            y=obj.y - inset if placed else None,
            bed_idx=obj.bed_idx if placed else UNARRANGED,
            rotation=obj.rotation,
            printable=obj.is_printable(),
            inset=inset,
        )


class ModelScene:
    """In-memory scene over a list of ``SceneObject``s."""

    def __init__(
        self,
        objects: Optional[Iterable[SceneObject]] = None,
        bed: Optional[BedShape] = None,
        settings: Optional[ArrangeSettings] = None,
    ):
        """
        Initialize the scene.

        Args:
            objects: Design objects, in enumeration order
            bed: Bed shape (defaults to the configured plate)
            settings: Arrange settings (defaults to the configured values)
        """
        app_settings = get_settings()
        self.objects: List[SceneObject] = list(objects or [])
        self._bed = bed or BedShape.from_settings(app_settings)
        self._settings = settings or ArrangeSettings.from_settings(app_settings)

        seen = set()
        for obj in self.objects:
            if obj.id in seen:
                raise SceneError(f"Duplicate object id: {obj.id}")
            seen.add(obj.id)

    def settings(self) -> ArrangeSettings:
        return self._settings

    def bed(self) -> BedShape:
        return self._bed

    def for_each_arrangeable(self, visit: Callable[[Arrangeable], None]) -> None:
        for obj in self.objects:
            visit(obj)

    def get_object(self, object_id: str) -> Optional[SceneObject]:
        """Look up an object by id."""
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        return None

    def to_dict(self) -> dict:
        """Convert to the JSON scene layout."""
        return {
            "bed": self._bed.to_dict(),
            "settings": self._settings.to_dict(),
            "objects": [obj.to_dict() for obj in self.objects],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelScene":
        """Create from the JSON scene layout.

        Missing ``bed`` or ``settings`` entries fall back to the application
        settings.

        Raises:
            SceneError: If the layout is malformed
        """
        if not isinstance(data, dict):
            raise SceneError("Scene must be a JSON object")

        app_settings = get_settings()
        try:
            bed = None
            if data.get("bed") is not None:
                bed_data = data["bed"]
                bed = BedShape(
                    width=float(bed_data.get("width", app_settings.plate_width)),
                    depth=float(bed_data.get("depth", app_settings.plate_depth)),
                )

            settings = None
            if data.get("settings") is not None:
                merged = ArrangeSettings.from_settings(app_settings).to_dict()
                merged.update(data["settings"])
                settings = ArrangeSettings.from_dict(merged)
        except SceneError:
            raise
        except (AttributeError, TypeError, ValueError) as e:
            raise SceneError(f"Invalid scene configuration: {e}") from e

        objects = data.get("objects", [])
        if not isinstance(objects, list):
            raise SceneError("Scene objects must be a list")

        return cls(
            objects=[SceneObject.from_dict(obj) for obj in objects],
            bed=bed,
            settings=settings,
        )


def load_scene(path: Union[str, Path]) -> ModelScene:
    """
    Read a scene from a JSON file.

    Args:
        path: Path to the scene file

    Returns:
        The loaded scene

    Raises:
        SceneError: If the file is not a valid scene
        OSError: If the file cannot be read
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SceneError(f"{path} is not valid JSON: {e}") from e

    scene = ModelScene.from_dict(data)
    logger.debug(f"Loaded {len(scene.objects)} objects from {path}")
    return scene


def save_scene(scene: ModelScene, path: Union[str, Path]) -> Path:
    """Write a scene to a JSON file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(scene.to_dict(), indent=2), encoding="utf-8")
    logger.debug(f"Saved {len(scene.objects)} objects to {path}")
    return path
