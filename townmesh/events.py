"""Event types passed between the game systems."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

GridPosition = tuple[int, int]


@dataclass
class Event:
    """Base of all events; ``handled`` marks an event as consumed."""

    handled: bool = field(default=False, kw_only=True)


@dataclass
class EntityEvent(Event):
    """An event concerning a single entity."""

    entity: int


class BuildAction(Enum):
    """What a build event asks for."""

    END = 0
    SELECT = 1


class BuildShape(Enum):
    """Shape of the grid area covered by a build."""

    POINT = 0
    LINE = 1
    AREA = 2


def _in_range(value: int, low: int, high: int) -> bool:
    return low <= value <= high


def _in_box(point: GridPosition, a: GridPosition, b: GridPosition) -> bool:
    return _in_range(point[0], min(a[0], b[0]), max(a[0], b[0])) and _in_range(
        point[1], min(a[1], b[1]), max(a[1], b[1])
    )


@dataclass
class BuildEvent(EntityEvent):
    """A building process over one or more grid positions."""

    positions: list[GridPosition]
    building_type: Any
    action: BuildAction = BuildAction.END
    shape: BuildShape = BuildShape.LINE
    valid: bool = True

    def __post_init__(self) -> None:
        self.positions = [(int(x), int(y)) for x, y in self.positions]

    def inside_area(self, pos: Sequence[float], cell_size: float) -> bool:
        """Tell whether a world position falls on a grid cell covered by the build."""
        scale = 1 / float(cell_size)
        grid = (math.floor(scale * pos[0]), math.floor(scale * pos[1]))

        if self.shape is BuildShape.POINT:
            if not self.positions:
                raise ValueError("a point build needs one position")
            return self.positions[0] == grid
        if self.shape is BuildShape.AREA:
            if len(self.positions) < 2:
                raise ValueError("an area build needs two corner positions")
            return _in_box(grid, self.positions[0], self.positions[1])
        return any(
            _in_box(grid, start, end)
            for start, end in zip(self.positions, self.positions[1:])
        )


@dataclass
class CameraUpdateEvent(EntityEvent):
    """Reports which camera properties changed."""

    size_updated: bool
    position_updated: bool
    rotation_updated: bool


@dataclass
class ChunkEvent(EntityEvent):
    """An event concerning a terrain chunk."""

    chunk_position: GridPosition

    def __post_init__(self) -> None:
        x, y = self.chunk_position
        self.chunk_position = (int(x), int(y))


@dataclass
class ChunkCreatedEvent(ChunkEvent):
    """A terrain chunk was created."""


@dataclass
class ChunkUpdatedEvent(ChunkEvent):
    """Part of a terrain chunk changed."""

    area: Any


@dataclass
class ChunkDestroyedEvent(ChunkEvent):
    """A terrain chunk was destroyed."""


@dataclass
class EntityMoveEvent(EntityEvent):
    """An entity moved."""


@dataclass
class FramebufferSizeEvent(Event):
    """The framebuffer was resized."""

    width: int
    height: int


@dataclass
class KeyEvent(Event):
    """A keyboard key changed state."""

    key: int
    scancode: int
    action: int
    mods: int


@dataclass
class MouseMoveEvent(Event):
    """The cursor moved from (last_x, last_y) to (x, y)."""

    x: float
    y: float
    last_x: float
    last_y: float


@dataclass
class MouseButtonEvent(Event):
    """A mouse button changed state at (x, y)."""

    x: float
    y: float
    button: int
    action: int
    mods: int


@dataclass
class MouseScrollEvent(Event):
    """The mouse wheel was scrolled."""

    xoffset: float
    yoffset: float


@dataclass
class TerrainChangedEvent(EntityEvent):
    """The terrain of an entity changed."""

    regenerate_mesh: bool = False