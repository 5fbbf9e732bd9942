"""
Shared type definitions for the isosort system.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    """Compass direction on the staggered grid."""

    TOP = "T"  # Two rows up, same column
    TOP_RIGHT = "TR"
    RIGHT = "R"
    BOTTOM_RIGHT = "BR"
    BOTTOM = "B"  # Two rows down, same column
    BOTTOM_LEFT = "BL"
    LEFT = "L"
    TOP_LEFT = "TL"

    @classmethod
    def all(cls) -> tuple[Direction, ...]:
        """All eight directions, clockwise from TOP."""
        return (
            cls.TOP,
            cls.TOP_RIGHT,
            cls.RIGHT,
            cls.BOTTOM_RIGHT,
            cls.BOTTOM,
            cls.BOTTOM_LEFT,
            cls.LEFT,
            cls.TOP_LEFT,
        )

    @classmethod
    def diagonals(cls) -> tuple[Direction, ...]:
        return (cls.TOP_RIGHT, cls.BOTTOM_RIGHT, cls.BOTTOM_LEFT, cls.TOP_LEFT)


class Relation(Enum):
    """Outcome of comparing two footprints."""

    GREATER = "greater"  # In front, draws after
    LESS = "less"  # Behind, draws before
    INCOMPARABLE = "incomparable"  # No occlusion either way

    def inverse(self) -> Relation:
        if self is Relation.GREATER:
            return Relation.LESS
        if self is Relation.LESS:
            return Relation.GREATER
        return self


class SortMethod(Enum):
    """Depth assignment algorithm."""

    TOPOLOGICAL = "topological"
    PARTIAL_CMP = "partial_cmp"

    @classmethod
    def all(cls) -> tuple[SortMethod, ...]:
        return (cls.TOPOLOGICAL, cls.PARTIAL_CMP)


# =============================================================================
# Grid Definition Types
# =============================================================================


@dataclass(frozen=True)
class Cell:
    """
    A grid cell addressed by offset coordinates.

    Equality uses both coordinates, ordering uses the row (y) only: two cells
    in the same row are neither less nor greater than one another.
    """

    x: int
    y: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Cell coordinates must be non-negative, got ({self.x}, {self.y})")

    def __lt__(self, other: Cell) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self.y < other.y

    def __le__(self, other: Cell) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self.y <= other.y

    def __gt__(self, other: Cell) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self.y > other.y

    def __ge__(self, other: Cell) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self.y >= other.y

    def __repr__(self) -> str:
        return f"Cell(x: {self.x}, y: {self.y})"


@dataclass(frozen=True)
class MapSize:
    """Grid bounds: valid cells are [0, width) x [0, height)."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Map size must be positive, got {self.width}x{self.height}")

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height


@dataclass(frozen=True)
class Dimensions:
    """Footprint size: width x depth on the ground, height in layers."""

    width: int
    depth: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.depth < 0 or self.height < 0:
            raise ValueError(
                f"Dimensions must be non-negative, got {self.width}x{self.depth}x{self.height}"
            )

    @property
    def area(self) -> int:
        return self.width * self.depth

    @property
    def is_flat(self) -> bool:
        return self.height == 0
