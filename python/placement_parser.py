"""
Placement parsing utilities for isosort.

Provides two parsing formats:
1. Standard format: a dict mapping labels to placement strings
2. Concise format: one "label: placement" per line
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cell_types import Cell, Dimensions, Direction, MapSize
from isosort import DEFAULT_MAP_SIZE, Footprint, derive_footprint

__all__ = ["SavedPlacement", "parse_placement", "parse_placements", "parse_placements_concise"]

_FACING_CODES = {direction.value: direction for direction in Direction}


@dataclass(frozen=True)
class SavedPlacement:
    """Authored placement of one object, before its cells are derived."""

    anchor: Cell = field(default_factory=lambda: Cell(0, 0))
    dimensions: Dimensions = field(default_factory=lambda: Dimensions(1, 1, 1))
    facing: Direction = Direction.BOTTOM_RIGHT

    @classmethod
    def from_footprint(cls, footprint: Footprint) -> SavedPlacement:
        return cls(footprint.anchor, footprint.dimensions, footprint.facing)

    def to_footprint(self, map_size: MapSize = DEFAULT_MAP_SIZE) -> Footprint:
        return derive_footprint(self.anchor, self.dimensions, self.facing, map_size)


def _format_help() -> str:
    return (
        f"  Valid format: 'x,y WxDxH [FACING]'\n"
        f"    - x,y: anchor cell, non-negative integers (e.g. '0,3')\n"
        f"    - WxDxH: width, depth and height (e.g. '2x2x1')\n"
        f"    - FACING: optional direction code, default 'BR' (e.g. 'BR', 'BL')"
    )


def parse_placement(label: str, definition: str) -> SavedPlacement:
    """
    Parse a single placement string.

    Example:
        parse_placement("table", "0,3 2x2x1 BL")
        -> SavedPlacement(Cell(0, 3), Dimensions(2, 2, 1), Direction.BOTTOM_LEFT)

    Raises:
        ValueError: If the string does not match the format
    """
    tokens = definition.split()
    if len(tokens) not in (2, 3):
        raise ValueError(
            f"Invalid placement for '{label}': '{definition}'\n"
            f"  Expected 2 or 3 space-separated fields, got {len(tokens)}\n"
            f"{_format_help()}"
        )

    anchor_str, dims_str = tokens[0], tokens[1]

    anchor_parts = anchor_str.split(",")
    if len(anchor_parts) != 2 or not all(part.isdigit() for part in anchor_parts):
        raise ValueError(
            f"Invalid anchor for '{label}': '{anchor_str}'\n"
            f"{_format_help()}"
        )

    dims_parts = dims_str.lower().split("x")
    if len(dims_parts) != 3 or not all(part.isdigit() for part in dims_parts):
        raise ValueError(
            f"Invalid dimensions for '{label}': '{dims_str}'\n"
            f"{_format_help()}"
        )

    facing = Direction.BOTTOM_RIGHT
    if len(tokens) == 3:
        facing_str = tokens[2].upper()
        if facing_str not in _FACING_CODES:
            raise ValueError(
                f"Invalid facing for '{label}': '{tokens[2]}'\n"
                f"  Known direction codes: {', '.join(_FACING_CODES)}"
            )
        # Any direction parses; footprint derivation rejects non-diagonal-down facings
        facing = _FACING_CODES[facing_str]

    x, y = (int(part) for part in anchor_parts)
    width, depth, height = (int(part) for part in dims_parts)
    return SavedPlacement(Cell(x, y), Dimensions(width, depth, height), facing)


def parse_placements(definitions: dict[str, str]) -> dict[str, SavedPlacement]:
    """
    Parse placements from a dict of compact strings.

    Example:
        {
            "table": "0,3 2x2x1",
            "lamp": "1,5 1x1x2 BL"
        }

    Args:
        definitions: Dict mapping label to placement string

    Returns:
        Dict mapping label to SavedPlacement, in input order
    """
    return {label: parse_placement(label, definition) for label, definition in definitions.items()}


def parse_placements_concise(definition: str) -> dict[str, SavedPlacement]:
    """
    Parse placements from a multi-line string.

    Format:
    - One placement per line: "label: x,y WxDxH [FACING]"
    - Blank lines are ignored
    - Labels must be unique

    Example:
        \"\"\"
        table: 0,3 2x2x1
        lamp: 1,5 1x1x2 BL
        \"\"\"

    Raises:
        ValueError: If a line is malformed or a label repeats
    """
    placements: dict[str, SavedPlacement] = {}
    lines = [line.strip() for line in definition.strip().split("\n") if line.strip()]

    for line_idx, line in enumerate(lines):
        if ":" not in line:
            raise ValueError(
                f"Invalid placement on line {line_idx + 1}: '{line}'\n"
                f"  Expected format: 'label: placement'"
            )

        label, placement_str = (part.strip() for part in line.split(":", 1))

        if not label:
            raise ValueError(f"Empty label on line {line_idx + 1}: '{line}'")

        if label in placements:
            raise ValueError(
                f"Duplicate label '{label}' on line {line_idx + 1}\n"
                f"  Labels must be unique"
            )

        placements[label] = parse_placement(label, placement_str)

    return placements
