"""
ASCII rendering of footprints on a staggered map, for debugging occlusion.

Odd rows are shifted right by half a cell, matching the brick layout of the grid.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping

import simple_chalk as chalk  # type: ignore[import-untyped]

from cell_types import Cell, MapSize
from isosort import Footprint

logger = logging.getLogger(__name__)

_COLORS: list[Callable[[str], str]] = [
    chalk.red,
    chalk.green,
    chalk.yellow,
    chalk.blue,
    chalk.magenta,
    chalk.cyan,
    chalk.redBright,
    chalk.greenBright,
    chalk.yellowBright,
    chalk.blueBright,
]


def _cell_char(
    cell: Cell,
    footprints: Mapping[str, Footprint],
) -> tuple[str, str | None]:
    """
    Character for one cell and the label that owns its colour (None = uncoloured).

    Occupied cells take the upper-cased first letter of the label, shadows the
    lower-cased one. `!` marks a cell occupied twice, `+` a cell in several shadows.
    """
    occupants = [label for label, fp in footprints.items() if cell in fp.underneath]
    if len(occupants) > 1:
        return ("!", None)
    if occupants:
        label = occupants[0]
        return ((label[0] if label else "?").upper(), label)

    shadows = [label for label, fp in footprints.items() if cell in fp.behind]
    if len(shadows) > 1:
        return ("+", None)
    if shadows:
        label = shadows[0]
        return ((label[0] if label else "?").lower(), label)

    return ("_", None)


def render_map(
    map_size: MapSize,
    footprints: Mapping[str, Footprint],
    cell_width: int = 4,
    color: bool = True,
) -> str:
    """
    Render every cell of the map with the footprints that occupy or shadow it.

    Args:
        map_size: Map bounds
        footprints: Footprints keyed by label
        cell_width: Characters per cell (default 4)
        color: Colour each label's cells with ANSI codes (default True)

    Returns:
        One line per map row
    """
    labels = sorted(footprints.keys())
    label_colors: dict[str, Callable[[str], str]] = {
        label: _COLORS[i % len(_COLORS)] for i, label in enumerate(labels)
    }

    def colorize(label: str | None, text: str) -> str:
        if not color or label is None:
            return text
        return label_colors[label](text)

    half = " " * (cell_width // 2)
    lines: list[str] = []
    for y in range(map_size.height):
        parts = [half if y % 2 else ""]
        for x in range(map_size.width):
            char, owner = _cell_char(Cell(x, y), footprints)
            parts.append(colorize(owner, char.center(cell_width)))
        lines.append("".join(parts).rstrip())

    logger.debug("render_map: %dx%d map, %d footprints", map_size.width, map_size.height, len(labels))
    return "\n".join(lines)


def render_legend(footprints: Mapping[str, Footprint], color: bool = True) -> str:
    """One line per footprint: marker, label, placement and occupied cell count."""
    labels = sorted(footprints.keys())
    lines: list[str] = []
    for i, label in enumerate(labels):
        fp = footprints[label]
        dims = fp.dimensions
        marker = (label[0] if label else "?").upper()
        if color:
            marker = _COLORS[i % len(_COLORS)](marker)
        clipped = " (clipped)" if fp.is_clipped else ""
        lines.append(
            f"{marker} {label}: anchor ({fp.anchor.x},{fp.anchor.y}) "
            f"{dims.width}x{dims.depth}x{dims.height} {fp.facing.value}, "
            f"{len(fp.underneath)} cells{clipped}"
        )
    return "\n".join(lines)
