"""
Draw-order computation for multi-cell objects on a staggered isometric grid.
Three-stage pipeline: derive footprints -> compare pairs -> assign depths.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Hashable, Iterable

import networkx as nx

from cell_types import Cell, Dimensions, Direction, MapSize, Relation, SortMethod

logger = logging.getLogger(__name__)

Handle = Hashable


# =============================================================================
# Errors
# =============================================================================


class InvalidFacingError(ValueError):
    """A footprint was given a facing other than BOTTOM_RIGHT or BOTTOM_LEFT."""

    def __init__(self, facing: Direction):
        self.facing = facing
        super().__init__(
            f"Items can only face BOTTOM_RIGHT or BOTTOM_LEFT,\n"
            f"  {facing.name} is not valid"
        )


class ContradictionError(ValueError):
    """Two footprints occlude each other."""

    def __init__(self, a: Footprint, b: Footprint):
        self.a = a
        self.b = b
        super().__init__(
            f"Items cannot be both in front and behind each other:\n"
            f"  {a.anchor!r} {a.dimensions}\n"
            f"  {b.anchor!r} {b.dimensions}"
        )


class CycleError(ValueError):
    """The occlusion dependency graph is not acyclic."""

    def __init__(self, cycle: list[Handle]):
        self.cycle = cycle
        chain = " -> ".join(repr(h) for h in cycle)
        super().__init__(f"Occlusion graph contains a cycle: {chain}")


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class SortConfig:
    """Depth range assigned by the depth assigners: [base_z, base_z + z_span)."""

    base_z: float = 0.0
    z_span: float = 5.0

    def __post_init__(self) -> None:
        if self.z_span <= 0:
            raise ValueError(f"z_span must be positive, got {self.z_span}")


DEFAULT_MAP_SIZE = MapSize(128, 128)


# =============================================================================
# Grid Geometry
# =============================================================================

# (direction, is_y_even) -> (dx, dy)
_OFFSETS: dict[tuple[Direction, bool], tuple[int, int]] = {
    (Direction.TOP, True): (0, -2),
    (Direction.TOP, False): (0, -2),
    (Direction.TOP_RIGHT, True): (0, -1),
    (Direction.TOP_RIGHT, False): (1, -1),
    (Direction.RIGHT, True): (1, 0),
    (Direction.RIGHT, False): (1, 0),
    (Direction.BOTTOM_RIGHT, True): (0, 1),
    (Direction.BOTTOM_RIGHT, False): (1, 1),
    (Direction.BOTTOM, True): (0, 2),
    (Direction.BOTTOM, False): (0, 2),
    (Direction.BOTTOM_LEFT, True): (-1, 1),
    (Direction.BOTTOM_LEFT, False): (0, 1),
    (Direction.LEFT, True): (-1, 0),
    (Direction.LEFT, False): (-1, 0),
    (Direction.TOP_LEFT, True): (-1, -1),
    (Direction.TOP_LEFT, False): (0, -1),
}


def offset(cell: Cell, direction: Direction) -> tuple[int, int]:
    """Coordinate delta for one step from `cell`; depends on the parity of its row."""
    return _OFFSETS[(direction, cell.y % 2 == 0)]


def step(cell: Cell, direction: Direction, map_size: MapSize) -> Cell | None:
    """Neighbouring cell in `direction`, or None if it falls outside the map."""
    dx, dy = offset(cell, direction)
    x, y = cell.x + dx, cell.y + dy
    if not map_size.contains(x, y):
        return None
    return Cell(x, y)


def step_n(cell: Cell, direction: Direction, n: int, map_size: MapSize) -> Cell | None:
    """
    Walk `n` steps in one direction.

    Returns None as soon as any intermediate step leaves the map; a failed step
    is never skipped.
    """
    current: Cell | None = cell
    for _ in range(n):
        if current is None:
            return None
        current = step(current, direction, map_size)
    return current


def next_cells(
    cell: Cell,
    map_size: MapSize,
    directions: Iterable[Direction] | None = None,
) -> list[Cell]:
    """In-bounds neighbours of `cell`, in the order of `directions` (default: all eight)."""
    if directions is None:
        directions = Direction.all()
    neighbours: list[Cell] = []
    for direction in directions:
        neighbour = step(cell, direction, map_size)
        if neighbour is not None:
            neighbours.append(neighbour)
    return neighbours


def diagonal_next_cells(cell: Cell, map_size: MapSize) -> list[Cell]:
    return next_cells(cell, map_size, Direction.diagonals())


# =============================================================================
# Footprint Deriver
# =============================================================================


@dataclass(frozen=True)
class Footprint:
    """
    One placed object: its placement plus the cells it occupies and occludes.

    `underneath` and `behind` are derived from the placement and excluded from
    equality, so two footprints with the same placement compare equal. Build
    footprints with `derive_footprint`; passing the cell sets directly skips
    the derivation and only suits hand-made occlusion graphs.
    """

    anchor: Cell  # Always the bottom-most occupied cell
    dimensions: Dimensions
    facing: Direction
    underneath: tuple[Cell, ...] = field(default=(), compare=False)
    behind: frozenset[Cell] = field(default=frozenset(), compare=False)

    def __post_init__(self) -> None:
        _axis_directions(self.facing)

    @property
    def is_flat(self) -> bool:
        return self.dimensions.is_flat

    @property
    def is_clipped(self) -> bool:
        return len(self.underneath) < self.dimensions.area


def _axis_directions(facing: Direction) -> tuple[Direction, Direction]:
    """
    (column direction, row direction) for a facing.

    Facing BOTTOM_RIGHT, width expands towards TOP_RIGHT and depth towards TOP_LEFT;
    facing BOTTOM_LEFT, the other way round.
    """
    match facing:
        case Direction.BOTTOM_RIGHT:
            return (Direction.TOP_RIGHT, Direction.TOP_LEFT)
        case Direction.BOTTOM_LEFT:
            return (Direction.TOP_LEFT, Direction.TOP_RIGHT)
        case _:
            raise InvalidFacingError(facing)


def underneath_cells(
    anchor: Cell,
    dimensions: Dimensions,
    facing: Direction,
    map_size: MapSize,
) -> tuple[Cell, ...]:
    """
    Ground cells occupied by a footprint, row by row from the anchor.

    Each row starts one row-direction step from the previous row's start; each
    cell in a row is one column-direction step from the previous one. Slots that
    fall off the map are dropped, so the result may hold fewer than
    width * depth cells.
    """
    col_dir, row_dir = _axis_directions(facing)

    if dimensions.area == 1:
        return (anchor,)

    cells: list[Cell] = []
    row_start: Cell | None = anchor
    for _row in range(dimensions.depth):
        current = row_start
        for col in range(dimensions.width):
            if current is not None:
                cells.append(current)
            if col < dimensions.width - 1 and current is not None:
                current = step(current, col_dir, map_size)
        if row_start is not None:
            row_start = step(row_start, row_dir, map_size)
    return tuple(cells)


def behind_cells(underneath: Iterable[Cell], height: int, map_size: MapSize) -> frozenset[Cell]:
    """
    Cells visually occluded by a footprint of the given height.

    Expands `height` layers upwards from the occupied cells. Every TOP_LEFT,
    TOP_RIGHT and TOP neighbour of the frontier is collected; only TOP
    neighbours form the next layer's frontier.
    """
    occupied = set(underneath)
    collected: set[Cell] = set()
    frontier = list(occupied)

    for _layer in range(height):
        next_frontier: list[Cell] = []
        for cell in frontier:
            for direction in (Direction.TOP_LEFT, Direction.TOP_RIGHT, Direction.TOP):
                neighbour = step(cell, direction, map_size)
                if neighbour is None or neighbour in occupied:
                    continue
                collected.add(neighbour)
                if direction is Direction.TOP and neighbour not in next_frontier:
                    next_frontier.append(neighbour)
        frontier = next_frontier

    return frozenset(collected)


def derive_footprint(
    anchor: Cell,
    dimensions: Dimensions,
    facing: Direction,
    map_size: MapSize,
) -> Footprint:
    """
    Build a footprint from its placement.

    Raises:
        InvalidFacingError: If facing is not BOTTOM_RIGHT or BOTTOM_LEFT
    """
    underneath = underneath_cells(anchor, dimensions, facing, map_size)
    behind = behind_cells(underneath, dimensions.height, map_size)
    footprint = Footprint(anchor, dimensions, facing, underneath, behind)
    if footprint.is_clipped:
        logger.debug(
            "derive_footprint: %r %s clipped to %d of %d cells",
            anchor,
            dimensions,
            len(underneath),
            dimensions.area,
        )
    return footprint


# =============================================================================
# Partial Order
# =============================================================================


def compare(a: Footprint, b: Footprint) -> Relation:
    """
    Occlusion relation between two footprints.

    GREATER when `a` occludes part of `b` (a draws after b), LESS for the
    reverse, INCOMPARABLE when neither occludes the other.

    Raises:
        ContradictionError: If each footprint occludes the other
    """
    a_in_front = not a.behind.isdisjoint(b.underneath)
    b_in_front = not b.behind.isdisjoint(a.underneath)

    match (a_in_front, b_in_front):
        case (True, True):
            raise ContradictionError(a, b)
        case (True, False):
            return Relation.GREATER
        case (False, True):
            return Relation.LESS
        case _:
            return Relation.INCOMPARABLE


# =============================================================================
# Depth Assigners
# =============================================================================


@dataclass(frozen=True)
class MethodDepths:
    """Depth of one object under each sort method."""

    topological: float
    partial_cmp: float

    def for_method(self, method: SortMethod) -> float:
        match method:
            case SortMethod.TOPOLOGICAL:
                return self.topological
            case SortMethod.PARTIAL_CMP:
                return self.partial_cmp
        raise ValueError(f"Unknown sort method: {method}")


def sortable_objects(objects: Iterable[tuple[Handle, Footprint]]) -> list[tuple[Handle, Footprint]]:
    """
    Objects that take part in depth sorting: everything except flat markers.

    Raises:
        ValueError: If a handle appears more than once
    """
    seen: set[Handle] = set()
    sortable: list[tuple[Handle, Footprint]] = []
    for handle, footprint in objects:
        if handle in seen:
            raise ValueError(f"Duplicate object handle: {handle!r}")
        seen.add(handle)
        if not footprint.is_flat:
            sortable.append((handle, footprint))
    return sortable


def _spread_depths(order: list[Handle], config: SortConfig) -> list[tuple[Handle, float]]:
    count = len(order)
    return [
        (handle, config.base_z + (index / count) * config.z_span)
        for index, handle in enumerate(order)
    ]


def build_occlusion_graph(sortable: list[tuple[Handle, Footprint]]) -> nx.DiGraph:
    """
    Dependency graph over sortable objects.

    Edge X -> Y when X stands on a cell that Y occludes, i.e. X draws before Y.
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(handle for handle, _ in sortable)

    for this_handle, this_item in sortable:
        for other_handle, other_item in sortable:
            if other_handle == this_handle:
                continue
            if not this_item.behind.isdisjoint(other_item.underneath):
                logger.debug("occlusion edge: %r -> %r", other_handle, this_handle)
                graph.add_edge(other_handle, this_handle)

    return graph


def assign_depths_topological(
    objects: Iterable[tuple[Handle, Footprint]],
    config: SortConfig = SortConfig(),
) -> list[tuple[Handle, float]]:
    """
    Depths from a topological sort of the occlusion graph.

    Flat (height 0) objects are left out and get no depth. Returns
    (handle, depth) pairs in draw order.

    Raises:
        CycleError: If the occlusion graph contains a cycle
    """
    sortable = sortable_objects(objects)
    graph = build_occlusion_graph(sortable)

    try:
        order = list(nx.topological_sort(graph))
    except nx.NetworkXUnfeasible as exc:
        cycle = [u for u, _ in nx.find_cycle(graph)]
        raise CycleError(cycle) from exc

    logger.info(
        "assign_depths_topological: %d objects, %d occlusion edges",
        len(order),
        graph.number_of_edges(),
    )
    return _spread_depths(order, config)


def _partial_cmp(a: tuple[Handle, Footprint], b: tuple[Handle, Footprint]) -> int:
    relation = compare(a[1], b[1])
    if relation is Relation.GREATER:
        return 1
    if relation is Relation.LESS:
        return -1
    # Incomparable: order by row of the anchor only
    if a[1].anchor < b[1].anchor:
        return -1
    if a[1].anchor > b[1].anchor:
        return 1
    return 0


def assign_depths_partial_order(
    objects: Iterable[tuple[Handle, Footprint]],
    config: SortConfig = SortConfig(),
) -> list[tuple[Handle, float]]:
    """
    Depths from sorting with `compare`, breaking incomparable pairs by anchor row.

    The sort is stable, so objects whose anchors share a row and that do not
    occlude each other keep their input order. For three or more mutually
    incomparable objects the forced order is not guaranteed to be consistent.

    Raises:
        ContradictionError: If any compared pair occludes each other
    """
    sortable = sortable_objects(objects)
    ordered = sorted(sortable, key=cmp_to_key(_partial_cmp))

    logger.info("assign_depths_partial_order: %d objects", len(ordered))
    return _spread_depths([handle for handle, _ in ordered], config)


def assign_depths(
    objects: Iterable[tuple[Handle, Footprint]],
    method: SortMethod,
    config: SortConfig = SortConfig(),
) -> list[tuple[Handle, float]]:
    match method:
        case SortMethod.TOPOLOGICAL:
            return assign_depths_topological(objects, config)
        case SortMethod.PARTIAL_CMP:
            return assign_depths_partial_order(objects, config)
    raise ValueError(f"Unknown sort method: {method}")


def assign_depths_all(
    objects: Iterable[tuple[Handle, Footprint]],
    config: SortConfig = SortConfig(),
) -> dict[Handle, MethodDepths]:
    """Run both sort methods over the same objects and pair up the results."""
    items = list(objects)
    topological = dict(assign_depths_topological(items, config))
    partial_cmp = dict(assign_depths_partial_order(items, config))
    return {
        handle: MethodDepths(topological[handle], partial_cmp[handle])
        for handle in topological
    }
