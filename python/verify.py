"""
Comparison harness: checks each sort method's depths against the pairwise
occlusion relation of nearby objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from cell_types import Relation, SortMethod
from isosort import (
    ContradictionError,
    CycleError,
    Footprint,
    Handle,
    SortConfig,
    assign_depths,
    compare,
    sortable_objects,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntitiesNearby:
    """Objects that must draw after (in front) or before (behind) one object."""

    corresponding: Handle
    in_front: tuple[Handle, ...] = ()
    behind: tuple[Handle, ...] = ()


@dataclass(frozen=True)
class Corrects:
    all_behind: bool = False
    all_in_front: bool = False

    def are_both_true(self) -> bool:
        return self.all_behind and self.all_in_front


@dataclass(frozen=True)
class MethodResult:
    """Per-object correctness for one sort method, or the error that stopped it."""

    corrects: dict[Handle, Corrects] = field(default_factory=dict)
    error: str | None = None
    depths: dict[Handle, float] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.error is None and all(c.are_both_true() for c in self.corrects.values())

    @property
    def failures(self) -> list[Handle]:
        return [handle for handle, c in self.corrects.items() if not c.are_both_true()]


@dataclass(frozen=True)
class Results:
    topological: MethodResult
    partial_cmp: MethodResult

    def for_method(self, method: SortMethod) -> MethodResult:
        match method:
            case SortMethod.TOPOLOGICAL:
                return self.topological
            case SortMethod.PARTIAL_CMP:
                return self.partial_cmp
        raise ValueError(f"Unknown sort method: {method}")

    def passed(self, method: SortMethod) -> bool:
        return self.for_method(method).passed

    def summary(self) -> str:
        lines = []
        for method in SortMethod.all():
            result = self.for_method(method)
            if result.error is not None:
                lines.append(f"{method.value}: error ({result.error})")
            else:
                total = len(result.corrects)
                good = total - len(result.failures)
                lines.append(f"{method.value}: {good}/{total} correct")
        return "\n".join(lines)


def find_nearby(objects: Iterable[tuple[Handle, Footprint]]) -> dict[Handle, EntitiesNearby]:
    """
    Ground-truth neighbours of every sortable object, from the occlusion relation.

    Raises:
        ContradictionError: If any pair occludes each other
    """
    sortable = sortable_objects(objects)
    in_front: dict[Handle, list[Handle]] = {handle: [] for handle, _ in sortable}
    behind: dict[Handle, list[Handle]] = {handle: [] for handle, _ in sortable}

    for i, (a_handle, a) in enumerate(sortable):
        for b_handle, b in sortable[i + 1:]:
            relation = compare(a, b)
            if relation is Relation.GREATER:
                in_front[b_handle].append(a_handle)
                behind[a_handle].append(b_handle)
            elif relation is Relation.LESS:
                in_front[a_handle].append(b_handle)
                behind[b_handle].append(a_handle)

    return {
        handle: EntitiesNearby(handle, tuple(in_front[handle]), tuple(behind[handle]))
        for handle, _ in sortable
    }


def check_depths(
    nearby: Mapping[Handle, EntitiesNearby],
    depths: Mapping[Handle, float],
) -> dict[Handle, Corrects]:
    """
    Check that every object draws after everything behind it and before
    everything in front of it. An object or neighbour without a depth fails.
    """
    corrects: dict[Handle, Corrects] = {}
    for handle, near in nearby.items():
        depth = depths.get(handle)
        if depth is None:
            corrects[handle] = Corrects()
            continue
        all_behind = all(
            other in depths and depths[other] < depth for other in near.behind
        )
        all_in_front = all(
            other in depths and depths[other] > depth for other in near.in_front
        )
        corrects[handle] = Corrects(all_behind, all_in_front)
    return corrects


def _run_method(
    objects: list[tuple[Handle, Footprint]],
    nearby: Mapping[Handle, EntitiesNearby],
    method: SortMethod,
    config: SortConfig,
) -> MethodResult:
    try:
        depths = dict(assign_depths(objects, method, config))
    except (CycleError, ContradictionError) as exc:
        logger.warning("run_comparison: %s failed: %s", method.value, exc)
        return MethodResult(error=str(exc))

    result = MethodResult(check_depths(nearby, depths), depths=depths)
    if result.failures:
        logger.warning(
            "run_comparison: %s misordered %d of %d objects",
            method.value,
            len(result.failures),
            len(result.corrects),
        )
    return result


def run_comparison(
    objects: Iterable[tuple[Handle, Footprint]],
    nearby: Mapping[Handle, EntitiesNearby] | None = None,
    config: SortConfig = SortConfig(),
) -> Results:
    """
    Run both sort methods and check their depths against `nearby`.

    When `nearby` is None it is derived from the occlusion relation itself.
    """
    items = list(objects)
    if nearby is None:
        nearby = find_nearby(items)

    logger.info("run_comparison: %d objects, %d with neighbours", len(items), len(nearby))
    return Results(
        topological=_run_method(items, nearby, SortMethod.TOPOLOGICAL, config),
        partial_cmp=_run_method(items, nearby, SortMethod.PARTIAL_CMP, config),
    )
