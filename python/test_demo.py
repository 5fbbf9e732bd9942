"""Tests for the bundled demo layouts."""

import pytest

from cell_types import SortMethod
from rich.console import Console

from demo import LAYOUTS, depth_table, load_layout
from verify import Corrects, MethodResult, Results, run_comparison


@pytest.mark.parametrize("name", sorted(LAYOUTS))
def test_layouts_sort_cleanly(name: str) -> None:
    """Every bundled layout is free of contradictions and sorts correctly."""
    _, footprints = load_layout(name)
    results = run_comparison(footprints.items())
    for method in SortMethod.all():
        assert results.passed(method), results.summary()


def test_clipped_layout_is_clipped() -> None:
    _, footprints = load_layout("clipped")
    assert footprints["shelf"].is_clipped
    assert footprints["crate"].is_clipped
    assert not footprints["pillar"].is_clipped


def test_markers_are_flat() -> None:
    _, footprints = load_layout("markers")
    assert footprints["rug"].is_flat
    assert footprints["spawn"].is_flat


def test_depth_table_shows_stored_depths() -> None:
    """The table prints the depths held by the results rather than sorting again."""
    _, footprints = load_layout("simple")
    corrects = {label: Corrects(True, True) for label in footprints}
    stored = {label: 1.25 + i for i, label in enumerate(footprints)}
    results = Results(MethodResult(corrects, depths=stored), MethodResult(error="cycle"))

    console = Console(record=True, width=80)
    console.print(depth_table(footprints, results))
    text = console.export_text()
    assert "1.250" in text
    assert "2.250" in text
