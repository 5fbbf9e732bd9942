"""
Demo for isosort: derive footprints for a bundled layout, dump the map and
compare both sort methods.
"""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ascii_render import render_legend, render_map
from cell_types import MapSize, SortMethod
from isosort import ContradictionError, Footprint
from placement_parser import parse_placements
from verify import Results, run_comparison

LAYOUTS: dict[str, tuple[MapSize, dict[str, str]]] = dict(
    simple=(
        MapSize(3, 7),
        dict(
            table="0,3 2x2x1",
            wardrobe="2,2 1x2x2",
            lamp="1,5 1x1x2",
        ),
    ),
    busy=(
        MapSize(3, 7),
        dict(
            table="0,3 2x2x1",
            bench="1,6 1x2x1",
            plant="2,1 1x1x2",
            lamp="1,5 1x1x2",
            stool="0,6 1x1x1",
            counter="2,3 1x3x1",
        ),
    ),
    clipped=(
        MapSize(4, 6),
        dict(
            shelf="0,1 3x2x1 BL",
            crate="3,1 2x2x1",
            pillar="1,5 1x1x3",
        ),
    ),
    markers=(
        MapSize(4, 8),
        dict(
            rug="1,4 2x2x0",
            chair="1,5 1x1x1",
            desk="2,3 2x1x1 BL",
            spawn="0,0 1x1x0",
        ),
    ),
)


def load_layout(name: str) -> tuple[MapSize, dict[str, Footprint]]:
    map_size, definitions = LAYOUTS[name]
    placements = parse_placements(definitions)
    return map_size, {label: saved.to_footprint(map_size) for label, saved in placements.items()}


def depth_table(footprints: dict[str, Footprint], results: Results) -> Table:
    """One row per object with its depth under each method."""
    table = Table(title="Depths")
    table.add_column("Object", style="bold")
    for method in SortMethod.all():
        table.add_column(method.value, justify="right")

    for label, fp in footprints.items():
        row = [label]
        for method in SortMethod.all():
            if fp.is_flat:
                row.append("flat")
            elif results.for_method(method).error is not None:
                row.append("-")
            else:
                ok = results.for_method(method).corrects[label].are_both_true()
                style = "green" if ok else "red"
                row.append(f"[{style}]{results.for_method(method).depths[label]:.3f}[/{style}]")
        table.add_row(*row)
    return table


def main(name: str) -> None:
    """Run one bundled layout through the map dump and both sort methods."""
    console = Console()
    map_size, footprints = load_layout(name)

    console.print(Text.from_ansi(render_map(map_size, footprints)))
    console.print(Text.from_ansi(render_legend(footprints)))
    console.print()

    try:
        results = run_comparison(footprints.items())
    except ContradictionError as exc:
        console.print(Panel(str(exc), title="Contradiction", border_style="red"))
        return

    console.print(depth_table(footprints, results))
    for method in SortMethod.all():
        result = results.for_method(method)
        if result.error is not None:
            message = result.error
        elif result.passed:
            message = "all objects ordered correctly"
        else:
            message = f"misordered: {', '.join(map(str, result.failures))}"
        console.print(
            Panel(
                message,
                title=f"{method.value}: {'pass' if result.passed else 'fail'}",
                border_style="green" if result.passed else "red",
            )
        )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    layout = sys.argv[1] if len(sys.argv) > 1 else "busy"
    if layout not in LAYOUTS:
        print(f"Unknown layout '{layout}', choose from: {', '.join(LAYOUTS)}")
        sys.exit(1)
    main(layout)
