"""Tests for placement_parser module."""

import pytest

from cell_types import Cell, Dimensions, Direction, MapSize
from isosort import InvalidFacingError, derive_footprint
from placement_parser import (
    SavedPlacement,
    parse_placement,
    parse_placements,
    parse_placements_concise,
)


class TestParsePlacements:
    """Tests for the dict-based placement parser."""

    def test_simple_placement(self) -> None:
        """Parse anchor and dimensions with the default facing."""
        placements = parse_placements({"table": "0,3 2x2x1"})

        assert placements["table"] == SavedPlacement(
            Cell(0, 3), Dimensions(2, 2, 1), Direction.BOTTOM_RIGHT
        )

    def test_explicit_facing(self) -> None:
        placement = parse_placement("lamp", "1,5 1x1x2 BL")
        assert placement.facing is Direction.BOTTOM_LEFT

    def test_facing_is_case_insensitive(self) -> None:
        assert parse_placement("lamp", "1,5 1x1x2 bl").facing is Direction.BOTTOM_LEFT
        assert parse_placement("lamp", "1,5 1X1X2").dimensions == Dimensions(1, 1, 2)

    def test_extra_whitespace(self) -> None:
        placement = parse_placement("lamp", "  1,5   1x1x2  ")
        assert placement.anchor == Cell(1, 5)

    def test_keeps_input_order(self) -> None:
        placements = parse_placements({"b": "0,0 1x1x1", "a": "1,1 1x1x1"})
        assert list(placements) == ["b", "a"]

    def test_flat_marker(self) -> None:
        placement = parse_placement("rug", "1,4 2x2x0")
        assert placement.dimensions.is_flat

    @pytest.mark.parametrize(
        "definition",
        [
            "0,3",
            "0,3 2x2x1 BR extra",
            "0;3 2x2x1",
            "0,3,1 2x2x1",
            "-1,3 2x2x1",
            "0,3 2x2",
            "0,3 2x2xz",
            "0,3 2x2x1 XX",
        ],
    )
    def test_invalid_placement(self, definition: str) -> None:
        with pytest.raises(ValueError) as exc_info:
            parse_placement("thing", definition)
        assert "'thing'" in str(exc_info.value)

    def test_non_diagonal_facing_parses_but_cannot_be_derived(self) -> None:
        placement = parse_placement("sign", "1,1 1x1x1 T")
        assert placement.facing is Direction.TOP
        with pytest.raises(InvalidFacingError):
            placement.to_footprint(MapSize(3, 6))


class TestParsePlacementsConcise:
    """Tests for the line-based placement parser."""

    def test_multiple_lines(self) -> None:
        definition = """
        table: 0,3 2x2x1
        lamp: 1,5 1x1x2 BL
        """
        placements = parse_placements_concise(definition)

        assert list(placements) == ["table", "lamp"]
        assert placements["table"].anchor == Cell(0, 3)
        assert placements["lamp"].facing is Direction.BOTTOM_LEFT

    def test_blank_lines_ignored(self) -> None:
        definition = """

        table: 0,3 2x2x1

        lamp: 1,5 1x1x2
        """
        assert len(parse_placements_concise(definition)) == 2

    def test_missing_colon(self) -> None:
        with pytest.raises(ValueError, match="line 2"):
            parse_placements_concise("table: 0,3 2x2x1\nlamp 1,5 1x1x2")

    def test_empty_label(self) -> None:
        with pytest.raises(ValueError, match="Empty label"):
            parse_placements_concise(": 0,3 2x2x1")

    def test_duplicate_label(self) -> None:
        definition = """
        lamp: 0,3 1x1x1
        lamp: 1,5 1x1x2
        """
        with pytest.raises(ValueError, match="Duplicate label 'lamp'"):
            parse_placements_concise(definition)


class TestSavedPlacement:
    """Tests for converting between saved placements and footprints."""

    def test_default(self) -> None:
        saved = SavedPlacement()
        assert saved.anchor == Cell(0, 0)
        assert saved.dimensions == Dimensions(1, 1, 1)
        assert saved.facing is Direction.BOTTOM_RIGHT

    def test_to_footprint_derives_cells(self) -> None:
        saved = parse_placement("table", "0,3 2x2x1")
        footprint = saved.to_footprint(MapSize(3, 7))
        assert footprint.underneath == (Cell(0, 3), Cell(1, 2), Cell(0, 2), Cell(0, 1))

    def test_to_footprint_default_map_is_large(self) -> None:
        """Without a map size, nothing near the origin is clipped on the right or bottom."""
        footprint = parse_placement("shelf", "10,10 3x3x1").to_footprint()
        assert len(footprint.underneath) == 9

    def test_from_footprint(self) -> None:
        footprint = derive_footprint(Cell(2, 3), Dimensions(1, 3, 1), Direction.BOTTOM_LEFT, MapSize(3, 7))
        saved = SavedPlacement.from_footprint(footprint)
        assert saved == SavedPlacement(Cell(2, 3), Dimensions(1, 3, 1), Direction.BOTTOM_LEFT)
        assert saved.to_footprint(MapSize(3, 7)) == footprint
