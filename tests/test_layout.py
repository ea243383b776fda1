"""Tests for grid, distribute and align arrangements."""

import pytest

from board_core.layout import align_objects, distribute_objects, grid_layout


def box(oid, x, y, width=100, height=100):
    return {"id": oid, "x": x, "y": y, "width": width, "height": height}


class TestGridLayout:
    def test_default_columns_from_sqrt(self):
        objects = [box(f"o{i}", 500 - i * 10, 100 + i * 10) for i in range(5)]
        updates = grid_layout(objects, gap=20)
        # ceil(sqrt(5)) == 3 columns, anchored at the union's top-left (460, 100)
        assert updates["o0"] == {"x": 460, "y": 100}
        assert updates["o2"] == {"x": 460 + 2 * 120, "y": 100}
        assert updates["o3"] == {"x": 460, "y": 220}

    def test_explicit_columns_and_cell_size(self):
        objects = [box("a", 0, 0, 50, 40), box("b", 0, 0, 200, 80), box("c", 0, 0)]
        updates = grid_layout(objects, cols=2, gap=10)
        assert updates == {
            "a": {"x": 0, "y": 0},
            "b": {"x": 210, "y": 0},
            "c": {"x": 0, "y": 110},
        }

    def test_empty(self):
        assert grid_layout([]) == {}


class TestDistribute:
    def test_horizontal_equal_gaps(self):
        objects = [box("a", 0, 0), box("c", 900, 50), box("b", 200, 20, width=300)]
        updates = distribute_objects(objects, "horizontal")
        # span 0..1000, extents 500, gap 250
        assert updates == {"a": {"x": 0}, "b": {"x": 350}, "c": {"x": 900}}

    def test_vertical(self):
        objects = [box("a", 0, 0), box("b", 0, 150), box("c", 0, 400)]
        updates = distribute_objects(objects, "vertical")
        assert updates["b"] == {"y": 200}

    def test_needs_three_objects(self):
        with pytest.raises(ValueError):
            distribute_objects([box("a", 0, 0), box("b", 10, 0)])

    def test_unknown_axis(self):
        with pytest.raises(ValueError):
            distribute_objects([box("a", 0, 0)] * 3, "diagonal")


class TestAlign:
    def test_left(self):
        updates = align_objects([box("a", 50, 0), box("b", 10, 300)], "left")
        assert updates == {"a": {"x": 10}, "b": {"x": 10}}

    def test_right(self):
        updates = align_objects([box("a", 50, 0, width=100), box("b", 0, 0, width=300)], "right")
        assert updates == {"a": {"x": 200}, "b": {"x": 0}}

    def test_bottom(self):
        updates = align_objects([box("a", 0, 0, height=50), box("b", 0, 100, height=100)], "bottom")
        assert updates == {"a": {"y": 150}, "b": {"y": 100}}

    def test_center_uses_mean_of_centers(self):
        updates = align_objects([box("a", 0, 0), box("b", 200, 0, width=300)], "center")
        # centers 50 and 350, mean 200
        assert updates == {"a": {"x": 150}, "b": {"x": 50}}

    def test_needs_two_objects(self):
        with pytest.raises(ValueError):
            align_objects([box("a", 0, 0)], "top")

    def test_unknown_alignment(self):
        with pytest.raises(ValueError):
            align_objects([box("a", 0, 0), box("b", 0, 0)], "diagonal")
