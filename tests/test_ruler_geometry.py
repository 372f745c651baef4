import pytest

from ruler_geometry import (
    MIN_LENGTH,
    cursor_for_region,
    drag_position,
    get_resize_region,
    in_resize_border,
    is_reachable,
    nudge_geometry,
    resize_geometry,
    rotate_geometry,
    ruler_labels,
    ruler_lines,
    tick_height,
    to_screen,
)


class TestHitTesting:
    def test_center_is_not_border(self):
        assert not in_resize_border(200, 37, 400, 75, 5)

    @pytest.mark.parametrize("point", [(0, 0), (2, 37), (397, 37), (200, 1), (200, 73)])
    def test_edges_are_border(self, point):
        assert in_resize_border(point[0], point[1], 400, 75, 5)

    @pytest.mark.parametrize("point", [(-1, 10), (400, 10), (10, 75), (10, -3)])
    def test_outside_window_is_not_border(self, point):
        assert not in_resize_border(point[0], point[1], 400, 75, 5)

    @pytest.mark.parametrize("point, region", [
        ((0, 0), "nw"),
        ((200, 2), "n"),
        ((398, 3), "ne"),
        ((398, 37), "e"),
        ((399, 74), "se"),
        ((200, 72), "s"),
        ((1, 74), "sw"),
        ((3, 37), "w"),
    ])
    def test_regions(self, point, region):
        assert get_resize_region(point[0], point[1], 400, 75, 5) == region

    def test_cursors(self):
        assert cursor_for_region("n") == cursor_for_region("s")
        assert cursor_for_region("e") == cursor_for_region("w")
        assert cursor_for_region("nw") != cursor_for_region("ne")
        assert cursor_for_region(None) == "arrow"


class TestResize:
    start = (100, 200, 400, 75)

    def test_east_grows_width(self):
        assert resize_geometry("e", self.start, 30, 12) == (100, 200, 430, 75)

    def test_south_grows_height(self):
        assert resize_geometry("s", self.start, 5, 20) == (100, 200, 400, 95)

    def test_south_east_grows_both(self):
        assert resize_geometry("se", self.start, -50, 25) == (100, 200, 350, 100)

    def test_west_keeps_right_edge(self):
        x, y, width, height = resize_geometry("w", self.start, 40, 0)
        assert (x, width) == (140, 360)
        assert x + width == 500

    def test_north_west_keeps_bottom_right(self):
        x, y, width, height = resize_geometry("nw", self.start, -10, -20)
        assert (x, y, width, height) == (90, 180, 410, 95)

    def test_clamps_to_minimum(self):
        x, y, width, height = resize_geometry("w", self.start, 1000, 0)
        assert width == MIN_LENGTH
        assert x + width == 500
        assert resize_geometry("s", self.start, 0, -500)[3] == MIN_LENGTH

    def test_no_region_keeps_geometry(self):
        assert resize_geometry(None, self.start, 10, 10) == self.start


def test_drag_position_keeps_offset():
    assert drag_position(500, 300, (20, 10)) == (480, 290)


class TestNudge:
    geometry = (100, 100, 400, 75)

    def test_plain_arrow_moves_five(self):
        assert nudge_geometry("Right", self.geometry) == (105, 100, 400, 75)
        assert nudge_geometry("Up", self.geometry) == (100, 95, 400, 75)

    def test_control_moves_one(self):
        assert nudge_geometry("Left", self.geometry, control=True) == (99, 100, 400, 75)
        assert nudge_geometry("Down", self.geometry, control=True) == (100, 101, 400, 75)

    def test_control_shift_resizes(self):
        assert nudge_geometry("Right", self.geometry, control=True, shift=True) == (100, 100, 401, 75)
        assert nudge_geometry("Up", self.geometry, control=True, shift=True) == (100, 100, 400, 74)

    def test_locked_ignores_resize_but_allows_move(self):
        assert nudge_geometry("Right", self.geometry, control=True, shift=True, locked=True) == self.geometry
        assert nudge_geometry("Right", self.geometry, locked=True) == (105, 100, 400, 75)

    def test_shift_alone_moves_five(self):
        assert nudge_geometry("Left", self.geometry, shift=True) == (95, 100, 400, 75)

    def test_other_keys_ignored(self):
        assert nudge_geometry("a", self.geometry) == self.geometry


def test_rotate_swaps_size():
    assert rotate_geometry((5, 6, 400, 75)) == (5, 6, 75, 400)


@pytest.mark.parametrize("offset, height", [(0, 15), (100, 15), (10, 10), (90, 10), (2, 5), (48, 5)])
def test_tick_height(offset, height):
    assert tick_height(offset) == height


class TestLayout:
    def test_ticks_every_two_pixels(self):
        lines = ruler_lines(100, 75)
        ticks = lines[4:]
        # top and bottom tick per even offset
        assert len(ticks) == 2 * 50
        assert ticks[0] == (0, 0, 0, 15)
        assert ticks[1] == (0, 75, 0, 60)
        assert ticks[2] == (2, 0, 2, 5)
        assert ticks[-2] == (98, 0, 98, 5)

    def test_border(self):
        lines = ruler_lines(400, 75)
        assert (0, 0, 399, 0) in lines
        assert (399, 0, 399, 74) in lines

    def test_labels_at_hundreds(self):
        labels = ruler_labels(350, 75, 16)
        assert labels[0] == (10, 37 - 8, "350 pixels")
        texts = [text for _, _, text in labels[1:]]
        assert texts == ["0", "0", "100", "100", "200", "200", "300", "300"]
        assert (100, 15, "100") in labels
        assert (100, 75 - 15 - 16, "100") in labels

    def test_horizontal_mapping_is_identity(self):
        assert to_screen(30, 4, 400, vertical=False) == (30, 4)

    def test_vertical_mapping_rotates(self):
        # ruler start sits at the top right corner
        assert to_screen(0, 0, 75, vertical=True) == (74, 0)
        assert to_screen(120, 15, 75, vertical=True) == (59, 120)


class TestReachable:
    primary = (0, 0, 1920, 1080)
    dual = (-1920, 0, 3840, 1080)

    def test_on_primary(self):
        assert is_reachable((100, 100, 400, 75), self.primary)

    def test_monitor_left_of_primary(self):
        assert not is_reachable((-1500, 100, 400, 75), self.primary)
        assert is_reachable((-1500, 100, 400, 75), self.dual)

    def test_monitor_right_of_primary(self):
        assert is_reachable((2500, 100, 400, 75), (0, 0, 3840, 1080))

    def test_barely_visible_edges(self):
        assert not is_reachable((1905, 100, 400, 75), self.primary)
        assert is_reachable((-380, 100, 400, 75), self.primary)
        assert not is_reachable((100, -70, 400, 75), self.primary)
