"""Geometry helpers for the pixel ruler window.

Everything here works on plain numbers so the window code stays a thin layer
over tkinter: hit-testing the resize border, computing new geometry while
dragging, arrow-key nudging and laying out ticks and labels.
"""

RESIZE_BORDER = 5
MIN_LENGTH = 10

TICK_STEP = 2
LABEL_OFFSET = 15

# Edge/corner zones used while resizing
RESIZE_REGIONS = ("n", "ne", "e", "se", "s", "sw", "w", "nw")

_REGION_CURSORS = {
    "n": "sb_v_double_arrow",
    "s": "sb_v_double_arrow",
    "e": "sb_h_double_arrow",
    "w": "sb_h_double_arrow",
    "nw": "top_left_corner",
    "se": "bottom_right_corner",
    "ne": "top_right_corner",
    "sw": "bottom_left_corner",
}


def in_resize_border(x, y, width, height, border=RESIZE_BORDER):
    """True when (x, y) is inside the client area but within `border` of an edge"""
    inside = 0 <= x < width and 0 <= y < height
    inner = border <= x < width - border and border <= y < height - border
    return inside and not inner


def get_resize_region(x, y, width, height, border=RESIZE_BORDER):
    """Classify a point of the resize border into one of the eight regions"""
    if y <= border:
        if x <= border:
            return "nw"
        if x >= width - border:
            return "ne"
        return "n"
    if y >= height - border:
        if x <= border:
            return "sw"
        if x >= width - border:
            return "se"
        return "s"
    if x <= border:
        return "w"
    return "e"


def cursor_for_region(region):
    """Tk cursor name for a resize region (None -> default arrow)"""
    return _REGION_CURSORS.get(region, "arrow")


def resize_geometry(region, start, dx, dy, min_length=MIN_LENGTH):
    """Geometry after dragging `region` by (dx, dy) from the button-down geometry.

    East/south edges grow the window, west/north edges move the origin so the
    opposite edge stays where it was. Sizes never drop below `min_length`.
    """
    x, y, width, height = start
    if region is None:
        return start

    if "e" in region:
        width = max(min_length, start[2] + dx)
    elif "w" in region:
        width = max(min_length, start[2] - dx)
        x = start[0] + start[2] - width

    if "s" in region:
        height = max(min_length, start[3] + dy)
    elif "n" in region:
        height = max(min_length, start[3] - dy)
        y = start[1] + start[3] - height

    return (x, y, width, height)


def drag_position(mouse_x, mouse_y, offset):
    """Window origin for a move-drag keeping the button-down cursor offset"""
    return (mouse_x - offset[0], mouse_y - offset[1])


def nudge_geometry(key, geometry, control=False, shift=False, locked=False):
    """Apply an arrow key to the window geometry.

    Plain arrows move by 5 px, Ctrl+arrow by 1 px, and Ctrl+Shift+arrow
    resizes by 1 px (unless the ruler is locked).
    """
    x, y, width, height = geometry
    dx, dy = {"Left": (-1, 0), "Right": (1, 0), "Up": (0, -1), "Down": (0, 1)}.get(key, (0, 0))
    if dx == 0 and dy == 0:
        return geometry

    if control and shift:
        if locked:
            return geometry
        width = max(MIN_LENGTH, width + dx)
        height = max(MIN_LENGTH, height + dy)
        return (x, y, width, height)

    step = 1 if control else 5
    return (x + dx * step, y + dy * step, width, height)


def rotate_geometry(geometry):
    """Swap width and height, keeping the origin"""
    x, y, width, height = geometry
    return (x, y, height, width)


def tick_height(offset):
    if offset % 100 == 0:
        return 15
    if offset % 10 == 0:
        return 10
    return 5


def ruler_lines(length, thickness):
    """Line segments (x1, y1, x2, y2) in ruler space: border plus ticks on both edges"""
    right, bottom = length - 1, thickness - 1
    lines = [
        (0, 0, right, 0),
        (right, 0, right, bottom),
        (right, bottom, 0, bottom),
        (0, bottom, 0, 0),
    ]
    for i in range(0, length, TICK_STEP):
        h = tick_height(i)
        # Top
        lines.append((i, 0, i, h))
        # Bottom
        lines.append((i, thickness, i, thickness - h))
    return lines


def ruler_labels(length, thickness, font_height):
    """Text placements (x, y, text) in ruler space, anchored at their top-left"""
    labels = [(10, thickness // 2 - font_height // 2, f"{length} pixels")]
    for i in range(0, length, 100):
        labels.append((i, LABEL_OFFSET, str(i)))
        labels.append((i, thickness - LABEL_OFFSET - font_height, str(i)))
    return labels


def to_screen(x, y, window_width, vertical=False):
    """Map a ruler-space point to window client coordinates.

    Vertical mode rotates the drawing 90 degrees clockwise and shifts it back
    into view, so ruler x runs down the window and ruler y runs right to left.
    """
    if not vertical:
        return (x, y)
    return (window_width - 1 - y, x)


def is_reachable(geometry, bounds, margin=20):
    """True when at least `margin` pixels of the window overlap the desktop bounds.

    `bounds` is (x, y, width, height) of the whole virtual desktop, whose
    origin may be negative when a monitor sits left of or above the primary.
    """
    x, y, width, height = geometry
    bx, by, bw, bh = bounds
    horizontal = x + width >= bx + margin and x <= bx + bw - margin
    vertical = y + height >= by + margin and y <= by + bh - margin
    return horizontal and vertical
