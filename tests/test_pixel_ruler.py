import tkinter as tk
from types import SimpleNamespace

import pytest

from ruler_config import DEFAULT_CONFIG
from ruler_info import RulerInfo


@pytest.fixture
def root():
    try:
        root = tk.Tk()
    except tk.TclError:
        pytest.skip("no display available")
    yield root
    root.destroy()


@pytest.fixture
def pixel_ruler(root):
    return pytest.importorskip("pixel_ruler")


def make_ruler(pixel_ruler, root, info):
    config = dict(DEFAULT_CONFIG, tray_icon=False, remember_position=False)
    return pixel_ruler.PixelRuler(root, info, config)


def mouse_event(x=150, y=25):
    return SimpleNamespace(x=x, y=y, x_root=x + 10, y_root=y + 10)


def test_unknown_position_centres_using_launch_size(pixel_ruler, root):
    app = make_ruler(pixel_ruler, root, RulerInfo(width=300, height=50))
    assert (app.width, app.height) == (300, 50)
    assert app.left == (root.winfo_screenwidth() - 300) // 2
    assert app.top == (root.winfo_screenheight() - 50) // 2


def test_orientation_swaps_only_on_change(pixel_ruler, root):
    app = make_ruler(pixel_ruler, root, RulerInfo(width=300, height=50, left=10, top=20))
    app.set_orientation(False)
    assert (app.width, app.height, app.is_vertical) == (300, 50, False)

    app.set_orientation(True)
    assert (app.width, app.height, app.is_vertical) == (50, 300, True)
    assert app.vertical_var.get() is True

    app.change_orientation()
    assert (app.left, app.top, app.width, app.height) == (10, 20, 300, 50)


def test_launch_settings_survive_in_ruler_info(pixel_ruler, root):
    info = RulerInfo(width=250, height=60, left=30, top=40, is_vertical=True,
                     opacity=0.5, show_tooltip=True, is_locked=True, topmost=True)
    app = make_ruler(pixel_ruler, root, info)
    assert app.get_ruler_info() == info


def test_position_on_secondary_monitor_is_kept(pixel_ruler, root, monkeypatch):
    monkeypatch.setattr(pixel_ruler, "get_virtual_screen", lambda r: (-1920, 0, 3840, 1080))
    app = make_ruler(pixel_ruler, root, RulerInfo(width=300, height=50, left=-1500, top=100))
    assert (app.left, app.top) == (-1500, 100)


def test_position_off_every_monitor_is_recentred(pixel_ruler, root, monkeypatch):
    monkeypatch.setattr(pixel_ruler, "get_virtual_screen", lambda r: (0, 0, 1920, 1080))
    app = make_ruler(pixel_ruler, root, RulerInfo(width=300, height=50, left=5000, top=100))
    assert app.left == (root.winfo_screenwidth() - 300) // 2


def test_tooltip_comes_back_while_hovering(pixel_ruler, root):
    app = make_ruler(pixel_ruler, root, RulerInfo(width=300, height=50, left=10, top=20))
    app.on_mouse_move(mouse_event())
    assert not app.tooltip.visible

    app.show_tooltip = True
    app.on_mouse_move(mouse_event())
    assert app.tooltip.visible
    assert app.tooltip.label.cget("text") == "Width: 300 pixels\nHeight: 50 pixels"

    # hidden by a click or the auto-hide timer
    app.on_press(mouse_event())
    assert not app.tooltip.visible
    app.on_release(mouse_event())
    assert app.tooltip.visible

    app.tooltip.hide()
    app.on_mouse_move(mouse_event())
    assert app.tooltip.visible

    app.show_tooltip = False
    assert not app.tooltip.visible
