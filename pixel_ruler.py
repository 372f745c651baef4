"""Borderless translucent pixel ruler window built on tkinter."""

import ctypes
import os
import sys
import subprocess
import tkinter as tk
from tkinter import ttk, messagebox
from tkinter import font as tkfont
from threading import Thread

from PIL import Image, ImageDraw, ImageTk
import pystray
from ttkthemes import ThemedStyle

from ruler_config import load_config, save_config
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
    to_screen,
)
from ruler_info import RulerInfo, copy_into, launch_command

APP_NAME = "Pixel Ruler"
APP_VERSION = "1.0.0"

ABOUT_TEXT = (
    f"{APP_NAME} {APP_VERSION}\n"
    "A translucent on-screen ruler for measuring in pixels.\n\n"
    "Right-click for options.\n"
    "Double-click or Space: rotate\n"
    "Arrows: move 5 px, Ctrl+Arrows: move 1 px\n"
    "Ctrl+Shift+Arrows: resize 1 px\n"
    "Esc: exit"
)

# Modifier bits in tk event.state
SHIFT_MASK = 0x0001
CONTROL_MASK = 0x0004


def get_virtual_screen(root):
    """Bounds (x, y, width, height) of the whole desktop across all monitors"""
    try:
        # Get virtual screen dimensions using Windows API
        SM_XVIRTUALSCREEN = 76
        SM_YVIRTUALSCREEN = 77
        SM_CXVIRTUALSCREEN = 78
        SM_CYVIRTUALSCREEN = 79

        user32 = ctypes.windll.user32
        bounds = (
            int(user32.GetSystemMetrics(SM_XVIRTUALSCREEN)),
            int(user32.GetSystemMetrics(SM_YVIRTUALSCREEN)),
            int(user32.GetSystemMetrics(SM_CXVIRTUALSCREEN)),
            int(user32.GetSystemMetrics(SM_CYVIRTUALSCREEN)),
        )
        if bounds[2] > 0 and bounds[3] > 0:
            return bounds
    except (AttributeError, OSError):
        # Not on Windows
        pass
    # X11 reports the full multi-monitor screen here
    return (0, 0, int(root.winfo_screenwidth()), int(root.winfo_screenheight()))


def create_ruler_icon(size=64):
    """Draw a small ruler image used for the window and tray icons"""
    image = Image.new('RGBA', (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    top, bottom = size * 3 // 8, size * 5 // 8
    draw.rectangle([2, top, size - 3, bottom], fill=(255, 255, 255, 230), outline=(0, 0, 0, 255), width=2)
    step = max(2, size // 16)
    for i, x in enumerate(range(4, size - 4, step)):
        tick_h = (bottom - top) // 2 if i % 5 == 0 else (bottom - top) // 4
        draw.line([x, top, x, top + tick_h], fill=(0, 0, 0, 255), width=1)
    return image


class RulerToolTip:
    """Small floating label showing the ruler size"""

    def __init__(self, root, delay_ms):
        self.root = root
        self.delay_ms = delay_ms
        self.window = None
        self.label = None
        self._hide_job = None

    @property
    def visible(self):
        return self.window is not None

    def show(self, x, y, text):
        self.hide()
        try:
            self.window = tk.Toplevel(self.root)
            self.window.wm_overrideredirect(True)
            self.window.wm_attributes('-topmost', True)
            self.window.wm_geometry(f"+{x + 16}+{y + 16}")
            self.label = tk.Label(
                self.window,
                text=text,
                justify=tk.LEFT,
                background="#ffffcc",
                foreground="#000000",
                relief=tk.SOLID,
                borderwidth=1,
                font=('Tahoma', 8),
                padx=6,
                pady=4
            )
            self.label.pack()
            self._hide_job = self.root.after(self.delay_ms, self.hide)
        except tk.TclError as e:
            print(f"Warning: Could not show tooltip: {e}")
            self.window = None

    def update_text(self, text):
        if self.label is not None:
            try:
                self.label.config(text=text)
            except tk.TclError:
                pass

    def hide(self):
        if self._hide_job is not None:
            try:
                self.root.after_cancel(self._hide_job)
            except tk.TclError:
                pass
            self._hide_job = None
        if self.window is not None:
            try:
                self.window.destroy()
            except tk.TclError:
                pass
        self.window = None
        self.label = None


class SetSizeDialog(tk.Toplevel):
    """Modal dialog asking for an exact width and height"""

    def __init__(self, parent, width, height, topmost=False):
        super().__init__(parent)
        self.title("Set size")
        self.resizable(False, False)
        self.result = None
        if topmost:
            self.attributes('-topmost', True)

        frame = ttk.Frame(self, padding=12)
        frame.pack(fill=tk.BOTH, expand=True)

        self.width_var = tk.StringVar(value=str(width))
        self.height_var = tk.StringVar(value=str(height))

        ttk.Label(frame, text="Width:").grid(row=0, column=0, sticky="w", pady=3)
        width_entry = ttk.Entry(frame, textvariable=self.width_var, width=10)
        width_entry.grid(row=0, column=1, pady=3, padx=(6, 0))
        ttk.Label(frame, text="pixels").grid(row=0, column=2, sticky="w", padx=(4, 0))

        ttk.Label(frame, text="Height:").grid(row=1, column=0, sticky="w", pady=3)
        ttk.Entry(frame, textvariable=self.height_var, width=10).grid(row=1, column=1, pady=3, padx=(6, 0))
        ttk.Label(frame, text="pixels").grid(row=1, column=2, sticky="w", padx=(4, 0))

        self.error_label = ttk.Label(frame, text="", foreground="#cc0000")
        self.error_label.grid(row=2, column=0, columnspan=3, sticky="w")

        buttons = ttk.Frame(frame)
        buttons.grid(row=3, column=0, columnspan=3, sticky="e", pady=(8, 0))
        ttk.Button(buttons, text="OK", command=self.on_ok).pack(side=tk.LEFT, padx=(0, 6))
        ttk.Button(buttons, text="Cancel", command=self.destroy).pack(side=tk.LEFT)

        self.bind("<Return>", self.on_ok)
        self.bind("<Escape>", lambda event: self.destroy())

        self.transient(parent)
        width_entry.focus_set()
        width_entry.select_range(0, tk.END)

    def on_ok(self, event=None):
        try:
            width = int(self.width_var.get().strip())
            height = int(self.height_var.get().strip())
        except ValueError:
            self.error_label.config(text="Please enter whole numbers.")
            return
        if width < MIN_LENGTH or height < MIN_LENGTH:
            self.error_label.config(text=f"Minimum size is {MIN_LENGTH} pixels.")
            return
        self.result = (width, height)
        self.destroy()

    def show(self):
        """Block until the dialog closes and return (width, height) or None"""
        try:
            self.grab_set()
        except tk.TclError:
            # Another window may already hold the grab
            pass
        self.wait_window()
        return self.result


class PixelRuler:
    def __init__(self, root, ruler_info=None, config=None):
        self.root = root
        self.root.title("Ruler")
        self.config = config if config is not None else load_config()
        ruler_info = ruler_info or RulerInfo.default()

        self.style = None
        self._init_style()

        # Window state
        self._geometry = (0, 0, ruler_info.width, ruler_info.height)
        self._is_vertical = False
        self._is_locked = False
        self._show_tooltip = False
        self._topmost = False
        self._opacity = 1.0

        # Mouse state
        self.offset = (0, 0)
        self.mouse_down_point = (0, 0)
        self.mouse_down_geometry = self._geometry
        self.resize_region = None
        self.current_cursor = "arrow"

        self.tray_icon = None
        self.icon_image = create_ruler_icon()
        self.icon_photo = None

        # Menu state
        self.topmost_var = tk.BooleanVar(value=False)
        self.vertical_var = tk.BooleanVar(value=False)
        self.tooltip_var = tk.BooleanVar(value=False)
        self.locked_var = tk.BooleanVar(value=False)
        self.opacity_var = tk.IntVar(value=100)

        self.font = tkfont.Font(root=self.root, family=self.config["font_family"], size=self.config["font_size"])
        self.tooltip = RulerToolTip(self.root, self.config["tooltip_delay_ms"])

        self.root.overrideredirect(True)
        self.root.configure(bg=self.config["bg_color"])
        self._set_window_icon()

        self.canvas = tk.Canvas(self.root, bg=self.config["bg_color"], highlightthickness=0, bd=0)
        self.canvas.pack(fill=tk.BOTH, expand=True)

        self.context_menu = self.create_menu()

        # Apply launch settings through the same properties the menu uses
        copy_into(ruler_info, self)
        self._keep_on_screen()

        # Bind Events
        self.canvas.bind("<Configure>", self.redraw)
        self.canvas.bind("<Button-1>", self.on_press)
        self.canvas.bind("<B1-Motion>", self.on_drag)
        self.canvas.bind("<ButtonRelease-1>", self.on_release)
        self.canvas.bind("<Double-Button-1>", self.on_double_click)
        self.canvas.bind("<Motion>", self.on_mouse_move)
        self.canvas.bind("<Button-3>", self.on_right_click)
        self.canvas.bind("<Enter>", self.on_enter)
        self.canvas.bind("<Leave>", self.on_leave)

        # Keyboard Shortcuts
        for key in ("Left", "Right", "Up", "Down"):
            self.root.bind(f"<KeyPress-{key}>", self.on_arrow_key)
        self.root.bind("<space>", self.change_orientation)
        self.root.bind("<Escape>", self.close_app)
        self.root.protocol("WM_DELETE_WINDOW", self.close_app)

        if self.config["tray_icon"]:
            self.setup_tray_icon()

        self.redraw()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _init_style(self):
        """Apply the ttkthemes theme used by dialogs"""
        try:
            self.style = ThemedStyle(self.root)
            self.style.set_theme(self.config["theme"])
        except tk.TclError as e:
            print(f"Warning: Could not apply {self.config['theme']} theme: {e}")
            self.style = ttk.Style(self.root)

    def _set_window_icon(self):
        try:
            self.icon_photo = ImageTk.PhotoImage(self.icon_image)
            self.root.iconphoto(True, self.icon_photo)
        except tk.TclError as e:
            print(f"Warning: Could not set window icon: {e}")

    def _make_menu(self, parent):
        return tk.Menu(
            parent,
            tearoff=0,
            bg="#fbfbfc",
            fg="#5c616c",
            activebackground="#5294e2",
            activeforeground="white",
            selectcolor="#5294e2",
            bd=1,
            relief=tk.FLAT,
        )

    def create_menu(self):
        """Build the right-click menu"""
        menu = self._make_menu(self.root)
        menu.add_checkbutton(label="Stay On Top", variable=self.topmost_var,
                             command=lambda: setattr(self, "topmost", self.topmost_var.get()))
        menu.add_checkbutton(label="Vertical", variable=self.vertical_var,
                             command=lambda: self.set_orientation(self.vertical_var.get()))
        menu.add_checkbutton(label="Tool Tip", variable=self.tooltip_var,
                             command=lambda: setattr(self, "show_tooltip", self.tooltip_var.get()))

        opacity_menu = self._make_menu(menu)
        for percent in range(10, 101, 10):
            opacity_menu.add_radiobutton(label=f"{percent}%", value=percent, variable=self.opacity_var,
                                         command=self.on_opacity_selected)
        menu.add_cascade(label="Opacity", menu=opacity_menu)

        menu.add_checkbutton(label="Lock Resizing", variable=self.locked_var,
                             command=lambda: setattr(self, "is_locked", self.locked_var.get()))
        menu.add_command(label="Set size...", command=self.show_set_size_dialog)
        menu.add_command(label="Duplicate", command=self.duplicate)
        menu.add_command(label="Copy Settings", command=self.copy_settings)
        menu.add_separator()
        menu.add_command(label="About...", command=self.show_about)
        menu.add_separator()
        menu.add_command(label="Exit", command=self.close_app)
        return menu

    def setup_tray_icon(self):
        """Setup system tray icon"""
        try:
            menu = pystray.Menu(
                pystray.MenuItem('Show Ruler', self.show_from_tray, default=True),
                pystray.MenuItem('Duplicate', lambda icon, item: self.root.after(0, self.duplicate)),
                pystray.MenuItem('Exit', self.exit_from_tray)
            )
            self.tray_icon = pystray.Icon("PixelRuler", self.icon_image, APP_NAME, menu)
            Thread(target=self.tray_icon.run, daemon=True).start()
        except Exception as e:
            print(f"Could not create tray icon: {e}")
            self.tray_icon = None

    def show_from_tray(self, icon=None, item=None):
        self.root.after(0, self._show_window)

    def _show_window(self):
        self.root.deiconify()
        self.root.lift()
        self._keep_on_screen()

    def exit_from_tray(self, icon=None, item=None):
        self.root.after(0, self.close_app)

    # ------------------------------------------------------------------
    # Properties mirrored by RulerInfo
    # ------------------------------------------------------------------

    @property
    def width(self):
        return self._geometry[2]

    @width.setter
    def width(self, value):
        x, y, _, height = self._geometry
        self._apply_geometry((x, y, max(MIN_LENGTH, int(value)), height))

    @property
    def height(self):
        return self._geometry[3]

    @height.setter
    def height(self, value):
        x, y, width, _ = self._geometry
        self._apply_geometry((x, y, width, max(MIN_LENGTH, int(value))))

    @property
    def left(self):
        return self._geometry[0]

    @left.setter
    def left(self, value):
        x, y, width, height = self._geometry
        if value is None:
            value = (self.root.winfo_screenwidth() - width) // 2
        self._apply_geometry((int(value), y, width, height))

    @property
    def top(self):
        return self._geometry[1]

    @top.setter
    def top(self, value):
        x, y, width, height = self._geometry
        if value is None:
            value = (self.root.winfo_screenheight() - height) // 2
        self._apply_geometry((x, int(value), width, height))

    @property
    def is_vertical(self):
        return self._is_vertical

    @is_vertical.setter
    def is_vertical(self, value):
        self._is_vertical = bool(value)
        self.vertical_var.set(self._is_vertical)
        self.redraw()

    @property
    def is_locked(self):
        return self._is_locked

    @is_locked.setter
    def is_locked(self, value):
        self._is_locked = bool(value)
        self.locked_var.set(self._is_locked)
        if self._is_locked:
            self.resize_region = None
            self._set_cursor("arrow")

    @property
    def show_tooltip(self):
        return self._show_tooltip

    @show_tooltip.setter
    def show_tooltip(self, value):
        self._show_tooltip = bool(value)
        self.tooltip_var.set(self._show_tooltip)
        if not self._show_tooltip:
            self.tooltip.hide()

    @property
    def topmost(self):
        return self._topmost

    @topmost.setter
    def topmost(self, value):
        self._topmost = bool(value)
        self.topmost_var.set(self._topmost)
        try:
            self.root.attributes('-topmost', self._topmost)
        except tk.TclError as e:
            print(f"Warning: Could not change stay-on-top: {e}")

    @property
    def opacity(self):
        return self._opacity

    @opacity.setter
    def opacity(self, value):
        self._opacity = max(0.1, min(1.0, float(value)))
        self.opacity_var.set(int(round(self._opacity * 100)))
        try:
            self.root.attributes('-alpha', self._opacity)
        except tk.TclError as e:
            print(f"Warning: Could not change opacity: {e}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def get_ruler_info(self):
        return copy_into(self, RulerInfo())

    def _apply_geometry(self, geometry):
        x, y, width, height = geometry
        if geometry == self._geometry and self.root.winfo_ismapped():
            return
        self._geometry = (x, y, width, height)
        try:
            self.root.geometry(f"{width}x{height}{x:+d}{y:+d}")
        except tk.TclError as e:
            print(f"Warning: Could not update window geometry: {e}")
        # Tooltip shows the live size
        if self.tooltip.visible:
            self.tooltip.update_text(self.size_text())

    def _keep_on_screen(self):
        """Re-center when a saved position would leave the ruler out of reach"""
        if not is_reachable(self._geometry, get_virtual_screen(self.root)):
            self.left = None
            self.top = None

    def _set_cursor(self, cursor):
        if cursor == self.current_cursor:
            return
        self.current_cursor = cursor
        try:
            self.canvas.config(cursor=cursor)
        except tk.TclError:
            pass

    def size_text(self):
        return f"Width: {self.width} pixels\nHeight: {self.height} pixels"

    def set_orientation(self, vertical):
        """Switch orientation, swapping width and height when it changes"""
        vertical = bool(vertical)
        if vertical != self._is_vertical:
            self._apply_geometry(rotate_geometry(self._geometry))
        self.is_vertical = vertical

    def change_orientation(self, event=None):
        self.set_orientation(not self._is_vertical)

    # ------------------------------------------------------------------
    # Menu handlers
    # ------------------------------------------------------------------

    def on_opacity_selected(self):
        self.opacity = self.opacity_var.get() / 100

    def show_set_size_dialog(self):
        dialog = SetSizeDialog(self.root, self.width, self.height, topmost=self.topmost)
        size = dialog.show()
        if size:
            x, y, _, _ = self._geometry
            self._apply_geometry((x, y, size[0], size[1]))

    def duplicate(self):
        """Start another ruler process with the same settings"""
        command = launch_command(self.get_ruler_info(), os.path.abspath(__file__),
                                 executable=sys.executable, frozen=getattr(sys, 'frozen', False))
        try:
            subprocess.Popen(command)
        except OSError as e:
            print(f"Warning: Could not duplicate ruler: {e}")
            messagebox.showerror(APP_NAME, f"Could not start a new ruler:\n{e}", parent=self.root)

    def copy_settings(self):
        """Copy the launch parameters for this ruler to the clipboard"""
        parameters = self.get_ruler_info().to_command_line()
        self.root.clipboard_clear()
        self.root.clipboard_append(parameters)
        messagebox.showinfo(APP_NAME, f"Copied to clipboard:\n{parameters}", parent=self.root)

    def show_about(self):
        messagebox.showinfo(f"About {APP_NAME}", ABOUT_TEXT, parent=self.root)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def on_press(self, event):
        """Remember where the drag started and whether it grabbed the border"""
        try:
            self.root.focus_force()
        except tk.TclError:
            pass
        self.tooltip.hide()
        x, y, width, height = self._geometry
        self.offset = (event.x_root - x, event.y_root - y)
        self.mouse_down_point = (event.x_root, event.y_root)
        self.mouse_down_geometry = self._geometry

        border = self.config["resize_border"]
        if not self._is_locked and in_resize_border(event.x, event.y, width, height, border):
            self.resize_region = get_resize_region(event.x, event.y, width, height, border)
        else:
            self.resize_region = None

    def on_drag(self, event):
        if self.resize_region is not None:
            dx = event.x_root - self.mouse_down_point[0]
            dy = event.y_root - self.mouse_down_point[1]
            self._apply_geometry(resize_geometry(self.resize_region, self.mouse_down_geometry, dx, dy))
            return

        _, _, width, height = self._geometry
        x, y = drag_position(event.x_root, event.y_root, self.offset)
        self._apply_geometry((x, y, width, height))

    def on_release(self, event):
        self.resize_region = None
        self._refresh_tooltip(event)

    def on_double_click(self, event):
        self.resize_region = None
        self.change_orientation()

    def on_mouse_move(self, event):
        """Show a resize cursor over the border"""
        if self.resize_region is not None:
            return
        _, _, width, height = self._geometry
        border = self.config["resize_border"]
        if not self._is_locked and in_resize_border(event.x, event.y, width, height, border):
            self._set_cursor(cursor_for_region(get_resize_region(event.x, event.y, width, height, border)))
        else:
            self._set_cursor("arrow")
        self._refresh_tooltip(event)

    def on_enter(self, event):
        self._refresh_tooltip(event)

    def _refresh_tooltip(self, event):
        """Show the size tooltip again while hovering, once it was hidden"""
        if self._show_tooltip and not self.tooltip.visible:
            self.tooltip.show(event.x_root, event.y_root, self.size_text())

    def on_leave(self, event):
        self.tooltip.hide()

    def on_arrow_key(self, event):
        control = bool(event.state & CONTROL_MASK)
        shift = bool(event.state & SHIFT_MASK)
        self._apply_geometry(nudge_geometry(event.keysym, self._geometry, control=control,
                                            shift=shift, locked=self._is_locked))

    def on_right_click(self, event):
        """Show the context menu at the cursor"""
        self.tooltip.hide()
        try:
            self.context_menu.tk_popup(event.x_root, event.y_root)
        finally:
            try:
                self.context_menu.grab_release()
            except tk.TclError:
                pass

    # ------------------------------------------------------------------
    # Paint
    # ------------------------------------------------------------------

    def redraw(self, event=None):
        """Repaint border, ticks and labels"""
        try:
            self.canvas.delete("all")
            width, height = self.width, self.height
            vertical = self._is_vertical
            if vertical:
                length, thickness = height, width
            else:
                length, thickness = width, height

            fg = self.config["fg_color"]
            for x1, y1, x2, y2 in ruler_lines(length, thickness):
                sx1, sy1 = to_screen(x1, y1, width, vertical)
                sx2, sy2 = to_screen(x2, y2, width, vertical)
                self.canvas.create_line(sx1, sy1, sx2, sy2, fill=fg)

            font_height = self.font.metrics("linespace")
            angle = -90 if vertical else 0
            for x, y, text in ruler_labels(length, thickness, font_height):
                sx, sy = to_screen(x, y, width, vertical)
                self.canvas.create_text(sx, sy, text=text, anchor="nw", angle=angle,
                                        font=self.font, fill=fg)
        except tk.TclError as e:
            # Canvas or window may have been destroyed
            print(f"Warning: Could not draw ruler: {e}")

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def close_app(self, event=None):
        """Close application"""
        try:
            if self.config["remember_position"]:
                self.config["ruler"] = self.get_ruler_info().to_dict()
            save_config(self.config)

            self.tooltip.hide()

            # Stop tray icon
            if self.tray_icon:
                try:
                    self.tray_icon.stop()
                except Exception as e:
                    print(f"Warning: Could not stop tray icon: {e}")

            if self.root and self.root.winfo_exists():
                self.root.destroy()
        except tk.TclError as e:
            print(f"Error during app closure: {e}")
            # Force exit if normal cleanup fails
            try:
                self.root.quit()
            except tk.TclError:
                sys.exit(0)


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    config = load_config()
    if argv:
        ruler_info = RulerInfo.from_parameters(argv)
    elif config["remember_position"] and config["ruler"]:
        ruler_info = RulerInfo.from_dict(config["ruler"])
    else:
        ruler_info = RulerInfo.default()

    root = tk.Tk()
    PixelRuler(root, ruler_info, config)
    root.mainloop()


if __name__ == "__main__":
    main()
