"""JSON configuration for the pixel ruler, with defaults repaired after loading."""

import json
import os
from datetime import datetime

CONFIG_FILE = "pixel_ruler_config.json"

DEFAULT_CONFIG = {
    "font_family": "Tahoma",
    "font_size": 10,
    "bg_color": "white",
    "fg_color": "black",
    "resize_border": 5,
    "tooltip_delay_ms": 10000,
    "theme": "arc",  # ttkthemes theme for dialogs
    "tray_icon": True,
    "remember_position": True,
    "ruler": None,  # last RulerInfo as a dict
}


def _clamped_int(config, key, low, high):
    try:
        config[key] = max(low, min(high, int(config.get(key, DEFAULT_CONFIG[key]))))
    except (ValueError, TypeError, OverflowError):
        config[key] = DEFAULT_CONFIG[key]


def load_config(path=CONFIG_FILE):
    """Load configuration from file, falling back to defaults"""
    config = dict(DEFAULT_CONFIG)
    if os.path.exists(path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                saved = json.load(f)
            if not isinstance(saved, dict):
                raise ValueError("config root must be an object")
            config.update(saved)
        except Exception as e:
            # If config is corrupted, keep defaults and move the file aside.
            print(f"Warning: Could not read {path}: {e}")
            try:
                ts = datetime.now().strftime('%Y%m%d-%H%M%S')
                base, ext = os.path.splitext(path)
                os.replace(path, f"{base}.bad-{ts}{ext}")
            except OSError:
                pass

    # Normalize/repair config values after loading
    _clamped_int(config, "font_size", 6, 32)
    _clamped_int(config, "resize_border", 1, 20)
    _clamped_int(config, "tooltip_delay_ms", 500, 60000)

    for key in ("font_family", "bg_color", "fg_color", "theme"):
        if not isinstance(config.get(key), str) or not config[key].strip():
            config[key] = DEFAULT_CONFIG[key]

    for key in ("tray_icon", "remember_position"):
        if not isinstance(config.get(key), bool):
            config[key] = DEFAULT_CONFIG[key]

    if not isinstance(config.get("ruler"), dict):
        config["ruler"] = None

    return config


def save_config(config, path=CONFIG_FILE):
    """Save configuration to file"""
    try:
        tmp_path = f"{path}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
        return True
    except (OSError, TypeError, ValueError) as e:
        # Avoid crashing on transient I/O issues.
        print(f"Warning: Could not save {path}: {e}")
        return False
