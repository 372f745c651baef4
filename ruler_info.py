"""Ruler settings that travel between processes as key=value launch parameters."""

import math

from ruler_geometry import MIN_LENGTH

DEFAULT_WIDTH = 400
DEFAULT_HEIGHT = 75
DEFAULT_OPACITY = 0.6

# Attribute order used for parameters and copying
FIELDS = (
    "width",
    "height",
    "left",
    "top",
    "is_vertical",
    "opacity",
    "show_tooltip",
    "is_locked",
    "topmost",
)

_PARAM_KEYS = {
    "width": "width",
    "height": "height",
    "left": "left",
    "top": "top",
    "vertical": "is_vertical",
    "opacity": "opacity",
    "tooltip": "show_tooltip",
    "locked": "is_locked",
    "topmost": "topmost",
}
_FIELD_KEYS = {field: key for key, field in _PARAM_KEYS.items()}

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def parse_bool(value):
    """Parse a boolean parameter value; raises ValueError for anything else"""
    v = str(value).strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def clamp_opacity(value):
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"not a finite number: {value!r}")
    return max(0.1, min(1.0, value))


def clamp_length(value):
    return max(MIN_LENGTH, int(value))


class RulerInfo:
    """Geometry and option flags of one ruler window"""

    def __init__(self, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT, left=None, top=None,
                 is_vertical=False, opacity=DEFAULT_OPACITY, show_tooltip=False,
                 is_locked=False, topmost=False):
        self.width = width
        self.height = height
        self.left = left
        self.top = top
        self.is_vertical = is_vertical
        self.opacity = opacity
        self.show_tooltip = show_tooltip
        self.is_locked = is_locked
        self.topmost = topmost

    @classmethod
    def default(cls):
        return cls()

    def __eq__(self, other):
        if not isinstance(other, RulerInfo):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f) for f in FIELDS)

    def __repr__(self):
        values = ", ".join(f"{f}={getattr(self, f)!r}" for f in FIELDS)
        return f"RulerInfo({values})"

    def to_parameters(self):
        """Serialize to a list of key=value launch parameters"""
        params = []
        for field in FIELDS:
            value = getattr(self, field)
            if value is None:
                continue
            if isinstance(value, bool):
                text = "true" if value else "false"
            elif field == "opacity":
                text = f"{value:.2f}"
            else:
                text = str(int(value))
            params.append(f"{_FIELD_KEYS[field]}={text}")
        return params

    def to_command_line(self):
        return " ".join(self.to_parameters())

    @classmethod
    def from_parameters(cls, args):
        """Build a RulerInfo from key=value arguments.

        Keys are case-insensitive and may be written as `--key=value`.
        Anything that cannot be understood is reported and the default kept.
        """
        info = cls.default()
        for arg in args:
            key, sep, value = str(arg).partition("=")
            key = key.strip().lstrip("-").lower()
            if not sep or not key:
                print(f"Warning: Ignoring malformed parameter: {arg}")
                continue
            field = _PARAM_KEYS.get(key)
            if field is None:
                print(f"Warning: Ignoring unknown parameter: {key}")
                continue
            info._set_field(field, value)
        return info

    @classmethod
    def from_dict(cls, data):
        """Build a RulerInfo from a saved dict, validating each value"""
        info = cls.default()
        if not isinstance(data, dict):
            return info
        for field in FIELDS:
            if field in data and data[field] is not None:
                info._set_field(field, data[field])
        return info

    def to_dict(self):
        return {field: getattr(self, field) for field in FIELDS}

    def _set_field(self, field, value):
        """Convert and store a single value, keeping the current one on failure"""
        try:
            if field in ("width", "height"):
                converted = clamp_length(float(value))
            elif field in ("left", "top"):
                converted = int(float(value))
            elif field == "opacity":
                converted = clamp_opacity(value)
            else:
                converted = value if isinstance(value, bool) else parse_bool(value)
        except (ValueError, TypeError, OverflowError):
            print(f"Warning: Invalid value for {field}: {value!r}")
            return
        setattr(self, field, converted)


def launch_command(info, script, executable, frozen=False):
    """Command line that starts another ruler with the given settings"""
    if frozen:
        # Bundled executable takes the parameters directly
        return [executable, *info.to_parameters()]
    return [executable, script, *info.to_parameters()]


def copy_into(source, target):
    """Copy ruler attributes between a RulerInfo and anything exposing the same names"""
    for field in FIELDS:
        setattr(target, field, getattr(source, field))
    return target
