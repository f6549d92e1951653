# parameters.py
"""
Live-tunable knobs of the plexus field.

`Parameters` is the frozen snapshot the core reads every frame. The
`ParameterStore` is the mutable bag owned by the UI layer; the core never
writes to it and only ever receives snapshots taken from it.
"""
import logging
import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Tuple

from constants import FALLING_GRAVITY_THRESHOLD

# --- Data Contracts ---
#
# class Parameters (frozen dataclass):
#   - Fields: density, speed, gravity, color_speed, range, base_hue (float).
#   - clamped(self) -> Parameters:
#     - Outputs: A new snapshot with every field inside its core range.
#       Non-finite or non-numeric fields fall back to the default value.
#     - Invariants: Never raises.
#
# class ParameterStore:
#   - snapshot(self) -> Parameters
#   - set(self, name: str, value: float) -> Parameters
#   - adjust(self, name: str, delta: float) -> Parameters
#     - Side Effects: Replaces the stored snapshot. Values are clamped to the
#       UI range of the knob. Unknown names raise KeyError.


@dataclass(frozen=True)
class ParameterSpec:
    """UI metadata for one knob."""
    label: str
    ui_min: float
    ui_max: float
    step: float = 1.0
    unit: str = ""


# Slider ranges of the control panel.
PARAMETER_SPECS: Dict[str, ParameterSpec] = {
    "density": ParameterSpec("Density", 10, 150, unit="%"),
    "speed": ParameterSpec("Flow Speed", 0, 100, unit="%"),
    "gravity": ParameterSpec("Gravity", 0, 100),
    "color_speed": ParameterSpec("Color Cycle", 0, 100, unit="hz"),
    "base_hue": ParameterSpec("Base Hue", 0, 360),
    "range": ParameterSpec("Link Range", 20, 100, unit="px"),
}

# Ranges the core enforces on programmatic input. base_hue wraps instead.
CORE_LIMITS: Dict[str, Tuple[float, float]] = {
    "density": (0.0, 200.0),
    "speed": (0.0, 100.0),
    "gravity": (0.0, 100.0),
    "color_speed": (0.0, 100.0),
    "range": (0.0, 150.0),
}


def _as_float(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


@dataclass(frozen=True)
class Parameters:
    """
    One frame's view of the six knobs.
    """
    density: float = 50.0
    speed: float = 50.0
    gravity: float = 0.0
    color_speed: float = 20.0
    range: float = 40.0
    base_hue: float = 180.0

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "Parameters":
        """Builds a snapshot from a config section, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known - {"seed"}
        if unknown:
            logging.warning(f"Ignoring unknown simulation parameters: {sorted(unknown)}")
        defaults = cls()
        return cls(**{
            name: _as_float(values[name], getattr(defaults, name))
            for name in known if name in values
        })

    def clamped(self) -> "Parameters":
        defaults = Parameters()
        values = {}
        for name, (low, high) in CORE_LIMITS.items():
            number = _as_float(getattr(self, name), getattr(defaults, name))
            values[name] = min(max(number, low), high)
        values["base_hue"] = _as_float(self.base_hue, defaults.base_hue) % 360.0
        return Parameters(**values)

    @property
    def is_falling(self) -> bool:
        return self.gravity > FALLING_GRAVITY_THRESHOLD

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class ParameterStore:
    """
    Mutable holder of the current parameters, edited by the UI.
    """
    def __init__(self, initial: Optional[Parameters] = None):
        self._current = initial if initial is not None else Parameters()

    def snapshot(self) -> Parameters:
        return self._current

    def set(self, name: str, value: float) -> Parameters:
        if name not in PARAMETER_SPECS:
            raise KeyError(f"Unknown parameter '{name}'")
        knob = PARAMETER_SPECS[name]
        old_value = getattr(self._current, name)
        new_value = min(max(_as_float(value, old_value), knob.ui_min), knob.ui_max)
        self._current = replace(self._current, **{name: new_value})
        logging.info(f"Parameter '{name}' updated. Old: {old_value:.2f}, New: {new_value:.2f}")
        return self._current

    def adjust(self, name: str, delta: float) -> Parameters:
        if name not in PARAMETER_SPECS:
            raise KeyError(f"Unknown parameter '{name}'")
        return self.set(name, getattr(self._current, name) + delta)
