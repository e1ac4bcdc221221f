"""Velocity → color mapping through a 256-entry jet color table."""

from __future__ import annotations

import math
from typing import NamedTuple

DEFAULT_MAX_VELOCITY = 20.0  # m/s mapped onto the last table entry

_TABLE_SIZE = 256
_RAMP = _TABLE_SIZE // 4  # 64 entries per rising/falling edge


class KmlColor(NamedTuple):
    """An 8-bit color in KML channel order: alpha, blue, green, red."""

    alpha: int
    blue: int
    green: int
    red: int

    @property
    def hex(self) -> str:
        """The ``aabbggrr`` string KML expects."""
        return f"{self.alpha:02x}{self.blue:02x}{self.green:02x}{self.red:02x}"


def _ramp(position: int) -> float:
    """Trapezoid channel profile: rise over 64 steps, hold 63, fall over 64."""
    if position < 0 or position >= 3 * _RAMP - 1:
        return 0.0
    if position < _RAMP:
        return (position + 1) / _RAMP
    if position < 2 * _RAMP - 1:
        return 1.0
    return (3 * _RAMP - 1 - position) / _RAMP


def _build_jet() -> tuple[tuple[float, float, float], ...]:
    # Each channel is the same trapezoid, shifted: blue leads green by 64
    # entries, green leads red by 64.
    offset = _RAMP // 2
    return tuple(
        (
            _ramp(i - offset - _RAMP),
            _ramp(i - offset),
            _ramp(i + offset),
        )
        for i in range(_TABLE_SIZE)
    )


JET: tuple[tuple[float, float, float], ...] = _build_jet()
"""Normalized ``(r, g, b)`` triples, dark blue → cyan → yellow → dark red."""


def velocity_to_index(velocity: float, max_velocity: float = DEFAULT_MAX_VELOCITY) -> int:
    """Return the table index for *velocity*; sign is ignored, range is clamped."""
    fraction = abs(velocity) / max_velocity
    if not math.isfinite(fraction):
        fraction = 1.0 if fraction == math.inf else 0.0
    fraction = min(max(fraction, 0.0), 1.0)
    return int(math.floor(fraction * (_TABLE_SIZE - 1) + 0.5))


def map_velocity_to_color(
    velocity: float,
    alpha: int = 255,
    max_velocity: float = DEFAULT_MAX_VELOCITY,
) -> KmlColor:
    """Map a speed in m/s onto a :class:`KmlColor`.

    Never raises: negative speeds use their magnitude and anything at or
    above *max_velocity* gets the last table entry.
    """
    r, g, b = JET[velocity_to_index(velocity, max_velocity)]
    return KmlColor(
        alpha=alpha,
        blue=int(b * 255 + 0.5),
        green=int(g * 255 + 0.5),
        red=int(r * 255 + 0.5),
    )
