"""Easing curves supported by the storyboard renderer."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Callable


class OsbEasing(IntEnum):
    """Easing identifiers as written to the command stream."""

    NONE = 0
    OUT = 1
    IN = 2
    IN_QUAD = 3
    OUT_QUAD = 4
    IN_OUT_QUAD = 5
    IN_CUBIC = 6
    OUT_CUBIC = 7
    IN_OUT_CUBIC = 8
    IN_QUART = 9
    OUT_QUART = 10
    IN_OUT_QUART = 11
    IN_QUINT = 12
    OUT_QUINT = 13
    IN_OUT_QUINT = 14
    IN_SINE = 15
    OUT_SINE = 16
    IN_OUT_SINE = 17
    IN_EXPO = 18
    OUT_EXPO = 19
    IN_OUT_EXPO = 20
    IN_CIRC = 21
    OUT_CIRC = 22
    IN_OUT_CIRC = 23
    IN_ELASTIC = 24
    OUT_ELASTIC = 25
    OUT_ELASTIC_HALF = 26
    OUT_ELASTIC_QUARTER = 27
    IN_OUT_ELASTIC = 28
    IN_BACK = 29
    OUT_BACK = 30
    IN_OUT_BACK = 31
    IN_BOUNCE = 32
    OUT_BOUNCE = 33
    IN_OUT_BOUNCE = 34


ELASTIC_PERIOD = 2 * math.pi / 0.3
ELASTIC_OFFSET = 0.3 / 4
BACK_OVERSHOOT = 1.70158
BACK_OVERSHOOT_IN_OUT = BACK_OVERSHOOT * 1.525


def _out_bounce(t: float) -> float:
    if t < 1 / 2.75:
        return 7.5625 * t * t
    if t < 2 / 2.75:
        t -= 1.5 / 2.75
        return 7.5625 * t * t + 0.75
    if t < 2.5 / 2.75:
        t -= 2.25 / 2.75
        return 7.5625 * t * t + 0.9375
    t -= 2.625 / 2.75
    return 7.5625 * t * t + 0.984375


def _in_out(ease_in: Callable[[float], float]) -> Callable[[float], float]:
    """Build a symmetric in/out curve from an "in" curve."""

    def curve(t: float) -> float:
        if t < 0.5:
            return ease_in(t * 2) / 2
        return 1 - ease_in((1 - t) * 2) / 2

    return curve


def _in_elastic(t: float) -> float:
    return -(2 ** (-10 + 10 * t)) * math.sin((1 - ELASTIC_OFFSET - t) * ELASTIC_PERIOD)


def _out_elastic(scale: float) -> Callable[[float], float]:
    def curve(t: float) -> float:
        return 2 ** (-10 * t) * math.sin((scale * t - ELASTIC_OFFSET) * ELASTIC_PERIOD) + 1

    return curve


def _in_out_elastic(t: float) -> float:
    t *= 2
    if t < 1:
        return -0.5 * 2 ** (-10 + 10 * t) * math.sin(
            (1 - ELASTIC_OFFSET * 1.5 - t) * ELASTIC_PERIOD / 1.5
        )
    t -= 1
    return 0.5 * 2 ** (-10 * t) * math.sin((t - ELASTIC_OFFSET * 1.5) * ELASTIC_PERIOD / 1.5) + 1


def _in_back(t: float) -> float:
    return t * t * ((BACK_OVERSHOOT + 1) * t - BACK_OVERSHOOT)


def _in_out_back(t: float) -> float:
    c = BACK_OVERSHOOT_IN_OUT
    t *= 2
    if t < 1:
        return 0.5 * t * t * ((c + 1) * t - c)
    t -= 2
    return 0.5 * (t * t * ((c + 1) * t + c) + 2)


def _power_in(power: int) -> Callable[[float], float]:
    return lambda t: t ** power


def _power_out(power: int) -> Callable[[float], float]:
    return lambda t: 1 - (1 - t) ** power


def _in_expo(t: float) -> float:
    return 2 ** (10 * (t - 1))


def _in_circ(t: float) -> float:
    return 1 - math.sqrt(max(0.0, 1 - t * t))


EASING_CURVES: dict[OsbEasing, Callable[[float], float]] = {
    OsbEasing.NONE: lambda t: t,
    OsbEasing.OUT: _power_out(2),
    OsbEasing.IN: _power_in(2),
    OsbEasing.IN_QUAD: _power_in(2),
    OsbEasing.OUT_QUAD: _power_out(2),
    OsbEasing.IN_OUT_QUAD: _in_out(_power_in(2)),
    OsbEasing.IN_CUBIC: _power_in(3),
    OsbEasing.OUT_CUBIC: _power_out(3),
    OsbEasing.IN_OUT_CUBIC: _in_out(_power_in(3)),
    OsbEasing.IN_QUART: _power_in(4),
    OsbEasing.OUT_QUART: _power_out(4),
    OsbEasing.IN_OUT_QUART: _in_out(_power_in(4)),
    OsbEasing.IN_QUINT: _power_in(5),
    OsbEasing.OUT_QUINT: _power_out(5),
    OsbEasing.IN_OUT_QUINT: _in_out(_power_in(5)),
    OsbEasing.IN_SINE: lambda t: 1 - math.cos(t * math.pi / 2),
    OsbEasing.OUT_SINE: lambda t: math.sin(t * math.pi / 2),
    OsbEasing.IN_OUT_SINE: lambda t: 0.5 - 0.5 * math.cos(math.pi * t),
    OsbEasing.IN_EXPO: _in_expo,
    OsbEasing.OUT_EXPO: lambda t: 1 - 2 ** (-10 * t),
    OsbEasing.IN_OUT_EXPO: _in_out(_in_expo),
    OsbEasing.IN_CIRC: _in_circ,
    OsbEasing.OUT_CIRC: lambda t: 1 - _in_circ(1 - t),
    OsbEasing.IN_OUT_CIRC: _in_out(_in_circ),
    OsbEasing.IN_ELASTIC: _in_elastic,
    OsbEasing.OUT_ELASTIC: _out_elastic(1.0),
    OsbEasing.OUT_ELASTIC_HALF: _out_elastic(0.5),
    OsbEasing.OUT_ELASTIC_QUARTER: _out_elastic(0.25),
    OsbEasing.IN_OUT_ELASTIC: _in_out_elastic,
    OsbEasing.IN_BACK: _in_back,
    OsbEasing.OUT_BACK: lambda t: 1 - _in_back(1 - t),
    OsbEasing.IN_OUT_BACK: _in_out_back,
    OsbEasing.IN_BOUNCE: lambda t: 1 - _out_bounce(1 - t),
    OsbEasing.OUT_BOUNCE: _out_bounce,
    OsbEasing.IN_OUT_BOUNCE: lambda t: (
        0.5 - 0.5 * _out_bounce(1 - t * 2) if t < 0.5 else 0.5 * _out_bounce((t - 0.5) * 2) + 0.5
    ),
}


def ease(easing: OsbEasing, t: float) -> float:
    """Apply an easing curve to normalized progress.

    Args:
        easing: The easing curve.
        t: Progress in the 0-1 range.

    Returns:
        Eased progress (may overshoot for elastic/back curves).
    """
    return EASING_CURVES[OsbEasing(easing)](t)
