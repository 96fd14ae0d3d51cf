"""Shared effect types and intensity handling."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

INTENSITY_CEILING = 1000.0


@dataclass(frozen=True)
class Layer:
    """A horizontal band produced by layer splitting."""
    y: int
    height: int


@dataclass(frozen=True)
class Gap:
    """A black band inserted between separated layers."""
    y: int
    height: int


def active(intensity: float) -> bool:
    """Effects run only for intensities strictly above zero (NaN is off)."""
    return intensity > 0


def bounded(intensity: float, ceiling: float = INTENSITY_CEILING) -> float:
    """Clamp an intensity to a finite working range."""
    if math.isnan(intensity):
        return 0.0
    return min(max(float(intensity), 0.0), ceiling)


def chance(rng: np.random.Generator, p: float) -> bool:
    return rng.random() < p


def make_rng(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()
