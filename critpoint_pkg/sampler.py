"""Surface sampling for 3-D rendering.

f is evaluated on a uniform grid over [-R, R] x [-R, R]. A cell whose value
cannot be computed is recorded as missing (NaN in ``z``) instead of failing
the whole grid, so the surface renders with holes.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
import sympy as sp

from .config import GRID_INTERVALS
from .expression import evaluate_float, parse
from .logging_config import get_logger
from .types import (
    ClassifiedPoint,
    ComputationError,
    OverlayPoint,
    PlotGenerationError,
    SampledSurface,
    ValidationError,
)

logger = get_logger("sampler")


def grid_axis(plot_range: float, intervals: int = GRID_INTERVALS) -> np.ndarray:
    """Coordinates from -R to R inclusive, ``intervals + 1`` of them."""
    return np.linspace(-plot_range, plot_range, intervals + 1)


def sample_grid(expr: sp.Expr, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Evaluate ``expr`` at every (xs[i], ys[j]).

    Returns:
        (z, missing) where missing[i, j] is True for cells with no value
    """
    z = np.full((len(xs), len(ys)), np.nan)
    missing = np.zeros((len(xs), len(ys)), dtype=bool)
    for i, x_val in enumerate(xs):
        for j, y_val in enumerate(ys):
            value = evaluate_float(expr, {"x": x_val, "y": y_val})
            if value is None:
                missing[i, j] = True
            else:
                z[i, j] = value
    return z, missing


def overlay_points(
    expr: sp.Expr, points: Sequence[ClassifiedPoint], plot_range: float
) -> tuple[OverlayPoint, ...]:
    """Numeric positions of classified points that fall inside the range.

    Points whose coordinates cannot be evaluated are left out. A point inside
    the range whose height cannot be evaluated is placed at z = 0.
    """
    overlay = []
    for point in points:
        x_val = evaluate_float(point.x)
        y_val = evaluate_float(point.y)
        if x_val is None or y_val is None:
            continue
        if abs(x_val) > plot_range or abs(y_val) > plot_range:
            continue
        z_val = evaluate_float(expr, {"x": x_val, "y": y_val})
        overlay.append(
            OverlayPoint(
                x=x_val, y=y_val, z=0.0 if z_val is None else z_val, kind=point.kind
            )
        )
    return tuple(overlay)


def sample_surface(
    function_text: str,
    plot_range: float,
    points: Sequence[ClassifiedPoint] = (),
) -> SampledSurface:
    """Sample f and overlay the classified points for the given range.

    Raises:
        PlotGenerationError: if the range is not a positive finite number or
            the function cannot be compiled for sampling
    """
    try:
        plot_range = float(plot_range)
    except (TypeError, ValueError) as e:
        raise PlotGenerationError(f"Invalid plot range: {plot_range!r}") from e
    if not math.isfinite(plot_range) or plot_range <= 0:
        raise PlotGenerationError(f"Plot range must be positive, got {plot_range}")

    try:
        expr = parse(function_text)
    except (ComputationError, ValidationError) as e:
        raise PlotGenerationError(f"Cannot sample function: {e.message}") from e

    xs = grid_axis(plot_range)
    ys = grid_axis(plot_range)
    z, missing = sample_grid(expr, xs, ys)
    if missing.any():
        logger.debug("%d of %d cells have no value", int(missing.sum()), missing.size)

    return SampledSurface(
        xs=xs,
        ys=ys,
        z=z,
        missing=missing,
        overlay_points=overlay_points(expr, points, plot_range),
        plot_range=plot_range,
    )
