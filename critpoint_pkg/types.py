"""Type definitions, result dataclasses and error types for the analysis engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np
import sympy as sp


class Kind(str, Enum):
    """Second-derivative test outcome for a stationary point."""

    LOCAL_MIN = "Local Minimum"
    LOCAL_MAX = "Local Maximum"
    SADDLE = "Saddle Point"
    INCONCLUSIVE = "Inconclusive (D = 0)"


@dataclass(frozen=True)
class FirstDerivatives:
    dx: sp.Expr
    dy: sp.Expr


@dataclass(frozen=True)
class SecondDerivatives:
    """All four second partials; dxy and dyx are computed independently."""

    dxx: sp.Expr
    dyy: sp.Expr
    dxy: sp.Expr
    dyx: sp.Expr


@dataclass(frozen=True)
class Derivatives:
    first: FirstDerivatives
    second: SecondDerivatives


@dataclass(frozen=True)
class StationaryPoints:
    """Solver output: candidate (x, y) pairs, or the reason there are none."""

    candidates: tuple[tuple[sp.Expr, sp.Expr], ...] = ()
    degenerate_message: str | None = None


@dataclass(frozen=True)
class HessianValues:
    """Exact second-partial values at a point and the determinant D = A*B - C^2."""

    dxx: sp.Expr
    dyy: sp.Expr
    dxy: sp.Expr
    determinant: sp.Expr


@dataclass(frozen=True)
class ClassifiedPoint:
    """A stationary point kept in exact symbolic form, plus its classification."""

    x: sp.Expr
    y: sp.Expr
    kind: Kind
    hessian: HessianValues | None = None

    def label(self) -> str:
        return f"(x = {self.x}, y = {self.y})"


@dataclass(frozen=True)
class OverlayPoint:
    x: float
    y: float
    z: float
    kind: Kind


@dataclass(frozen=True, eq=False)
class SampledSurface:
    """Uniform grid of f over [-R, R] x [-R, R].

    ``z[i][j]`` pairs with ``xs[i]`` and ``ys[j]``. Cells where f could not be
    evaluated are flagged in ``missing`` and hold NaN in ``z``.
    """

    xs: np.ndarray
    ys: np.ndarray
    z: np.ndarray
    missing: np.ndarray
    overlay_points: tuple[OverlayPoint, ...] = ()
    plot_range: float = 0.0

    @property
    def shape(self) -> tuple[int, int]:
        return self.z.shape

    @property
    def missing_count(self) -> int:
        return int(self.missing.sum())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization (NaN becomes None)."""
        return {
            "range": self.plot_range,
            "x": [float(v) for v in self.xs],
            "y": [float(v) for v in self.ys],
            "z": [
                [None if math.isnan(v) else float(v) for v in row]
                for row in self.z.tolist()
            ],
            "missing": self.missing_count,
            "points": [
                {"x": p.x, "y": p.y, "z": p.z, "type": p.kind.value}
                for p in self.overlay_points
            ],
        }


@dataclass
class AnalysisResult:
    """Outcome of one analysis run, handed to the presentation layer as a whole."""

    function: str
    plot_range: float
    first_derivatives: FirstDerivatives | None = None
    second_derivatives: SecondDerivatives | None = None
    critical_points: list[ClassifiedPoint] = field(default_factory=list)
    degenerate_message: str | None = None
    surface: SampledSurface | None = None
    error: str | None = None
    error_code: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {
            "ok": self.ok,
            "function": self.function,
            "range": self.plot_range,
        }
        if self.error is not None:
            result_dict["error"] = self.error
            result_dict["error_code"] = self.error_code
        if self.first_derivatives is not None:
            result_dict["first_derivatives"] = {
                "dfdx": str(self.first_derivatives.dx),
                "dfdy": str(self.first_derivatives.dy),
            }
        if self.second_derivatives is not None:
            second = self.second_derivatives
            result_dict["second_derivatives"] = {
                "d2fdx2": str(second.dxx),
                "d2fdy2": str(second.dyy),
                "d2fdxdy": str(second.dxy),
                "d2fdydx": str(second.dyx),
            }
        if self.first_derivatives is not None:
            result_dict["critical_points"] = [
                {"x": str(p.x), "y": str(p.y), "type": p.kind.value}
                for p in self.critical_points
            ]
        if self.degenerate_message is not None:
            result_dict["message"] = self.degenerate_message
        if self.surface is not None:
            result_dict["surface"] = self.surface.to_dict()
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok and self.first_derivatives is None:
            return f"AnalysisResult(ok=False, error={self.error!r})"
        parts = [f"ok={self.ok}", f"function={self.function!r}"]
        parts.append(f"critical_points={len(self.critical_points)}")
        if self.degenerate_message is not None:
            parts.append(f"message={self.degenerate_message!r}")
        if self.surface is not None:
            parts.append(f"grid={self.surface.shape}")
        if self.error is not None:
            parts.append(f"error={self.error!r}")
        return f"AnalysisResult({', '.join(parts)})"


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class EmptyInputError(ValidationError):
    """Raised when the function text is blank."""

    def __init__(self, message: str = "Please enter a function", code: str = "EMPTY_INPUT"):
        super().__init__(message, code)


class ComputationError(Exception):
    """Raised when differentiation, solving, classification or evaluation fails."""

    def __init__(self, message: str, code: str = "COMPUTATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class PlotGenerationError(Exception):
    """Raised when the surface grid or its overlay cannot be produced."""

    def __init__(self, message: str, code: str = "PLOT_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
