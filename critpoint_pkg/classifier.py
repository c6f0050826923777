"""Second-derivative (Hessian) test."""

from __future__ import annotations

import sympy as sp

from .expression import evaluate, greater_than, less_than
from .types import ClassifiedPoint, HessianValues, Kind, SecondDerivatives


def classify(dxx_value: sp.Expr, determinant: sp.Expr) -> Kind:
    """Classify from A = f_xx and D = f_xx * f_yy - f_xy^2.

    D > 0 with A <= 0 is reported as a maximum; A = 0 cannot happen
    analytically when D > 0.
    """
    if greater_than(determinant, 0):
        if greater_than(dxx_value, 0):
            return Kind.LOCAL_MIN
        return Kind.LOCAL_MAX
    if less_than(determinant, 0):
        return Kind.SADDLE
    return Kind.INCONCLUSIVE


def hessian_at(x: sp.Expr, y: sp.Expr, second: SecondDerivatives) -> HessianValues:
    """Evaluate f_xx, f_yy, f_xy and D at (x, y).

    Raises:
        ComputationError: if any value does not reduce to a real number,
            e.g. when (x, y) still depends on a free symbol
    """
    point = {"x": x, "y": y}
    a = evaluate(second.dxx, point)
    b = evaluate(second.dyy, point)
    c = evaluate(second.dxy, point)
    d = evaluate(a * b - c**2)
    return HessianValues(dxx=a, dyy=b, dxy=c, determinant=d)


def classify_point(x: sp.Expr, y: sp.Expr, second: SecondDerivatives) -> ClassifiedPoint:
    hessian = hessian_at(x, y, second)
    kind = classify(hessian.dxx, hessian.determinant)
    return ClassifiedPoint(x=x, y=y, kind=kind, hessian=hessian)
