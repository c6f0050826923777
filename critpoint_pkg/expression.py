"""SymPy-backed expression service.

Every symbolic operation the engine needs goes through this module:
parsing, differentiation, solving for zero, exact evaluation at a point,
fast numeric evaluation for sampling, canonical printing and sign tests.
SymPy failures are converted to ``ComputationError`` so callers only ever
deal with one error type.
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Mapping, Union

import sympy as sp

from .config import CACHE_SIZE_EVAL, VARIABLES
from .logging_config import get_logger
from .parser import parse_function
from .types import ComputationError, EmptyInputError, ValidationError

logger = get_logger("expression")

ExprLike = Union[str, sp.Expr]
Number = Union[int, float, sp.Expr]

# SymPy raises a grab bag of types for unsupported operations
_SYMPY_ERRORS = (
    TypeError,
    ValueError,
    AttributeError,
    ArithmeticError,
    NotImplementedError,
    RecursionError,
    sp.SympifyError,
    sp.polys.polyerrors.PolynomialError,
)

# imaginary parts below this (relative to the real part) are round-off
_IMAG_TOLERANCE = 1e-9


def _symbol(var: str) -> sp.Symbol:
    return VARIABLES.get(var) or sp.Symbol(var)


def parse(text: str) -> sp.Expr:
    """Parse raw function text into a SymPy expression.

    Raises:
        EmptyInputError: if the text is blank
        ComputationError: if the text is not a valid function
    """
    try:
        return parse_function(text)
    except EmptyInputError:
        raise
    except ValidationError as e:
        raise ComputationError(e.message, e.code) from e


def as_expr(value: ExprLike) -> sp.Expr:
    if isinstance(value, str):
        return parse(value)
    return sp.sympify(value)


def differentiate(expression: ExprLike, var: str) -> sp.Expr:
    """Partial derivative of ``expression`` with respect to ``var``."""
    expr = as_expr(expression)
    try:
        return sp.diff(expr, _symbol(var))
    except _SYMPY_ERRORS as e:
        raise ComputationError(
            f"Differentiation error: {e}", "DIFFERENTIATION_ERROR"
        ) from e


def solve_for_zero(expression: ExprLike, var: str) -> sp.Expr | list[sp.Expr]:
    """Solve ``expression = 0`` for ``var``.

    Returns a single expression when there is exactly one solution and a
    list otherwise, so callers must accept both shapes. Solutions that are
    provably non-real are dropped.
    """
    expr = as_expr(expression)
    if expr.is_zero:
        # identically zero: no isolated solutions
        return []
    try:
        solutions = sp.solve(expr, _symbol(var))
    except _SYMPY_ERRORS as e:
        raise ComputationError(f"Solve error: {e}", "SOLVE_ERROR") from e

    real = [s for s in solutions if sp.sympify(s).is_real is not False]
    if len(real) == 1:
        return real[0]
    return real


def free_variables(expression: ExprLike) -> set[str]:
    return {str(s) for s in as_expr(expression).free_symbols}


def to_canonical_string(expression: ExprLike) -> str:
    return str(as_expr(expression))


def evaluate(expression: ExprLike, bindings: Mapping[str, Number] | None = None) -> sp.Expr:
    """Substitute ``bindings`` into the expression tree and return an exact number.

    Raises:
        ComputationError: if free symbols remain or the value is not a finite real
    """
    expr = as_expr(expression)
    subs = {_symbol(name): sp.sympify(value) for name, value in (bindings or {}).items()}
    try:
        value = sp.simplify(expr.subs(subs, simultaneous=True))
    except _SYMPY_ERRORS as e:
        raise ComputationError(f"Evaluation error: {e}", "EVALUATION_ERROR") from e

    if value.free_symbols:
        names = ", ".join(sorted(str(s) for s in value.free_symbols))
        raise ComputationError(
            f"Cannot evaluate expression with unresolved symbols: {names}",
            "EVALUATION_ERROR",
        )
    if value.has(sp.zoo, sp.nan, sp.oo, -sp.oo) or value.is_real is False:
        raise ComputationError(
            f"Expression does not evaluate to a finite real number: {value}",
            "EVALUATION_ERROR",
        )
    return value


def to_decimal(expression: ExprLike, digits: int = 15) -> str:
    """Decimal string of a closed-form number, trailing zeros stripped."""
    value = evaluate(expression)
    s = str(sp.N(value, digits, chop=True))
    if "." in s and "e" not in s:
        s = s.rstrip("0").rstrip(".")
    return s


@lru_cache(maxsize=CACHE_SIZE_EVAL)
def _compiled(expr: sp.Expr):
    args = [VARIABLES["x"], VARIABLES["y"]]
    return sp.lambdify(args, expr, modules="math")


@lru_cache(maxsize=CACHE_SIZE_EVAL)
def _constant_float(expr: sp.Expr) -> float | None:
    """Numeric value of a closed-form constant such as a solver root.

    Roots may come back as ``CRootOf`` or as radicals with complex
    intermediate terms, so they are evaluated with ``sp.N`` and a negligible
    imaginary part is dropped.
    """
    try:
        value = complex(sp.N(expr, 30, chop=True))
    except _SYMPY_ERRORS:
        return None
    if abs(value.imag) > _IMAG_TOLERANCE * max(1.0, abs(value.real)):
        return None
    return value.real


def evaluate_float(expression: ExprLike, bindings: Mapping[str, float] | None = None) -> float | None:
    """Fast numeric evaluation for sampling.

    Returns ``None`` when the value is missing at that point (domain error,
    division by zero, complex or non-finite result, unbound symbols).
    """
    expr = as_expr(expression)
    bindings = bindings or {}
    if {str(s) for s in expr.free_symbols} - set(bindings):
        return None
    if not expr.free_symbols:
        value = _constant_float(expr)
    else:
        try:
            func = _compiled(expr)
            value = float(func(float(bindings.get("x", 0.0)), float(bindings.get("y", 0.0))))
        except (ArithmeticError, ValueError, TypeError):
            return None
        except Exception as e:
            # lambdify can emit code the math module cannot run
            logger.debug("Numeric evaluation of %s failed: %r", expr, e)
            return None
    if value is None or not math.isfinite(value):
        return None
    return value


def _sign(expression: ExprLike, number: Number) -> int | None:
    """Sign of ``expression - number``, or None when it cannot be decided.

    The exact SymPy query is tried first. Algebraic numbers written with
    complex intermediate terms leave it undecided, so those fall back to a
    30-digit numeric value with round-off imaginary parts chopped.
    """
    difference = sp.simplify(as_expr(expression) - sp.sympify(number))
    if difference.is_positive:
        return 1
    if difference.is_negative:
        return -1
    if difference.is_zero:
        return 0
    if difference.free_symbols:
        return None
    try:
        approx = sp.N(difference, 30, chop=True)
    except _SYMPY_ERRORS:
        return None
    if not approx.is_Number or approx.is_finite is not True:
        return None
    if approx > 0:
        return 1
    if approx < 0:
        return -1
    return 0


def greater_than(expression: ExprLike, number: Number) -> bool:
    """Sign test ``expression > number``; undecidable comparisons are False."""
    return _sign(expression, number) == 1


def less_than(expression: ExprLike, number: Number) -> bool:
    """Sign test ``expression < number``; undecidable comparisons are False."""
    return _sign(expression, number) == -1
