"""Stationary point solver.

Solves df/dx = 0 for x and df/dy = 0 for y independently and pairs every
x-solution with every y-solution. This assumes the system is separable:
for coupled systems some pairs will not satisfy both equations and genuine
joint solutions can be missed. The pairs are not checked against the
original equations.
"""

from __future__ import annotations

from typing import Sequence

import sympy as sp

from .expression import free_variables, solve_for_zero, to_canonical_string
from .logging_config import get_logger
from .types import FirstDerivatives, StationaryPoints

logger = get_logger("solver")

DEGENERATE_MESSAGE = "No critical points (derivatives do not vanish)."


def is_nonzero_constant(derivative: sp.Expr) -> bool:
    """True when a first partial is a constant other than the literal 0."""
    return not free_variables(derivative) and to_canonical_string(derivative) != "0"


def _as_solution_list(solutions: sp.Expr | Sequence[sp.Expr]) -> list[sp.Expr]:
    if isinstance(solutions, (list, tuple)):
        return list(solutions)
    return [solutions]


def find_stationary_points(first: FirstDerivatives) -> StationaryPoints:
    """Enumerate candidate stationary points from the two first partials.

    Returns:
        StationaryPoints with candidates ordered x-solutions outer,
        y-solutions inner, or with ``degenerate_message`` set when a first
        partial is a nonzero constant (no solving is attempted then).

    Raises:
        ComputationError: if either equation cannot be solved
    """
    if is_nonzero_constant(first.dx) or is_nonzero_constant(first.dy):
        logger.debug("Degenerate case: df/dx = %s, df/dy = %s", first.dx, first.dy)
        return StationaryPoints(degenerate_message=DEGENERATE_MESSAGE)

    x_solutions = _as_solution_list(solve_for_zero(first.dx, "x"))
    y_solutions = _as_solution_list(solve_for_zero(first.dy, "y"))
    logger.debug("x solutions: %s, y solutions: %s", x_solutions, y_solutions)

    candidates = tuple(
        (x_sol, y_sol) for x_sol in x_solutions for y_sol in y_solutions
    )
    return StationaryPoints(candidates=candidates)
