"""First and second partial derivatives of f(x, y)."""

from __future__ import annotations

from .expression import differentiate
from .logging_config import get_logger
from .types import Derivatives, FirstDerivatives, SecondDerivatives

logger = get_logger("calculus")


def compute_derivatives(function_text: str) -> Derivatives:
    """Differentiate ``function_text`` once and twice in x and y.

    The mixed partials are computed separately from each first partial
    (d/dy of df/dx, and d/dx of df/dy) rather than reusing one for the other.

    Args:
        function_text: Raw function text (e.g., "x^3 + y^3 - 3x - 3y")

    Returns:
        Derivatives with both first partials and all four second partials

    Raises:
        EmptyInputError: if the text is blank
        ComputationError: on any parse or differentiation failure
    """
    dfdx = differentiate(function_text, "x")
    dfdy = differentiate(function_text, "y")

    second = SecondDerivatives(
        dxx=differentiate(dfdx, "x"),
        dyy=differentiate(dfdy, "y"),
        dxy=differentiate(dfdx, "y"),
        dyx=differentiate(dfdy, "x"),
    )
    logger.debug("df/dx = %s, df/dy = %s", dfdx, dfdy)
    return Derivatives(first=FirstDerivatives(dx=dfdx, dy=dfdy), second=second)
