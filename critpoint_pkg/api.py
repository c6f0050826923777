"""Public API for Critpoint - returns structured objects without side effects.

One call to ``analyze`` is one analysis run: derivatives, stationary points,
classification, then surface sampling. Nothing is shared between runs, so
callers running in parallel only need to avoid sharing result objects.
"""

from __future__ import annotations

import dataclasses

from .calculus import compute_derivatives
from .classifier import classify_point
from .config import DEFAULT_PLOT_RANGE
from .logging_config import get_logger
from .parser import preprocess
from .sampler import sample_surface
from .solver import find_stationary_points
from .types import (
    AnalysisResult,
    ComputationError,
    EmptyInputError,
    PlotGenerationError,
    ValidationError,
)

logger = get_logger("api")

EMPTY_INPUT_MESSAGE = "Please enter a function"
COMPUTATION_ERROR_MESSAGE = "Error in computation. Please check your function syntax."
PLOT_ERROR_MESSAGE = (
    "Error generating plot. Please check your function or try a different range."
)


def _with_surface(result: AnalysisResult, plot_range: float) -> AnalysisResult:
    """Attach a freshly sampled surface, or the plot error, to ``result``."""
    try:
        surface = sample_surface(result.function, plot_range, result.critical_points)
    except PlotGenerationError as e:
        logger.warning("Plot generation failed for %r: %s", result.function, e)
        return dataclasses.replace(
            result,
            plot_range=plot_range,
            surface=None,
            error=PLOT_ERROR_MESSAGE,
            error_code=e.code,
        )
    except Exception as e:
        logger.error("Unexpected plotting error: %s", e, exc_info=True)
        return dataclasses.replace(
            result,
            plot_range=plot_range,
            surface=None,
            error=PLOT_ERROR_MESSAGE,
            error_code="PLOT_ERROR",
        )
    return dataclasses.replace(
        result, plot_range=plot_range, surface=surface, error=None, error_code=None
    )


def analyze(function_text: str, plot_range: float = DEFAULT_PLOT_RANGE) -> AnalysisResult:
    """Find and classify the critical points of f(x, y) and sample its surface.

    Args:
        function_text: Function of x and y (e.g., "x^2 + y^2", "x^3 + y^3-3x-3y")
        plot_range: Half-width R of the sampled square [-R, R] x [-R, R]

    Returns:
        AnalysisResult. On a computation failure, ``ok`` is False and no
        derivatives or points are kept. On a plotting failure, derivatives and
        points are kept, ``surface`` is None and ``error`` is set.

    Example:
        >>> from critpoint_pkg.api import analyze
        >>> result = analyze("x^2 + y^2")
        >>> [(str(p.x), str(p.y), p.kind.value) for p in result.critical_points]
        [('0', '0', 'Local Minimum')]
    """
    if not function_text or not function_text.strip():
        return AnalysisResult(
            function=function_text or "",
            plot_range=plot_range,
            error=EMPTY_INPUT_MESSAGE,
            error_code=EmptyInputError().code,
        )

    function_text = function_text.strip()
    logger.debug("Analysing %r over +/-%s", function_text, plot_range)
    try:
        derivatives = compute_derivatives(function_text)
        stationary = find_stationary_points(derivatives.first)
        points = [
            classify_point(x, y, derivatives.second) for x, y in stationary.candidates
        ]
    except (ComputationError, ValidationError) as e:
        logger.warning("Computation failed for %r: %s", function_text, e)
        return AnalysisResult(
            function=function_text,
            plot_range=plot_range,
            error=COMPUTATION_ERROR_MESSAGE,
            error_code=e.code,
        )
    except Exception as e:
        logger.error("Unexpected computation error: %s", e, exc_info=True)
        return AnalysisResult(
            function=function_text,
            plot_range=plot_range,
            error=COMPUTATION_ERROR_MESSAGE,
            error_code="COMPUTATION_ERROR",
        )

    result = AnalysisResult(
        function=function_text,
        plot_range=plot_range,
        first_derivatives=derivatives.first,
        second_derivatives=derivatives.second,
        critical_points=points,
        degenerate_message=stationary.degenerate_message,
    )
    return _with_surface(result, plot_range)


def resample(result: AnalysisResult, plot_range: float) -> AnalysisResult:
    """Re-sample the surface of a previous result for a new range.

    Derivatives, critical points and the degenerate message are reused as
    they are; only the surface and overlay change.

    Raises:
        ValueError: if ``result`` has no derivatives to reuse
    """
    if result.first_derivatives is None:
        raise ValueError("Cannot resample a result without computed derivatives")
    return _with_surface(result, plot_range)


def validate_function(function_text: str) -> tuple[bool, str | None]:
    """Validate function text without analysing it.

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from critpoint_pkg.api import validate_function
        >>> validate_function("x^2 + y^2")
        (True, None)
        >>> validate_function("import os")
        (False, 'Input contains forbidden token: import')
    """
    try:
        preprocess(function_text)
        return True, None
    except ValidationError as e:
        return False, str(e)
