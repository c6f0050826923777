"""Critpoint package: derivatives, critical points and surface sampling for f(x, y)."""

__all__ = [
    "config",
    "parser",
    "expression",
    "calculus",
    "solver",
    "classifier",
    "sampler",
    "plotting",
    "cli",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "analyze",
    "resample",
    "validate_function",
]
