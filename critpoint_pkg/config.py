"""Centralized configuration for Critpoint.

This module defines:
- Surface sampling defaults (grid resolution, plot range bounds)
- Input validation limits (length, depth, node count)
- Cache sizes for parsing and numeric evaluation
- Allowed SymPy functions and parser transformations
- Built-in example functions

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with CRITPOINT_)
"""

import os
import re

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    standard_transformations,
)

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("critpoint")
except Exception:
    # Package not installed (running from a checkout)
    VERSION = "1.0.0"

# Surface sampling
GRID_INTERVALS = int(
    os.getenv("CRITPOINT_GRID_INTERVALS", "50")
)  # samples per axis = intervals + 1
DEFAULT_PLOT_RANGE = float(os.getenv("CRITPOINT_DEFAULT_PLOT_RANGE", "5"))
MIN_PLOT_RANGE = int(os.getenv("CRITPOINT_MIN_PLOT_RANGE", "1"))
MAX_PLOT_RANGE = int(os.getenv("CRITPOINT_MAX_PLOT_RANGE", "20"))

OUTPUT_PRECISION = int(os.getenv("CRITPOINT_OUTPUT_PRECISION", "6"))

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("CRITPOINT_MAX_INPUT_LENGTH", "2000"))  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("CRITPOINT_MAX_EXPRESSION_DEPTH", "100")
)  # tree depth
MAX_EXPRESSION_NODES = int(
    os.getenv("CRITPOINT_MAX_EXPRESSION_NODES", "5000")
)  # total nodes

# Cache configuration
CACHE_SIZE_PARSE = int(os.getenv("CRITPOINT_CACHE_SIZE_PARSE", "256"))
CACHE_SIZE_EVAL = int(os.getenv("CRITPOINT_CACHE_SIZE_EVAL", "512"))

# The two independent variables of every analysed function
X = sp.Symbol("x")
Y = sp.Symbol("y")
VARIABLES = {"x": X, "y": Y}

ALLOWED_SYMPY_NAMES = {
    "pi": sp.pi,
    "E": sp.E,
    "e": sp.E,
    "sqrt": sp.sqrt,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "log": sp.log,
    "ln": sp.log,
    "exp": sp.exp,
    "Abs": sp.Abs,
    "abs": sp.Abs,  # lowercase alias for convenience
}

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

SQRT_UNICODE_REGEX = re.compile(r"√\s*\(")
# scientific literals such as 1e-3 are left alone
DIGIT_LETTERS_REGEX = re.compile(r"(\d)(?![eE][+-]?\d)\s*([A-Za-z(])")
RELATIONAL_REGEX = re.compile(r"(==|!=|<=|>=|=|<|>)")

# Built-in examples offered by the presentation layer (name -> function text)
EXAMPLE_FUNCTIONS = {
    "Paraboloid": "x^2 + y^2",
    "Saddle": "x^2 - y^2",
    "Classic Cubic": "x^3 + y^3-3x-3y",
    "Fourth Order": "x^4 + y^4 - 4*x^2 - 4*y^2",
    "Double Well": "(x^2 - 1)^2 + (y^2 - 1)^2",
    "Asymmetric Saddle": "x^2 - 2*y^2",
    "Steep Valley": "x^2 + 10*y^2",
}
