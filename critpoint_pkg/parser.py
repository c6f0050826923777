"""Input parsing and preprocessing module.

This module handles:
- Input sanitization and validation
- Expression preprocessing (symbol conversion, exponent handling, etc.)
- SymPy expression parsing with security validation
- Result formatting (superscripts, numbers)
- Balancing checks for parentheses/brackets
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

import sympy as sp
from sympy import parse_expr

from .config import (
    ALLOWED_SYMPY_NAMES,
    CACHE_SIZE_PARSE,
    DIGIT_LETTERS_REGEX,
    MAX_EXPRESSION_DEPTH,
    MAX_EXPRESSION_NODES,
    MAX_INPUT_LENGTH,
    OUTPUT_PRECISION,
    RELATIONAL_REGEX,
    SQRT_UNICODE_REGEX,
    TRANSFORMATIONS,
    VARIABLES,
)
from .logging_config import get_logger
from .types import EmptyInputError, ValidationError

logger = get_logger("parser")


def superscriptify(input_str: str) -> str:
    """Convert numeric string to Unicode superscript characters.

    Args:
        input_str: Input string with digits and '-' (e.g., "123", "-5")

    Returns:
        String with superscript Unicode characters (e.g., "¹²³", "⁻⁵")
    """
    mapping = {
        "0": "⁰",
        "1": "¹",
        "2": "²",
        "3": "³",
        "4": "⁴",
        "5": "⁵",
        "6": "⁶",
        "7": "⁷",
        "8": "⁸",
        "9": "⁹",
        "-": "⁻",
    }
    return "".join(mapping.get(char, char) for char in input_str)


def format_superscript(expr_str: str) -> str:
    """Replace Python power notation (**) with Unicode superscripts.

    Args:
        expr_str: Expression string (e.g., "x**2", "x**-3")

    Returns:
        String with superscripts (e.g., "x²", "x⁻³")
    """
    return re.sub(r"\*\*(\-?\d+)", lambda m: superscriptify(m.group(1)), expr_str)


def format_number(val: Any, precision: int | None = None) -> str:
    """Format a numeric value with specified precision.

    Args:
        val: Numeric value to format
        precision: Number of significant digits (default: OUTPUT_PRECISION)

    Returns:
        Formatted string representation of the number
    """
    if precision is None:
        precision = OUTPUT_PRECISION
    try:
        fmt = "{:." + str(int(precision)) + "g}"
        return fmt.format(float(val))
    except (ValueError, TypeError, OverflowError):
        return str(val)


def is_balanced(input_str: str) -> tuple[bool, int | None]:
    """Check if parentheses/brackets are balanced. Returns (is_balanced, error_position)."""
    pairs = {"(": ")", "[": "]", "{": "}"}
    stack: list[tuple[str, int]] = []  # (char, position)
    for i, char in enumerate(input_str):
        if char in pairs:
            stack.append((char, i))
        elif char in pairs.values():
            if not stack:
                return False, i
            opening, pos = stack.pop()
            if pairs[opening] != char:
                return False, i
    if stack:
        return False, stack[0][1]  # Return position of first unmatched
    return True, None


# Basic denylist to avoid dangerous tokens before SymPy parsing
FORBIDDEN_TOKENS = (
    "__",
    "import",
    "lambda",
    "eval",
    "exec",
    "open",
    "os.",
    "sys.",
    "subprocess",
    "builtins",
    "getattr",
    "setattr",
    "delattr",
    "compile",
    "globals",
    "locals",
    "memoryview",
    "bytes",
    "bytearray",
)

_FROM_SUPERSCRIPT = {
    "⁰": "0",
    "¹": "1",
    "²": "2",
    "³": "3",
    "⁴": "4",
    "⁵": "5",
    "⁶": "6",
    "⁷": "7",
    "⁸": "8",
    "⁹": "9",
    "⁻": "-",
}
_SUPERSCRIPT_RE = re.compile(f"([{''.join(_FROM_SUPERSCRIPT)}]+)")


def _validate_expression_tree(expr: Any, depth: int = 0, node_count: list[int] | None = None) -> None:
    """Validate expression tree structure - reject dangerous or non-scalar nodes."""
    if node_count is None:
        node_count = [0]
    node_count[0] += 1
    if node_count[0] > MAX_EXPRESSION_NODES:
        raise ValidationError(
            f"Expression too complex (>{MAX_EXPRESSION_NODES} nodes)", "TOO_COMPLEX"
        )
    if depth > MAX_EXPRESSION_DEPTH:
        raise ValidationError(
            f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)", "TOO_DEEP"
        )

    if isinstance(expr, (sp.Symbol, sp.Number, sp.NumberSymbol)):
        return
    if isinstance(expr, sp.Function):
        func_name = getattr(expr.func, "__name__", str(expr.func))
        if func_name not in ALLOWED_SYMPY_NAMES:
            logger.warning("Blocked forbidden function %s", func_name)
            raise ValidationError(
                f"Function '{func_name}' not allowed", "FORBIDDEN_FUNCTION"
            )
        for arg in expr.args:
            _validate_expression_tree(arg, depth + 1, node_count)
        return
    if isinstance(expr, (sp.Add, sp.Mul, sp.Pow)):
        for arg in expr.args:
            _validate_expression_tree(arg, depth + 1, node_count)
        return
    if expr in (sp.S.NaN, sp.zoo, sp.oo, -sp.oo, sp.I):
        return

    expr_type = type(expr).__name__
    raise ValidationError(
        f"Expression type '{expr_type}' not allowed", "FORBIDDEN_TYPE"
    )


def preprocess(input_str: str) -> str:
    """Preprocess a function of x and y for parsing.

    Applies transformations:
    - Validates input length and forbidden tokens
    - Rejects equations and inequalities (a function is expected)
    - Standardizes mathematical symbols (unicode variants to ASCII)
    - Converts exponents (^ to **, superscripts to **)
    - Converts Unicode square root (√) to sqrt(
    - Inserts implicit multiplication (3x -> 3*x)
    - Validates balanced parentheses/brackets

    Args:
        input_str: Raw input string from user

    Returns:
        Preprocessed and sanitized string ready for SymPy parsing

    Raises:
        EmptyInputError: If the input is blank
        ValidationError: If input is too long, contains forbidden tokens,
                        is not a plain expression, or has unbalanced
                        parentheses/brackets
    """
    input_str = input_str.strip() if input_str else ""
    if not input_str:
        raise EmptyInputError()
    if len(input_str) > MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Input too long (>{MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )

    lowered = input_str.lower()
    for tok in FORBIDDEN_TOKENS:
        if tok in lowered:
            logger.warning(
                "Blocked input containing forbidden token %r (length %d)",
                tok,
                len(input_str),
            )
            raise ValidationError(
                f"Input contains forbidden token: {tok}", "FORBIDDEN_TOKEN"
            )

    if RELATIONAL_REGEX.search(input_str):
        raise ValidationError(
            "Enter a function of x and y, not an equation or inequality",
            "NOT_AN_EXPRESSION",
        )

    processed_str = input_str.replace("−", "-").replace("–", "-")
    processed_str = processed_str.replace("π", "pi")
    processed_str = processed_str.replace("×", "*").replace("·", "*")
    processed_str = processed_str.replace("÷", "/")
    processed_str = processed_str.replace("^", "**")
    processed_str = _SUPERSCRIPT_RE.sub(
        lambda m: "**" + "".join(_FROM_SUPERSCRIPT[c] for c in m.group(1)),
        processed_str,
    )
    processed_str = SQRT_UNICODE_REGEX.sub("sqrt(", processed_str)
    processed_str = DIGIT_LETTERS_REGEX.sub(r"\1*\2", processed_str)
    processed_str = re.sub(r"\s+", " ", processed_str).strip()

    balanced, error_pos = is_balanced(processed_str)
    if not balanced:
        raise ValidationError(
            f"Mismatched or unbalanced parentheses/brackets at position {error_pos}",
            "UNBALANCED_PARENS",
        )
    return processed_str


@lru_cache(maxsize=CACHE_SIZE_PARSE)
def parse_preprocessed(expr_str: str) -> sp.Expr:
    """Parse and validate a preprocessed expression string."""
    local_dict = dict(ALLOWED_SYMPY_NAMES)
    local_dict.update(VARIABLES)
    try:
        expr = parse_expr(
            expr_str,
            local_dict=local_dict,
            transformations=TRANSFORMATIONS,
            evaluate=True,
        )
    except Exception as e:
        # SyntaxError, TokenError, SympifyError, TypeError... depending on the input
        raise ValidationError(f"Could not parse expression: {e}", "PARSE_ERROR") from e

    if not isinstance(expr, sp.Expr):
        raise ValidationError(
            "Expression must be a single scalar function", "NOT_AN_EXPRESSION"
        )
    _validate_expression_tree(expr)
    return expr


def parse_function(input_str: str) -> sp.Expr:
    """Preprocess and parse raw user input in one step."""
    return parse_preprocessed(preprocess(input_str))
