"""Command-line interface and interactive REPL for Critpoint."""

from __future__ import annotations

import argparse
import json
import random
import sys

from .api import analyze, resample
from .config import (
    DEFAULT_PLOT_RANGE,
    EXAMPLE_FUNCTIONS,
    MAX_PLOT_RANGE,
    MIN_PLOT_RANGE,
    VERSION,
)
from .expression import to_decimal
from .logging_config import get_logger, setup_logging
from .parser import format_number, format_superscript
from .types import AnalysisResult, ComputationError, PlotGenerationError

logger = get_logger("cli")


def _pretty(expr) -> str:
    return format_superscript(str(expr))


def _coordinate(value) -> str:
    """Exact value, followed by its decimal form when they differ."""
    exact = str(value)
    try:
        decimal = format_number(to_decimal(value))
    except ComputationError:
        return exact
    return exact if decimal == exact else f"{exact} ≈ {decimal}"


def print_result_pretty(result: AnalysisResult, output_format: str = "human") -> None:
    """Print an analysis result in human-readable or JSON format."""
    if output_format == "json":
        print(json.dumps(result.to_dict()))
        return

    if result.first_derivatives is None:
        print(f"Error: {result.error}")
        return

    first = result.first_derivatives
    second = result.second_derivatives
    print(f"f(x, y) = {_pretty(result.function)}")
    print()
    print("First partial derivatives:")
    print(f"  ∂f/∂x = {_pretty(first.dx)}")
    print(f"  ∂f/∂y = {_pretty(first.dy)}")
    print("Second partial derivatives:")
    print(f"  ∂²f/∂x²  = {_pretty(second.dxx)}")
    print(f"  ∂²f/∂y²  = {_pretty(second.dyy)}")
    print(f"  ∂²f/∂x∂y = {_pretty(second.dxy)}")
    print(f"  ∂²f/∂y∂x = {_pretty(second.dyx)}")
    print()

    if result.degenerate_message:
        print(result.degenerate_message)
    elif not result.critical_points:
        print("No critical points found.")
    else:
        print("Critical points:")
        for point in result.critical_points:
            print(
                f"  (x = {_coordinate(point.x)}, y = {_coordinate(point.y)})"
                f"  ->  {point.kind.value}"
            )

    if result.surface is not None:
        surface = result.surface
        rows, cols = surface.shape
        print()
        print(
            f"Surface: {rows}x{cols} grid over ±{format_number(surface.plot_range)}, "
            f"{surface.missing_count} missing cells, "
            f"{len(surface.overlay_points)} critical point(s) in view"
        )
    if result.error:
        print(f"Error: {result.error}")


def print_examples() -> None:
    for name, func in EXAMPLE_FUNCTIONS.items():
        print(f"  {name:<18} {func}")


def print_help_text() -> None:
    print(
        "Enter a function of x and y to find and classify its critical points.\n"
        "Examples: x^2 + y^2, x^3 + y^3-3x-3y, (x^2 - 1)^2 + (y^2 - 1)^2\n"
        "\n"
        "Commands:\n"
        f"  range N        Change the plot range (integer {MIN_PLOT_RANGE}..{MAX_PLOT_RANGE})\n"
        "                 and re-sample the last function\n"
        "  examples       List the built-in example functions\n"
        "  example NAME   Analyse a built-in example\n"
        "  random         Analyse a random built-in example\n"
        "  plot [PATH]    Save a 3-D plot of the last result\n"
        "  help           Show this help\n"
        "  quit, exit     Leave"
    )


def _parse_range(text: str) -> int:
    value = int(text)
    if not MIN_PLOT_RANGE <= value <= MAX_PLOT_RANGE:
        raise ValueError(
            f"Range must be between {MIN_PLOT_RANGE} and {MAX_PLOT_RANGE}"
        )
    return value


def _find_example(name: str) -> str | None:
    for example_name, func in EXAMPLE_FUNCTIONS.items():
        if example_name.lower() == name.strip().lower():
            return func
    return None


def _save_plot(result: AnalysisResult, path: str | None) -> int:
    from .plotting import render_surface

    if result.surface is None:
        print("Error: No surface to plot.")
        return 1
    try:
        saved = render_surface(result.surface, title=result.function, output_path=path)
    except PlotGenerationError as e:
        print(f"Error: {e}")
        return 1
    print(f"Plot saved to: {saved}")
    return 0


def repl_loop(output_format: str = "human", plot_range: int = int(DEFAULT_PLOT_RANGE)) -> None:
    """Read functions and commands until EOF or quit."""
    last: AnalysisResult | None = None
    print("Critpoint - critical points of f(x, y). Type 'help' for commands.")
    while True:
        try:
            line = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return
        if not line:
            continue
        command, _, argument = line.partition(" ")
        command = command.lower()

        if command in ("quit", "exit"):
            return
        if command == "help":
            print_help_text()
            continue
        if command == "examples":
            print_examples()
            continue
        if command == "range":
            try:
                plot_range = _parse_range(argument)
            except ValueError as e:
                print(f"Error: {e}")
                continue
            if last is not None and last.first_derivatives is not None:
                last = resample(last, plot_range)
                print_result_pretty(last, output_format)
            else:
                print(f"Plot range set to ±{plot_range}")
            continue
        if command == "plot":
            if last is None:
                print("Error: Nothing analysed yet.")
            else:
                _save_plot(last, argument.strip() or None)
            continue
        if command in ("example", "random"):
            if command == "random":
                line = random.choice(list(EXAMPLE_FUNCTIONS.values()))
            else:
                line = _find_example(argument)
                if line is None:
                    print(f"Error: Unknown example {argument!r}")
                    continue
            print(f"f(x, y) = {line}")

        last = analyze(line, plot_range)
        print_result_pretty(last, output_format)


def _health_check() -> int:
    """Verify dependencies and run one known analysis."""
    import matplotlib
    import numpy
    import sympy

    print(f"critpoint {VERSION}")
    print(f"sympy {sympy.__version__}, numpy {numpy.__version__}, matplotlib {matplotlib.__version__}")
    result = analyze("x^2 + y^2")
    healthy = (
        result.ok
        and len(result.critical_points) == 1
        and result.critical_points[0].kind.value == "Local Minimum"
    )
    print("Health check passed" if healthy else f"Health check FAILED: {result!r}")
    return 0 if healthy else 1


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for Critpoint CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        prog="critpoint",
        description="Find and classify critical points of f(x, y).",
    )
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Analyse one function and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "-r",
        "--range",
        type=int,
        default=int(DEFAULT_PLOT_RANGE),
        help=f"Plot range R for the grid [-R, R]^2 ({MIN_PLOT_RANGE}..{MAX_PLOT_RANGE})",
        dest="plot_range",
    )
    parser.add_argument("--example", type=str, help="Analyse a built-in example by name")
    parser.add_argument(
        "--random", action="store_true", help="Analyse a random built-in example"
    )
    parser.add_argument(
        "--list-examples", action="store_true", help="List built-in examples"
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument("--plot", type=str, help="Save a 3-D plot to this PNG path")
    parser.add_argument(
        "-p", "--precision", type=int, help="Set output precision (significant digits)"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0
    if args.health_check:
        return _health_check()
    if args.list_examples:
        print_examples()
        return 0
    try:
        plot_range = _parse_range(str(args.plot_range))
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    if args.precision and args.precision > 0:
        import critpoint_pkg.parser as _parser_module

        _parser_module.OUTPUT_PRECISION = int(args.precision)

    function_text = args.eval_expr
    if args.example:
        function_text = _find_example(args.example)
        if function_text is None:
            print(f"Error: Unknown example {args.example!r}. Use --list-examples.")
            return 1
    elif args.random:
        function_text = random.choice(list(EXAMPLE_FUNCTIONS.values()))

    if function_text is None:
        repl_loop(args.format, plot_range)
        return 0

    result = analyze(function_text, plot_range)
    print_result_pretty(result, args.format)
    if not result.ok:
        return 1
    if args.plot:
        return _save_plot(result, args.plot)
    return 0


if __name__ == "__main__":
    sys.exit(main_entry())
