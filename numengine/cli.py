"""Command-line calculator.

Batch mode::

    numengine + 5 3          # Result: 5.00 + 3.00 = 8.00
    numengine sqrt 16        # Result: sqrt(16.00) = 4.00

Without arguments an interactive loop reads ``op a [b]`` lines until
``exit`` or end of input.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import IO

from numengine.config import ConfigurationError, load_settings
from numengine.dispatch import OPERATORS, dispatch, parse_request
from numengine.engine import DEFAULT_ENGINE, NumericEngine
from numengine.errors import NumericError
from numengine.log import configure_logging

logger = logging.getLogger(__name__)

PROMPT = "Enter operation (e.g., '+ 5 3' or 'sqrt 16'): "
USAGE = """\
Usage: numengine [options] <operation> <number1> [number2 ...]
Operations: {operations}
Examples:
  numengine + 5 3
  numengine sqrt 16
  numengine factorial 5
  numengine + -1e3 2"""


def usage() -> str:
    return USAGE.format(operations=", ".join(OPERATORS))


def evaluate(tokens: list[str], engine: NumericEngine, precision: int) -> str:
    """Parse, dispatch and render one line of input."""
    result = dispatch(parse_request(tokens), engine)
    return result.render(precision)


def run_batch(
    tokens: list[str],
    engine: NumericEngine = DEFAULT_ENGINE,
    precision: int = 2,
    out: IO[str] | None = None,
    err: IO[str] | None = None,
) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    try:
        print(evaluate(tokens, engine, precision), file=out)
    except (NumericError, ValueError) as e:
        logger.warning("Batch evaluation failed", extra={"tokens": tokens, "error": str(e)})
        print(f"Error: {e}", file=err)
        print(usage(), file=err)
        return 1
    return 0


def run_interactive(
    engine: NumericEngine = DEFAULT_ENGINE,
    precision: int = 2,
    stdin: IO[str] | None = None,
    out: IO[str] | None = None,
) -> int:
    stdin = stdin or sys.stdin
    out = out or sys.stdout

    print(f"\nAvailable operations: {', '.join(OPERATORS)}", file=out)
    print("Type 'exit' to quit\n", file=out)

    while True:
        out.write(PROMPT)
        out.flush()
        line = stdin.readline()
        if not line:
            print(file=out)
            break
        line = line.strip()
        if line.lower() == "exit":
            break

        tokens = line.split()
        if len(tokens) < 2:
            print("Invalid input. Please try again.", file=out)
            continue

        try:
            print(evaluate(tokens, engine, precision), file=out)
        except (NumericError, ValueError) as e:
            logger.info("Interactive evaluation failed", extra={"line": line, "error": str(e)})
            print(f"Error: {e}", file=out)

    print("Goodbye!", file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="numengine",
        description="Arithmetic and number-theory calculator.",
        epilog=f"Options go before the operation. Operations: {', '.join(OPERATORS)}",
    )
    parser.add_argument("operation", nargs="?", help="operation token, e.g. + or sqrt")
    # REMAINDER so negative operands such as -1e3 or -inf are not read as options
    parser.add_argument(
        "operands", nargs=argparse.REMAINDER, help="one or more numeric operands",
    )
    parser.add_argument(
        "--precision", type=int, default=None,
        help="decimal places in the printed result (default: NUMENGINE_PRECISION or 2)",
    )
    parser.add_argument(
        "--log-level", default=None,
        help="logging level (default: NUMENGINE_LOG_LEVEL or WARNING)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(log_level=args.log_level, precision=args.precision)
    except ConfigurationError as e:
        parser.error(str(e))

    configure_logging(settings.log_level, settings.log_json)

    if args.operation is None:
        return run_interactive(precision=settings.precision)
    operands = [token for token in args.operands if token != "--"]
    return run_batch([args.operation, *operands], precision=settings.precision)


if __name__ == "__main__":
    sys.exit(main())
