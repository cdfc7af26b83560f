"""Run a Brain-Flak program against integer stacks and print the final Left stack."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from brainflak_jax import BrainFlakError, ExecutionPolicy, evaluate_with_errors


def _read_source(args: argparse.Namespace) -> str:
    if args.code is not None:
        return args.code
    if args.program is None:
        raise SystemExit("either a program file or --code is required")
    if args.program == "-":
        return sys.stdin.read()
    return Path(args.program).read_text(encoding="utf-8")


def format_stack(values: list[int], *, ascii_output: bool = False) -> str:
    if ascii_output:
        for value in values:
            if not 0 <= value <= sys.maxunicode:
                raise ValueError(f"value {value} is not a character code")
        return "".join(chr(value) for value in reversed(values))
    return " ".join(str(value) for value in values)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("program", nargs="?", help="path to a Brain-Flak source file, or - for stdin")
    parser.add_argument("values", nargs="*", type=int, help="initial Left stack, bottom first")
    parser.add_argument("-c", "--code", help="program text given inline instead of a file")
    parser.add_argument("--right", nargs="*", type=int, default=[], help="initial Right stack, bottom first")
    parser.add_argument("--dtype", default=None, help="signed stack element type (int8, int16, int32, int64)")
    parser.add_argument(
        "--scope",
        choices=("evaluate", "switch"),
        default=None,
        help="how <...> treats the active stack",
    )
    parser.add_argument(
        "--max-loop-iterations",
        type=int,
        default=None,
        help="abort after this many loop-body executions",
    )
    parser.add_argument("--ascii", action="store_true", help="print the final Left stack as characters, top first")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.code is not None and args.program is not None:
        # With --code every positional is a stack value.
        try:
            args.values = [int(args.program), *args.values]
        except ValueError:
            parser.error(f"argument values: invalid int value: {args.program!r}")
        args.program = None

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    overrides: dict[str, object] = {}
    if args.dtype is not None:
        overrides["dtype"] = args.dtype
    if args.scope is not None:
        overrides["scope"] = args.scope
    if args.max_loop_iterations is not None:
        overrides["max_loop_iterations"] = args.max_loop_iterations

    left = list(args.values)
    right = list(args.right)
    try:
        policy = ExecutionPolicy(**overrides)
        source = _read_source(args)
        evaluate_with_errors(source, left, right, policy=policy)
        output = format_stack(left, ascii_output=args.ascii)
    except (BrainFlakError, ValueError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
