"""Command line entry: tokenize a B file, generate IR and dump it."""

from __future__ import annotations

import argparse

from .ir import IRGenerator, IRType
from .lexer import tokenize_file

DEFAULT_SOURCE = "bruh.b"


def main(argv=None) -> int:
    """Print the tokens and the IR of ``main``; return 1 if generation failed."""
    parser = argparse.ArgumentParser(
        prog="burcl", description="Dump tokens and the IR of main for a B source file."
    )
    parser.add_argument("source", nargs="?", default=DEFAULT_SOURCE)
    args = parser.parse_args(argv)

    tokens = tokenize_file(args.source)
    generator = IRGenerator(args.source)
    info = generator.generate(tokens)

    for token in tokens:
        print(token.value)

    if generator.print_errors():
        return 1

    for value in info.labels.get("main", []):
        if isinstance(value, IRType):
            print(f"op: {int(value)}")
        else:
            print(f"str: {value}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())