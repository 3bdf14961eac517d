"""
Ember CLI Entrypoint.

This module provides the command-line interface for the Ember front end.
It lexes and parses Ember source and prints the resulting AST, or starts
the interactive REPL.

Features:
    - Read source from `.em` files or inline strings.
    - Print the AST as Python reprs (default) or JSON (`--json`).
    - Dump the raw token stream (`--tokens`).
    - Guard expression nesting with `--max-depth` or `EMBER_MAX_DEPTH`.
    - Launch an interactive REPL.

Example usage:
    ember hello.em
    ember -s "f(1, 2 * 3)" --json
    ember -s "1 + 2" --tokens
    ember --repl

Functions:
    run_ember(source: str, is_string: bool = False, as_json: bool = False,
              show_tokens: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> int:
        Runs lex → parse → print and returns a process exit code.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and dispatches to the REPL or ``run_ember``.
"""

import argparse
import json
import logging
import os
import sys

from ember.ember_constants import DEFAULT_MAX_DEPTH, MAX_DEPTH_ENV, SOURCE_SUFFIX
from ember.ember_errors import EmberError
from ember.ember_lexer import TokenStream, tokenize
from ember.ember_parser import Parser

logger = logging.getLogger(__name__)


def run_ember(
    source: str,
    is_string: bool = False,
    as_json: bool = False,
    show_tokens: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> int:
    """
    Run the Ember front end: lex, parse, and print the result.

    Args:
        source (str): The Ember source code or path to a `.em` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        as_json (bool): If True, prints the AST as indented JSON.
        show_tokens (bool): If True, prints the token stream instead of the AST.
        max_depth (int): Maximum expression nesting accepted by the parser.

    Returns:
        int: 0 on success, 1 if the source has a lexical or syntax error.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.em'.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIX):
        raise ValueError(f"Only {SOURCE_SUFFIX} files are supported.")
    if not is_string:
        logger.debug("reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    try:
        if show_tokens:
            for tok in tokenize(source):
                print(f"{tok.line}:{tok.col}\t{tok.kind}\t{tok.value!r}")
            return 0
        ast = Parser(TokenStream.from_source(source), max_depth=max_depth).parse()
    except EmberError as e:
        logger.debug("aborted with %s", type(e).__name__)
        print(f"error: {e}", file=sys.stderr)
        return 1

    if as_json:
        print(json.dumps(ast.to_dict(), indent=2))
    else:
        for node in ast:
            print(repr(node))
    return 0


def resolve_max_depth(flag: int | None) -> int:
    """Pick the nesting limit: the CLI flag, then ``EMBER_MAX_DEPTH``, then the default."""
    if flag is not None:
        return flag
    env = os.getenv(MAX_DEPTH_ENV)
    if env:
        return int(env)
    return DEFAULT_MAX_DEPTH


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Ember CLI.

    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise runs ``run_ember`` on the given file or string.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--json`: Print the AST as JSON.
        - `--tokens`: Print tokens instead of the AST.
        - `--max-depth`: Nesting limit (overrides `EMBER_MAX_DEPTH`).
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Enable debug logging.
    """
    parser = argparse.ArgumentParser(prog="ember")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument("--json", action="store_true", help="Print the AST as JSON")
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream instead"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        metavar="N",
        help=f"Maximum expression nesting (default: ${MAX_DEPTH_ENV} or {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    try:
        max_depth = resolve_max_depth(args.max_depth)
    except ValueError:
        parser.error(f"{MAX_DEPTH_ENV} must be an integer")

    if args.repl or args.source is None:
        from ember.ember_repl import start_repl

        start_repl(as_json=args.json, show_tokens=args.tokens, max_depth=max_depth)
        return 0

    try:
        return run_ember(
            source=args.source,
            is_string=args.string,
            as_json=args.json,
            show_tokens=args.tokens,
            max_depth=max_depth,
        )
    except (ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
