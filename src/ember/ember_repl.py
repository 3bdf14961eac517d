"""
Interactive Ember REPL.

Each line entered is parsed as a complete top-level program and the
resulting AST is printed. Diagnostics are printed and the loop continues.

Commands:
    :json     Toggle JSON output.
    :tokens   Toggle printing the token stream before the AST.
    quit      Leave the REPL (also `exit`, Ctrl-D, Ctrl-C).
"""

import io
import json
import logging
import traceback

from ember.ember_constants import DEFAULT_MAX_DEPTH
from ember.ember_errors import EmberError
from ember.ember_lexer import TokenStream, tokenize
from ember.ember_parser import Parser

logger = logging.getLogger(__name__)

PROMPT = "ember> "


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def start_repl(
    as_json: bool = False,
    show_tokens: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> None:
    print("Ember REPL. Type 'quit' to exit.")
    while True:
        try:
            src = input(PROMPT).strip()
            if not src:
                continue
            if src in ("quit", "exit"):
                print("Exiting Ember REPL.")
                break
            if src == ":json":
                as_json = not as_json
                print(f"[ok] >>> JSON output {'on' if as_json else 'off'}")
                continue
            if src == ":tokens":
                show_tokens = not show_tokens
                print(f"[ok] >>> Token output {'on' if show_tokens else 'off'}")
                continue

            try:
                if show_tokens:
                    print(tokenize(src))
                ast = Parser(TokenStream.from_source(src), max_depth=max_depth).parse()
            except EmberError as e:
                print(f"[error] >>> {e}")
                continue
            except Exception:
                logger.debug("unexpected failure parsing %r", src)
                print_traceback()
                continue

            if as_json:
                print(json.dumps(ast.to_dict(), indent=2))
            else:
                for node in ast:
                    print(repr(node))

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Ember REPL.")
            break


if __name__ == "__main__":
    start_repl()
