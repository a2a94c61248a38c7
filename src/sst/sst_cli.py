"""
Java-SST CLI Entrypoint.

Checks Java-SST source for syntactic well-formedness and reports the declared
names.

Features:
    - Read source from `.sst`/`.java` files or inline strings.
    - Scan and parse, stopping at the first error.
    - Print the class scope as JSON, or the raw token stream.
    - Report the single fatal diagnostic through logging.

Example usage:
    sst Counter.sst
    sst -s "class A { int x; }" --symbols
    sst Counter.java --tokens --verbose

Functions:
    run_sst(source: str, is_string: bool = False, symbols: bool = False, tokens: bool = False) -> Scope | None:
        Runs the scanner and parser over one source and prints what was asked for.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments, configures logging and returns the exit status.
"""

import argparse
import json
import logging
import sys

from sst.sst_errors import SemanticError
from sst.sst_lexer import CharacterStream, Lexer
from sst.sst_parser import Parser
from sst.sst_symbols import Scope

LOGGER = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".sst", ".java")
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def run_sst(
    source: str,
    is_string: bool = False,
    symbols: bool = False,
    tokens: bool = False,
) -> Scope | None:
    """
    Run the Java-SST front end over one source.

    Args:
        source (str): The source code, or a path to a source file.
        is_string (bool): If True, treats `source` as code instead of a file path.
        symbols (bool): If True, prints the class scope as JSON after parsing.
        tokens (bool): If True, prints the token stream and skips parsing.

    Returns:
        Scope | None: The class scope, or None when only tokens were printed.

    Raises:
        ValueError: If `is_string` is False and the file suffix is not supported.
        SyntaxError: On the first lexical or syntax error.
        SemanticError: On a duplicate declaration or non-constant initializer.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIXES):
        raise ValueError(f"Only {', '.join(SOURCE_SUFFIXES)} files are supported.")
    if not is_string:
        LOGGER.info("reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    lexer = Lexer(CharacterStream(source))

    if tokens:
        for tok in lexer.tokens():
            print(f"{tok.line}:{tok.col}\t{tok.type}\t{tok.value}")
        return None

    scope = Parser(lexer).parse()
    if symbols:
        print(json.dumps(scope.to_dict(), indent=2))
    else:
        head = scope.head.name if scope.head is not None else "?"
        print(f"OK: class {head} ({len(scope.declarations)} declarations)")
    return scope


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Java-SST CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--symbols`: Print the class scope as JSON.
        - `--tokens`: Print the token stream instead of parsing.
        - `-v`, `--verbose`: Log every token and scope change.

    Returns:
        int: 0 on success, 1 after reporting the first error.
    """
    parser = argparse.ArgumentParser(prog="sst")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--symbols", action="store_true", help="Print the class scope as JSON"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print tokens instead of parsing"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log tokens and scopes"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    try:
        run_sst(
            source=args.source,
            is_string=args.string,
            symbols=args.symbols,
            tokens=args.tokens,
        )
    except (SyntaxError, SemanticError, ValueError, OSError) as e:
        LOGGER.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
