"""
Bangu CLI Entrypoint.

Runs Bangu source from a `.bangu` file or an inline string, or starts the REPL.

Features:
    - Lex, parse and evaluate a program, printing the result's inspection string.
    - Dump the token stream (`--tokens`) or the AST as JSON (`--ast`) instead of evaluating.
    - Apply keyword aliases from a JSON file (`--aliases`, or the `BANGU_ALIASES` variable).
    - Launch the interactive REPL.

Example usage:
    bangu program.bangu
    bangu -s "if (1 < 2) { 10 }"
    bangu -s "1 + 2 * 3" --ast
    bangu --repl --verbose

Functions:
    run_bangu(source: str, is_string: bool = False, ...) -> int:
        Executes the pipeline (lex → parse → evaluate) and returns a process exit code.

    main() -> None:
        Parses CLI arguments and dispatches to the REPL or `run_bangu`.
"""

import argparse
import logging
import sys

from bangu.bangu_evaluator import eval_node
from bangu.bangu_lexer import CharacterStream, Lexer, tokenize
from bangu.bangu_object import Error
from bangu.bangu_parser import Parser
from bangu.bangu_uimap import MappingError, UserInterfaceMapper

logger = logging.getLogger(__name__)


def run_bangu(
    source: str,
    is_string: bool = False,
    show_ast: bool = False,
    show_tokens: bool = False,
    aliases: str | None = None,
) -> int:
    """
    Run the Bangu pipeline and print its result.

    Args:
        source (str): Bangu source code, or a path to a `.bangu` file.
        is_string (bool): Treat `source` as code rather than a path.
        show_ast (bool): Print the parsed program as JSON instead of evaluating it.
        show_tokens (bool): Print the token stream instead of parsing it.
        aliases (str | None): Optional JSON alias file applied after `BANGU_ALIASES`.

    Returns:
        int: 0 on success, 1 on parser diagnostics or an evaluation error.

    Raises:
        ValueError: If `is_string` is False and the path does not end with '.bangu'.
        MappingError: If an alias file cannot be applied.
    """
    if not is_string and not source.endswith(".bangu"):
        raise ValueError("Only .bangu files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    mapper = UserInterfaceMapper.from_env()
    if aliases:
        mapper.load_from_json(aliases)

    stream = mapper.wrap(Lexer(CharacterStream(source)))
    if show_tokens:
        for tok in tokenize(stream):
            print(f"{tok.line}:{tok.col}\t{tok.type}\t{tok.value}")
        return 0

    parser = Parser(stream)
    program = parser.parse_program()
    if parser.errors():
        for msg in parser.errors():
            print(f"[parse error] >>> {msg}", file=sys.stderr)
        return 1

    if show_ast:
        print(program.to_json())
        return 0

    logger.debug("evaluating %s", program)
    result = eval_node(program)
    if isinstance(result, Error):
        print(f"[error] >>> {result.inspect()}", file=sys.stderr)
        return 1
    if result is not None:
        print(result.inspect())
    return 0


def main() -> None:
    """
    Entry point for the Bangu CLI.

    Launches the REPL when no source is given or `--repl` is passed; otherwise runs
    `run_bangu` and exits with its status code.
    """
    parser = argparse.ArgumentParser(prog="bangu")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--ast", action="store_true", help="Print the parsed AST as JSON"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream"
    )
    parser.add_argument(
        "--aliases", metavar="FILE", help="JSON file of keyword aliases"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch the interactive REPL"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Debug logging; echo the AST in the REPL"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.repl or args.source is None:
        from bangu.bangu_repl import start_repl

        start_repl(verbose=args.verbose, aliases=args.aliases)
        return

    try:
        status = run_bangu(
            source=args.source,
            is_string=args.string,
            show_ast=args.ast,
            show_tokens=args.tokens,
            aliases=args.aliases,
        )
    except RecursionError:
        print("[error] >>> Expression nested too deeply", file=sys.stderr)
        status = 1
    except MappingError as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        for conflict in e.conflicts:
            print(" -", conflict, file=sys.stderr)
        status = 1
    except (OSError, ValueError) as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        status = 1
    sys.exit(status)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
