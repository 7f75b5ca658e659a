import io
import json
import os
import traceback

from bangu.bangu_evaluator import eval_node
from bangu.bangu_lexer import CharacterStream, Lexer
from bangu.bangu_parser import Parser
from bangu.bangu_uimap import ALIASES_ENV_VAR, MappingError, UserInterfaceMapper

PROMPT = ">> "
CONTINUATION_PROMPT = ".. "

BANGU_FACE = r'''
    .-""""""-.
   /          \
  |  .    .    |
  |            |
  |     O      |
   \           /
    '-.......-'
       |  |
   ____||||____
  (____________)
'''

uimap = UserInterfaceMapper.from_canonical()


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def print_parser_errors(errors: list[str]) -> None:
    print(BANGU_FACE, end="")
    print("Woops! We ran into some bangu business here!")
    print(" parser errors:")
    for msg in errors:
        print(f"\t{msg}")


def handle_alias_command(src: str) -> bool:
    """Handle `ALIAS`, `ALIAS LOAD <path>` and `ALIAS {json}`; False if `src` is code."""
    src = src.strip()
    if not src.upper().startswith("ALIAS"):
        return False
    command = src[5:].strip()
    if command == "":
        print(uimap.report(verbose=True))
        return True
    try:
        if command.upper().startswith("LOAD "):
            path = command[5:].strip().strip('"').strip("'")
            uimap.load_from_json(path)
            print(f"[ok] >>> Aliases loaded from {path}.")
        else:
            uimap.configure_json(json.loads(command))
            print("[ok] >>> Aliases updated.")
        print(uimap.report())
    except (MappingError, ValueError) as e:
        print("[error] >>> Failed to configure aliases:")
        print(e)
        for conflict in getattr(e, "conflicts", []):
            print(" -", conflict)
    return True


def read_source() -> str | None:
    """Read one input, continuing onto further lines while braces are open.

    Returns None when the user asks to leave.
    """
    src_lines: list[str] = []
    brace_count = 0
    while True:
        line = input(PROMPT if not src_lines else CONTINUATION_PROMPT)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        brace_count += line.count("{") - line.count("}")
        if brace_count <= 0:
            return "\n".join(src_lines).strip()


def load_session_aliases(path: str | None = None) -> None:
    """Apply the file named by `BANGU_ALIASES`, then `path`, to the session aliases."""
    for alias_file in (os.getenv(ALIASES_ENV_VAR), path):
        if not alias_file:
            continue
        try:
            uimap.load_from_json(alias_file)
        except MappingError as e:
            print(f"[error] >>> {e}")
            for conflict in e.conflicts:
                print(" -", conflict)


def start_repl(verbose: bool = False, aliases: str | None = None) -> None:
    print("Bangu REPL. Type 'exit' or 'quit' to leave.")
    load_session_aliases(aliases)

    while True:
        try:
            src = read_source()
            if src is None:
                print("Exiting Bangu REPL.")
                return
            if not src or src.startswith("#"):
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            if handle_alias_command(src):
                continue

            try:
                lexer = Lexer(CharacterStream(src))
                parser = Parser(uimap.wrap(lexer))
                program = parser.parse_program()
            except Exception:
                print_traceback()
                continue

            if parser.errors():
                print_parser_errors(parser.errors())
                continue

            if verbose:
                print(f"[ast] >>> {program}")

            try:
                evaluated = eval_node(program)
            except RecursionError:
                print("[error] >>> Expression nested too deeply")
                continue
            if evaluated is not None:
                print(evaluated.inspect())

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Bangu REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
