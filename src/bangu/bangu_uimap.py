"""
Provides the `UserInterfaceMapper` class for user-defined keyword aliases in Bangu.

An alias lets a word stand in for a canonical keyword or operator token, e.g. `func`
for `fn` or `plus` for `+`. Aliases are applied to `IDENT` tokens between the lexer
and the parser, so the parser only ever sees canonical token types.

Classes:
    - UserInterfaceMapper: Maps alias words to canonical token types.
    - AliasedTokenStream: Token stream that rewrites aliased identifiers on the fly.
    - MappingError: Raised when configuration or alias conflicts occur.

Features:
    - Dict mode (explicit alias-to-token mapping) and list mode (positional mapping
      against `CANONICAL_TOKENS`)
    - Conflict detection with a list of every colliding alias
    - Loading mappings from JSON files, and from the `BANGU_ALIASES` environment variable
    - Alias reports for the REPL

Usage:
    >>> mapper = UserInterfaceMapper.from_canonical()
    >>> mapper.configure({"func": "FUNCTION"})
    >>> mapper.get_token("func").type
    'FUNCTION'
"""

import json
import logging
import os
from typing import Any

from bangu.bangu_constants import (
    CANONICAL_TOKEN_MAP,
    CANONICAL_TOKENS,
    IDENT,
    keywords,
    token_hashmap,
)
from bangu.bangu_lexer import Token, TokenStream

logger = logging.getLogger(__name__)

ALIASES_ENV_VAR = "BANGU_ALIASES"

# Token type → the source text the parser and evaluator expect for it.
canonical_text: dict[str, str] = {v: k for k, v in {**token_hashmap, **keywords}.items()}


class MappingError(Exception):
    """An alias configuration was rejected.

    `conflicts` lists one line per alias that would have been bound to two types.
    """

    def __init__(self, message: str, conflicts: list[str] | None = None) -> None:
        super().__init__(message)
        self.conflicts: list[str] = list(conflicts) if conflicts else []


class UserInterfaceMapper:
    """Holds the alias table used to retype identifiers.

    Attributes:
        token_map (dict[str, str]): Alias word → canonical token type.
    """

    def __init__(self) -> None:
        self.token_map: dict[str, str] = {}

    def get_token(self, alias: str, line: int = 0, col: int = 0) -> Token | None:
        """Builds the canonical token an alias stands for, or None for an unknown word."""
        if alias not in self.token_map:
            return None
        sym = self.token_map[alias]
        return Token(sym, canonical_text[sym], line, col)

    def wrap(self, stream: TokenStream) -> "AliasedTokenStream":
        return AliasedTokenStream(stream, self)

    def report(self, verbose: bool = False) -> str:
        """One line per alias, sorted; `verbose` adds each type's list-mode slot."""
        rows = []
        for alias in sorted(self.token_map):
            sym = self.token_map[alias]
            row = f"{alias:>12} → {sym}"
            if verbose:
                row = f"{row:<28}(slot {CANONICAL_TOKENS.index(sym)})"
            rows.append(row)
        return "\n".join(rows)

    def summary(self) -> dict[str, str]:
        return self.token_map.copy()

    def _flatten_aliases(self, entry: Any) -> list[str]:
        """Collects alias words from a string, number, nested sequence or dict keys."""
        if isinstance(entry, str):
            return [entry]
        if isinstance(entry, (int, float)):
            return [str(entry)]
        if isinstance(entry, dict):
            return list(map(str, entry))
        if isinstance(entry, (list, tuple, set)):
            return [alias for item in entry for alias in self._flatten_aliases(item)]
        return []

    @classmethod
    def from_canonical(cls) -> "UserInterfaceMapper":
        """A mapper that already knows the reserved words (`fn`, `let`, ...)."""
        mapper = cls()
        mapper.configure(CANONICAL_TOKEN_MAP.copy())
        return mapper

    @classmethod
    def from_env(cls) -> "UserInterfaceMapper":
        """A canonical mapper plus the alias file named by `BANGU_ALIASES`, when set."""
        mapper = cls.from_canonical()
        path = os.getenv(ALIASES_ENV_VAR)
        if path:
            logger.debug("loading aliases from %s", path)
            mapper.load_from_json(path)
        return mapper

    def load_from_json(self, path: str) -> None:
        """
        Applies an alias file.

        The file holds one JSON object whose keys are comma-separated alias words
        and whose values are canonical token types:
            {
                "func,lambda": "FUNCTION",
                "plus": "PLUS"
            }

        Raises:
            MappingError: If the file is unreadable, is not valid JSON, or is rejected
                by `configure`.
        """
        try:
            with open(path, encoding="utf-8") as fh:
                raw_cfg = json.load(fh)
        except (OSError, ValueError) as e:
            raise MappingError(f"Failed to load alias file: {e}") from e

        self.configure_json(raw_cfg)

    def configure_json(self, raw_cfg: Any) -> None:
        """Applies an already-decoded alias object (see `load_from_json`)."""
        if not isinstance(raw_cfg, dict):
            raise MappingError("Alias configuration must be a JSON object")

        self.configure(
            {
                tuple(word.strip() for word in key.split(",") if word.strip()): sym
                for key, sym in raw_cfg.items()
            }
        )

    def configure(self, cfg: list[Any] | dict[Any, Any]) -> None:
        """
        Adds aliases to the table. Nothing is applied unless the whole config is valid.

        Args:
            cfg: A dict from an alias (or a group of aliases) to a token type, or a
                list whose n-th entry holds the aliases for `CANONICAL_TOKENS[n]`.

        Raises:
            MappingError: On an unknown token type, on a list longer than
                `CANONICAL_TOKENS`, or when an alias would map to two types.
        """
        if isinstance(cfg, dict):
            unknown = [sym for sym in cfg.values() if sym not in CANONICAL_TOKENS]
            if unknown:
                raise MappingError(f"Unknown token type: {unknown[0]}")
            entries = list(cfg.items())
        elif isinstance(cfg, list):
            if len(cfg) > len(CANONICAL_TOKENS):
                raise MappingError("Too many entries in list-mode config")
            entries = list(zip(cfg, CANONICAL_TOKENS))
        else:
            raise MappingError("Configuration must be either a list or a dict")

        staged: dict[str, str] = {}
        conflicts: list[str] = []
        for group, sym in entries:
            for alias in self._flatten_aliases(group):
                bound = staged.get(alias) or self.token_map.get(alias)
                if bound is None or bound == sym:
                    staged[alias] = sym
                else:
                    conflicts.append(f"'{alias}' → conflict between {bound} and {sym}")

        if conflicts:
            raise MappingError("Alias collision(s) detected", conflicts)
        self.token_map.update(staged)


class AliasedTokenStream:
    """Token stream that retypes `IDENT` tokens matching a configured alias."""

    def __init__(self, stream: TokenStream, mapper: UserInterfaceMapper) -> None:
        self.stream = stream
        self.mapper = mapper

    def next_token(self) -> Token:
        tok = self.stream.next_token()
        if tok.type != IDENT:
            return tok
        mapped = self.mapper.get_token(tok.value, tok.line, tok.col)
        return mapped if mapped else tok
