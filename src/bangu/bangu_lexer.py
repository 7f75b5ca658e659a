"""
Lexical analyzer for the Bangu language.

Turns raw source text into the token stream the parser pulls from.

Classes:
    CharacterStream: Cursor over the source text that knows its line and column.
    Token: Immutable token with a type tag, its source text, and where it started.
    Lexer: Produces tokens lazily from a CharacterStream.
    TokenBuffer: Serves a prepared token list through the same interface.

Lexing rules:
    - Whitespace and line comments (`# ...` and `// ...`) separate tokens
    - Operators are matched longest-first, so `==` wins over `=`
    - Identifiers start with a letter or `_`; reserved words come back as keyword tokens
    - Strings are double-quoted and understand `\\n \\t \\r \\" \\\\`
    - Bad input never raises: stray characters and unterminated strings are ILLEGAL
    - After the last token, EOF is returned on every call

Example:
    >>> lexer = Lexer(CharacterStream("let x = 5;"))
    >>> lexer.next_token()
    Token(LET, let)
"""

from dataclasses import dataclass
from typing import Callable, Protocol

from bangu.bangu_constants import EOF, IDENT, ILLEGAL, INT, STRING, keywords, token_hashmap

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}
_LONGEST_OPERATOR = max(len(op) for op in token_hashmap)


class CharacterStream:
    """
    Cursor over a source string.

    Attributes:
        source (str): Text being read.
        position (int): Index of the next unread character.
        line (int): Line of the next unread character, starting at 1.
        column (int): Column of the next unread character, starting at 1.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.position = 0
        self.line = 1
        self.column = 1

    def end_of_file(self) -> bool:
        return self.position == len(self.source)

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" past either end."""
        index = self.position + offset
        return self.source[index] if 0 <= index < len(self.source) else ""

    def next(self) -> str:
        """Consumes one character and returns it; "" once the source is used up."""
        ch = self.peek()
        if not ch:
            return ""
        self.position += 1
        if ch == "\n":
            self.line, self.column = self.line + 1, 1
        else:
            self.column += 1
        return ch

    def take_while(self, pred: Callable[[str], bool]) -> str:
        """Consumes characters for as long as `pred` holds and returns them."""
        start = self.position
        while not self.end_of_file() and pred(self.peek()):
            self.next()
        return self.source[start : self.position]


@dataclass(frozen=True, repr=False)
class Token:
    """A lexical token.

    Attributes:
        type (str): Token type tag, e.g. 'IDENT' or 'EOF'.
        value (str): Text the token stands for.
        line (int): Line the token starts on (0 when synthesized).
        col (int): Column the token starts on (0 when synthesized).
    """

    type: str
    value: str
    line: int = 0
    col: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"


class TokenStream(Protocol):
    """Anything the parser can pull tokens from, one at a time."""

    def next_token(self) -> Token: ...  # pragma: no cover


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class Lexer:
    """Lexical analyzer for the Bangu language.

    Attributes:
        stream (CharacterStream): Source being tokenized.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def at_comment(self) -> bool:
        ch = self.stream.peek()
        return ch == "#" or (ch == "/" and self.stream.peek(1) == "/")

    def skip_whitespace(self) -> None:
        """Skips any run of blanks and line comments."""
        while True:
            self.stream.take_while(str.isspace)
            if not self.at_comment():
                return
            self.stream.take_while(lambda ch: ch != "\n")

    def match_operator(self, line: int, col: int) -> Token | None:
        """Consumes the longest operator or delimiter starting here, if there is one."""
        for size in range(_LONGEST_OPERATOR, 0, -1):
            text = self.stream.source[self.stream.position : self.stream.position + size]
            if len(text) == size and text in token_hashmap:
                for _ in text:
                    self.stream.next()
                return Token(token_hashmap[text], text, line, col)
        return None

    def read_string(self, line: int, col: int) -> Token:
        """Reads a string literal whose opening quote has not been consumed yet."""
        self.stream.next()
        chars: list[str] = []
        while not self.stream.end_of_file():
            ch = self.stream.next()
            if ch == '"':
                return Token(STRING, "".join(chars), line, col)
            if ch == "\\" and not self.stream.end_of_file():
                escaped = self.stream.next()
                chars.append(_ESCAPES.get(escaped, "\\" + escaped))
            else:
                chars.append(ch)
        return Token(ILLEGAL, '"' + "".join(chars), line, col)

    def next_token(self) -> Token:
        """Returns the next token, or EOF when nothing is left."""
        self.skip_whitespace()
        line, col = self.stream.line, self.stream.column
        ch = self.stream.peek()

        if not ch:
            return Token(EOF, "", line, col)
        if ch.isalpha() or ch == "_":
            word = self.stream.take_while(_is_ident_char)
            return Token(keywords.get(word, IDENT), word, line, col)
        if ch.isdigit():
            return Token(INT, self.stream.take_while(str.isdigit), line, col)
        if ch == '"':
            return self.read_string(line, col)

        return self.match_operator(line, col) or Token(ILLEGAL, self.stream.next(), line, col)


class TokenBuffer:
    """Serves a list of tokens in order, followed by EOF on every later call."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.index = 0

    def next_token(self) -> Token:
        if self.index < len(self.tokens):
            self.index += 1
            return self.tokens[self.index - 1]
        if not self.tokens:
            return Token(EOF, "")
        last = self.tokens[-1]
        return Token(EOF, "", last.line, last.col)


def tokenize(stream: TokenStream) -> list[Token]:
    """Drains `stream`; the result ends with exactly one EOF token."""
    tokens = [stream.next_token()]
    while tokens[-1].type != EOF:
        tokens.append(stream.next_token())
    return tokens
