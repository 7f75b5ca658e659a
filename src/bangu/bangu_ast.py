"""
Defines the abstract syntax tree (AST) node classes for the Bangu language.

Every node is a frozen dataclass holding the token that introduced it, so the tree
cannot be mutated once the parser has built it. Children are stored in tuples.
Structural equality (`==`) ignores the token, which makes two parses of the same
source compare equal even when the inputs were laid out differently.

Each node supports:
    token_literal(): The literal text of the introducing token.
    str(node): A canonical, fully-parenthesized rendering, e.g. `((-a) * b)`.
    to_dict(): A JSON-serializable dictionary, used by the CLI `--ast` dump.

Statements:
    Program, LetStatement, ReturnStatement, ExpressionStatement, BlockStatement

Expressions:
    Identifier, IntegerLiteral, BooleanLiteral, StringLiteral, PrefixExpression,
    InfixExpression, IfExpression, FunctionLiteral, CallExpression, ArrayLiteral,
    IndexExpression, HashLiteral
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any

from bangu.bangu_lexer import Token


class Node:
    """Base class of every AST node."""

    token: Token

    def token_literal(self) -> str:
        return self.token.value

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "kind": type(self).__name__,
            "line": self.token.line,
            "col": self.token.col,
        }
        for f in dataclasses.fields(self):  # type: ignore[arg-type]
            if f.name == "token":
                continue
            d[f.name] = _to_plain(getattr(self, f.name))
        return d


class Statement(Node):
    pass


class Expression(Node):
    pass


def _to_plain(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_to_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class Program(Node):
    token: Token = field(compare=False, repr=False)
    statements: tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass(frozen=True)
class Identifier(Expression):
    token: Token = field(compare=False, repr=False)
    value: str = ""

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LetStatement(Statement):
    token: Token = field(compare=False, repr=False)
    name: Identifier | None = None
    value: Expression | None = None

    def __str__(self) -> str:
        value = str(self.value) if self.value is not None else ""
        return f"{self.token_literal()} {self.name} = {value};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    token: Token = field(compare=False, repr=False)
    value: Expression | None = None

    def __str__(self) -> str:
        if self.value is None:
            return f"{self.token_literal()};"
        return f"{self.token_literal()} {self.value};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    token: Token = field(compare=False, repr=False)
    expression: Expression | None = None

    def __str__(self) -> str:
        return str(self.expression) if self.expression is not None else ""


@dataclass(frozen=True)
class BlockStatement(Statement):
    token: Token = field(compare=False, repr=False)
    statements: tuple[Statement, ...] = ()

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    token: Token = field(compare=False, repr=False)
    value: int = 0

    def __str__(self) -> str:
        return self.token_literal()


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    token: Token = field(compare=False, repr=False)
    value: bool = False

    def __str__(self) -> str:
        return self.token_literal()


@dataclass(frozen=True)
class StringLiteral(Expression):
    token: Token = field(compare=False, repr=False)
    value: str = ""

    def __str__(self) -> str:
        return json.dumps(self.value)


@dataclass(frozen=True)
class PrefixExpression(Expression):
    token: Token = field(compare=False, repr=False)
    operator: str = ""
    right: Expression | None = None

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    token: Token = field(compare=False, repr=False)
    left: Expression | None = None
    operator: str = ""
    right: Expression | None = None

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Expression):
    token: Token = field(compare=False, repr=False)
    condition: Expression | None = None
    consequence: BlockStatement | None = None
    alternative: BlockStatement | None = None

    def __str__(self) -> str:
        out = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f"else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    token: Token = field(compare=False, repr=False)
    parameters: tuple[Identifier, ...] = ()
    body: BlockStatement | None = None

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    token: Token = field(compare=False, repr=False)
    function: Expression | None = None
    arguments: tuple[Expression, ...] = ()

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    token: Token = field(compare=False, repr=False)
    elements: tuple[Expression, ...] = ()

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class IndexExpression(Expression):
    token: Token = field(compare=False, repr=False)
    left: Expression | None = None
    index: Expression | None = None

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass(frozen=True)
class HashLiteral(Expression):
    token: Token = field(compare=False, repr=False)
    pairs: tuple[tuple[Expression, Expression], ...] = ()

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"
