"""
Bangu Language Parser

Parses a Bangu token stream into an abstract syntax tree rooted at `Program`.

Expressions are parsed by precedence climbing ("Pratt" parsing): every token type
that can start an expression has a prefix parse function, every token type that can
continue one has an infix parse function, and a binding-power table decides how far
each infix operator reaches.

Precedence (low → high)
-----------------------
LOWEST < EQUALS (== !=) < LESSGREATER (< >) < SUM (+ -) < PRODUCT (* /)
< PREFIX (!x -x) < CALL (f(x)) < INDEX (a[i])

Supported Constructs
--------------------
- Statements: `let x = <expr>;`, `return <expr>;`, bare expression statements
- Literals: integers, strings, `true`/`false`, arrays `[1, 2]`, hashes `{"a": 1}`
- Prefix and infix operators, grouping with parentheses
- `if (<cond>) { ... } else { ... }`
- Function literals `fn(a, b) { ... }`, calls `f(1, 2)`, indexing `a[0]`

Parser Behavior
---------------
- Never raises on malformed input. Each malformed statement adds one diagnostic to
  `errors()` and is abandoned; parsing resumes at the next statement boundary.
- `parse_program()` always returns a best-effort `Program`.

Entry Points
------------
- `parse_program()`: Parse the whole stream into a `Program`.
- `errors()`: The ordered list of diagnostics gathered so far.
- `parse_expression()`: Parse one expression at a given minimum precedence.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from bangu.bangu_ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from bangu.bangu_constants import (
    ASSIGN,
    ASTERISK,
    BANG,
    COLON,
    COMMA,
    ELSE,
    EOF,
    EQ,
    FALSE,
    FUNCTION,
    GT,
    IDENT,
    IF,
    INT,
    LBRACE,
    LBRACKET,
    LET,
    LPAREN,
    LT,
    MINUS,
    NOT_EQ,
    PLUS,
    RBRACE,
    RBRACKET,
    RETURN,
    RPAREN,
    SEMICOLON,
    SLASH,
    STRING,
    TRUE,
)
from bangu.bangu_lexer import Token, TokenStream

logger = logging.getLogger(__name__)

LOWEST = 1
EQUALS = 2
LESSGREATER = 3
SUM = 4
PRODUCT = 5
PREFIX = 6
CALL = 7
INDEX = 8

precedences: dict[str, int] = {
    EQ: EQUALS,
    NOT_EQ: EQUALS,
    LT: LESSGREATER,
    GT: LESSGREATER,
    PLUS: SUM,
    MINUS: SUM,
    SLASH: PRODUCT,
    ASTERISK: PRODUCT,
    LPAREN: CALL,
    LBRACKET: INDEX,
}

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

PrefixParseFn = Callable[[], Expression | None]
InfixParseFn = Callable[[Expression], Expression | None]


class Parser:
    """
    Bangu Parser Class

    Pulls tokens from a token stream through a two-token window (`cur_token` and
    `peek_token`) and builds the AST for a whole program.

    Attributes
    ----------
    stream : TokenStream
        The token source; anything with a `next_token()` method.
    cur_token : Token
        The token under examination.
    peek_token : Token
        One token of lookahead.
    prefix_parse_fns : dict[str, PrefixParseFn]
        Parse functions for tokens that start an expression.
    infix_parse_fns : dict[str, InfixParseFn]
        Parse functions for tokens that continue an expression, given its left side.
    """

    def __init__(self, stream: TokenStream) -> None:
        self.stream = stream
        self._errors: list[str] = []

        self.prefix_parse_fns: dict[str, PrefixParseFn] = {
            IDENT: self.parse_identifier,
            INT: self.parse_integer_literal,
            STRING: self.parse_string_literal,
            TRUE: self.parse_boolean,
            FALSE: self.parse_boolean,
            BANG: self.parse_prefix_expression,
            MINUS: self.parse_prefix_expression,
            LPAREN: self.parse_grouped_expression,
            IF: self.parse_if_expression,
            FUNCTION: self.parse_function_literal,
            LBRACKET: self.parse_array_literal,
            LBRACE: self.parse_hash_literal,
        }
        self.infix_parse_fns: dict[str, InfixParseFn] = {
            op: self.parse_infix_expression
            for op in (PLUS, MINUS, SLASH, ASTERISK, EQ, NOT_EQ, LT, GT)
        }
        self.infix_parse_fns[LPAREN] = self.parse_call_expression
        self.infix_parse_fns[LBRACKET] = self.parse_index_expression

        # Prime both cur_token and peek_token.
        self.cur_token: Token = Token(EOF, "")
        self.peek_token: Token = Token(EOF, "")
        self.next_token()
        self.next_token()

    def errors(self) -> list[str]:
        return self._errors

    # Token window

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.stream.next_token()

    def cur_token_is(self, type_: str) -> bool:
        return self.cur_token.type == type_

    def peek_token_is(self, type_: str) -> bool:
        return self.peek_token.type == type_

    def expect_peek(self, type_: str) -> bool:
        """Advance if the next token has the given type, otherwise record a diagnostic."""
        if self.peek_token_is(type_):
            self.next_token()
            return True
        self.peek_error(type_)
        return False

    def peek_precedence(self) -> int:
        return precedences.get(self.peek_token.type, LOWEST)

    def cur_precedence(self) -> int:
        return precedences.get(self.cur_token.type, LOWEST)

    # Diagnostics

    def add_error(self, msg: str) -> None:
        logger.debug("parse error at %d:%d: %s", self.cur_token.line, self.cur_token.col, msg)
        self._errors.append(msg)

    def peek_error(self, type_: str) -> None:
        self.add_error(
            f"expected next token to be {type_}, got {self.peek_token.type} instead"
        )

    def no_prefix_parse_fn_error(self, type_: str) -> None:
        self.add_error(f"no prefix parse function for {type_} found")

    def synchronize(self) -> None:
        """Skip the rest of an abandoned statement.

        Stops on the statement's `;`, or just before a closing `}` or the start of
        the next `let`/`return`, so the caller's usual `next_token()` lands on the
        next statement. A statement that failed on a `}` is left sitting on it; an
        enclosing block owns that brace.
        """
        while not self.cur_token_is(SEMICOLON) and not self.cur_token_is(EOF):
            if self.cur_token_is(RBRACE) or self.peek_token.type in (RBRACE, LET, RETURN, EOF):
                return
            self.next_token()

    # Statements

    def parse_program(self) -> Program:
        """Parse every statement up to EOF."""
        program_token = self.cur_token
        statements: list[Statement] = []
        while not self.cur_token_is(EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return Program(program_token, tuple(statements))

    def parse_statement(self) -> Statement | None:
        if self.cur_token_is(LET):
            stmt: Statement | None = self.parse_let_statement()
        elif self.cur_token_is(RETURN):
            stmt = self.parse_return_statement()
        else:
            stmt = self.parse_expression_statement()
        if stmt is None:
            self.synchronize()
        return stmt

    def parse_let_statement(self) -> LetStatement | None:
        let_tok = self.cur_token

        if not self.expect_peek(IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.value)

        if not self.expect_peek(ASSIGN):
            return None

        self.next_token()
        value = self.parse_expression(LOWEST)
        if value is None:
            return None

        if self.peek_token_is(SEMICOLON):
            self.next_token()
        return LetStatement(let_tok, name, value)

    def parse_return_statement(self) -> ReturnStatement | None:
        return_tok = self.cur_token

        # Bare `return` with nothing after it.
        if self.peek_token.type in (SEMICOLON, RBRACE, EOF):
            if self.peek_token_is(SEMICOLON):
                self.next_token()
            return ReturnStatement(return_tok, None)

        self.next_token()
        value = self.parse_expression(LOWEST)
        if value is None:
            return None

        if self.peek_token_is(SEMICOLON):
            self.next_token()
        return ReturnStatement(return_tok, value)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        stmt_tok = self.cur_token
        expr = self.parse_expression(LOWEST)
        if expr is None:
            return None

        if self.peek_token_is(SEMICOLON):
            self.next_token()
        return ExpressionStatement(stmt_tok, expr)

    def parse_block_statement(self) -> BlockStatement:
        """Parse `{ ... }`; `cur_token` is the `{` on entry and the `}` on exit."""
        block_tok = self.cur_token
        statements: list[Statement] = []
        self.next_token()

        while not self.cur_token_is(RBRACE) and not self.cur_token_is(EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            elif self.cur_token_is(RBRACE):
                break
            self.next_token()

        if self.cur_token_is(EOF):
            self.add_error(f"expected next token to be {RBRACE}, got {EOF} instead")
        return BlockStatement(block_tok, tuple(statements))

    # Expressions

    def parse_expression(self, precedence: int) -> Expression | None:
        """Parse an expression whose operators all bind tighter than `precedence`."""
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token.type)
            return None
        left = prefix()

        while (
            left is not None
            and not self.peek_token_is(SEMICOLON)
            and precedence < self.peek_precedence()
        ):
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token, self.cur_token.value)

    def parse_integer_literal(self) -> Expression | None:
        tok = self.cur_token
        try:
            value = int(tok.value)
        except ValueError:
            value = None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.add_error(f'could not parse "{tok.value}" as integer')
            return None
        return IntegerLiteral(tok, value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token, self.cur_token.value)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(self.cur_token, self.cur_token_is(TRUE))

    def parse_prefix_expression(self) -> Expression | None:
        op_tok = self.cur_token
        self.next_token()
        right = self.parse_expression(PREFIX)
        if right is None:
            return None
        return PrefixExpression(op_tok, op_tok.value, right)

    def parse_infix_expression(self, left: Expression) -> Expression | None:
        op_tok = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(op_tok, left, op_tok.value, right)

    def parse_grouped_expression(self) -> Expression | None:
        self.next_token()
        expr = self.parse_expression(LOWEST)
        if expr is None or not self.expect_peek(RPAREN):
            return None
        return expr

    def parse_if_expression(self) -> Expression | None:
        if_tok = self.cur_token
        if not self.expect_peek(LPAREN):
            return None

        self.next_token()
        condition = self.parse_expression(LOWEST)
        if condition is None or not self.expect_peek(RPAREN):
            return None

        if not self.expect_peek(LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(ELSE):
            self.next_token()
            if not self.expect_peek(LBRACE):
                return None
            alternative = self.parse_block_statement()

        return IfExpression(if_tok, condition, consequence, alternative)

    def parse_function_literal(self) -> Expression | None:
        fn_tok = self.cur_token
        if not self.expect_peek(LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(LBRACE):
            return None
        body = self.parse_block_statement()
        return FunctionLiteral(fn_tok, tuple(parameters), body)

    def parse_function_parameters(self) -> list[Identifier] | None:
        params: list[Identifier] = []

        if self.peek_token_is(RPAREN):
            self.next_token()
            return params

        if not self.expect_peek(IDENT):
            return None
        params.append(Identifier(self.cur_token, self.cur_token.value))

        while self.peek_token_is(COMMA):
            self.next_token()
            if not self.expect_peek(IDENT):
                return None
            params.append(Identifier(self.cur_token, self.cur_token.value))

        if not self.expect_peek(RPAREN):
            return None
        return params

    def parse_call_expression(self, function: Expression) -> Expression | None:
        call_tok = self.cur_token
        arguments = self.parse_expression_list(RPAREN)
        if arguments is None:
            return None
        return CallExpression(call_tok, function, tuple(arguments))

    def parse_expression_list(self, end: str) -> list[Expression] | None:
        """Parse comma-separated expressions up to and including `end`."""
        items: list[Expression] = []

        if self.peek_token_is(end):
            self.next_token()
            return items

        self.next_token()
        item = self.parse_expression(LOWEST)
        if item is None:
            return None
        items.append(item)

        while self.peek_token_is(COMMA):
            self.next_token()
            self.next_token()
            item = self.parse_expression(LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None
        return items

    def parse_array_literal(self) -> Expression | None:
        array_tok = self.cur_token
        elements = self.parse_expression_list(RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(array_tok, tuple(elements))

    def parse_index_expression(self, left: Expression) -> Expression | None:
        index_tok = self.cur_token
        self.next_token()
        index = self.parse_expression(LOWEST)
        if index is None or not self.expect_peek(RBRACKET):
            return None
        return IndexExpression(index_tok, left, index)

    def parse_hash_literal(self) -> Expression | None:
        hash_tok = self.cur_token
        pairs: list[tuple[Expression, Expression]] = []

        while not self.peek_token_is(RBRACE):
            self.next_token()
            key = self.parse_expression(LOWEST)
            if key is None or not self.expect_peek(COLON):
                return None

            self.next_token()
            value = self.parse_expression(LOWEST)
            if value is None:
                return None
            pairs.append((key, value))

            if not self.peek_token_is(RBRACE) and not self.expect_peek(COMMA):
                return None

        self.next_token()
        return HashLiteral(hash_tok, tuple(pairs))
