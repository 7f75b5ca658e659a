"""
Tree-walking evaluator for the Bangu language.

`eval_node` walks an AST node and returns the runtime `Object` it computes. Runtime
failures are `Error` objects returned like any other value: every composite node
checks each sub-result and hands an `Error` back unchanged before doing anything
else. No Python exception is used to signal an evaluation error.

`return` is modelled the same way. A `ReturnStatement` produces a `ReturnValue`
wrapper; `eval_block_statement` stops at it and passes it up still wrapped, and only
`eval_program` unwraps it. A nested `if` therefore returns from the whole program,
not just from the innermost block.

Node kinds this module does not evaluate (let bindings, identifiers, functions,
calls, arrays, hashes, index expressions) yield `None`, the "no value" sentinel.
"""

import logging

from bangu.bangu_ast import (
    BlockStatement,
    BooleanLiteral,
    ExpressionStatement,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from bangu.bangu_object import (
    NULL,
    Error,
    Integer,
    Object,
    ReturnValue,
    String,
    is_error,
    is_truthy,
    native_bool_to_boolean_object,
    objects_equal,
)

logger = logging.getLogger(__name__)

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


def eval_node(node: Node) -> Object | None:
    # Statements
    if isinstance(node, Program):
        return eval_program(node)
    if isinstance(node, ExpressionStatement):
        if node.expression is None:
            return None
        return eval_node(node.expression)
    if isinstance(node, BlockStatement):
        return eval_block_statement(node)
    if isinstance(node, ReturnStatement):
        if node.value is None:
            return ReturnValue(NULL)
        val = eval_node(node.value)
        if val is None or is_error(val):
            return val
        return ReturnValue(val)

    # Expressions
    if isinstance(node, IntegerLiteral):
        return Integer(node.value)
    if isinstance(node, BooleanLiteral):
        return native_bool_to_boolean_object(node.value)
    if isinstance(node, StringLiteral):
        return String(node.value)
    if isinstance(node, PrefixExpression):
        if node.right is None:
            return None
        right = eval_node(node.right)
        if right is None or is_error(right):
            return right
        return eval_prefix_expression(node.operator, right)
    if isinstance(node, InfixExpression):
        if node.left is None or node.right is None:
            return None
        left = eval_node(node.left)
        if left is None or is_error(left):
            return left
        right = eval_node(node.right)
        if right is None or is_error(right):
            return right
        return eval_infix_expression(node.operator, left, right)
    if isinstance(node, IfExpression):
        return eval_if_expression(node)

    return None


def eval_program(program: Program) -> Object | None:
    """Evaluate top-level statements, unwrapping the first `ReturnValue` reached."""
    result: Object | None = None

    for statement in program.statements:
        result = eval_node(statement)

        if isinstance(result, ReturnValue):
            return result.value
        if isinstance(result, Error):
            return result

    return result


def eval_block_statement(block: BlockStatement) -> Object | None:
    """Evaluate a block, stopping at a `ReturnValue` or `Error` without unwrapping it.

    An empty block evaluates to `NULL`.
    """
    result: Object | None = NULL

    for statement in block.statements:
        result = eval_node(statement)

        if isinstance(result, (ReturnValue, Error)):
            return result

    return result


def eval_prefix_expression(operator: str, right: Object) -> Object:
    if operator == "!":
        return eval_bang_operator_expression(right)
    if operator == "-":
        return eval_minus_prefix_operator_expression(right)
    return new_error(f"unknown operator: {operator}{right.type()}")


def eval_bang_operator_expression(right: Object) -> Object:
    return native_bool_to_boolean_object(not is_truthy(right))


def eval_minus_prefix_operator_expression(right: Object) -> Object:
    if not isinstance(right, Integer):
        return new_error(f"unknown operator: -{right.type()}")
    return Integer(wrap_int64(-right.value))


def eval_infix_expression(operator: str, left: Object, right: Object) -> Object:
    if isinstance(left, Integer) and isinstance(right, Integer):
        return eval_integer_infix_expression(operator, left, right)
    if operator == "==":
        return native_bool_to_boolean_object(objects_equal(left, right))
    if operator == "!=":
        return native_bool_to_boolean_object(not objects_equal(left, right))
    if left.type() != right.type():
        return new_error(f"type mismatch: {left.type()} {operator} {right.type()}")
    return new_error(f"unknown operator: {left.type()} {operator} {right.type()}")


def eval_integer_infix_expression(
    operator: str, left: Integer, right: Integer
) -> Object:
    left_val = left.value
    right_val = right.value

    if operator == "+":
        return Integer(wrap_int64(left_val + right_val))
    if operator == "-":
        return Integer(wrap_int64(left_val - right_val))
    if operator == "*":
        return Integer(wrap_int64(left_val * right_val))
    if operator == "/":
        if right_val == 0:
            return NULL
        return Integer(wrap_int64(truncated_div(left_val, right_val)))
    if operator == "<":
        return native_bool_to_boolean_object(left_val < right_val)
    if operator == ">":
        return native_bool_to_boolean_object(left_val > right_val)
    if operator == "==":
        return native_bool_to_boolean_object(left_val == right_val)
    if operator == "!=":
        return native_bool_to_boolean_object(left_val != right_val)
    return new_error(f"unknown operator: {left.type()} {operator} {right.type()}")


def eval_if_expression(ie: IfExpression) -> Object | None:
    if ie.condition is None or ie.consequence is None:
        return None
    condition = eval_node(ie.condition)
    if condition is None or is_error(condition):
        return condition

    if is_truthy(condition):
        return eval_block_statement(ie.consequence)
    if ie.alternative is not None:
        return eval_block_statement(ie.alternative)
    return NULL


def wrap_int64(value: int) -> int:
    """Reduce `value` to a signed 64-bit integer, wrapping on overflow."""
    value &= _INT64_MASK
    return value - (1 << 64) if value & _INT64_SIGN else value


def truncated_div(left: int, right: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def new_error(message: str) -> Error:
    logger.debug("evaluation error: %s", message)
    return Error(message)
