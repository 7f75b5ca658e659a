"""
Runtime object model for the Bangu evaluator.

Every value produced by evaluation is an `Object` that reports its type tag via
`type()` and a human-readable rendering via `inspect()`. `ReturnValue` and `Error`
are signal objects: they travel up through ordinary return values and are never
user-visible data.

`TRUE`, `FALSE` and `NULL` are the only Boolean and Null instances the evaluator
ever hands out.
"""

from dataclasses import dataclass

INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
STRING_OBJ = "STRING"
NULL_OBJ = "NULL"
RETURN_VALUE_OBJ = "RETURN_VALUE"
ERROR_OBJ = "ERROR"


class Object:
    def type(self) -> str:
        raise NotImplementedError  # pragma: no cover

    def inspect(self) -> str:
        raise NotImplementedError  # pragma: no cover


@dataclass(frozen=True)
class Integer(Object):
    value: int

    def type(self) -> str:
        return INTEGER_OBJ

    def inspect(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean(Object):
    value: bool

    def type(self) -> str:
        return BOOLEAN_OBJ

    def inspect(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String(Object):
    value: str

    def type(self) -> str:
        return STRING_OBJ

    def inspect(self) -> str:
        return self.value


@dataclass(frozen=True)
class Null(Object):
    def type(self) -> str:
        return NULL_OBJ

    def inspect(self) -> str:
        return "null"


@dataclass(frozen=True)
class ReturnValue(Object):
    value: Object

    def type(self) -> str:
        return RETURN_VALUE_OBJ

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(frozen=True)
class Error(Object):
    message: str

    def type(self) -> str:
        return ERROR_OBJ

    def inspect(self) -> str:
        return self.message


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool_to_boolean_object(value: bool) -> Boolean:
    return TRUE if value else FALSE


def is_error(obj: Object | None) -> bool:
    return isinstance(obj, Error)


def is_truthy(obj: Object) -> bool:
    """`NULL` and `FALSE` are falsy; every other object, `Integer(0)` included, is truthy."""
    if isinstance(obj, Null):
        return False
    if isinstance(obj, Boolean):
        return obj.value
    return True


def objects_equal(left: Object, right: Object) -> bool:
    """Type-specific equality used by `==` and `!=` on non-integer operands.

    Integers and strings compare by value, booleans by their truth value and
    null by tag. Anything else falls back to identity.
    """
    if type(left) is not type(right):
        return False
    if isinstance(left, (Integer, String, Boolean)):
        return left.value == right.value  # type: ignore[attr-defined]
    if isinstance(left, Null):
        return True
    return left is right
