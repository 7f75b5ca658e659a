import pytest

from bangu.bangu_object import (
    FALSE,
    NULL,
    TRUE,
    Boolean,
    Error,
    Integer,
    Null,
    ReturnValue,
    String,
    is_error,
    is_truthy,
    native_bool_to_boolean_object,
    objects_equal,
)


@pytest.mark.parametrize(
    "obj,type_tag,rendered",
    [
        (Integer(5), "INTEGER", "5"),
        (Integer(-12), "INTEGER", "-12"),
        (TRUE, "BOOLEAN", "true"),
        (FALSE, "BOOLEAN", "false"),
        (String("hi there"), "STRING", "hi there"),
        (NULL, "NULL", "null"),
        (ReturnValue(Integer(7)), "RETURN_VALUE", "7"),
        (Error("type mismatch: INTEGER + BOOLEAN"), "ERROR", "type mismatch: INTEGER + BOOLEAN"),
    ],
)
def test_type_and_inspect(obj: object, type_tag: str, rendered: str) -> None:
    assert obj.type() == type_tag  # type: ignore[attr-defined]
    assert obj.inspect() == rendered  # type: ignore[attr-defined]


def test_native_bool_returns_singletons() -> None:
    assert native_bool_to_boolean_object(True) is TRUE
    assert native_bool_to_boolean_object(False) is FALSE


def test_integers_compare_by_value() -> None:
    assert Integer(3) == Integer(3)
    assert Integer(3) is not Integer(3)


@pytest.mark.parametrize(
    "obj,expected",
    [(NULL, False), (FALSE, False), (TRUE, True), (Integer(0), True), (String(""), True)],
)
def test_truthiness(obj: object, expected: bool) -> None:
    assert is_truthy(obj) is expected  # type: ignore[arg-type]


def test_is_error() -> None:
    assert is_error(Error("boom"))
    assert not is_error(Integer(1))
    assert not is_error(None)


def test_objects_equal() -> None:
    assert objects_equal(TRUE, TRUE)
    assert objects_equal(Boolean(True), TRUE)
    assert not objects_equal(TRUE, FALSE)
    assert objects_equal(NULL, Null())
    assert objects_equal(String("a"), String("a"))
    assert not objects_equal(String("a"), String("b"))
    assert not objects_equal(Integer(1), TRUE)
    assert not objects_equal(NULL, FALSE)
    err = Error("x")
    assert objects_equal(err, err)
    assert not objects_equal(Error("x"), Error("x"))
