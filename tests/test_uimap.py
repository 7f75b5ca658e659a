import json
from pathlib import Path

import pytest

from bangu.bangu_constants import CANONICAL_TOKENS
from bangu.bangu_evaluator import eval_node
from bangu.bangu_lexer import CharacterStream, Lexer, TokenBuffer, Token
from bangu.bangu_object import Integer
from bangu.bangu_parser import Parser
from bangu.bangu_uimap import ALIASES_ENV_VAR, MappingError, UserInterfaceMapper


def parse_with(mapper: UserInterfaceMapper, source: str) -> Parser:
    return Parser(mapper.wrap(Lexer(CharacterStream(source))))


def test_dict_mode_basic() -> None:
    uimap = UserInterfaceMapper()
    uimap.configure({"func": "FUNCTION", "plus": "PLUS"})
    assert uimap.token_map["func"] == "FUNCTION"
    assert uimap.token_map["plus"] == "PLUS"


def test_dict_mode_alias_groups() -> None:
    uimap = UserInterfaceMapper()
    uimap.configure({("func", "lambda"): "FUNCTION"})
    assert uimap.summary() == {"func": "FUNCTION", "lambda": "FUNCTION"}


def test_dict_mode_alias_conflict_raises() -> None:
    uimap = UserInterfaceMapper()
    uimap.configure({"eq": "EQ"})
    with pytest.raises(MappingError) as e:
        uimap.configure({"eq": "ASSIGN"})
    assert "Alias collision" in str(e.value)
    assert e.value.conflicts == ["'eq' → conflict between EQ and ASSIGN"]
    assert uimap.token_map["eq"] == "EQ"


def test_same_alias_same_token_is_not_a_conflict() -> None:
    uimap = UserInterfaceMapper.from_canonical()
    uimap.configure({"fn": "FUNCTION"})
    assert uimap.token_map["fn"] == "FUNCTION"


def test_conflicting_config_is_applied_all_or_nothing() -> None:
    uimap = UserInterfaceMapper.from_canonical()
    with pytest.raises(MappingError):
        uimap.configure({"yes": "TRUE", "fn": "LET"})
    assert "yes" not in uimap.token_map


def test_dict_mode_invalid_symbol_raises() -> None:
    uimap = UserInterfaceMapper()
    with pytest.raises(MappingError, match="Unknown token type"):
        uimap.configure({"foo": "NOT_A_TOKEN"})


def test_list_mode_positional() -> None:
    uimap = UserInterfaceMapper()
    uimap.configure([["func"], ["var", "val"], "yes"])
    assert uimap.token_map["func"] == CANONICAL_TOKENS[0]
    assert uimap.token_map["var"] == CANONICAL_TOKENS[1]
    assert uimap.token_map["val"] == CANONICAL_TOKENS[1]
    assert uimap.token_map["yes"] == CANONICAL_TOKENS[2]


def test_list_mode_too_many_entries_raises() -> None:
    uimap = UserInterfaceMapper()
    with pytest.raises(MappingError, match="Too many entries"):
        uimap.configure([[f"a{i}"] for i in range(len(CANONICAL_TOKENS) + 1)])


def test_list_mode_conflicting_aliases() -> None:
    uimap = UserInterfaceMapper()
    with pytest.raises(MappingError, match="Alias collision"):
        uimap.configure([["x"], ["x"]])


def test_invalid_config_type_raises() -> None:
    with pytest.raises(MappingError, match="either a list or a dict"):
        UserInterfaceMapper().configure("func")  # type: ignore[arg-type]


def test_flatten_aliases_all_types() -> None:
    uimap = UserInterfaceMapper()
    assert uimap._flatten_aliases(None) == []
    assert uimap._flatten_aliases("abc") == ["abc"]
    assert uimap._flatten_aliases(123) == ["123"]
    assert uimap._flatten_aliases(["a", ("b", "c")]) == ["a", "b", "c"]
    assert uimap._flatten_aliases({"k": 1}) == ["k"]
    assert uimap._flatten_aliases(object()) == []


def test_from_canonical_has_reserved_words() -> None:
    uimap = UserInterfaceMapper.from_canonical()
    assert uimap.token_map["fn"] == "FUNCTION"
    assert uimap.token_map["return"] == "RETURN"


def test_get_token_uses_canonical_text() -> None:
    uimap = UserInterfaceMapper()
    uimap.configure({"plus": "PLUS", "yes": "TRUE"})
    assert uimap.get_token("plus", 2, 4) == Token("PLUS", "+", 2, 4)
    assert uimap.get_token("yes") == Token("TRUE", "true")
    assert uimap.get_token("nope") is None


def test_report() -> None:
    uimap = UserInterfaceMapper()
    uimap.configure({"func": "FUNCTION"})
    assert uimap.report() == "        func → FUNCTION"
    assert "(slot 0)" in uimap.report(verbose=True)


def test_wrap_retypes_only_aliased_identifiers() -> None:
    uimap = UserInterfaceMapper()
    uimap.configure({"func": "FUNCTION"})
    stream = uimap.wrap(
        TokenBuffer([Token("IDENT", "func", 1, 1), Token("IDENT", "x", 1, 6), Token("STRING", "func")])
    )
    assert [stream.next_token().type for _ in range(4)] == ["FUNCTION", "IDENT", "STRING", "EOF"]


def test_aliases_flow_through_parser_and_evaluator() -> None:
    uimap = UserInterfaceMapper.from_canonical()
    uimap.configure({"func": "FUNCTION", "plus": "PLUS", "when": "IF", "otherwise": "ELSE"})

    parser = parse_with(uimap, "func(x) { x plus 1 }")
    assert str(parser.parse_program()) == "fn(x) (x + 1)"
    assert parser.errors() == []

    parser = parse_with(uimap, "when (1 < 2) { 1 plus 2 } otherwise { 0 }")
    assert eval_node(parser.parse_program()) == Integer(3)


def test_load_from_json(tmp_path: Path) -> None:
    path = tmp_path / "aliases.json"
    path.write_text(json.dumps({"func, lambda": "FUNCTION", "plus": "PLUS"}))
    uimap = UserInterfaceMapper()
    uimap.load_from_json(str(path))
    assert uimap.summary() == {"func": "FUNCTION", "lambda": "FUNCTION", "plus": "PLUS"}


def test_load_from_json_bad_file(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(MappingError, match="Failed to load alias file"):
        UserInterfaceMapper().load_from_json(str(path))
    with pytest.raises(MappingError, match="Failed to load alias file"):
        UserInterfaceMapper().load_from_json(str(tmp_path / "missing.json"))


def test_load_from_json_requires_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]")
    with pytest.raises(MappingError, match="must be a JSON object"):
        UserInterfaceMapper().load_from_json(str(path))


def test_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "aliases.json"
    path.write_text(json.dumps({"func": "FUNCTION"}))
    monkeypatch.setenv(ALIASES_ENV_VAR, str(path))
    uimap = UserInterfaceMapper.from_env()
    assert uimap.token_map["func"] == "FUNCTION"
    assert uimap.token_map["fn"] == "FUNCTION"


def test_from_env_unset() -> None:
    assert UserInterfaceMapper.from_env().summary() == UserInterfaceMapper.from_canonical().summary()
