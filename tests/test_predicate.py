"""Tests for request inputs, ExactMatcher and predicate composition."""

from __future__ import annotations

from aka import (
    CATCH_ALL,
    And,
    DataInput,
    ExactMatcher,
    InputMatcher,
    ParamInput,
    PathInput,
    RedirectRequest,
    SinglePredicate,
    param_predicate,
    path_predicate,
)


class TestExactMatcher:
    def test_exact_match(self) -> None:
        assert ExactMatcher("hello").matches("hello") is True

    def test_no_match(self) -> None:
        assert ExactMatcher("hello").matches("world") is False

    def test_case_sensitive_by_default(self) -> None:
        assert ExactMatcher("hello").matches("Hello") is False

    def test_ignore_case(self) -> None:
        m = ExactMatcher("Eheschliessung", ignore_case=True)
        assert m.matches("EHESCHLIESSUNG") is True
        assert m.matches("eheschliessung") is True

    def test_ignore_case_is_not_casefold(self) -> None:
        m = ExactMatcher("Eheschliessung", ignore_case=True)
        assert m.matches("Eheschließung") is False

    def test_none_returns_false(self) -> None:
        assert ExactMatcher("hello").matches(None) is False

    def test_no_trimming(self) -> None:
        assert ExactMatcher("123").matches("123 ") is False

    def test_empty_string(self) -> None:
        m = ExactMatcher("")
        assert m.matches("") is True
        assert m.matches("a") is False

    def test_satisfies_protocol(self) -> None:
        assert isinstance(ExactMatcher("x"), InputMatcher)


class TestInputs:
    def test_path_input(self) -> None:
        assert PathInput().get(RedirectRequest("Eheschliessung", {})) == "Eheschliessung"

    def test_param_input(self) -> None:
        request = RedirectRequest("", {"leika": "1", "flag": ""})
        assert ParamInput("leika").get(request) == "1"
        assert ParamInput("flag").get(request) == ""
        assert ParamInput("missing").get(request) is None

    def test_satisfy_protocol(self) -> None:
        assert isinstance(PathInput(), DataInput)
        assert isinstance(ParamInput("k"), DataInput)


class TestSinglePredicate:
    def test_match(self) -> None:
        p = SinglePredicate(ParamInput("name"), ExactMatcher("alice"))
        assert p.evaluate(RedirectRequest("", {"name": "alice"})) is True

    def test_no_match(self) -> None:
        p = SinglePredicate(ParamInput("name"), ExactMatcher("alice"))
        assert p.evaluate(RedirectRequest("", {"name": "bob"})) is False

    def test_none_returns_false(self) -> None:
        p = SinglePredicate(ParamInput("missing"), ExactMatcher(""))
        assert p.evaluate(RedirectRequest("", {"name": "alice"})) is False


class TestAnd:
    def test_all_true(self) -> None:
        p = And((param_predicate("a", "1"), param_predicate("b", "2")))
        assert p.evaluate(RedirectRequest("", {"a": "1", "b": "2"})) is True

    def test_one_false(self) -> None:
        p = And((param_predicate("a", "1"), param_predicate("b", "wrong")))
        assert p.evaluate(RedirectRequest("", {"a": "1", "b": "2"})) is False

    def test_catch_all(self) -> None:
        assert CATCH_ALL.evaluate(RedirectRequest()) is True
        assert CATCH_ALL.evaluate(RedirectRequest("anything", {"k": "v"})) is True


class TestHelpers:
    def test_path_predicate_ignores_case(self) -> None:
        p = path_predicate("SimpleRedirect")
        assert p.evaluate(RedirectRequest("simpleredirect", {})) is True
        assert p.evaluate(RedirectRequest("simple", {})) is False

    def test_param_predicate_respects_case(self) -> None:
        p = param_predicate("code", "LEIKA")
        assert p.evaluate(RedirectRequest("", {"code": "LEIKA"})) is True
        assert p.evaluate(RedirectRequest("", {"code": "leika"})) is False
        assert p.evaluate(RedirectRequest("", {"CODE": "LEIKA"})) is False
