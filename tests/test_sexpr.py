from __future__ import annotations

from collections import deque
from typing import Any

import pytest
from lark import Token, Tree
from lark.tree import Meta

from lcparse.parser import parse
from lcparse.sexpr import SList, depth, is_identifier, normalize, render
from tests.support.harness import (
    Abstraction,
    Application,
    InvalidExpression,
    MARKER,
    Variable,
    app,
    lam,
    nested_lambdas,
    to_lark,
)


@pytest.mark.parametrize(
    "atom, expected",
    [
        ("x", True),
        ("lambda", True),
        ("set!", True),
        ("a.b", True),
        ("...", True),
        ("1+", True),
        ("", False),
        (".", False),
        ("#f", False),
        ("0", False),
        ("+7", False),
        (".5", False),
        ("1e3", False),
        ("a b", False),
        ("a\tb", False),
        ("(x", False),
        ("x]", False),
        ('"x"', False),
        ("'x", False),
        ("a,b", False),
        ("a|b", False),
    ],
)
def test_identifier_guard(atom: str, expected: bool) -> None:
    assert is_identifier(atom) is expected


def test_identifier_guard_rejects_non_strings() -> None:
    assert not is_identifier(1)
    assert not is_identifier(None)
    assert not is_identifier(["x"])


def test_normalize_freezes_nested_lists() -> None:
    node = ["f", ["g", ["x"]]]

    frozen = normalize(node)

    assert isinstance(frozen, SList)
    assert isinstance(frozen[1], SList)
    assert isinstance(frozen[1][1], SList)
    assert frozen == ("f", ("g", ("x",)))
    assert node == ["f", ["g", ["x"]]]


def test_normalize_passes_unknown_values_through() -> None:
    marker = object()
    assert normalize(marker) is marker
    assert normalize([1, None]) == (1, None)


def test_normalize_lark_tree() -> None:
    meta = Meta()
    meta.line = 4
    meta.column = 2
    tree = Tree("list", [Token("SYMBOL", "f"), Tree("list", [Token("SYMBOL", "x")])], meta)

    frozen = normalize(tree)

    assert frozen == ("f", ("x",))
    assert frozen.line == 4
    assert frozen.column == 2
    assert frozen[1].line is None


@pytest.mark.parametrize(
    "node, text",
    [
        ("x", "x"),
        ([], "()"),
        (lam("x", "x"), "(lambda (x) x)"),
        (app(lam("x", ["x", "x"]), "a"), "((lambda (x) (x x)) a)"),
        ([1, None], "(1 None)"),
        (Tree("list", [Token("SYMBOL", "f"), Token("SYMBOL", "a")]), "(f a)"),
    ],
)
def test_render(node: Any, text: str) -> None:
    assert render(node) == text


@pytest.mark.parametrize(
    "node, expected",
    [
        ("x", 0),
        (7, 0),
        ([], 1),
        (["f", "a"], 1),
        (lam("x", "x"), 2),
        (lam("x", lam("y", ["x", "y"])), 3),
        (lam("x", lam("y", ["x", ["y", "y"]])), 4),
        (to_lark(lam("x", "x")), 2),
    ],
)
def test_depth(node: Any, expected: int) -> None:
    assert depth(node) == expected


def test_depth_handles_nesting_beyond_recursion_limit() -> None:
    node: Any = "x"
    for _ in range(5000):
        node = [node]

    assert depth(node) == 5000


def test_lark_input_parses_like_lists() -> None:
    source = app(lam("x", app("x", "x")), "a")

    assert parse(to_lark(source)) == parse(source)
    assert parse(to_lark(source)) == Application(
        Abstraction("x", Application(Variable("x"), Variable("x"))), Variable("a")
    )


def test_lark_token_position_in_error() -> None:
    tree = to_lark(app("f", "42"), line=3)

    with pytest.raises(InvalidExpression) as exc_info:
        parse(tree)

    err = exc_info.value
    assert err.line == 3
    assert err.column == 1
    assert str(err) == "invalid expression: 42 at line 3, col 1"


def test_lark_tree_position_in_error() -> None:
    meta = Meta()
    meta.line = 9
    meta.column = 4
    tree = Tree("list", [Token("SYMBOL", MARKER), Tree("list", []), Token("SYMBOL", "x")], meta)

    with pytest.raises(InvalidExpression) as exc_info:
        parse(tree)

    assert str(exc_info.value) == "invalid expression: (lambda () x) at line 9, col 4"


def test_plain_input_has_no_position() -> None:
    with pytest.raises(InvalidExpression) as exc_info:
        parse([])

    assert exc_info.value.line is None
    assert str(exc_info.value) == "invalid expression: ()"


def test_lark_tree_children_are_frozen_once(clean_env: pytest.MonkeyPatch) -> None:
    import lcparse.sexpr as sexpr_module

    calls = []
    original = sexpr_module._freeze

    def counting_freeze(node: Any) -> Any:
        calls.append(node)
        return original(node)

    clean_env.setattr(sexpr_module, "_freeze", counting_freeze)
    levels = 50

    frozen = normalize(to_lark(nested_lambdas(levels)))

    # one call for the root plus one per token; no subtree is revisited
    assert len(calls) == 1 + 2 * levels + 1
    assert parse(frozen) == parse(nested_lambdas(levels))


def test_lark_tree_list_children_are_frozen() -> None:
    tree = Tree("list", [Token("SYMBOL", "f"), ["g", ["x"]]])

    frozen = normalize(tree)

    assert isinstance(frozen[1], SList)
    assert isinstance(frozen[1][1], SList)


def test_render_deeply_nested_foreign_container() -> None:
    node: Any = deque(["x"])
    for _ in range(5000):
        node = deque(["f", node])

    assert render(node).startswith("deque(['f', deque(")
