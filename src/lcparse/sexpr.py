"""Helpers for working with the already-read s-expression values the parser consumes.

Atoms are plain strings (lark Tokens included, since Token subclasses str).
Lists are Python lists or tuples, or lark Trees whose children are the list
elements. ``normalize`` turns all list shapes into ``SList`` tuples so the
parser only ever sees one immutable list type.
"""
from __future__ import annotations

import re
import reprlib
from typing import Any, List, Optional, Tuple, Union

from lark import Transformer, Tree
from typing_extensions import TypeAlias, TypeGuard

DEFAULT_MARKER = "lambda"

SExpr: TypeAlias = Union[str, "SList", Any]

# Characters a reader would never leave inside a symbol.
_DELIMITERS = frozenset("()[]{}\";'`,|\\")
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class SList(tuple):
    """Immutable list node; remembers where the reader found it, when known.

    Compares equal to a plain tuple with the same items.
    """

    __match_args__ = ("items",)

    line: Optional[int]
    column: Optional[int]

    def __new__(cls, items=(), line: Optional[int] = None, column: Optional[int] = None):
        inst = super().__new__(cls, items)
        inst.line = line
        inst.column = column
        return inst

    @property
    def items(self) -> Tuple[Any, ...]:
        return tuple(self)

    def __repr__(self) -> str:
        return f"SList({list(self)!r})"


class _TreeToSList(Transformer):
    """Rebuild a lark Tree bottom-up as nested SLists, keeping positions."""

    def __default__(self, data, children, meta):
        return SList(
            [ch if isinstance(ch, SList) else _freeze(ch) for ch in children],
            line=getattr(meta, "line", None),
            column=getattr(meta, "column", None),
        )


def _freeze(node: Any) -> SExpr:
    if isinstance(node, str):
        return node

    if isinstance(node, SList):
        return SList([_freeze(item) for item in node], node.line, node.column)

    if isinstance(node, Tree):
        return _TreeToSList().transform(node)

    if isinstance(node, (list, tuple)):
        return SList([_freeze(item) for item in node])

    return node


def normalize(node: Any) -> SExpr:
    """Return an immutable copy of *node* with every list shape as an SList.

    Atoms and values of no recognised shape are returned unchanged. The
    caller's input is never mutated.
    """
    return _freeze(node)


def is_atom(node: Any) -> TypeGuard[str]:
    return isinstance(node, str)


def is_list(node: Any) -> bool:
    return isinstance(node, (list, tuple, Tree))


def list_items(node: Any) -> Optional[List[Any]]:
    """Return the elements of a list-shaped node, or None for anything else."""
    if isinstance(node, Tree):
        return list(node.children)

    if isinstance(node, (list, tuple)):
        return list(node)

    return None


def is_identifier(node: Any) -> TypeGuard[str]:
    """Identifier guard applied to atoms before they become variables.

    Rejects the empty string, anything containing whitespace or a delimiter,
    reader syntax such as ``#t`` or a lone ``.``, and numeric literals.
    """
    if not isinstance(node, str) or not node:
        return False

    if node == "." or node.startswith("#"):
        return False

    if any(ch.isspace() or ch in _DELIMITERS for ch in node):
        return False

    return _NUMBER_RE.fullmatch(node) is None


def render(node: Any) -> str:
    """Textual s-expression form of *node*, e.g. ``(lambda (x) x)``.

    Values of no recognised shape go through ``reprlib`` so that deeply nested
    foreign containers stay printable.
    """
    if is_atom(node):
        return str(node)

    items = list_items(node)
    if items is None:
        return reprlib.repr(node)

    return "(" + " ".join(render(item) for item in items) + ")"


def depth(node: Any) -> int:
    """Nesting depth of *node*: 0 for atoms, 1 + deepest element for lists.

    Iterative so that pathological input cannot exhaust the Python stack.
    """
    deepest = 0
    stack: List[Tuple[Any, int]] = [(node, 0)]

    while stack:
        current, level = stack.pop()
        items = list_items(current)

        if items is None:
            continue

        level += 1
        deepest = max(deepest, level)
        stack.extend((item, level) for item in items)

    return deepest


def position(node: Any) -> Optional[Tuple[int, Optional[int]]]:
    """(line, column) a reader attached to *node*, if any."""
    line = getattr(node, "line", None)
    if line is None:
        return None

    return line, getattr(node, "column", None)
