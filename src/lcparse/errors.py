from __future__ import annotations

from typing import Any, Optional

from .sexpr import position, render


class ParseError(Exception):
    """Base class for failures raised while parsing an s-expression."""


class InvalidExpression(ParseError):
    """No grammar rule matched *node*.

    *node* is the innermost node that failed to match, so for
    ``(f (lambda (x y) x))`` it is ``(lambda (x y) x)``, not the whole input.
    """
    def __init__(self, node: Any):
        self.node = node
        self.line: Optional[int] = None
        self.column: Optional[int] = None

        pos = position(node)
        if pos is not None:
            self.line, self.column = pos

        message = f"invalid expression: {render(node)}"
        super().__init__(
            f"{message} at line {self.line}, col {self.column}" if pos else message
        )


class NestingTooDeep(Exception):
    """Input nesting exceeds the configured ``max_depth``; raised before parsing."""
    def __init__(self, depth: int, limit: int):
        self.depth = depth
        self.limit = limit
        super().__init__(f"expression nesting depth {depth} exceeds limit {limit}")
