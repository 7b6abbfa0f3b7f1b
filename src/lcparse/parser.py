"""
Structural Parser for Lambda-Calculus S-Expressions

Grammar:

    Expr = Variable                          ; x
         | Abstraction(param, body)          ; (lambda (x) body)
         | Application(operator, operand)    ; (operator operand)

Each rule is one ``case`` arm of ``Parser._parse``; the first arm whose shape
and guard both hold wins. A guard that fails sends evaluation on to the next
arm. Anything no arm accepts raises InvalidExpression carrying that node.
List arms match only SList, the normalized list type, so foreign sequences
such as deques fall through to the failure arm.

Sub-expression failures propagate unchanged: one bad node anywhere aborts the
whole parse.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from .config import ParserConfig
from .errors import InvalidExpression, NestingTooDeep, ParseError
from .nodes import Abstraction, Application, AstExpr, Variable
from .result import Err, Ok, ParseResult
from .sexpr import SExpr, SList, depth, is_identifier, normalize


class Parser:
    """Parser bound to one configuration; holds no state between calls."""

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config if config is not None else ParserConfig()

    def parse(self, node: Any) -> AstExpr:
        """Parse *node* or raise InvalidExpression."""
        limit = self.config.max_depth
        if limit is not None:
            check_depth(node, limit)

        return self._parse(normalize(node))

    def try_parse(self, node: Any) -> ParseResult:
        """Like ``parse`` but returns Ok/Err instead of raising ParseError."""
        try:
            return Ok(self.parse(node))
        except ParseError as exc:
            return Err(exc)

    def parse_many(self, nodes: Iterable[Any]) -> List[ParseResult]:
        """Parse each node independently; a failure never stops the batch."""
        return [self.try_parse(node) for node in nodes]

    def _parse(self, node: SExpr) -> AstExpr:
        marker = self.config.marker

        match node:
            case str() if is_identifier(node):
                return Variable(str(node))
            case SList((str() as head, SList((str() as param,)), body)) if (
                head == marker and is_identifier(param)
            ):
                return Abstraction(str(param), self._parse(body))
            case SList((operator, operand)):
                return Application(self._parse(operator), self._parse(operand))
            case _:
                raise InvalidExpression(node)


def check_depth(node: Any, limit: int) -> None:
    """Raise NestingTooDeep when *node* nests deeper than *limit*."""
    found = depth(node)
    if found > limit:
        raise NestingTooDeep(found, limit)


_DEFAULT_PARSER = Parser()


def _parser_for(config: Optional[ParserConfig]) -> Parser:
    return _DEFAULT_PARSER if config is None else Parser(config)


def parse(node: Any, config: Optional[ParserConfig] = None) -> AstExpr:
    """
    Parse an already-read s-expression into an AST.

    Args:
        node: atom (str), list/tuple, or lark Tree
        config: optional ParserConfig (marker, max_depth)

    Raises:
        InvalidExpression: no grammar rule matches *node* or one of its parts
        NestingTooDeep: config.max_depth is set and exceeded
    """
    return _parser_for(config).parse(node)


def try_parse(node: Any, config: Optional[ParserConfig] = None) -> ParseResult:
    return _parser_for(config).try_parse(node)


def parse_many(nodes: Iterable[Any], config: Optional[ParserConfig] = None) -> List[ParseResult]:
    return _parser_for(config).parse_many(nodes)
