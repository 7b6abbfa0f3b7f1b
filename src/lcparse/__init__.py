"""Structural parser from read s-expressions to a lambda-calculus AST."""

from .config import ParserConfig
from .errors import InvalidExpression, NestingTooDeep, ParseError
from .nodes import Abstraction, Application, AstExpr, Variable, pretty, unparse
from .parser import Parser, parse, parse_many, try_parse
from .result import Err, Ok, ParseResult

__all__ = [
    "Abstraction",
    "Application",
    "AstExpr",
    "Err",
    "InvalidExpression",
    "NestingTooDeep",
    "Ok",
    "ParseError",
    "ParseResult",
    "Parser",
    "ParserConfig",
    "Variable",
    "parse",
    "parse_many",
    "pretty",
    "try_parse",
    "unparse",
]
