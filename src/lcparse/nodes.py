from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from typing_extensions import TypeAlias, assert_never

from .sexpr import DEFAULT_MARKER, SExpr, SList, render

# ---------- AST (closed set of variants) ----------

@dataclass(frozen=True, slots=True)
class Variable:
    name: str
    def __str__(self) -> str:
        return self.name

@dataclass(frozen=True, slots=True)
class Abstraction:
    param: str
    body: AstExpr
    def __str__(self) -> str:
        return render(unparse(self))

@dataclass(frozen=True, slots=True)
class Application:
    operator: AstExpr
    operand: AstExpr
    def __str__(self) -> str:
        return render(unparse(self))

AstExpr: TypeAlias = Union[Variable, Abstraction, Application]


def unparse(expr: AstExpr, marker: str = DEFAULT_MARKER) -> SExpr:
    """Turn an AST back into the s-expression value it was parsed from."""
    match expr:
        case Variable(name=name):
            return name
        case Abstraction(param=param, body=body):
            return SList([marker, SList([param]), unparse(body, marker)])
        case Application(operator=operator, operand=operand):
            return SList([unparse(operator, marker), unparse(operand, marker)])
        case _:
            assert_never(expr)


def pretty(expr: AstExpr, indent: str = "  ") -> str:
    """Return an indented, one-node-per-line dump of *expr*."""
    def _pretty(node: AstExpr, level: int) -> str:
        pad = indent * level
        match node:
            case Variable(name=name):
                return f"{pad}Variable\t{name}\n"
            case Abstraction(param=param, body=body):
                return f"{pad}Abstraction\t{param}\n" + _pretty(body, level + 1)
            case Application(operator=operator, operand=operand):
                return (
                    f"{pad}Application\n"
                    + _pretty(operator, level + 1)
                    + _pretty(operand, level + 1)
                )
            case _:
                assert_never(node)

    return _pretty(expr, 0)
