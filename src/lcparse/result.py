"""Explicit success/failure values returned by ``try_parse`` and ``parse_many``."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from typing_extensions import NoReturn, TypeAlias

from .errors import ParseError
from .nodes import AstExpr


@dataclass(frozen=True)
class Ok:
    value: AstExpr
    ok: ClassVar[bool] = True

    def unwrap(self) -> AstExpr:
        return self.value


@dataclass(frozen=True)
class Err:
    error: ParseError
    ok: ClassVar[bool] = False

    def unwrap(self) -> NoReturn:
        raise self.error


ParseResult: TypeAlias = Union[Ok, Err]
