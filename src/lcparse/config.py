"""Parser configuration, read from keyword arguments or the environment.

Environment variables:

- ``LCPARSE_MARKER``: abstraction marker token (default ``lambda``).
- ``LCPARSE_MAX_DEPTH``: reject input nested deeper than this before parsing.
- ``LCPARSE_DEBUG_PY_TRACE``: show Python tracebacks in the CLI and REPL.
"""
from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .sexpr import DEFAULT_MARKER, is_identifier

ENV_MARKER = "LCPARSE_MARKER"
ENV_MAX_DEPTH = "LCPARSE_MAX_DEPTH"
ENV_DEBUG_PY_TRACE = "LCPARSE_DEBUG_PY_TRACE"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ParserConfig:
    marker: str = DEFAULT_MARKER
    max_depth: Optional[int] = None  # None => bounded only by the interpreter

    def __post_init__(self) -> None:
        if not is_identifier(self.marker):
            raise ValueError(f"marker {self.marker!r} is not a valid identifier")

        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ParserConfig:
        env = os.environ if environ is None else environ
        kwargs: Dict[str, Any] = {}

        marker = env.get(ENV_MARKER)
        if marker:
            kwargs["marker"] = marker

        raw_depth = env.get(ENV_MAX_DEPTH)
        if raw_depth:
            kwargs["max_depth"] = parse_depth(raw_depth, ENV_MAX_DEPTH)

        return cls(**kwargs)

    def replace(self, **changes: Any) -> ParserConfig:
        return dataclasses.replace(self, **changes)


def parse_depth(raw: str, source: str) -> int:
    """Read a non-negative depth limit; *source* names where it came from."""
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{source} must be a non-negative integer, got {raw!r}") from None

    if value < 0:
        raise ValueError(f"{source} must be a non-negative integer, got {raw!r}")

    return value


def debug_py_trace_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get(ENV_DEBUG_PY_TRACE, "").strip().lower() in _TRUTHY
