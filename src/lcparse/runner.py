from __future__ import annotations

import json
import os
import sys
import traceback
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .config import ParserConfig, debug_py_trace_enabled, parse_depth
from .errors import NestingTooDeep, ParseError
from .nodes import AstExpr, pretty, unparse
from .parser import Parser
from .sexpr import render


def read_json(src: str) -> Any:
    """Decode one JSON document holding an s-expression as nested arrays."""
    try:
        return json.loads(src)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON input: {exc}") from exc


def run(src: str, config: Optional[ParserConfig] = None) -> AstExpr:
    return Parser(config).parse(read_json(src))


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal JSON.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data.strip():
            raise SystemExit("No input provided on stdin")
        return data

    if os.path.isfile(arg):
        return Path(arg).read_text(encoding="utf-8")

    return arg


def format_expr(expr: AstExpr, config: ParserConfig, show_pretty: bool = False) -> str:
    if show_pretty:
        return pretty(expr).rstrip("\n")
    return render(unparse(expr, config.marker))


def format_error(exc: BaseException) -> str:
    text = f"Error: {exc}"

    if debug_py_trace_enabled():
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        text += "\n\nPython traceback:\n" + tb.rstrip("\n")

    return text


def main(argv: Optional[List[str]] = None) -> None:
    try:
        config, show_pretty, arg = _parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as exc:
        raise SystemExit(f"Error: {exc}") from None

    source = _load_source(arg)

    try:
        expr = run(source, config)
    except (ParseError, NestingTooDeep, ValueError, RecursionError) as exc:
        print(format_error(exc), file=sys.stderr)
        raise SystemExit(1) from None

    print(format_expr(expr, config, show_pretty))


def _parse_args(argv: List[str]) -> Tuple[ParserConfig, bool, Optional[str]]:
    config = ParserConfig.from_env()
    show_pretty = False
    arg = None
    it = iter(argv)

    for token in it:
        if token == "--pretty":
            show_pretty = True
            continue

        if token.startswith("--marker="):
            config = config.replace(marker=token.split("=", 1)[1])
            continue

        if token == "--marker":
            try:
                config = config.replace(marker=next(it))
            except StopIteration:
                raise SystemExit("--marker flag requires a name") from None
            continue

        if token.startswith("--max-depth="):
            config = config.replace(max_depth=parse_depth(token.split("=", 1)[1], "--max-depth"))
            continue

        if token == "--max-depth":
            try:
                config = config.replace(max_depth=parse_depth(next(it), "--max-depth"))
            except StopIteration:
                raise SystemExit("--max-depth flag requires a number") from None
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    return config, show_pretty, arg


if __name__ == "__main__":
    main()
