"""Interactive parse-and-print loop, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .config import ENV_DEBUG_PY_TRACE, ParserConfig, debug_py_trace_enabled
from .errors import NestingTooDeep, ParseError
from .runner import format_error, format_expr, run

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/marker": ("Show or set the abstraction marker", "[NAME]"),
    "/pretty": ("Toggle indented tree output", "[on|off]"),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
}

_ON = ("on", "1", "true", "yes")
_OFF = ("off", "0", "false", "no")


class ReplState:
    """Settings the slash commands can change between prompts."""

    def __init__(self, config: ParserConfig):
        self.config = config
        self.pretty = False


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _toggle(arg: str, current: bool) -> bool | None:
    """Resolve an on/off/empty argument; None means the argument was invalid."""
    lowered = arg.lower()
    if lowered in _ON:
        return True
    if lowered in _OFF:
        return False
    if arg == "":
        return not current
    return None


def handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1].strip() if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/marker":
        if arg:
            try:
                state.config = state.config.replace(marker=arg)
            except ValueError as exc:
                print(f"Error: {exc}", file=sys.stderr)
                return True
        print(f"Marker: {state.config.marker}")
        return True

    if cmd == "/pretty":
        value = _toggle(arg, state.pretty)
        if value is None:
            print("Usage: /pretty [on|off]", file=sys.stderr)
            return True
        state.pretty = value
        print(f"Pretty output: {'on' if value else 'off'}")
        return True

    if cmd == "/py-traceback":
        value = _toggle(arg, debug_py_trace_enabled())
        if value is None:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True
        if value:
            os.environ[ENV_DEBUG_PY_TRACE] = "1"
        else:
            os.environ.pop(ENV_DEBUG_PY_TRACE, None)
        print(f"Python traceback: {'on' if value else 'off'}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, state: ReplState) -> None:
    """Parse one line of JSON input and print the AST or the error."""
    try:
        expr = run(text, state.config)
    except (ParseError, NestingTooDeep, ValueError, RecursionError) as exc:
        print(format_error(exc), file=sys.stderr)
        return

    print(format_expr(expr, state.config, state.pretty))


def repl() -> None:
    """Interactive read-parse-print loop with prompt_toolkit."""
    try:
        state = ReplState(ParserConfig.from_env())
    except ValueError as exc:
        raise SystemExit(f"Error: {exc}") from None

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
    )

    print('lcparse repl: enter JSON such as ["lambda", ["x"], "x"]; Ctrl-D to exit, / for commands')

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, state):
            continue

        eval_line(text, state)


if __name__ == "__main__":
    repl()
