"""Expansion of ``$NAME`` and ``$?`` in words."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol


class _Lookup(Protocol):
    def get(self, key: str) -> str | None: ...


def _is_var_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


def _is_var_start(char: str) -> bool:
    return char.isascii() and (char.isalpha() or char == "_")


def get_var_name(text: str) -> str:
    """Return the leading run of letters, digits and underscores in ``text``."""
    end = 0
    while end < len(text) and _is_var_char(text[end]):
        end += 1
    return text[:end]


def _expand_dollar(text: str, pos: int, env: _Lookup, last_status: int) -> tuple[str, int]:
    """Expand what follows a ``$`` at ``pos``; return the value and new position."""
    if pos >= len(text):
        return "$", pos
    char = text[pos]
    if char == "?":
        return str(last_status), pos + 1
    if _is_var_start(char):
        name = get_var_name(text[pos:])
        return env.get(name) or "", pos + len(name)
    return "$", pos


def expand_variables(text: str, env: _Lookup, last_status: int) -> str:
    """Return ``text`` with variables replaced by their values.

    Nothing is expanded inside single quotes or after a backslash. Unset
    variables expand to nothing; ``$?`` gives ``last_status``. The
    character right after an expansion is copied without being examined.
    """
    parts: list[str] = []
    single = double = False
    start = 0
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char == "'" and not double:
            single = not single
        elif char == '"' and not single:
            double = not double
        if char == "$" and not single and (i == 0 or text[i - 1] != "\\"):
            parts.append(text[start:i])
            value, i = _expand_dollar(text, i + 1, env, last_status)
            parts.append(value)
            start = i
        i += 1
    parts.append(text[start:i])
    return "".join(parts)


def expand_tokens(tokens: Iterable[Any], env: _Lookup, last_status: int) -> None:
    """Expand variables in every word token in place.

    Tokens are objects with a ``text`` attribute and an ``is_word`` flag.
    """
    for token in tokens:
        if token.is_word:
            token.text = expand_variables(token.text, env, last_status)