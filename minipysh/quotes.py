"""Removal of shell quoting from words."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class UnclosedQuoteError(ValueError):
    """A single or double quote was opened and never closed."""


_DOUBLE_QUOTE_ESCAPABLE = ('$', '\\', '"')


def clean_quotes(text: str) -> str:
    """Strip quotes and escaping backslashes from ``text``.

    Outside quotes a backslash is dropped; inside double quotes it is
    dropped only before ``$``, ``\\`` or ``"``; inside single quotes it is
    kept. Raises UnclosedQuoteError if a quote is left open.
    """
    result: list[str] = []
    single = double = False
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char == "'" and not double:
            single = not single
            i += 1
            continue
        if char == '"' and not single:
            double = not double
            i += 1
            continue
        if char == "\\":
            following = text[i + 1] if i + 1 < length else ""
            if not single and not double:
                i += 1
                continue
            if double and following in _DOUBLE_QUOTE_ESCAPABLE and following:
                i += 1
                continue
        result.append(char)
        i += 1
    if single or double:
        raise UnclosedQuoteError(f"unclosed quote in {text!r}")
    return "".join(result)


def remove_quotes(tokens: Iterable[Any]) -> None:
    """Clean the quoting of every word token in place.

    Tokens are objects with a ``text`` attribute and an ``is_word`` flag.
    A word whose quotes cannot be closed becomes empty.
    """
    for token in tokens:
        if not token.is_word:
            continue
        try:
            token.text = clean_quotes(token.text)
        except UnclosedQuoteError:
            token.text = ""