"""Splitting of an input line into shell tokens."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from minipysh.quotes import UnclosedQuoteError

_SPACES = frozenset(" \t\n\v\f\r")
_OPERATORS = frozenset("|<>")
_QUOTES = frozenset("'\"")


class TokenType(enum.Enum):
    """Kinds of tokens the shell distinguishes."""

    WORD = enum.auto()
    PIPE = enum.auto()
    REDIR_IN = enum.auto()
    REDIR_OUT = enum.auto()
    APPEND = enum.auto()
    HEREDOC = enum.auto()


_OPERATOR_TYPES = {
    "|": TokenType.PIPE,
    "<": TokenType.REDIR_IN,
    ">": TokenType.REDIR_OUT,
    ">>": TokenType.APPEND,
    "<<": TokenType.HEREDOC,
}


@dataclass
class Token:
    """One piece of an input line.

    ``has_space`` records whether whitespace separated this token from the
    one before it; words that touch are later merged into one.
    """

    text: str
    type: TokenType = TokenType.WORD
    has_space: bool = False

    @property
    def is_word(self) -> bool:
        return self.type is TokenType.WORD


def is_space(char: str) -> bool:
    """Return True for the whitespace characters that separate tokens."""
    return char in _SPACES and char != ""


def is_operator_char(char: str) -> bool:
    """Return True for ``|``, ``<`` and ``>``."""
    return char in _OPERATORS and char != ""


def is_delimiter(char: str) -> bool:
    """Return True for characters that end an unquoted word."""
    return is_space(char) or is_operator_char(char) or (char in _QUOTES and char != "")


def _read_quoted(line: str, pos: int) -> tuple[str, int]:
    quote = line[pos]
    end = line.find(quote, pos + 1)
    if end < 0:
        raise UnclosedQuoteError("syntax error: unclosed quote")
    return line[pos : end + 1], end + 1


def _read_operator(line: str, pos: int) -> tuple[str, int]:
    pair = line[pos : pos + 2]
    if pair in ("<<", ">>"):
        return pair, pos + 2
    return line[pos], pos + 1


def _read_word(line: str, pos: int) -> tuple[str, int]:
    end = pos
    while end < len(line) and not is_delimiter(line[end]):
        end += 1
    return line[pos:end], end


def tokenize(line: str) -> list[Token]:
    """Split ``line`` into tokens, keeping quotes in the token text.

    Every token starts out as a word; ``classify_tokens`` assigns the real
    types. Raises UnclosedQuoteError when a quote is never closed.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(line)
    spaced = False
    while pos < length:
        if is_space(line[pos]):
            spaced = True
            while pos < length and is_space(line[pos]):
                pos += 1
            continue
        char = line[pos]
        if char in _QUOTES:
            text, pos = _read_quoted(line, pos)
        elif is_operator_char(char):
            text, pos = _read_operator(line, pos)
        else:
            text, pos = _read_word(line, pos)
        tokens.append(Token(text, has_space=spaced))
        spaced = False
    return tokens


def classify_tokens(tokens: Iterable[Token]) -> None:
    """Set the type of every token from its text."""
    for token in tokens:
        token.type = _OPERATOR_TYPES.get(token.text, TokenType.WORD)


def merge_adjacent_words(tokens: list[Token]) -> None:
    """Join, in place, word tokens that were not separated by whitespace."""
    merged: list[Token] = []
    for token in tokens:
        if merged and merged[-1].is_word and token.is_word and not token.has_space:
            merged[-1].text += token.text
        else:
            merged.append(token)
    tokens[:] = merged


def check_syntax(tokens: list[Token]) -> bool:
    """Return True if the operators in ``tokens`` are placed correctly.

    A line may not start with a pipe, end with an operator, or hold two
    operators in a row.
    """
    if not tokens:
        return True
    if tokens[0].type is TokenType.PIPE:
        return False
    for current, following in zip(tokens, tokens[1:]):
        if not current.is_word and not following.is_word:
            return False
    return tokens[-1].is_word