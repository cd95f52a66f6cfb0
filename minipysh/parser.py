"""Turning classified tokens into a list of commands."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from minipysh.expansion import expand_variables
from minipysh.lexer import Token, TokenType
from minipysh.quotes import UnclosedQuoteError, clean_quotes

ReadLine = Callable[[str], "str | None"]


class _Lookup(Protocol):
    def get(self, key: str) -> str | None: ...


@dataclass
class Command:
    """One stage of a pipeline with its redirections.

    ``heredoc`` holds the collected here-document text, if any; it is fed to
    the command's standard input before ``infile`` is applied.
    """

    argv: list[str] = field(default_factory=list)
    infile: str | None = None
    heredoc: str | None = None
    outfile: str | None = None
    append: bool = False


def _read_from_terminal(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def read_heredoc(
    delimiter: str,
    expand: bool,
    env: _Lookup,
    last_status: int,
    read_line: ReadLine | None = None,
) -> str:
    """Collect lines until ``delimiter`` or end of input.

    Each line is optionally variable-expanded and ends with a newline in
    the returned text.
    """
    reader = read_line or _read_from_terminal
    lines: list[str] = []
    while True:
        line = reader("> ")
        if line is None or line == delimiter:
            break
        if expand:
            line = expand_variables(line, env, last_status)
        lines.append(line + "\n")
    return "".join(lines)


def _apply_heredoc(
    command: Command,
    target: Token,
    env: _Lookup,
    last_status: int,
    read_line: ReadLine | None,
) -> bool:
    """Attach a here-document to ``command``; return False if the delimiter is bad."""
    expand = "'" not in target.text and '"' not in target.text
    try:
        delimiter = clean_quotes(target.text)
    except UnclosedQuoteError:
        sys.stderr.write("minishell: syntax error: unclosed delimiter\n")
        return False
    command.heredoc = read_heredoc(delimiter, expand, env, last_status, read_line)
    command.infile = None
    return True


def parse_commands(
    tokens: Iterable[Token],
    env: _Lookup,
    last_status: int,
    read_line: ReadLine | None = None,
) -> list[Command]:
    """Group classified tokens into pipeline stages.

    Words become arguments, pipes start a new command, and each redirection
    operator consumes the token after it. Here-documents are read at once
    through ``read_line``, which takes a prompt and returns a line or None
    at end of input.
    """
    commands: list[Command] = []
    current = Command()
    stream = iter(tokens)
    for token in stream:
        if token.type is TokenType.WORD:
            current.argv.append(token.text)
            continue
        if token.type is TokenType.PIPE:
            commands.append(current)
            current = Command()
            continue
        target = next(stream, None)
        if target is None:
            break
        if token.type is TokenType.REDIR_IN:
            current.infile = target.text
        elif token.type is TokenType.REDIR_OUT:
            current.outfile = target.text
            current.append = False
        elif token.type is TokenType.APPEND:
            current.outfile = target.text
            current.append = True
        elif token.type is TokenType.HEREDOC:
            if not _apply_heredoc(current, target, env, last_status, read_line):
                # The delimiter token is left in the stream and taken as a word.
                current.argv.append(target.text)
    commands.append(current)
    return commands