"""The interactive read-evaluate loop."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Callable, Sequence
from typing import TextIO

from minipysh.builtins import ShellExit
from minipysh.environment import Environment
from minipysh.executor import execute
from minipysh.expansion import expand_tokens
from minipysh.lexer import check_syntax, classify_tokens, merge_adjacent_words, tokenize
from minipysh.parser import parse_commands
from minipysh.quotes import UnclosedQuoteError, remove_quotes

PROMPT = "minishell> "
INTERRUPTED_STATUS = 130


def _read_from_terminal(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


class Shell:
    """A shell session holding its environment and the last exit status.

    ``read_line`` takes a prompt and returns a line, or None at end of
    input; it is used for command lines and here-documents alike.
    """

    def __init__(
        self,
        env: Environment | None = None,
        read_line: Callable[[str], str | None] | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        interactive: bool | None = None,
    ) -> None:
        self.env = env if env is not None else Environment(os.environ)
        self.read_line = read_line or _read_from_terminal
        self._stdout = stdout
        self._stderr = stderr
        if interactive is None:
            interactive = sys.stdin is not None and sys.stdin.isatty()
        self.interactive = interactive
        self.last_status = 0

    @property
    def out(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def run_line(self, line: str) -> int:
        """Run one input line and return its status.

        An empty line keeps the previous status. ``exit`` raises ShellExit.
        """
        if line == "":
            return self.last_status
        try:
            tokens = tokenize(line)
        except UnclosedQuoteError:
            self.err.write("minishell: syntax error: unclosed quote\n")
            tokens = []
        classify_tokens(tokens)
        merge_adjacent_words(tokens)
        expand_tokens(tokens, self.env, self.last_status)
        remove_quotes(tokens)
        if not check_syntax(tokens):
            self.err.write("minishell: syntax error near unexpected token\n")
            status = 2
        else:
            commands = parse_commands(tokens, self.env, self.last_status, self.read_line)
            status = execute(commands, self.env, self.out, self.err)
        self.last_status = status
        return status

    def run(self) -> int:
        """Read and run lines until end of input or ``exit``; return the status."""
        while True:
            try:
                line = self.read_line(PROMPT)
            except KeyboardInterrupt:
                self.out.write("\n")
                self.last_status = INTERRUPTED_STATUS
                continue
            if line is None:
                if self.interactive:
                    self.err.write("exit\n")
                return self.last_status
            try:
                self.run_line(line)
            except ShellExit as exc:
                return exc.status
            except KeyboardInterrupt:
                self.out.write("\n")
                self.last_status = INTERRUPTED_STATUS


def main(argv: Sequence[str] | None = None) -> int:
    """Start an interactive session; any command-line argument ends at once."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args:
        return 0
    try:
        import readline  # noqa: F401  (enables line editing and history for input())
    except ImportError:
        pass
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    return Shell().run()


if __name__ == "__main__":
    sys.exit(main())