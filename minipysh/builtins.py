"""Commands the shell runs itself."""

from __future__ import annotations

import os
from typing import TextIO

from minipysh.environment import Environment

BUILTINS = frozenset({"cd", "echo", "pwd", "export", "unset", "env", "exit"})

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "\\": "\\",
    "a": "\a",
    "b": "\b",
    "r": "\r",
    "v": "\v",
}


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


def is_builtin(name: str | None) -> bool:
    """Return True if ``name`` is a builtin command."""
    return name in BUILTINS


def process_escape_sequences(text: str) -> str:
    """Replace backslash escapes such as ``\\n`` and ``\\t`` in ``text``."""
    result: list[str] = []
    i = 0
    while i < len(text):
        if text[i] == "\\" and i + 1 < len(text) and text[i + 1] in _ESCAPES:
            result.append(_ESCAPES[text[i + 1]])
            i += 2
        else:
            result.append(text[i])
            i += 1
    return "".join(result)


def _is_echo_flag(arg: str) -> bool:
    return len(arg) > 1 and arg[0] == "-" and all(c in "ne" for c in arg[1:])


def builtin_echo(argv: list[str], out: TextIO) -> int:
    """Print the arguments; ``-n`` suppresses the trailing newline."""
    args = argv[1:]
    newline = True
    while args and _is_echo_flag(args[0]):
        if "n" in args[0][1:]:
            newline = False
        args = args[1:]
    out.write(" ".join(process_escape_sequences(arg) for arg in args))
    if newline:
        out.write("\n")
    return 0


def _is_decimal(text: str) -> bool:
    if not text:
        return False
    digits = text[1:] if text[0] in "+-" else text
    return all("0" <= c <= "9" for c in digits)


def builtin_exit(argv: list[str], out: TextIO, err: TextIO) -> int:
    """Leave the shell by raising ShellExit; return 1 on too many arguments."""
    if len(argv) > 2:
        err.write("minishell: exit: too many arguments\n")
        return 1
    status = 0
    if len(argv) == 2:
        arg = argv[1]
        if not _is_decimal(arg):
            err.write("minishell: exit: numeric argument required\n")
            raise ShellExit(2)
        sign = -1 if arg[0] == "-" else 1
        digits = arg.lstrip("+-")
        status = sign * int(digits or "0")
    out.write("exit\n")
    raise ShellExit(status & 0xFF)


def _is_valid_identifier(name: str) -> bool:
    if not name or not (name[0].isascii() and (name[0].isalpha() or name[0] == "_")):
        return False
    return all(c.isascii() and (c.isalnum() or c == "_") for c in name[1:])


def builtin_export(argv: list[str], env: Environment, err: TextIO) -> int:
    """Set ``NAME=VALUE`` arguments; stop with 1 at the first bad name."""
    for arg in argv[1:]:
        name, eq, value = arg.partition("=")
        if not _is_valid_identifier(name):
            err.write("minishell: export: not a valid identifier\n")
            return 1
        if eq:
            env.set(name, value)
    return 0


def builtin_unset(argv: list[str], env: Environment) -> int:
    """Remove each named variable."""
    for name in argv[1:]:
        env.unset(name)
    return 0


def builtin_env(env: Environment, out: TextIO) -> int:
    """Print every variable as ``KEY=VALUE``."""
    for line in env.to_envp():
        out.write(line + "\n")
    return 0


def builtin_pwd(argv: list[str], out: TextIO, err: TextIO) -> int:
    """Print the current working directory."""
    if len(argv) > 1:
        err.write("pwd: too many arguments\n")
        return 1
    try:
        cwd = os.getcwd()
    except OSError:
        return 0
    out.write(cwd + "\n")
    return 0


def builtin_cd(argv: list[str], env: Environment, err: TextIO) -> int:
    """Change directory to the argument, or to ``$HOME`` without one."""
    if len(argv) > 2:
        err.write("minishell: cd: too many arguments\n")
        return 1
    if len(argv) < 2:
        target = env.get("HOME")
        if target is None:
            err.write("minishell: cd: HOME not set\n")
            return 1
    else:
        target = argv[1]
    try:
        os.chdir(target)
    except OSError as exc:
        err.write(f"minishell: cd: {exc.strerror}\n")
        return 1
    return 0


def exec_builtin(
    argv: list[str], env: Environment, in_parent: bool, out: TextIO, err: TextIO
) -> int:
    """Run the builtin named by ``argv[0]``.

    Builtins that change shell state run only when ``in_parent`` is true;
    anything that is not run returns 127.
    """
    name = argv[0]
    if name == "echo":
        return builtin_echo(argv, out)
    if name == "pwd":
        return builtin_pwd(argv, out, err)
    if name == "env":
        return builtin_env(env, out)
    if not in_parent:
        return 127
    if name == "cd":
        return builtin_cd(argv, env, err)
    if name == "export":
        return builtin_export(argv, env, err)
    if name == "unset":
        return builtin_unset(argv, env)
    if name == "exit":
        return builtin_exit(argv, out, err)
    return 127