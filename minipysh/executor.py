"""Running parsed commands, alone or as a pipeline."""

from __future__ import annotations

import io
import os
import subprocess
import sys
import threading
from collections.abc import Sequence
from typing import IO, Protocol, TextIO, Union

from minipysh.builtins import exec_builtin, is_builtin
from minipysh.environment import Environment
from minipysh.parser import Command

_Input = Union[IO[bytes], bytes, None]
_Status = Union[int, "subprocess.Popen[bytes]"]


class _Lookup(Protocol):
    def get(self, key: str) -> str | None: ...


class _RedirectionError(Exception):
    """A redirection target could not be opened."""


def exit_code(returncode: int) -> int:
    """Turn a process return code into a shell status.

    A process killed by a signal reports ``128`` plus the signal number.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def find_command_path(name: str, env: _Lookup) -> str | None:
    """Search the directories of ``$PATH`` for an executable ``name``."""
    path_env = env.get("PATH")
    if path_env is None:
        return None
    for directory in filter(None, path_env.split(":")):
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def _open_infile(path: str) -> IO[bytes]:
    try:
        return open(path, "rb")
    except OSError as exc:
        raise _RedirectionError(f"open infile: {exc.strerror}\n") from exc


def _open_outfile(command: Command) -> IO[bytes]:
    assert command.outfile is not None
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if command.append else os.O_TRUNC)
    try:
        fd = os.open(command.outfile, flags, 0o644)
    except OSError as exc:
        raise _RedirectionError(f"open outfile: {exc.strerror}\n") from exc
    return os.fdopen(fd, "wb")


def _close(resource: object) -> None:
    if resource is not None and not isinstance(resource, bytes):
        resource.close()  # type: ignore[attr-defined]


def _fileno(stream: TextIO) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _run_single_builtin(command: Command, env: Environment, out: TextIO, err: TextIO) -> int:
    """Run a lone builtin in the shell itself so it can change shell state."""
    try:
        if command.infile is not None:
            _open_infile(command.infile).close()
        sink = _open_outfile(command) if command.outfile is not None else None
    except _RedirectionError as exc:
        err.write(str(exc))
        return 1
    if sink is None:
        return exec_builtin(command.argv, env, True, out, err)
    buffer = io.StringIO()
    try:
        return exec_builtin(command.argv, env, True, buffer, err)
    finally:
        with sink:
            sink.write(buffer.getvalue().encode())


class _Pipeline:
    """Starts every stage of a pipeline and collects the final status."""

    def __init__(self, env: Environment, out: TextIO, err: TextIO) -> None:
        self.env = env
        self.out = out
        self.err = err
        self.out_fd = _fileno(out)
        self.err_fd = _fileno(err)
        self.processes: list[subprocess.Popen[bytes]] = []
        self.threads: list[threading.Thread] = []
        self.captured: list[tuple[TextIO, list[bytes], IO[bytes]]] = []

    def run(self, commands: Sequence[Command]) -> int:
        upstream: _Input = None
        status: _Status = 0
        for index, command in enumerate(commands):
            has_next = index + 1 < len(commands)
            upstream, status = self._run_stage(command, upstream, has_next)
        _close(upstream)
        for process in self.processes:
            process.wait()
        for thread in self.threads:
            thread.join()
        for target, chunks, stream in self.captured:
            stream.close()
            target.write(b"".join(chunks).decode(errors="replace"))
            target.flush()
        if isinstance(status, int):
            return status
        return exit_code(status.returncode)

    def _stdin_for(self, command: Command, upstream: _Input) -> _Input:
        if command.infile is not None:
            _close(upstream)
            return _open_infile(command.infile)
        if upstream is not None:
            return upstream
        if command.heredoc is not None:
            return command.heredoc.encode()
        return None

    def _deliver(self, data: bytes, sink: IO[bytes] | None, has_next: bool) -> _Input:
        """Send a stage's produced output where that stage's stdout points."""
        if sink is not None:
            with sink:
                sink.write(data)
            return b"" if has_next else None
        if has_next:
            return data
        self.out.write(data.decode(errors="replace"))
        self.out.flush()
        return None

    def _run_stage(
        self, command: Command, upstream: _Input, has_next: bool
    ) -> tuple[_Input, _Status]:
        try:
            stdin = self._stdin_for(command, upstream)
            try:
                sink = _open_outfile(command) if command.outfile is not None else None
            except _RedirectionError:
                _close(stdin)
                raise
        except _RedirectionError as exc:
            self.err.write(str(exc))
            self.err.flush()
            return (b"" if has_next else None), 1

        argv = command.argv
        if not argv:
            _close(stdin)
            return self._deliver(b"", sink, has_next), 0
        if is_builtin(argv[0]):
            _close(stdin)
            buffer = io.StringIO()
            exec_builtin(argv, self.env, False, buffer, self.err)
            return self._deliver(buffer.getvalue().encode(), sink, has_next), 0

        name = argv[0]
        path = name if "/" in name else find_command_path(name, self.env)
        message = None
        if path is None:
            message, status = f"minishell: command not found: {name}\n", 127
        elif not os.access(path, os.F_OK):
            message, status = f"minishell: {name}: No such file or directory\n", 127
        elif not os.access(path, os.X_OK):
            message, status = f"minishell: {name}: Permission denied\n", 126
        if message is not None or path is None:
            _close(stdin)
            return self._deliver((message or "").encode(), sink, has_next), status
        return self._spawn(argv, path, stdin, sink, has_next)

    def _spawn(
        self,
        argv: list[str],
        path: str,
        stdin: _Input,
        sink: IO[bytes] | None,
        has_next: bool,
    ) -> tuple[_Input, _Status]:
        feed = stdin if isinstance(stdin, bytes) else None
        stdin_arg: object = subprocess.PIPE if feed is not None else stdin
        capture_out = sink is None and not has_next and self.out_fd is None
        if sink is not None:
            stdout_arg: object = sink
        elif has_next or capture_out:
            stdout_arg = subprocess.PIPE
        else:
            stdout_arg = self.out_fd
        stderr_arg: object = self.err_fd if self.err_fd is not None else subprocess.PIPE
        self.out.flush()
        self.err.flush()
        try:
            process = subprocess.Popen(
                argv,
                executable=path,
                env=self.env.as_dict(),
                stdin=stdin_arg,  # type: ignore[arg-type]
                stdout=stdout_arg,  # type: ignore[arg-type]
                stderr=stderr_arg,  # type: ignore[arg-type]
            )
        except OSError:
            return (b"" if has_next else None), 1
        finally:
            if feed is None:
                _close(stdin)
            _close(sink)
        self.processes.append(process)
        if feed is not None and process.stdin is not None:
            self._start(self._feed, process.stdin, feed)
        if self.err_fd is None and process.stderr is not None:
            self._capture(process.stderr, self.err)
        if capture_out and process.stdout is not None:
            self._capture(process.stdout, self.out)
        if has_next and sink is None:
            return process.stdout, process
        return (b"" if has_next else None), process

    def _start(self, target: object, *args: object) -> None:
        thread = threading.Thread(target=target, args=args, daemon=True)  # type: ignore[arg-type]
        thread.start()
        self.threads.append(thread)

    @staticmethod
    def _feed(pipe: IO[bytes], data: bytes) -> None:
        try:
            pipe.write(data)
        except OSError:
            pass
        finally:
            try:
                pipe.close()
            except OSError:
                pass

    def _capture(self, stream: IO[bytes], target: TextIO) -> None:
        chunks: list[bytes] = []
        self._start(lambda: chunks.append(stream.read()))
        self.captured.append((target, chunks, stream))


def execute(
    commands: Sequence[Command],
    env: Environment,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run ``commands`` as a pipeline and return the status of the last stage.

    A single builtin runs inside the shell so it can change the environment
    or directory; everything else runs as a pipeline stage, where builtins
    see a throwaway view of the shell and always succeed.
    """
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr
    if not commands or not commands[0].argv:
        return 0
    if len(commands) == 1 and is_builtin(commands[0].argv[0]):
        return _run_single_builtin(commands[0], env, out, err)
    return _Pipeline(env, out, err).run(commands)