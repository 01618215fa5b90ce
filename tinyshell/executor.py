"""Runs parsed pipelines: forks, pipes, waits and signal handling."""

from __future__ import annotations

import contextlib
import errno
import os
import signal
import sys
from collections.abc import Iterable, Iterator
from typing import TextIO

from .builtins import FAREWELL, ShellExit, is_builtin, run_builtin, runs_in_parent
from .command import Command, ReadLine, collect_heredocs, resolve_path
from .environment import Environment
from .errors import ShellError, error_line

try:
    import termios
except ImportError:  # pragma: no cover - non-POSIX systems
    termios = None  # type: ignore[assignment]

EXIT_SIGINT = 130
EXIT_SIGQUIT = 131

_INTERRUPTS = (signal.SIGINT, signal.SIGQUIT)


def signal_exit_status(signum: int) -> int:
    """Exit status the shell reports for a child killed by a signal."""
    return EXIT_SIGINT if signum == signal.SIGINT else EXIT_SIGQUIT


def wait_status(returncode: int) -> int:
    """Map a return code (negative for a signal) to the shell's status."""
    if returncode < 0:
        if -returncode in _INTERRUPTS:
            return signal_exit_status(-returncode)
        # Other signals carry no exit code.
        return 0
    return returncode


def _restore(previous: dict[int, object]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, signal.SIG_DFL if handler is None else handler)


@contextlib.contextmanager
def ignore_interrupts() -> Iterator[None]:
    """Ignore SIGINT and SIGQUIT while the block runs."""
    previous = {s: signal.signal(s, signal.SIG_IGN) for s in _INTERRUPTS}
    try:
        yield
    finally:
        _restore(previous)


def _echo_control_off() -> None:
    if termios is None or not os.isatty(0):
        return
    with contextlib.suppress(termios.error):
        attrs = termios.tcgetattr(0)
        attrs[3] &= ~getattr(termios, "ECHOCTL", 0)
        termios.tcsetattr(0, termios.TCSANOW, attrs)


def install_prompt_signals() -> dict[int, object]:
    """Set the prompt's signal handling; return the previous handlers.

    SIGINT raises KeyboardInterrupt, SIGQUIT is ignored and control
    characters are no longer echoed by the terminal.
    """
    previous = {
        signal.SIGINT: signal.signal(signal.SIGINT, signal.default_int_handler),
        signal.SIGQUIT: signal.signal(signal.SIGQUIT, signal.SIG_IGN),
    }
    _echo_control_off()
    return previous


def _perror(name: object, exc: OSError) -> str:
    return f"{name}: {exc.strerror}\n"


def _close_pipes(pipes: list[tuple[int, int]]) -> None:
    for read_end, write_end in pipes:
        for fd in (read_end, write_end):
            with contextlib.suppress(OSError):
                os.close(fd)


def _exec(cmd: Command, env: Environment, out: TextIO, err: TextIO) -> int:
    name = cmd.args[0]
    if is_builtin(name):
        return run_builtin(cmd.args, env, out, err)
    if cmd.path is None:
        err.write(f"{name}: command not found\n")
        return 127
    try:
        os.execve(cmd.path, cmd.args, env.as_dict())
    except OSError as exc:
        err.write(_perror(name, exc))
        return 126 if exc.errno == errno.EACCES else 127
    return 0  # pragma: no cover - execve does not return


def _run_child(
    cmd: Command,
    env: Environment,
    pipes: list[tuple[int, int]],
    idx: int,
    last: bool,
    out: TextIO,
    err: TextIO,
) -> int:
    cmd.args = env.apply_assignments(cmd.args)
    try:
        cmd.apply_redirections()
    except OSError as exc:
        err.write(_perror(exc.filename, exc))
        return 1
    except ShellError as exc:
        err.write(exc.render())
        return exc.status
    if not cmd.args:
        return 0
    if cmd.fd_in != 0 or idx == 0:
        os.dup2(cmd.fd_in, 0)
    else:
        os.dup2(pipes[idx - 1][0], 0)
    if cmd.fd_out != 1 or last:
        os.dup2(cmd.fd_out, 1)
    else:
        os.dup2(pipes[idx][1], 1)
    _close_pipes(pipes)
    cmd.path = resolve_path(cmd.args, env.get("PATH"))
    return _exec(cmd, env, out, err)


def _child(
    cmd: Command,
    env: Environment,
    pipes: list[tuple[int, int]],
    idx: int,
    last: bool,
) -> None:
    code = 1
    try:
        for signum in _INTERRUPTS:
            signal.signal(signum, signal.SIG_DFL)
        out = open(1, "w", closefd=False)
        err = open(2, "w", closefd=False)
        try:
            code = _run_child(cmd, env, pipes, idx, last, out, err)
        except ShellExit as exc:
            out.write(FAREWELL)
            code = exc.status
        except Exception as exc:
            err.write(error_line(str(exc)))
            code = 1
        for stream in (out, err):
            with contextlib.suppress(OSError, ValueError):
                stream.flush()
    finally:
        os._exit(code)


def run_pipeline(commands: Iterable[Command], env: Environment) -> int:
    """Fork one process per command, wire the pipes and wait for them all.

    The status is that of the last command.
    """
    commands = list(commands)
    if not commands:
        return 0
    sys.stdout.flush()
    sys.stderr.flush()
    pipes = [os.pipe() for _ in range(len(commands) - 1)]
    pids: list[int] = []
    with ignore_interrupts():
        try:
            for idx, cmd in enumerate(commands):
                pid = os.fork()
                if pid == 0:
                    _child(cmd, env, pipes, idx, idx == len(commands) - 1)
                pids.append(pid)
        finally:
            _close_pipes(pipes)
        raw = 0
        for pid in pids:
            try:
                _, raw = os.waitpid(pid, 0)
            except ChildProcessError as exc:
                sys.stderr.write(_perror("waitpid", exc))
    return wait_status(os.waitstatus_to_exitcode(raw))


def execute(
    commands: Iterable[Command], env: Environment, read_line: ReadLine
) -> int:
    """Run a parsed line: here-documents first, then the pipeline.

    A lone cd, export, unset or exit runs in the shell itself.
    """
    commands = list(commands)
    status = collect_heredocs(commands, read_line)
    if status != 0 or not commands:
        return status
    if len(commands) == 1:
        cmd = commands[0]
        cmd.args = env.apply_assignments(cmd.args)
        try:
            cmd.apply_redirections()
        except OSError as exc:
            sys.stderr.write(_perror(exc.filename, exc))
            return 1
        if not cmd.args:
            return 0
        if runs_in_parent(cmd.args[0]):
            return run_builtin(cmd.args, env, sys.stdout, sys.stderr)
    return run_pipeline(commands, env)