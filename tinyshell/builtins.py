"""Built-in commands run by the shell itself."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from typing import TextIO

from .environment import Environment
from .errors import ShellError
from .textutils import BRED, RESET

FAREWELL = f"... exiting hell, {BRED}to a deeper!\n{RESET}"

_NAMES = ("echo", "pwd", "env", "cd", "export", "unset", "exit")


class ShellExit(Exception):
    """Raised by the exit builtin to leave the shell."""

    def __init__(self, status: int = 0) -> None:
        super().__init__(status)
        self.status = status


def is_builtin(name: str | None) -> int:
    """Position (from 1) of a builtin name, or 0 for anything else."""
    if name in _NAMES:
        return _NAMES.index(name) + 1
    return 0


def runs_in_parent(name: str | None) -> bool:
    """True for builtins that must change the shell's own state."""
    return is_builtin(name) > 3


def builtin_echo(args: Sequence[str], out: TextIO) -> int:
    """Print the arguments; a leading ``-n``, ``-nn``... drops the newline."""
    if len(args) < 2:
        out.write("\n")
        return 0
    flag = args[1]
    if flag.startswith("-n") and flag.count("n") == len(flag) - 1:
        out.write(" ".join(args[2:]))
    else:
        out.write(" ".join(args[1:]) + "\n")
    return 0


def builtin_cd(args: Sequence[str], env: Environment, err: TextIO) -> int:
    """Change directory (HOME by default) and update PWD and OLDPWD."""
    target = args[1] if len(args) > 1 else env.get("HOME")
    if target is None:
        err.write("cd: HOME not set\n")
        return 1
    try:
        os.chdir(target)
    except OSError as exc:
        err.write(f"cd: {exc.strerror}\n")
        return 1
    old_wd = env.get("PWD")
    cwd = os.getcwd()
    if old_wd is not None and cwd != old_wd:
        env.set("OLDPWD", old_wd)
    env.set("PWD", cwd)
    return 0


def builtin_pwd(out: TextIO) -> int:
    """Print the working directory."""
    out.write(os.getcwd() + "\n")
    return 0


def builtin_env(env: Environment, out: TextIO) -> int:
    """Print every environment entry on its own line."""
    out.write("\n".join(env.as_list()) + "\n")
    return 0


def _each(args: Sequence[str], action: Callable[[str], None], err: TextIO) -> int:
    status = 0
    for arg in args[1:]:
        try:
            action(arg)
        except ShellError as exc:
            err.write(exc.render())
            status = 1
    return status


def builtin_export(args: Sequence[str], env: Environment, err: TextIO) -> int:
    """Export each argument; 1 if any of them was not a valid identifier."""
    return _each(args, env.export, err)


def builtin_unset(args: Sequence[str], env: Environment, err: TextIO) -> int:
    """Unset each argument; 1 if any of them was not a valid identifier."""
    return _each(args, env.unset, err)


def run_builtin(
    args: Sequence[str], env: Environment, out: TextIO, err: TextIO
) -> int:
    """Run the builtin named by ``args[0]``; 0 when it is not a builtin.

    The ``exit`` builtin raises :class:`ShellExit` with status 0.
    """
    if not args:
        return 0
    if args[0] == "exit":
        raise ShellExit(0)
    handlers: dict[str, Callable[[], int]] = {
        "echo": lambda: builtin_echo(args, out),
        "pwd": lambda: builtin_pwd(out),
        "env": lambda: builtin_env(env, out),
        "cd": lambda: builtin_cd(args, env, err),
        "export": lambda: builtin_export(args, env, err),
        "unset": lambda: builtin_unset(args, env, err),
    }
    handler = handlers.get(args[0])
    return handler() if handler else 0