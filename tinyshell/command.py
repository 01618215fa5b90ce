"""Pipeline commands: redirections, here-documents and path lookup."""

from __future__ import annotations

import contextlib
import os
import sys
import tempfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .errors import ShellSyntaxError, heredoc_eof_warning
from .textutils import split_on

ReadLine = Callable[[str], "str | None"]

_EXIT_SIGINT = 130
_REDIRECTIONS = frozenset({"<", "<<", ">", ">>"})
_STDIN = 0
_STDOUT = 1


def resolve_path(args: list[str], path_var: str | None) -> str | None:
    """Find the program for ``args[0]`` along ``path_var``.

    Without a PATH the name is used as it is; a name holding ``/`` is used
    as it is; otherwise the first existing ``dir/name`` wins.
    """
    if path_var is None:
        return args[0] if args else None
    if not args or not args[0]:
        return None
    name = args[0]
    if "/" in name:
        return name
    for directory in split_on(path_var, ":"):
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.F_OK):
            return candidate
    return None


def read_heredoc(eof: str, read_line: ReadLine) -> str:
    """Read lines until ``eof`` and return them, each ending in a newline.

    ``read_line`` returns None at end of input, which ends the document
    with a warning on stderr.
    """
    lines: list[str] = []
    while True:
        line = read_line("> ")
        if line is None:
            sys.stderr.write(heredoc_eof_warning(eof))
            break
        if line == eof:
            break
        lines.append(line + "\n")
    return "".join(lines)


def _fd_holding(text: str) -> int:
    """A readable descriptor positioned at the start of ``text``."""
    with tempfile.TemporaryFile() as handle:
        handle.write(text.encode())
        handle.flush()
        handle.seek(0)
        return os.dup(handle.fileno())


def collect_heredocs(commands: Iterable[Command], read_line: ReadLine) -> int:
    """Read every here-document of a pipeline; 130 if interrupted, else 0."""
    for command in commands:
        try:
            command.take_heredocs(read_line)
        except KeyboardInterrupt:
            return _EXIT_SIGINT
    return 0


@dataclass
class Command:
    """One command of a pipeline with its descriptors and program path."""

    args: list[str] = field(default_factory=list)
    fd_in: int = _STDIN
    fd_out: int = _STDOUT
    path: str | None = None

    def _operand(self, i: int) -> str:
        if i + 1 >= len(self.args):
            raise ShellSyntaxError("newline")
        return self.args[i + 1]

    def _set_in(self, fd: int) -> None:
        if self.fd_in != _STDIN:
            with contextlib.suppress(OSError):
                os.close(self.fd_in)
        self.fd_in = fd

    def _set_out(self, fd: int) -> None:
        if self.fd_out != _STDOUT:
            with contextlib.suppress(OSError):
                os.close(self.fd_out)
        self.fd_out = fd

    def apply_redirections(self) -> None:
        """Open ``<``, ``>`` and ``>>`` targets and drop them from the args.

        Raises OSError (with the file name) when a target cannot be opened.
        """
        i = 0
        while i < len(self.args):
            mode = self.args[i]
            if mode not in _REDIRECTIONS:
                i += 1
                continue
            name = self._operand(i)
            if mode == "<":
                self._set_in(os.open(name, os.O_RDONLY))
            elif mode == ">>":
                self._set_out(
                    os.open(name, os.O_CREAT | os.O_RDWR | os.O_APPEND, 0o644)
                )
            elif mode == ">":
                self._set_out(
                    os.open(name, os.O_CREAT | os.O_RDWR | os.O_TRUNC, 0o644)
                )
            del self.args[i:i + 2]

    def take_heredocs(self, read_line: ReadLine) -> None:
        """Read each ``<< eof`` document into the input and drop it from the args."""
        i = 0
        while i < len(self.args):
            if self.args[i] != "<<":
                i += 1
                continue
            eof = self._operand(i)
            text = read_heredoc(eof, read_line)
            self._set_in(_fd_holding(text))
            del self.args[i:i + 2]

    def close(self) -> None:
        """Close descriptors opened for this command."""
        self._set_in(_STDIN)
        self._set_out(_STDOUT)

    def __enter__(self) -> Command:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()