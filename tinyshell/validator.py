"""Checks an input line for quote, pipe and redirection syntax errors."""

from __future__ import annotations

from .errors import QuoteError, ShellSyntaxError
from .textutils import is_blank, is_quote, is_redir, is_space, pos_in_str, split_on


def check_quotes(line: str) -> None:
    """Raise QuoteError when a quote is left open."""
    i = 0
    while i < len(line):
        c = line[i]
        if is_quote(c):
            close = line.find(c, i + 1)
            if close < 0:
                raise QuoteError()
            i = close + 1
        else:
            i += 1


def check_pipes(line: str) -> None:
    """Raise ShellSyntaxError for a pipe with nothing on one side."""
    if "|" not in line:
        return
    first = line.index("|")
    if line.startswith("|") or first + 1 == len(line):
        raise ShellSyntaxError("|")
    if any(is_blank(piece) for piece in split_on(line, "|")):
        raise ShellSyntaxError("|")


def check_redirections(line: str) -> None:
    """Raise ShellSyntaxError for a redirection without a target."""
    order = "<>" if pos_in_str(line, "<") < pos_in_str(line, ">") else "><"
    for mark in order:
        start = line.find(mark)
        while start >= 0:
            i = start + 1
            if i < len(line) and line[i] == mark:
                i += 1
            while i < len(line) and is_space(line[i]):
                i += 1
            if i == len(line):
                raise ShellSyntaxError("newline")
            if line[i] == "|" or is_redir(line[i]):
                raise ShellSyntaxError(line[i])
            start = line.find(mark, i)


def validate_input(line: str) -> None:
    """Run every check on a line; raise the first error found."""
    check_quotes(line)
    check_pipes(line)
    check_redirections(line)