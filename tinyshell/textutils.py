"""Small character and string helpers shared by the shell."""

from __future__ import annotations

RED = "\x1b[0;31m"
YEL = "\x1b[0;33m"
BRED = "\x1b[1;31m"
BCYN = "\x1b[1;36m"
RESET = "\x1b[0m"

_SPACES = frozenset(" \t\v\f\r")


def is_quote(c: str) -> bool:
    """True for a single or double quote character."""
    return c == "'" or c == '"'


def is_redir(c: str) -> bool:
    """True for a redirection character."""
    return c == "<" or c == ">"


def is_space(c: str) -> bool:
    """True for the blank characters the shell skips (newline excluded)."""
    return len(c) == 1 and c in _SPACES


def is_blank(s: str) -> bool:
    """True when the string holds only blank characters, or nothing."""
    return all(is_space(c) for c in s)


def pos_in_str(s: str, c: str) -> int:
    """Index of the first ``c`` in ``s``, or ``len(s)`` when absent."""
    index = s.find(c)
    return len(s) if index < 0 else index


def loop_until(s: str, c: str, repeat: bool) -> int:
    """Count leading repeats of ``c`` when ``repeat``, else find ``c``."""
    if not repeat:
        return pos_in_str(s, c)
    return len(s) - len(s.lstrip(c)) if c else 0


def split_on(s: str, c: str) -> list[str]:
    """Split on ``c`` and drop the empty pieces."""
    return [piece for piece in s.split(c) if piece]


def colorize(text: str, color: str) -> str:
    """Wrap text in a colour escape and a reset."""
    return f"{color}{text}{RESET}"