"""The shell's environment list and its pending exports."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .errors import InvalidIdentifierError


class NameKind(enum.IntEnum):
    """How a word reads as a variable name."""

    INVALID = 0
    ASSIGNMENT = 1
    NAME = 2


def _is_name_start(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalpha())


def _is_name_char(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalnum())


def classify_name(name: str) -> NameKind:
    """Tell a bare name, a ``NAME=value`` assignment, or neither apart."""
    if not name or not _is_name_start(name[0]):
        return NameKind.INVALID
    for c in name:
        if c == "=":
            return NameKind.ASSIGNMENT
        if not _is_name_char(c):
            return NameKind.INVALID
    return NameKind.NAME


@dataclass
class _Pending:
    name: str
    value: str | None


class Environment:
    """Ordered ``NAME=value`` entries plus shell variables awaiting export."""

    def __init__(self, entries: Iterable[str] | Mapping[str, str] = ()) -> None:
        if isinstance(entries, Mapping):
            entries = (f"{k}={v}" for k, v in entries.items())
        self._entries: list[str] = list(entries)
        self._pending: list[_Pending] = []

    def _index(self, name: str) -> int | None:
        prefix = name + "="
        return next(
            (i for i, entry in enumerate(self._entries) if entry.startswith(prefix)),
            None,
        )

    def get(self, name: str) -> str | None:
        """Value of an environment variable, or None."""
        index = self._index(name)
        if index is None:
            return None
        return self._entries[index][len(name) + 1:]

    def set(self, name: str, value: str) -> None:
        """Set a variable, replacing it in place when it exists."""
        entry = f"{name}={value}"
        index = self._index(name)
        if index is not None:
            self._entries[index] = entry
        else:
            # New names land just before the final entry.
            self._entries.insert(max(len(self._entries) - 1, 0), entry)

    def unset(self, name: str) -> None:
        """Remove a variable and any pending exports of it."""
        if classify_name(name) is not NameKind.NAME:
            raise InvalidIdentifierError("unset", name)
        index = self._index(name)
        if index is not None:
            del self._entries[index]
        self._drop_pending(name)

    def export(self, arg: str) -> None:
        """Export ``NAME`` or ``NAME=value``."""
        kind = classify_name(arg)
        if kind is NameKind.ASSIGNMENT:
            name, _, value = arg.partition("=")
            self._pending.append(_Pending(name, value))
            self._promote(name)
        elif kind is NameKind.NAME:
            self._promote(arg)
        else:
            raise InvalidIdentifierError("export", arg)

    def apply_assignments(self, args: Iterable[str]) -> list[str]:
        """Handle leading ``NAME=value`` words and return the words left.

        When every word is an assignment they are all applied; otherwise the
        leading assignments are dropped unapplied and the rest returned.
        """
        words = list(args)
        for i, word in enumerate(words):
            if classify_name(word) is not NameKind.ASSIGNMENT:
                return words[i:]
        for word in words:
            name, _, value = word.partition("=")
            self._pending.append(_Pending(name, value))
            if self.get(name) is not None or self._marked(name):
                self._promote(name)
        return []

    def as_list(self) -> list[str]:
        """The entries as ``NAME=value`` strings, in order."""
        return list(self._entries)

    def as_dict(self) -> dict[str, str]:
        """The entries as a mapping; the first of duplicate names wins."""
        result: dict[str, str] = {}
        for entry in self._entries:
            name, sep, value = entry.partition("=")
            if sep:
                result.setdefault(name, value)
        return result

    def _promote(self, name: str) -> None:
        for item in reversed(self._pending):
            if item.name == name and item.value is not None:
                self.set(name, item.value)
                self._drop_pending(name)
                return
        self._pending.append(_Pending(name, None))

    def _marked(self, name: str) -> bool:
        return any(p.name == name and p.value is None for p in self._pending)

    def _drop_pending(self, name: str) -> None:
        self._pending = [p for p in self._pending if p.name != name]