"""Splits an input line into pipeline segments and expanded words."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .textutils import is_quote, is_redir

Lookup = Callable[[str], "str | None"]


def is_var_char(c: str) -> bool:
    """True for a character that may appear in a ``$NAME`` reference."""
    return c == "_" or (len(c) == 1 and c.isascii() and c.isalpha())


def _quote_end(s: str, i: int) -> int:
    """Index just past the quote closing the one at ``s[i]``, capped at len."""
    close = s.find(s[i], i + 1)
    return len(s) if close < 0 else close + 1


def word_length(s: str, quoted: bool) -> int:
    """Length of the next lexical piece of a word.

    A piece is a quoted run (when ``quoted``), a ``$`` reference, or plain
    text up to the next ``$`` or, when ``quoted``, the next quote.
    """
    if not s:
        return 0
    if quoted and is_quote(s[0]):
        return _quote_end(s, 0)
    if s[0] == "$":
        if s[1:2] == "?":
            return 2
        n = 1
        while n < len(s) and is_var_char(s[n]):
            n += 1
        return n
    n = 0
    while n < len(s) and s[n] != "$" and not (quoted and is_quote(s[n])):
        n += 1
    return n


def _piece_end(s: str, start: int, sep: str) -> int:
    """End of a piece starting at ``start``, skipping over quoted runs."""
    j = start
    while j < len(s) and s[j] != sep:
        if is_quote(s[j]):
            close = s.find(s[j], j + 1)
            j = len(s) if close < 0 else close
        j += 1
    return min(j, len(s))


def _split(s: str, sep: str, piece_end: Callable[[str, int], int]) -> list[str]:
    pieces: list[str] = []
    i = 0
    while i < len(s):
        if s[i] == sep:
            i += 1
            continue
        end = piece_end(s, i)
        pieces.append(s[i:end])
        i = end
    return pieces


def pipe_split(line: str) -> list[str]:
    """Split a line on unquoted ``|`` into raw pipeline segments."""
    return _split(line, "|", lambda s, i: _piece_end(s, i, "|"))


def _word_end(s: str, start: int) -> int:
    if is_redir(s[start]):
        j = start
        while j < len(s) and s[j] == s[start]:
            j += 1
        return j
    return _piece_end(s, start, " ")


def word_split(segment: str) -> list[str]:
    """Split a segment on spaces into raw words.

    A run of one redirection character at the start of a word is a word of
    its own, so ``<<eof`` gives ``<<`` and ``eof``.
    """
    return _split(segment, " ", _word_end)


def _expand(text: str, lookup: Lookup, status: int, quoted: bool) -> str:
    parts: list[str] = []
    i = 0
    while i < len(text):
        c = text[i]
        step = word_length(text[i:], quoted)
        if quoted and is_quote(c):
            close = text.find(c, i + 1)
            inner = text[i + 1:close] if close >= 0 else text[i + 1:]
            parts.append(_expand(inner, lookup, status, False) if c == '"' else inner)
        elif c == "$" and (text[i + 1:i + 2] == "?" or is_var_char(text[i + 1:i + 2])):
            if text[i + 1] == "?":
                parts.append(str(status))
            else:
                parts.append(lookup(text[i + 1:i + step]) or "")
        else:
            parts.append(text[i:i + step])
        i += step
    return "".join(parts)


def expand_word(word: str, lookup: Lookup, status: int) -> str:
    """Remove quotes from a word and expand ``$NAME`` and ``$?`` in it.

    Single quotes keep their content literally; double quotes still expand
    variables. Unknown variables expand to nothing.
    """
    return _expand(word, lookup, status, True)


def expand_words(words: Iterable[str], lookup: Lookup, status: int) -> list[str]:
    """Expand every word of a command."""
    return [expand_word(word, lookup, status) for word in words]


def parse_line(line: str, lookup: Lookup, status: int) -> list[list[str]]:
    """Turn a line into one expanded word list per pipeline command."""
    return [
        expand_words(word_split(segment), lookup, status)
        for segment in pipe_split(line)
    ]