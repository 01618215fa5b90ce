"""Shell errors and the diagnostic lines written for them."""

from __future__ import annotations

from .textutils import RED, RESET


def error_line(text: str) -> str:
    """Format a diagnostic line as the shell prints it on stderr."""
    return f"tinyshell: {RED}{text}\n{RESET}"


def heredoc_eof_warning(eof: str) -> str:
    """Warning printed when a here-document ends at end-of-file."""
    return error_line(
        f"warning: here-document delimited by end-of-file (wanted `{eof}')"
    )


class ShellError(Exception):
    """An error the shell reports, carrying the exit status it sets."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def render(self) -> str:
        """The full diagnostic line for this error."""
        return error_line(self.message)


class InvalidIdentifierError(ShellError):
    """A name given to export or unset is not a valid identifier."""

    def __init__(self, title: str, token: str) -> None:
        super().__init__(f"{title}: `{token}': not a valid identifier", 1)
        self.title = title
        self.token = token


class ShellSyntaxError(ShellError):
    """The input line has a syntax error near a token."""

    def __init__(self, token: str) -> None:
        super().__init__(f"syntax error near unexpected token `{token}'", 2)
        self.token = token


class QuoteError(ShellError):
    """The input line has an unclosed quote."""

    def __init__(self) -> None:
        super().__init__("invalid quotes", 1)