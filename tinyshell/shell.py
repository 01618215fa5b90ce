"""The interactive read-eval loop."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Callable, Mapping

from .builtins import FAREWELL, ShellExit
from .command import Command, ReadLine
from .environment import Environment
from .errors import ShellError
from .executor import EXIT_SIGINT, execute, install_prompt_signals
from .lexer import parse_line
from .textutils import BCYN, YEL, colorize, is_blank
from .validator import validate_input


def _read_input(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


class Shell:
    """Shell state: environment, last status and history."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self.env = Environment(os.environ if environ is None else environ)
        self.user = colorize(self.env.get("USER") or "", BCYN)
        self.status = 0
        self.history: list[str] = []
        self.history_hook: Callable[[str], None] | None = None
        self.read_line: ReadLine = _read_input

    def prompt(self) -> str:
        """The prompt: user, working directory (``~`` for HOME) and ``$``."""
        cwd = os.getcwd()
        home = self.env.get("HOME")
        if home is not None and cwd.startswith(home):
            cwd = "~" + cwd[len(home):]
        return f"{self.user}:{colorize(cwd, YEL)}$ "

    def run_line(self, line: str) -> int:
        """Validate, parse and run one line; return the new status."""
        if not is_blank(line):
            self.history.append(line)
            if self.history_hook is not None:
                self.history_hook(line)
        try:
            validate_input(line)
            commands = [
                Command(args)
                for args in parse_line(line, self.env.get, self.status)
            ]
            try:
                self.status = execute(commands, self.env, self.read_line)
            finally:
                for command in commands:
                    command.close()
        except ShellError as exc:
            sys.stderr.write(exc.render())
            self.status = exc.status
        return self.status

    def run(self, read_line: ReadLine | None = None) -> int:
        """Read and run lines until end of input or exit."""
        if read_line is not None:
            self.read_line = read_line
        previous = install_prompt_signals()
        try:
            while True:
                try:
                    line = self.read_line(self.prompt())
                    if line is None:
                        break
                    self.run_line(line)
                except KeyboardInterrupt:
                    sys.stdout.write("\n")
                    self.status = EXIT_SIGINT
        except ShellExit:
            pass
        finally:
            for signum, handler in previous.items():
                signal.signal(
                    signum, signal.SIG_DFL if handler is None else handler
                )
        sys.stdout.write(FAREWELL)
        sys.stdout.flush()
        return 0


def main(argv: list[str] | None = None) -> int:
    """Start an interactive shell on the terminal."""
    shell = Shell()
    try:
        import readline
    except ImportError:
        pass
    else:
        readline.set_auto_history(False)
        shell.history_hook = readline.add_history
    return shell.run(_read_input)


if __name__ == "__main__":
    raise SystemExit(main())