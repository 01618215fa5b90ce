# tinyshell

A small interactive shell for POSIX systems. It reads one line at a time and
checks it for syntax errors. It then splits the line into a pipeline and runs
each stage. A stage is either a built-in command or an external program found
on `PATH`.

## Installing

```
pip install .
```

## Running

```
tinyshell
```

The prompt shows the value of `USER` and the working directory, coloured.
When the working directory lies under `$HOME`, that part is shortened to `~`.

- **Ctrl-C** at the prompt starts a fresh line and sets the status to 130.
- **Ctrl-\\** is ignored.
- **End of input** (Ctrl-D on an empty line) or `exit` leaves the shell with a
  farewell message.

When the `readline` module is available, lines that are not blank are added to
its history.

## What it understands

- **Pipes**: `ls -l | grep py | wc -l`. The status is the status of the last
  stage.
- **Redirections**: `< file`, `> file` and `>> file`. Files are created with
  mode 0644.
- **Here-documents**: `cat << EOF` reads lines, prompting with `> `, until a
  line equals `EOF`. If input ends first, a warning is printed. All
  here-documents on a line are read before anything runs.
- **Quotes**: single quotes keep their text literally. Double quotes keep
  spaces and `|` together but still expand variables.
- **Variables**: `$NAME` expands from the environment, and unknown names
  expand to nothing. `$?` gives the status of the last command.
- **Assignments**:
  - A line made only of `NAME=value` words stores them.
  - A name that is already in the environment, or was marked with
    `export NAME`, is updated in the environment at once.
  - Otherwise the value waits until a later `export NAME`.
  - Assignment words in front of a command are dropped.

Syntax errors are reported on stderr and set the status:

| Error | Status |
|-------|--------|
| Unclosed quote | 1 |
| Empty pipe stage | 2 |
| Redirection with no target, or followed by `|`, `<` or `>` | 2 |

When a command cannot run, the status is set as follows:

| Case | Status |
|------|--------|
| Command not found | 127 |
| Found but not executable | 126 |
| Killed by Ctrl-C | 130 |
| Killed by Ctrl-\\ | 131 |

## Built-in commands

| Command  | Effect |
|----------|--------|
| `echo`   | print its arguments; a first argument of `-n`, `-nn`, … suppresses the newline |
| `pwd`    | print the working directory |
| `env`    | print the environment, one `NAME=value` per line |
| `cd`     | change directory (to `$HOME` with no argument), updating `PWD` and `OLDPWD` |
| `export` | export `NAME` or `NAME=value`; invalid identifiers are reported and give status 1 |
| `unset`  | remove a variable; invalid identifiers are reported and give status 1 |
| `exit`   | leave the shell (always with status 0) |

`cd`, `export`, `unset` and `exit` change the shell itself only when they are
the single command on a line. Inside a pipeline they run in a child process,
so they have no effect on the shell.

## Using it from Python

```python
from tinyshell.shell import Shell

shell = Shell({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
status = shell.run_line("echo hello | tr a-z A-Z")
```

Running a line does not print a prompt:

- `Shell.run_line` returns the new status and records non-blank lines in
  `Shell.history`.
- A lone `exit` raises `tinyshell.builtins.ShellExit`.

`Shell.run` drives the read–execute loop with any function that takes a
prompt and returns the next line, or `None` at end of input. That function
also reads here-document lines.

The pieces can be used on their own:

| Module | Provides |
|--------|----------|
| `tinyshell.validator` | `validate_input` raises `QuoteError` or `ShellSyntaxError` from `tinyshell.errors` |
| `tinyshell.lexer` | `parse_line` turns a line into one expanded word list per pipeline stage |
| `tinyshell.environment` | `Environment`, the ordered variable list with its export handling |
| `tinyshell.command` | `Command` (redirections, here-documents) and `resolve_path` |
| `tinyshell.executor` | `execute` and `run_pipeline`, which fork and wire the pipes |
| `tinyshell.builtins` | the built-in commands |

## What it does not do

This is a deliberately small shell. It has:

- no `;`, `&&` or `||`, and no background jobs or job control;
- no globbing or tilde expansion in arguments, no backslash escapes and no
  `${...}` forms;
- no redirection of other descriptors (such as `2>`);
- no argument for `exit`.

It keeps no history file and reads no startup files. It needs `fork`, so it
runs only on POSIX systems.