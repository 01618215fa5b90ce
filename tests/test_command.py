import os

import pytest

from tinyshell.command import (
    Command,
    collect_heredocs,
    read_heredoc,
    resolve_path,
)
from tinyshell.errors import ShellSyntaxError


def feeder(lines):
    it = iter(lines)
    return lambda prompt: next(it, None)


def read_all(fd):
    chunks = []
    while True:
        chunk = os.read(fd, 4096)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


def test_resolve_without_path_uses_name():
    assert resolve_path(["ls"], None) == "ls"


def test_resolve_with_slash_uses_name():
    assert resolve_path(["./prog"], "/bin") == "./prog"


def test_resolve_empty_name():
    assert resolve_path([""], "/bin") is None


def test_resolve_searches_directories(tmp_path):
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.mkdir()
    second.mkdir()
    (second / "tool").write_text("")
    path_var = f"{first}::{second}"
    assert resolve_path(["tool"], path_var) == f"{second}/tool"


def test_resolve_first_match_wins(tmp_path):
    first = tmp_path / "a"
    second = tmp_path / "b"
    for d in (first, second):
        d.mkdir()
        (d / "tool").write_text("")
    assert resolve_path(["tool"], f"{first}:{second}") == f"{first}/tool"


def test_resolve_missing(tmp_path):
    assert resolve_path(["nothing-here"], str(tmp_path)) is None
    assert resolve_path(["tool"], "") is None


def test_input_redirection(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("hello\n")
    with Command(["cat", "<", str(source)]) as cmd:
        cmd.apply_redirections()
        assert cmd.args == ["cat"]
        assert read_all(cmd.fd_in) == b"hello\n"


def test_output_truncate_and_append(tmp_path):
    target = tmp_path / "out.txt"
    target.write_text("old")
    cmd = Command([">", str(target), "echo"])
    cmd.apply_redirections()
    os.write(cmd.fd_out, b"one\n")
    cmd.close()
    assert target.read_text() == "one\n"

    cmd = Command(["echo", ">>", str(target)])
    cmd.apply_redirections()
    os.write(cmd.fd_out, b"two\n")
    cmd.close()
    assert cmd.args == ["echo"]
    assert target.read_text() == "one\ntwo\n"


def test_output_file_created(tmp_path):
    target = tmp_path / "new.txt"
    cmd = Command(["echo", ">", str(target)])
    cmd.apply_redirections()
    cmd.close()
    assert target.exists()
    assert cmd.fd_out == 1


def test_missing_input_file(tmp_path):
    missing = tmp_path / "missing"
    cmd = Command(["cat", "<", str(missing)])
    with pytest.raises(FileNotFoundError) as info:
        cmd.apply_redirections()
    assert info.value.filename == str(missing)
    assert cmd.fd_in == 0


def test_redirection_without_target():
    cmd = Command(["cat", ">"])
    with pytest.raises(ShellSyntaxError) as info:
        cmd.apply_redirections()
    assert info.value.token == "newline"


def test_read_heredoc_stops_at_delimiter():
    assert read_heredoc("EOF", feeder(["a", "b", "EOF", "c"])) == "a\nb\n"


def test_read_heredoc_end_of_input_warns(capsys):
    assert read_heredoc("END", feeder(["x"])) == "x\n"
    assert "wanted `END'" in capsys.readouterr().err


def test_take_heredocs_sets_input():
    cmd = Command(["cat", "<<", "END", "-n"])
    cmd.take_heredocs(feeder(["line", "END"]))
    assert cmd.args == ["cat", "-n"]
    assert read_all(cmd.fd_in) == b"line\n"
    cmd.close()
    assert cmd.fd_in == 0


def test_take_heredocs_last_one_wins():
    cmd = Command(["<<", "A", "<<", "B"])
    cmd.take_heredocs(feeder(["first", "A", "second", "B"]))
    assert cmd.args == []
    assert read_all(cmd.fd_in) == b"second\n"
    cmd.close()


def test_collect_heredocs_success():
    commands = [Command(["cat", "<<", "X"]), Command(["wc"])]
    assert collect_heredocs(commands, feeder(["X"])) == 0
    assert commands[0].args == ["cat"]
    for c in commands:
        c.close()


def test_collect_heredocs_interrupted():
    def interrupt(prompt):
        raise KeyboardInterrupt

    assert collect_heredocs([Command(["cat", "<<", "X"])], interrupt) == 130


def test_close_releases_descriptors(tmp_path):
    source = tmp_path / "f"
    source.write_text("")
    cmd = Command(["<", str(source)])
    cmd.apply_redirections()
    fd = cmd.fd_in
    cmd.close()
    with pytest.raises(OSError):
        os.fstat(fd)