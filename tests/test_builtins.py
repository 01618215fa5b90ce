import io
import os

import pytest

from tinyshell.builtins import (
    ShellExit,
    builtin_cd,
    builtin_echo,
    builtin_env,
    builtin_export,
    builtin_pwd,
    builtin_unset,
    is_builtin,
    run_builtin,
    runs_in_parent,
)
from tinyshell.environment import Environment


@pytest.mark.parametrize("name", ["cd", "export", "unset", "exit"])
def test_parent_builtins(name):
    assert is_builtin(name) > 0
    assert runs_in_parent(name) is True


@pytest.mark.parametrize("name", ["echo", "pwd", "env"])
def test_child_builtins(name):
    assert is_builtin(name) > 0
    assert runs_in_parent(name) is False


def test_not_builtin():
    assert is_builtin("ls") == 0
    assert is_builtin(None) == 0
    assert runs_in_parent("ls") is False


def test_builtin_order():
    assert is_builtin("echo") < is_builtin("cd") < is_builtin("exit")


@pytest.mark.parametrize(
    "args, expected",
    [
        (["echo", "a", "b"], "a b\n"),
        (["echo", "-n", "a"], "a"),
        (["echo", "-nnn", "a", "b"], "a b"),
        (["echo", "-nx", "a"], "-nx a\n"),
        (["echo"], "\n"),
    ],
)
def test_echo(args, expected):
    out = io.StringIO()
    assert builtin_echo(args, out) == 0
    assert out.getvalue() == expected


def test_cd_to_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    (tmp_path / "sub").mkdir()
    env = Environment([f"PWD={start}", "X=1"])
    err = io.StringIO()
    assert builtin_cd(["cd", "sub"], env, err) == 0
    assert os.getcwd() == os.path.join(start, "sub")
    assert env.get("PWD") == os.getcwd()
    assert env.get("OLDPWD") == start
    assert err.getvalue() == ""


def test_cd_defaults_to_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    env = Environment([f"HOME={home}", "X=1"])
    assert builtin_cd(["cd"], env, io.StringIO()) == 0
    assert os.path.samefile(os.getcwd(), home)
    assert env.get("PWD") == os.getcwd()


def test_cd_without_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    err = io.StringIO()
    assert builtin_cd(["cd"], Environment(["X=1"]), err) == 1
    assert err.getvalue() == "cd: HOME not set\n"


def test_cd_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    err = io.StringIO()
    assert builtin_cd(["cd", "missing"], Environment(["X=1"]), err) == 1
    assert err.getvalue().startswith("cd: ")
    assert os.getcwd() == start


def test_pwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    assert builtin_pwd(out) == 0
    assert out.getvalue() == os.getcwd() + "\n"


def test_env_lists_entries():
    out = io.StringIO()
    assert builtin_env(Environment(["A=1", "B=2"]), out) == 0
    assert out.getvalue() == "A=1\nB=2\n"


def test_env_empty():
    out = io.StringIO()
    builtin_env(Environment([]), out)
    assert out.getvalue() == "\n"


def test_export_sets_variable():
    env = Environment(["A=1"])
    err = io.StringIO()
    assert builtin_export(["export", "X=5"], env, err) == 0
    assert env.get("X") == "5"
    assert err.getvalue() == ""


def test_export_invalid_keeps_going():
    env = Environment(["A=1"])
    err = io.StringIO()
    assert builtin_export(["export", "1x", "Y=2"], env, err) == 1
    assert "not a valid identifier" in err.getvalue()
    assert env.get("Y") == "2"


def test_unset_removes_variable():
    env = Environment(["A=1", "B=2"])
    assert builtin_unset(["unset", "A"], env, io.StringIO()) == 0
    assert env.get("A") is None
    assert env.get("B") == "2"


def test_unset_invalid():
    env = Environment(["A=1"])
    err = io.StringIO()
    assert builtin_unset(["unset", "A=1"], env, err) == 1
    assert env.get("A") == "1"
    assert "unset" in err.getvalue()


def test_run_builtin_exit_raises():
    with pytest.raises(ShellExit) as info:
        run_builtin(["exit"], Environment([]), io.StringIO(), io.StringIO())
    assert info.value.status == 0


def test_run_builtin_dispatches_echo():
    out = io.StringIO()
    assert run_builtin(["echo", "hi"], Environment([]), out, io.StringIO()) == 0
    assert out.getvalue() == "hi\n"


def test_run_builtin_unknown_does_nothing():
    out = io.StringIO()
    assert run_builtin(["ls"], Environment([]), out, io.StringIO()) == 0
    assert run_builtin([], Environment([]), out, io.StringIO()) == 0
    assert out.getvalue() == ""