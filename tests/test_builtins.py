import io
import os
from pathlib import Path

import pytest

from toxicshell.builtins import change_dir, echo, is_n_flag, print_env, pwd
from toxicshell.environment import Environment


@pytest.mark.parametrize(
    "word, expected",
    [("-n", True), ("-nnnn", True), ("-", True), ("-na", False), ("n", False), ("", False)],
)
def test_is_n_flag(word, expected):
    assert is_n_flag(word) is expected


def test_echo_joins_with_spaces_and_newline():
    out = io.StringIO()
    echo(["hello", "world"], out)
    assert out.getvalue() == "hello world\n"


def test_echo_n_flags_suppress_newline():
    out = io.StringIO()
    echo(["-n", "-nn", "a", "-n"], out)
    assert out.getvalue() == "a -n"


def test_echo_without_arguments_prints_newline():
    out = io.StringIO()
    echo([], out)
    assert out.getvalue() == "\n"


def test_pwd_prints_current_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    pwd(out)
    text = out.getvalue()
    assert text.endswith("\n")
    assert Path(text[:-1]).resolve() == tmp_path.resolve()


def test_print_env_all_entries():
    env = Environment(["A=1", "B=2", "C"])
    out = io.StringIO()
    print_env(env, None, out)
    assert out.getvalue().splitlines() == ["A=1", "B=2", "C"]


def test_print_env_empty_name_prints_all():
    env = Environment(["A=1"])
    out = io.StringIO()
    print_env(env, "", out)
    assert out.getvalue() == "A=1\n"


def test_print_env_single_name():
    env = Environment(["A=1", "B=2"])
    out = io.StringIO()
    print_env(env, "B", out)
    assert out.getvalue() == "B=2\n"


def test_print_env_unknown_name():
    env = Environment(["A=1"])
    out = io.StringIO()
    print_env(env, "Z", out)
    assert out.getvalue() == "Z=(null)\n"


def test_change_dir_into_subdirectory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    sub = tmp_path / "sub"
    sub.mkdir()
    err = io.StringIO()
    assert change_dir(Environment([]), str(sub), err) == 0
    assert Path(os.getcwd()).resolve() == sub.resolve()
    assert err.getvalue() == ""


def test_change_dir_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    err = io.StringIO()
    assert change_dir(Environment([]), str(tmp_path / "missing"), err) == -1
    assert err.getvalue() == "ToxicShell: No such directory\n"
    assert Path(os.getcwd()).resolve() == tmp_path.resolve()


def test_change_dir_into_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "plain"
    target.write_text("x")
    err = io.StringIO()
    assert change_dir(Environment([]), str(target), err) == -1
    assert err.getvalue() == "ToxicShell: Not a directory\n"


def test_change_dir_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(tmp_path)
    env = Environment([f"HOME={home}"])
    assert change_dir(env, None, io.StringIO()) == 0
    assert Path(os.getcwd()).resolve() == home.resolve()


def test_change_dir_without_home_does_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    err = io.StringIO()
    assert change_dir(Environment(["A=1"]), None, err) == 0
    assert Path(os.getcwd()).resolve() == tmp_path.resolve()
    assert err.getvalue() == ""