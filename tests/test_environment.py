import pytest

from toxicshell.environment import (
    Environment,
    ExportError,
    initial_environment,
    is_valid_identifier_start,
    name_of,
)


@pytest.fixture
def env():
    return Environment(["HOME=/home/user", "PATH=/usr/bin:/bin", "EMPTY=", "BARE"])


def test_get_returns_value(env):
    assert env.get("HOME") == "/home/user"
    assert env.get("EMPTY") == ""


def test_get_missing_and_bare(env):
    assert env.get("NOPE") is None
    assert env.get("BARE") is None


def test_get_does_not_match_prefix_names():
    e = Environment(["HOMEDIR=/x", "HOME=/y"])
    assert e.get("HOME") == "/y"


def test_get_returns_first_match():
    e = Environment(["A=first", "A=second"])
    assert e.get("A") == "first"


def test_append_and_remove_at(env):
    env.append("NEW=1")
    assert list(env)[-1] == "NEW=1"
    env.remove_at(0)
    assert "HOME=/home/user" not in list(env)
    assert len(env) == 4


def test_remove_at_out_of_range(env):
    with pytest.raises(IndexError):
        env.remove_at(10)


def test_constructor_copies_entries():
    source = ["A=1"]
    e = Environment(source)
    e.append("B=2")
    assert source == ["A=1"]


def test_unset_removes_entry(env):
    env.unset("HOME")
    assert env.get("HOME") is None
    assert len(env) == 3


def test_unset_bare_entry(env):
    env.unset("BARE")
    assert "BARE" not in list(env)


def test_unset_missing_is_noop(env):
    before = list(env)
    env.unset("NOPE")
    assert list(env) == before


def test_unset_only_first_match():
    e = Environment(["A=1", "A=2"])
    e.unset("A")
    assert list(e) == ["A=2"]


def test_export_new_variable_appended(env):
    env.export("NEW=value")
    assert list(env)[-1] == "NEW=value"
    assert env.get("NEW") == "value"


def test_export_replaces_in_place(env):
    env.export("HOME=/tmp")
    assert list(env)[0] == "HOME=/tmp"
    assert len(env) == 4


def test_export_bare_name_new(env):
    env.export("FRESH")
    assert list(env)[-1] == "FRESH"
    assert env.get("FRESH") is None


def test_export_bare_name_existing_drops_value(env):
    env.export("HOME")
    assert list(env)[0] == "HOME"
    assert env.get("HOME") is None


def test_export_concat_existing():
    e = Environment(["A=1"])
    e.export("A+=x")
    assert e.get("A") == "1" + "x"


def test_export_concat_on_bare_entry():
    e = Environment(["A"])
    e.export("A+=x")
    assert list(e) == ["A=x"]


def test_export_concat_new_variable():
    e = Environment([])
    e.export("A+=x")
    assert list(e) == ["A=x"]


def test_export_concat_drops_every_plus():
    e = Environment([])
    e.export("A+=b+c")
    assert e.get("A") == "bc"


@pytest.mark.parametrize("argument", ["1A=x", "=x", "", "-A"])
def test_export_invalid_raises(env, argument):
    before = list(env)
    with pytest.raises(ExportError) as info:
        env.export(argument)
    assert info.value.argument == argument
    assert list(env) == before


def test_export_error_message():
    err = ExportError("9x")
    assert str(err) == "ToxicShell: export: `9x': not a valid identifier"


def test_export_path_updates_dirs(env):
    env.export("PATH=/opt/bin::/sbin")
    assert env.path_dirs() == ["/opt/bin", "/sbin"]


def test_export_path_concat(env):
    env.export("PATH+=:/opt")
    assert env.path_dirs() == ["/usr/bin", "/bin", "/opt"]


def test_path_dirs_after_unset(env):
    assert env.path_dirs() == ["/usr/bin", "/bin"]
    env.unset("PATH")
    assert env.path_dirs() == []


def test_path_dirs_empty_value():
    assert Environment(["PATH="]).path_dirs() == []


def test_declarations_format():
    e = Environment(["B=2", "A=", "C"])
    assert e.declarations() == ['declare -x A=""', 'declare -x B="2"', "declare -x C"]


def test_declarations_sorted_by_name_and_unchanged_env():
    entries = ["Z=1", "A_B=2", "A=3", "_x=4"]
    e = Environment(entries)
    lines = e.declarations()
    names = [line.split()[2].partition("=")[0] for line in lines]
    assert names == sorted(names)
    assert len(lines) == len(entries)
    assert list(e) == entries


@pytest.mark.parametrize("char", ["a", "z", "A", "Z", "_"])
def test_valid_identifier_start(char):
    assert is_valid_identifier_start(char) is True


@pytest.mark.parametrize("char", ["0", "9", "=", "-", "", " ", "é"])
def test_invalid_identifier_start(char):
    assert is_valid_identifier_start(char) is False


@pytest.mark.parametrize(
    "entry, name", [("A=1", "A"), ("A", "A"), ("A=b=c", "A"), ("=x", "")]
)
def test_name_of(entry, name):
    assert name_of(entry) == name


def test_initial_environment_bumps_shlvl_and_drops_underscore():
    source = ["SHLVL=2", "_=/usr/bin/env", "HOME=/h"]
    e = initial_environment(source)
    assert e.get("SHLVL") == "3"
    assert e.get("_") is None
    assert list(e)[0].startswith("SHLVL=")
    assert e.get("HOME") == "/h"
    assert source == ["SHLVL=2", "_=/usr/bin/env", "HOME=/h"]


def test_initial_environment_without_shlvl():
    e = initial_environment(["HOME=/h"])
    assert e.get("SHLVL") == "1"
    assert list(e)[-1] == "SHLVL=1"