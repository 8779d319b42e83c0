"""The shell's own copy of the process environment and the export/unset builtins."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from toxicshell.strutils import atoi, itoa, split_words


class ExportError(ValueError):
    """Raised when ``export`` is given a name that is not a valid identifier."""

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(
            f"ToxicShell: export: `{argument}': not a valid identifier"
        )


def is_valid_identifier_start(char: str) -> bool:
    """Return True when ``char`` may start a variable name (ASCII letter or ``_``)."""
    return len(char) == 1 and (
        "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"
    )


def name_of(entry: str) -> str:
    """Return the part of an environment entry before its first ``=``."""
    return entry.partition("=")[0]


def _with_equal(entry: str) -> str:
    """Return the entry with an ``=`` appended when it has none."""
    return entry if "=" in entry else entry + "="


class Environment:
    """An ordered list of ``NAME=value`` (or bare ``NAME``) entries."""

    def __init__(self, entries: Iterable[str]) -> None:
        self.entries: list[str] = list(entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, name: str) -> str | None:
        """Return the value of the first entry named ``name``, or None."""
        key = name + "="
        for entry in self.entries:
            if entry.startswith(key):
                return entry[len(key):]
        return None

    def append(self, entry: str) -> None:
        """Add an entry at the end."""
        self.entries.append(entry)

    def remove_at(self, index: int) -> str:
        """Remove the entry at ``index`` and return it."""
        return self.entries.pop(index)

    def unset(self, name: str) -> None:
        """Remove the first entry whose name is ``name``; do nothing if none is."""
        key = name + "="
        for position, entry in enumerate(self.entries):
            if _with_equal(entry).startswith(key):
                self.remove_at(position)
                return

    def export(self, argument: str) -> None:
        """Apply one ``export`` argument: ``NAME``, ``NAME=value`` or ``NAME+=value``.

        ``NAME+=value`` appends to an existing value; every ``+`` in such an
        argument is dropped.  A bare ``NAME`` replaces an existing entry with
        the bare name.  Raises ExportError for an invalid name.
        """
        if not is_valid_identifier_start(argument[:1]):
            raise ExportError(argument)

        equal = argument.find("=")
        concat = False
        if equal > 0 and argument[equal - 1] == "+":
            argument = argument.replace("+", "")
            equal = argument.index("=")
            concat = True
        if equal == -1:
            equal = len(argument)

        key = argument[:equal] + "="
        for position, entry in enumerate(self.entries):
            if not _with_equal(entry).startswith(key):
                continue
            if concat:
                self.entries[position] = _with_equal(entry) + argument[equal + 1:]
            else:
                self.entries[position] = argument
            return
        self.append(argument)

    def declarations(self) -> list[str]:
        """Return the ``declare -x`` lines for all entries, sorted by name."""
        lines = []
        for entry in sorted(self.entries, key=name_of):
            name, equal, value = entry.partition("=")
            if value:
                lines.append(f'declare -x {name}="{value}"')
            elif equal:
                lines.append(f'declare -x {name}=""')
            else:
                lines.append(f"declare -x {name}")
        return lines

    def path_dirs(self) -> list[str]:
        """Return the non-empty directories listed in ``PATH``."""
        path = self.get("PATH")
        if path is None:
            return []
        return split_words(path, ":")


def initial_environment(entries: Iterable[str]) -> Environment:
    """Build the shell's environment: bump ``SHLVL`` and drop ``_``."""
    env = Environment(entries)
    level = atoi(env.get("SHLVL") or "") + 1
    env.export("SHLVL=" + itoa(level))
    env.unset("_")
    return env