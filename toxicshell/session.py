"""Per-line command state of the shell and leaving the shell."""

from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass, field
from enum import IntEnum

from toxicshell.strutils import atoi
from toxicshell.terminal import restore_terminal

MAX_WORDS = 1024


class InputMode(IntEnum):
    """Where a command's standard input comes from."""

    NONE = 0
    FILE = 1
    HEREDOC = 2
    TEMPFILE = 4


class OutputMode(IntEnum):
    """Where a command's standard output goes."""

    NONE = 0
    TRUNCATE = 1
    APPEND = 2
    PIPE = 3


class ShellExit(SystemExit):
    """Raised to leave the shell; ``status`` is the value the shell exits with."""

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(status & 0xFF)


@dataclass
class ShellState:
    """The words and redirections of the command being built, and the last status."""

    words: list[str] = field(default_factory=list)
    line: str = ""
    op_in: InputMode = InputMode.NONE
    file_in: str = ""
    delim: str = ""
    op_out: OutputMode = OutputMode.NONE
    file_out: str = ""
    status: int = 0
    terminal_attributes: list | None = None

    def clear(self) -> None:
        """Forget the words and redirections of the previous command."""
        self.words = []
        self.op_in = InputMode.NONE
        self.file_in = ""
        self.delim = ""
        self.op_out = OutputMode.NONE
        self.file_out = ""

    def drop_first_empty(self) -> None:
        """End the word list at its first empty word."""
        if "" in self.words:
            self.words = self.words[: self.words.index("")]

    def add_word(self, token: str) -> None:
        """Put a token in the first empty slot, or after the last word.

        Raises OverflowError when the command already holds the maximum
        number of words.
        """
        if "" in self.words:
            self.words[self.words.index("")] = token
        elif len(self.words) < MAX_WORDS:
            self.words.append(token)
        else:
            raise OverflowError(f"a command holds at most {MAX_WORDS} words")

    def finish(self, code: str | None = None) -> None:
        """Restore the terminal and leave the shell.

        With ``code`` the exit status becomes its numeric value; otherwise
        the last status is kept.  Always raises ShellExit.
        """
        restore_terminal(0, self.terminal_attributes)
        if code is not None:
            self.status = atoi(code)
        raise ShellExit(self.status)


def create_file(filename: str, mode: int) -> None:
    """Create ``filename``, truncating it for mode 1 and keeping it for mode 2."""
    flags = {
        OutputMode.TRUNCATE: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
        OutputMode.APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
    }.get(mode)
    if flags is None:
        return
    with contextlib.suppress(OSError):
        os.close(os.open(filename, flags, 0o644))