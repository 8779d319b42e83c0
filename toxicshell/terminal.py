"""Signal handling for the prompt and the foreground child, and terminal modes."""

from __future__ import annotations

import os
import signal
import sys
from typing import TextIO

try:
    import readline
except ImportError:  # pragma: no cover - platforms without readline
    readline = None

try:
    import termios
except ImportError:  # pragma: no cover - platforms without termios
    termios = None

PROMPT = "\001\033[32m\002<Toxic\001\033[33m\002Shell☠️> \001\033[0m\002"


def _line_buffer() -> str:
    return readline.get_line_buffer() if readline is not None else ""


class ForegroundTracker:
    """Remembers the foreground child and reacts to Ctrl-C and Ctrl-\\."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = sys.stdout if out is None else out
        self.pid = 0

    def handle_int(self, signum, frame) -> None:
        """Stop the foreground child, or redraw an empty prompt."""
        if self.pid:
            os.kill(self.pid, signal.SIGQUIT)
            self.out.write("^C\n")
        else:
            self.out.write("\r" + PROMPT + _line_buffer() + "^C\n")
            self.out.flush()
            if readline is not None:
                readline.redisplay()
        self.pid = 0

    def handle_quit(self, signum, frame) -> None:
        """Stop the foreground child, or just redraw the prompt and line."""
        if self.pid:
            os.kill(self.pid, signal.SIGQUIT)
            self.out.write("^\\Quit (core dumped)\n")
        else:
            self.out.write("\r" + PROMPT + _line_buffer())
        self.out.flush()
        self.pid = 0

    def install(self) -> None:
        """Make this tracker the handler of SIGINT and SIGQUIT."""
        signal.signal(signal.SIGINT, self.handle_int)
        signal.signal(signal.SIGQUIT, self.handle_quit)


def setup_terminal(fd: int = 0) -> list | None:
    """Stop the terminal echoing control characters.

    Returns the previous attributes, or None when ``fd`` is not a terminal.
    """
    if termios is None:
        return None
    try:
        original = termios.tcgetattr(fd)
        changed = list(original)
        changed[3] &= ~termios.ECHOCTL
        termios.tcsetattr(fd, termios.TCSANOW, changed)
    except (termios.error, OSError):
        return None
    return original


def restore_terminal(fd: int = 0, attributes: list | None = None) -> None:
    """Put back attributes saved by setup_terminal; None does nothing."""
    if termios is None or attributes is None:
        return
    try:
        termios.tcsetattr(fd, termios.TCSANOW, attributes)
    except (termios.error, OSError):
        pass