"""The builtins that only print or change directory: echo, pwd, env and cd."""

from __future__ import annotations

import errno
import os
import sys
from collections.abc import Sequence
from typing import TextIO

from toxicshell.environment import Environment

_CHDIR_MESSAGES = {
    errno.EACCES: "ToxicShell: Permision denied\n",
    errno.ELOOP: "ToxicShell: Loop encountered in symbolic links\n",
    errno.ENAMETOOLONG: "ToxicShell: Length exceeds the limits\n",
    errno.ENOENT: "ToxicShell: No such directory\n",
    errno.ENOTDIR: "ToxicShell: Not a directory\n",
}


def is_n_flag(word: str) -> bool:
    """Return True for an echo option made of ``-`` followed only by ``n``."""
    return word[:1] == "-" and all(char == "n" for char in word[1:])


def echo(args: Sequence[str], out: TextIO | None = None) -> None:
    """Print the arguments separated by spaces.

    Leading ``-n`` style options suppress the trailing newline.
    """
    out = sys.stdout if out is None else out
    words = list(args)
    newline = True
    while words and is_n_flag(words[0]):
        newline = False
        words.pop(0)
    out.write(" ".join(words))
    if newline:
        out.write("\n")


def pwd(out: TextIO | None = None) -> None:
    """Print the current working directory."""
    out = sys.stdout if out is None else out
    out.write(os.getcwd() + "\n")


def print_env(
    env: Environment, name: str | None = None, out: TextIO | None = None
) -> None:
    """Print every entry, or ``NAME=value`` for one name when it is given.

    An unknown name prints as ``NAME=(null)``.
    """
    out = sys.stdout if out is None else out
    if name:
        value = env.get(name)
        out.write(f"{name}={'(null)' if value is None else value}\n")
        return
    for entry in env:
        out.write(entry + "\n")


def _with_slash(path: str) -> str:
    return path if path.endswith("/") else path + "/"


def change_dir(
    env: Environment, directory: str | None = None, err: TextIO | None = None
) -> int:
    """Change directory to ``directory`` or to ``HOME``.

    Returns 0 on success and -1 on failure, after writing a message for the
    known causes to ``err``.  Without a directory and without ``HOME`` it
    does nothing and returns 0.
    """
    err = sys.stderr if err is None else err
    if directory is None:
        directory = env.get("HOME")
        if directory is None:
            return 0
    try:
        os.chdir(_with_slash(directory))
    except OSError as exc:
        message = _CHDIR_MESSAGES.get(exc.errno)
        if message:
            err.write(message)
        return -1
    return 0