"""Running one parsed command: in-shell builtins, redirections and programs."""

from __future__ import annotations

import contextlib
import os
import subprocess
import sys
from collections.abc import Callable

from toxicshell.builtins import change_dir, echo, print_env, pwd
from toxicshell.environment import Environment, ExportError
from toxicshell.lexer import clean_words
from toxicshell.session import InputMode, OutputMode, ShellState
from toxicshell.strutils import is_num

HEREDOC_FILE = ".ToxicShell_Temporal_File_Delim.tmp"

_EMPTY_COMMAND = (
    "\nToxicShell: command '' not "
    "found but can be installed with:\n\n"
    "apt install mailutils-mh  # version 1:3.7-2.1, or\n"
    "apt install meshio-tools  # version 4.0.4-1\n"
    "apt install mmh           # version 0.4-2\n"
    "apt install nmh           # version 1.7.1-6\n"
    "apt install termtris      # version 1.3-1\n"
    "\nAsk your administrator to install one of them.\n\n"
)

_PRINTING_BUILTINS = frozenset({"env", "export", "echo", "pwd"})
_FILE_MODE = 0o644


def _error(text: str) -> None:
    sys.stderr.write(text)
    sys.stderr.flush()


def _read_line(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def basename_of(path: str) -> str:
    """Return the part of ``path`` after its last ``/``."""
    return path.rpartition("/")[2]


def _find_in(dirs: list[str], name: str) -> str | None:
    candidates = (f"{directory}/{name}" for directory in dirs)
    return next((path for path in candidates if os.access(path, os.X_OK)), None)


class Executor:
    """Runs the command held by a ShellState against an Environment."""

    def __init__(self, env: Environment, state: ShellState) -> None:
        self.env = env
        self.state = state
        self.read_line: Callable[[str], str | None] = _read_line
        self.tracker = None
        self._pipe: tuple[int, int] | None = None
        self._original_in = self._dup(0)
        self._original_out = self._dup(1)

    @staticmethod
    def _dup(fd: int) -> int | None:
        try:
            return os.dup(fd)
        except OSError:
            return None

    def close(self) -> None:
        """Release the saved copies of standard input and output."""
        for fd in (self._original_in, self._original_out):
            if fd is not None:
                with contextlib.suppress(OSError):
                    os.close(fd)
        self._original_in = self._original_out = None

    def __enter__(self) -> Executor:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def execute(self) -> int:
        """Run the current command and return its status, also kept in the state."""
        state = self.state
        if state.words:
            if state.words[0] == "":
                _error(_EMPTY_COMMAND)
                state.status = 127
                return state.status
            handled = self._run_in_shell()
            if handled is not None:
                state.status = handled
                return handled
            state.status = 0
        if state.op_in == InputMode.HEREDOC:
            self.read_heredoc(self.read_line)
            if not state.words:
                state.status = 0
                return state.status
        self._run_and_wait()
        return state.status

    def _run_in_shell(self) -> int | None:
        words = self.state.words
        name = words[0]
        if name == "..":
            _error("ToxicShell: ..: command not found\n")
            return 127
        if name == "cd":
            return change_dir(self.env, words[1] if len(words) > 1 else None)
        if name == "exit":
            return self.builtin_exit()
        if name == "export":
            return 0 if self.export_all() else None
        if name == "unset":
            self.unset_all()
            return 0
        return None

    def builtin_exit(self) -> int:
        """Handle ``exit``: return 1 or 2 on a bad argument, otherwise leave the shell."""
        words = self.state.words
        args = words[1:]
        if len(words) > 2:
            _error("exit\nToxicShell: exit: too many arguments\n")
            self.state.status = 1
            return 1
        bad = next((arg for arg in args if not is_num(arg)), None)
        if bad is not None:
            _error(f"exit\nToxicShell: exit: {bad}: numeric argument required\n")
            self.state.status = 2
            return 2
        _error("exit\n")
        self.state.finish(args[0] if args else None)
        return self.state.status

    def export_all(self) -> bool:
        """Export every argument, stopping at the first invalid one.

        Returns False when there are no arguments to export.
        """
        args = self.state.words[1:]
        if not args:
            return False
        for argument in args:
            try:
                self.env.export(argument)
            except ExportError as exc:
                _error(f"{exc}\n")
                break
        return True

    def unset_all(self) -> None:
        """Remove every named variable."""
        for name in self.state.words[1:]:
            self.env.unset(name)

    def read_heredoc(self, read_line: Callable[[str], str | None]) -> str:
        """Read lines up to the delimiter into the here-document file.

        The command's input is switched to that file.  Returns the text read.
        """
        state = self.state
        lines = []
        while True:
            line = read_line("> ")
            if line is None:
                _error(
                    "ToxicShell: warning: document delimited with"
                    f"end-of-file (wanted '{state.delim}')\n"
                )
                break
            if line == state.delim:
                break
            lines.append(line + "\n")
        document = "".join(lines)
        state.op_in = InputMode.TEMPFILE
        state.file_in = HEREDOC_FILE
        fd = os.open(HEREDOC_FILE, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _FILE_MODE)
        with open(fd, "w", encoding="utf-8") as stream:
            stream.write(document)
        return document

    def resolve_program(self) -> tuple[str, list[str]] | None:
        """Find the program to run and its argument list.

        Path changes made while looking are kept out of the shell's own
        environment.  Returns None, after reporting why, when nothing is found.
        """
        argv = list(self.state.words)
        name = argv[0]
        env = Environment(self.env)
        if name.startswith("./"):
            return self._resolve_local(env, argv)
        if "/" in name:
            if name.startswith("/"):
                argv[0] = basename_of(name)
                if os.access(name, os.X_OK):
                    return name, argv
                _error(f"ToxicShell: {name}: No such file or directory\n")
                return None
            pwd_dir = env.get("PWD") or ""
            env.export(f"PATH+=:{pwd_dir}/{name}")
            argv[0] = "./" + basename_of(name)
            return self._resolve_local(env, argv)
        dirs = env.path_dirs()
        found = _find_in(dirs, name)
        if found is not None:
            return found, argv
        if dirs:
            _error(f"ToxicShell: command not found: {name}\n")
        else:
            _error(f"ToxicShell: {name}: No such file or directory\n")
        return None

    @staticmethod
    def _resolve_local(env: Environment, argv: list[str]) -> tuple[str, list[str]] | None:
        argv[0] = argv[0][2:]
        env.export("PATH+=:" + (env.get("PWD") or ""))
        found = _find_in(env.path_dirs(), argv[0])
        if found is not None:
            return found, argv
        _error(f"ToxicShell: command not found: {argv[0]}\n")
        return None

    def run_external(self) -> int:
        """Apply the redirections and run the command, returning its status.

        An unreadable input file gives 1 and an unknown command 127; a
        failed output redirection is reported but leaves the status at 0.
        """
        state = self.state
        with contextlib.ExitStack() as stack:
            stdin_fd = None
            if state.op_in in (InputMode.FILE, InputMode.TEMPFILE):
                try:
                    stdin_fd = os.open(state.file_in, os.O_RDONLY)
                except OSError:
                    _error(
                        f"ToxicShell: {state.file_in}: no such file or directory (1)\n"
                    )
                    return 1
                stack.callback(os.close, stdin_fd)
            try:
                stdout_fd = self._open_output(stack)
            except OSError:
                _error(f"ToxicShell: {state.file_out}: no such file or directory (2)\n")
                return 0
            return self._command(stdin_fd, stdout_fd)

    def _open_output(self, stack: contextlib.ExitStack) -> int | None:
        mode = self.state.op_out
        if mode == OutputMode.PIPE and self._pipe is not None:
            return self._pipe[1]
        flags = {
            OutputMode.TRUNCATE: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
            OutputMode.APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
        }.get(mode)
        if flags is None:
            return None
        fd = os.open(self.state.file_out, flags, _FILE_MODE)
        stack.callback(os.close, fd)
        return fd

    def _command(self, stdin_fd: int | None, stdout_fd: int | None) -> int:
        words = self.state.words
        if not words:
            return 0
        if words[0] in _PRINTING_BUILTINS:
            self._print_builtin(stdout_fd)
            return 0
        resolved = self.resolve_program()
        if resolved is None:
            return 127
        path, argv = resolved
        return self._spawn(path, argv, stdin_fd, stdout_fd)

    def _print_builtin(self, stdout_fd: int | None) -> None:
        words = self.state.words
        name = words[0]
        with contextlib.ExitStack() as stack:
            if stdout_fd is None:
                out = sys.stdout
            else:
                out = stack.enter_context(
                    open(stdout_fd, "w", encoding="utf-8", closefd=False)
                )
            if name == "env":
                print_env(self.env, words[1] if len(words) > 1 else None, out)
            elif name == "export":
                if len(words) == 1:
                    out.write("".join(line + "\n" for line in self.env.declarations()))
            elif name == "echo":
                echo(words[1:], out)
            else:
                pwd(out)
            out.flush()

    def _child_environment(self) -> dict[str, str]:
        pairs = (entry.partition("=") for entry in self.env)
        return {name: value for name, equal, value in pairs if equal}

    def _spawn(
        self, path: str, argv: list[str], stdin_fd: int | None, stdout_fd: int | None
    ) -> int:
        sys.stdout.flush()
        try:
            process = subprocess.Popen(
                argv,
                executable=path,
                env=self._child_environment(),
                stdin=stdin_fd,
                stdout=stdout_fd,
            )
        except OSError:
            return 0
        if self.tracker is not None:
            self.tracker.pid = process.pid
        try:
            code = process.wait()
        finally:
            if self.tracker is not None:
                self.tracker.pid = 0
        # A child killed by a signal is seen as having exited with status 0.
        return code if code >= 0 else 0

    def _run_and_wait(self) -> None:
        if self.state.op_out == OutputMode.PIPE:
            self._pipe = os.pipe()
        try:
            self.state.status = self.run_external()
        finally:
            self._after_child()

    def _after_child(self) -> None:
        if self.state.op_out == OutputMode.PIPE and self._pipe is not None:
            read_end, write_end = self._pipe
            os.dup2(read_end, 0)
            os.close(read_end)
            os.close(write_end)
            self._pipe = None
        elif self.state.op_out == OutputMode.NONE:
            if self._original_in is not None:
                os.dup2(self._original_in, 0)
            if self._original_out is not None:
                os.dup2(self._original_out, 1)


def run_words(env: Environment, state: ShellState) -> int:
    """Clean up the state's words, expand them and run the command."""
    state.drop_first_empty()
    state.words = clean_words(state.words, env, state.status)
    with Executor(env, state) as executor:
        return executor.execute()