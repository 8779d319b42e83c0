# toxicshell

The pieces of a small Unix shell as a Python library: line normalisation,
tokenising with single and double quotes, `$NAME` and `$?` expansion, the
shell's own environment with `export` and `unset`, the printing builtins,
and running a prepared command with its redirections as a builtin or as a
program found on `PATH`.

Python 3.10 or newer on a POSIX system. No third-party packages are needed.

## Environment (`toxicshell.environment`)

`Environment` is an ordered list of `NAME=value` (or bare `NAME`) entries.

```python
from toxicshell.environment import Environment, initial_environment

env = Environment(["HOME=/home/user", "PATH=/usr/bin:/bin"])
env.get("HOME")            # "/home/user"
env.export("GREETING=hi")
env.export("GREETING+=!")  # appends: GREETING=hi!
env.export("FLAG")         # bare name, no "="
env.unset("GREETING")
env.path_dirs()            # ["/usr/bin", "/bin"]
env.declarations()         # sorted `declare -x ...` lines
```

- `export` raises `ExportError` (a `ValueError`) when the argument does not
  start with an ASCII letter or `_`. In a `NAME+=value` argument every `+`
  is dropped.
- `append(entry)` and `remove_at(index)` change the list directly.
- `is_valid_identifier_start(char)` and `name_of(entry)` are the helpers
  behind these checks.
- `initial_environment(entries)` builds a new shell's environment: `SHLVL`
  raised by one and `_` removed.

## Lines and words (`toxicshell.lexer`)

- `normalize_line(line, echo=False)` collapses blanks outside quotes, drops
  leading and trailing blanks and sets `|`, `<`, `<<`, `>`, `>>` apart by
  spaces. With `echo=True` the opening and closing quotes are dropped.
- `next_token(line)` returns `(token, rest)`, or `None` for an empty line;
  a quoted section is a token of its own.
- `is_operator(token)`, `only_space(text)`, `strip_quotes(token)`.
- `expand_dollars(text, env, status)` replaces `$?` and `$NAME`; if the
  result is empty the original text is returned.
- `clean_words(words, env, status)` removes surrounding quotes (single
  quotes: no expansion) and expands the rest.

An unterminated quote raises `QuoteError`.

## Builtins (`toxicshell.builtins`)

`echo(args, out)` (any number of `-n`, `-nn`, ... flags, see `is_n_flag`),
`pwd(out)`, `print_env(env, name, out)` (all entries, or `NAME=value` for
one name, `NAME=(null)` when unknown) and `change_dir(env, directory, err)`,
which goes to `HOME` without a directory and returns 0 or -1.

## Command state and execution

`toxicshell.session.ShellState` holds the words of one command, its
redirections (`op_in` as an `InputMode`, `file_in`, `delim`; `op_out` as an
`OutputMode`, `file_out`) and the last status. `add_word`, `clear`,
`drop_first_empty` and `finish` work on it; `finish(code)` restores the
terminal and raises `ShellExit`, a `SystemExit` carrying the status.
`create_file(filename, mode)` creates a file truncated (mode 1) or kept
(mode 2).

`toxicshell.executor.run_words(env, state)` cleans and expands the words
and runs them through an `Executor`:

- `cd`, `exit`, `export NAME...`, `unset` and `..` are handled in the shell;
  `exit` with too many arguments gives status 1, a non-numeric one 2.
- `env`, `export` without arguments, `echo` and `pwd` print to the
  command's output.
- Other names are looked up on `PATH`; `./prog` and relative paths are also
  looked up under `PWD`; absolute paths are run directly. An unknown
  command gives status 127.
- `InputMode.FILE` reads from `file_in`; `InputMode.HEREDOC` reads lines
  until `delim` (prompt `> `) into `.ToxicShell_Temporal_File_Delim.tmp` in
  the current directory and feeds that file to the command.
- `OutputMode.TRUNCATE` and `OutputMode.APPEND` write to `file_out`;
  `OutputMode.PIPE` sends the output into a pipe whose read end then
  becomes the shell's standard input.

`toxicshell.terminal` has `ForegroundTracker`, whose `install()` makes it
the SIGINT and SIGQUIT handler, and `setup_terminal` / `restore_terminal`,
which turn off and restore echoing of control characters.

## String helpers (`toxicshell.strutils`)

```python
from toxicshell.strutils import atoi, itoa, is_num, split_words

atoi("-12")                         # -12
itoa(42)                            # "42"
is_num("123")                       # True
split_words("/usr/bin::/bin", ":")  # ["/usr/bin", "/bin"]
```

`count_words`, `strcmp` and `strncmp` are there as well.

## What it does not do

The package has no command to start and no interactive prompt loop: nothing
reads lines from a prompt and nothing turns the operator tokens `<`, `<<`,
`>`, `>>` and `|` into a `ShellState`'s redirection fields. A caller who
wants a working shell fills in the words and redirections of each command
and calls `run_words`.