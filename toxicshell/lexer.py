"""Line normalisation, tokenising, quote removal and ``$`` expansion."""

from __future__ import annotations

from toxicshell.environment import Environment
from toxicshell.strutils import itoa

OPERATORS = frozenset({"<", "<<", "|", ">", ">>"})

_SINGLE = "'"
_DOUBLE = '"'
_NAME_STOPS = frozenset(" \t\n\v\f\r" + _SINGLE + _DOUBLE)
_OUTSIDE, _IN_SINGLE, _IN_DOUBLE = 0, 1, 2


class QuoteError(ValueError):
    """Raised when a line ends inside a quoted section."""


def _is_blank(char: str) -> bool:
    return char == " " or "\t" <= char <= "\r"


def normalize_line(line: str, echo: bool = False) -> str:
    """Collapse blanks outside quotes and put spaces around operators.

    Runs of blanks outside quotes become one space, leading and trailing
    blanks are dropped, and ``|``, ``<``, ``<<``, ``>`` and ``>>`` are set
    apart by spaces.  With ``echo`` true the quote characters that open and
    close a quoted section are dropped.  Raises QuoteError when a quote is
    left open.
    """
    out: list[str] = []
    pending_space = False
    inside = _OUTSIDE
    length = len(line)
    i = 0

    def following(pos: int) -> str:
        return line[pos + 1] if pos + 1 < length else ""

    def space_before(pos: int) -> None:
        nonlocal pending_space
        if pos > 0 and line[pos - 1] != " ":
            pending_space = False
            out.append(" ")

    def space_after(pos: int) -> None:
        nonlocal pending_space
        if following(pos):
            pending_space = False
            out.append(" ")

    while i < length:
        char = line[i]
        if _is_blank(char):
            if inside:
                out.append(char)
            elif pending_space:
                pending_space = False
                out.append(" ")
        elif char == "|" and not inside:
            space_before(i)
            out.append("|")
            space_after(i)
        elif char in "<>" and not inside:
            space_before(i)
            out.append(char)
            if following(i) == char:
                i += 1
                out.append(char)
            space_after(i)
        elif char in (_DOUBLE, _SINGLE):
            own = _IN_DOUBLE if char == _DOUBLE else _IN_SINGLE
            if inside == _OUTSIDE or inside == own:
                if not echo:
                    out.append(char)
                inside = own if inside == _OUTSIDE else _OUTSIDE
            else:
                out.append(char)
        else:
            pending_space = True
            out.append(char)
        i += 1

    if inside == _IN_DOUBLE:
        raise QuoteError("ToxicShell: dquote> error")
    if inside == _IN_SINGLE:
        raise QuoteError("ToxicShell: quote> error")
    if out and out[-1] == " ":
        out.pop()
    return "".join(out)


def next_token(line: str) -> tuple[str, str] | None:
    """Split the next token off ``line``.

    Returns ``(token, rest)``, or None when ``line`` is empty.  A quoted
    section is a token of its own, quotes included.  Raises QuoteError for
    a quote that is never closed.
    """
    if not line:
        return None
    i = 0
    length = len(line)
    while i < length and line[i] == " ":
        i += 1
    start = i
    while i < length and line[i] != " ":
        char = line[i]
        if char in (_DOUBLE, _SINGLE):
            if i > start:
                break
            close = line.find(char, i + 1)
            if close == -1:
                raise QuoteError(f"ToxicShell: unterminated {char} in token")
            i = close + 1
            break
        i += 1
    return line[start:i], line[i:]


def is_operator(token: str | None) -> bool:
    """Return True for a redirection or pipe operator, or for no token at all."""
    return token is None or token in OPERATORS


def only_space(text: str) -> bool:
    """Return True when ``text`` holds nothing but blanks."""
    return all(_is_blank(char) for char in text)


def strip_quotes(token: str) -> str:
    """Drop the first and last characters of a quoted token."""
    return token[1:-1]


def expand_dollars(text: str, env: Environment, status: int) -> str:
    """Replace ``$?`` with the status and ``$NAME`` with its value.

    A ``$`` followed by a space or the end stays as it is.  If the expansion
    comes out empty, the original text is returned unchanged.
    """
    parts: list[str] = []
    length = len(text)
    j = 0
    while j < length:
        char = text[j]
        if char != "$":
            parts.append(char)
            j += 1
            continue
        nxt = text[j + 1] if j + 1 < length else ""
        if nxt == "?":
            parts.append(itoa(status))
            j += 2
        elif nxt in ("", " "):
            parts.append("$")
            j += 1
        else:
            end = j + 1
            while end < length and text[end] not in _NAME_STOPS:
                end += 1
            parts.append(env.get(text[j + 1:end]) or "")
            j = end
    expanded = "".join(parts)
    return expanded if expanded else text


def clean_words(words: list[str], env: Environment, status: int) -> list[str]:
    """Remove surrounding quotes and expand ``$`` in each word.

    Single-quoted words lose their quotes only; double-quoted words lose
    their quotes and are expanded; other words are expanded.  Words of one
    character are left alone.
    """
    cleaned = []
    for word in words:
        if len(word) > 1:
            if word[0] == _SINGLE and word[-1] == _SINGLE:
                word = strip_quotes(word)
            elif word[0] == _DOUBLE and word[-1] == _DOUBLE:
                word = expand_dollars(strip_quotes(word), env, status)
            else:
                word = expand_dollars(word, env, status)
        cleaned.append(word)
    return cleaned