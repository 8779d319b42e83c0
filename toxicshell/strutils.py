"""Small string and number helpers shared by the shell."""

from __future__ import annotations

from itertools import islice, zip_longest

_NUL = "\0"
_INT_BITS = 32


def _wrap_int(value: int) -> int:
    """Wrap a value to a signed 32-bit integer, as C ``int`` arithmetic does."""
    value &= (1 << _INT_BITS) - 1
    if value >= 1 << (_INT_BITS - 1):
        value -= 1 << _INT_BITS
    return value


def atoi(text: str) -> int:
    """Convert text to an integer.

    An optional leading ``-`` makes the result negative.  Every remaining
    character is treated as a digit without validation, so non-digit
    characters contribute their offset from ``'0'``.  The result wraps to a
    signed 32-bit integer.
    """
    sign = 1
    if text.startswith("-"):
        sign = -1
        text = text[1:]
    result = 0
    for char in text:
        result = _wrap_int(result * 10 + (ord(char) - ord("0")))
    return _wrap_int(result * sign)


def is_num(text: str) -> bool:
    """Return True when every character is an ASCII digit (True for empty text)."""
    return all("0" <= char <= "9" for char in text)


def itoa(number: int) -> str:
    """Render an integer as decimal text.

    Negative numbers are rendered with a leading zero in the place the sign
    would take, which is how the shell has always written them.
    """
    if number < 0:
        return "0" + str(-number)
    return str(number)


def count_words(text: str, sep: str) -> int:
    """Count the runs of characters in ``text`` that are not ``sep``."""
    previous = sep
    words = 0
    for char in text:
        if char != sep and previous == sep:
            words += 1
        previous = char
    return words


def split_words(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep``, dropping empty fields."""
    return [word for word in text.split(sep) if word]


def strcmp(first: str, second: str) -> int:
    """Compare two strings; return the difference of the first mismatching characters."""
    for a, b in zip_longest(first, second, fillvalue=_NUL):
        if b == _NUL or a != b:
            return ord(a) - ord(b)
    return 0


def strncmp(first: str, second: str, count: int) -> int:
    """Compare at most ``count`` characters, treating text past the end as NUL."""
    pairs = zip_longest(first, second, fillvalue=_NUL)
    padded = (
        pair
        for pair in (
            *pairs,
            *((_NUL, _NUL) for _ in range(max(count, 0))),
        )
    )
    for a, b in islice(padded, max(count, 0)):
        if a != b:
            return ord(a) - ord(b)
    return 0