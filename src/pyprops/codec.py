# -*- encoding: utf-8 -*-
# @File   : codec.py
# @Time   : 2026/09/21 21:02:44
# @Author : Kariko Lin

"""Raw (as written on disk) <=> cooked (what the application sees).

Keys and values share one decoder; they differ only in what the
encoder has to protect. A key must survive the separator scan,
so `=`, `:`, `#`, `!` and spaces in it get a backslash.
Values keep their spaces as they are, trailing ones included.
"""

from string import hexdigits

from .consts import (
    ESCAPES, ESCAPES_REV, KEY_SPECIALS,
    PRINTABLE_MAX, PRINTABLE_MIN, WHITESPACE
)

__all__ = [
    'PropertiesError', 'MalformedEscape',
    'unescape_key', 'unescape_value', 'escape_key', 'escape_value'
]


class PropertiesError(Exception):
    """Base of every error this package raises on purpose."""
    pass


class MalformedEscape(PropertiesError, ValueError):
    """A `\\uXXXX` that is not, or a backslash with nothing after it."""
    def __init__(
        self, message: str,
        pos: int | None = None, lineno: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.pos = pos
        self.lineno = lineno

    def __str__(self) -> str:
        if self.lineno is None:
            return self.message
        return f'line {self.lineno}: {self.message}'


def _is_high(c: str) -> bool:
    return '\ud800' <= c <= '\udbff'


def _is_low(c: str) -> bool:
    return '\udc00' <= c <= '\udfff'


def _join_surrogates(s: str) -> str:
    # astral chars are written as two `\uXXXX` halves; glue them back.
    if not any(_is_high(c) for c in s):
        return s
    ret: list[str] = []
    i = 0
    while i < len(s):
        if _is_high(s[i]) and i + 1 < len(s) and _is_low(s[i + 1]):
            ret.append(chr(
                0x10000
                + ((ord(s[i]) - 0xd800) << 10)
                + (ord(s[i + 1]) - 0xdc00)))
            i += 2
        else:
            ret.append(s[i])
            i += 1
    return ''.join(ret)


def _unescape(raw: str) -> str:
    ret: list[str] = []
    i, n = 0, len(raw)
    while i < n:
        c = raw[i]
        if c != '\\':
            ret.append(c)
            i += 1
            continue
        if i + 1 >= n:
            raise MalformedEscape('dangling backslash at end of input', i)
        c = raw[i + 1]
        i += 2
        if c in '\r\n':
            # line joint, swallow the break and the next line's indent.
            if c == '\r' and i < n and raw[i] == '\n':
                i += 1
            while i < n and raw[i] in WHITESPACE:
                i += 1
        elif c == 'u':
            digits = raw[i:i + 4]
            if len(digits) < 4 or any(d not in hexdigits for d in digits):
                raise MalformedEscape(
                    f'malformed \\uXXXX escape: "\\u{digits}"', i - 2)
            ret.append(chr(int(digits, 16)))
            i += 4
        else:
            ret.append(ESCAPES.get(c, c))
    return _join_surrogates(''.join(ret))


def _escape(cooked: str, specials: str) -> str:
    ret: list[str] = []
    for c in cooked:
        if c == '\\':
            ret.append('\\\\')
        elif c in ESCAPES_REV:
            ret.append('\\' + ESCAPES_REV[c])
        elif c in specials:
            ret.append('\\' + c)
        elif PRINTABLE_MIN <= ord(c) <= PRINTABLE_MAX:
            ret.append(c)
        elif ord(c) > 0xffff:
            v = ord(c) - 0x10000
            ret.append('\\u%04X\\u%04X' % (0xd800 + (v >> 10),
                                           0xdc00 + (v & 0x3ff)))
        else:
            ret.append('\\u%04X' % ord(c))
    return ''.join(ret)


def unescape_key(raw: str) -> str:
    return _unescape(raw)


def unescape_value(raw: str) -> str:
    """Decode a raw value, continuation joints included.

    Raises:
        MalformedEscape: on a broken `\\u` or a trailing lone backslash.
    """
    return _unescape(raw)


def escape_key(cooked: str) -> str:
    return _escape(cooked, KEY_SPECIALS)


def escape_value(cooked: str) -> str:
    return _escape(cooked, '')
