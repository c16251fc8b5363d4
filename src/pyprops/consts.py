# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2026/09/21 20:31:06
# @Author : Kariko Lin

from enum import Enum
from re import compile as regex


class CommentMark(str, Enum):
    HASH = '#'
    BANG = '!'


COMMENT_MARKS = ''.join(i.value for i in CommentMark)
DEFAULT_COMMENT_PREFIX = f'{CommentMark.HASH.value} '

KEY_SEPARATORS = '=:'
DEFAULT_SEPARATOR = '='
# line terminators are never part of it.
WHITESPACE = ' \t\f'

# `\x` => control char, both directions.
ESCAPES = {'t': '\t', 'n': '\n', 'r': '\r', 'f': '\f'}
ESCAPES_REV = {v: k for k, v in ESCAPES.items()}
# keys need these escaped to survive the separator scan.
KEY_SPECIALS = '=:#! '

# printable ASCII passes through, everything else goes `\uXXXX`.
PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7e

# flexible on read: `\r\n`, bare `\r` or `\n`.
LINEBREAK = regex(r'\r\n|\r|\n')
# marker plus the whitespace around it, e.g. `! ` in `! comment`.
COMMENT_PREFIX = regex(r'[ \t\f]*[#!][ \t\f]*')
