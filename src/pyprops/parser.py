# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2026/09/22 01:04:45
# @Author : Kariko Lin

"""Reading and writing `.properties` text.

Supported lines:

    ```properties
    # comment, `!` works too
    key = value
    key:value
    key value
    multiline = one \\
        two
    \\ key\\ with\\ spaces = \\u1234
    ```

Reading never guesses: a malformed escape rejects the whole stream
instead of truncating it. Writing puts back the raw text of every
entry, so whatever was not modified comes out as it came in.
"""

import logging
import warnings
from collections.abc import Mapping
from io import StringIO, TextIOBase
from typing import Any

import chardet
import yaml

from .abstract import FileHandler
from .codec import (
    MalformedEscape, PropertiesError, unescape_key, unescape_value
)
from .consts import COMMENT_MARKS, KEY_SEPARATORS, LINEBREAK, WHITESPACE
from .model import Properties, PropertyEntry, as_comment

__all__ = [
    'PropertiesParser', 'PropertiesYamlParser',
    'load', 'loads', 'dump', 'dumps'
]


def _continues(line: str) -> bool:
    # odd count of trailing backslashes, the last one isn't escaped.
    return (len(line) - len(line.rstrip('\\'))) % 2 == 1


def _scan_entry(text: str, lineno: int) -> PropertyEntry:
    n = len(text)
    i = n - len(text.lstrip(WHITESPACE))
    begin = i
    # key ends at the first unescaped separator or whitespace.
    while i < n and text[i] not in KEY_SEPARATORS + WHITESPACE:
        if text.startswith('\\\n', i):
            # key goes on after the joint, minus the next line's indent.
            i += 2
            while i < n and text[i] in WHITESPACE:
                i += 1
            continue
        i += 2 if text[i] == '\\' else 1
    i = min(i, n)
    raw_key, sep_begin = text[begin:i], i
    while i < n and text[i] in WHITESPACE:
        i += 1
    if i < n and text[i] in KEY_SEPARATORS:
        i += 1
        while i < n and text[i] in WHITESPACE:
            i += 1
    try:
        return PropertyEntry(
            key=unescape_key(raw_key), raw_key=raw_key,
            value=unescape_value(text[i:]), raw_value=text[i:],
            indent=text[:begin], separator=text[sep_begin:i])
    except MalformedEscape as e:
        e.lineno = lineno
        raise


class PropertiesParser(FileHandler[Properties]):
    def __init__(
        self, filename: str,
        encoding: str | None = 'utf-8', *,
        newline: str = '\n'
    ) -> None:
        super().__init__(filename, encoding)
        self._newline = newline

    @staticmethod
    def readstream(
        buf: TextIOBase, ins: Properties | None = None
    ) -> Properties:
        """读取解码好的字符串流。

        Entries go into `ins` if given, a fresh `Properties` otherwise.
        A comment block right above a key belongs to that key; the one
        opening the stream and parted from the rest by a blank line is
        the header. Comments after the last entry belong to nothing and
        get dropped, unless there is no entry at all.

        Raises:
            MalformedEscape: with `lineno` of the entry that broke.
        """
        if ins is None:
            ins = Properties()
        lines = LINEBREAK.split(buf.read())
        terminated = lines[-1] == ''
        if terminated:
            lines.pop()
        # only the very first block may become the header.
        can_head = not ins.header and len(ins) == 0
        comment: list[str] = []
        gap: list[str] = []
        last: str | None = None
        cur = 0
        while cur < len(lines):
            line = lines[cur]
            cur += 1
            stripped = line.lstrip(WHITESPACE)
            if not stripped:
                if comment and can_head:
                    ins.header = comment
                else:
                    gap.extend(comment)
                comment, can_head = [], False
                gap.append(line)
                continue
            if stripped[0] in COMMENT_MARKS:
                comment.append(line)
                continue

            lineno, logical = cur, [line]
            while _continues(logical[-1]):
                if cur < len(lines):
                    logical.append(lines[cur])
                    cur += 1
                elif terminated:
                    # `\` ending the final line joins the empty rest.
                    logical.append('')
                    terminated = False
                else:
                    break
            entry = _scan_entry('\n'.join(logical), lineno)
            entry.comment, entry.prefix = comment, gap
            comment, gap, can_head = [], [], False
            last = entry.key
            if ins._load(entry) is not None:
                warnings.warn(
                    f'Line {lineno}: "{entry.key}" is already defined, '
                    'the earlier value is replaced in place.')

        if last is not None:
            ins._unterminated = (
                None if terminated or comment or gap else last)
        if comment and can_head:
            ins.header = comment
        elif comment or gap:
            logging.debug(
                f'Dropped {len(comment) + len(gap)} trailing line(s) '
                'owned by no key.')
        return ins

    @staticmethod
    def writestream(
        ins: Properties, buf: TextIOBase, *header: str,
        newline: str = '\n'
    ) -> None:
        """Write `ins` out, raw texts as they are.

        `header` replaces the stored header for this write only.
        The last entry goes without a line break if it was read so
        and nothing has been added after it.
        """
        for i in as_comment(header) if header else ins.header:
            buf.write(i + newline)
        entries = list(ins._entries())
        for entry in entries:
            for i in entry.prefix:
                buf.write(i + newline)
            for i in entry.comment:
                buf.write(i + newline)
            line = (f'{entry.indent}{entry.raw_key}'
                    f'{entry.separator}{entry.raw_value}')
            buf.write(line.replace('\n', newline))
            if entry is not entries[-1] or not ins._ends_open():
                buf.write(newline)

    @staticmethod
    def _decode_file(filename: str) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        if codec['encoding'] is None or codec['confidence'] < 0.8:
            # classic `.properties` charset, decodes any byte.
            codec = {'encoding': 'latin-1'}

        # fallbacks
        try:
            buf = raw.decode(codec['encoding'])
        except (UnicodeDecodeError, LookupError):
            codec = {'encoding': 'latin-1'}
            buf = raw.decode('latin-1')
        logging.warning(f'{filename} read as {codec["encoding"]}.')
        return StringIO(buf, newline='')

    def read(self, defaults: Properties | None = None) -> Properties:
        """读取`PropertiesParser`实例指定的文件。

        Falls back on `chardet` if the file does not decode
        with the given encoding.
        """
        try:
            # line breaks are ours to handle, no translation.
            with open(self._fn, 'r', encoding=self._codec, newline='') as fp:
                return self.readstream(fp, Properties(defaults))
        except UnicodeDecodeError:
            logging.warning(
                f'Failed to read {self._fn} as {self._codec}, '
                'guessing the encoding.')
            return self.readstream(
                self._decode_file(self._fn), Properties(defaults))

    def write(self, instance: Properties, *header: str) -> None:
        with open(self._fn, 'w', encoding=self._codec, newline='') as fp:
            self.writestream(instance, fp, *header, newline=self._newline)

    def __str__(self) -> str:
        return 'Properties: ' + super().__str__()


class PropertiesYamlParser(FileHandler[Properties]):
    """Swap the cooked pairs with a YAML document.

    With `layered=True`, dotted keys nest:

        ```yaml
        server:
          port: '8080'  # from `server.port=8080`
        ```

    Only values travel; comments other than the header, raw forms and
    defaults stay behind.
    """
    def __init__(
        self, filename: str,
        encoding: str = 'utf-8', *,
        layered: bool = True
    ) -> None:
        super().__init__(filename, encoding)
        self._layered = layered

    @staticmethod
    def to_layers(pairs: Mapping[str, str]) -> dict[str, Any]:
        """Nest `a.b.c = v` into `{a: {b: {c: v}}}`.

        Raises:
            PropertiesError: if a key is both a value and a branch,
            like `a = 1` along with `a.b = 2`.
        """
        layers: dict[str, Any] = {}
        for key, val in pairs.items():
            *path, leaf = key.split('.')
            cur = layers
            for word in path:
                cur = cur.setdefault(word, {})
                if not isinstance(cur, dict):
                    raise PropertiesError(
                        f'"{key}" nests under a key holding a value.')
            if leaf in cur:
                raise PropertiesError(
                    f'"{key}" holds a value and sub keys at once.')
            cur[leaf] = val
        return layers

    @staticmethod
    def from_layers(
        layers: Mapping[Any, Any], prefix: str = ''
    ) -> dict[str, str]:
        ret: dict[str, str] = {}
        for k, v in layers.items():
            key = f'{prefix}.{k}' if prefix else str(k)
            if isinstance(v, Mapping):
                ret.update(PropertiesYamlParser.from_layers(v, key))
            elif v is None:
                ret[key] = ''
            elif isinstance(v, bool):
                ret[key] = 'true' if v else 'false'
            elif isinstance(v, list):
                ret[key] = ','.join(str(i) for i in v)
            else:
                ret[key] = str(v)
        return ret

    def read(self, defaults: Properties | None = None) -> Properties:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            src = yaml.safe_load(fp)
        if src is None:
            src = {}
        if not isinstance(src, Mapping):
            raise PropertiesError(
                f'{self._fn}: expect a mapping on top, got {type(src)}.')
        return Properties.from_mapping(self.from_layers(src), defaults)

    def write(self, instance: Properties, indent: int = 2) -> None:
        pairs = instance.to_dict()
        with open(self._fn, 'w', encoding=self._codec) as fp:
            for i in instance.header:
                # `!` is a YAML tag, re-mark as `#`.
                fp.write(f'# {i.lstrip(WHITESPACE)[1:].strip()}\n')
            yaml.safe_dump(
                self.to_layers(pairs) if self._layered else pairs,
                fp,
                allow_unicode=True,
                sort_keys=False,
                default_flow_style=False,
                indent=indent)


def load(buf: TextIOBase, defaults: Properties | None = None) -> Properties:
    return PropertiesParser.readstream(buf, Properties(defaults))


def loads(text: str, defaults: Properties | None = None) -> Properties:
    return load(StringIO(text, newline=''), defaults)


def dump(
    ins: Properties, buf: TextIOBase, *header: str, newline: str = '\n'
) -> None:
    PropertiesParser.writestream(ins, buf, *header, newline=newline)


def dumps(ins: Properties, *header: str, newline: str = '\n') -> str:
    buf = StringIO(newline='')
    dump(ins, buf, *header, newline=newline)
    return buf.getvalue()
