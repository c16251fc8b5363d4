# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2026/09/22 00:57:10
# @Author : Kariko Lin

"""
Ordered `.properties` document, with comments and defaults support.

Each entry keeps both the cooked text and the raw text it was read as,
so a document that was only read can be written back byte by byte.
"""

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field, replace
from typing import Sequence

from .codec import (
    PropertiesError,
    escape_key, escape_value, unescape_key, unescape_value
)
from .consts import (
    COMMENT_MARKS, COMMENT_PREFIX, DEFAULT_COMMENT_PREFIX,
    DEFAULT_SEPARATOR, LINEBREAK, WHITESPACE
)


class DuplicateKeyError(PropertiesError):
    """Two entries under one key. Means a bug here, not a bad input."""
    pass


@dataclass(kw_only=True)
class PropertyEntry:
    key: str
    raw_key: str
    value: str
    raw_value: str
    comment: list[str] = field(default_factory=list)
    # layout, only for writing back what was read.
    indent: str = ''
    separator: str = DEFAULT_SEPARATOR
    prefix: list[str] = field(default_factory=list)

    @classmethod
    def cooked(cls, key: str, value: str) -> 'PropertyEntry':
        return cls(
            key=key, raw_key=escape_key(key),
            value=value, raw_value=escape_value(value))

    @classmethod
    def raw(cls, raw_key: str, raw_value: str) -> 'PropertyEntry':
        return cls(
            key=unescape_key(raw_key), raw_key=raw_key,
            value=unescape_value(raw_value), raw_value=raw_value)


def as_comment(
    lines: Iterable[str], replacing: Sequence[str] = ()
) -> list[str]:
    """Turn plain text lines into comment lines.

    Lines already led by `#` or `!` stay as they are. The others borrow
    the marker of the block being replaced (`! ` in `! old comment`),
    or get `# ` if there is nothing to borrow from.
    """
    prefix = DEFAULT_COMMENT_PREFIX
    if replacing and (m := COMMENT_PREFIX.match(replacing[0])):
        prefix = m.group(0)
    ret: list[str] = []
    for i in lines:
        for j in LINEBREAK.split(i):
            if j.lstrip(WHITESPACE).startswith(tuple(COMMENT_MARKS)):
                ret.append(j)
            else:
                ret.append(prefix + j)
    return ret


class PropertiesIterator(Iterator[str]):
    """Key cursor that survives removals.

    It walks a snapshot of the keys and skips those gone meanwhile,
    so deleting entries (through `remove()` or not) during the walk
    neither skips nor repeats the remaining ones.
    Keys added during the walk are not visited.
    """
    def __init__(self, props: 'Properties', keys: list[str]) -> None:
        self._props = props
        self._keys = keys
        self._pos = 0
        self._current: str | None = None

    def __iter__(self) -> 'PropertiesIterator':
        return self

    def __next__(self) -> str:
        while self._pos < len(self._keys):
            key = self._keys[self._pos]
            self._pos += 1
            if key in self._props:
                self._current = key
                return key
        self._current = None
        raise StopIteration

    def remove(self) -> None:
        """Remove the key last returned by `next()`."""
        if self._current is None:
            raise PropertiesError('nothing to remove, call next() first.')
        del self._props[self._current]
        self._current = None


class Properties(MutableMapping[str, str]):
    """A `.properties` document: `str: str` pairs in insertion order.

    Map-style access (`p[key]`, `get`, `len`, iteration) only sees the
    entries of this document. Property-style access (`get_property`,
    `string_property_names`) also falls back on `defaults`, which is
    fixed at construction and never owned nor modified.

        ```properties
        # header, when a blank line parts it from the first entry

        ! comment of `key`
        key = value
        ```

    Setting an existing key replaces its value in place, keeping its
    position and comment. A new key goes to the end.
    """
    def __init__(self, defaults: 'Properties | None' = None) -> None:
        # dict keeps insertion order, and in-place order on replacement.
        self.__data: dict[str, PropertyEntry] = {}
        self.__header: list[str] = []
        self.__defaults = defaults
        # last key read from a source lacking the final line break.
        self._unterminated: str | None = None

    @classmethod
    def from_mapping(
        cls, mapping: Mapping[str, str],
        defaults: 'Properties | None' = None
    ) -> 'Properties':
        """Build from a plain (maybe unordered) mapping, in its order."""
        ret = cls(defaults)
        for k, v in mapping.items():
            ret[str(k)] = str(v)
        return ret

    @property
    def defaults(self) -> 'Properties | None':
        return self.__defaults

    @property
    def header(self) -> list[str]:
        """Comment lines on top of the document, owned by no key."""
        return self.__header.copy()

    @header.setter
    def header(self, lines: Iterable[str]) -> None:
        self.__header = as_comment(lines, self.__header)

    def __getitem__(self, key: str) -> str:
        return self.__data[key].value

    def __setitem__(self, key: str, value: str) -> None:
        self.put(key, value)

    def __delitem__(self, key: str) -> None:
        entry = self.__data[key]
        if entry.prefix:
            # hand the blank lines over, or groups would stick together.
            keys = iter(self.__data)
            for i in keys:
                if i == key:
                    break
            if (follower := next(keys, None)) is not None:
                nxt = self.__data[follower]
                nxt.prefix = entry.prefix + nxt.prefix
        if key == self._unterminated:
            self._unterminated = None
        del self.__data[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__data

    def __len__(self) -> int:
        return len(self.__data)

    def __iter__(self) -> PropertiesIterator:
        return PropertiesIterator(self, list(self.__data))

    def __repr__(self) -> str:
        return '<Properties> { .cnt = %d, .defaults = %s }' % (
            len(self), 'None' if self.__defaults is None else 'Properties')

    def __str__(self) -> str:
        return str(self.to_dict())

    def __link(self, entry: PropertyEntry) -> None:
        if entry.key in self.__data:
            raise DuplicateKeyError(
                f'"{entry.key}" is already linked to another entry.')
        self.__data[entry.key] = entry

    def _entries(self) -> Iterator[PropertyEntry]:
        """for PropertiesParser.writestream()."""
        return iter(self.__data.values())

    def _ends_open(self) -> bool:
        """for PropertiesParser.writestream().

        True if the last entry is still the one read without a final
        line break, so that it gets written back without one too.
        """
        if self._unterminated is None or not self.__data:
            return False
        return next(reversed(self.__data)) == self._unterminated

    def _load(self, entry: PropertyEntry) -> PropertyEntry | None:
        """for PropertiesParser.readstream().

        Returns the entry it replaced, if any.
        """
        old = self.__data.get(entry.key)
        if old is None:
            self.__link(entry)
            return None
        entry.prefix = old.prefix + entry.prefix
        if not entry.comment:
            entry.comment = old.comment
        self.__data[entry.key] = entry
        return old

    def put(self, key: str, value: str) -> str | None:
        """Set a cooked value, returns the previous one (or `None`)."""
        if (old := self.__data.get(key)) is not None:
            prev = old.value
            old.value, old.raw_value = value, escape_value(value)
            return prev
        self.__link(PropertyEntry.cooked(key, value))
        return None

    def put_raw(self, raw_key: str, raw_value: str) -> str | None:
        """Set a value by its on-disk text, which is kept as given.

        Raises:
            MalformedEscape: if either text does not decode.
        """
        entry = PropertyEntry.raw(raw_key, raw_value)
        if (old := self.__data.get(entry.key)) is not None:
            prev = old.value
            old.raw_key, old.raw_value = raw_key, raw_value
            old.value = entry.value
            return prev
        self.__link(entry)
        return None

    def remove(self, key: str) -> str | None:
        return self.pop(key, None)

    def clear(self) -> None:
        """Drop every entry. The header stays."""
        self.__data.clear()
        self._unterminated = None

    def get_raw(self, key: str) -> str | None:
        if (entry := self.__data.get(key)) is None:
            return None
        return entry.raw_value

    def get_comment(self, key: str) -> list[str]:
        if (entry := self.__data.get(key)) is None:
            return []
        return entry.comment.copy()

    def set_comment(self, key: str, *comment: str) -> None:
        """Replace the comment of `key`; no lines means no comment.

        Does nothing if `key` is not there.
        """
        if (entry := self.__data.get(key)) is None:
            return
        entry.comment = as_comment(comment, entry.comment)

    def set_property(self, key: str, value: str, *comment: str) -> None:
        """`put()`, plus replacing the comment if any line is given.

        A new key lives here only, the defaults never see it.
        """
        self.put(key, value)
        if comment:
            self.set_comment(key, *comment)

    def raw_keys(self) -> list[str]:
        return [i.raw_key for i in self.__data.values()]

    def raw_values(self) -> list[str]:
        return [i.raw_value for i in self.__data.values()]

    def to_dict(self) -> dict[str, str]:
        """Plain `dict` copy of the cooked pairs, defaults not included."""
        return {k: v.value for k, v in self.__data.items()}

    def __chained(self) -> dict[str, PropertyEntry]:
        # root first; an update keeps the slot and takes the nearer entry.
        ret = {} if self.__defaults is None else self.__defaults.__chained()
        ret.update(self.__data)
        return ret

    def __lookup(self, key: str) -> PropertyEntry | None:
        props: Properties | None = self
        while props is not None:
            if (entry := props.__data.get(key)) is not None:
                return entry
            props = props.__defaults
        return None

    def get_property(
        self, key: str, default: str | None = None
    ) -> str | None:
        entry = self.__lookup(key)
        return default if entry is None else entry.value

    def get_property_comment(self, key: str) -> list[str]:
        entry = self.__lookup(key)
        return [] if entry is None else entry.comment.copy()

    def string_property_names(self) -> list[str]:
        """Every key reachable through the defaults chain.

        Root first; a key shadowed here keeps its place up there.
        """
        return list(self.__chained())

    def flatten(self) -> 'Properties':
        """Merge the defaults chain into one standalone document."""
        ret = Properties()
        ret.__header = self.header
        for entry in self.__chained().values():
            ret.__link(replace(entry, comment=entry.comment.copy(), prefix=[]))
        return ret
