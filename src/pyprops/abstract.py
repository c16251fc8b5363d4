# -*- encoding: utf-8 -*-
# @File   : abstract.py
# @Time   : 2026/09/21 20:22:30
# @Author : Kariko Lin

from abc import ABCMeta, abstractmethod
from typing import Generic, TypeVar

T = TypeVar('T')


class FileHandler(Generic[T], metaclass=ABCMeta):
    """Binds a document model to one file on disk.

    Models never open files themselves; handlers do.
    """
    def __init__(self, filename: str, encoding: str | None = 'utf-8') -> None:
        self._fn = filename
        self._codec = encoding

    @abstractmethod
    def read(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def write(self, instance: T) -> None:
        raise NotImplementedError

    def __str__(self) -> str:
        return f'{self._fn} ({self._codec})'
