from __future__ import annotations

import codecs
from typing import Callable, Dict

from csvstream.domain.exceptions import UnknownFilter

ByteFilter = Callable[[bytes], bytes]

_ROT13_TABLE = bytes.maketrans(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz",
    codecs.encode("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz", "rot13").encode("ascii"),
)


def _toUpper(data: bytes) -> bytes:
    return data.upper()


def _toLower(data: bytes) -> bytes:
    return data.lower()


def _rot13(data: bytes) -> bytes:
    return data.translate(_ROT13_TABLE)


class FilterRegistry:
    """
    Назначение/ответственность:
        Реестр именованных байтовых фильтров, подключаемых к потоку.

    Ограничения:
        - Фильтр - чистая функция bytes -> bytes, применяемая к каждой
          прочитанной строке или к каждому записываемому буферу.
    """

    def __init__(self) -> None:
        self._filters: Dict[str, ByteFilter] = {}

    def register(self, name: str, func: ByteFilter) -> None:
        self._filters[name] = func

    def resolve(self, name: str) -> ByteFilter:
        try:
            return self._filters[name]
        except KeyError:
            raise UnknownFilter(name=name) from None

    def names(self) -> list[str]:
        return sorted(self._filters)


def build_default_registry() -> FilterRegistry:
    registry = FilterRegistry()
    registry.register("string.toupper", _toUpper)
    registry.register("string.tolower", _toLower)
    registry.register("string.rot13", _rot13)
    return registry


DEFAULT_REGISTRY = build_default_registry()


def register_filter(name: str, func: ByteFilter) -> None:
    """
    Назначение:
        Регистрирует пользовательский фильтр в общем реестре.
    """
    DEFAULT_REGISTRY.register(name, func)
