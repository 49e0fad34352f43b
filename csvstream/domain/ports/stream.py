from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Flag, IntEnum
from typing import Protocol

from csvstream.domain.values import Record


class Whence(IntEnum):
    SET = os.SEEK_SET
    CUR = os.SEEK_CUR
    END = os.SEEK_END


class FilterMode(Flag):
    """
    Назначение:
        Направление, в котором фильтр применяется к байтам потока.
    """

    READ = 1
    WRITE = 2
    READ_WRITE = READ | WRITE


@dataclass(frozen=True)
class FilterHandle:
    """
    Назначение:
        Непрозрачный дескриптор подключённого фильтра; используется в detach_filter().
    """

    handle_id: int
    name: str
    mode: FilterMode


@dataclass(frozen=True)
class RecordRead:
    """
    Назначение:
        Результат чтения одной CSV-записи из потока.

    Инварианты/гарантии:
        - record=None и error=None: конец потока.
        - error задан: запись не декодирована, raw содержит прочитанные байты.
    """

    record: Record | None
    raw: bytes = b""
    error: str | None = None

    @property
    def at_end(self) -> bool:
        return self.record is None and self.error is None


class StreamProtocol(Protocol):
    """
    Назначение/ответственность:
        Абстрактный seekable байтовый поток, с которым работают курсор и писатель.
    Ограничения:
        - Поток не открывает и не закрывает нижележащий дескриптор.
        - Синхронный блокирующий I/O, один владелец.
    """

    encoding: str

    def read_line(self) -> bytes | None:
        """
        Контракт:
            Следующая строка вместе с терминатором; None на конце потока.
        """
        ...

    def read_record(self, delimiter: str, quote: str, escape: str) -> RecordRead: ...

    def read_to_end(self) -> bytes: ...

    def write_bytes(self, data: bytes) -> int:
        """
        Контракт:
            Количество записанных байт; 0 означает неудачу записи.
        """
        ...

    def seek_byte(self, offset: int, whence: Whence = Whence.SET) -> int: ...

    def tell(self) -> int: ...

    def flush(self) -> bool: ...

    def at_eof(self) -> bool: ...

    def attach_filter(self, name: str, mode: FilterMode) -> FilterHandle: ...

    def prepend_filter(self, name: str, mode: FilterMode) -> FilterHandle: ...

    def detach_filter(self, handle: FilterHandle) -> bool: ...
