from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

Field = Optional[str]
Record = List[Field]

BLANK_RECORD: tuple[Field, ...] = (None,)


class ValueKind(str, Enum):
    """
    Назначение:
        Тег значения курсора.
    """

    VALUE = "VALUE"
    MALFORMED = "MALFORMED"
    END_OF_STREAM = "END_OF_STREAM"


@dataclass(frozen=True)
class CursorValue:
    """
    Назначение:
        Результат декодирования текущей позиции курсора.

    Инварианты/гарантии:
        - kind=VALUE: data содержит bytes (режим строк) или Record (режим записей).
        - kind=MALFORMED: raw содержит прочитанные байты, reason - сообщение декодера.
        - kind=END_OF_STREAM: data/raw не заданы.
        - Пустая строка в режиме записей декодируется в запись [None].
    """

    kind: ValueKind
    line_no: int
    data: Union[bytes, Record, None] = None
    raw: bytes | None = None
    reason: str | None = None

    @classmethod
    def value(cls, data: Union[bytes, Record], line_no: int) -> "CursorValue":
        return cls(kind=ValueKind.VALUE, line_no=line_no, data=data)

    @classmethod
    def malformed(cls, raw: bytes, reason: str, line_no: int) -> "CursorValue":
        return cls(kind=ValueKind.MALFORMED, line_no=line_no, raw=raw, reason=reason)

    @classmethod
    def end(cls, line_no: int) -> "CursorValue":
        return cls(kind=ValueKind.END_OF_STREAM, line_no=line_no)

    @property
    def ok(self) -> bool:
        return self.kind is ValueKind.VALUE

    @property
    def is_eof(self) -> bool:
        return self.kind is ValueKind.END_OF_STREAM

    @property
    def is_malformed(self) -> bool:
        return self.kind is ValueKind.MALFORMED

    @property
    def is_blank(self) -> bool:
        """
        Признак пустой строки: пустая сырая строка или запись, у которой первое поле None.
        """
        if not self.ok:
            return False
        if isinstance(self.data, bytes):
            return self.data.rstrip(b"\r\n") == b""
        return bool(self.data) and self.data[0] is None
