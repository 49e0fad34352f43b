from __future__ import annotations

from enum import Flag, auto


class StreamFlag(Flag):
    """
    Назначение:
        Набор поведенческих флагов курсора, комбинируемых через `|`.

    Значения:
        SKIP_EMPTY        - пропускать пустые строки/записи при декодировании.
        READ_AHEAD        - декодировать следующее значение сразу на advance()/restart().
        DECODE_AS_RECORD  - current() возвращает CSV-запись вместо сырой строки.
    """

    NONE = 0
    SKIP_EMPTY = auto()
    READ_AHEAD = auto()
    DECODE_AS_RECORD = auto()


SKIP_EMPTY = StreamFlag.SKIP_EMPTY
READ_AHEAD = StreamFlag.READ_AHEAD
DECODE_AS_RECORD = StreamFlag.DECODE_AS_RECORD


def buildFlags(skip_empty: bool = False, read_ahead: bool = False, decode_as_record: bool = False) -> StreamFlag:
    """
    Назначение:
        Собирает StreamFlag из булевых признаков (используется конфигурацией).
    """
    flags = StreamFlag.NONE
    if skip_empty:
        flags |= StreamFlag.SKIP_EMPTY
    if read_ahead:
        flags |= StreamFlag.READ_AHEAD
    if decode_as_record:
        flags |= StreamFlag.DECODE_AS_RECORD
    return flags
