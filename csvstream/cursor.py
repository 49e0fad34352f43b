from __future__ import annotations

import logging
import sys
from typing import Any, BinaryIO, Iterator, Sequence

from csvstream.domain.control import CsvControl
from csvstream.domain.exceptions import NegativeSeekTarget, NotCloneable
from csvstream.domain.flags import StreamFlag
from csvstream.domain.ports.stream import FilterHandle, FilterMode, StreamProtocol, Whence
from csvstream.domain.values import CursorValue, Field
from csvstream.infra.stream.csv_codec import encode_record

logger = logging.getLogger("csvstream.cursor")


class StreamCursor:
    """
    Назначение/ответственность:
        Перезапускаемый курсор по seekable потоку: сырые строки или CSV-записи,
        адресуемые 0-based номером строки.

    Инварианты/гарантии:
        - key() равен номеру строки текущего значения, как только оно декодировано.
        - Текущее значение мемоизируется и сбрасывается на каждом advance().
        - Без READ_AHEAD декодирование ленивое (при первом current()).
        - Курсор нельзя копировать: копии делили бы одну позицию потока.

    Взаимодействия:
        - Работает только через StreamProtocol; не закрывает поток.
    """

    def __init__(self, stream: StreamProtocol) -> None:
        self._stream: StreamProtocol | None = stream
        self._current: CursorValue | None = None
        self._line_number = 0
        self._flags = StreamFlag.NONE
        self._control = CsvControl()

    # --- configuration -------------------------------------------------------

    def set_csv_control(self, delimiter: str = ",", quote: str = '"', escape: str = "\\") -> None:
        self._control = CsvControl.create(delimiter, quote, escape)

    def get_csv_control(self) -> CsvControl:
        return self._control

    def set_flags(self, flags: StreamFlag) -> None:
        self._flags = flags

    def get_flags(self) -> StreamFlag:
        return self._flags

    @property
    def stream(self) -> StreamProtocol:
        if self._stream is None:
            raise RuntimeError("The cursor is detached from its stream")
        return self._stream

    # --- iteration protocol --------------------------------------------------

    def current(self) -> CursorValue:
        """
        Назначение:
            Текущее значение курсора; декодируется при первом обращении.

        Выходные данные:
            CursorValue
                VALUE (bytes или запись), MALFORMED или END_OF_STREAM.
        """
        if self._current is not None:
            return self._current

        if StreamFlag.DECODE_AS_RECORD in self._flags:
            self._current = self._read_current_record()
        else:
            self._current = self._read_current_line()
        return self._current

    def _read_current_record(self) -> CursorValue:
        skip_empty = StreamFlag.SKIP_EMPTY in self._flags
        control = self._control
        while True:
            read = self.stream.read_record(control.delimiter, control.quote, control.escape)
            if read.at_end:
                return CursorValue.end(self._line_number)
            if read.error is not None:
                logger.warning(
                    f"malformed record line={self._line_number} reason={read.error}",
                    extra={"component": "cursor"},
                )
                return CursorValue.malformed(read.raw, read.error, self._line_number)
            value = CursorValue.value(read.record, self._line_number)
            if not (skip_empty and value.is_blank):
                return value

    def _read_current_line(self) -> CursorValue:
        skip_empty = StreamFlag.SKIP_EMPTY in self._flags
        while True:
            line = self.stream.read_line()
            if line is None:
                return CursorValue.end(self._line_number)
            value = CursorValue.value(line, self._line_number)
            if not (skip_empty and value.is_blank):
                return value

    def key(self) -> int:
        return self._line_number

    def advance(self) -> None:
        self._current = None
        self._line_number += 1
        if StreamFlag.READ_AHEAD in self._flags:
            self.current()

    def restart(self) -> None:
        self.stream.seek_byte(0, Whence.SET)
        self._line_number = 0
        self._current = None
        if StreamFlag.READ_AHEAD in self._flags:
            self.current()

    def has_more(self) -> bool:
        """
        Поведение:
            - READ_AHEAD: True, пока current() не END_OF_STREAM.
            - Иначе: True, пока поток не на EOF (ошибка декодирования последней
              строки видна только в следующем current()).
        """
        if StreamFlag.READ_AHEAD in self._flags:
            return not self.current().is_eof
        return not self.stream.at_eof()

    def seek_to_line(self, line: int) -> None:
        """
        Назначение:
            Ставит курсор на строку с номером line.

        Поведение:
            - line < 0: NegativeSeekTarget, состояние не меняется.
            - Линейный проход с начала потока: записи CSV переменной длины,
              прямой адресации по байтам нет.
            - Если поток закончился раньше, курсор остаётся на последней строке.
        """
        if line < 0:
            raise NegativeSeekTarget(line=line)

        self.restart()
        while self._line_number < line:
            if self.current().is_eof or self.stream.at_eof():
                break
            self.advance()

        if self.current().is_eof and self._line_number > 0:
            # a SKIP_EMPTY tail can leave the scan one step past the last value
            self._line_number -= 1
            self._rescan_to(self._line_number)

        logger.debug(
            f"seek target={line} parked={self._line_number}",
            extra={"component": "cursor"},
        )

    def _rescan_to(self, line: int) -> None:
        self.restart()
        while self._line_number < line:
            self.current()
            self.advance()
        self.current()

    def __iter__(self) -> Iterator[CursorValue]:
        self.restart()
        while self.has_more():
            value = self.current()
            if value.is_eof:
                return
            yield value
            self.advance()

    # --- byte-level passthrough ----------------------------------------------

    def read_line(self) -> bytes | None:
        """
        Назначение:
            Читает следующую сырую строку независимо от режима декодирования.

        Поведение:
            - При SKIP_EMPTY пустые строки пропускаются, как и в current().
            - None в конце потока.
        """
        if self._current is not None:
            # no read-ahead here: the next line is consumed below
            self._line_number += 1
        self._current = self._read_current_line()
        if self._current.is_eof:
            return None
        return self._current.data

    def write_record(
        self,
        fields: Sequence[Field],
        delimiter: str = ",",
        quote: str = '"',
        escape: str = "\\",
    ) -> int:
        control = CsvControl.create(delimiter, quote, escape)
        data = encode_record(fields, control).encode(self.stream.encoding)
        return self.stream.write_bytes(data)

    def seek_byte(self, offset: int, whence: Whence = Whence.SET) -> int:
        return self.stream.seek_byte(offset, whence)

    def write_bytes(self, data: bytes) -> int:
        return self.stream.write_bytes(data)

    def flush(self) -> bool:
        return self.stream.flush()

    def drain_remaining_to_output(self, output: BinaryIO | None = None) -> int:
        """
        Назначение:
            Выводит весь остаток потока (с текущей позиции) в output.

        Выходные данные:
            int
                Количество выведенных байт.
        """
        target = output if output is not None else sys.stdout.buffer
        data = self.stream.read_to_end()
        target.write(data)
        return len(data)

    # --- filters ---------------------------------------------------------------

    def attach_filter(self, name: str, mode: FilterMode = FilterMode.READ) -> FilterHandle:
        return self.stream.attach_filter(name, mode)

    def prepend_filter(self, name: str, mode: FilterMode = FilterMode.READ) -> FilterHandle:
        return self.stream.prepend_filter(name, mode)

    def detach_filter(self, handle: FilterHandle) -> bool:
        return self.stream.detach_filter(handle)

    # --- ownership ---------------------------------------------------------------

    def detach(self) -> StreamProtocol | None:
        """
        Назначение:
            Освобождает поток (без закрытия) и возвращает его вызывающему коду.
        """
        stream, self._stream = self._stream, None
        self._current = None
        return stream

    def __enter__(self) -> "StreamCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detach()

    def __copy__(self) -> Any:
        raise NotCloneable(type_name=type(self).__name__)

    def __deepcopy__(self, memo: dict) -> Any:
        raise NotCloneable(type_name=type(self).__name__)

    def __reduce_ex__(self, protocol: int) -> Any:
        raise NotCloneable(type_name=type(self).__name__)
