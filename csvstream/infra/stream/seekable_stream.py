from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from csvstream.domain.control import CsvControl
from csvstream.domain.exceptions import InvalidArgument
from csvstream.domain.ports.stream import FilterHandle, FilterMode, RecordRead, Whence
from csvstream.infra.stream.csv_codec import decode_record
from csvstream.infra.stream.filters import DEFAULT_REGISTRY, ByteFilter, FilterRegistry

logger = logging.getLogger("csvstream.stream")


@dataclass(frozen=True)
class _AttachedFilter:
    handle: FilterHandle
    func: ByteFilter


class SeekableStream:
    """
    Назначение/ответственность:
        Реализация StreamProtocol поверх бинарного seekable файлового объекта
        (io.BytesIO, файл в режиме r+b/w+b и т.п.).

    Ограничения:
        - Не открывает и не закрывает дескриптор: жизненный цикл у вызывающего кода.
        - Read-фильтры применяются к каждой прочитанной строке/хвосту,
          write-фильтры - к каждому записываемому буферу.
    """

    def __init__(
        self,
        handle: BinaryIO,
        encoding: str = "utf-8",
        registry: FilterRegistry | None = None,
    ) -> None:
        if isinstance(handle, io.TextIOBase) or not hasattr(handle, "readline"):
            raise InvalidArgument(
                reason=f"Expected a binary file object, received {type(handle).__name__} instead"
            )
        if getattr(handle, "closed", False):
            raise InvalidArgument(reason="The stream is closed")
        if not handle.seekable():
            raise InvalidArgument(reason="The stream must be seekable")

        self._handle = handle
        self.encoding = encoding
        self._registry = registry or DEFAULT_REGISTRY
        self._filters: list[_AttachedFilter] = []
        self._next_handle_id = 1

    # --- reading -----------------------------------------------------------

    def read_line(self) -> bytes | None:
        line = self._handle.readline()
        if not line:
            return None
        return self._apply(line, FilterMode.READ)

    def read_record(self, delimiter: str, quote: str, escape: str) -> RecordRead:
        """
        Назначение:
            Читает и декодирует одну запись; поле в кавычках может занимать несколько строк.

        Выходные данные:
            RecordRead
                record - поля записи; error - текст ошибки декодера (raw сохранён);
                оба None - конец потока.
        """
        control = CsvControl(delimiter=delimiter, quote=quote, escape=escape)
        consumed: list[bytes] = []

        def lines() -> Iterator[str]:
            while True:
                line = self.read_line()
                if line is None:
                    return
                consumed.append(line)
                yield line.decode(self.encoding)

        try:
            record = decode_record(lines(), control)
        except (csv.Error, UnicodeDecodeError) as exc:
            raw = b"".join(consumed)
            logger.warning(
                f"malformed record at byte {self.tell() - len(raw)}: {exc}",
                extra={"component": "stream"},
            )
            return RecordRead(record=None, raw=raw, error=str(exc))

        if record is None:
            return RecordRead(record=None)
        return RecordRead(record=record, raw=b"".join(consumed))

    def read_to_end(self) -> bytes:
        return self._apply(self._handle.read(), FilterMode.READ)

    def at_eof(self) -> bool:
        position = self._handle.tell()
        if not self._handle.read(1):
            return True
        self._handle.seek(position)
        return False

    # --- writing / positioning ----------------------------------------------

    def write_bytes(self, data: bytes) -> int:
        written = self._handle.write(self._apply(data, FilterMode.WRITE))
        return int(written or 0)

    def seek_byte(self, offset: int, whence: Whence = Whence.SET) -> int:
        return self._handle.seek(offset, int(whence))

    def tell(self) -> int:
        return self._handle.tell()

    def flush(self) -> bool:
        self._handle.flush()
        return True

    # --- filters -------------------------------------------------------------

    def attach_filter(self, name: str, mode: FilterMode) -> FilterHandle:
        attached = self._build_filter(name, mode)
        self._filters.append(attached)
        return attached.handle

    def prepend_filter(self, name: str, mode: FilterMode) -> FilterHandle:
        attached = self._build_filter(name, mode)
        self._filters.insert(0, attached)
        return attached.handle

    def detach_filter(self, handle: FilterHandle) -> bool:
        for index, attached in enumerate(self._filters):
            if attached.handle == handle:
                del self._filters[index]
                return True
        return False

    def _build_filter(self, name: str, mode: FilterMode) -> _AttachedFilter:
        func = self._registry.resolve(name)
        handle = FilterHandle(handle_id=self._next_handle_id, name=name, mode=mode)
        self._next_handle_id += 1
        return _AttachedFilter(handle=handle, func=func)

    def _apply(self, data: bytes, direction: FilterMode) -> bytes:
        for attached in self._filters:
            if direction & attached.handle.mode:
                data = attached.func(data)
        return data
