from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Sequence

from csvstream.common.sanitize import describeRecord
from csvstream.domain.control import CsvControl
from csvstream.domain.exceptions import InsertionFailed, InsertionRejected, InvalidArgument
from csvstream.domain.ports.stream import StreamProtocol, Whence
from csvstream.domain.values import Field, Record
from csvstream.infra.stream.csv_codec import NATIVE_TERMINATOR, encode_record

logger = logging.getLogger("csvstream.writer")

Formatter = Callable[[Record], Sequence[Field]]
Validator = Callable[[Record], bool]

DEFAULT_NEWLINE = NATIVE_TERMINATOR
DEFAULT_FLUSH_THRESHOLD = 500


def filterFlushThreshold(value: int | None) -> int | None:
    """
    Назначение:
        Проверяет порог автоматического flush.

    Поведение:
        - None отключает периодический flush.
        - Иначе требуется положительное целое (bool не принимается), иначе InvalidArgument.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidArgument(reason="The flush threshold must be a valid positive integer or None")
    return value


class RecordWriter:
    """
    Назначение/ответственность:
        Добавляет записи в поток через конвейер:
        форматтеры -> валидаторы -> CSV-кодирование и запись -> замена
        терминатора строки -> политика flush.

    Ограничения:
        - Не закрывает поток.
        - insert_all не транзакционен: строки до упавшей остаются в потоке.
        - Повторов нет: повтор - это новый вызов insert_one.
    """

    def __init__(
        self,
        stream: StreamProtocol,
        control: CsvControl | None = None,
        newline: str = DEFAULT_NEWLINE,
        flush_threshold: int | None = DEFAULT_FLUSH_THRESHOLD,
    ) -> None:
        self._stream = stream
        self._control = control or CsvControl()
        self._formatters: List[Formatter] = []
        self._validators: Dict[str, Validator] = {}
        self._newline = newline
        self._flush_threshold = filterFlushThreshold(flush_threshold)
        self._insert_count = 0

    # --- configuration -------------------------------------------------------

    def set_csv_control(self, delimiter: str = ",", quote: str = '"', escape: str = "\\") -> "RecordWriter":
        self._control = CsvControl.create(delimiter, quote, escape)
        return self

    def get_csv_control(self) -> CsvControl:
        return self._control

    def add_formatter(self, formatter: Formatter) -> "RecordWriter":
        self._formatters.append(formatter)
        return self

    def add_validator(self, name: str, validator: Validator) -> "RecordWriter":
        """
        Поведение:
            - Повторная регистрация имени заменяет валидатор, сохраняя его позицию.
        """
        self._validators[name] = validator
        return self

    def set_newline(self, newline: str) -> "RecordWriter":
        self._newline = str(newline)
        return self

    def get_newline(self) -> str:
        return self._newline

    def set_flush_threshold(self, value: int | None) -> "RecordWriter":
        self._flush_threshold = filterFlushThreshold(value)
        return self

    def get_flush_threshold(self) -> int | None:
        return self._flush_threshold

    @property
    def insert_count(self) -> int:
        return self._insert_count

    # --- insertion ---------------------------------------------------------------

    def insert_one(self, record: Sequence[Field]) -> int:
        """
        Назначение:
            Вставляет одну запись.

        Выходные данные:
            int
                Записано байт (кодирование + поправка на замену терминатора).

        Поведение:
            - Отклонение валидатором: InsertionRejected, поток не тронут.
            - Запись 0 байт: InsertionFailed.
        """
        formatted = self._format(record)
        self._validate(formatted)

        data = encode_record(formatted, self._control).encode(self._stream.encoding)
        written = self._stream.write_bytes(data)
        if not written:
            logger.warning(
                f"insertion failed record={describeRecord(formatted)}",
                extra={"component": "writer"},
            )
            raise InsertionFailed(record=formatted)

        return written + self._consolidate()

    def insert_all(self, rows: Iterable[Sequence[Field]]) -> int:
        """
        Назначение:
            Вставляет строки по одной через insert_one и делает финальный flush.

        Поведение:
            - Первая ошибка пробрасывается как есть; уже вставленные строки остаются.
        """
        if isinstance(rows, (str, bytes)) or not isinstance(rows, Iterable):
            raise InvalidArgument(reason="the provided data must be an iterable of records")

        total = 0
        for row in rows:
            total += self.insert_one(row)

        self._stream.flush()
        logger.debug(
            f"batch inserted bytes={total} insert_count={self._insert_count}",
            extra={"component": "writer"},
        )
        return total

    def _format(self, record: Sequence[Field]) -> Record:
        formatted: Record = list(record)
        for formatter in self._formatters:
            formatted = list(formatter(formatted))
        return formatted

    def _validate(self, record: Record) -> None:
        for name, validator in self._validators.items():
            if validator(record) is not True:
                logger.warning(
                    f"record rejected validator={name} record={describeRecord(record)}",
                    extra={"component": "writer"},
                )
                raise InsertionRejected(validator_name=name, record=record)

    def _consolidate(self) -> int:
        """
        Назначение:
            Пост-обработка вставки: замена "\\n" на настроенный перевод строки
            и периодический flush.

        Поведение:
            - Пустой newline даёт поправку -1: следующий insert перезапишет "\\n".
        """
        delta = 0
        if self._newline != NATIVE_TERMINATOR:
            self._stream.seek_byte(-1, Whence.CUR)
            delta = self._stream.write_bytes(self._newline.encode(self._stream.encoding)) - 1

        self._insert_count += 1
        if self._flush_threshold is not None and self._insert_count % self._flush_threshold == 0:
            self._stream.flush()
            logger.debug(
                f"auto flush insert_count={self._insert_count}",
                extra={"component": "writer"},
            )
        return delta
