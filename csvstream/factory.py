from __future__ import annotations

import logging

from csvstream.common.run_id import generate_run_id
from csvstream.config import Settings
from csvstream.cursor import StreamCursor
from csvstream.domain.control import CsvControl
from csvstream.domain.ports.stream import StreamProtocol
from csvstream.infra.logging.setup import createRunLogger
from csvstream.writer import RecordWriter


def create_cursor(stream: StreamProtocol, settings: Settings | None = None) -> StreamCursor:
    """
    Назначение:
        Собирает StreamCursor по настройкам (управляющие символы и флаги).

    Поведение:
        - Некорректный управляющий символ - InvalidControlCharacter до любого I/O.
    """
    settings = settings or Settings()
    cursor = StreamCursor(stream)
    cursor.set_csv_control(settings.delimiter, settings.quote, settings.escape)
    cursor.set_flags(settings.flags())
    return cursor


def create_writer(stream: StreamProtocol, settings: Settings | None = None) -> RecordWriter:
    """
    Назначение:
        Собирает RecordWriter по настройкам (управляющие символы, newline, порог flush).
    """
    settings = settings or Settings()
    return RecordWriter(
        stream,
        control=CsvControl.create(settings.delimiter, settings.quote, settings.escape),
        newline=settings.newline,
        flush_threshold=settings.flush_threshold,
    )


def configure_logging(
    settings: Settings | None = None,
    runName: str = "csvstream",
    runId: str | None = None,
) -> tuple[logging.Logger, str]:
    """
    Назначение:
        Подключает файловый лог запуска по настройкам log_dir / log_level.

    Выходные данные:
        (logger, logFilePath)

    Поведение:
        - runId генерируется, если не передан.
        - Неизвестный log_level - ValueError.
    """
    settings = settings or Settings()
    return createRunLogger(runName, settings.log_dir, runId or generate_run_id(), settings.log_level)
