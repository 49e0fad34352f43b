from __future__ import annotations

from typing import Sequence


def truncateText(value: str | None, limit: int = 500) -> str | None:
    """
    Назначение:
        Ограничивает длину текста, чтобы избежать раздувания логов и сообщений об ошибках.

    Входные данные:
        value: str | None
            Текст для усечения.
        limit: int
            Максимально допустимая длина строки.

    Выходные данные:
        str | None
            Строка, не длиннее limit символов; None, если вход None.
    """
    if value is None:
        return None
    if len(value) <= limit:
        return value
    suffix = "..." if limit > 3 else ""
    head = limit - len(suffix)
    return value[:head] + suffix


def describeRecord(record: Sequence[object] | None, limit: int = 200) -> str:
    """
    Назначение:
        Компактное представление записи для логов и текста исключений.
    """
    if record is None:
        return "None"
    return truncateText(repr(list(record)), limit) or ""
