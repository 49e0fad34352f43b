from __future__ import annotations

from dataclasses import dataclass

from csvstream.domain.exceptions import InvalidControlCharacter

DEFAULT_DELIMITER = ","
DEFAULT_QUOTE = '"'
DEFAULT_ESCAPE = "\\"


def filterControl(char: str, kind: str) -> str:
    """
    Назначение:
        Проверяет управляющий символ CSV.

    Входные данные:
        char: str
            Проверяемое значение.
        kind: str
            delimiter|quote|escape, для текста ошибки.

    Выходные данные:
        str
            Тот же символ, если он ровно один.

    Поведение:
        - Иначе InvalidControlCharacter.
    """
    if isinstance(char, str) and len(char) == 1:
        return char
    raise InvalidControlCharacter(kind=kind, value=char if isinstance(char, str) else repr(char))


@dataclass(frozen=True)
class CsvControl:
    """
    Назначение:
        Тройка управляющих символов CSV: разделитель, кавычка, escape.
    Инварианты/гарантии:
        - Каждое поле ровно один символ (проверяется в create()).
    """

    delimiter: str = DEFAULT_DELIMITER
    quote: str = DEFAULT_QUOTE
    escape: str = DEFAULT_ESCAPE

    @classmethod
    def create(
        cls,
        delimiter: str = DEFAULT_DELIMITER,
        quote: str = DEFAULT_QUOTE,
        escape: str = DEFAULT_ESCAPE,
    ) -> "CsvControl":
        return cls(
            delimiter=filterControl(delimiter, "delimiter"),
            quote=filterControl(quote, "quote"),
            escape=filterControl(escape, "escape"),
        )
