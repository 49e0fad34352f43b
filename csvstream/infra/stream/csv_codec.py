from __future__ import annotations

import csv
import io
import sys
from typing import Iterator, Sequence

from csvstream.domain.control import CsvControl
from csvstream.domain.values import BLANK_RECORD, Field, Record

NATIVE_TERMINATOR = "\n"


def raiseFieldSizeLimit() -> int:
    """
    Назначение:
        Снимает ограничение csv на размер поля (131072 по умолчанию),
        чтобы записанные писателем длинные поля читались обратно.

    Выходные данные:
        int
            Установленный лимит (sys.maxsize, урезанный до диапазона C long).
    """
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return limit
        except OverflowError:
            limit //= 10


FIELD_SIZE_LIMIT = raiseFieldSizeLimit()


def encode_record(record: Sequence[Field], control: CsvControl, terminator: str = NATIVE_TERMINATOR) -> str:
    """
    Назначение:
        Кодирует запись в одну CSV-строку с заданным терминатором.

    Входные данные:
        record: Sequence[str | None]
            Поля записи; None пишется как пустое поле.
        control: CsvControl
            Разделитель, кавычка, escape.

    Выходные данные:
        str
            Закодированная строка, включая терминатор.

    Поведение:
        - Поле заключается в кавычки только при необходимости (разделитель, кавычка,
          перевод строки); кавычка внутри поля удваивается.
        - Escape-символ пишется как есть: он не экранирует и не удваивается.
    """
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=control.delimiter,
        quotechar=control.quote,
        escapechar=None,
        doublequote=True,
        quoting=csv.QUOTE_MINIMAL,
        lineterminator=terminator,
    )
    writer.writerow(record)
    return buffer.getvalue()


def escapedQuotesToDoubled(lines: Iterator[str], control: CsvControl) -> Iterator[str]:
    """
    Назначение:
        Переводит экранирование кавычки escape-символом внутри поля в кавычках
        в удвоенную кавычку, понятную csv.reader.

    Поведение:
        - Escape значим только внутри кавычек; вне их он обычный символ данных.
        - Escape остаётся в данных вместе с экранированным символом.
        - escape + кавычка считается экранированием, только если эта кавычка
          не удвоена и не закрывает поле (за ней не разделитель и не конец строки).
        - Состояние "в кавычках" переносится между строками одной записи.
        - escape, совпадающий с кавычкой или разделителем, отключён.
    """
    delimiter, quote, escape = control.delimiter, control.quote, control.escape
    if escape in (quote, delimiter):
        yield from lines
        return

    quoted = False
    fieldStart = True
    for line in lines:
        if not quoted and quote not in line:
            fieldStart = True
            yield line
            continue
        out: list[str] = []
        i = 0
        size = len(line)
        while i < size:
            ch = line[i]
            if quoted:
                if ch == escape and i + 1 < size:
                    nxt = line[i + 1]
                    after = line[i + 2] if i + 2 < size else ""
                    if nxt == escape:
                        out.append(ch + nxt)
                        i += 2
                        continue
                    if nxt == quote and after not in (quote, delimiter, "\r", "\n", ""):
                        out.append(ch + quote + quote)
                        i += 2
                        continue
                elif ch == quote:
                    if i + 1 < size and line[i + 1] == quote:
                        out.append(quote + quote)
                        i += 2
                        continue
                    quoted = False
                out.append(ch)
                i += 1
                continue

            if ch == quote and fieldStart:
                quoted = True
            fieldStart = ch in (delimiter, "\r", "\n")
            out.append(ch)
            i += 1
        yield "".join(out)


def decode_record(lines: Iterator[str], control: CsvControl) -> Record | None:
    """
    Назначение:
        Декодирует ровно одну CSV-запись из итератора строк.

    Поведение:
        - Строки запрашиваются лениво: следующая строка читается, только если
          поле в кавычках продолжается за переводом строки.
        - Escape-символ значим только внутри кавычек и сохраняется в данных.
        - Пустая строка даёт запись [None].
        - None, если строк больше нет.
        - Нарушение кавычек или обрыв данных внутри кавычек - csv.Error.
    """
    reader = csv.reader(
        escapedQuotesToDoubled(lines, control),
        delimiter=control.delimiter,
        quotechar=control.quote,
        escapechar=None,
        doublequote=True,
        strict=True,
    )
    row = next(reader, None)
    if row is None:
        return None
    if not row:
        return list(BLANK_RECORD)
    return list(row)
