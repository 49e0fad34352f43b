from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

from csvstream.common.sanitize import describeRecord
from csvstream.domain.error_codes import ErrorCode


class CsvStreamError(Exception):
    """
    Назначение:
        Базовая ошибка пакета: единый код, сообщение и сериализация для логов.
    """

    code: ErrorCode = ErrorCode.INVALID_ARGUMENT

    def __post_init__(self) -> None:
        super().__init__(str(self))

    @property
    def message(self) -> str:
        return str(self)

    def details(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details(),
        }


@dataclass(eq=False)
class InvalidArgument(CsvStreamError, ValueError):
    """
    Назначение:
        Недопустимый аргумент (порог flush, тип строк для insert_all, поток без seek).
    """

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(eq=False)
class UnknownFilter(InvalidArgument):
    """
    Назначение:
        Запрошен фильтр, не зарегистрированный в реестре фильтров.
    """

    reason: str = ""
    name: str = ""

    code = ErrorCode.UNKNOWN_FILTER

    def __str__(self) -> str:
        return f"Unable to locate filter '{self.name}'"

    def details(self) -> Dict[str, Any]:
        return {"name": self.name}


@dataclass(eq=False)
class InvalidControlCharacter(CsvStreamError, ValueError):
    """
    Назначение:
        Управляющий символ CSV (delimiter/quote/escape) не является ровно одним символом.
    Инварианты/гарантии:
        - Поднимается до любого I/O.
    """

    kind: str
    value: str

    code = ErrorCode.INVALID_CONTROL_CHARACTER

    def __str__(self) -> str:
        return f"The {self.kind} character must be a single character, got {self.value!r}"

    def details(self) -> Dict[str, Any]:
        return {"kind": self.kind, "value": self.value}


@dataclass(eq=False)
class NegativeSeekTarget(CsvStreamError, ValueError):
    line: int

    code = ErrorCode.NEGATIVE_SEEK_TARGET

    def __str__(self) -> str:
        return f"Can't seek stream to negative line {self.line}"

    def details(self) -> Dict[str, Any]:
        return {"line": self.line}


@dataclass(eq=False)
class NotCloneable(CsvStreamError, TypeError):
    """
    Назначение:
        Попытка копирования курсора: две копии разделяли бы одну позицию потока.
    """

    type_name: str

    code = ErrorCode.NOT_CLONEABLE

    def __str__(self) -> str:
        return f"An object of class {self.type_name} cannot be cloned"


class InsertionError(CsvStreamError):
    """
    Назначение:
        Общий предок ошибок вставки записи; несёт уже отформатированную запись.
    """

    record: Sequence[Any]

    def details(self) -> Dict[str, Any]:
        return {"record": list(self.record)}


@dataclass(eq=False)
class InsertionRejected(InsertionError):
    """
    Назначение:
        Именованный валидатор отклонил запись; в поток ничего не записано.
    """

    validator_name: str
    record: Sequence[Any] = field(default_factory=list)

    code = ErrorCode.INSERTION_REJECTED

    def __str__(self) -> str:
        return (
            f"Row could not be inserted: failed validator '{self.validator_name}' "
            f"record={describeRecord(self.record)}"
        )

    def details(self) -> Dict[str, Any]:
        return {"validator_name": self.validator_name, "record": list(self.record)}


@dataclass(eq=False)
class InsertionFailed(InsertionError):
    """
    Назначение:
        Поток сообщил о записи нуля байт.
    """

    record: Sequence[Any] = field(default_factory=list)

    code = ErrorCode.INSERTION_FAILED

    def __str__(self) -> str:
        return f"Unable to write record to the stream: record={describeRecord(self.record)}"


__all__ = [
    "CsvStreamError",
    "InvalidArgument",
    "UnknownFilter",
    "InvalidControlCharacter",
    "NegativeSeekTarget",
    "NotCloneable",
    "InsertionError",
    "InsertionRejected",
    "InsertionFailed",
]
