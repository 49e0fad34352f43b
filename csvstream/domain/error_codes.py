from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """
    Назначение:
        Единая таксономия кодов ошибок курсора и писателя.
    """

    INVALID_CONTROL_CHARACTER = "INVALID_CONTROL_CHARACTER"
    NEGATIVE_SEEK_TARGET = "NEGATIVE_SEEK_TARGET"
    NOT_CLONEABLE = "NOT_CLONEABLE"
    INSERTION_REJECTED = "INSERTION_REJECTED"
    INSERTION_FAILED = "INSERTION_FAILED"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    UNKNOWN_FILTER = "UNKNOWN_FILTER"
