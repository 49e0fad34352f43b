import logging

from csvstream.cursor import StreamCursor
from csvstream.writer import RecordWriter
from csvstream.factory import configure_logging, create_cursor, create_writer
from csvstream.config import Settings, load_settings
from csvstream.domain.control import CsvControl
from csvstream.domain.flags import DECODE_AS_RECORD, READ_AHEAD, SKIP_EMPTY, StreamFlag
from csvstream.domain.values import CursorValue, ValueKind
from csvstream.domain.ports.stream import FilterHandle, FilterMode, Whence
from csvstream.domain.exceptions import (
    CsvStreamError,
    InsertionFailed,
    InsertionRejected,
    InvalidArgument,
    InvalidControlCharacter,
    NegativeSeekTarget,
    NotCloneable,
    UnknownFilter,
)
from csvstream.infra.stream.seekable_stream import SeekableStream
from csvstream.infra.stream.filters import register_filter

__all__ = [
    "StreamCursor",
    "RecordWriter",
    "create_cursor",
    "create_writer",
    "configure_logging",
    "Settings",
    "load_settings",
    "CsvControl",
    "StreamFlag",
    "SKIP_EMPTY",
    "READ_AHEAD",
    "DECODE_AS_RECORD",
    "CursorValue",
    "ValueKind",
    "FilterHandle",
    "FilterMode",
    "Whence",
    "CsvStreamError",
    "InsertionFailed",
    "InsertionRejected",
    "InvalidArgument",
    "InvalidControlCharacter",
    "NegativeSeekTarget",
    "NotCloneable",
    "UnknownFilter",
    "SeekableStream",
    "register_filter",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
