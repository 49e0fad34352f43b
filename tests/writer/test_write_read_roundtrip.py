import io

from csvstream.config import Settings
from csvstream.cursor import StreamCursor
from csvstream.domain.flags import DECODE_AS_RECORD, SKIP_EMPTY
from csvstream.domain.values import ValueKind
from csvstream.factory import create_cursor, create_writer
from csvstream.infra.stream.seekable_stream import SeekableStream
from csvstream.writer import RecordWriter

ROWS = [
    ["a", "b"],
    ["x,y", "z"],
    ['say "hi"', "q"],
    ["line1\nline2", "tail"],
]


def test_written_records_decode_back():
    stream = SeekableStream(io.BytesIO())
    RecordWriter(stream).insert_all(ROWS)

    cursor = StreamCursor(stream)
    cursor.set_flags(DECODE_AS_RECORD)

    assert [v.data for v in cursor] == ROWS


def test_roundtrip_yields_formatted_records():
    stream = SeekableStream(io.BytesIO())
    writer = RecordWriter(stream, newline="\r\n")
    writer.add_formatter(lambda r: [f.strip() for f in r])
    writer.insert_all([[" a ", "b "], ["c", " d"]])

    cursor = StreamCursor(stream)
    cursor.set_flags(DECODE_AS_RECORD)

    assert [v.data for v in cursor] == [["a", "b"], ["c", "d"]]


def test_factory_applies_settings():
    settings = Settings(delimiter=";", newline="\r\n", flush_threshold=None, skip_empty=True)
    buffer = io.BytesIO()
    stream = SeekableStream(buffer)

    writer = create_writer(stream, settings)
    writer.insert_all([["a", "b"], ["c", "d"]])
    stream.write_bytes(b"\r\n")

    cursor = create_cursor(stream, settings)

    assert buffer.getvalue() == b"a;b\r\nc;d\r\n\r\n"
    assert writer.get_flush_threshold() is None
    assert cursor.get_flags() == DECODE_AS_RECORD | SKIP_EMPTY
    assert [v.data for v in cursor] == [["a", "b"], ["c", "d"]]


def test_backslashes_are_written_verbatim_and_read_back():
    buffer = io.BytesIO()
    stream = SeekableStream(buffer)
    rows = [["C:\\temp", "x"], ['a\\"b', "c"], ["x,\\", "y"], ["\\\\", '\\"']]

    RecordWriter(stream).insert_all(rows)

    assert buffer.getvalue().startswith(b"C:\\temp,x\n")
    cursor = StreamCursor(stream)
    cursor.set_flags(DECODE_AS_RECORD)
    assert [v.data for v in cursor] == rows


def test_fields_above_default_csv_limit_roundtrip():
    big = "a" * 200_000
    stream = SeekableStream(io.BytesIO())
    RecordWriter(stream).insert_all([[big, "z"], ["tail", big + ",q"]])

    cursor = StreamCursor(stream)
    cursor.set_flags(DECODE_AS_RECORD)
    values = list(cursor)

    assert [v.kind for v in values] == [ValueKind.VALUE, ValueKind.VALUE]
    assert [v.data for v in values] == [[big, "z"], ["tail", big + ",q"]]
