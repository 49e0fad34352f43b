import io

import pytest

from csvstream.domain.error_codes import ErrorCode
from csvstream.domain.exceptions import InvalidArgument, UnknownFilter
from csvstream.domain.ports.stream import FilterMode
from csvstream.infra.stream.filters import FilterRegistry, build_default_registry
from csvstream.infra.stream.seekable_stream import SeekableStream


def test_read_filter_transforms_lines():
    stream = SeekableStream(io.BytesIO(b"abc\n"))
    stream.attach_filter("string.toupper", FilterMode.READ)

    assert stream.read_line() == b"ABC\n"


def test_write_filter_transforms_written_bytes():
    buffer = io.BytesIO()
    stream = SeekableStream(buffer)
    stream.attach_filter("string.rot13", FilterMode.WRITE)

    assert stream.write_bytes(b"abc\n") == 4
    assert buffer.getvalue() == b"nop\n"


def test_read_filter_does_not_touch_writes():
    buffer = io.BytesIO()
    stream = SeekableStream(buffer)
    stream.attach_filter("string.toupper", FilterMode.READ)

    stream.write_bytes(b"abc\n")

    assert buffer.getvalue() == b"abc\n"


def test_prepend_runs_before_attached_filters():
    appended = SeekableStream(io.BytesIO(b"MiXeD\n"))
    appended.attach_filter("string.tolower", FilterMode.READ)
    appended.attach_filter("string.toupper", FilterMode.READ)

    prepended = SeekableStream(io.BytesIO(b"MiXeD\n"))
    prepended.attach_filter("string.tolower", FilterMode.READ)
    prepended.prepend_filter("string.toupper", FilterMode.READ)

    assert appended.read_line() == b"MIXED\n"
    assert prepended.read_line() == b"mixed\n"


def test_detach_filter_by_handle():
    stream = SeekableStream(io.BytesIO(b"ab\ncd\n"))
    handle = stream.attach_filter("string.toupper", FilterMode.READ_WRITE)

    assert stream.read_line() == b"AB\n"
    assert stream.detach_filter(handle) is True
    assert stream.detach_filter(handle) is False
    assert stream.read_line() == b"cd\n"


def test_handles_are_distinct():
    stream = SeekableStream(io.BytesIO())
    first = stream.attach_filter("string.toupper", FilterMode.READ)
    second = stream.attach_filter("string.toupper", FilterMode.READ)

    assert first != second
    assert first.name == "string.toupper"


def test_unknown_filter_is_invalid_argument():
    stream = SeekableStream(io.BytesIO())

    with pytest.raises(UnknownFilter) as excinfo:
        stream.attach_filter("no.such.filter", FilterMode.READ)

    assert isinstance(excinfo.value, InvalidArgument)
    assert excinfo.value.code is ErrorCode.UNKNOWN_FILTER
    assert "no.such.filter" in str(excinfo.value)


def test_custom_registry_filter():
    registry = FilterRegistry()
    registry.register("test.strip_cr", lambda data: data.replace(b"\r", b""))
    stream = SeekableStream(io.BytesIO(b"a\r\n"), registry=registry)
    stream.attach_filter("test.strip_cr", FilterMode.READ)

    assert stream.read_line() == b"a\n"
    assert registry.names() == ["test.strip_cr"]


def test_default_registry_names():
    assert build_default_registry().names() == ["string.rot13", "string.tolower", "string.toupper"]
