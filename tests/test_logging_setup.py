import io
import logging

import pytest

from csvstream.common.run_id import generate_run_id
from csvstream.cursor import StreamCursor
from csvstream.config import Settings
from csvstream.domain.exceptions import InsertionRejected
from csvstream.domain.flags import DECODE_AS_RECORD
from csvstream.factory import configure_logging
from csvstream.infra.logging.setup import PACKAGE_LOGGER, createRunLogger, logEvent, mapLogLevel
from csvstream.infra.stream.seekable_stream import SeekableStream
from csvstream.writer import RecordWriter


@pytest.fixture
def run_logger(tmp_path):
    runId = generate_run_id()
    logger, logFilePath = createRunLogger("csv", str(tmp_path / "logs"), runId, "DEBUG")
    yield logger, logFilePath, runId
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_map_log_level():
    assert mapLogLevel("warn") == logging.WARNING
    assert mapLogLevel(" DEBUG ") == logging.DEBUG
    with pytest.raises(ValueError):
        mapLogLevel("verbose")


def test_malformed_record_is_logged_with_component(run_logger):
    logger, logFilePath, runId = run_logger
    cursor = StreamCursor(SeekableStream(io.BytesIO(b'"open\n')))
    cursor.set_flags(DECODE_AS_RECORD)

    assert list(cursor)[0].is_malformed

    content = open(logFilePath, encoding="utf-8").read()
    assert f"runId={runId}" in content
    assert "comp=cursor" in content
    assert "malformed record line=0" in content


def test_rejected_insert_is_logged(run_logger):
    logger, logFilePath, _ = run_logger
    writer = RecordWriter(SeekableStream(io.BytesIO()))
    writer.add_validator("never", lambda r: False)

    with pytest.raises(InsertionRejected):
        writer.insert_one(["a"])

    content = open(logFilePath, encoding="utf-8").read()
    assert "comp=writer" in content
    assert "validator=never" in content


def test_log_event_and_repeated_setup(tmp_path, run_logger):
    logger, _, _ = run_logger
    second, secondPath = createRunLogger("csv", str(tmp_path / "other"), "run-2", "INFO")

    logEvent(second, logging.INFO, "run-2", "batch", "batch done")

    assert second is logging.getLogger(PACKAGE_LOGGER)
    assert len(second.handlers) == 1
    content = open(secondPath, encoding="utf-8").read()
    assert "runId=run-2 comp=batch msg=batch done" in content


def _reset_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_configure_logging_uses_settings(tmp_path):
    settings = Settings(log_dir=str(tmp_path / "run-logs"), log_level="WARN")
    try:
        logger, logFilePath = configure_logging(settings, runName="import", runId="run-7")
        StreamCursor(SeekableStream(io.BytesIO(b"a\nb\n"))).seek_to_line(1)
        writer = RecordWriter(SeekableStream(io.BytesIO()))
        writer.add_validator("never", lambda r: False)
        with pytest.raises(InsertionRejected):
            writer.insert_one(["a"])

        assert logger.level == logging.WARNING
        assert logFilePath == str(tmp_path / "run-logs" / "import_run-7.log")
        content = open(logFilePath, encoding="utf-8").read()
        assert "runId=run-7 comp=writer" in content
        assert "DEBUG" not in content
    finally:
        _reset_package_logger()


def test_configure_logging_generates_run_id_and_rejects_bad_level(tmp_path):
    try:
        _, logFilePath = configure_logging(Settings(log_dir=str(tmp_path)))
        assert logFilePath.startswith(str(tmp_path / "csvstream_"))

        with pytest.raises(ValueError):
            configure_logging(Settings(log_dir=str(tmp_path), log_level="loud"))
    finally:
        _reset_package_logger()
