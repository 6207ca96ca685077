import json
import logging
from pathlib import Path

import pytest

from junitdash.services.logquery import LogQueryService, TailQuery
from junitdash.services.logquery.params import parse_timestamp
from junitdash.services.logwriter import LevelFileHandler, file_level_for, start_queued_writer


def _read(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


@pytest.fixture
def file_logger(log_dir: Path):
    handler = LevelFileHandler(log_dir=log_dir)
    test_logger = logging.getLogger("junitdash.tests.logwriter")
    test_logger.setLevel(logging.DEBUG)
    test_logger.propagate = False
    test_logger.addHandler(handler)
    yield test_logger
    test_logger.removeHandler(handler)
    handler.close()


@pytest.mark.parametrize(
    ("levelno", "expected"),
    [
        (logging.CRITICAL, "error"),
        (logging.ERROR, "error"),
        (logging.WARNING, "warn"),
        (logging.INFO, "info"),
        (logging.DEBUG, "debug"),
        (5, "debug"),
    ],
)
def test_file_level_for(levelno: int, expected: str) -> None:
    assert file_level_for(levelno) == expected


def test_creates_log_directory(tmp_path: Path) -> None:
    LevelFileHandler(log_dir=tmp_path / "nested" / "logs").close()

    assert (tmp_path / "nested" / "logs").is_dir()


def test_records_go_to_level_files(file_logger: logging.Logger, log_dir: Path) -> None:
    file_logger.info("Run %s uploaded", 42)
    file_logger.warning("Slow parse")
    file_logger.error("Upload failed")
    file_logger.debug("Parsed suite")

    info = _read(log_dir / "info.log")
    assert len(info) == 1
    assert info[0]["message"] == "Run 42 uploaded"
    assert info[0]["level"] == "info"
    assert info[0]["logger"] == "junitdash.tests.logwriter"
    assert parse_timestamp(info[0]["timestamp"]) is not None
    assert info[0]["timestamp"].endswith("Z")

    assert _read(log_dir / "warn.log")[0]["message"] == "Slow parse"
    assert _read(log_dir / "error.log")[0]["message"] == "Upload failed"
    assert _read(log_dir / "debug.log")[0]["message"] == "Parsed suite"


def test_extra_fields_are_top_level(file_logger: logging.Logger, log_dir: Path) -> None:
    file_logger.info("Uploaded", extra={"runId": "abc", "tests": 12})

    entry = _read(log_dir / "info.log")[0]

    assert entry["runId"] == "abc"
    assert entry["tests"] == 12


def test_exception_text_is_stored(file_logger: logging.Logger, log_dir: Path) -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        file_logger.exception("Parser crashed")

    entry = _read(log_dir / "error.log")[0]

    assert entry["message"] == "Parser crashed"
    assert "RuntimeError: boom" in entry["stack"]


def test_write_entry(log_dir: Path) -> None:
    handler = LevelFileHandler(log_dir=log_dir)
    handler.write_entry("warn", "Disk almost full", percent=91)
    handler.close()

    entry = _read(log_dir / "warn.log")[0]

    assert entry["message"] == "Disk almost full"
    assert entry["level"] == "warn"
    assert entry["percent"] == 91


def test_write_entry_rejects_unknown_level(log_dir: Path) -> None:
    handler = LevelFileHandler(log_dir=log_dir)

    with pytest.raises(ValueError):
        handler.write_entry("fatal", "nope")

    handler.close()


@pytest.mark.asyncio
async def test_written_entries_are_queryable(file_logger: logging.Logger, log_dir: Path) -> None:
    file_logger.info("first")
    file_logger.error("second")

    result = await LogQueryService(log_dir=log_dir).tail(TailQuery(level="all", lines=10))

    assert {entry["message"] for entry in result.logs} == {"first", "second"}


def test_queued_writer_keeps_stack_and_extra(log_dir: Path) -> None:
    queue_handler, listener = start_queued_writer(log_dir)
    queued_logger = logging.getLogger("junitdash.tests.queued")
    queued_logger.setLevel(logging.DEBUG)
    queued_logger.propagate = False
    queued_logger.addHandler(queue_handler)
    try:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            queued_logger.exception("Upload %s failed", "r-1", extra={"runId": "r-1"})
    finally:
        queued_logger.removeHandler(queue_handler)
        listener.stop()

    entry = _read(log_dir / "error.log")[0]

    assert entry["message"] == "Upload r-1 failed"
    assert entry["runId"] == "r-1"
    assert "RuntimeError: boom" in entry["stack"]
