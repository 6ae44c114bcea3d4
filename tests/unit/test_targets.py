from __future__ import annotations

import io
import logging

import pytest

from logpipe import InvalidArgumentError, Message, MemoryTarget, StdlibTarget, StreamTarget
from logpipe.targets import LEVEL_MAP


def _message(level: str, text: str, **context: object) -> Message:
    context.setdefault("time", 1508160390)
    context.setdefault("category", "app")
    return Message(level, text, context)


def test_stream_target_writes_one_block_per_message() -> None:
    stream = io.StringIO()
    target = StreamTarget(stream).set_format(lambda m, common: f"{m.level()}:{m.message()}")

    target.collect([_message("info", "a"), _message("error", "b")], True)

    assert stream.getvalue() == "info:a\nerror:b\n"


def test_stream_target_default_layout() -> None:
    stream = io.StringIO()
    target = StreamTarget(stream).set_timestamp_format("%Y-%m-%d")

    target.collect([_message("notice", "hello {name}", name="world")], True)

    assert stream.getvalue().startswith("2017-10-16 [notice][app] hello world\n\nMessage context:\n\n")


def test_stream_target_appends_to_path(tmp_path) -> None:
    path = tmp_path / "logs" / "app.log"
    target = StreamTarget(path).set_format(lambda m, common: m.message())

    target.collect([_message("info", "first")], True)
    target.collect([_message("info", "second")], True)

    assert path.read_text(encoding="utf-8") == "first\nsecond\n"


def test_stream_target_accepts_string_path(tmp_path) -> None:
    path = tmp_path / "app.log"
    target = StreamTarget(str(path)).set_format(lambda m, common: m.message())

    target.collect([_message("info", "x")], True)

    assert path.read_text(encoding="utf-8") == "x\n"


def test_stream_target_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    target = StreamTarget().set_format(lambda m, common: m.message())

    target.collect([_message("info", "to stdout")], True)

    assert capsys.readouterr().out == "to stdout\n"


@pytest.mark.parametrize("stream", [42, object(), b"bytes"])
def test_stream_target_rejects_unwritable(stream: object) -> None:
    with pytest.raises(InvalidArgumentError):
        StreamTarget(stream)  # type: ignore[arg-type]


def test_memory_target_retains_recent_exports() -> None:
    target = MemoryTarget(capacity=2)
    target.set_export_interval(1)

    for text in ("a", "b", "c"):
        target.collect([_message("info", text)], False)

    assert target.export_count == 3
    assert [m.message() for m in target.exported()] == ["b", "c"]
    assert [m.message() for m in target.exported(limit=1)] == ["c"]
    assert target.messages == ()

    target.clear()
    assert target.exported() == []
    assert target.export_count == 0


def test_stdlib_target_forwards_records(caplog: pytest.LogCaptureFixture) -> None:
    target = StdlibTarget("app.audit")

    with caplog.at_level(logging.DEBUG, logger="app.audit"):
        target.collect(
            [
                _message("emergency", "down"),
                _message("notice", "heads up"),
                _message("debug", "details", request="r-1"),
            ],
            True,
        )

    assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
        (logging.CRITICAL, "down"),
        (logging.INFO, "heads up"),
        (logging.DEBUG, "details"),
    ]
    last = caplog.records[-1]
    assert last.name == "app.audit"
    assert last.logpipe_category == "app"
    assert last.logpipe_context["request"] == "r-1"


def test_stdlib_target_accepts_logger_instance() -> None:
    logger = logging.getLogger("app.instance")
    assert StdlibTarget(logger).logger is logger


def test_level_map_covers_every_level() -> None:
    assert set(LEVEL_MAP) == {
        "emergency",
        "alert",
        "critical",
        "error",
        "warning",
        "notice",
        "info",
        "debug",
    }
