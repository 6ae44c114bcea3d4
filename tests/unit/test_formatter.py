from __future__ import annotations

import json

import pytest

from logpipe import FormatContractError, Formatter, Message

HEADER = "2017-10-16 13:26:30.608300 [info][app] message"
TIME = 1508160390.6083


class Stringable:
    def __str__(self) -> str:
        return "stringable-object"


def make_message(**extra: object) -> Message:
    return Message("info", "message", {**extra, "category": "app", "time": TIME})


@pytest.mark.parametrize(
    ("context", "expected"),
    [
        ({"foo": "a"}, "foo: 'a'"),
        ({"foo": 1}, "foo: 1"),
        ({"foo": 1.1}, "foo: 1.1"),
        ({"foo": None}, "foo: None"),
        ({"foo": []}, "foo: []"),
        ({"foo": Stringable()}, "foo: stringable-object"),
    ],
)
def test_default_format(context: dict[str, object], expected: str) -> None:
    message = make_message(**context)
    assert Formatter().format(message, {}) == (
        f"{HEADER}\n\nMessage context:\n\n{expected}\ncategory: 'app'\ntime: 1508160390.6083\n"
    )


def test_default_format_literal_scenario() -> None:
    message = Message("info", "message", {"category": "app", "time": TIME})
    formatted = Formatter().format(message, {})

    assert formatted.startswith(HEADER)
    assert formatted == f"{HEADER}\n\nMessage context:\n\ncategory: 'app'\ntime: 1508160390.6083\n"


def test_default_format_with_common_context() -> None:
    message = Message("info", "message", {"category": "app", "time": TIME})
    assert Formatter().format(message, {"foo": "bar"}) == (
        f"{HEADER}\n\nMessage context:\n\ncategory: 'app'\ntime: 1508160390.6083"
        "\n\nCommon context:\n\nfoo: 'bar'\n"
    )


def test_default_format_without_any_context_still_ends_with_newline() -> None:
    message = Message("info", "message")
    formatted = Formatter(timestamp_format="%Y").format(message, {})
    assert formatted.endswith("[info][application] message\n")


def test_default_format_renders_exception_traceback() -> None:
    try:
        raise ValueError("some error")
    except ValueError as exc:
        error = exc
    formatted = Formatter().format(make_message(error=error), {})

    assert "error: Traceback (most recent call last):" in formatted
    assert "ValueError: some error" in formatted


def test_default_format_renders_trace() -> None:
    formatter = Formatter(timestamp_format="%Y-%m-%d %H:%M:%S")
    message = Message(
        "info",
        "message",
        {
            "category": "app",
            "time": 1508160390,
            "trace": [
                {"file": "/path/to/file", "line": 99},
                {"class": "Service", "function": "run"},
                {"function": "main"},
                {},
            ],
        },
    )
    assert formatter.format(message, {}) == (
        "2017-10-16 13:26:30 [info][app] message\n\nMessage context:\n\n"
        "trace:\n    in /path/to/file:99\n    Service:run\n    main\n    ???\n"
        "category: 'app'\ntime: 1508160390\n"
    )


def test_set_timestamp_format_applies_to_later_calls_only() -> None:
    formatter = Formatter()
    message = make_message()
    before = formatter.format(message, {})
    formatter.set_timestamp_format("%a %d %B %Y")

    assert before.startswith("2017-10-16 13:26:30.608300 ")
    assert formatter.format(message, {}).startswith("Mon 16 October 2017 [info][app] message")


def test_comma_separated_time_string() -> None:
    formatter = Formatter(timestamp_format="%Y-%m-%d %H:%M:%S")
    message = Message("info", "message", {"category": "app", "time": "1508160390,6083"})
    assert formatter.format(message, {}) == (
        "2017-10-16 13:26:30 [info][app] message\n\nMessage context:\n\n"
        "category: 'app'\ntime: '1508160390,6083'\n"
    )


def test_custom_format_bypasses_default_layout() -> None:
    formatter = Formatter()
    formatter.set_format(
        lambda message, common: f"[{message.level()}][{message.context('category')}] "
        f"{message.message()}\n{json.dumps(dict(common))}\n"
    )
    assert formatter.format(make_message(), {"foo": "bar"}) == '[info][app] message\n{"foo": "bar"}\n'


def test_prefix_is_applied_in_default_and_custom_layouts() -> None:
    formatter = Formatter(prefix=lambda message, common: "Prefix: ")
    assert formatter.format(make_message(), {}).startswith(
        "2017-10-16 13:26:30.608300 Prefix: [info][app] message"
    )

    formatter.set_format(lambda message, common: f"({message.level()}) {message.message()}")
    formatter.set_prefix(lambda message, common: message.context("category").upper() + ": ")
    assert formatter.format(make_message(), {}) == "APP: (info) message"


@pytest.mark.parametrize("value", [True, 1, 1.1, [], None, lambda: "a", object()])
def test_custom_format_must_return_string(value: object) -> None:
    formatter = Formatter(format=lambda message, common: value)
    with pytest.raises(FormatContractError):
        formatter.format(Message("info", "test"), {})


@pytest.mark.parametrize("value", [True, 1, None, object()])
def test_custom_prefix_must_return_string(value: object) -> None:
    formatter = Formatter(prefix=lambda message, common: value)
    with pytest.raises(FormatContractError):
        formatter.format(Message("info", "test"), {})
