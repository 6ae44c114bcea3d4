from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from logpipe.dumper import is_stringable, render


@dataclass(slots=True)
class Point:
    x: int
    y: int


class Node:
    def __init__(self) -> None:
        self.child: Node | None = None


class Broken(Mapping[str, object]):
    def __getitem__(self, key: str) -> object:
        raise RuntimeError("broken")

    def __iter__(self) -> Iterator[str]:
        raise RuntimeError("broken")

    def __len__(self) -> int:
        return 1


def sample_function() -> None:
    return None


def test_render_scalars_like_repr() -> None:
    assert render("a") == "'a'"
    assert render(1) == "1"
    assert render(1.1) == "1.1"
    assert render(None) == "None"
    assert render(True) == "True"


def test_render_containers_multiline() -> None:
    assert render([]) == "[]"
    assert render({}) == "{}"
    assert render(set()) == "set()"
    assert render([1, "a"]) == "[\n    1,\n    'a',\n]"
    assert render({"a": {"b": 1}}) == "{\n    'a': {\n        'b': 1,\n    },\n}"
    assert render({3, 1, 2}) == "{\n    1,\n    2,\n    3,\n}"


def test_render_objects_and_functions() -> None:
    assert render(Point(1, 2)) == "Point(\n    x=1,\n    y=2,\n)"
    assert render(sample_function) == f"<function {__name__}.sample_function>"
    assert render(object()) == "<object>"
    assert render(ValueError("bad")) == "ValueError('bad')"


def test_render_handles_recursion() -> None:
    node = Node()
    node.child = node
    assert "<recursion Node>" in render(node)

    items: list[object] = []
    items.append(items)
    assert render(items) == "[\n    <recursion list>,\n]"


def test_render_never_raises() -> None:
    assert render(Broken()) == "<unrenderable Broken>"


def test_is_stringable() -> None:
    class Named:
        def __str__(self) -> str:
            return "named"

    assert is_stringable(Named()) is True
    assert is_stringable({"a": 1}) is False
    assert is_stringable([1]) is False
    assert is_stringable(object()) is False
