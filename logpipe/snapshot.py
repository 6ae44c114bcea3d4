"""Selection and rendering of process variables for target context messages."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Mapping
from typing import Any

from logpipe.dumper import render
from logpipe.errors import InvalidArgumentError, type_name


def process_variables() -> dict[str, Any]:
    """Default snapshot source: a copy of the environment and argv."""
    return {"ENV": dict(os.environ), "ARGV": list(sys.argv)}


def check_specs(specs: Iterable[str]) -> tuple[str, ...]:
    if isinstance(specs, str):
        raise InvalidArgumentError("The log variables must be a list of strings, str received.")
    checked = tuple(specs)
    for spec in checked:
        if not isinstance(spec, str):
            raise InvalidArgumentError(
                f"The log variable must be a string, {type_name(spec)} received."
            )
    return checked


def filter_variables(source: Mapping[str, Any], specs: Iterable[str]) -> dict[str, Any]:
    """Select variables from ``source``.

    ``"VAR"`` selects a whole variable, ``"VAR.KEY"`` one nested key and
    ``"!VAR.KEY"`` removes a key from the selection. Exclusions are applied
    after all inclusions. ``source`` is never mutated.
    """
    included: list[list[str]] = []
    excluded: list[list[str]] = []
    for spec in check_specs(specs):
        if spec.startswith("!"):
            excluded.append(spec[1:].split("."))
        elif spec:
            included.append(spec.split("."))

    result: dict[str, Any] = {}
    for path in included:
        found, value = _lookup(source, path)
        if found:
            _assign(result, path, _copy(value))
    for path in excluded:
        _remove(result, path)
    return result


def render_snapshot(source: Mapping[str, Any], specs: Iterable[str]) -> str:
    """Render selected variables as ``$VAR = <dump>`` blocks separated by blank lines."""
    selected = filter_variables(source, specs)
    return "\n\n".join(f"${name} = {render(value)}" for name, value in selected.items())


def _lookup(source: Mapping[str, Any], path: list[str]) -> tuple[bool, Any]:
    node: Any = source
    for key in path:
        if not isinstance(node, Mapping) or key not in node:
            return False, None
        node = node[key]
    return True, node


def _assign(target: dict[str, Any], path: list[str], value: Any) -> None:
    node = target
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[path[-1]] = value


def _remove(target: dict[str, Any], path: list[str]) -> None:
    node: Any = target
    for key in path[:-1]:
        node = node.get(key) if isinstance(node, dict) else None
        if node is None:
            return
    if isinstance(node, dict):
        node.pop(path[-1], None)


def _copy(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _copy(item) for key, item in value.items()}
    return value


__all__ = ["check_specs", "filter_variables", "process_variables", "render_snapshot"]
