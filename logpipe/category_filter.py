"""Include/exclude matching of message categories."""

from __future__ import annotations

from collections.abc import Iterable

from logpipe.errors import InvalidArgumentError, type_name


class CategoryFilter:
    """Matches categories against include and exclude wildcard rules.

    A rule ending with ``*`` matches every category sharing its prefix, so
    ``app.*`` matches ``app.db`` but not ``app`` itself. Other rules must match
    exactly. Exclude rules always win over include rules; an empty include
    list means every category is included.
    """

    __slots__ = ("_include", "_exclude")

    def __init__(
        self,
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
    ) -> None:
        self._include: tuple[str, ...] = ()
        self._exclude: tuple[str, ...] = ()
        self.include(include)
        self.exclude(exclude)

    @property
    def included(self) -> tuple[str, ...]:
        return self._include

    @property
    def excluded(self) -> tuple[str, ...]:
        return self._exclude

    def include(self, categories: Iterable[str]) -> None:
        self._include = _checked(categories)

    def exclude(self, categories: Iterable[str]) -> None:
        self._exclude = _checked(categories)

    def is_excluded(self, category: str) -> bool:
        if any(_matches(rule, category) for rule in self._exclude):
            return True
        if not self._include:
            return False
        return not any(_matches(rule, category) for rule in self._include)


def _matches(rule: str, category: str) -> bool:
    if category == rule:
        return True
    return rule.endswith("*") and category.startswith(rule[:-1])


def _checked(categories: Iterable[str]) -> tuple[str, ...]:
    if isinstance(categories, str):
        raise InvalidArgumentError("The log message categories must be a list of strings, str received.")
    rules = tuple(categories)
    for rule in rules:
        if not isinstance(rule, str):
            raise InvalidArgumentError(
                f"The log message category must be a string, {type_name(rule)} received."
            )
    return rules


__all__ = ["CategoryFilter"]
