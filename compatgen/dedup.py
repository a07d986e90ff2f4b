"""Grouping of names whose compiled predicates are structurally identical."""

from __future__ import annotations

from collections.abc import Hashable, Iterator, Mapping
from typing import Generic

from .model import P, PredicateGroup


def predicate_key(value: object) -> Hashable:
    """Return a hashable form of a predicate that ignores mapping key order."""
    if isinstance(value, Mapping):
        items = ((str(key), predicate_key(item)) for key, item in value.items())
        return ("map", tuple(sorted(items)))
    if isinstance(value, (list, tuple)):
        return ("seq", tuple(predicate_key(item) for item in value))
    if isinstance(value, (set, frozenset)):
        return ("set", tuple(sorted(predicate_key(item) for item in value)))
    if isinstance(value, Hashable):
        return value
    raise TypeError(f"Unsupported predicate value: {type(value).__name__}")


class PredicateDeduplicator(Generic[P]):
    """Collect ``(names, predicate)`` groups in first-insertion order."""

    def __init__(self) -> None:
        self._groups: list[PredicateGroup[P]] = []
        self._index: dict[Hashable, int] = {}
        self._seen: set[str] = set()

    def add(self, name: str, predicate: P) -> PredicateGroup[P]:
        if name in self._seen:
            raise ValueError(f"Duplicate name in predicate table: {name}")
        self._seen.add(name)

        key = predicate_key(predicate)
        position = self._index.get(key)
        if position is not None:
            group = self._groups[position]
            group.names.append(name)
            return group

        group = PredicateGroup(names=[name], predicate=predicate)
        self._index[key] = len(self._groups)
        self._groups.append(group)
        return group

    @property
    def groups(self) -> list[PredicateGroup[P]]:
        return list(self._groups)

    def __iter__(self) -> Iterator[PredicateGroup[P]]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, name: object) -> bool:
        return name in self._seen
