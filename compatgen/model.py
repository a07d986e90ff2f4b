"""Data models for compiled prefix and compatibility tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Generic, TypeVar

P = TypeVar("P")


class VendorPrefix(IntFlag):
    NONE = 0
    WEBKIT = 1
    MOZ = 2
    MS = 4
    O = 8  # noqa: E741

    @classmethod
    def from_source(cls, prefix: str) -> VendorPrefix | None:
        """Look up a data-source prefix id such as ``"webkit"``."""
        member = cls.__members__.get(prefix.upper())
        if member is None or member is cls.NONE:
            return None
        return member


@dataclass(frozen=True)
class VersionRange:
    min: int | None
    max: int | None

    @property
    def is_unbounded(self) -> bool:
        return self.min is None and self.max is None

    def contains(self, version: int) -> bool:
        if self.min is not None and version < self.min:
            return False
        if self.max is not None and version > self.max:
            return False
        return True


# browser -> prefix id -> range in which that prefix is required
PrefixPredicate = dict[str, dict[str, VersionRange]]
# browser -> minimum version with unconditional support
CompatPredicate = dict[str, int]


@dataclass
class PredicateGroup(Generic[P]):
    names: list[str]
    predicate: P


@dataclass(frozen=True)
class FlagBit:
    name: str
    value: int
    members: tuple[str, ...] = ()

    @property
    def is_composite(self) -> bool:
        return bool(self.members)


@dataclass(frozen=True)
class PrefixCompilation:
    groups: list[PredicateGroup[PrefixPredicate]]
    flex_2009: dict[str, VersionRange]
    webkit_gradient: dict[str, VersionRange]
    warnings: list[str] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [name for group in self.groups for name in group.names]


@dataclass(frozen=True)
class CompatCompilation:
    groups: list[PredicateGroup[CompatPredicate]]
    browsers: tuple[str, ...]
    warnings: list[str] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [name for group in self.groups for name in group.names]


@dataclass(frozen=True)
class Compilation:
    browsers: tuple[str, ...]
    prefixes: PrefixCompilation
    compat: CompatCompilation
    flags: list[FlagBit]

    @property
    def warnings(self) -> list[str]:
        return [*self.prefixes.warnings, *self.compat.warnings]
