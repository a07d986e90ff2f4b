"""Exception types for compatgen."""

from __future__ import annotations

from collections.abc import Sequence


class CompatgenError(Exception):
    """Base exception for expected application errors."""


class SourceError(CompatgenError):
    """Raised when a dataset file is missing or unreadable."""

    def __init__(self, path: str, *, cause: str | None = None) -> None:
        self.path = path
        detail = f"Unable to load dataset {path}"
        if cause:
            detail = f"{detail} ({cause})"
        super().__init__(detail)


class SchemaError(CompatgenError):
    """Raised when a dataset lacks a nested structure the compiler depends on."""

    def __init__(self, source: str, path: Sequence[str], detail: str = "missing") -> None:
        self.source = source
        self.path = tuple(path)
        dotted = ".".join(self.path) or "<root>"
        super().__init__(f"Unexpected {source} schema at {dotted}: {detail}")


class UnknownPrefixError(CompatgenError):
    """Raised when a construct uses a vendor prefix with no code mapping."""

    def __init__(self, construct: str, prefix: str) -> None:
        self.construct = construct
        self.prefix = prefix
        super().__init__(f"Missing prefix {prefix!r} (used by {construct})")


class FlagOrderError(CompatgenError):
    """Raised when the feature flag enumeration is inconsistent."""


class UnknownFeatureError(CompatgenError):
    """Raised when a lookup names a feature that was never compiled."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown feature {name!r}")


class ArtifactError(CompatgenError):
    """Raised when an existing artifact cannot be updated in place."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Cannot update {path}: {detail}")


class FormatterError(CompatgenError):
    """Raised when the external formatter fails on a written artifact."""

    def __init__(self, command: Sequence[str], *, returncode: int | None = None) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        rendered = " ".join(self.command)
        if returncode is None:
            super().__init__(f"Formatter not found: {rendered}")
        else:
            super().__init__(f"Formatter failed with exit code {returncode}: {rendered}")
