from __future__ import annotations

import pytest

from compatgen.version import format_version, parse_version


def test_parse_version_encodes_components() -> None:
    assert parse_version("15") == 15 << 16
    assert parse_version("15.4") == (15 << 16) | (4 << 8)
    assert parse_version("10.0.1") == (10 << 16) | 1
    assert parse_version("3.1") == 0x030100


def test_parse_version_strips_approximation_and_ranges() -> None:
    assert parse_version("≤79") == 79 << 16
    assert parse_version(" ≤ 18 ") == 18 << 16
    assert parse_version("3.1-3.2") == parse_version("3.1")
    assert parse_version("4.2-4.3") == (4 << 16) | (2 << 8)


@pytest.mark.parametrize("text", ["", "TP", "all", "preview", "1.2.3.4", "1..2", "-1", "1.x", "1.256", "١٢"])
def test_parse_version_rejects_non_numeric(text: str) -> None:
    assert parse_version(text) is None


@pytest.mark.parametrize("value", [None, True, False, 15, 15.4])
def test_parse_version_rejects_non_strings(value: object) -> None:
    assert parse_version(value) is None


def test_parse_version_preserves_ordering() -> None:
    ordered = ["3.1", "3.2", "4", "5.1", "9.1", "10", "10.0.1", "15.4", "100"]
    encoded = [parse_version(value) for value in ordered]
    assert encoded == sorted(encoded)


def test_format_version() -> None:
    assert format_version((15 << 16) | (4 << 8)) == "15.4.0"
    assert format_version(parse_version("10.0.1") or 0) == "10.0.1"
