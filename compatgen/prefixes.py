"""Prefix range compiler.

Turns the autoprefixer table (``{construct: {"browsers": ["safari 3.1 2009", ...]}}``)
into per-browser, per-prefix version ranges in which each construct needs a
vendor prefix.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Any

from .browsers import MDN_SOURCE, PREFIX_SOURCE, BrowserNormalizer, canonical_browsers
from .constants import (
    CURRENT_RELEASE_WINDOW,
    FLEX_2009_VARIANT,
    NON_RELEASE_VERSIONS,
    OLD_GRADIENT_VARIANT,
)
from .dedup import PredicateDeduplicator
from .exceptions import SchemaError, UnknownPrefixError
from .model import PrefixCompilation, PrefixPredicate, VendorPrefix, VersionRange
from .tables import PrefixTables, RowRemoval
from .util.data import compat_support, dig, dig_mapping
from .version import parse_version

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrefixRow:
    browser: str
    version: str
    variant: str | None = None

    @classmethod
    def parse(cls, raw: str) -> PrefixRow:
        parts = raw.split()
        if len(parts) < 2:
            raise SchemaError("prefixes", (raw,), "expected '<browser> <version> [variant]'")
        return cls(parts[0], parts[1], parts[2] if len(parts) > 2 else None)


@dataclass(frozen=True)
class Agent:
    prefix: str
    prefix_exceptions: Mapping[str, str]
    current_release: str | None

    def prefix_for(self, version: str) -> str:
        return self.prefix_exceptions.get(version) or self.prefix


def current_release(versions: list[object]) -> str | None:
    """Return the newest released version among an agent's last few entries."""
    for version in reversed(versions[-CURRENT_RELEASE_WINDOW:]):
        if isinstance(version, str) and version not in NON_RELEASE_VERSIONS:
            return version
    return None


def load_agents(agents: Mapping[str, Any]) -> dict[str, Agent]:
    output: dict[str, Agent] = {}
    for name in agents:
        prefix = dig("agents", agents, (name, "prefix"))
        versions = dig("agents", agents, (name, "versions"))
        if not isinstance(prefix, str) or not isinstance(versions, list):
            raise SchemaError("agents", (name,), "expected a prefix string and a versions list")
        exceptions = agents[name].get("prefix_exceptions") or {}
        output[name] = Agent(
            prefix=prefix,
            prefix_exceptions=dict(exceptions),
            current_release=current_release(versions),
        )
    return output


def any_pseudo_rows(mdn: Mapping[str, Any], path: tuple[str, ...]) -> list[str]:
    """Derive rows for the prefixed ``:-webkit-any()`` / ``:-moz-any()`` selectors.

    The prefixed form is needed from the version that added the alternative name
    up to the major release before the unprefixed ``:is()`` shipped.
    """
    rows: list[str] = []
    for source_id, record in compat_support(mdn, path).items():
        if not isinstance(record, list):
            continue
        browser = MDN_SOURCE.canonical_browser(source_id)
        if browser is None:
            continue

        any_added = next(
            (
                entry.get("version_added")
                for entry in record
                if "-any" in (entry.get("alternative_name") or "")
            ),
            None,
        )
        supported = next(
            (
                entry.get("version_added")
                for entry in record
                if entry.get("version_added") and not entry.get("alternative_name")
            ),
            None,
        )
        if not isinstance(any_added, str) or not isinstance(supported, str):
            continue

        major, _, rest = supported.partition(".")
        if not major.isdigit():
            LOGGER.warning("Bad version for any-pseudo: %s %s", browser, supported)
            continue
        last_prefixed = str(int(major) - 1) + ("." + rest if rest else "")
        rows.extend([f"{browser} {any_added}", f"{browser} {last_prefixed}"])
    return rows


def _is_removed(row: PrefixRow, removals: tuple[RowRemoval, ...]) -> bool:
    version = parse_version(row.version)
    if version is None:
        return False
    for removal in removals:
        since = parse_version(removal.since)
        if row.browser == removal.browser and since is not None and version >= since:
            return True
    return False


def apply_corrections(
    prefix_data: Mapping[str, Any],
    mdn: Mapping[str, Any] | None,
    tables: PrefixTables,
) -> dict[str, list[str]]:
    """Return ``{construct: rows}`` with the curated corrections applied."""
    constructs: dict[str, list[str]] = {}
    for construct in prefix_data:
        rows = dig("prefixes", prefix_data, (construct, "browsers"))
        if not isinstance(rows, list):
            raise SchemaError("prefixes", (construct, "browsers"), "expected a list")
        constructs[construct] = list(rows)

    for construct, removals in tables.removals.items():
        if construct not in constructs:
            raise SchemaError("prefixes", (construct,))
        constructs[construct] = [
            raw for raw in constructs[construct] if not _is_removed(PrefixRow.parse(raw), removals)
        ]

    for construct, additions in tables.additions.items():
        if construct not in constructs:
            raise SchemaError("prefixes", (construct,))
        constructs[construct].extend(additions)

    if tables.any_pseudo_construct and mdn is not None:
        constructs[tables.any_pseudo_construct] = any_pseudo_rows(mdn, tables.any_pseudo_path)

    return constructs


def _widen(ranges: dict[str, VersionRange], browser: str, version: int) -> None:
    existing = ranges.get(browser, VersionRange(version, version))
    low = version if existing.min is None else min(existing.min, version)
    high = version if existing.max is None else max(existing.max, version)
    ranges[browser] = VersionRange(low, high)


class _ConstructCompiler:
    """Accumulate the ranges of one construct, row by row."""

    def __init__(
        self,
        construct: str,
        rows: list[PrefixRow],
        agents: Mapping[str, Agent],
        normalizer: BrowserNormalizer,
        tables: PrefixTables,
    ) -> None:
        self.construct = construct
        self.rows = rows
        self.agents = agents
        self.normalizer = normalizer
        self.tables = tables
        self.predicate: PrefixPredicate = {}
        self.warnings: list[str] = []
        self.row_counts = Counter(
            browser
            for browser in (normalizer.canonical_browser(row.browser) for row in rows)
            if browser is not None
        )

    def _agent(self, source_id: str) -> Agent:
        agent = self.agents.get(source_id)
        if agent is None:
            raise SchemaError("agents", (source_id,))
        return agent

    def _prefix(self, agent: Agent, version: str) -> str:
        prefix = agent.prefix_for(version)
        prefix = self.tables.prefix_overrides.get((self.construct, prefix), prefix)
        if VendorPrefix.from_source(prefix) is None:
            raise UnknownPrefixError(self.construct, prefix)
        return prefix

    def add(
        self,
        row: PrefixRow,
        flex_2009: dict[str, VersionRange],
        webkit_gradient: dict[str, VersionRange],
    ) -> None:
        browser = self.normalizer.canonical_browser(row.browser)
        if browser is None:
            return

        agent = self._agent(row.browser)
        prefix = self._prefix(agent, row.version)
        is_current = row.version == agent.current_release
        version = parse_version(row.version)
        if version is None:
            message = f"Bad version for {self.construct}: {browser} {row.version}"
            LOGGER.warning("%s", message)
            self.warnings.append(message)
            return

        by_prefix = self.predicate.setdefault(browser, {})
        existing = by_prefix.get(prefix)
        if existing is None:
            if self.row_counts[browser] == 1:
                # One observation cannot establish a trend.
                by_prefix[prefix] = VersionRange(None, None if is_current else version)
            else:
                by_prefix[prefix] = VersionRange(version, None if is_current else version)
        else:
            low, high = existing.min, existing.max
            if low is not None and version < low:
                low = version
            if is_current and low is not None:
                high = None
            elif high is not None and version > high:
                high = version
            by_prefix[prefix] = VersionRange(low, high)

        if row.variant == FLEX_2009_VARIANT:
            _widen(flex_2009, browser, version)
        elif row.variant == OLD_GRADIENT_VARIANT and "gradient" in self.construct:
            _widen(webkit_gradient, browser, version)


def compile_prefixes(
    prefix_data: Mapping[str, Any],
    agents: Mapping[str, Any],
    tables: PrefixTables,
    *,
    mdn: Mapping[str, Any] | None = None,
    browsers: tuple[str, ...] | None = None,
) -> PrefixCompilation:
    """Compile every construct's prefix ranges and group identical ones."""
    agent_table = load_agents(dig_mapping("agents", agents, ()))
    if browsers is None:
        browsers = canonical_browsers(agent_table)
    normalizer = PREFIX_SOURCE.bind(browsers)

    groups: PredicateDeduplicator[PrefixPredicate] = PredicateDeduplicator()
    flex_2009: dict[str, VersionRange] = {}
    webkit_gradient: dict[str, VersionRange] = {}
    warnings: list[str] = []

    for construct, raw_rows in apply_corrections(prefix_data, mdn, tables).items():
        rows = [PrefixRow.parse(raw) for raw in raw_rows]
        compiler = _ConstructCompiler(construct, rows, agent_table, normalizer, tables)
        for row in rows:
            compiler.add(row, flex_2009, webkit_gradient)
        warnings.extend(compiler.warnings)
        groups.add(construct, compiler.predicate)

    LOGGER.debug("Compiled %d prefix groups", len(groups))
    return PrefixCompilation(
        groups=groups.groups,
        flex_2009=flex_2009,
        webkit_gradient=webkit_gradient,
        warnings=warnings,
    )
