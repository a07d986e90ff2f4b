"""Evaluate compiled tables against a set of target browsers.

These functions answer the same questions as the generated matchers, so
compiled data can be checked without building the downstream engine.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .exceptions import UnknownFeatureError
from .model import (
    CompatCompilation,
    CompatPredicate,
    P,
    PredicateGroup,
    PrefixCompilation,
    PrefixPredicate,
    VendorPrefix,
    VersionRange,
)
from .version import parse_version

# browser -> encoded minimum version being targeted
Targets = Mapping[str, int]


def parse_targets(pairs: Iterable[str]) -> dict[str, int]:
    """Parse ``browser=version`` strings, e.g. ``["chrome=90", "safari=14.1"]``."""
    targets: dict[str, int] = {}
    for pair in pairs:
        browser, sep, raw_version = pair.partition("=")
        version = parse_version(raw_version.strip())
        if not sep or not browser.strip() or version is None:
            raise ValueError(f"Invalid target {pair!r}, expected browser=version")
        targets[browser.strip()] = version
    return targets


def _find(groups: list[PredicateGroup[P]], name: str) -> P:
    for group in groups:
        if name in group.names:
            return group.predicate
    raise UnknownFeatureError(name)


def prefix_predicate(compilation: PrefixCompilation, name: str) -> PrefixPredicate:
    return _find(compilation.groups, name)


def compat_predicate(compilation: CompatCompilation, name: str) -> CompatPredicate:
    return _find(compilation.groups, name)


def prefixes_for(compilation: PrefixCompilation, name: str, targets: Targets) -> VendorPrefix:
    """Return the vendor prefixes construct ``name`` needs for ``targets``.

    A range bound of None is unconditionally satisfied on that side, so an
    unbounded range applies to every targeted version of its browser.
    """
    prefixes = VendorPrefix.NONE
    for browser, ranges in prefix_predicate(compilation, name).items():
        version = targets.get(browser)
        if version is None:
            continue
        for prefix, version_range in ranges.items():
            if version_range.contains(version):
                prefixes |= VendorPrefix.from_source(prefix) or VendorPrefix.NONE
    return prefixes


def _in_any_range(ranges: Mapping[str, VersionRange], targets: Targets) -> bool:
    for browser, version_range in ranges.items():
        version = targets.get(browser)
        if version is not None and version_range.contains(version):
            return True
    return False


def is_flex_2009(compilation: PrefixCompilation, targets: Targets) -> bool:
    return _in_any_range(compilation.flex_2009, targets)


def is_webkit_gradient(compilation: PrefixCompilation, targets: Targets) -> bool:
    return _in_any_range(compilation.webkit_gradient, targets)


def _predicate_compatible(predicate: CompatPredicate, targets: Targets) -> bool:
    if not predicate:
        return False
    for browser, version in targets.items():
        minimum = predicate.get(browser)
        # No data for a targeted browser fails closed.
        if minimum is None or version < minimum:
            return False
    return True


def is_compatible(compilation: CompatCompilation, name: str, targets: Targets) -> bool:
    """True when every targeted browser supports ``name`` at its targeted version."""
    return _predicate_compatible(compat_predicate(compilation, name), targets)


def is_partially_compatible(compilation: CompatCompilation, name: str, targets: Targets) -> bool:
    """True when at least one targeted browser supports ``name``."""
    predicate = compat_predicate(compilation, name)
    for browser in compilation.browsers:
        version = targets.get(browser)
        if version is not None and _predicate_compatible(predicate, {browser: version}):
            return True
    return False
