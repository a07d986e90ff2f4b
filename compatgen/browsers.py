"""Browser identity normalization, one adapter per data source."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from .constants import CANIUSE_BROWSER_MAPPING, MDN_BROWSER_MAPPING


@dataclass(frozen=True)
class BrowserNormalizer:
    """Map one source's browser ids onto canonical browser ids.

    Ids mapped to None have no canonical equivalent and are dropped. Ids that
    are not in the mapping are already canonical. When bound to a canonical
    set, ids outside that set are dropped as well.
    """

    source: str
    mapping: Mapping[str, str | None]
    canonical: frozenset[str] | None = None

    def canonical_browser(self, source_id: str) -> str | None:
        if source_id in self.mapping:
            browser = self.mapping[source_id]
        else:
            browser = source_id
        if browser is None:
            return None
        if self.canonical is not None and browser not in self.canonical:
            return None
        return browser

    def is_dropped(self, source_id: str) -> bool:
        return self.canonical_browser(source_id) is None

    def bind(self, canonical: Iterable[str]) -> BrowserNormalizer:
        return replace(self, canonical=frozenset(canonical))


PREFIX_SOURCE = BrowserNormalizer("prefixes", CANIUSE_BROWSER_MAPPING)
CANIUSE_SOURCE = BrowserNormalizer("caniuse", CANIUSE_BROWSER_MAPPING)
MDN_SOURCE = BrowserNormalizer("mdn", MDN_BROWSER_MAPPING)


def canonical_browsers(agents: Mapping[str, object]) -> tuple[str, ...]:
    """Return the sorted canonical browser ids: every agent without a mapping entry."""
    return tuple(sorted(name for name in agents if name not in CANIUSE_BROWSER_MAPPING))
