"""One generation run: compile every table, then emit the artifacts."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path

from .browsers import canonical_browsers
from .compat import compile_compat
from .constants import DEFAULT_FORMATTER
from .emit import ArtifactWriter, emit_artifacts
from .flags import FlagEntry, assign_flags
from .model import Compilation
from .prefixes import compile_prefixes
from .sources import DataSources, load_sources
from .tables import (
    DEFAULT_COMPAT_TABLES,
    DEFAULT_PREFIX_TABLES,
    FLAG_ENTRIES,
    CompatTables,
    PrefixTables,
)

LOGGER = logging.getLogger(__name__)


def compile_all(
    sources: DataSources,
    *,
    prefix_tables: PrefixTables = DEFAULT_PREFIX_TABLES,
    compat_tables: CompatTables = DEFAULT_COMPAT_TABLES,
    flag_entries: Sequence[FlagEntry] = FLAG_ENTRIES,
) -> Compilation:
    """Compile all tables in memory. No files are touched."""
    browsers = canonical_browsers(sources.agents)
    LOGGER.debug("Canonical browsers: %s", ", ".join(browsers))

    prefixes = compile_prefixes(
        sources.prefixes,
        sources.agents,
        prefix_tables,
        mdn=sources.mdn,
        browsers=browsers,
    )
    compat = compile_compat(sources.caniuse, sources.mdn, compat_tables, browsers=browsers)
    flags = assign_flags(flag_entries)
    return Compilation(browsers=browsers, prefixes=prefixes, compat=compat, flags=flags)


def run(
    data_dir: Path,
    out_dir: Path,
    *,
    formatter: Sequence[str] | None = DEFAULT_FORMATTER,
) -> tuple[Compilation, list[Path]]:
    """Load the datasets, compile them and write every artifact below ``out_dir``."""
    compilation = compile_all(load_sources(data_dir))
    writer = ArtifactWriter(out_dir, formatter=formatter)
    written = emit_artifacts(compilation, writer)
    return compilation, written
