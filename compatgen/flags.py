"""Bit assignment for the curated feature flag enumeration."""

from __future__ import annotations

from collections.abc import Sequence

from .exceptions import FlagOrderError
from .model import FlagBit

# A leaf flag is its name; a composite is (name, member names).
FlagEntry = str | tuple[str, Sequence[str]]


def assign_flags(entries: Sequence[FlagEntry], *, max_bits: int = 32) -> list[FlagBit]:
    """Give each leaf the next free bit and OR composites from earlier leaves."""
    assigned: dict[str, FlagBit] = {}
    next_bit = 0

    for entry in entries:
        if isinstance(entry, str):
            name, members = entry, ()
        else:
            name, members = entry[0], tuple(entry[1])

        if name in assigned:
            raise FlagOrderError(f"Flag {name} is declared twice")

        if not members:
            if next_bit >= max_bits:
                raise FlagOrderError(f"Flag {name} does not fit in {max_bits} bits")
            assigned[name] = FlagBit(name=name, value=1 << next_bit)
            next_bit += 1
            continue

        value = 0
        for member in members:
            bit = assigned.get(member)
            if bit is None:
                raise FlagOrderError(f"Flag {name} references {member} before it is declared")
            if bit.is_composite:
                raise FlagOrderError(f"Flag {name} references composite flag {member}")
            value |= bit.value
        assigned[name] = FlagBit(name=name, value=value, members=members)

    return list(assigned.values())
