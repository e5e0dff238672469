"""
Deterministic seeding helpers.

Every allocation run derives its randomness from the attendee set alone so the
same group of players always gets the same teams and the same schedule.
"""

from collections.abc import Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")

MASK_32 = 0xFFFFFFFF
FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
_NAME_SEPARATOR = "\x1f"


def derive_seed(roster: Iterable[str]) -> int:
    """
    Derive a stable 32-bit seed from a set of attendee names.

    Names are sorted before hashing, so the seed depends only on *who* attends,
    not on the order they were added. The hash is 32-bit FNV-1a over the UTF-8
    bytes of the names joined by the ASCII unit separator.

    Args:
        roster: Attendee identifiers

    Returns:
        Unsigned 32-bit seed
    """
    joined = _NAME_SEPARATOR.join(sorted(roster))
    h = FNV_OFFSET_BASIS
    for byte in joined.encode("utf-8"):
        h ^= byte
        h = (h * FNV_PRIME) & MASK_32
    return h


class Mulberry32:
    """
    Small, fast PRNG with 32 bits of state (mulberry32).

    Deterministic for a given seed and independent of the process-wide
    ``random`` module, so results are reproducible across interpreters.
    """

    def __init__(self, seed: int):
        self.state = seed & MASK_32

    def next_uint32(self) -> int:
        self.state = (self.state + 0x6D2B79F5) & MASK_32
        t = self.state
        t = ((t ^ (t >> 15)) * (t | 1)) & MASK_32
        t ^= (t + (((t ^ (t >> 7)) * (t | 61)) & MASK_32)) & MASK_32
        return (t ^ (t >> 14)) & MASK_32

    def random(self) -> float:
        """Return the next float in [0, 1)."""
        return self.next_uint32() / 4294967296


def seeded_shuffle(items: Sequence[T], seed: int) -> list[T]:
    """
    Fisher-Yates shuffle driven by Mulberry32.

    Returns a new list; the caller's sequence is never modified.
    """
    out = list(items)
    rng = Mulberry32(seed)
    for i in range(len(out) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        out[i], out[j] = out[j], out[i]
    return out
