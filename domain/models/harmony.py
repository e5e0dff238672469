"""
Harmony constraints: pairs of players who should not be teammates.
"""

from collections.abc import Iterable, Iterator


def pair_key(a: str, b: str) -> tuple[str, str]:
    """Canonical key for an unordered pair of names."""
    return (a, b) if a <= b else (b, a)


class HarmonyPairs:
    """
    Static, immutable set of unordered "not on the same team" pairs.

    Pairs are stored by canonical key, so ``("A", "B")`` and ``("B", "A")``
    are the same constraint. Self-pairs are ignored.
    """

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()):
        keys = []
        seen = set()
        for a, b in pairs:
            a, b = a.strip(), b.strip()
            if not a or not b or a == b:
                continue
            key = pair_key(a, b)
            if key in seen:
                continue
            seen.add(key)
            keys.append(key)
        self._keys: tuple[tuple[str, str], ...] = tuple(keys)
        self._key_set = frozenset(keys)

    @classmethod
    def parse(cls, tokens: Iterable[str], separator: str = "|") -> "HarmonyPairs":
        """Parse ``"A|B"`` style tokens, skipping anything malformed."""
        pairs = []
        for token in tokens:
            parts = [p.strip() for p in token.split(separator) if p.strip()]
            if len(parts) == 2:
                pairs.append((parts[0], parts[1]))
        return cls(pairs)

    def conflicts(self, a: str | None, b: str | None) -> bool:
        if not a or not b:
            return False
        return pair_key(a, b) in self._key_set

    def bias(self, members: Iterable[str], candidate: str, penalty: float) -> float:
        """Summed penalty for every current member that conflicts with candidate."""
        return sum(penalty for member in members if self.conflicts(member, candidate))

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __bool__(self) -> bool:
        return bool(self._keys)

    def __repr__(self) -> str:
        return f"HarmonyPairs({list(self._keys)!r})"
