# ==================================================
# static_func_hash/lookup.py
# ==================================================
from typing import Any, NamedTuple, Optional

from .chains import HashIndex
from .fold   import as_bytes, fold_bytes
from .hasher import hash_name


class Match(NamedTuple):
    overloads: int            # 0 on a miss
    slot:      int            # == index.sentinel on a miss


class StaticFuncIndex:
    """Read-only probe over a built HashIndex, same walk as the emitted routine."""
    def __init__(self, index: HashIndex):
        self.index = index
        self._names = tuple(fold_bytes(k.name) for k in index.keys)

    # ------------------------------------------------------------------
    def probe(self, name: str | bytes, n_name: Optional[int] = None) -> Match:
        data = as_bytes(name)
        if n_name is None:
            n_name = len(data)
        want = fold_bytes(data[:n_name])
        idx = self.index

        slot = int(idx.buckets[hash_name(data, n_name, idx.hashsize)])
        while slot != idx.sentinel and self._names[slot] != want:
            slot = int(idx.links[slot])
        if slot == idx.sentinel:
            return Match(0, slot)
        return Match(int(idx.overloads[slot]), slot)

    def get(self, name: str | bytes, n_name: Optional[int] = None) -> Optional[Any]:
        """Payload of the group's first definition; None if absent."""
        hit = self.probe(name, n_name)
        if not hit.overloads:
            return None
        return self.index.keys[hit.slot].payload

    def overloads(self, name: str | bytes, n_name: Optional[int] = None) -> list[Any]:
        hit = self.probe(name, n_name)
        keys = self.index.keys[hit.slot:hit.slot + hit.overloads]
        return [k.payload for k in keys]

    def __contains__(self, name: str | bytes) -> bool:
        return self.probe(name).overloads > 0
