# ==================================================
# static_func_hash/chains.py
# ==================================================
import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from .const     import HASHSIZE, MAX_SLOTS
from .collector import Key
from .errors    import CapacityOverflowError, DuplicateDefinitionError, GenerationError
from .fold      import stricmp
from .hasher    import hash_name

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Group:
    head:      int          # slot of the first key in the run
    overloads: int          # number of keys merged into it


class HashIndex:
    """
    Immutable chained-bucket index over a static key list.

    Every index value is a slot number in ``0..count-1``; ``count`` itself
    is the sentinel for both an empty bucket and the end of a chain.
    """
    def __init__(self, keys: Sequence[Key], hashsize: int,
                 buckets: np.ndarray, overloads: np.ndarray, links: np.ndarray,
                 groups: list[Group]):
        self.keys      = tuple(keys)
        self.hashsize  = hashsize
        self.buckets   = buckets
        self.overloads = overloads
        self.links     = links
        self.groups    = tuple(groups)
        for arr in (buckets, overloads, links):
            arr.setflags(write=False)

    @property
    def count(self) -> int:
        return len(self.keys)

    @property
    def sentinel(self) -> int:
        return len(self.keys)

    @property
    def n_groups(self) -> int:
        return len(self.groups)

    # ------------------------------------------------------------------
    def chain(self, bucket: int) -> Iterator[int]:
        """Slots of bucket `bucket`, in probe order."""
        slot = int(self.buckets[bucket])
        while slot != self.sentinel:
            yield slot
            slot = int(self.links[slot])

    def stats(self) -> dict:
        lengths = [sum(1 for _ in self.chain(b)) for b in range(self.hashsize)]
        used = [n for n in lengths if n]
        return {
            "keys":          self.count,
            "groups":        self.n_groups,
            "hashsize":      self.hashsize,
            "buckets_used":  len(used),
            "longest_chain": max(used, default=0),
            "mean_chain":    round(sum(used) / len(used), 3) if used else 0.0,
        }


# ── construction ─────────────────────────────────────────────
def build_index(keys: Sequence[Key], hashsize: int = HASHSIZE) -> HashIndex:
    n_func = len(keys)
    if n_func >= MAX_SLOTS:
        raise CapacityOverflowError(n_func, MAX_SLOTS)
    if hashsize <= 0:
        raise GenerationError(f"hashsize must be positive, got {hashsize}")

    a_hash  = np.full(hashsize, n_func, dtype=np.uint8)
    a_next  = np.full(n_func, n_func, dtype=np.uint8)
    an_func = np.zeros(n_func, dtype=np.uint8)
    groups: list[Group] = []

    i_head = -1
    for ii, key in enumerate(keys):
        if i_head >= 0 and stricmp(key.name, keys[i_head].name) == 0:
            an_func[i_head] += 1
            continue

        # duplicates must sit in adjacent slots
        for jj in range(ii):
            if stricmp(key.name, keys[jj].name) == 0:
                raise DuplicateDefinitionError(key.name, ii, keys[jj].name, jj)

        if i_head >= 0:
            groups.append(Group(i_head, int(an_func[i_head])))
        i_head = ii
        an_func[i_head] = 1

        i_hash = hash_name(key.name, hashsize=hashsize)
        if a_hash[i_hash] != n_func:
            i_next = int(a_hash[i_hash])
            while a_next[i_next] != n_func:
                i_next = int(a_next[i_next])
            a_next[i_next] = ii
        else:
            a_hash[i_hash] = ii

    if i_head >= 0:
        groups.append(Group(i_head, int(an_func[i_head])))

    log.debug("built index: %d keys, %d groups, %d buckets", n_func, len(groups), hashsize)
    return HashIndex(keys, hashsize, a_hash, an_func, a_next, groups)
