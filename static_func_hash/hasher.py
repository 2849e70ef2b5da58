# ==================================================
# static_func_hash/hasher.py
# ==================================================
from .const import HASHSIZE, HASH_SHIFT, HASH_MASK
from .fold  import as_bytes, fold_byte


def hash_step(acc: int, c: int) -> int:
    return ((acc << HASH_SHIFT) + fold_byte(c)) & HASH_MASK

def hash_name(name: str | bytes, n_name: int | None = None,
              hashsize: int = HASHSIZE) -> int:
    """Bucket of the first `n_name` bytes of `name` (all of it by default)."""
    data = as_bytes(name)
    if n_name is not None:
        data = data[:n_name]
    acc = 0
    for c in data:
        acc = hash_step(acc, c)
    return acc % hashsize

def step_source(acc: str, fold: str) -> str:
    """Source text of one hash step, for the emitted lookup routines."""
    return f"({acc}<<{HASH_SHIFT}) + {fold}"
