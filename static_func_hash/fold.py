# ==================================================
# static_func_hash/fold.py
# ==================================================
"""
ASCII case folding used by the hash and by name comparison.

Only `A`-`Z` are folded; every other byte value, including 0x80-0xFF,
maps to itself.  This is byte-wise folding, not Unicode case folding.
"""
import numpy as np

UPPER_TO_LOWER = np.arange(256, dtype=np.uint8)
UPPER_TO_LOWER[ord("A"):ord("Z") + 1] += 32
UPPER_TO_LOWER.setflags(write=False)

_FOLD = bytes(UPPER_TO_LOWER)          # bytes.translate() form of the same table


def as_bytes(name: str | bytes) -> bytes:
    return name if isinstance(name, bytes) else name.encode("utf-8")

def fold_byte(c: int) -> int:
    return _FOLD[c]

def fold_bytes(name: str | bytes) -> bytes:
    return as_bytes(name).translate(_FOLD)

# ------------------------------------------------------------------
def stricmp(left: str | bytes, right: str | bytes) -> int:
    """Case-insensitive compare; <0, 0 or >0 like the C routine."""
    a, b = fold_bytes(left), fold_bytes(right)
    return (a > b) - (a < b)

def strnicmp(left: str | bytes, right: str | bytes, n: int) -> int:
    """Compare at most `n` bytes, stopping early at the end of either name."""
    return stricmp(as_bytes(left)[:n], as_bytes(right)[:n])
