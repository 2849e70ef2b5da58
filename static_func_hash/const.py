# ==================================================
# static_func_hash/const.py
# ==================================================
HASHSIZE     = 127            # bucket count (prime)
HASH_SHIFT   = 3              # iKey = (iKey << 3) + fold(c)
HASH_MASK    = 0xFFFFFFFF     # accumulator is a C `unsigned int`
MAX_SLOTS    = 256            # every index must fit in a u8
ARRAY_WRAP   = 16             # values per line in emitted arrays

FUNC_NAME    = "sqlite3GetBuiltinFunction"
DEFS_ARRAY   = "aBuiltinFunc"
FOLD_TABLE   = "sqlite3UpperToLower"
BANNER       = "Automatically Generated code - do not edit"
