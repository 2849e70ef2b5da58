# ==================================================
# static_func_hash/emitter.py
# ==================================================
"""
Serialization of a built HashIndex into source text.

Two targets are produced from the same tables:

``c``
    The ``sqlite3GetBuiltinFunction()`` routine, meant to be pasted after
    the ``aBuiltinFunc[]`` definitions array.  The arrays become function
    local ``static const u8`` tables and an ``assert()`` ties the array
    size baked in here to the size of ``aBuiltinFunc[]`` at compile time.

``python``
    A standalone module holding the tables, the key names and
    ``get_builtin_function(name, n_name) -> (overloads, slot)``.

Both templates take the hash step from ``hasher.step_source`` so they
cannot drift from the hash used while building the tables.
"""
from dataclasses import dataclass
from typing import Iterable

from .chains import HashIndex
from .const  import (ARRAY_WRAP, BANNER, DEFS_ARRAY, FOLD_TABLE, FUNC_NAME,
                     HASH_MASK)
from .fold   import UPPER_TO_LOWER, as_bytes
from .hasher import step_source

FORMATS = ("c", "python")


@dataclass(frozen=True)
class EmitOptions:
    func_name:  str = FUNC_NAME
    defs_array: str = DEFS_ARRAY
    fold_table: str = FOLD_TABLE
    def_type:   str = "FuncDef"
    name_field: str = "zName"
    strnicmp:   str = "sqlite3StrNICmp"
    py_func:    str = "get_builtin_function"


# ── helpers ──────────────────────────────────────────────────
def format_values(values: Iterable[int], indent: str, wrap: int = ARRAY_WRAP) -> list[str]:
    vals = [f"{int(v):2d}," for v in values]
    return [indent + " ".join(vals[i:i + wrap]) for i in range(0, len(vals), wrap)]

def c_array(name: str, values, indent: str = "  ") -> str:
    values = list(values)
    size = len(values)
    if not size:                        # zero-length arrays are not valid C
        values, size = [0], 1
    body = format_values(values, indent * 2)
    return "\n".join([f"{indent}static const u8 {name}[{size}] = {{", *body, f"{indent}}};"])

def py_bytes(name: str, values) -> str:
    body = format_values(values, "    ")
    return "\n".join([f"{name} = bytes((", *body, "))"])


# ── C ────────────────────────────────────────────────────────
def emit_c(index: HashIndex, opts: EmitOptions = EmitOptions()) -> str:
    n = index.count
    o = opts
    step = step_source("iKey", f"(u8){o.fold_table}[(u8)zName[ii]]")
    out = [
        f"/******* {BANNER} **************/",
        f"int {o.func_name}(",
        "  const char *zName,",
        "  int nName,",
        f"  {o.def_type} **paFunc",
        "){",
        c_array("aHash", index.buckets),
        c_array("anFunc", index.overloads),
        c_array("aNext", index.links),
        f"  {o.def_type} *pNoFunc = &{o.defs_array}[{n}];",
        "  unsigned int iKey = 0;",
        "  int ii;",
        f"  {o.def_type} *pFunc;",
        "",
        f"  assert( (sizeof({o.defs_array})/sizeof({o.defs_array}[0]))=={n} );",
        "",
        "  for(ii=0; ii<nName; ii++){",
        f"    iKey = {step};",
        "  }",
        f"  iKey = iKey%{index.hashsize};",
        "",
        f"  pFunc = &{o.defs_array}[iKey = aHash[iKey]];",
        "  while( pFunc!=pNoFunc",
        f"      && ({o.strnicmp}(pFunc->{o.name_field}, zName, nName)"
        f" || pFunc->{o.name_field}[nName]!=0) ){{",
        f"    pFunc = &{o.defs_array}[iKey = aNext[iKey]];",
        "  }",
        "",
        "  *paFunc = pFunc;",
        "  return pFunc==pNoFunc ? 0 : anFunc[iKey];",
        "}",
    ]
    return "\n".join(out) + "\n"


# ── Python ───────────────────────────────────────────────────
def emit_python(index: HashIndex, opts: EmitOptions = EmitOptions()) -> str:
    step = step_source("key", "_FOLD[c]")
    names = [f"    {as_bytes(k.name)!r}," for k in index.keys]
    out = [
        f"# {BANNER}",
        f"HASHSIZE = {index.hashsize}",
        f"N_FUNC = {index.count}",
        "",
        py_bytes("A_HASH", index.buckets),
        py_bytes("AN_FUNC", index.overloads),
        py_bytes("A_NEXT", index.links),
        "NAMES = (", *names, ")",
        py_bytes("_FOLD", UPPER_TO_LOWER),
        "",
        "",
        f"def {opts.py_func}(name: bytes, n_name: int) -> tuple[int, int]:",
        '    """Return (overload count, slot); slot == N_FUNC when not found."""',
        "    name = name[:n_name]",
        "    key = 0",
        "    for c in name:",
        f"        key = ({step}) & {HASH_MASK:#x}",
        "    key %= HASHSIZE",
        "    want = name.translate(_FOLD)",
        "    i = A_HASH[key]",
        "    while i != N_FUNC and NAMES[i].translate(_FOLD) != want:",
        "        i = A_NEXT[i]",
        "    return (0 if i == N_FUNC else AN_FUNC[i]), i",
    ]
    return "\n".join(out) + "\n"


def emit(index: HashIndex, fmt: str = "c", opts: EmitOptions = EmitOptions()) -> str:
    if fmt == "c":
        return emit_c(index, opts)
    if fmt == "python":
        return emit_python(index, opts)
    raise ValueError(f"unknown output format {fmt!r} (expected one of {FORMATS})")
