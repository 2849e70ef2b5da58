"""Tests for the emitted lookup routines."""

import shutil
import subprocess

import pytest

from static_func_hash import EmitOptions, build_index, collect_names, emit
from static_func_hash.emitter import c_array, emit_c, emit_python, format_values
from static_func_hash.fold import UPPER_TO_LOWER
from static_func_hash.hasher import hash_name


def load_python(index, **kw):
    ns = {}
    exec(compile(emit_python(index, **kw), "<generated>", "exec"), ns)
    return ns


# --- table formatting ---

class TestFormatting:
    def test_wraps_sixteen_per_line(self):
        lines = format_values(range(20), "    ")
        assert len(lines) == 2
        assert lines[0].startswith("     0,  1,")
        assert lines[1] == "    16, 17, 18, 19,"

    def test_c_array(self):
        assert c_array("aNext", [5, 5]) == (
            "  static const u8 aNext[2] = {\n"
            "     5,  5,\n"
            "  };")

    def test_empty_c_array_gets_one_slot(self):
        assert "aNext[1]" in c_array("aNext", [])


# --- emitted Python ---

class TestEmittedPython:
    def test_scenario(self, scenario_index):
        ns = load_python(scenario_index)
        lookup = ns["get_builtin_function"]
        assert ns["N_FUNC"] == 5
        assert lookup(b"MAX", 3) == (2, 3)
        assert lookup(b"maxx", 4) == (0, 5)
        assert lookup(b"like", 4) == (1, 0)

    def test_tables_match_index(self, builtin_index):
        ns = load_python(builtin_index)
        assert list(ns["A_HASH"]) == list(builtin_index.buckets)
        assert list(ns["AN_FUNC"]) == list(builtin_index.overloads)
        assert list(ns["A_NEXT"]) == list(builtin_index.links)
        assert ns["_FOLD"] == bytes(UPPER_TO_LOWER)

    def test_every_key_and_case_variant(self, builtin_index):
        lookup = load_python(builtin_index)["get_builtin_function"]
        for g in builtin_index.groups:
            name = builtin_index.keys[g.head].name.encode()
            for variant in (name, name.upper(), name.swapcase()):
                assert lookup(variant, len(variant)) == (g.overloads, g.head)
                assert lookup(variant + b"(", len(variant)) == (g.overloads, g.head)

    def test_hash_replay_matches_generation(self, builtin_index):
        ns = load_python(builtin_index)
        for k in builtin_index.keys:
            data = k.name.upper().encode()
            bucket = hash_name(data)
            assert bucket == hash_name(k.name)
            assert ns["A_HASH"][bucket] != ns["N_FUNC"]

    def test_absent_names(self, builtin_index):
        lookup = load_python(builtin_index)["get_builtin_function"]
        for name in (b"regexp", b"MAXX", b"", b"ma", b"\xc9t\xe9"):
            assert lookup(name, len(name)) == (0, builtin_index.count)

    def test_custom_function_name(self, scenario_index):
        ns = load_python(scenario_index, opts=EmitOptions(py_func="find"))
        assert ns["find"](b"glob", 4) == (1, 1)

    def test_empty_index(self):
        ns = load_python(build_index([]))
        assert ns["get_builtin_function"](b"max", 3) == (0, 0)


# --- emitted C ---

class TestEmittedCText:
    def test_structure(self, scenario_index):
        text = emit_c(scenario_index)
        assert text.startswith("/******* Automatically Generated code - do not edit")
        assert "int sqlite3GetBuiltinFunction(" in text
        assert "static const u8 aHash[127] = {" in text
        assert "static const u8 anFunc[5] = {" in text
        assert "static const u8 aNext[5] = {" in text
        assert "FuncDef *pNoFunc = &aBuiltinFunc[5];" in text
        assert "assert( (sizeof(aBuiltinFunc)/sizeof(aBuiltinFunc[0]))==5 );" in text
        assert "iKey = (iKey<<3) + (u8)sqlite3UpperToLower[(u8)zName[ii]];" in text
        assert "iKey = iKey%127;" in text
        assert "return pFunc==pNoFunc ? 0 : anFunc[iKey];" in text

    def test_hashsize_is_baked_in(self):
        text = emit_c(build_index(collect_names(["a", "b"]), hashsize=31))
        assert "aHash[31]" in text
        assert "iKey%31;" in text

    def test_options(self, scenario_index):
        text = emit_c(scenario_index, EmitOptions(func_name="lookupFunc", defs_array="aFn"))
        assert "int lookupFunc(" in text
        assert "&aFn[5]" in text

    def test_dispatch(self, scenario_index):
        assert emit(scenario_index) == emit_c(scenario_index)
        assert emit(scenario_index, "python") == emit_python(scenario_index)
        with pytest.raises(ValueError):
            emit(scenario_index, "rust")


CC = shutil.which("cc") or shutil.which("gcc") or shutil.which("clang")

HARNESS = """\
#include <assert.h>
#include <stdio.h>
#include <string.h>

typedef unsigned char u8;
typedef struct FuncDef { const char *zName; } FuncDef;

static const u8 sqlite3UpperToLower[256] = {
%(fold)s
};

static int sqlite3StrNICmp(const char *zLeft, const char *zRight, int N){
  const unsigned char *a = (const unsigned char *)zLeft;
  const unsigned char *b = (const unsigned char *)zRight;
  while( N-- > 0 && *a!=0 && sqlite3UpperToLower[*a]==sqlite3UpperToLower[*b] ){ a++; b++; }
  return N<0 ? 0 : sqlite3UpperToLower[*a] - sqlite3UpperToLower[*b];
}

static FuncDef aBuiltinFunc[] = {
%(defs)s
};

%(generated)s
int main(int argc, char **argv){
  int i;
  for(i=1; i<argc; i++){
    FuncDef *p = 0;
    int n = sqlite3GetBuiltinFunction(argv[i], (int)strlen(argv[i]), &p);
    printf("%%d %%d\\n", n, (int)(p - aBuiltinFunc));
  }
  return 0;
}
"""


def run_c(index, names, tmp_path):
    defs = ",\n".join(f'  {{ "{k.name}" }}' for k in index.keys)
    src = HARNESS % {
        "fold": "\n".join(format_values(UPPER_TO_LOWER, "  ")),
        "defs": defs,
        "generated": emit_c(index),
    }
    (tmp_path / "lookup.c").write_text(src)
    exe = tmp_path / "lookup"
    subprocess.run([CC, "-o", str(exe), str(tmp_path / "lookup.c")], check=True,
                   capture_output=True)
    out = subprocess.run([str(exe), *names], check=True, capture_output=True, text=True)
    return [tuple(int(x) for x in line.split()) for line in out.stdout.splitlines()]


@pytest.mark.skipif(CC is None, reason="no C compiler on PATH")
class TestEmittedCCompiled:
    def test_scenario(self, scenario_index, tmp_path):
        assert run_c(scenario_index, ["MAX", "maxx", "Like", "glob", "ma"], tmp_path) == [
            (2, 3), (0, 5), (1, 0), (1, 1), (0, 5)]

    def test_matches_python_lookup(self, builtin_index, tmp_path):
        lookup = load_python(builtin_index)["get_builtin_function"]
        names = [k.name for k in builtin_index.keys]
        names += [n.upper() for n in names] + ["regexp", "LTRIMX", "s"]
        got = run_c(builtin_index, names, tmp_path)
        assert got == [lookup(n.encode(), len(n)) for n in names]
