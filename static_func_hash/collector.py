# ==================================================
# static_func_hash/collector.py
# ==================================================
"""
Name collection: turns a definitions source into the ordered key list.

Two sources are understood:

* C source that declares the builtin table through definition macros,
  e.g. ``FUNCTION(min, -1, 0, 1, minmaxFunc)``.  Every macro invocation
  that survives ``#if``/``#ifdef``/``#else`` selection contributes one key,
  in source order.  Conditions are evaluated against the ``defines``
  mapping (the ``-D`` flags of the command line); a definition under a
  condition that cannot be evaluated is an error, never a guess.
* A plain list with one name per line; blank lines and ``#`` comments
  are ignored.
"""
from __future__ import annotations
import re, logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

from .errors import DefinitionsError

log = logging.getLogger(__name__)

DEF_MACROS = ("FUNCTION", "FUNCTION2", "AGGREGATE", "AGGREGATE2",
              "LIKEFUNC", "VFUNCTION", "DFUNCTION", "PURE_DATE",
              "WAGGREGATE", "STR_FUNCTION", "INLINE_FUNC", "TEST_FUNC",
              "MFUNCTION", "JFUNCTION")
C_SUFFIXES = {".c", ".h", ".inc"}

_COMMENT_RE   = re.compile(r"/\*.*?\*/|//[^\n]*", re.S)
_DIRECTIVE_RE = re.compile(r"^[ \t]*#[ \t]*(\w*)(.*)$")
_MACRO_RE     = re.compile(r"\b(%s)\s*\(" % "|".join(DEF_MACROS))
_DEFINED_RE   = re.compile(r"\bdefined\s*(?:\(\s*(\w+)\s*\)|(\w+))")
_IDENT_RE     = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_INT_RE       = re.compile(r"(\d+)[uUlL]*")


@dataclass(frozen=True)
class FuncDef:
    """Payload of one key: where and how the definition was declared."""
    name:   str
    macro:  str | None = None
    args:   tuple[str, ...] = ()
    line:   int | None = None


@dataclass(frozen=True)
class Key:
    name:    str
    slot:    int
    payload: Any = field(default=None, compare=False)


# ── sources ──────────────────────────────────────────────────
def collect_names(items: Iterable[str | tuple[str, Any]]) -> list[Key]:
    """Keys from plain names or (name, payload) pairs, in iteration order."""
    keys = []
    for slot, item in enumerate(items):
        if isinstance(item, str):
            name, payload = item, FuncDef(item)
        else:
            name, payload = item
        if not name:
            raise DefinitionsError(f"empty name at slot {slot}")
        keys.append(Key(name, slot, payload))
    return keys


# ── #if evaluation ───────────────────────────────────────────
def _eval_term(term: str, defines: Mapping[str, str]) -> bool | None:
    term = term.strip()
    negate = False
    while term.startswith("!"):
        negate = not negate
        term = term[1:].lstrip()
    m = _INT_RE.fullmatch(term)
    if m:
        value = int(m.group(1)) != 0
    elif _IDENT_RE.fullmatch(term):
        if term not in defines:
            value = False                     # undefined identifiers are 0
        else:
            m = _INT_RE.fullmatch(defines[term].strip())
            if m is None:
                return None
            value = int(m.group(1)) != 0
    else:
        return None
    return value != negate

def eval_condition(expr: str, defines: Mapping[str, str]) -> bool | None:
    """Value of an ``#if`` expression, or None when it is beyond ``&&``/``||``/``!``."""
    expr = _DEFINED_RE.sub(lambda m: "1" if (m.group(1) or m.group(2)) in defines else "0", expr)
    if "(" in expr or ")" in expr:
        return None
    result = False
    for alternative in expr.split("||"):
        conj = True
        for term in alternative.split("&&"):
            value = _eval_term(term, defines)
            if value is None:
                return None
            conj = conj and value
        result = result or conj
    return result


@dataclass
class _Cond:
    state: bool | None          # current branch selected / not / unknown
    taken: bool | None          # some earlier branch was selected


def select_lines(text: str, defines: Mapping[str, str] | None = None
                 ) -> tuple[list[str], set[int]]:
    """
    Apply conditional directives to comment-free `text`.

    Returns the source lines with directives and unselected code blanked
    (line numbering is kept) and the 1-based numbers of the lines whose
    selection depends on a condition that could not be evaluated.
    """
    defines = dict(defines or {})
    lines = text.split("\n")
    stack: list[_Cond] = []
    unknown: set[int] = set()

    ii = 0
    while ii < len(lines):
        lineno = ii + 1
        m = _DIRECTIVE_RE.match(lines[ii])
        if m is None:
            states = [c.state for c in stack]
            if False in states:
                lines[ii] = ""
            elif None in states:
                unknown.add(lineno)
            ii += 1
            continue

        directive, rest = m.group(1), m.group(2)
        while rest.endswith("\\") and ii + 1 < len(lines):
            ii += 1
            rest = rest[:-1] + " " + lines[ii]
            lines[ii] = ""
        lines[lineno - 1] = ""
        rest = rest.strip()
        live = all(c.state is True for c in stack)

        if directive in ("if", "ifdef", "ifndef"):
            if directive == "if":
                state = eval_condition(rest, defines)
            else:
                state = (rest.split()[0] in defines) if rest else None
                if directive == "ifndef" and state is not None:
                    state = not state
            stack.append(_Cond(state, state))
        elif directive in ("elif", "else", "endif"):
            if not stack:
                raise DefinitionsError(f"line {lineno}: #{directive} without #if")
            top = stack[-1]
            if directive == "endif":
                stack.pop()
            elif top.taken is True:
                top.state = False
            elif top.taken is None:
                top.state = None
            else:
                top.state = eval_condition(rest, defines) if directive == "elif" else True
                top.taken = top.state
        elif directive == "define" and live:
            m = _IDENT_RE.match(rest)
            if m:
                value = rest[m.end():]
                defines[m.group(0)] = "" if value.startswith("(") else (value.strip() or "1")
        elif directive == "undef" and live:
            defines.pop(rest.split()[0] if rest else "", None)
        ii += 1

    if stack:
        raise DefinitionsError("unterminated #if at end of C source")
    return lines, unknown


# ── macro invocations ────────────────────────────────────────
def _skip_literal(text: str, i: int) -> int:
    quote = text[i]
    j = i + 1
    while j < len(text):
        if text[j] == "\\":
            j += 2
        elif text[j] == quote:
            return j + 1
        else:
            j += 1
    return j

def split_call_args(text: str, open_at: int) -> tuple[list[str], int]:
    """Top-level arguments of the call whose ``(`` is at `open_at`, and the index past ``)``."""
    depth, start, i = 0, open_at + 1, open_at
    args = []
    while i < len(text):
        ch = text[i]
        if ch in "\"'":
            i = _skip_literal(text, i)
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                args.append(text[start:i].strip())
                return args, i + 1
        elif ch == "," and depth == 1:
            args.append(text[start:i].strip())
            start = i + 1
        i += 1
    line = text.count("\n", 0, open_at) + 1
    raise DefinitionsError(f"line {line}: unbalanced parentheses")

def parse_c_definitions(text: str, defines: Mapping[str, str] | None = None) -> list[Key]:
    # blank out comments but keep newlines so line numbers survive
    stripped = _COMMENT_RE.sub(lambda m: "\n" * m.group(0).count("\n"), text)
    lines, unknown = select_lines(stripped, defines)
    source = "\n".join(lines)

    pairs = []
    pos = 0
    while True:
        m = _MACRO_RE.search(source, pos)
        if m is None:
            break
        macro = m.group(1)
        line = source.count("\n", 0, m.start()) + 1
        args, pos = split_call_args(source, m.end() - 1)
        name = args[0]
        if not _IDENT_RE.fullmatch(name):
            raise DefinitionsError(f"line {line}: {macro}() needs a function name, got {name!r}")
        if line in unknown:
            raise DefinitionsError(
                f"line {line}: {name!r} sits under a preprocessor condition that "
                f"cannot be evaluated; pass its symbols with -D")
        rest = tuple(args[1:])
        pairs.append((name, FuncDef(name, macro, rest, line)))
    if not pairs:
        raise DefinitionsError("no function definitions found in C source")
    return collect_names(pairs)

def parse_name_list(text: str) -> list[Key]:
    pairs = []
    for lineno, raw in enumerate(text.splitlines(), 1):
        name = raw.split("#", 1)[0].strip()
        if not name:
            continue
        if any(ch.isspace() for ch in name):
            raise DefinitionsError(f"line {lineno}: expected one name, got {name!r}")
        pairs.append((name, FuncDef(name, line=lineno)))
    return collect_names(pairs)

def load_definitions(path: str | Path, text: str | bytes | None = None,
                     defines: Mapping[str, str] | None = None) -> list[Key]:
    """Read `path` (or the already-read `text`) and pick the parser by suffix."""
    path = Path(path)
    if text is None:
        try:
            text = path.read_bytes()
        except OSError as e:
            raise DefinitionsError(f"cannot read {path}: {e.strerror}") from e
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DefinitionsError(f"{path} is not valid UTF-8 (byte {e.start})") from e
    if path.suffix in C_SUFFIXES:
        keys = parse_c_definitions(text, defines)
    else:
        keys = parse_name_list(text)
    log.info("collected %d names from %s", len(keys), path)
    return keys
