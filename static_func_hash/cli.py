# ==================================================
# static_func_hash/cli.py
# ==================================================
"""
Generate the builtin-function lookup routine.

    static-func-hash func.c > fkeywordhash.h
    static-func-hash func.c -D SQLITE_CASE_SENSITIVE_LIKE > fkeywordhash.h
    static-func-hash names.txt --format python > builtins_lookup.py
    cat names.txt | static-func-hash - --stats

Generated text goes to stdout; diagnostics go to stderr.  Any generation
error exits with status 1 and writes nothing to stdout.
"""
import argparse, logging, os, sys

from .chains    import build_index
from .collector import load_definitions
from .const     import FUNC_NAME, HASHSIZE
from .emitter   import FORMATS, EmitOptions, emit
from .errors    import GenerationError

# ───────────────────────── configuration ──────────────────────
HASHSIZE_ENV = "STATIC_FUNC_HASH_SIZE"
LOG_LEVEL    = os.getenv("STATIC_FUNC_HASH_LOG", "WARNING")

log = logging.getLogger("static_func_hash")


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value

def parse_define(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not name:
        raise argparse.ArgumentTypeError(f"invalid define {text!r}")
    return name, value if sep else "1"


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="static-func-hash",
                                description="Generate a static hash lookup routine "
                                            "for builtin SQL function names.")
    p.add_argument("defs", nargs="?", default="-",
                   help="C definitions source (.c/.h) or a name-per-line list; "
                        "'-' or omitted reads a name list from stdin")
    p.add_argument("-D", dest="defines", type=parse_define, action="append", default=[],
                   metavar="NAME[=VALUE]",
                   help="preprocessor symbol used to select #if branches of a C source")
    p.add_argument("--format", choices=FORMATS, default="c", help="output language")
    # a string default goes through `type`, so a bad environment value is reported here
    p.add_argument("--hashsize", type=positive_int,
                   default=os.getenv(HASHSIZE_ENV, str(HASHSIZE)),
                   help=f"number of hash buckets (default %(default)s, env {HASHSIZE_ENV})")
    p.add_argument("--func-name", default=FUNC_NAME,
                   help="name of the emitted C routine")
    p.add_argument("--stats", action="store_true",
                   help="log bucket occupancy to stderr")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    level = "DEBUG" if args.verbose else "INFO" if args.stats else LOG_LEVEL.upper()
    logging.basicConfig(level=level,
                        stream=sys.stderr, format="%(name)s: %(levelname)s: %(message)s")
    defines = dict(args.defines)
    try:
        if args.defs == "-":
            keys = load_definitions("<stdin>", sys.stdin.buffer.read(), defines)
        else:
            keys = load_definitions(args.defs, defines=defines)
        index = build_index(keys, hashsize=args.hashsize)
        text  = emit(index, args.format, EmitOptions(func_name=args.func_name))
    except GenerationError as e:
        log.error("%s", e)
        return 1

    if args.stats:
        for k, v in index.stats().items():
            log.info("%-14s %s", k, v)
    sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
