# ==================================================
# examples/probe_names.py
# ==================================================
import argparse
from static_func_hash import StaticFuncIndex, build_index, load_definitions

def main():
    p = argparse.ArgumentParser()
    p.add_argument("defs", help="definitions file (.c or name list)")
    p.add_argument("names", nargs="+")
    args = p.parse_args()

    idx = StaticFuncIndex(build_index(load_definitions(args.defs)))
    for name in args.names:
        hit = idx.probe(name)
        print(f"{name:20s} overloads={hit.overloads} slot={hit.slot}")

if __name__ == "__main__":
    main()
