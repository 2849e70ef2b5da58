from pathlib import Path

import pytest

from static_func_hash import build_index, collect_names, load_definitions

EXAMPLES = Path(__file__).resolve().parent.parent / "static_func_hash" / "examples"

SCENARIO = ["like", "glob", "min", "max", "max"]


@pytest.fixture
def scenario_index():
    return build_index(collect_names(SCENARIO))


@pytest.fixture
def builtin_keys():
    return load_definitions(EXAMPLES / "builtins.txt")


@pytest.fixture
def builtin_index(builtin_keys):
    return build_index(builtin_keys)
