from .chains    import HashIndex, build_index
from .collector import FuncDef, Key, collect_names, load_definitions
from .emitter   import EmitOptions, emit
from .errors    import (CapacityOverflowError, DefinitionsError,
                        DuplicateDefinitionError, GenerationError)
from .hasher    import hash_name
from .lookup    import StaticFuncIndex

__all__ = ["HashIndex", "build_index", "FuncDef", "Key", "collect_names",
           "load_definitions", "EmitOptions", "emit", "GenerationError",
           "CapacityOverflowError", "DefinitionsError", "DuplicateDefinitionError",
           "hash_name", "StaticFuncIndex"]
