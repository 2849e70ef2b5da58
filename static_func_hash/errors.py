# ==================================================
# static_func_hash/errors.py
# ==================================================
class GenerationError(ValueError):
    """Base class for every fatal generation-time failure."""


class DuplicateDefinitionError(GenerationError):
    def __init__(self, name: str, slot: int, earlier: str, earlier_slot: int):
        self.name = name
        self.slot = slot
        self.earlier = earlier
        self.earlier_slot = earlier_slot
        super().__init__(
            f"duplicate definition of {name!r} at slot {slot}: "
            f"matches {earlier!r} at slot {earlier_slot}, which is not adjacent")


class CapacityOverflowError(GenerationError):
    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"{count} entries do not fit a u8 index (limit {limit - 1})")


class DefinitionsError(GenerationError):
    pass
