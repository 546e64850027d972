# Memory is scoped to a single run:
#
#   run instance
#     +-- MemoryStore          one per run, dropped with it
#           +-- "state_a": [slot 0, slot 1, ...]
#           +-- "state_b": [slot 0, ...]
#
# Each execution of a state's action gets a fresh MemoryAccessor whose Nth
# call addresses slot N of that state's list.
from .runtime_memory import MemoryAccessor, MemoryStore, UseMemory

__all__ = ["MemoryAccessor", "MemoryStore", "UseMemory"]
