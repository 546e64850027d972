from typing import Any, Callable, Dict, List, Protocol, Tuple

from asyncfsm.domain.errors import MemoryAccessError


Setter = Callable[[Any], None]


def _is_blank(value: Any) -> bool:
    """Stored values that read back as the initial value.

    None, False, zero, NaN and empty strings; containers are never blank,
    even when empty, so in-place mutation of a stored list is kept.
    """
    if value is None:
        return True
    if isinstance(value, (bool, int, float, complex, str, bytes)):
        return not value or value != value
    return False


class UseMemory(Protocol):
    """Signature of the accessor handed to every action"""

    def __call__(self, initial_value: Any = None) -> Tuple[Any, Setter]: ...


class MemoryStore:
    """Per-run memory: one ordered slot list per state name.

    A store belongs to exactly one run and is dropped with it, so it
    carries no lock.
    """

    def __init__(self):
        self.slots: Dict[str, List[Any]] = {}

    def slots_for(self, state: str) -> List[Any]:
        """Get the slot list for a state, creating it on first visit"""

        memory = self.slots.get(state)
        if memory is None:
            memory = []
            self.slots[state] = memory
        return memory

    def accessor(self, state: str) -> "MemoryAccessor":
        """Create a fresh accessor for one execution of ``state``'s action"""
        return MemoryAccessor(state, self.slots_for(state))

    def snapshot(self) -> Dict[str, List[Any]]:
        """Shallow copy of every slot list"""
        return {state: list(memory) for state, memory in self.slots.items()}

    def states(self) -> List[str]:
        return list(self.slots)

    def __len__(self) -> int:
        return len(self.slots)


class MemoryAccessor:
    """Hook-style accessor over a single state's slot list.

    The Nth call during one action execution addresses slot N. Actions must
    therefore call it the same number of times, in the same order, on every
    visit to their state; the accessor cannot detect a mismatch.
    """

    def __init__(self, state: str, memory: List[Any]):
        self.state = state
        self._memory = memory
        self._index = 0
        self._closed = False

    def __call__(self, initial_value: Any = None) -> Tuple[Any, Setter]:
        self._ensure_open()

        index = self._index
        self._index += 1

        if index >= len(self._memory):
            self._memory.extend([None] * (index + 1 - len(self._memory)))

        stored = self._memory[index]
        if stored is None and initial_value is not None:
            self._memory[index] = initial_value

        value = initial_value if _is_blank(stored) else stored

        def set_value(new_value: Any) -> None:
            self._ensure_open()
            self._memory[index] = new_value

        return value, set_value

    @property
    def calls(self) -> int:
        """Number of slots addressed so far in this execution"""
        return self._index

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Called by the engine once the action has returned"""
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise MemoryAccessError(
                f"use_memory for state '{self.state}' was used after its action returned"
            )
