from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from asyncfsm.domain.action.action_validator import ActionValidator
from asyncfsm.domain.errors import DuplicateStateError, MachineBuiltError
from asyncfsm.domain.memory.runtime_memory import UseMemory


Action = Callable[[Any, UseMemory], Union[Any, Awaitable[Any]]]


class ActionRegistry:
    """Registry mapping state names to actions.

    Insertion order is kept; the first registered state is the default
    initial state. Once frozen the registry is read-only and is shared by
    reference between every run of its machine.
    """

    def __init__(self, owner: str):
        self.owner = owner
        self.actions: Dict[str, Action] = {}
        self.initial_state: Optional[str] = None
        self._frozen = False

    def register(self, name: str, action: Action) -> None:
        """Register a new state"""

        if self._frozen:
            raise MachineBuiltError(self.owner)

        name = ActionValidator.validate_state(name, action)

        if name in self.actions:
            raise DuplicateStateError(name)

        self.actions[name] = action

        if self.initial_state is None:
            self.initial_state = name

    def get(self, name: str) -> Optional[Action]:
        """Get the action for a state, None when not registered"""
        return self.actions.get(name)

    def names(self) -> List[str]:
        return list(self.actions)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self.actions

    def __len__(self) -> int:
        return len(self.actions)
