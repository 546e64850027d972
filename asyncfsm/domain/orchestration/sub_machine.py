from typing import Any, Callable, Dict, Optional, Union, TYPE_CHECKING
from datetime import datetime, timezone

from asyncfsm.domain.errors import InvalidTransitionError
from asyncfsm.domain.memory.runtime_memory import UseMemory
from asyncfsm.domain.models.machine_state import Transition

if TYPE_CHECKING:
    from asyncfsm.domain.orchestration.state_machine import StateMachine


NextStateResolver = Union[str, Callable[[str], Optional[str]], None]


class SubMachineAction:
    """A whole machine exposed as one action of an enclosing machine.

    Every call starts a fresh run of the inner machine, so revisiting the
    composed state never sees memory left by a previous inner run.
    """

    def __init__(
        self,
        machine: "StateMachine",
        next_state: NextStateResolver = None,
        initial_state: Optional[str] = None,
    ):
        self.validate_next_state(next_state)

        self.machine = machine
        self.next_state = next_state
        self.initial_state = initial_state
        self.invocations = 0
        self.created_at = datetime.now(timezone.utc)
        self.last_active: Optional[datetime] = None

    @staticmethod
    def validate_next_state(next_state: NextStateResolver) -> None:
        if not (next_state is None or isinstance(next_state, str) or callable(next_state)):
            raise InvalidTransitionError(f"Invalid value for argument next_state: {next_state!r}")

    @property
    def name(self) -> str:
        return self.machine.name

    async def __call__(self, input_data: Any, use_memory: UseMemory) -> Transition:
        """Run the inner machine and map its terminal state to the outer next state"""

        self.update_activity()
        result = await self.machine.start(input_data, self.initial_state)
        return Transition.to(self.resolve(result.last_state), result.output)

    def resolve(self, last_state: str) -> Optional[str]:
        """Outer next state for an inner run that ended in ``last_state``"""

        if self.next_state is None or isinstance(self.next_state, str):
            return self.next_state
        return self.next_state(last_state)

    def update_activity(self):
        """Update last activity timestamp"""
        self.invocations += 1
        self.last_active = datetime.now(timezone.utc)

    def get_info(self) -> Dict[str, Any]:
        """Get composed action information"""
        return {
            "name": self.name,
            "states": list(self.machine.states),
            "next_state": self.next_state if not callable(self.next_state) else "<resolver>",
            "initial_state": self.initial_state,
            "invocations": self.invocations,
            "created_at": self.created_at.isoformat(),
            "last_active": self.last_active.isoformat() if self.last_active else None
        }
