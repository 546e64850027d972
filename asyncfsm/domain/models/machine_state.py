from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

from asyncfsm.domain.errors import InvalidTransitionError


_NO_OUTPUT: Any = object()


class MachineStatus(str, Enum):
    """Registry lifecycle of a machine"""
    OPEN = "open"
    BUILT = "built"


class MachineRole(str, Enum):
    """What a StateMachine object is used for"""
    DEFINITION = "definition"
    RUN = "run"


class Transition(BaseModel):
    """Normalized value returned by an action.

    ``next_state`` of None marks the terminal state. ``has_output`` tells a
    transition that carries ``None`` as output apart from one that carries
    no output at all; both feed ``None`` into the next state.
    """
    model_config = ConfigDict(frozen=True)

    next_state: Optional[str] = Field(None, description="Next state name, None when terminal")
    output: Any = Field(None, description="Input for the next state or final run output")
    has_output: bool = Field(default=False)

    @classmethod
    def to(cls, next_state: Optional[str], output: Any = _NO_OUTPUT) -> "Transition":
        """Build a transition, with or without output"""
        if output is _NO_OUTPUT:
            return cls(next_state=_check_state(next_state))
        return cls(next_state=_check_state(next_state), output=output, has_output=True)

    @classmethod
    def end(cls, output: Any = _NO_OUTPUT) -> "Transition":
        """Build a terminal transition"""
        return cls.to(None, output)

    @classmethod
    def pack(cls, value: Any) -> "Transition":
        """Normalize whatever an action returned.

        Tuples and lists are containers and are read as ``(next_state,)`` or
        ``(next_state, output)``; anything else is read as ``(value,)``.
        """
        if isinstance(value, Transition):
            return value
        if not isinstance(value, (tuple, list)):
            return cls.to(value)
        if len(value) == 0:
            return cls.end()
        if len(value) == 1:
            return cls.to(value[0])
        if len(value) == 2:
            return cls.to(value[0], value[1])
        raise InvalidTransitionError(
            f"Action returned a container of {len(value)} elements, expected at most 2"
        )

    @property
    def is_terminal(self) -> bool:
        return self.next_state is None


def _check_state(next_state: Any) -> Optional[str]:
    if next_state is None or isinstance(next_state, str):
        return next_state
    raise InvalidTransitionError(
        f"Next state must be a state name or None, got {type(next_state).__name__}: {next_state!r}"
    )


class RunResult(BaseModel):
    """Outcome of a completed run"""
    model_config = ConfigDict(frozen=True)

    last_state: str = Field(description="State whose action ended the run")
    output: Any = Field(None, description="Output of the terminal action")
    run_id: str = Field(description="Identifier bound into the run's log entries")
    trace: List[str] = Field(default_factory=list, description="States visited, in order")

    def get_run_summary(self) -> dict:
        """Get a loggable summary of the run"""
        return {
            "run_id": self.run_id,
            "last_state": self.last_state,
            "steps": len(self.trace),
            "has_output": self.output is not None,
        }
