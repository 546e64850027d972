from typing import Optional


class StateMachineError(Exception):
    """Base class for every error raised by the engine itself"""


class ConfigurationError(StateMachineError, ValueError):
    """Machine was registered or started incorrectly"""


class InvalidStateNameError(ConfigurationError):
    def __init__(self, name: object):
        self.name = name
        super().__init__(f"Invalid state name {name!r}")


class InvalidActionError(ConfigurationError):
    def __init__(self, name: str, action: object):
        self.name = name
        self.action = action
        super().__init__(f"Action for state '{name}' is not callable: {action!r}")


class DuplicateStateError(ConfigurationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"State '{name}' is already registered")


class MachineBuiltError(ConfigurationError):
    def __init__(self, machine: str):
        self.machine = machine
        super().__init__(
            f"Machine '{machine}' has already been built, states can no longer be added"
        )


class EmptyMachineError(ConfigurationError):
    def __init__(self, machine: str):
        self.machine = machine
        super().__init__(f"Machine '{machine}' has no states to run")


class MachineRoleError(ConfigurationError):
    """A definition was used as a run instance or the other way around"""


class RoutingError(StateMachineError):
    """The transition loop could not resolve the next state"""


class StateNotFoundError(RoutingError, LookupError):
    def __init__(self, state: str, previous_state: Optional[str] = None):
        self.state = state
        self.previous_state = previous_state
        if previous_state is None:
            message = f"Initial state '{state}' not found"
        else:
            message = f"State '{state}' not found, received as output from state '{previous_state}'"
        super().__init__(message)

    @property
    def is_initial(self) -> bool:
        return self.previous_state is None


class InvalidTransitionError(StateMachineError, TypeError):
    """An action returned something that cannot be read as a transition"""


class MemoryAccessError(StateMachineError, RuntimeError):
    """use_memory was called outside the action execution that received it"""
