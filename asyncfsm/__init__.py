"""asyncfsm - an embeddable asyncio finite-state-machine runtime."""

from asyncfsm.domain.action.sleep import sleep, variable_sleep
from asyncfsm.domain.errors import (
    ConfigurationError,
    DuplicateStateError,
    EmptyMachineError,
    InvalidActionError,
    InvalidStateNameError,
    InvalidTransitionError,
    MachineBuiltError,
    MachineRoleError,
    MemoryAccessError,
    RoutingError,
    StateMachineError,
    StateNotFoundError,
)
from asyncfsm.domain.memory.runtime_memory import MemoryAccessor, MemoryStore, UseMemory
from asyncfsm.domain.models.machine_state import MachineRole, MachineStatus, RunResult, Transition
from asyncfsm.domain.orchestration.state_machine import StateMachine
from asyncfsm.domain.orchestration.sub_machine import SubMachineAction
from asyncfsm.infrastructure.config import EngineSettings, get_settings
from asyncfsm.infrastructure.observability.logging import setup_logging

__version__ = "0.1.0"

__all__ = [
    "StateMachine",
    "SubMachineAction",
    "Transition",
    "RunResult",
    "MachineStatus",
    "MachineRole",
    "MemoryStore",
    "MemoryAccessor",
    "UseMemory",
    "sleep",
    "variable_sleep",
    "StateMachineError",
    "ConfigurationError",
    "InvalidStateNameError",
    "InvalidActionError",
    "DuplicateStateError",
    "MachineBuiltError",
    "EmptyMachineError",
    "MachineRoleError",
    "RoutingError",
    "StateNotFoundError",
    "InvalidTransitionError",
    "MemoryAccessError",
    "EngineSettings",
    "get_settings",
    "setup_logging",
]
