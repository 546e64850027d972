from typing import Any, Callable, List, Optional, Tuple, Union
from uuid import uuid4
import copy
import structlog

from asyncfsm.domain.action.action_executor import ActionExecutor
from asyncfsm.domain.action.action_registry import Action, ActionRegistry
from asyncfsm.domain.action.action_validator import ActionValidator
from asyncfsm.domain.errors import (
    EmptyMachineError, MachineBuiltError, MachineRoleError, StateNotFoundError
)
from asyncfsm.domain.memory.runtime_memory import MemoryStore
from asyncfsm.domain.models.machine_state import MachineRole, MachineStatus, RunResult
from asyncfsm.domain.orchestration.sub_machine import SubMachineAction
from asyncfsm.infrastructure.config import EngineSettings, get_settings
from asyncfsm.infrastructure.observability.logging import get_logger, machine_logger, metrics

logger = get_logger(__name__)


class StateMachine:
    """Finite-state machine driven by asynchronous actions.

    A machine is built in two phases. While open, states are registered with
    :meth:`add_state`; the first registered state is the default initial
    state. The first call to :meth:`start` or :meth:`to_action` builds the
    machine, freezing its registry for good.

    The object callers build is the *definition*. Every :meth:`start` spawns
    a separate *run instance* that shares the frozen registry by reference
    but owns its own memory and cursor, so one definition can be started
    any number of times, concurrently, and nested inside other machines.
    """

    def __init__(self, name: Optional[str] = None, settings: Optional[EngineSettings] = None):
        self._name = name or f"machine-{uuid4().hex[:8]}"
        self.settings = settings or get_settings()
        self._registry = ActionRegistry(self._name)
        self._executor = ActionExecutor(self.settings)
        self._status = MachineStatus.OPEN
        self._reset_run_state(MachineRole.DEFINITION)

    def __repr__(self) -> str:
        return (
            f"<StateMachine {self._name!r} role={self._role.value} "
            f"status={self._status.value} states={len(self._registry)}>"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def status(self) -> MachineStatus:
        return self._status

    @property
    def role(self) -> MachineRole:
        return self._role

    @property
    def is_built(self) -> bool:
        return self._status == MachineStatus.BUILT

    @property
    def initial_state(self) -> Optional[str]:
        """Default initial state: the first state added"""
        return self._registry.initial_state

    @property
    def states(self) -> Tuple[str, ...]:
        return tuple(self._registry.names())

    def has_state(self, name: str) -> bool:
        return name in self._registry

    @property
    def run_id(self) -> Optional[str]:
        return self._run_id

    @property
    def memory(self) -> Optional[MemoryStore]:
        """Memory of this run; None on a definition"""
        return self._memory

    @property
    def current_state(self) -> Optional[str]:
        """State being executed, None before the run and after it ends"""
        return self._current_state

    @property
    def last_state(self) -> Optional[str]:
        """State most recently entered; after the run, the terminal state"""
        return self._last_state

    @property
    def trace(self) -> Tuple[str, ...]:
        return tuple(self._trace)

    def add_state(self, name: str, action: Action) -> "StateMachine":
        """Add a new state to this machine.

        Raises a ConfigurationError subclass when the machine is already
        built, when ``name`` is empty or already registered, or when
        ``action`` is not callable. Returns the machine for chaining.
        """
        self._require_definition("add states to")

        if self.is_built:
            raise MachineBuiltError(self._name)

        self._registry.register(name, action)
        logger.debug("State added", machine=self._name, state=name)

        return self

    async def start(self, initial_input: Any = None, initial_state: Optional[str] = None) -> RunResult:
        """Run the machine until an action returns no next state.

        ``initial_state`` overrides the default initial state. Every call
        runs in a fresh, isolated run instance. Any error raised by an action,
        or by a state lookup, propagates to the caller; a failed run never
        returns a partial result.
        """
        self._require_definition("start")

        if len(self._registry) == 0:
            raise EmptyMachineError(self._name)

        if initial_state is not None:
            ActionValidator.validate_state_name(initial_state)

        self._build()

        run = self._spawn_run()
        return await run._execute(initial_input, initial_state)

    def to_action(
        self,
        next_state: Union[str, Callable[[str], Optional[str]], None] = None,
        initial_state: Optional[str] = None,
    ) -> SubMachineAction:
        """Wrap this whole machine as a single action of another machine.

        ``next_state`` is either the outer state to move to once this machine
        terminates, or a function mapping this machine's terminal state to
        the outer next state. None makes the composed action terminal.
        The outer input feeds this machine's initial state; its final output
        becomes the composed action's output.
        """
        self._require_definition("compose")
        SubMachineAction.validate_next_state(next_state)
        if initial_state is not None:
            ActionValidator.validate_state_name(initial_state)

        self._build()
        return SubMachineAction(self, next_state=next_state, initial_state=initial_state)

    to_state = to_action

    def _build(self) -> None:
        if self.is_built:
            return

        self._registry.freeze()
        self._status = MachineStatus.BUILT
        machine_logger.log_machine_event(
            "built",
            self._name,
            data={"states": self._registry.names(), "initial_state": self._registry.initial_state},
        )

    def _spawn_run(self) -> "StateMachine":
        """Create a run instance sharing this definition's frozen registry"""

        # Shallow copy keeps attributes added by subclasses; registry and
        # executor stay shared
        run = copy.copy(self)
        run._reset_run_state(MachineRole.RUN, run_id=uuid4().hex, memory=MemoryStore())
        return run

    def _reset_run_state(
        self,
        role: MachineRole,
        run_id: Optional[str] = None,
        memory: Optional[MemoryStore] = None,
    ) -> None:
        self._role = role
        self._run_id = run_id
        self._memory = memory
        self._current_state: Optional[str] = None
        self._last_state: Optional[str] = None
        self._trace: List[str] = []
        self._executed = False

    async def _execute(self, initial_input: Any = None, initial_state: Optional[str] = None) -> RunResult:
        """Transition loop; only valid on a run instance, and only once"""

        if self._role != MachineRole.RUN:
            raise MachineRoleError(
                f"Machine '{self._name}' is a definition and cannot be executed directly, use start()"
            )
        if self._executed:
            raise MachineRoleError(f"Run '{self._run_id}' of machine '{self._name}' has already executed")
        self._executed = True

        with structlog.contextvars.bound_contextvars(run_id=self._run_id, machine=self._name):
            if self.settings.collect_metrics:
                metrics.increment_counter("runs_started", tags={"machine": self._name})

            try:
                result = await self._loop(initial_input, initial_state)
            except Exception as exc:
                machine_logger.log_machine_event(
                    "run_failed",
                    self._name,
                    data={"state": self._last_state, "steps": len(self._trace)},
                    error=f"{type(exc).__name__}: {exc}",
                )
                if self.settings.collect_metrics:
                    metrics.increment_counter("runs_failed", tags={"machine": self._name})
                raise

            machine_logger.log_machine_event("run_completed", self._name, data=result.get_run_summary())
            if self.settings.collect_metrics:
                metrics.increment_counter("runs_completed", tags={"machine": self._name})

            return result

    async def _loop(self, input_data: Any, initial_state: Optional[str]) -> RunResult:
        current = initial_state if initial_state is not None else self._registry.initial_state
        previous: Optional[str] = None

        while current is not None:
            self._current_state = current

            action = self._registry.get(current)
            if action is None:
                raise StateNotFoundError(current, previous)

            use_memory = self._memory.accessor(current)
            previous = current
            self._last_state = current
            self._trace.append(current)

            transition = await self._executor.execute(current, action, input_data, use_memory)

            if self.settings.trace_transitions:
                machine_logger.log_state_transition(current, transition.next_state, transition.has_output)

            current, input_data = transition.next_state, transition.output

        self._current_state = None

        return RunResult(
            last_state=previous,
            output=input_data,
            run_id=self._run_id,
            trace=list(self._trace),
        )

    def _require_definition(self, operation: str) -> None:
        if self._role != MachineRole.DEFINITION:
            raise MachineRoleError(
                f"Run '{self._run_id}' of machine '{self._name}' cannot {operation}, use its definition"
            )
