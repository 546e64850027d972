from typing import Any, Optional
import inspect
import time

from asyncfsm.domain.action.action_registry import Action
from asyncfsm.domain.memory.runtime_memory import MemoryAccessor
from asyncfsm.domain.models.machine_state import Transition
from asyncfsm.infrastructure.config import EngineSettings, get_settings
from asyncfsm.infrastructure.observability.logging import machine_logger, metrics


class ActionExecutor:
    """Invokes a state's action and normalizes its result"""

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()

    async def execute(
        self,
        state: str,
        action: Action,
        input_data: Any,
        use_memory: MemoryAccessor,
    ) -> Transition:
        """Run one action to completion.

        Sync and async actions are treated alike: the return value is awaited
        whenever it is awaitable. Exceptions raised by the action propagate
        unchanged; the accessor is closed either way.
        """
        started = time.perf_counter()

        try:
            result = action(input_data, use_memory)
            if inspect.isawaitable(result):
                result = await result
            transition = Transition.pack(result)
        except Exception as exc:
            machine_logger.log_action_execution(
                state=state,
                duration_ms=_elapsed_ms(started),
                success=False,
                error=f"{type(exc).__name__}: {exc}",
            )
            raise
        finally:
            use_memory.close()

        duration_ms = _elapsed_ms(started)
        machine_logger.log_action_execution(state=state, duration_ms=duration_ms)

        if self.settings.collect_metrics:
            metrics.record_latency("action", duration_ms, tags={"state": state})

        return transition


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
