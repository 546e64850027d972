"""Ready-made actions that pause the machine before moving on."""
from typing import Any, Callable, Coroutine, Tuple
import asyncio

from asyncfsm.domain.memory.runtime_memory import UseMemory


SleepAction = Callable[[Any, UseMemory], Coroutine[Any, Any, Tuple[str, Any]]]


def sleep(next_state: str, seconds: float) -> SleepAction:
    """Create an action that sleeps for ``seconds`` then goes to ``next_state``.

    The action's input is forwarded unchanged to the next state.
    """
    if seconds < 0:
        raise ValueError(f"Cannot sleep for {seconds} seconds, only positive values are accepted.")

    async def sleep_action(input_data: Any, use_memory: UseMemory) -> Tuple[str, Any]:
        await asyncio.sleep(seconds)
        return next_state, input_data

    return sleep_action


def variable_sleep(next_state: str) -> SleepAction:
    """Create an action that sleeps for a duration read from its input.

    Input is either ``seconds`` or ``(seconds, output)``; ``output``, when
    given, is forwarded to the next state.
    """

    async def variable_sleep_action(input_data: Any, use_memory: UseMemory) -> Tuple[str, Any]:
        seconds, output = _read_duration(input_data)

        if seconds < 0:
            raise ValueError(f"Cannot sleep for {seconds} seconds, only positive values are accepted.")

        await asyncio.sleep(seconds)
        return next_state, output

    return variable_sleep_action


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _read_duration(input_data: Any) -> Tuple[float, Any]:
    if _is_number(input_data):
        return input_data, None
    if isinstance(input_data, (tuple, list)) and len(input_data) == 2 and _is_number(input_data[0]):
        return input_data[0], input_data[1]
    raise ValueError(f"Did not receive a valid input. Received input: {input_data!r}")
