"""Tests for the sleep convenience actions."""
import asyncio
import time

import pytest

from asyncfsm import StateMachine, sleep, variable_sleep


class TestSleep:
    def test_forwards_input_to_next_state(self, settings):
        machine = (
            StateMachine("m", settings)
            .add_state("wait", sleep("done", 0.01))
            .add_state("done", lambda i, m: (None, i))
        )

        started = time.perf_counter()
        result = asyncio.run(machine.start({"payload": 1}))
        elapsed = time.perf_counter() - started

        assert result.output == {"payload": 1}
        assert result.trace == ["wait", "done"]
        assert elapsed >= 0.005

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError, match="-1"):
            sleep("done", -1)


class TestVariableSleep:
    def test_duration_only(self, settings):
        machine = (
            StateMachine("m", settings)
            .add_state("wait", variable_sleep("done"))
            .add_state("done", lambda i, m: (None, i))
        )

        result = asyncio.run(machine.start(0))

        assert result.output is None

    @pytest.mark.parametrize("payload", [(0.001, "out"), [0, "out"]])
    def test_duration_and_output(self, settings, payload):
        machine = (
            StateMachine("m", settings)
            .add_state("wait", variable_sleep("done"))
            .add_state("done", lambda i, m: (None, i))
        )

        assert asyncio.run(machine.start(payload)).output == "out"

    @pytest.mark.parametrize("payload", ["1", None, True, (1,), (1, 2, 3), ("1", "out")])
    def test_invalid_input(self, settings, payload):
        machine = StateMachine("m", settings).add_state("wait", variable_sleep("done"))

        with pytest.raises(ValueError, match="valid input"):
            asyncio.run(machine.start(payload))

    def test_negative_duration(self, settings):
        machine = StateMachine("m", settings).add_state("wait", variable_sleep("done"))

        with pytest.raises(ValueError, match="positive"):
            asyncio.run(machine.start((-0.5, "out")))
