"""Tests for Transition and the pack rule."""
import pytest

from asyncfsm import InvalidTransitionError, RunResult, Transition


class TestPack:
    """Every return shape an action may use."""

    def test_bare_state_name(self):
        t = Transition.pack("next")
        assert t.next_state == "next"
        assert t.output is None
        assert t.has_output is False

    def test_none_is_terminal(self):
        t = Transition.pack(None)
        assert t.is_terminal
        assert t.has_output is False

    def test_single_element_container(self):
        assert Transition.pack(["next"]) == Transition.to("next")
        assert Transition.pack(("next",)) == Transition.to("next")

    def test_two_element_container(self):
        t = Transition.pack(["next", {"a": 1}])
        assert t.next_state == "next"
        assert t.output == {"a": 1}
        assert t.has_output is True

    def test_terminal_with_output(self):
        t = Transition.pack((None, 42))
        assert t.is_terminal
        assert t.output == 42

    def test_empty_container_is_terminal(self):
        assert Transition.pack([]) == Transition.end()

    def test_transition_passes_through(self):
        t = Transition.to("x", 1)
        assert Transition.pack(t) is t

    def test_output_identity_is_kept(self):
        payload = ["mutable"]
        assert Transition.pack(("x", payload)).output is payload

    def test_long_container_rejected(self):
        with pytest.raises(InvalidTransitionError, match="3 elements"):
            Transition.pack(("a", 1, 2))

    @pytest.mark.parametrize("value", [1, 2.5, object(), {"state": "a"}])
    def test_non_string_next_state_rejected(self, value):
        with pytest.raises(InvalidTransitionError):
            Transition.pack(value)

    def test_non_string_next_state_in_container_rejected(self):
        with pytest.raises(InvalidTransitionError):
            Transition.pack([7, "output"])


class TestTransitionConstructors:
    def test_output_none_differs_from_no_output(self):
        assert Transition.to("a", None).has_output is True
        assert Transition.to("a").has_output is False

    def test_end(self):
        t = Transition.end("done")
        assert t.next_state is None
        assert t.output == "done"

    def test_frozen(self):
        t = Transition.to("a")
        with pytest.raises(Exception):
            t.next_state = "b"


class TestRunResult:
    def test_run_summary(self):
        result = RunResult(last_state="b", output=3, run_id="r1", trace=["a", "b"])

        assert result.get_run_summary() == {
            "run_id": "r1",
            "last_state": "b",
            "steps": 2,
            "has_output": True,
        }
