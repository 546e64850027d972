# State name & action validation
from typing import Any

from asyncfsm.domain.errors import InvalidActionError, InvalidStateNameError


class ActionValidator:
    @staticmethod
    def validate_state_name(name: Any) -> str:
        if not isinstance(name, str) or not name.strip():
            raise InvalidStateNameError(name)
        return name

    @staticmethod
    def validate_action(name: str, action: Any) -> None:
        if not callable(action):
            raise InvalidActionError(name, action)

    @classmethod
    def validate_state(cls, name: Any, action: Any) -> str:
        name = cls.validate_state_name(name)
        cls.validate_action(name, action)
        return name
