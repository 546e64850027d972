from .state_machine import StateMachine
from .sub_machine import SubMachineAction

__all__ = ["StateMachine", "SubMachineAction"]
