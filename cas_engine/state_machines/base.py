"""
Base state machine class for pipeline flows.

Provides transition logging and a flow snapshot for diagnostics output.
"""

from typing import Any, Dict, Optional

import structlog
from statemachine import StateMachine


class FlowMachine(StateMachine):
    """
    Base class for in-memory flow state machines.

    Features:
    - Structured logging on every transition
    - get_flow_info() for CLI / API responses
    - error_code / error_message recorded on failure
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None, **kwargs):
        """
        Initialize flow machine.

        Args:
            context: Values bound into every transition log line
            **kwargs: Passed through to StateMachine
        """
        # Set before super().__init__: entering the initial state logs already
        self.context = dict(context or {})
        self.logger = structlog.get_logger(__name__)
        self.error_code: Optional[str] = None
        self.error_message: Optional[str] = None
        self.history = []
        super().__init__(**kwargs)

    def get_flow_info(self) -> Dict[str, Any]:
        return {
            "state": self.current_state.id,
            "history": list(self.history),
            "error_code": self.error_code,
            "error_message": self.error_message,
        }

    def after_transition(self, event: str, source, target):
        self.history.append(target.id)
        self.logger.info(
            "state_transition",
            transition_event=str(event),
            from_state=getattr(source, "id", None),
            to_state=target.id,
            **self.context,
        )
