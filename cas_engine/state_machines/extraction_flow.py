"""
Extraction Flow State Machine.

Tracks one document through the linear extraction pipeline. There are no
retries and no backtracking: each stage either advances to the next state
or the run ends in `failed`.
"""

import structlog
from statemachine import State

from .base import FlowMachine

logger = structlog.get_logger(__name__)


class ExtractionFlowMachine(FlowMachine):
    """
    received -> classified -> segmented -> accounts_parsed
             -> folios_extracted -> aggregated -> formatted
    Any non-final state may move to failed.
    """

    received = State(initial=True, value="received")
    classified = State(value="classified")
    segmented = State(value="segmented")
    accounts_parsed = State(value="accounts_parsed")
    folios_extracted = State(value="folios_extracted")
    aggregated = State(value="aggregated")
    formatted = State(value="formatted", final=True)
    failed = State(value="failed", final=True)

    classify = received.to(classified)
    segment = classified.to(segmented)
    parse_accounts = segmented.to(accounts_parsed)
    extract_folios = accounts_parsed.to(folios_extracted)
    aggregate = folios_extracted.to(aggregated)
    format_output = aggregated.to(formatted)

    fail = (
        received.to(failed)
        | classified.to(failed)
        | segmented.to(failed)
        | accounts_parsed.to(failed)
        | folios_extracted.to(failed)
        | aggregated.to(failed)
    )

    def mark_failed(self, error_code: str, error_message: str):
        """Record the error and move to `failed` from whatever stage is running"""
        self.error_code = error_code
        self.error_message = error_message

        if self.current_state.final:
            logger.warning(
                "fail_from_final_state",
                state=self.current_state.id,
                error_code=error_code,
            )
            return
        self.fail()

    def on_enter_formatted(self):
        logger.info("extraction_flow_completed", **self.context)

    def on_enter_failed(self):
        logger.error(
            "extraction_flow_failed",
            error_code=self.error_code,
            error_message=self.error_message,
            **self.context,
        )
