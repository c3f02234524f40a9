import pytest
from statemachine.exceptions import TransitionNotAllowed

from cas_engine.state_machines import ExtractionFlowMachine

PIPELINE = [
    "classified",
    "segmented",
    "accounts_parsed",
    "folios_extracted",
    "aggregated",
    "formatted",
]


def run_pipeline(flow: ExtractionFlowMachine) -> None:
    flow.classify()
    flow.segment()
    flow.parse_accounts()
    flow.extract_folios()
    flow.aggregate()
    flow.format_output()


def test_linear_pipeline():
    flow = ExtractionFlowMachine()
    assert flow.current_state.id == "received"

    run_pipeline(flow)

    assert flow.current_state.id == "formatted"
    assert flow.history[-len(PIPELINE):] == PIPELINE


def test_no_skipping_stages():
    flow = ExtractionFlowMachine()

    with pytest.raises(TransitionNotAllowed):
        flow.segment()


@pytest.mark.parametrize("steps", range(len(PIPELINE) - 1))
def test_fail_from_any_running_stage(steps):
    flow = ExtractionFlowMachine()
    for event in ["classify", "segment", "parse_accounts", "extract_folios", "aggregate"][:steps]:
        getattr(flow, event)()

    flow.mark_failed("UNSUPPORTED_ISSUER", "not supported")

    assert flow.current_state.id == "failed"
    info = flow.get_flow_info()
    assert info["state"] == "failed"
    assert info["error_code"] == "UNSUPPORTED_ISSUER"
    assert info["error_message"] == "not supported"


def test_mark_failed_after_completion_keeps_final_state():
    flow = ExtractionFlowMachine()
    run_pipeline(flow)

    flow.mark_failed("INTERNAL_ERROR", "late failure")

    assert flow.current_state.id == "formatted"
