from cas_engine.services.extraction.correlator import assign_owner_id, collect_owner_ids
from cas_engine.services.extraction.diagnostics import DiagnosticKind
from cas_engine.services.extraction.models import AccountFields

from .conftest import ACCOUNTS, build_statement

FIELDS = AccountFields(dp_id="12081600", client_id="00123456")


def test_owner_ids_in_first_seen_order(statement_text, ruleset):
    assert collect_owner_ids(statement_text, ruleset) == [a["bo_id"] for a in ACCOUNTS]


def test_owner_ids_are_deduplicated(ruleset):
    text = "BO ID : 111\nBO ID : 222\nBO ID : 111\nBO ID: 333"
    assert collect_owner_ids(text, ruleset) == ["111", "222", "333"]


def test_positional_assignment(diagnostics):
    owner_ids = ["1208160000123456", "1203320000654321"]

    assert assign_owner_id(0, owner_ids, FIELDS, diagnostics) == "1208160000123456"
    assert len(diagnostics) == 0


def test_fallback_to_dp_and_client_id(diagnostics):
    assert assign_owner_id(2, ["a", "b"], FIELDS, diagnostics) == "1208160000123456"

    events = diagnostics.of_kind(DiagnosticKind.OWNER_ID_FALLBACK)
    assert len(events) == 1
    assert events[0].context["available"] == 2


def test_fallback_without_any_ids_is_empty(diagnostics):
    assert assign_owner_id(0, [], AccountFields(), diagnostics) == ""


def test_out_of_order_ids_are_assigned_by_position_and_flagged(ruleset, diagnostics):
    # Transaction pages printed in reverse account order
    text = build_statement(transaction_order=(2, 1, 0))
    owner_ids = collect_owner_ids(text, ruleset)
    first = AccountFields(dp_id=ACCOUNTS[0]["dp_id"], client_id=ACCOUNTS[0]["client_id"])

    assigned = assign_owner_id(0, owner_ids, first, diagnostics)

    assert assigned == ACCOUNTS[2]["bo_id"]
    mismatches = diagnostics.of_kind(DiagnosticKind.OWNER_ID_MISMATCH)
    assert len(mismatches) == 1
    assert mismatches[0].context == {
        "assigned": ACCOUNTS[2]["bo_id"],
        "expected": ACCOUNTS[0]["bo_id"],
    }


def test_missing_owner_ids_recorded(ruleset, diagnostics):
    text = build_statement(with_owner_ids=False)

    assert collect_owner_ids(text, ruleset, diagnostics) == []
    assert diagnostics.of_kind(DiagnosticKind.SECTION_NOT_FOUND)[0].target == "owner_id"
