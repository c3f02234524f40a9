from decimal import Decimal

import pytest

from cas_engine.services.extraction.diagnostics import DiagnosticKind, ExtractionDiagnostics
from cas_engine.services.extraction.normalizer import (
    clean_text,
    money,
    parse_date,
    parse_number,
    to_money,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1,23,456.78", Decimal("123456.78")),
        ("` 11,010.25", Decimal("11010.25")),
        ("₹ 2,890.50", Decimal("2890.50")),
        ("5.000", Decimal("5.000")),
        ("-12.5", Decimal("-12.5")),
        (42, Decimal("42")),
    ],
)
def test_parse_number_handles_statement_formats(raw, expected):
    assert parse_number(raw) == expected


@pytest.mark.parametrize("placeholder", [None, "", "--", "-", "NA", "n/a"])
def test_placeholders_are_zero_without_diagnostics(placeholder):
    diagnostics = ExtractionDiagnostics()
    assert parse_number(placeholder, diagnostics) == Decimal("0")
    assert len(diagnostics) == 0


def test_malformed_number_is_zero_and_recorded():
    diagnostics = ExtractionDiagnostics()

    assert parse_number("12.3.4", diagnostics, target="value") == Decimal("0")

    events = diagnostics.of_kind(DiagnosticKind.MALFORMED_NUMBER)
    assert len(events) == 1
    assert events[0].target == "value"
    assert events[0].context["raw"] == "12.3.4"


def test_to_money_rounds_half_up():
    assert to_money("2.345") == Decimal("2.35")
    assert to_money("1,234.567") == Decimal("1234.57")
    assert to_money("garbage") == Decimal("0.00")


def test_money_is_never_negative():
    assert money("-5.00") == 0.0
    assert money("8,356.25") == 8356.25


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("01-MAY-2025", "2025-05-01"),
        ("31-May-2025", "2025-05-31"),
        ("02/03/2025", "2025-03-02"),
        ("02-03-2025", "2025-03-02"),
        ("  15-Jan-24 ", "2024-01-15"),
    ],
)
def test_parse_date_to_iso(raw, expected):
    assert parse_date(raw) == expected


def test_unparseable_date_passes_through():
    assert parse_date(" 2025/13/45 ") == "2025/13/45"
    assert parse_date("") == ""


def test_clean_text_collapses_whitespace():
    assert clean_text("  NTPC\n LIMITED \t EQUITY ") == "NTPC LIMITED EQUITY"
    assert clean_text(None) == ""
