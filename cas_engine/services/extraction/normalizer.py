"""
Number and date normalisation for statement text.

Statements print Indian-grouped amounts ("1,23,456.78"), sometimes prefixed
with a rupee sign or the backtick PDF fonts substitute for it, and dates as
DD-MMM-YYYY or DD/MM/YYYY.
"""

import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from cas_engine.services.extraction.diagnostics import DiagnosticKind, ExtractionDiagnostics

ZERO = Decimal("0")
CENT = Decimal("0.01")

_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?$")
_PLACEHOLDERS = frozenset({"", "-", "--", "NA", "N/A"})

DATE_FORMATS = (
    "%d-%b-%Y",  # 02-Mar-2025
    "%d/%m/%Y",  # 02/03/2025
    "%d-%m-%Y",  # 02-03-2025
    "%d-%b-%y",  # 02-Mar-25
)


def clean_text(value: Optional[str]) -> str:
    """Collapse internal whitespace runs and trim"""
    if not value:
        return ""
    return re.sub(r"\s+", " ", value).strip()


def parse_number(
    value: Any,
    diagnostics: Optional[ExtractionDiagnostics] = None,
    target: str = "",
) -> Decimal:
    """
    Parse a statement amount into a Decimal.

    Placeholder cells ("--", "NA") are zero. Anything else that does not
    parse is zero as well and is reported as a malformed number.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))

    cleaned = re.sub(r"[₹`,\s]", "", str(value))
    if cleaned.upper() in _PLACEHOLDERS:
        return ZERO
    if not _NUMBER_RE.match(cleaned):
        if diagnostics is not None:
            diagnostics.record(
                DiagnosticKind.MALFORMED_NUMBER, "normalize", target, raw=str(value)
            )
        return ZERO
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return ZERO


def to_money(value: Any) -> Decimal:
    """Round to 2 decimals, half-up; failures become zero"""
    return parse_number(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money(value: Any) -> float:
    """Rounded, non-negative amount as the float carried in the output schema"""
    return float(max(to_money(value), ZERO))


def parse_date(date_str: Optional[str]) -> str:
    """
    Convert a statement date to ISO format (YYYY-MM-DD).

    Unrecognised formats are returned unchanged (trimmed) rather than dropped.
    """
    if not date_str:
        return ""

    date_str = date_str.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str.title(), fmt).date().isoformat()
        except ValueError:
            continue
    return date_str
