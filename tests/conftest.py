"""
Shared fixtures: a synthetic CDSL statement laid out like the real one.

Three demat accounts (ZERODHA, ANGEL, GROWW), the middle one with no
holdings, followed by two mutual fund folios (Axis, HDFC).
"""

from datetime import datetime
from typing import Dict, List, Sequence

import pytest

from cas_engine.services.extraction import CASExtractor, ExtractionDiagnostics
from cas_engine.services.extraction.rulesets import CDSL_RULESET

HEADER = """CDSL
Central Depository Services (India) Limited
Consolidated Account Statement
CAS ID : AB12345678
Statement Period : 01-MAY-2025 to 31-MAY-2025
RAHUL KUMAR SHARMA S O RAMESH SHARMA
FLAT 12 GREEN PARK APARTMENTS
MG ROAD BANGALORE 560038
PINCODE : 560038
PAN : ABCDE1234F
Email Id : Rahul.Sharma@Example.com
Mobile No : 9876543210
"""

ACCOUNTS: List[Dict[str, str]] = [
    {
        "dp_name": "ZERODHA BROKING LIMITED",
        "dp_id": "12081600",
        "client_id": "00123456",
        "bo_id": "1208160000123456",
        "nominee": "PRIYA SHARMA",
    },
    {
        "dp_name": "ANGEL ONE LIMITED",
        "dp_id": "12033200",
        "client_id": "00654321",
        "bo_id": "1203320000654321",
        "nominee": "PRIYA SHARMA",
    },
    {
        "dp_name": "GROWW INVEST TECH PRIVATE LIMITED",
        "dp_id": "13041400",
        "client_id": "00987654",
        "bo_id": "1304140000987654",
        "nominee": "ANIL SHARMA",
    },
]

HOLDINGS_HEADER = (
    "ISIN Security Current Bal Frozen Bal Pledge Bal Earmark Bal "
    "Free Bal Market Price Value"
)

HOLDING_ROWS = {
    "1208160000123456": [
        "INE733E01010 NTPC LIMITED-EQUITY SHARES 5.000 -- -- -- 5.000 1671.25 8,356.25",
        "INF204KB14I2 NIPPON INDIA ETF NIFTY BEES 10.000 -- -- -- 10.000 265.40 2,654.00",
    ],
    "1203320000654321": [],
    "1304140000987654": [
        "INE002A01018 RELIANCE INDUSTRIES LIMITED 10.000 -- -- -- 10.000 2,890.50 28,905.00",
        "INF109K016L0 ICICI PRUDENTIAL GOLD ETF 20.000 -- -- -- 20.000 78.15 1,563.00",
    ],
}

PORTFOLIO_VALUES = {
    "1208160000123456": "11,010.25",
    "1304140000987654": "30,468.00",
}

SCHEME_HEADER = (
    "Scheme Name ISIN Folio No Closing Bal (Units) NAV (Rs.) "
    "Cumulative Amount Invested (Rs.) Valuation (Rs.)"
)

MF_SECTION = f"""MUTUAL FUND UNITS HELD AS ON 31-05-2025
Axis Mutual Fund
Folio No : 91234567/89 RTA : KFINTECH
{SCHEME_HEADER}
Axis Bluechip Fund - Direct Growth INF846K01DP8 91234567/89 1,234.567 58.42 60,000.00 72,123.40
HDFC Mutual Fund
Folio No : 12345678 RTA : CAMS
{SCHEME_HEADER}
HDFC Corporate Bond Fund - Direct Plan Growth INF179K01XY1 12345678 500.000 30.1234 14,000.00 15,061.70
"""

DEMAT_TOTAL = "41478.25"
MF_TOTAL = "87185.10"
GRAND_TOTAL = "128663.35"


def account_block(account: Dict[str, str]) -> str:
    return (
        f"DP Name : {account['dp_name']}\n"
        f"DP ID : {account['dp_id']}  CLIENT ID : {account['client_id']}\n"
        "Email Id : rahul.sharma@example.com\n"
        "Account Status : Active\n"
        "BO Type : Individual\n"
        "BO Sub Status : Individual-Resident\n"
        "BSDA : NO\n"
        f"Nominee : {account['nominee']}\n"
        "Account Opening Date : 12-06-2019\n"
        "Address : FLAT 12 GREEN PARK APARTMENTS MG ROAD BANGALORE\n"
    )


def transaction_block(account: Dict[str, str], with_owner_id: bool = True) -> str:
    lines = [
        "STATEMENT OF TRANSACTIONS AND HOLDING FOR THE PERIOD 01-05-2025 TO 31-05-2025",
        f"DP Name : {account['dp_name']}",
    ]
    if with_owner_id:
        lines.append(f"BO ID : {account['bo_id']}")
    lines.append("No Transaction during the period")

    rows = HOLDING_ROWS[account["bo_id"]]
    if rows:
        lines.append("HOLDING STATEMENT AS ON 31-05-2025")
        lines.append(HOLDINGS_HEADER)
        lines.extend(rows)
        lines.append(f"Portfolio Value ` {PORTFOLIO_VALUES[account['bo_id']]}")
    else:
        lines.append("Nil Holding")
    return "\n".join(lines) + "\n"


def build_statement(
    transaction_order: Sequence[int] = (0, 1, 2),
    with_owner_ids: bool = True,
    with_folios: bool = True,
    header: str = HEADER,
) -> str:
    parts = [header]
    parts.extend(account_block(account) for account in ACCOUNTS)
    parts.append("MF Folios : 2\n")
    parts.extend(
        transaction_block(ACCOUNTS[i], with_owner_id=with_owner_ids) for i in transaction_order
    )
    if with_folios:
        parts.append(MF_SECTION)
    return "".join(parts)


def fixed_clock() -> datetime:
    return datetime(2025, 6, 1, 10, 30, 0)


@pytest.fixture
def statement_text() -> str:
    return build_statement()


@pytest.fixture
def ruleset():
    return CDSL_RULESET


@pytest.fixture
def diagnostics() -> ExtractionDiagnostics:
    return ExtractionDiagnostics()


@pytest.fixture
def extractor() -> CASExtractor:
    return CASExtractor(workers=1, clock=fixed_clock)
