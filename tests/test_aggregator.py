from decimal import Decimal

from cas_engine.domain.schemas import Insurance, InsurancePolicy, Investor, IssuerType, SchemeType
from cas_engine.services.extraction.aggregator import (
    build_account,
    build_document,
    build_folio,
    summarize,
)
from cas_engine.services.extraction.models import (
    AccountFields,
    DematAccountRecord,
    FolioRecord,
    HoldingCategory,
    HoldingRecord,
    SchemeRecord,
    StatementPeriodRecord,
)


def holding(isin, value, category=HoldingCategory.EQUITY, units="1", price="1"):
    return HoldingRecord(
        isin=isin,
        name=isin,
        units=Decimal(units),
        free_balance=Decimal(units),
        price=Decimal(price),
        value=Decimal(value),
        category=category,
    )


def scheme(value, invested="0"):
    return SchemeRecord(
        isin="INF846K01DP8",
        name="Axis Bluechip Fund",
        folio_ref="1",
        units=Decimal("1.2345"),
        nav="58.4213",
        invested=Decimal(invested),
        value=Decimal(value),
        scheme_type=SchemeType.EQUITY,
    )


def test_account_groups_holdings_and_sums_rounded_values():
    record = DematAccountRecord(
        fields=AccountFields(dp_id="1", client_id="2"),
        bo_id="12",
        demat_type="cdsl",
        holdings=(
            holding("INE733E01010", "0.105"),
            holding("INF204KB14I2", "0.105", HoldingCategory.FUND),
            holding("INE002A01018", "0.105", HoldingCategory.BOND),
        ),
    )

    account = build_account(record)

    assert [h.isin for h in account.holdings.equities] == ["INE733E01010"]
    assert [h.isin for h in account.holdings.demat_mutual_funds] == ["INF204KB14I2"]
    assert [h.isin for h in account.holdings.corporate_bonds] == ["INE002A01018"]
    assert account.holdings.aifs == []
    # 0.105 rounds to 0.11 per holding; the total is the sum of rounded values
    assert account.value == 0.33


def test_account_defaults():
    account = build_account(
        DematAccountRecord(fields=AccountFields(), bo_id="", demat_type="cdsl")
    )

    assert account.value == 0.0
    assert account.additional_info.status == "Active"
    assert account.additional_info.bsda == "NO"
    assert account.additional_info.bo_type == ""


def test_folio_value_and_scheme_fields():
    folio = build_folio(
        FolioRecord(
            amc="Axis",
            folio_number="1",
            registrar="KFINTECH",
            schemes=(scheme("100.005", invested="90"), scheme("0.10")),
        )
    )

    assert folio.value == 100.11
    assert folio.schemes[0].nav == "58.4213"
    assert folio.schemes[0].units == 1.23
    assert folio.schemes[0].additional_info.arn_code is None
    assert folio.schemes[0].additional_info.investment_value == 90.0


def test_summary_totals_are_exact_sums():
    accounts = [
        build_account(
            DematAccountRecord(
                fields=AccountFields(),
                bo_id=str(i),
                demat_type="cdsl",
                holdings=(holding("INE733E01010", "0.1"), holding("INE002A01018", "0.2")),
            )
        )
        for i in range(3)
    ]
    folios = [build_folio(FolioRecord("A", "1", "CAMS", (scheme("0.7"),)))]
    insurance = Insurance(life_insurance_policies=[InsurancePolicy(value=0.3)])

    summary = summarize(accounts, folios, insurance)

    assert summary.accounts.demat.count == 3
    assert summary.accounts.demat.total_value == 0.9
    assert summary.accounts.mutual_funds.total_value == 0.7
    assert summary.accounts.insurance.count == 1
    assert Decimal(str(summary.total_value)) == Decimal("1.9")


def test_build_document_meta():
    document = build_document(
        investor=Investor(name="X", pan="abcde1234f"),
        accounts=[],
        folios=[],
        issuer=IssuerType.CDSL,
        generated_at="2025-06-01T10:30:00",
        period=StatementPeriodRecord(start="2025-05-01", end="2025-05-31"),
    )

    data = document.to_dict()
    assert data["meta"] == {
        "cas_type": "CDSL",
        "generated_at": "2025-06-01T10:30:00",
        "statement_period": {"from": "2025-05-01", "to": "2025-05-31"},
    }
    assert data["investor"]["pan"] == "ABCDE1234F"
    assert data["insurance"] == {"life_insurance_policies": []}
    assert data["summary"]["total_value"] == 0.0
