"""
Aggregation and output formatting.

Member amounts are rounded to 2 decimals first, and every total is the exact
Decimal sum of the rounded members, so account, folio, class and grand totals
always add up in the output.
"""

from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from cas_engine.domain.schemas import (
    AccountClassSummary,
    CASDocument,
    DematAccount,
    DematAdditionalInfo,
    DematHoldings,
    Holding,
    HoldingAdditionalInfo,
    Insurance,
    Investor,
    IssuerType,
    MutualFundFolio,
    PortfolioSummary,
    Scheme,
    SchemeAdditionalInfo,
    StatementMeta,
    StatementPeriod,
    SummaryAccounts,
)
from cas_engine.services.extraction.models import (
    DematAccountRecord,
    FolioRecord,
    HoldingCategory,
    HoldingRecord,
    InvestorRecord,
    SchemeRecord,
    StatementPeriodRecord,
)
from cas_engine.services.extraction.normalizer import ZERO, money

# Holding category -> DematHoldings field
CATEGORY_FIELDS: Dict[HoldingCategory, str] = {
    HoldingCategory.EQUITY: "equities",
    HoldingCategory.FUND: "demat_mutual_funds",
    HoldingCategory.BOND: "corporate_bonds",
    HoldingCategory.GOVERNMENT_SECURITY: "government_securities",
}


def total(values: Iterable[float]) -> float:
    """Exact sum of already-rounded amounts"""
    return float(sum((Decimal(str(value)) for value in values), ZERO))


def build_holding(record: HoldingRecord) -> Holding:
    return Holding(
        isin=record.isin,
        name=record.name,
        units=money(record.units),
        value=money(record.value),
        additional_info=HoldingAdditionalInfo(
            market_price=money(record.price),
            free_balance=money(record.free_balance),
        ),
    )


def build_account(record: DematAccountRecord) -> DematAccount:
    grouped: Dict[str, List[Holding]] = {name: [] for name in CATEGORY_FIELDS.values()}
    for holding in record.holdings:
        grouped[CATEGORY_FIELDS[holding.category]].append(build_holding(holding))
    holdings = DematHoldings(**grouped)

    fields = record.fields
    return DematAccount(
        dp_id=fields.dp_id,
        dp_name=fields.dp_name,
        bo_id=record.bo_id,
        client_id=fields.client_id,
        demat_type=record.demat_type,
        holdings=holdings,
        additional_info=DematAdditionalInfo(
            status=fields.status or "Active",
            bo_type=fields.bo_type,
            bo_sub_status=fields.bo_sub_status,
            bsda=fields.bsda or "NO",
            nominee=fields.nominee,
            email=fields.email,
        ),
        value=total(holding.value for holding in holdings.all()),
    )


def build_scheme(record: SchemeRecord) -> Scheme:
    return Scheme(
        isin=record.isin,
        name=record.name,
        nav=record.nav,
        scheme_type=record.scheme_type,
        units=money(record.units),
        value=money(record.value),
        additional_info=SchemeAdditionalInfo(investment_value=money(record.invested)),
    )


def build_folio(record: FolioRecord) -> MutualFundFolio:
    schemes = [build_scheme(scheme) for scheme in record.schemes]
    return MutualFundFolio(
        amc=record.amc,
        folio_number=record.folio_number,
        registrar=record.registrar,
        schemes=schemes,
        value=total(scheme.value for scheme in schemes),
    )


def build_investor(record: InvestorRecord) -> Investor:
    return Investor(
        name=record.name,
        pan=record.pan,
        address=record.address,
        email=record.email,
        mobile=record.mobile,
        cas_id=record.cas_id,
        pincode=record.pincode,
    )


def summarize(
    accounts: Sequence[DematAccount],
    folios: Sequence[MutualFundFolio],
    insurance: Insurance,
) -> PortfolioSummary:
    """Recompute every class total and the grand total from the finished lists"""
    demat = AccountClassSummary(
        count=len(accounts),
        total_value=total(account.value for account in accounts),
    )
    mutual_funds = AccountClassSummary(
        count=len(folios),
        total_value=total(folio.value for folio in folios),
    )
    policies = insurance.life_insurance_policies
    insurance_summary = AccountClassSummary(
        count=len(policies),
        total_value=total(policy.value for policy in policies),
    )
    return PortfolioSummary(
        accounts=SummaryAccounts(
            demat=demat,
            mutual_funds=mutual_funds,
            insurance=insurance_summary,
        ),
        total_value=total(
            (demat.total_value, mutual_funds.total_value, insurance_summary.total_value)
        ),
    )


def build_document(
    investor: Investor,
    accounts: Sequence[DematAccount],
    folios: Sequence[MutualFundFolio],
    issuer: IssuerType,
    generated_at: str,
    period: StatementPeriodRecord,
) -> CASDocument:
    insurance = Insurance()
    return CASDocument(
        investor=investor,
        demat_accounts=list(accounts),
        mutual_funds=list(folios),
        insurance=insurance,
        meta=StatementMeta(
            cas_type=issuer,
            generated_at=generated_at,
            statement_period=StatementPeriod(from_=period.start, to=period.end),
        ),
        summary=summarize(accounts, folios, insurance),
    )
