"""
Credit Review Dashboard - Item Extractor

Turns a parsed credit report (CREDIT_RESPONSE JSON) into the ordered list
of disputable items the compliance scan analyzes:

1. Negative accounts (tradelines with any derogatory signal)
2. Public records (explicit entries, then ones derived from tradelines)
3. Recent inquiries (within the lookback window, UTC day granularity)

Every "which field name is present" decision lives in the _normalize_*
helpers below so the rest of the pipeline only sees typed summaries.
"""
from __future__ import annotations
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from ...config import DEFAULT_INQUIRY_LOOKBACK_MONTHS
from ...models import (
    AccountSummary,
    InquirySummary,
    ItemType,
    PublicRecordSummary,
    ReportItem,
)

logger = logging.getLogger(__name__)


# Current-rating codes that indicate 30+ days late or worse
LATE_RATING_CODES = {"2", "3", "4", "5", "6", "7", "8", "9"}

# Tradeline account-type codes reported for court-derived items
PUBLIC_RECORD_ACCOUNT_TYPES = {"13", "14", "15", "16", "93", "94", "95"}

PUBLIC_RECORD_TYPE_NAMES = {
    "93": "BANKRUPTCY",
    "94": "TAX LIEN",
    "95": "JUDGMENT",
}


# =============================================================================
# RAW FIELD HELPERS
# =============================================================================

def _as_list(value: Any) -> List[Dict[str, Any]]:
    """Report sections may be missing, null, a single object or a list."""
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, dict)]
    return []


def _first(entry: Dict[str, Any], *keys: str) -> Optional[str]:
    """First non-empty value among keys, as a string."""
    for key in keys:
        value = entry.get(key)
        if value is not None and value != "":
            return str(value)
    return None


def _is_yes(value: Any) -> bool:
    return str(value).strip().upper() == "Y"


def _parse_amount(value: Any) -> float:
    try:
        return float(str(value).replace(",", "").replace("$", ""))
    except (TypeError, ValueError):
        return 0.0


def _parse_day(value: Optional[str]) -> Optional[date]:
    """Parse YYYY-MM-DD (optionally with a time part) to a date."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _credit_response(report: Dict[str, Any]) -> Dict[str, Any]:
    response = report.get("CREDIT_RESPONSE") if isinstance(report, dict) else None
    return response if isinstance(response, dict) else {}


# =============================================================================
# PREDICATES
# =============================================================================

def is_negative_account(account: Dict[str, Any]) -> bool:
    """True if the tradeline carries any derogatory signal."""
    rating = account.get("_CURRENT_RATING")
    rating_code = str(rating.get("@_Code", "")) if isinstance(rating, dict) else ""

    return (
        _is_yes(account.get("@_DerogatoryDataIndicator"))
        or _is_yes(account.get("@IsCollectionIndicator"))
        or _is_yes(account.get("@IsChargeoffIndicator"))
        or _parse_amount(account.get("@_PastDueAmount")) > 0
        or rating_code in LATE_RATING_CODES
        or bool(account.get("@_ChargeOffDate"))
    )


def is_public_record_tradeline(account: Dict[str, Any]) -> bool:
    return str(account.get("@_AccountType", "")) in PUBLIC_RECORD_ACCOUNT_TYPES


def inquiry_cutoff(
    today: date,
    lookback_months: int = DEFAULT_INQUIRY_LOOKBACK_MONTHS,
) -> date:
    """Oldest inquiry date (inclusive) still considered recent."""
    return today - relativedelta(months=lookback_months)


def inquiry_date(inquiry: Dict[str, Any]) -> Optional[date]:
    return _parse_day(_first(inquiry, "_DateOfInquiry", "@_Date"))


def is_recent_inquiry(inquiry: Dict[str, Any], cutoff: date) -> bool:
    inquired_on = inquiry_date(inquiry)
    if inquired_on is None:
        return False
    return inquired_on >= cutoff


# =============================================================================
# NORMALIZATION (raw entry -> typed summary)
# =============================================================================

def _normalize_account(account: Dict[str, Any]) -> AccountSummary:
    creditor = account.get("_CREDITOR")
    creditor_name = _first(creditor, "@_Name") if isinstance(creditor, dict) else None
    return AccountSummary(
        creditor=creditor_name or "Unknown",
        status=_first(account, "@_AccountStatusType") or "Unknown",
        balance=_first(account, "@_CurrentBalance") or "0",
        account_type=_first(account, "@_AccountType") or "Unknown",
        rating=_first(account, "@_AccountCurrentRatingCode") or "Unknown",
    )


def _normalize_explicit_public_record(record: Dict[str, Any]) -> PublicRecordSummary:
    return PublicRecordSummary(
        record_type=_first(record, "@publicRecordType", "@_Type", "@_AccountType") or "PUBLIC RECORD",
        status=_first(record, "status", "@_DispositionType", "@_AccountStatusType") or "Unknown",
        amount=_first(record, "@_CurrentBalance", "@_Amount", "@_LegalObligationAmount") or "0",
        date=_first(record, "filingDate", "@_FiledDate", "@_AccountOpenedDate") or "Unknown",
        court=_first(record, "@courtName", "@_CourtName", "@_SubscriberName") or "Unknown",
        case_number=_first(record, "caseNumber", "@_DocketIdentifier", "@_AccountNumber") or "Unknown",
    )


def _normalize_derived_public_record(account: Dict[str, Any]) -> PublicRecordSummary:
    account_type = str(account.get("@_AccountType", ""))
    return PublicRecordSummary(
        record_type=PUBLIC_RECORD_TYPE_NAMES.get(account_type, "PUBLIC RECORD"),
        status=_first(account, "@_AccountStatusType") or "Status Not Available",
        amount=_first(account, "@_CurrentBalance", "@_Amount") or "0",
        date=_first(account, "@_AccountOpenedDate") or "Filing Date Not Available",
        court=_first(account, "@_SubscriberName") or "Court Name Not Available",
        case_number=_first(account, "@_AccountNumber") or "Case Number Not Available",
    )


def _normalize_inquiry(inquiry: Dict[str, Any]) -> InquirySummary:
    return InquirySummary(
        subscriber_name=_first(inquiry, "@_SubscriberName") or "Unknown",
        date=_first(inquiry, "@_Date", "_DateOfInquiry") or "Unknown",
        inquiry_type=_first(inquiry, "@_Type") or "Unknown",
        purpose=_first(inquiry, "@_InquiryPurposeType") or "Unknown",
    )


# =============================================================================
# IDENTIFIERS
# =============================================================================

def account_id(account: Dict[str, Any], index: int) -> str:
    return _first(account, "@CreditLiabilityID") or f"TRADE{index + 1:03d}"


def public_record_id(record: Dict[str, Any], index: int) -> str:
    return _first(record, "@CreditLiabilityID", "@_SubscriberCode") or f"record_{index}"


def inquiry_id(inquiry: Dict[str, Any], index: int) -> str:
    return _first(inquiry, "@_InquiryIdentifier") or f"inquiry_{index}"


def _dedupe_ids(items: Iterable[ReportItem]) -> List[ReportItem]:
    """
    Make identifiers unique within one report.

    A tradeline can be both a negative account and a derived public record,
    sharing @CreditLiabilityID. Later occurrences get -2, -3, ... suffixes
    in extraction order so every item keeps its own key.
    """
    suffixes: Dict[str, int] = {}
    issued = set()
    result = []
    for item in items:
        base = item.item_id
        candidate = base
        while candidate in issued:
            suffixes[base] = suffixes.get(base, 1) + 1
            candidate = f"{base}-{suffixes[base]}"
        if candidate != base:
            logger.debug(f"Duplicate item id {base} ({item.item_type.value}) renamed to {candidate}")
            item.item_id = candidate
        issued.add(candidate)
        result.append(item)
    return result


# =============================================================================
# EXTRACTION
# =============================================================================

def extract_negative_accounts(report: Dict[str, Any]) -> List[Dict[str, Any]]:
    liabilities = _as_list(_credit_response(report).get("CREDIT_LIABILITY"))
    return [a for a in liabilities if is_negative_account(a)]


def extract_public_records(report: Dict[str, Any]) -> List[ReportItem]:
    """Explicit public-record entries first, then tradeline-derived ones."""
    response = _credit_response(report)
    explicit = _as_list(response.get("CREDIT_PUBLIC_RECORD"))
    derived = [a for a in _as_list(response.get("CREDIT_LIABILITY")) if is_public_record_tradeline(a)]

    items = []
    for raw in explicit:
        index = len(items)
        items.append(ReportItem(
            item_type=ItemType.PUBLIC_RECORD,
            item_id=public_record_id(raw, index),
            original_index=index,
            summary=_normalize_explicit_public_record(raw),
            raw=raw,
        ))
    for raw in derived:
        index = len(items)
        items.append(ReportItem(
            item_type=ItemType.PUBLIC_RECORD,
            item_id=public_record_id(raw, index),
            original_index=index,
            summary=_normalize_derived_public_record(raw),
            raw=raw,
        ))
    logger.debug(f"Public records: {len(explicit)} explicit, {len(derived)} derived from tradelines")
    return items


def extract_recent_inquiries(
    report: Dict[str, Any],
    today: date,
    lookback_months: int = DEFAULT_INQUIRY_LOOKBACK_MONTHS,
) -> List[Dict[str, Any]]:
    cutoff = inquiry_cutoff(today, lookback_months)
    inquiries = _as_list(_credit_response(report).get("CREDIT_INQUIRY"))
    recent = [i for i in inquiries if is_recent_inquiry(i, cutoff)]
    logger.info(
        f"Inquiry filtering: {len(recent)} recent, {len(inquiries) - len(recent)} "
        f"filtered out (cutoff {cutoff.isoformat()})"
    )
    return recent


def extract_items(
    report: Dict[str, Any],
    now: Optional[datetime] = None,
    lookback_months: int = DEFAULT_INQUIRY_LOOKBACK_MONTHS,
) -> List[ReportItem]:
    """
    Extract all disputable items from a report.

    Args:
        report: Parsed credit report JSON (CREDIT_RESPONSE root)
        now: Reference time for the inquiry window (defaults to current UTC time)
        lookback_months: Inquiry lookback window

    Returns:
        Accounts, then public records, then inquiries, with unique identifiers
    """
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(timezone.utc).date() if now.tzinfo else now.date()

    accounts = [
        ReportItem(
            item_type=ItemType.ACCOUNT,
            item_id=account_id(raw, index),
            original_index=index,
            summary=_normalize_account(raw),
            raw=raw,
        )
        for index, raw in enumerate(extract_negative_accounts(report))
    ]
    public_records = extract_public_records(report)
    inquiries = [
        ReportItem(
            item_type=ItemType.INQUIRY,
            item_id=inquiry_id(raw, index),
            original_index=index,
            summary=_normalize_inquiry(raw),
            raw=raw,
        )
        for index, raw in enumerate(extract_recent_inquiries(report, today, lookback_months))
    ]

    logger.info(
        f"Extracted {len(accounts)} negative accounts, {len(public_records)} public records, "
        f"{len(inquiries)} recent inquiries"
    )
    return _dedupe_ids([*accounts, *public_records, *inquiries])
