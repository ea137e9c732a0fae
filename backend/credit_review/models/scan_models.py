"""
Credit Review Dashboard - Compliance Scan Models

Data structures flowing through the compliance scan pipeline:
- ReportItem: one disputable item extracted from the raw report
- ItemResult: violations produced for one item (AI or static fallback)
- ScanResult: aggregate returned to the API layer

All of these are built fresh per scan request. Nothing here is shared
between requests.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union


# =============================================================================
# ENUMS
# =============================================================================

class ItemType(str, Enum):
    ACCOUNT = "account"
    PUBLIC_RECORD = "public_record"
    INQUIRY = "inquiry"


class ViolationSource(str, Enum):
    """Where an item's violation list came from."""
    AI = "ai"
    FALLBACK = "fallback"   # external call failed or returned nothing usable
    SKIPPED = "skipped"     # summary exceeded the per-item token ceiling


class ViolationCategory(str, Enum):
    METRO2 = "Metro 2"
    FCRA = "FCRA"
    FDCPA = "FDCPA"


class ScanStage(str, Enum):
    """Per-request scan lifecycle."""
    IDLE = "idle"
    EXTRACTING = "extracting"
    BUDGET_CHECKING = "budget_checking"
    ABORTED_TOO_LARGE = "aborted_too_large"
    ANALYZING = "analyzing"
    AGGREGATING = "aggregating"
    COMPLETED = "completed"


# ViolationSet: item identifier -> up to 3 categorized violation strings
ViolationSet = Dict[str, List[str]]

MAX_VIOLATIONS_PER_ITEM = 3


# =============================================================================
# ITEM SUMMARIES (one per tagged variant)
# =============================================================================

@dataclass(frozen=True)
class AccountSummary:
    creditor: str = "Unknown"
    status: str = "Unknown"
    balance: str = "0"
    account_type: str = "Unknown"
    rating: str = "Unknown"

    def as_payload(self) -> Dict[str, str]:
        return {
            "creditor": self.creditor,
            "status": self.status,
            "balance": self.balance,
            "accountType": self.account_type,
            "rating": self.rating,
        }


@dataclass(frozen=True)
class PublicRecordSummary:
    record_type: str = "PUBLIC RECORD"
    status: str = "Unknown"
    amount: str = "0"
    date: str = "Unknown"
    court: str = "Unknown"
    case_number: str = "Unknown"

    def as_payload(self) -> Dict[str, str]:
        return {
            "type": self.record_type,
            "status": self.status,
            "amount": self.amount,
            "date": self.date,
            "court": self.court,
            "caseNumber": self.case_number,
        }


@dataclass(frozen=True)
class InquirySummary:
    subscriber_name: str = "Unknown"
    date: str = "Unknown"
    inquiry_type: str = "Unknown"
    purpose: str = "Unknown"

    def as_payload(self) -> Dict[str, str]:
        return {
            "subscriberName": self.subscriber_name,
            "date": self.date,
            "type": self.inquiry_type,
            "purpose": self.purpose,
        }


ItemSummary = Union[AccountSummary, PublicRecordSummary, InquirySummary]


# =============================================================================
# PIPELINE RECORDS
# =============================================================================

@dataclass
class ReportItem:
    """
    A disputable item extracted from the report.

    original_index is the item's position within its own collection
    (accounts, public records or inquiries). It drives identifier
    generation and static fallback selection.
    """
    item_type: ItemType
    item_id: str
    original_index: int
    summary: ItemSummary
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ItemResult:
    item_id: str
    item_type: ItemType
    violations: List[str]
    source: ViolationSource = ViolationSource.AI


@dataclass
class ScanDiagnostics:
    input_tokens: int = 0
    items_analyzed_with_ai: int = 0
    items_skipped_by_tokens: int = 0
    items_failed: int = 0
    total_items_processed: int = 0
    fallback_used: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputTokens": self.input_tokens,
            "itemsAnalyzedWithAI": self.items_analyzed_with_ai,
            "itemsSkippedByTokens": self.items_skipped_by_tokens,
            "itemsFailed": self.items_failed,
            "totalItemsProcessed": self.total_items_processed,
            "fallbackUsed": self.fallback_used,
        }


@dataclass
class ScanResult:
    """Final output of one compliance scan."""
    violations: ViolationSet
    total_violations: int
    affected_accounts: int
    breakdown: Dict[str, int]
    category_breakdown: Dict[str, int]
    message: str
    diagnostics: ScanDiagnostics
    suggestions: Dict[str, Any] = field(default_factory=dict)
    success: bool = True
    stage: ScanStage = ScanStage.COMPLETED

    def to_response(self) -> Dict[str, Any]:
        """Wire format consumed by the dashboard."""
        return {
            "success": self.success,
            "totalViolations": self.total_violations,
            "affectedAccounts": self.affected_accounts,
            "violations": self.violations,
            "suggestions": self.suggestions,
            "breakdown": self.breakdown,
            "categoryBreakdown": self.category_breakdown,
            "message": self.message,
            "tokenInfo": self.diagnostics.to_dict(),
        }
