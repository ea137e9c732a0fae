"""Credit Review Dashboard - Data Models"""
from .scan_models import (
    # Enums
    ItemType, ViolationSource, ViolationCategory, ScanStage,
    # Item summaries
    AccountSummary, PublicRecordSummary, InquirySummary, ItemSummary,
    # Pipeline records
    ReportItem, ItemResult, ScanDiagnostics, ScanResult, ViolationSet,
    MAX_VIOLATIONS_PER_ITEM,
)

__all__ = [
    "ItemType", "ViolationSource", "ViolationCategory", "ScanStage",
    "AccountSummary", "PublicRecordSummary", "InquirySummary", "ItemSummary",
    "ReportItem", "ItemResult", "ScanDiagnostics", "ScanResult", "ViolationSet",
    "MAX_VIOLATIONS_PER_ITEM",
]
