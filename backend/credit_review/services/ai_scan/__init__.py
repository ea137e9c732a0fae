"""Credit Review Dashboard - AI Compliance Scan

Extracts disputable items from a credit report and analyzes each one for
Metro 2 / FCRA / FDCPA violations through a completion service, with
deterministic static fallback.
"""
from ..errors import ScanError, InputTooLarge, UpstreamQuotaExceeded
from .pipeline import ComplianceScanPipeline, perform_ai_scan, offline_result
from .extractor import extract_items, inquiry_cutoff, is_negative_account
from .token_budget import estimate_tokens, count_payload_tokens, check_request_budget
from .analyzer import BatchedAnalyzer, partition
from .aggregator import ScanAccumulator, violation_category

__all__ = [
    "ScanError",
    "InputTooLarge",
    "UpstreamQuotaExceeded",
    "ComplianceScanPipeline",
    "perform_ai_scan",
    "offline_result",
    "extract_items",
    "inquiry_cutoff",
    "is_negative_account",
    "estimate_tokens",
    "count_payload_tokens",
    "check_request_budget",
    "BatchedAnalyzer",
    "partition",
    "ScanAccumulator",
    "violation_category",
]
