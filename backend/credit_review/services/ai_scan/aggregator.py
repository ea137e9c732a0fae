"""
Credit Review Dashboard - Result Aggregator

Collects per-item results into a ViolationSet and computes the summary
counts returned to the dashboard. ScanAccumulator is created per scan
and never shared.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional

from ...models import (
    ItemResult,
    ItemType,
    ReportItem,
    ScanDiagnostics,
    ScanResult,
    ViolationCategory,
    ViolationSet,
    ViolationSource,
)

logger = logging.getLogger(__name__)

BREAKDOWN_KEYS = {
    ItemType.ACCOUNT: "accounts",
    ItemType.PUBLIC_RECORD: "publicRecords",
    ItemType.INQUIRY: "inquiries",
}

CATEGORY_KEYS = {
    ViolationCategory.METRO2: "metro2",
    ViolationCategory.FCRA: "fcra",
    ViolationCategory.FDCPA: "fdcpa",
}


def violation_category(violation: str) -> Optional[ViolationCategory]:
    """Category from the violation's leading label, e.g. 'FCRA Violation: ...'."""
    text = violation.lstrip().upper()
    for category in ViolationCategory:
        if text.startswith(category.value.upper()):
            return category
    return None


def category_counts(violations: ViolationSet) -> Dict[str, int]:
    """Number of violation strings per category label."""
    counts = {key: 0 for key in CATEGORY_KEYS.values()}
    for item_violations in violations.values():
        for violation in item_violations:
            category = violation_category(violation)
            if category is not None:
                counts[CATEGORY_KEYS[category]] += 1
    return counts


def completion_message(breakdown: Dict[str, int]) -> str:
    return (
        f"AI analysis completed: Found violations across {breakdown['accounts']} accounts, "
        f"{breakdown['publicRecords']} public records, and {breakdown['inquiries']} inquiries"
    )


class ScanAccumulator:
    """
    Per-scan accumulator keyed by item identifier.

    Results may arrive in any order; the final ViolationSet follows the
    extraction order of the items registered up front.
    """

    def __init__(self, items: Iterable[ReportItem] = ()):
        self._order: List[str] = []
        self._types: Dict[str, ItemType] = {}
        self._violations: Dict[str, List[str]] = {}
        self.diagnostics = ScanDiagnostics()
        for item in items:
            self._register(item.item_id, item.item_type)

    def _register(self, item_id: str, item_type: ItemType) -> None:
        if item_id not in self._types:
            self._order.append(item_id)
            self._types[item_id] = item_type

    def add(self, result: ItemResult) -> None:
        if result.item_id in self._violations:
            raise ValueError(f"Duplicate result for item {result.item_id}")
        self._register(result.item_id, result.item_type)
        self._violations[result.item_id] = list(result.violations)

        self.diagnostics.total_items_processed += 1
        if result.source == ViolationSource.AI:
            self.diagnostics.items_analyzed_with_ai += 1
        elif result.source == ViolationSource.SKIPPED:
            self.diagnostics.items_skipped_by_tokens += 1
        else:
            self.diagnostics.items_failed += 1

    def add_all(self, results: Iterable[ItemResult]) -> None:
        for result in results:
            self.add(result)

    @property
    def violations(self) -> ViolationSet:
        return {
            item_id: self._violations[item_id]
            for item_id in self._order
            if item_id in self._violations
        }

    def missing(self) -> List[str]:
        """Registered items that never received a result."""
        return [item_id for item_id in self._order if item_id not in self._violations]

    def breakdown(self) -> Dict[str, int]:
        # Counted by item type, not id prefix: liability ids and inquiry_N
        # fallback ids carry no reliable type prefix.
        counts = {key: 0 for key in BREAKDOWN_KEYS.values()}
        for item_id, violations in self._violations.items():
            if violations:
                counts[BREAKDOWN_KEYS[self._types[item_id]]] += 1
        return counts

    def build_result(self, message: Optional[str] = None) -> ScanResult:
        violations = self.violations
        breakdown = self.breakdown()
        total = sum(len(v) for v in violations.values())
        affected = sum(1 for v in violations.values() if v)

        result = ScanResult(
            violations=violations,
            total_violations=total,
            affected_accounts=affected,
            breakdown=breakdown,
            category_breakdown=category_counts(violations),
            message=message or completion_message(breakdown),
            diagnostics=self.diagnostics,
        )
        logger.info(
            f"Aggregated {total} violations across {affected} items "
            f"(ai={self.diagnostics.items_analyzed_with_ai}, "
            f"skipped={self.diagnostics.items_skipped_by_tokens}, "
            f"failed={self.diagnostics.items_failed})"
        )
        return result
