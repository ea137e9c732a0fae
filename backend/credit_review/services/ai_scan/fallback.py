"""
Credit Review Dashboard - Static Fallback Violations

Deterministic violation lists used whenever the completion service is
unavailable, fails, returns nothing usable, or an item is too large to
send. Selection depends only on item type and original index, so the
same report always yields the same fallback output.
"""
from typing import List

from ...models import ItemType, ReportItem


ACCOUNT_VIOLATION_SETS = (
    (
        "Metro 2 Violation: Missing required Date of First Delinquency field",
        "FCRA Violation: Account status reporting inconsistent across bureaus",
        "Metro 2 Violation: Payment pattern does not align with current account status",
    ),
    (
        "Metro 2 Violation: Incorrect Account Type code reported",
        "FCRA Violation: Dispute resolution not properly documented",
        "Metro 2 Violation: Balance exceeds reported credit limit",
    ),
    (
        "Metro 2 Violation: Missing Consumer Information Indicator",
        "FCRA Violation: Account ownership incorrectly reported",
        "Metro 2 Violation: Payment history contains invalid status codes",
    ),
)

PUBLIC_RECORD_VIOLATIONS = (
    "Metro 2 Violation: Public record information is outdated or inaccurate",
    "FCRA Violation: Public record lacks proper verification",
    "FDCPA Violation: Public record collection activity violates guidelines",
)

INQUIRY_VIOLATIONS = (
    "Metro 2 Violation: Inquiry exceeds permissible purpose timeframe",
    "FCRA Violation: Inquiry lacks proper authorization documentation",
    "FDCPA Violation: Inquiry related to unauthorized debt collection",
)

# Placeholder identifiers returned when no completion credential is configured
OFFLINE_PLACEHOLDER_IDS = ("TRADE001", "TRADE002", "TRADE003")


def account_violations(index: int) -> List[str]:
    return list(ACCOUNT_VIOLATION_SETS[index % len(ACCOUNT_VIOLATION_SETS)])


def static_violations(item_type: ItemType, index: int) -> List[str]:
    if item_type == ItemType.PUBLIC_RECORD:
        return list(PUBLIC_RECORD_VIOLATIONS)
    if item_type == ItemType.INQUIRY:
        return list(INQUIRY_VIOLATIONS)
    return account_violations(index)


def static_violations_for_item(item: ReportItem) -> List[str]:
    return static_violations(item.item_type, item.original_index)
