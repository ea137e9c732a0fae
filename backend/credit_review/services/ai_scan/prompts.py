"""
Credit Review Dashboard - Compliance Prompts

Prompt construction and response parsing for per-item analysis.
"""
import re
from typing import List, Optional

from ...models import ItemType, MAX_VIOLATIONS_PER_ITEM, ReportItem
from .aggregator import violation_category
from .token_budget import summary_text


_RESPONSE_FORMAT = """Return exactly 3 violations in this format:
- Metro 2 Violation: [specific violation]
- FCRA Violation: [specific violation]
- FDCPA Violation: [specific violation]"""

_SUBJECTS = {
    ItemType.ACCOUNT: "this credit account",
    ItemType.PUBLIC_RECORD: "this public record",
    ItemType.INQUIRY: "this credit inquiry",
}

# "- ", "* ", "• ", "1. ", "2) "
_LIST_MARKER = re.compile(r"^(?:[-*•]|\d+[.)])\s+")


def system_prompt(item_type: ItemType) -> str:
    return (
        "You are an expert credit compliance analyst. "
        f"Analyze {_SUBJECTS[item_type]} for Metro 2, FCRA, and FDCPA violations. "
        f"{_RESPONSE_FORMAT}"
    )


def user_prompt(item: ReportItem) -> str:
    return (
        f"Analyze this {item.item_type.value} for compliance violations: "
        f"{summary_text(item)}"
    )


def parse_violations(response: Optional[str]) -> List[str]:
    """
    Split a completion into violation lines.

    Trimmed lines with leading list markers removed. Only lines that open
    with a category label (Metro 2, FCRA, FDCPA) are kept, so preambles
    like "Here are the violations:" are dropped. At most three.
    """
    if not response:
        return []
    lines = []
    for line in response.splitlines():
        line = _LIST_MARKER.sub("", line.strip()).strip()
        if line and violation_category(line) is not None:
            lines.append(line)
    return lines[:MAX_VIOLATIONS_PER_ITEM]
