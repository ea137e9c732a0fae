"""
Credit Review Dashboard - Dispute Reason/Instruction Templates

Reason and instruction catalogs offered for each disputable item type,
plus the auto-fill rules the dashboard applies when a consumer opens a
dispute form or picks AI-detected violations:

- no violation selected -> default pair for the item type
- one violation         -> that violation's text in both fields
- several violations    -> "Use All N" in both fields
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ...models import ItemType


@dataclass(frozen=True)
class DisputeTemplate:
    item_type: ItemType
    reasons: List[str]
    instructions: List[str]
    default_reason: str
    default_instruction: str


@dataclass(frozen=True)
class DisputeText:
    reason: str
    instruction: str


ACCOUNT_REASONS = [
    "This account does not belong to me",
    "Account information is inaccurate",
    "Payment history is incorrect",
    "Account should be closed/paid",
    "Duplicate account reporting",
    "Identity theft/fraud account",
    "Settled account still showing balance",
    "Account beyond statute of limitations",
    "Incorrect dates (opened/closed/last activity)",
    "Unauthorized charges on this account",
]

ACCOUNT_INSTRUCTIONS = [
    "Please remove this inaccurate information immediately",
    "Verify and correct all account details",
    "Update payment history to reflect accurate information",
    "Remove this account as it has been paid in full",
    "Delete this duplicate entry from my credit report",
    "Remove this fraudulent account immediately",
    "Update account to show zero balance",
    "Remove this time-barred account",
    "Correct all dates associated with this account",
    "Remove all unauthorized charges and related negative marks",
]

PUBLIC_RECORD_REASONS = [
    "I have never been associated with this record",
    "This record has incorrect information",
    "This record is too old to report",
    "This record has been resolved or satisfied",
    "I was not properly notified of this action",
    "This violates my consumer rights",
    "Identity theft - this is not my record",
]

PUBLIC_RECORD_INSTRUCTIONS = [
    "Remove this record from my credit report immediately",
    "Update this record with correct information",
    "Verify the accuracy of this record",
    "Please investigate this record thoroughly",
    "Correct the reporting of this record",
    "Delete this inaccurate record",
    "Update this record to reflect proper status",
]

INQUIRY_REASONS = [
    "Inquiry not authorized by me",
    "I never applied for credit with this company",
    "This inquiry is older than 2 years",
    "This is a duplicate inquiry",
    "I was only shopping for rates",
    "This inquiry was made without my permission",
    "This is fraudulent inquiry activity",
]

INQUIRY_INSTRUCTIONS = [
    "Please remove this unauthorized inquiry immediately",
    "Delete this inquiry as I never applied for credit",
    "Remove this outdated inquiry from my report",
    "Please delete this duplicate inquiry",
    "Remove this inquiry as I was only rate shopping",
    "Delete this unauthorized inquiry from my credit file",
    "Remove this fraudulent inquiry immediately",
]

TEMPLATES: Dict[ItemType, DisputeTemplate] = {
    ItemType.ACCOUNT: DisputeTemplate(
        item_type=ItemType.ACCOUNT,
        reasons=ACCOUNT_REASONS,
        instructions=ACCOUNT_INSTRUCTIONS,
        default_reason=ACCOUNT_REASONS[1],
        default_instruction=ACCOUNT_INSTRUCTIONS[1],
    ),
    ItemType.PUBLIC_RECORD: DisputeTemplate(
        item_type=ItemType.PUBLIC_RECORD,
        reasons=PUBLIC_RECORD_REASONS,
        instructions=PUBLIC_RECORD_INSTRUCTIONS,
        default_reason=PUBLIC_RECORD_REASONS[1],
        default_instruction=PUBLIC_RECORD_INSTRUCTIONS[2],
    ),
    ItemType.INQUIRY: DisputeTemplate(
        item_type=ItemType.INQUIRY,
        reasons=INQUIRY_REASONS,
        instructions=INQUIRY_INSTRUCTIONS,
        default_reason=INQUIRY_REASONS[0],
        default_instruction=INQUIRY_INSTRUCTIONS[0],
    ),
}


def get_template(item_type: ItemType) -> DisputeTemplate:
    return TEMPLATES[item_type]


def autofill_dispute(
    item_type: ItemType,
    violations: Optional[Sequence[str]] = None,
) -> DisputeText:
    """Reason/instruction text pre-filled into a dispute form."""
    selected = [v.strip() for v in (violations or []) if v and v.strip()]
    if len(selected) == 1:
        return DisputeText(reason=selected[0], instruction=selected[0])
    if selected:
        label = f"Use All {len(selected)}"
        return DisputeText(reason=label, instruction=label)

    template = get_template(item_type)
    return DisputeText(reason=template.default_reason, instruction=template.default_instruction)
