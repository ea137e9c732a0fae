"""
Credit Review Dashboard - Dispute Templates API Router

Read-only reason/instruction catalogs and auto-fill text for dispute
forms. Saved dispute state lives in the dashboard, not here.
"""
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..models import ItemType
from ..services.disputes import autofill_dispute, get_template

router = APIRouter(prefix="/api/dispute-templates", tags=["disputes"])


class DisputeTemplateResponse(BaseModel):
    item_type: str
    reasons: List[str]
    instructions: List[str]
    default_reason: str
    default_instruction: str


class AutofillRequest(BaseModel):
    item_type: str
    violations: List[str] = []


class AutofillResponse(BaseModel):
    reason: str
    instruction: str


def _parse_item_type(value: str) -> ItemType:
    try:
        return ItemType(value)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown item type: {value}")


@router.post("/autofill", response_model=AutofillResponse)
async def autofill(request: AutofillRequest):
    """Reason/instruction text to pre-fill for the selected violations."""
    text = autofill_dispute(_parse_item_type(request.item_type), request.violations)
    return AutofillResponse(reason=text.reason, instruction=text.instruction)


@router.get("/{item_type}", response_model=DisputeTemplateResponse)
async def get_dispute_template(item_type: str):
    """Reason and instruction options for one item type."""
    template = get_template(_parse_item_type(item_type))
    return DisputeTemplateResponse(
        item_type=template.item_type.value,
        reasons=template.reasons,
        instructions=template.instructions,
        default_reason=template.default_reason,
        default_instruction=template.default_instruction,
    )
