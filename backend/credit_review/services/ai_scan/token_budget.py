"""
Credit Review Dashboard - Token Budget Guard

Approximate token accounting for requests to the completion service.

estimate_tokens() is a character heuristic (4 characters ~ 1 token),
not a tokenizer. For English/JSON text it is typically within +/-25% of
the real BPE count. The configured ceilings are calibrated against this
heuristic; switching to an exact tokenizer requires re-deriving them.

Two independent guards:
- check_request_budget(): hard pre-check on the full raw payload
- item_exceeds_budget(): soft per-item check on the serialized summary
"""
import json
import logging
import math
from typing import Any

from ...models import ReportItem
from ..errors import InputTooLarge

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Approximate token count: ceil(len / 4)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def serialize_compact(payload: Any) -> str:
    """Compact JSON, non-ASCII kept as-is (matches what is sent upstream)."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def count_payload_tokens(payload: Any) -> int:
    return estimate_tokens(serialize_compact(payload))


def check_request_budget(tokens: int, ceiling: int) -> None:
    """
    Reject the whole scan when the payload is over the ceiling.

    A payload exactly at the ceiling is accepted.

    Raises:
        InputTooLarge: tokens > ceiling
    """
    if tokens > ceiling:
        logger.warning(f"Input too large: {tokens:,} tokens exceeds limit of {ceiling:,}")
        raise InputTooLarge(tokens, ceiling)


def summary_text(item: ReportItem) -> str:
    """Serialized summary sent to the completion service for one item."""
    return serialize_compact(item.summary.as_payload())


def item_tokens(item: ReportItem) -> int:
    return estimate_tokens(summary_text(item))


def item_exceeds_budget(item: ReportItem, ceiling: int) -> bool:
    return item_tokens(item) > ceiling
