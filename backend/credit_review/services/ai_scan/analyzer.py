"""
Credit Review Dashboard - Batched Analyzer

Runs per-item compliance analysis against the completion service with
bounded concurrency:

- Items are split into batches of batch_size
- Batches run strictly one after another
- Items inside a batch run concurrently; the batch finishes before the next starts

Item-level failures never escape analyze_item(). Oversized summaries,
provider errors and empty responses all resolve to static fallback
violations. The one exception is UpstreamQuotaExceeded: the running batch
is allowed to finish, then it is re-raised for the whole request.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from ...config import ScanSettings
from ...models import ItemResult, ReportItem, ViolationSource
from ..errors import UpstreamQuotaExceeded
from ..llm import CompletionClient, CompletionRequest
from .fallback import static_violations_for_item
from .prompts import parse_violations, system_prompt, user_prompt
from .token_budget import item_tokens

logger = logging.getLogger(__name__)

# (percent, message)
ProgressCallback = Callable[[float, str], None]

BATCH_PROGRESS_START = 30
BATCH_PROGRESS_SPAN = 50


def noop_progress(progress: float, message: str) -> None:
    pass


def partition(items: Sequence[ReportItem], batch_size: int) -> List[List[ReportItem]]:
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    return [list(items[i:i + batch_size]) for i in range(0, len(items), batch_size)]


class BatchedAnalyzer:
    """
    Analyzes extracted report items through a CompletionClient.

    One analyzer instance serves one scan; it holds no state between calls
    beyond its collaborators.
    """

    def __init__(
        self,
        client: CompletionClient,
        settings: ScanSettings,
        progress: Optional[ProgressCallback] = None,
    ):
        self.client = client
        self.settings = settings
        self.progress = progress or noop_progress

    def _fallback(self, item: ReportItem, source: ViolationSource) -> ItemResult:
        return ItemResult(
            item_id=item.item_id,
            item_type=item.item_type,
            violations=static_violations_for_item(item),
            source=source,
        )

    def build_request(self, item: ReportItem) -> CompletionRequest:
        return CompletionRequest(
            model=self.settings.model,
            system_prompt=system_prompt(item.item_type),
            user_content=user_prompt(item),
            max_tokens=self.settings.max_response_tokens,
            temperature=self.settings.temperature,
        )

    async def analyze_item(self, item: ReportItem) -> ItemResult:
        """Analyze one item. Only UpstreamQuotaExceeded propagates."""
        tokens = item_tokens(item)
        if tokens > self.settings.tokens_per_item:
            logger.warning(
                f"{item.item_type.value} {item.item_id} skipped: {tokens} tokens "
                f"exceeds per-item limit of {self.settings.tokens_per_item}"
            )
            return self._fallback(item, ViolationSource.SKIPPED)

        logger.debug(f"Analyzing {item.item_type.value} {item.item_id}")
        try:
            response = await self.client.complete(self.build_request(item))
        except UpstreamQuotaExceeded:
            raise
        except Exception as e:
            logger.error(f"AI analysis failed for {item.item_type.value} {item.item_id}: {e}")
            return self._fallback(item, ViolationSource.FALLBACK)

        violations = parse_violations(response)
        if not violations:
            logger.warning(f"Empty response for {item.item_id}, using fallback")
            return self._fallback(item, ViolationSource.FALLBACK)

        logger.debug(f"Detected {len(violations)} violations for {item.item_id}")
        return ItemResult(
            item_id=item.item_id,
            item_type=item.item_type,
            violations=violations,
            source=ViolationSource.AI,
        )

    async def analyze(self, items: Sequence[ReportItem]) -> List[ItemResult]:
        """
        Analyze all items, batch by batch.

        Returns:
            One ItemResult per item. Order within a batch follows the input,
            but callers should key results by item_id.

        Raises:
            UpstreamQuotaExceeded: after the batch in which it occurred completes
        """
        batches = partition(items, self.settings.batch_size)
        results: List[ItemResult] = []

        for number, batch in enumerate(batches, start=1):
            offset = (number - 1) * self.settings.batch_size
            percent = BATCH_PROGRESS_START + (offset / len(items)) * BATCH_PROGRESS_SPAN
            self.progress(
                percent,
                f"Processing batch {number} of {len(batches)} ({len(batch)} items)...",
            )
            logger.info(f"Batch {number}/{len(batches)}: processing {len(batch)} items concurrently")

            outcomes = await asyncio.gather(
                *(self.analyze_item(item) for item in batch),
                return_exceptions=True,
            )

            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome
                results.append(outcome)

            done = offset + len(batch)
            self.progress(
                BATCH_PROGRESS_START + (done / len(items)) * BATCH_PROGRESS_SPAN,
                f"Batch {number} of {len(batches)} complete ({done}/{len(items)} items)",
            )
            logger.info(f"Batch {number} complete: {len(outcomes)} items processed")

        return results
