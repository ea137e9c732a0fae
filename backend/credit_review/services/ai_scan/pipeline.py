"""
Credit Review Dashboard - Compliance Scan Pipeline

Main orchestrator for the AI compliance scan:

    extraction -> token budget -> batched analysis -> aggregation -> response

Stages (ScanStage):
    IDLE -> EXTRACTING -> BUDGET_CHECKING -> (ABORTED_TOO_LARGE | ANALYZING)
         -> AGGREGATING -> COMPLETED

Only InputTooLarge (and UpstreamQuotaExceeded from the provider) end a
scan early. Every item-level problem is absorbed into static fallback
violations, so a scan that passes the budget check always completes.
With no completion credential configured the scan runs in offline mode
and returns placeholder static results.
"""
from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ...config import ScanSettings, get_settings
from ...models import ReportItem, ScanDiagnostics, ScanResult, ScanStage
from ..errors import InputTooLarge
from ..llm import CompletionClient, build_completion_client, close_completion_client
from .aggregator import ScanAccumulator, category_counts
from .analyzer import BatchedAnalyzer, ProgressCallback, noop_progress
from .extractor import extract_items
from .fallback import OFFLINE_PLACEHOLDER_IDS, account_violations
from .token_budget import check_request_budget, count_payload_tokens

logger = logging.getLogger(__name__)

OFFLINE_MESSAGE = "Using static violations (no AI key available)"


def offline_result(input_tokens: int) -> ScanResult:
    """Static result for a fixed set of placeholder accounts."""
    violations = {
        item_id: account_violations(index)
        for index, item_id in enumerate(OFFLINE_PLACEHOLDER_IDS)
    }
    total = sum(len(v) for v in violations.values())
    return ScanResult(
        violations=violations,
        total_violations=total,
        affected_accounts=len(violations),
        breakdown={"accounts": len(violations), "publicRecords": 0, "inquiries": 0},
        category_breakdown=category_counts(violations),
        message=OFFLINE_MESSAGE,
        diagnostics=ScanDiagnostics(
            input_tokens=input_tokens,
            total_items_processed=len(violations),
            fallback_used=True,
        ),
    )


class ComplianceScanPipeline:
    """
    One compliance scan over one credit report.

    Create a new pipeline per request; `stage` tracks progress through
    the scan lifecycle for logging and inspection.
    """

    def __init__(
        self,
        settings: Optional[ScanSettings] = None,
        client: Optional[CompletionClient] = None,
        progress: Optional[ProgressCallback] = None,
        now: Optional[datetime] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client
        self.progress = progress or noop_progress
        self.now = now
        self.stage = ScanStage.IDLE

    def _enter(self, stage: ScanStage) -> None:
        logger.debug(f"Scan stage {self.stage.value} -> {stage.value}")
        self.stage = stage

    async def run(self, credit_data: Dict[str, Any]) -> ScanResult:
        """
        Run the scan.

        Args:
            credit_data: Parsed credit report JSON

        Returns:
            ScanResult with exactly one violations entry per extracted item
            (or the offline placeholder set)

        Raises:
            InputTooLarge: payload over the input token ceiling
            UpstreamQuotaExceeded: provider quota exhausted
        """
        logger.info("Starting compliance scan")

        self._enter(ScanStage.EXTRACTING)
        self.progress(5, "Analyzing credit data structure...")
        items = extract_items(
            credit_data,
            now=self.now,
            lookback_months=self.settings.inquiry_lookback_months,
        )

        self._enter(ScanStage.BUDGET_CHECKING)
        input_tokens = count_payload_tokens(credit_data)
        logger.info(f"Total input tokens: {input_tokens:,}")
        try:
            check_request_budget(input_tokens, self.settings.max_input_tokens)
        except InputTooLarge:
            self._enter(ScanStage.ABORTED_TOO_LARGE)
            raise

        self.progress(10, "Validating API credentials...")
        if self.client is not None:
            return await self._analyze(items, self.client, input_tokens)

        client = build_completion_client(self.settings)
        if client is None:
            self._enter(ScanStage.COMPLETED)
            self.progress(100, OFFLINE_MESSAGE)
            return offline_result(input_tokens)
        # built here, so released here
        try:
            return await self._analyze(items, client, input_tokens)
        finally:
            await close_completion_client(client)

    async def _analyze(
        self,
        items: List[ReportItem],
        client: CompletionClient,
        input_tokens: int,
    ) -> ScanResult:
        self._enter(ScanStage.ANALYZING)
        self.progress(15, "Extracting credit report items...")
        accumulator = ScanAccumulator(items)
        accumulator.diagnostics.input_tokens = input_tokens

        self.progress(20, f"Starting parallel analysis of {len(items)} items...")
        analyzer = BatchedAnalyzer(client, self.settings, progress=self.progress)
        results = await analyzer.analyze(items)

        self._enter(ScanStage.AGGREGATING)
        self.progress(80, "Finalizing analysis...")
        accumulator.add_all(results)
        missing = accumulator.missing()
        if missing:
            # analyze() returns one result per item; this guards the invariant
            raise RuntimeError(f"Scan produced no result for items: {missing}")

        self.progress(90, "Finalizing analysis...")
        result = accumulator.build_result()

        self._enter(ScanStage.COMPLETED)
        self.progress(100, "Analysis complete!")
        logger.info(
            f"Compliance scan completed: {result.total_violations} violations, "
            f"{result.diagnostics.total_items_processed} items processed"
        )
        return result


async def perform_ai_scan(
    credit_data: Dict[str, Any],
    settings: Optional[ScanSettings] = None,
    client: Optional[CompletionClient] = None,
    progress: Optional[ProgressCallback] = None,
    now: Optional[datetime] = None,
) -> ScanResult:
    """Convenience function to run a single compliance scan."""
    pipeline = ComplianceScanPipeline(settings=settings, client=client, progress=progress, now=now)
    return await pipeline.run(credit_data)
