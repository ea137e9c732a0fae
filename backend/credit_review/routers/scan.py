"""
Credit Review Dashboard - AI Scan API Router

POST /api/ai-scan runs the compliance scan over a full credit report.

Every non-200 response carries fallbackUsed=true: the dashboard treats
413 (input too large), 429 (provider quota) and 500 (anything else) as
"continue with static results", never as fatal.
"""
from __future__ import annotations
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..config import ScanSettings, get_settings
from ..services.ai_scan import InputTooLarge, UpstreamQuotaExceeded, perform_ai_scan
from ..services.llm import CompletionClient, build_completion_client, close_completion_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ai-scan"])


# =============================================================================
# PYDANTIC MODELS FOR API
# =============================================================================

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenInfoResponse(CamelModel):
    input_tokens: int
    items_analyzed_with_ai: int = Field(alias="itemsAnalyzedWithAI")
    items_skipped_by_tokens: int
    items_failed: int = 0
    total_items_processed: int
    fallback_used: bool


class BreakdownResponse(CamelModel):
    accounts: int
    public_records: int
    inquiries: int


class CategoryBreakdownResponse(BaseModel):
    metro2: int = 0
    fcra: int = 0
    fdcpa: int = 0


class AiScanResponse(CamelModel):
    success: bool
    total_violations: int
    affected_accounts: int
    violations: Dict[str, List[str]]
    suggestions: Dict[str, Any] = {}
    breakdown: BreakdownResponse
    category_breakdown: CategoryBreakdownResponse
    message: str
    token_info: TokenInfoResponse


class ScanErrorResponse(CamelModel):
    success: bool = False
    error: str
    message: str
    fallback_used: bool = True


# =============================================================================
# DEPENDENCIES
# =============================================================================

async def get_completion_client(
    settings: ScanSettings = Depends(get_settings),
) -> AsyncIterator[Optional[CompletionClient]]:
    """
    Completion client for this request, or None when no key is configured.

    The client's connection pool is closed once the request is done.
    """
    client = build_completion_client(settings)
    try:
        yield client
    finally:
        await close_completion_client(client)


def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    body = ScanErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.post(
    "/ai-scan",
    response_model=AiScanResponse,
    responses={
        413: {"model": ScanErrorResponse},
        429: {"model": ScanErrorResponse},
        500: {"model": ScanErrorResponse},
    },
)
async def ai_scan(
    credit_data: Dict[str, Any] = Body(...),
    settings: ScanSettings = Depends(get_settings),
    client: Optional[CompletionClient] = Depends(get_completion_client),
):
    """
    Scan a credit report for Metro 2 / FCRA / FDCPA violations.

    The body is the full parsed credit report JSON (CREDIT_RESPONSE root).
    """
    logger.info("POST /api/ai-scan: received credit data for compliance scan")

    def send_progress(progress: float, message: str) -> None:
        logger.info(f"Progress: {progress:.0f}% - {message}")

    try:
        result = await perform_ai_scan(
            credit_data,
            settings=settings,
            client=client,
            progress=send_progress,
        )
    except InputTooLarge as e:
        logger.warning(f"AI scan rejected: {e}")
        return _error_response(
            413,
            e.error_code,
            "Credit data is too large for AI analysis. Using static violations instead.",
        )
    except UpstreamQuotaExceeded as e:
        logger.error(f"AI scan failed, provider quota exceeded: {e}")
        return _error_response(
            429,
            e.error_code,
            "OpenAI API quota exceeded. Using static violations instead.",
        )
    except Exception as e:
        logger.exception(f"AI scan failed: {e}")
        return _error_response(
            500,
            "AI_SCAN_FAILED",
            "AI scan failed. Using static violations instead.",
        )

    logger.info(f"AI scan completed: returned keys {list(result.violations)}")
    return result.to_response()
