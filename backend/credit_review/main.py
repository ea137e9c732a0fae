"""
Credit Review Dashboard - FastAPI Application

Main entry point for the dashboard backend.

Architecture:
- Credit report JSON → ItemExtractor → ReportItems
- ReportItems → TokenBudgetGuard → BatchedAnalyzer → ItemResults
- ItemResults → ScanAccumulator → ScanResult
"""
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import CORS_ORIGINS, LOG_LEVEL, get_settings
from .routers import scan_router, disputes_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

HEALTH_PATHS = {"/health", "/api/health"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log scan mode on startup."""
    settings = get_settings()
    mode = "AI" if settings.has_credential else "static (no OPENAI_API_KEY)"
    logger.info(f"Compliance scan mode: {mode}, model={settings.model}")
    yield

# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title="Credit Review Dashboard",
    description="""
    Credit Review Dashboard - Compliance Scan API

    Reviews a parsed credit bureau report and flags Metro 2, FCRA and FDCPA
    violations on disputable items.

    ## Pipeline
    1. **Extraction**: negative accounts, public records, recent inquiries
    2. **Token Budget**: whole-payload ceiling, per-item ceiling
    3. **Batched Analysis**: concurrent completion calls, batch by batch
    4. **Aggregation**: violations keyed by item identifier

    ## Key Principles
    - Every extracted item gets exactly one violations entry
    - Item-level failures fall back to static violations
    - Nothing persists between scans
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    """Log METHOD path status duration for /api routes, skipping health checks."""
    path = request.url.path
    if path in HEALTH_PATHS or not path.startswith("/api"):
        return await call_next(request)

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {path} {response.status_code} in {duration_ms:.0f}ms")
    return response


# Include routers
app.include_router(scan_router)
app.include_router(disputes_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "Credit Review Dashboard",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/health")
async def api_health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# For running with: python -m credit_review.main
if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
