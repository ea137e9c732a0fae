"""Credit Review Dashboard - API Routers"""
from .scan import router as scan_router
from .disputes import router as disputes_router

__all__ = [
    "scan_router",
    "disputes_router",
]
