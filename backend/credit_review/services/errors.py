"""
Credit Review Dashboard - Service Errors

Only request-wide conditions are exceptions. Item-level problems
(network errors, empty responses, per-item token overflow) never raise;
they resolve to static fallback violations inside the analyzer.
"""


class ScanError(Exception):
    """Base class for request-wide scan failures."""
    error_code = "AI_SCAN_FAILED"


class InputTooLarge(ScanError):
    """Raised when the full report payload exceeds the input token ceiling."""
    error_code = "INPUT_TOO_LARGE"

    def __init__(self, tokens: int, ceiling: int):
        self.tokens = tokens
        self.ceiling = ceiling
        super().__init__(f"INPUT_TOO_LARGE: {tokens:,} tokens exceeds limit of {ceiling:,}")


class UpstreamQuotaExceeded(ScanError):
    """Raised when the completion provider reports an exhausted quota."""
    error_code = "QUOTA_EXCEEDED"
