"""
Credit Review Dashboard - Configuration

All runtime settings come from environment variables.
The AI compliance scan runs in offline (static) mode when no
OPENAI_API_KEY is configured.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional


# Defaults tuned for gpt-3.5-turbo-1106
DEFAULT_MODEL = "gpt-3.5-turbo-1106"
DEFAULT_MAX_INPUT_TOKENS = 100000
DEFAULT_MAX_RESPONSE_TOKENS = 1000
DEFAULT_TOKENS_PER_ITEM = 1000
DEFAULT_BATCH_SIZE = 5
DEFAULT_TEMPERATURE = 0.3
DEFAULT_INQUIRY_LOOKBACK_MONTHS = 36


@dataclass(frozen=True)
class ScanSettings:
    """Settings for the compliance scan pipeline and its completion client."""
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    model: str = DEFAULT_MODEL
    max_input_tokens: int = DEFAULT_MAX_INPUT_TOKENS
    max_response_tokens: int = DEFAULT_MAX_RESPONSE_TOKENS
    tokens_per_item: int = DEFAULT_TOKENS_PER_ITEM
    batch_size: int = DEFAULT_BATCH_SIZE
    temperature: float = DEFAULT_TEMPERATURE
    inquiry_lookback_months: int = DEFAULT_INQUIRY_LOOKBACK_MONTHS

    @property
    def has_credential(self) -> bool:
        return bool(self.openai_api_key)


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def load_settings() -> ScanSettings:
    """Build ScanSettings from the current environment."""
    settings = ScanSettings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        model=os.getenv("AI_SCAN_MODEL", DEFAULT_MODEL),
        max_input_tokens=_int_env("AI_SCAN_MAX_INPUT_TOKENS", DEFAULT_MAX_INPUT_TOKENS),
        max_response_tokens=_int_env("AI_SCAN_MAX_RESPONSE_TOKENS", DEFAULT_MAX_RESPONSE_TOKENS),
        tokens_per_item=_int_env("AI_SCAN_TOKENS_PER_ITEM", DEFAULT_TOKENS_PER_ITEM),
        batch_size=_int_env("AI_SCAN_BATCH_SIZE", DEFAULT_BATCH_SIZE),
        temperature=_float_env("AI_SCAN_TEMPERATURE", DEFAULT_TEMPERATURE),
        inquiry_lookback_months=_int_env(
            "AI_SCAN_INQUIRY_LOOKBACK_MONTHS", DEFAULT_INQUIRY_LOOKBACK_MONTHS
        ),
    )
    if settings.batch_size < 1:
        raise ValueError(f"AI_SCAN_BATCH_SIZE must be >= 1, got {settings.batch_size}")
    return settings


@lru_cache()
def get_settings() -> ScanSettings:
    """Dependency for FastAPI - process-wide settings, read once."""
    return load_settings()


# Server settings
CORS_ORIGINS: List[str] = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
