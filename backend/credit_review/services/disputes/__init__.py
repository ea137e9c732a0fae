"""Credit Review Dashboard - Dispute form templates"""
from .templates import (
    DisputeTemplate,
    DisputeText,
    TEMPLATES,
    get_template,
    autofill_dispute,
)

__all__ = [
    "DisputeTemplate",
    "DisputeText",
    "TEMPLATES",
    "get_template",
    "autofill_dispute",
]
