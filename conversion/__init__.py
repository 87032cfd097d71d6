"""Playlist conversion submission and result normalization"""

from .models import ConversionOutcome, ConversionResult
from .workflow import ConversionWorkflow, classify_response

__all__ = [
    "ConversionOutcome",
    "ConversionResult",
    "ConversionWorkflow",
    "classify_response",
]
