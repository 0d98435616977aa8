"""Vision (tier 2) extraction package.

This package provides:
- VisionService: Provider abstraction
- GeminiVisionService: Google Gemini implementation
- ResilientVisionInvoker: Retry, circuit breaking and bounded fan-out

Usage:
    from tieredpdf.services.vision import GeminiVisionService, ResilientVisionInvoker
"""

from tieredpdf.services.vision.base import VisionService
from tieredpdf.services.vision.gemini_vision import (
    GeminiVisionService,
    estimate_vision_cost,
)
from tieredpdf.services.vision.invoker import ResilientVisionInvoker

__all__ = [
    "VisionService",
    "GeminiVisionService",
    "ResilientVisionInvoker",
    "estimate_vision_cost",
]
