"""End-to-end extraction over real PDFs built with PyMuPDF.

The native tier runs for real; the vision tier uses a scripted service so
no network calls are made.
"""

from typing import Dict, List, Sequence

import fitz
import pytest

from tieredpdf.models.config import ExtractionConfig, RetryConfig
from tieredpdf.models.extraction import OCRStatus
from tieredpdf.models.quality import ExtractionMethod
from tieredpdf.models.resilience import CircuitState
from tieredpdf.orchestration import (
    VisionFallbackOptions,
    build_orchestrator,
    build_vision_invoker,
)
from tieredpdf.services.vision.base import VisionService
from tieredpdf.utils.circuit_breaker import CircuitBreakerRegistry
from tieredpdf.utils.exceptions import PDFProcessingError, VisionServiceError

PARAGRAPH = (
    "Document processing systems read the text layer of each page and check "
    "whether the result can be trusted. When the text is clean the system keeps "
    "it, and when the text is broken the system asks a vision model to read the "
    "page image instead. "
)

# Symbol-heavy runs of single letters, as left behind by broken font encodings
GARBLED = "a #$ b %& " * 30 + "@" * 12


class ScriptedVisionService(VisionService):
    """Returns fixed text for every page, or fails every call."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.requested: List[int] = []

    @property
    def name(self) -> str:
        return "scripted"

    def is_configured(self) -> bool:
        return True

    async def extract_pages(
        self, document_bytes: bytes, page_numbers: Sequence[int]
    ) -> Dict[int, str]:
        assert document_bytes.startswith(b"%PDF")
        self.requested.extend(page_numbers)
        if self.fail:
            raise VisionServiceError("503 unavailable")
        return {p: f"Vision transcription of page {p}." for p in page_numbers}


def build_pdf(pages: List[str]) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_textbox(fitz.Rect(72, 72, 540, 770), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture(autouse=True)
def cleanup_registry():
    CircuitBreakerRegistry.clear_instance()
    yield
    CircuitBreakerRegistry.clear_instance()


@pytest.fixture
def config():
    return ExtractionConfig(
        retry=RetryConfig(max_attempts=2, initial_delay_seconds=0.0, timeout_seconds=5.0)
    )


@pytest.mark.asyncio
async def test_text_pdf_stays_native(config):
    data = build_pdf([PARAGRAPH * 3, PARAGRAPH * 2])

    result = await build_orchestrator(config).extract_with_fallback(data)

    assert result.total_pages == 2
    assert result.extraction_method == ExtractionMethod.NATIVE
    assert result.needs_ocr is False
    assert "Document processing systems" in result.page_texts[0]


@pytest.mark.asyncio
async def test_blank_page_recovered_with_vision(config):
    data = build_pdf([PARAGRAPH * 3, "", PARAGRAPH * 3])
    service = ScriptedVisionService()
    invoker = build_vision_invoker(config, service=service)

    result = await build_orchestrator(config).extract_with_fallback(
        data, VisionFallbackOptions(enabled=True, invoker=invoker)
    )

    assert service.requested == [2]
    assert result.vision_pages_used == [2]
    assert result.page_texts[1] == "Vision transcription of page 2."
    assert result.extraction_method == ExtractionMethod.HYBRID
    assert result.metadata.vision_pages == 1


@pytest.mark.asyncio
async def test_failing_vision_degrades_and_counts_toward_breaker(config):
    data = build_pdf([PARAGRAPH * 3, ""])
    service = ScriptedVisionService(fail=True)
    invoker = build_vision_invoker(config, service=service)

    result = await build_orchestrator(config).extract_with_fallback(
        data, VisionFallbackOptions(enabled=True, invoker=invoker)
    )

    assert service.requested == [2, 2]
    assert result.page_texts[1] == ""
    assert result.vision_pages_used == []
    breaker = CircuitBreakerRegistry().get("vision")
    assert breaker.failure_count == 2
    assert breaker.state == CircuitState.CLOSED


@pytest.mark.asyncio
async def test_scanned_pdf_flagged_for_ocr(config):
    data = build_pdf(["", "", ""])

    result = await build_orchestrator(config).extract_with_fallback(data)

    assert result.extraction_method == ExtractionMethod.OCR
    assert result.needs_ocr is True
    assert result.content == ""


@pytest.mark.asyncio
async def test_pdfplumber_backend(config):
    config = config.model_copy(update={"native_backend": "pdfplumber"})
    data = build_pdf([PARAGRAPH * 3, ""])

    result = await build_orchestrator(config).extract_with_fallback(data)

    assert result.total_pages == 2
    assert result.page_texts[1] == ""
    assert result.quality_report.problematic_pages == [2]


@pytest.mark.asyncio
async def test_garbage_bytes_fatal(config):
    with pytest.raises(PDFProcessingError) as exc_info:
        await build_orchestrator(config).extract_with_fallback(b"not a pdf at all")

    assert exc_info.value.file_size == len(b"not a pdf at all")


class TestMostlyHealthyDocument:
    """Five pages: four of healthy text and one empty page."""

    @pytest.fixture
    def document(self):
        return build_pdf([PARAGRAPH * 3] * 4 + [""])

    @pytest.mark.asyncio
    async def test_native_only(self, config, document):
        result = await build_orchestrator(config).extract_with_fallback(document)

        report = result.quality_report
        assert [m.quality_score >= 70 for m in report.page_metrics] == [True] * 4 + [False]
        assert report.problematic_pages == [5]
        assert report.extraction_method == ExtractionMethod.HYBRID
        assert result.needs_ocr is False
        assert result.ocr_status == OCRStatus.NOT_NEEDED
        assert result.page_texts[4] == ""

    @pytest.mark.asyncio
    async def test_vision_fills_the_empty_page(self, config, document):
        service = ScriptedVisionService()
        invoker = build_vision_invoker(config, service=service)

        result = await build_orchestrator(config).extract_with_fallback(
            document, VisionFallbackOptions(enabled=True, invoker=invoker)
        )

        assert service.requested == [5]
        assert result.vision_pages_used == [5]
        assert result.extraction_method == ExtractionMethod.HYBRID
        assert result.needs_ocr is False
        assert len(result.page_texts) == 5
        assert all(text.strip() for text in result.page_texts)


class TestMostlyGarbledDocument:
    """Ten pages: eight garbled beyond use and two of normal text."""

    @pytest.fixture
    def document(self):
        return build_pdf([PARAGRAPH * 3] + [GARBLED] * 8 + [PARAGRAPH * 3])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("vision_enabled", [False, True])
    async def test_flagged_for_ocr(self, config, document, vision_enabled):
        service = ScriptedVisionService()
        options = VisionFallbackOptions(
            enabled=vision_enabled,
            invoker=build_vision_invoker(config, service=service),
        )

        result = await build_orchestrator(config).extract_with_fallback(
            document, options
        )

        report = result.quality_report
        garbled_scores = [m.quality_score for m in report.page_metrics[1:9]]
        assert all(score < 31 for score in garbled_scores)
        assert all(text.strip() for text in result.page_texts)
        assert report.summary.failed_pages == 8
        assert result.extraction_method == ExtractionMethod.OCR
        assert result.needs_ocr is True
        assert result.ocr_status == OCRStatus.PENDING
        assert service.requested == []
        assert result.vision_pages_used == []
