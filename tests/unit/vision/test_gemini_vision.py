"""Unit tests for the Gemini vision service."""

import threading
from unittest.mock import AsyncMock, Mock, patch

import pytest

from tieredpdf.services.vision.gemini_vision import (
    VISION_PROMPT,
    GeminiVisionService,
    estimate_vision_cost,
)
from tieredpdf.utils.exceptions import (
    RateLimitError,
    RetryableError,
    VisionNotConfiguredError,
    VisionServiceError,
)


@pytest.fixture
def mock_client():
    client = Mock()
    client.aio.models.generate_content = AsyncMock(
        return_value=Mock(text="  Extracted page text \n", usage_metadata=None)
    )
    return client


@pytest.fixture
def service(mock_client):
    svc = GeminiVisionService(api_key="test-key", client=mock_client)
    svc.render_pages = Mock(side_effect=lambda data, pages: {p: b"png" for p in pages})
    return svc


class TestConfiguration:
    """Tests for configuration checks."""

    def test_unconfigured_without_api_key(self):
        svc = GeminiVisionService(api_key=None)

        assert svc.is_configured() is False
        assert svc.name == "gemini"
        assert svc.model == "gemini-2.5-flash"

    @pytest.mark.asyncio
    async def test_unconfigured_raises(self):
        svc = GeminiVisionService(api_key=None)

        with pytest.raises(VisionNotConfiguredError):
            await svc.extract_pages(b"%PDF", [1])

    def test_client_built_from_api_key(self):
        with patch("google.genai.Client") as client_cls:
            svc = GeminiVisionService(api_key="abc")

        client_cls.assert_called_once_with(api_key="abc")
        assert svc.is_configured() is True


class TestExtractPages:
    """Tests for extract_pages."""

    @pytest.mark.asyncio
    async def test_returns_stripped_text_per_page(self, service, mock_client):
        texts = await service.extract_pages(b"%PDF", [2, 5])

        assert texts == {2: "Extracted page text", 5: "Extracted page text"}
        assert mock_client.aio.models.generate_content.await_count == 2

        kwargs = mock_client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"][0] == VISION_PROMPT
        assert kwargs["config"].temperature == 0.1

    @pytest.mark.asyncio
    async def test_rendering_runs_off_the_event_loop(self, service):
        render_threads = []

        def render(data, pages):
            render_threads.append(threading.get_ident())
            return {p: b"png" for p in pages}

        service.render_pages = Mock(side_effect=render)

        await service.extract_pages(b"%PDF", [1])

        service.render_pages.assert_called_once_with(b"%PDF", [1])
        assert render_threads and render_threads[0] != threading.get_ident()

    @pytest.mark.asyncio
    async def test_empty_response_text(self, service, mock_client):
        mock_client.aio.models.generate_content.return_value = Mock(
            text=None, usage_metadata=None
        )

        assert await service.extract_pages(b"%PDF", [1]) == {1: ""}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "message,expected",
        [
            ("429 RESOURCE_EXHAUSTED: quota exceeded", RateLimitError),
            ("503 Service Unavailable", RetryableError),
            ("Connection reset by peer", RetryableError),
            ("400 INVALID_ARGUMENT: bad image", VisionServiceError),
        ],
    )
    async def test_error_classification(self, service, mock_client, message, expected):
        mock_client.aio.models.generate_content.side_effect = Exception(message)

        with pytest.raises(expected) as exc_info:
            await service.extract_pages(b"%PDF", [1])

        if expected is RetryableError:
            assert not isinstance(exc_info.value, RateLimitError)

    def test_prompt_asks_for_column_separator(self):
        assert 'separated by "---"' in VISION_PROMPT
        assert VISION_PROMPT.startswith("Extract all text from this PDF page image.")


class TestRenderPages:
    """Tests for page rendering with PyMuPDF."""

    def test_renders_png(self):
        import fitz

        doc = fitz.open()
        page = doc.new_page()
        page.insert_text((72, 72), "Hello vision")
        data = doc.tobytes()
        doc.close()

        svc = GeminiVisionService(api_key=None, max_image_width=512)
        images = svc.render_pages(data, [1])

        assert list(images) == [1]
        assert images[1].startswith(b"\x89PNG")

    def test_invalid_document(self):
        svc = GeminiVisionService(api_key=None)

        with pytest.raises(VisionServiceError):
            svc.render_pages(b"not a pdf", [1])


def test_estimate_vision_cost():
    assert estimate_vision_cost(100) == pytest.approx(0.075)
    assert estimate_vision_cost(0) == 0
