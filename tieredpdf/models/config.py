"""Configuration models for the tiered extraction pipeline.

This module defines the validated configuration tree loaded by
ConfigManager:
- Page quality scoring thresholds and penalties
- OCR detection heuristics
- Retry, circuit breaker and batch settings for vision calls
- Vision provider and logging settings

The quality numbers are tuned, observed behavior. Change them only together
with the tests that pin them.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tieredpdf.models.resilience import BatchConfig, CircuitBreakerConfig, RetryConfig


class QualityThresholds(BaseModel):
    """Thresholds and penalties used to score a page of extracted text."""

    # Score bands
    vision_fallback_threshold: int = Field(
        default=61, ge=0, le=100, description="Pages scoring below need vision"
    )
    failed_page_threshold: int = Field(
        default=31, ge=0, le=100, description="Pages scoring below count as failed"
    )
    hybrid_overall_threshold: int = Field(
        default=70, ge=0, le=100, description="Overall score below suggests hybrid"
    )
    ocr_failed_ratio: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Failed page share that forces OCR"
    )

    # Character count
    very_low_char_count: int = 50
    very_low_char_penalty: int = 40
    low_char_count: int = 100
    low_char_penalty: int = 25

    # Line density
    min_avg_chars_per_line: float = 10.0
    min_lines_for_density: int = 3
    line_density_penalty: int = 20

    # Special characters
    high_special_char_ratio: float = 0.3
    high_special_char_penalty: int = 30
    elevated_special_char_ratio: float = 0.2
    elevated_special_char_penalty: int = 15

    # Single-character words
    high_single_char_ratio: float = 0.3
    high_single_char_penalty: int = 25
    elevated_single_char_ratio: float = 0.15
    elevated_single_char_penalty: int = 10

    # Word length
    min_avg_word_length: float = 3.0
    min_words_for_word_length: int = 10
    word_length_penalty: int = 15

    # Paragraph structure
    max_lines_without_paragraphs: int = 5
    min_chars_for_structure: int = 200
    structure_penalty: int = 10

    # Encoding / suspicious patterns
    suspicious_pattern_penalty: int = 20

    # Word distribution
    max_unique_word_ratio: float = 0.95
    min_unique_word_ratio: float = 0.2
    min_words_for_distribution: int = 20
    distribution_penalty: int = 15

    # Artifacts
    max_whitespace_runs: int = 5
    max_camel_case_anomalies: int = 10
    artifact_penalty: int = 5

    @field_validator("failed_page_threshold")
    @classmethod
    def validate_failed_threshold(cls, v: int, info) -> int:
        """Failed band must sit below the vision fallback band"""
        vision = info.data.get("vision_fallback_threshold", 61)
        if v > vision:
            raise ValueError(
                f"failed_page_threshold ({v}) cannot exceed "
                f"vision_fallback_threshold ({vision})"
            )
        return v


class OCRDetectionSettings(BaseModel):
    """Heuristics deciding whether a document should be flagged for OCR."""

    min_total_chars: int = Field(
        default=100, ge=0, description="Documents with fewer chars need OCR"
    )
    chars_per_page_budget: float = Field(
        default=500.0, gt=0.0, description="Expected chars per page of real text"
    )
    min_text_density: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Density (avg chars / budget) below which OCR is flagged",
    )


class VisionSettings(BaseModel):
    """Vision (tier 2) provider configuration

    Security Note:
    - API keys must be loaded from environment variables
    """

    enabled: bool = Field(default=False, description="Enable vision fallback")
    provider: Literal["gemini"] = "gemini"
    api_key: Optional[str] = Field(
        default=None, description="API key (from environment variable)"
    )
    model: str = Field(default="gemini-2.5-flash", description="Vision model")
    temperature: float = Field(default=0.1, ge=0.0, le=1.0)
    max_image_width: int = Field(
        default=1024, ge=256, le=4096, description="Rendered page width in px"
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        """Treat unsubstituted placeholders as a missing key"""
        if v is None:
            return None
        v = v.strip()
        if not v or v.startswith("${") or v in ["YOUR_API_KEY", "PLACEHOLDER", "None"]:
            return None
        return v


class LoggingSettings(BaseModel):
    """Structured logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True


class ExtractionConfig(BaseModel):
    """Root configuration for the extraction pipeline."""

    native_backend: Literal["pymupdf", "pdfplumber"] = "pymupdf"
    quality: QualityThresholds = Field(default_factory=QualityThresholds)
    ocr: OCRDetectionSettings = Field(default_factory=OCRDetectionSettings)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    circuit_breaker: CircuitBreakerConfig = Field(default_factory=CircuitBreakerConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    vision: VisionSettings = Field(default_factory=VisionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "native_backend": "pymupdf",
                "vision": {"enabled": True, "api_key": "${GEMINI_API_KEY}"},
                "retry": {"max_attempts": 3, "timeout_seconds": 30.0},
                "circuit_breaker": {"failure_threshold": 5, "cooldown_seconds": 60},
            }
        }
    )
