"""Page quality analyzer for natively extracted text.

Scores one page from 0 (nothing usable) to 100 (clean text). Scoring starts
at 100 and subtracts a penalty for every heuristic that fires:
- Character count and line density
- Special character ratio (gibberish)
- Single-character words (truncated glyph runs)
- Average word length and paragraph structure
- Suspicious encoding patterns
- Unique word ratio
- Whitespace and camelCase artifacts

Pages scoring below the vision fallback threshold (61) are problematic.
"""

import re
from typing import List, Optional

from tieredpdf.models.config import QualityThresholds
from tieredpdf.models.quality import PageQualityMetrics

SPECIAL_CHAR_PATTERN = re.compile(r"[^a-zA-Z0-9\s.,!?:;\-()\[\]{}\"']")
SINGLE_LETTER_PATTERN = re.compile(r"^[a-zA-Z]$")
PARAGRAPH_BREAK_PATTERN = re.compile(r"\n\n+")

# Checked in order, only the first match is penalized
SUSPICIOUS_PATTERNS = [
    re.compile("\ufffd{2,}"),  # replacement characters
    re.compile(r"[^\x00-\x7F]{20,}"),  # long non-ASCII runs
    re.compile(r"(.)\1{10,}"),  # same character 11+ times
]

WHITESPACE_RUN_PATTERN = re.compile(r"\s{5,}")
CAMEL_CASE_PATTERN = re.compile(r"[a-z][A-Z]")


class PageQualityAnalyzer:
    """
    Scores the trustworthiness of one page of extracted text.

    Pure and side-effect free: malformed or empty text lowers the score,
    it never raises.
    """

    def __init__(self, thresholds: Optional[QualityThresholds] = None):
        self.thresholds = thresholds or QualityThresholds()

    def analyze(self, text: str, page_number: int) -> PageQualityMetrics:
        """
        Analyze a single page.

        Args:
            text: Extracted page text
            page_number: 1-indexed page number

        Returns:
            PageQualityMetrics with score, counts and detected issues
        """
        t = self.thresholds
        issues: List[str] = []
        score = 100

        char_count = len(text)
        words = text.split()
        word_count = len(words)
        lines = [line for line in text.split("\n") if line.strip()]
        line_count = len(lines)

        if char_count == 0:
            return PageQualityMetrics(
                page_number=page_number,
                quality_score=0,
                needs_vision_fallback=True,
                issues=["Empty page - no text extracted"],
            )

        if char_count < t.very_low_char_count:
            issues.append(f"Very low character count (< {t.very_low_char_count})")
            score -= t.very_low_char_penalty
        elif char_count < t.low_char_count:
            issues.append(f"Low character count (< {t.low_char_count})")
            score -= t.low_char_penalty

        avg_chars_per_line = char_count / line_count if line_count else 0.0
        if (
            avg_chars_per_line < t.min_avg_chars_per_line
            and line_count > t.min_lines_for_density
        ):
            issues.append("Very low text density per line")
            score -= t.line_density_penalty

        special_char_ratio = len(SPECIAL_CHAR_PATTERN.findall(text)) / char_count
        if special_char_ratio > t.high_special_char_ratio:
            issues.append(
                f"High special character ratio (> {t.high_special_char_ratio:.0%})"
                " - possible gibberish"
            )
            score -= t.high_special_char_penalty
        elif special_char_ratio > t.elevated_special_char_ratio:
            issues.append(
                f"Elevated special character ratio (> {t.elevated_special_char_ratio:.0%})"
            )
            score -= t.elevated_special_char_penalty

        single_char_words = [w for w in words if SINGLE_LETTER_PATTERN.match(w)]
        single_char_ratio = len(single_char_words) / word_count if word_count else 0.0
        if single_char_ratio > t.high_single_char_ratio:
            issues.append(
                f"Too many single-character words (> {t.high_single_char_ratio:.0%})"
                " - truncation detected"
            )
            score -= t.high_single_char_penalty
        elif single_char_ratio > t.elevated_single_char_ratio:
            issues.append(
                f"Many single-character words (> {t.elevated_single_char_ratio:.0%})"
            )
            score -= t.elevated_single_char_penalty

        # Includes whitespace, so this is chars per word rather than letters
        avg_word_length = char_count / word_count if word_count else 0.0
        if (
            avg_word_length < t.min_avg_word_length
            and word_count > t.min_words_for_word_length
        ):
            issues.append("Unusually short average word length")
            score -= t.word_length_penalty

        paragraph_breaks = len(PARAGRAPH_BREAK_PATTERN.findall(text))
        has_structure = (
            paragraph_breaks > 0 or line_count > t.max_lines_without_paragraphs
        )
        if not has_structure and char_count > t.min_chars_for_structure:
            issues.append("No paragraph structure detected in substantial text")
            score -= t.structure_penalty

        if any(pattern.search(text) for pattern in SUSPICIOUS_PATTERNS):
            issues.append("Suspicious character patterns detected")
            score -= t.suspicious_pattern_penalty

        if word_count > t.min_words_for_distribution:
            unique_ratio = len({w.lower() for w in words}) / word_count
            if unique_ratio > t.max_unique_word_ratio:
                issues.append("Unusually high unique word ratio - possible gibberish")
                score -= t.distribution_penalty
            elif unique_ratio < t.min_unique_word_ratio:
                issues.append("Unusually low unique word ratio - possible encoding issue")
                score -= t.distribution_penalty

        if len(WHITESPACE_RUN_PATTERN.findall(text)) > t.max_whitespace_runs:
            issues.append("Excessive whitespace detected")
            score -= t.artifact_penalty
        if len(CAMEL_CASE_PATTERN.findall(text)) > t.max_camel_case_anomalies:
            issues.append("Many camelCase anomalies")
            score -= t.artifact_penalty

        score = max(0, min(100, score))

        return PageQualityMetrics(
            page_number=page_number,
            char_count=char_count,
            word_count=word_count,
            line_count=line_count,
            special_char_ratio=round(special_char_ratio, 2),
            quality_score=score,
            needs_vision_fallback=score < t.vision_fallback_threshold,
            issues=issues,
        )


def analyze_page_quality(
    text: str,
    page_number: int,
    thresholds: Optional[QualityThresholds] = None,
) -> PageQualityMetrics:
    """Score one page with the default (or given) thresholds."""
    return PageQualityAnalyzer(thresholds).analyze(text, page_number)
