"""Classification of raw export text into one of the supported formats."""

import logging

from workoutcsv.constants import (
    COMMENT_PREFIX,
    DEFAULT_PREVIEW_LINES,
    FORMAT_MULTI_SECTION,
    FORMAT_SINGLE_TABLE,
    SINGLE_TABLE_INDICATORS,
)

__all__ = ["detect_format", "has_section_markers"]

logger = logging.getLogger(__name__)


def has_section_markers(text: str, preview_lines: int = DEFAULT_PREVIEW_LINES) -> bool:
    """Return True if any of the leading lines starts with a section marker."""
    return any(
        line.lstrip().startswith(COMMENT_PREFIX) for line in text.splitlines()[:preview_lines]
    )


def detect_format(text: str, preview_lines: int = DEFAULT_PREVIEW_LINES) -> str:
    """Classify raw export content as single-table or multi-section.

    Only the first ``preview_lines`` logical lines are inspected. A literal,
    case-sensitive occurrence of any single-table column name (``Workout #``,
    ``Exercise Name``, ``Set Order``, ...) wins. Otherwise the content is
    multi-section, whether or not a ``###`` marker was seen, so unknown input
    falls back to the more tolerant parser.

    Args:
        text: Whole export file content.
        preview_lines: Number of leading lines to inspect.

    Returns:
        ``"single-table"`` or ``"multi-section"``.
    """
    lines = text.splitlines()[:preview_lines]
    if any(indicator in line for line in lines for indicator in SINGLE_TABLE_INDICATORS):
        logger.info("Detected %s format", FORMAT_SINGLE_TABLE)
        return FORMAT_SINGLE_TABLE

    if has_section_markers(text, preview_lines):
        logger.info("Detected %s format from section markers", FORMAT_MULTI_SECTION)
    else:
        logger.info("No format indicators found, defaulting to %s", FORMAT_MULTI_SECTION)
    return FORMAT_MULTI_SECTION
