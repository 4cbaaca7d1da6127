"""Parse configuration."""

from dataclasses import dataclass
from typing import Optional

from workoutcsv.constants import (
    DEFAULT_ENCODING,
    DEFAULT_PREVIEW_LINES,
    DEFAULT_SEPARATOR,
    SINGLE_TABLE_SEPARATOR,
    SUPPORTED_FORMATS,
)
from workoutcsv.exceptions import ConfigurationError, UnsupportedFormatError

__all__ = ["ParseConfig"]


@dataclass(frozen=True)
class ParseConfig:
    """Configuration for reading and parsing a workout export.

    Attributes:
        preview_lines: Leading lines inspected by format detection.
        encoding: Text encoding used when reading export files.
        multi_section_separator: Field separator of the multi-section format.
        single_table_separator: Field separator of the single-table format.
        format_override: Skip detection and use this format tag.
    """

    preview_lines: int = DEFAULT_PREVIEW_LINES
    encoding: str = DEFAULT_ENCODING
    multi_section_separator: str = DEFAULT_SEPARATOR
    single_table_separator: str = SINGLE_TABLE_SEPARATOR
    format_override: Optional[str] = None

    def __post_init__(self):
        if self.preview_lines < 1:
            raise ConfigurationError("preview_lines must be at least 1")
        for separator in (self.multi_section_separator, self.single_table_separator):
            if len(separator) != 1 or separator == '"':
                raise ConfigurationError(f"Invalid field separator: {separator!r}")
        if self.format_override is not None and self.format_override not in SUPPORTED_FORMATS:
            raise UnsupportedFormatError(f"Unsupported format: {self.format_override}")
