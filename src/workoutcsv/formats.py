"""
Format strategies.

Each supported export format is one WorkoutFormat implementation offering
the same capabilities (parse, summarize, progress, records, consistency).
The detector picks the strategy once; callers never branch on the format
tag themselves.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from workoutcsv import analyzer
from workoutcsv.config import ParseConfig
from workoutcsv.constants import (
    DURATION_MINUTES,
    DURATION_SECONDS,
    FORMAT_MULTI_SECTION,
    FORMAT_SINGLE_TABLE,
)
from workoutcsv.exceptions import UnsupportedFormatError
from workoutcsv.models import NormalizedData
from workoutcsv.multi_section import parse_multi_section
from workoutcsv.single_table import parse_single_table

__all__ = [
    "WorkoutFormat",
    "MultiSectionFormat",
    "SingleTableFormat",
    "get_format",
]


class WorkoutFormat(ABC):
    """Parsing and analysis capabilities of one export format."""

    tag: str = ""
    duration_unit: str = DURATION_MINUTES

    @abstractmethod
    def parse(self, text: str, config: ParseConfig) -> NormalizedData:
        """Parse raw export text into the normalized model."""
        ...

    def summarize(self, data: NormalizedData) -> Dict[str, Any]:
        return analyzer.summarize(data, self.duration_unit)

    def progress(self, data: NormalizedData, exercise_name: str) -> List[Dict[str, Any]]:
        return analyzer.exercise_progress(data, exercise_name)

    def records(self, data: NormalizedData) -> Dict[str, Dict[str, Any]]:
        return analyzer.personal_records(data)

    def consistency(self, data: NormalizedData) -> Optional[Dict[str, int]]:
        return analyzer.workout_consistency(data)


class MultiSectionFormat(WorkoutFormat):
    """Comma-separated export made of ``###`` delimited sections."""

    tag = FORMAT_MULTI_SECTION
    # avg_workout_time in seconds
    duration_unit = DURATION_SECONDS

    def parse(self, text: str, config: ParseConfig) -> NormalizedData:
        return parse_multi_section(text, separator=config.multi_section_separator)

    def summarize(self, data: NormalizedData) -> Dict[str, Any]:
        summary = super().summarize(data)
        summary["total_notes"] = len(data.notes)
        summary["total_routines"] = len(data.routines)
        return summary


class SingleTableFormat(WorkoutFormat):
    """Semicolon-separated export with one row per performed set."""

    tag = FORMAT_SINGLE_TABLE

    def parse(self, text: str, config: ParseConfig) -> NormalizedData:
        return parse_single_table(text, separator=config.single_table_separator)

    def summarize(self, data: NormalizedData) -> Dict[str, Any]:
        summary = super().summarize(data)
        summary["total_distance"] = sum(
            s.distance or 0 for ex in data.exercises for s in ex.sets
        )
        return summary

    def progress(self, data: NormalizedData, exercise_name: str) -> List[Dict[str, Any]]:
        return analyzer.exercise_progress(data, exercise_name, include_workout=True)


_FORMATS = {
    FORMAT_MULTI_SECTION: MultiSectionFormat(),
    FORMAT_SINGLE_TABLE: SingleTableFormat(),
}


def get_format(tag: str) -> WorkoutFormat:
    """Return the strategy for a format tag.

    Raises:
        UnsupportedFormatError: If the tag is not a supported format.
    """
    try:
        return _FORMATS[tag]
    except KeyError as e:
        raise UnsupportedFormatError(f"Unsupported format: {tag}") from e
