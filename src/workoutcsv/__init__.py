"""
Workout CSV Analyzer - A Python library for workout-tracking CSV exports.

This package provides tools for:
- Detecting and parsing single-table and multi-section workout exports
- Normalizing both formats into one data model
- Computing personal records, exercise progress and workout consistency
"""

from .analyzer import (
    cardio_exercises,
    exercises_by_body_part,
    strength_exercises,
)
from .config import ParseConfig
from .export import from_dict, from_json, save_report, sets_frame, to_dict, to_json
from .models import NormalizedData
from .parser import (
    build_report,
    detect_format,
    get_exercise_progress,
    get_personal_records,
    get_summary,
    get_workout_consistency,
    parse,
    parse_file,
)
from .setlog import decode_set_log
from .tokenizer import split_line

__version__ = "0.1.0"
__author__ = "Workout CSV Analyzer Contributors"

__all__ = [
    "detect_format",
    "parse",
    "parse_file",
    "get_summary",
    "get_personal_records",
    "get_exercise_progress",
    "get_workout_consistency",
    "build_report",
    "exercises_by_body_part",
    "cardio_exercises",
    "strength_exercises",
    "decode_set_log",
    "split_line",
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    "sets_frame",
    "save_report",
    "ParseConfig",
    "NormalizedData",
]
