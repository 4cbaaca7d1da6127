"""
Parser for the single-table export format.

Every line after the header is one performed set. Rows are grouped by their
workout number, then by exercise name, and each group becomes one
WorkoutSession with its Exercises.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from workoutcsv.constants import (
    FORMAT_SINGLE_TABLE,
    SINGLE_TABLE_SEPARATOR,
    ST_DATE,
    ST_DISTANCE,
    ST_DURATION,
    ST_EXERCISE_NAME,
    ST_NOTES,
    ST_REPS,
    ST_RPE,
    ST_SECONDS,
    ST_SET_ORDER,
    ST_WEIGHT,
    ST_WORKOUT_NAME,
    ST_WORKOUT_NUMBER,
)
from workoutcsv.models import Exercise, NormalizedData, SetEntry, WorkoutSession
from workoutcsv.records import (
    build_record,
    parse_timestamp,
    to_epoch_seconds,
    to_float,
    to_int,
)
from workoutcsv.tokenizer import split_line

__all__ = ["parse_single_table"]

logger = logging.getLogger(__name__)


@dataclass
class _WorkoutGroup:
    """Rows sharing one workout number, in first-appearance order."""

    workout_id: Any
    date: Any
    name: Optional[str]
    duration: int
    exercises: Dict[str, List[Tuple[float, SetEntry]]] = field(default_factory=dict)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_float(record: Dict[str, Any], column: str) -> Optional[float]:
    value = record.get(column)
    if value is None or value == "":
        return None
    return to_float(value)


def _row_to_set(record: Dict[str, Any]) -> Tuple[float, SetEntry]:
    """Build one set from a row, keyed by its declared set order.

    Missing or non-numeric weight and reps become 0 and the row is kept,
    since cardio rows only carry distance or seconds.
    """
    declared_order = to_float(record.get(ST_SET_ORDER))
    entry = SetEntry(
        set_number=to_int(record.get(ST_SET_ORDER)),
        weight=to_float(record.get(ST_WEIGHT)),
        reps=to_int(record.get(ST_REPS)),
        distance=_optional_float(record, ST_DISTANCE),
        seconds=_optional_float(record, ST_SECONDS),
        rpe=_as_text(record.get(ST_RPE)),
        notes=_as_text(record.get(ST_NOTES)),
    )
    return declared_order, entry


def _add_row(groups: Dict[Any, _WorkoutGroup], record: Dict[str, Any]) -> None:
    workout_id = record.get(ST_WORKOUT_NUMBER)
    group = groups.get(workout_id)
    if group is None:
        name = record.get(ST_WORKOUT_NAME)
        group = _WorkoutGroup(
            workout_id=workout_id,
            date=record.get(ST_DATE),
            name=None if name in (None, "") else str(name),
            duration=to_int(record.get(ST_DURATION)),
        )
        groups[workout_id] = group

    exercise_name = _as_text(record.get(ST_EXERCISE_NAME))
    group.exercises.setdefault(exercise_name, []).append(_row_to_set(record))


def _ordered_sets(rows: List[Tuple[float, SetEntry]]) -> Tuple[SetEntry, ...]:
    """Sort sets by declared order (stable) and number them 1..N."""
    ordered = sorted(rows, key=lambda row: row[0])
    return tuple(
        replace(entry, set_number=number) for number, (_, entry) in enumerate(ordered, start=1)
    )


def _materialize(
    groups: Dict[Any, _WorkoutGroup],
) -> Tuple[List[WorkoutSession], List[Exercise]]:
    sessions = []
    exercises = []

    for group in groups.values():
        timestamp = parse_timestamp(group.date)
        workout_exercises = [
            Exercise(
                name=name,
                sets=_ordered_sets(rows),
                timestamp=timestamp,
                workout_id=group.workout_id,
                workout_name=group.name,
            )
            for name, rows in group.exercises.items()
        ]
        exercises.extend(workout_exercises)
        sessions.append(
            WorkoutSession(
                session_id=group.workout_id,
                start_time=to_epoch_seconds(group.date),
                total_time=group.duration,
                workout_time=group.duration,
                total_exercise=len(workout_exercises),
                total_weight=sum(ex.total_volume for ex in workout_exercises),
                name=group.name,
            )
        )

    # Sessions without a parseable date sort last
    sessions.sort(key=lambda s: (s.start_time is None, s.start_time or 0))
    return sessions, exercises


def parse_single_table(text: str, separator: str = SINGLE_TABLE_SEPARATOR) -> NormalizedData:
    """Parse single-table export content into the normalized model.

    The first non-blank line is the header. Rows with fewer fields than the
    header are skipped.

    Args:
        text: Whole export file content.
        separator: Field separator. Default is a semicolon.

    Returns:
        NormalizedData tagged ``"single-table"`` with one WorkoutSession per
        workout number and one Exercise per (workout, exercise name) pair.
    """
    headers: Optional[List[str]] = None
    groups: Dict[Any, _WorkoutGroup] = {}
    skipped = 0

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        fields = split_line(line, separator)
        if headers is None:
            headers = fields
            continue

        if len(fields) < len(headers):
            logger.debug(
                "Line %d: %d fields for %d columns, skipped", line_number, len(fields), len(headers)
            )
            skipped += 1
            continue

        _add_row(groups, build_record(headers, fields))

    sessions, exercises = _materialize(groups)
    logger.debug(
        "Parsed %d workouts, %d exercises (%d rows skipped)", len(sessions), len(exercises), skipped
    )
    return NormalizedData(
        format=FORMAT_SINGLE_TABLE,
        exercises=tuple(exercises),
        workout_sessions=tuple(sessions),
    )
