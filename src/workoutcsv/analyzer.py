"""
Training analytics over a parsed workout export.

This module provides pure functions that derive personal records, exercise
progress, workout consistency and summary statistics from a NormalizedData
snapshot. None of them modify their input, and empty collections produce
empty or None results rather than errors.
"""

import math
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import numpy as np

from workoutcsv.constants import (
    DURATION_MINUTES,
    SECONDS_PER_DAY,
    UNKNOWN_BODY_PART,
    UNKNOWN_WORKOUT_NAME,
)
from workoutcsv.exceptions import ValidationError
from workoutcsv.models import Exercise, NormalizedData

__all__ = [
    "personal_records",
    "exercise_progress",
    "workout_consistency",
    "summarize",
    "date_range",
    "workout_frequency",
    "exercises_by_body_part",
    "cardio_exercises",
    "strength_exercises",
]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _to_datetime(epoch_seconds: int) -> datetime:
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)


def personal_records(data: NormalizedData) -> Dict[str, Dict[str, Any]]:
    """Find the heaviest set ever logged for each exercise.

    Every set of every Exercise occurrence is considered in parse order.
    A set replaces the current record only when it is strictly heavier, so
    ties keep the first one found. Sets with weight <= 0 are never records:
    a bodyweight rep count is not a weight record.

    Args:
        data: Parsed export snapshot.

    Returns:
        Mapping of exercise name to a dict with keys:
        - weight: heaviest weight lifted
        - reps: reps performed in that set
        - date: timestamp of the owning Exercise (datetime or None)
        - volume: weight x reps of that set
        - workout_name: owning workout name, "Unknown" when the format has none
        Exercises with no weighted set are absent.

    Example:
        >>> records = personal_records(data)
        >>> records["Barbell Deadlift"]["weight"]
        100.0
    """
    records: Dict[str, Dict[str, Any]] = {}

    for exercise in data.exercises:
        if not exercise.name:
            continue
        for entry in exercise.sets:
            if entry.weight <= 0:
                continue
            current = records.get(exercise.name)
            if current is None or entry.weight > current["weight"]:
                records[exercise.name] = {
                    "weight": entry.weight,
                    "reps": entry.reps,
                    "date": exercise.timestamp,
                    "volume": entry.volume,
                    "workout_name": exercise.workout_name or UNKNOWN_WORKOUT_NAME,
                }

    return records


def _timestamp_key(exercise: Exercise):
    # Occurrences without a timestamp keep their order after dated ones
    if exercise.timestamp is None:
        return (1, 0.0)
    return (0, exercise.timestamp.timestamp())


def exercise_progress(
    data: NormalizedData, exercise_name: str, include_workout: bool = False
) -> List[Dict[str, Any]]:
    """Trace one exercise over time.

    Args:
        data: Parsed export snapshot.
        exercise_name: Exact exercise name to follow.
        include_workout: Also report the owning workout id and name for
                         each occurrence.

    Returns:
        One dict per occurrence, ascending by timestamp, with keys
        date, sets, max_weight, total_volume and total_sets (plus
        workout_id and workout_name when requested). Empty when the exercise
        never occurs.

    Raises:
        ValidationError: If exercise_name is not a non-empty string.
    """
    if not isinstance(exercise_name, str) or not exercise_name:
        raise ValidationError("exercise_name must be a non-empty string")

    occurrences = sorted(
        (ex for ex in data.exercises if ex.name == exercise_name), key=_timestamp_key
    )

    progress = []
    for exercise in occurrences:
        entry = {
            "date": exercise.timestamp,
            "sets": list(exercise.sets),
            "max_weight": exercise.max_weight,
            "total_volume": exercise.total_volume,
            "total_sets": exercise.total_sets,
        }
        if include_workout:
            entry["workout_id"] = exercise.workout_id
            entry["workout_name"] = exercise.workout_name
        progress.append(entry)
    return progress


def workout_consistency(data: NormalizedData) -> Optional[Dict[str, int]]:
    """Measure how regularly workouts happen.

    Session start times are sorted and the gap between each consecutive pair
    is rounded up to whole days.

    Returns:
        Dict with average_gap (rounded half up), min_gap, max_gap and
        total_gaps, or None when fewer than 2 sessions have a start time.
    """
    starts = np.asarray(data.session_start_times(), dtype=np.int64)
    if starts.size < 2:
        return None

    gaps = np.ceil(np.diff(starts) / SECONDS_PER_DAY).astype(int)
    return {
        "average_gap": _round_half_up(float(gaps.mean())),
        "min_gap": int(gaps.min()),
        "max_gap": int(gaps.max()),
        "total_gaps": int(gaps.size),
    }


def date_range(data: NormalizedData) -> Optional[Dict[str, Any]]:
    """Earliest and latest session start as UTC datetimes, plus the span in days."""
    span = data.date_range
    if span is None:
        return None
    return {
        "start": _to_datetime(span.start),
        "end": _to_datetime(span.end),
        "span": span.span,
    }


def workout_frequency(data: NormalizedData) -> Optional[Dict[str, Any]]:
    """Workouts per week over the covered date range.

    Returns None when there is no date range or it spans zero days.
    """
    span = data.date_range
    if span is None or span.span == 0:
        return None
    total = len(data.workout_sessions)
    return {
        "total_days": span.span,
        "workouts_per_week": round(total / span.span * 7, 1),
        "total_workouts": total,
    }


def summarize(data: NormalizedData, duration_unit: str = DURATION_MINUTES) -> Dict[str, Any]:
    """Compute headline statistics for a parsed export.

    avg_workout_time is the mean of positive session total times, rounded
    half up to whole ``duration_unit`` ("min" or "s"). The unit is reported
    as avg_workout_time_unit.
    """
    durations = [s.total_time for s in data.workout_sessions if s.total_time > 0]
    avg_time = 0
    if durations:
        mean = sum(durations) / len(durations)
        if duration_unit == DURATION_MINUTES:
            mean /= 60
        avg_time = _round_half_up(mean)

    return {
        "total_workouts": len(data.workout_sessions),
        "total_exercises": len(data.exercises),
        "total_sets": sum(ex.total_sets for ex in data.exercises),
        "total_volume": sum(ex.total_volume for ex in data.exercises),
        "avg_workout_time": avg_time,
        "avg_workout_time_unit": duration_unit,
        "exercise_types": sorted({ex.name for ex in data.exercises if ex.name}),
        "date_range": date_range(data),
        "workout_frequency": workout_frequency(data),
        "format": data.format,
    }


def exercises_by_body_part(data: NormalizedData) -> Dict[str, List[Exercise]]:
    """Group exercises by body part, using "Unknown" when none is recorded."""
    groups: Dict[str, List[Exercise]] = defaultdict(list)
    for exercise in data.exercises:
        groups[exercise.body_part or UNKNOWN_BODY_PART].append(exercise)
    return dict(groups)


def _is_cardio(exercise: Exercise) -> bool:
    return any(
        (s.distance or 0) > 0 or ((s.seconds or 0) > 0 and s.weight == 0) for s in exercise.sets
    )


def cardio_exercises(data: NormalizedData) -> List[Dict[str, Any]]:
    """Summarize distance or time based exercises.

    An exercise counts as cardio when any set covers a distance, or has a
    duration at zero weight.
    """
    return [
        {
            "name": exercise.name,
            "sessions": exercise.total_sets,
            "total_distance": sum(s.distance or 0 for s in exercise.sets),
            "total_time": sum(s.seconds or 0 for s in exercise.sets),
            "last_performed": exercise.timestamp,
        }
        for exercise in data.exercises
        if _is_cardio(exercise)
    ]


def strength_exercises(data: NormalizedData) -> List[Exercise]:
    """Exercises with at least one weighted set."""
    return [ex for ex in data.exercises if any(s.weight > 0 for s in ex.sets)]
