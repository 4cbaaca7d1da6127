"""
Normalized data model populated by both export parsers.

All entities are frozen dataclasses built fresh per parse. Derived values
(set volume, exercise totals, session efficiency, the date range) are
properties computed from the stored fields, never stored alongside them.
Raw column mappings (``fields``, ``settings``) are read-only views and are
left out of hashing.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from workoutcsv.constants import FORMAT_MULTI_SECTION, SECONDS_PER_DAY

__all__ = [
    "SetEntry",
    "Exercise",
    "ExerciseLog",
    "Routine",
    "WorkoutDay",
    "WorkoutSession",
    "Note",
    "DateRange",
    "NormalizedData",
]


class _ReadOnlyMappings:
    """Wraps mapping attributes in read-only copies once the instance is built."""

    _mapping_attrs: Tuple[str, ...] = ("fields",)

    def __post_init__(self):
        for name in self._mapping_attrs:
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))


@dataclass(frozen=True)
class SetEntry:
    """One performed set."""

    set_number: int
    weight: float
    reps: int
    distance: Optional[float] = None
    seconds: Optional[float] = None
    rpe: str = ""
    notes: str = ""

    @property
    def volume(self) -> float:
        """Training volume of the set (weight x reps)."""
        return self.weight * self.reps


def _sets_volume(sets: Tuple[SetEntry, ...]) -> float:
    return sum(s.volume for s in sets)


def _sets_max_weight(sets: Tuple[SetEntry, ...]) -> float:
    return max((s.weight for s in sets), default=0.0)


@dataclass(frozen=True)
class Exercise(_ReadOnlyMappings):
    """One exercise performed within a session or routine."""

    name: str
    sets: Tuple[SetEntry, ...] = ()
    body_part: Optional[str] = None
    target_reps: Optional[int] = None
    timestamp: Optional[datetime] = None
    workout_id: Any = None
    workout_name: Optional[str] = None
    fields: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @property
    def total_sets(self) -> int:
        return len(self.sets)

    @property
    def total_volume(self) -> float:
        return _sets_volume(self.sets)

    @property
    def max_weight(self) -> float:
        return _sets_max_weight(self.sets)


@dataclass(frozen=True)
class ExerciseLog(_ReadOnlyMappings):
    """Set-log entry found in a section the parser does not recognize."""

    name: Optional[str]
    sets: Tuple[SetEntry, ...] = ()
    fields: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @property
    def total_volume(self) -> float:
        return _sets_volume(self.sets)


@dataclass(frozen=True)
class Routine(_ReadOnlyMappings):
    """A named workout plan definition."""

    name: Optional[str]
    difficulty: Any = None
    focus: Any = None
    fields: Mapping[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class WorkoutDay(_ReadOnlyMappings):
    """A scheduled day within a routine."""

    name: Optional[str]
    day_index: Any = None
    rest_day: bool = False
    completed_at: Optional[int] = None
    fields: Mapping[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class WorkoutSession(_ReadOnlyMappings):
    """One completed workout occurrence. Durations are in seconds."""

    session_id: Any
    start_time: Optional[int]
    total_time: float = 0.0
    workout_time: float = 0.0
    rest_time: float = 0.0
    total_exercise: int = 0
    total_weight: float = 0.0
    name: Optional[str] = None
    fields: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @property
    def efficiency(self) -> Optional[float]:
        """Active time as a percentage of total time, or None without both inputs."""
        if not self.total_time or not self.workout_time:
            return None
        return round(self.workout_time / self.total_time * 100, 1)

    @property
    def avg_weight_per_exercise(self) -> Optional[float]:
        if not self.total_weight or not self.total_exercise:
            return None
        return round(self.total_weight / self.total_exercise, 1)


@dataclass(frozen=True)
class Note(_ReadOnlyMappings):
    """Free-text annotation, optionally tied to an exercise and a date."""

    text: str
    title: Optional[str] = None
    exercise_id: Any = None
    date: Any = None
    fields: Mapping[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class DateRange:
    """Earliest and latest session start (epoch seconds) and the span in whole days."""

    start: int
    end: int

    @property
    def span(self) -> int:
        return math.ceil((self.end - self.start) / SECONDS_PER_DAY)


@dataclass(frozen=True)
class NormalizedData(_ReadOnlyMappings):
    """Aggregate root holding everything one parse produced."""

    _mapping_attrs = ("settings",)

    format: str = FORMAT_MULTI_SECTION
    settings: Mapping[str, Any] = field(default_factory=dict, hash=False)
    routines: Tuple[Routine, ...] = ()
    workout_days: Tuple[WorkoutDay, ...] = ()
    exercises: Tuple[Exercise, ...] = ()
    workout_sessions: Tuple[WorkoutSession, ...] = ()
    exercise_logs: Tuple[ExerciseLog, ...] = ()
    notes: Tuple[Note, ...] = ()

    def session_start_times(self) -> Tuple[int, ...]:
        """Known session start times in ascending order."""
        return tuple(
            sorted(s.start_time for s in self.workout_sessions if s.start_time is not None)
        )

    @property
    def date_range(self) -> Optional[DateRange]:
        starts = self.session_start_times()
        if not starts:
            return None
        return DateRange(start=starts[0], end=starts[-1])
