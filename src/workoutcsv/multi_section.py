"""
Parser for the multi-section export format.

The file is a sequence of comma-separated sub-tables introduced by section
marker lines (``### ROUTINES ####``) and closed by runs of ``#``. Each
sub-table starts with its own header row. The routines section reuses one
marker for three sub-tables (routines, workout days and exercises), told
apart by which columns a row carries.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from workoutcsv.constants import (
    COL_BODY_PART,
    COL_DAY,
    COL_DAY_COMPLETED,
    COL_DAY_INDEX,
    COL_DIFFICULTY,
    COL_EXERCISE_NAME,
    COL_FOCUS,
    COL_ID,
    COL_LOGS,
    COL_NAME,
    COL_NOTE_DATE,
    COL_NOTE_EXERCISE_ID,
    COL_NOTE_TEXT,
    COL_NOTE_TITLE,
    COL_REST_DAY,
    COL_REST_TIME,
    COL_START_TIME,
    COL_TARGET_REPS,
    COL_TIMESTAMP,
    COL_TOTAL_EXERCISE,
    COL_TOTAL_TIME,
    COL_TOTAL_WEIGHT,
    COL_WORKOUT_TIME,
    COMMENT_PREFIX,
    DEFAULT_SEPARATOR,
    FORMAT_MULTI_SECTION,
    HEADER_INDICATORS,
    SECTION_KEYWORDS,
    SECTION_MARKER_PREFIX,
    SECTION_NOTES,
    SECTION_ROUTINES,
    SECTION_SETTINGS,
    SECTION_UNKNOWN,
    SECTION_WORKOUT_SESSIONS,
)
from workoutcsv.models import (
    Exercise,
    ExerciseLog,
    NormalizedData,
    Note,
    Routine,
    WorkoutDay,
    WorkoutSession,
)
from workoutcsv.records import (
    build_record,
    parse_timestamp,
    to_epoch_seconds,
    to_float,
    to_int,
)
from workoutcsv.setlog import decode_set_log
from workoutcsv.tokenizer import split_line

__all__ = [
    "RoutineRecordKind",
    "classify_routine_record",
    "section_kind",
    "is_header_line",
    "parse_multi_section",
]

logger = logging.getLogger(__name__)


class RoutineRecordKind(Enum):
    """Which sub-table of the routines section a record belongs to."""

    ROUTINE = "routine"
    WORKOUT_DAY = "workout_day"
    EXERCISE = "exercise"
    UNCLASSIFIED = "unclassified"


def classify_routine_record(record: Dict[str, Any]) -> RoutineRecordKind:
    """Decide what a record from the routines section describes.

    Checked in order: a difficulty or focus column means a routine
    definition, a day or day-index column means a workout day, an exercise
    name column means an exercise. Presence of the column is what counts,
    not its value.
    """
    if COL_DIFFICULTY in record or COL_FOCUS in record:
        return RoutineRecordKind.ROUTINE
    if COL_DAY in record or COL_DAY_INDEX in record:
        return RoutineRecordKind.WORKOUT_DAY
    if COL_EXERCISE_NAME in record:
        return RoutineRecordKind.EXERCISE
    return RoutineRecordKind.UNCLASSIFIED


def section_kind(marker_line: str) -> str:
    """Map a section marker line to its section kind (case-insensitive)."""
    title = marker_line.lower()
    for keyword, kind in SECTION_KEYWORDS:
        if keyword in title:
            return kind
    return SECTION_UNKNOWN


def is_header_line(fields: List[str]) -> bool:
    """Return True if any field is exactly one of the known header column names.

    Matching is exact, so a data value such as "Side Plank" never counts.
    """
    return any(name in HEADER_INDICATORS for name in fields)


def _text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _logs_to_sets(value: Any):
    # A numeric logs value ("0" coerced to 0) carries no set log
    if isinstance(value, str):
        return decode_set_log(value)
    return ()


@dataclass
class _SectionState:
    """Accumulator threaded through one parse; never shared between parses."""

    section: Optional[str] = None
    headers: List[str] = field(default_factory=list)
    awaiting_header: bool = False
    after_blank: bool = False
    settings: Dict[str, Any] = field(default_factory=dict)
    routines: List[Routine] = field(default_factory=list)
    workout_days: List[WorkoutDay] = field(default_factory=list)
    exercises: List[Exercise] = field(default_factory=list)
    workout_sessions: List[WorkoutSession] = field(default_factory=list)
    exercise_logs: List[ExerciseLog] = field(default_factory=list)
    notes: List[Note] = field(default_factory=list)

    def enter_section(self, kind: str) -> None:
        self.section = kind
        self.headers = []
        self.awaiting_header = True
        self.after_blank = False

    def to_data(self) -> NormalizedData:
        return NormalizedData(
            format=FORMAT_MULTI_SECTION,
            settings=dict(self.settings),
            routines=tuple(self.routines),
            workout_days=tuple(self.workout_days),
            exercises=tuple(self.exercises),
            workout_sessions=tuple(self.workout_sessions),
            exercise_logs=tuple(self.exercise_logs),
            notes=tuple(self.notes),
        )


def _build_routine(record: Dict[str, Any]) -> Routine:
    return Routine(
        name=_text(record.get(COL_NAME)),
        difficulty=record.get(COL_DIFFICULTY),
        focus=record.get(COL_FOCUS),
        fields=record,
    )


def _build_workout_day(record: Dict[str, Any]) -> WorkoutDay:
    return WorkoutDay(
        name=_text(record.get(COL_NAME)),
        day_index=record.get(COL_DAY_INDEX, record.get(COL_DAY)),
        rest_day=bool(to_int(record.get(COL_REST_DAY))),
        completed_at=to_epoch_seconds(record.get(COL_DAY_COMPLETED)),
        fields=record,
    )


def _build_exercise(record: Dict[str, Any]) -> Exercise:
    target = record.get(COL_TARGET_REPS)
    return Exercise(
        name=str(record.get(COL_EXERCISE_NAME, "")),
        sets=_logs_to_sets(record.get(COL_LOGS)),
        body_part=_text(record.get(COL_BODY_PART)),
        target_reps=to_int(target) if target not in (None, "") else None,
        timestamp=parse_timestamp(record.get(COL_TIMESTAMP)),
        fields=record,
    )


def _build_session(record: Dict[str, Any]) -> WorkoutSession:
    start = record.get(COL_START_TIME)
    if start in (None, ""):
        start = record.get(COL_TIMESTAMP)
    return WorkoutSession(
        session_id=record.get(COL_ID),
        start_time=to_epoch_seconds(start),
        total_time=to_float(record.get(COL_TOTAL_TIME)),
        workout_time=to_float(record.get(COL_WORKOUT_TIME)),
        rest_time=to_float(record.get(COL_REST_TIME)),
        total_exercise=to_int(record.get(COL_TOTAL_EXERCISE)),
        total_weight=to_float(record.get(COL_TOTAL_WEIGHT)),
        name=_text(record.get(COL_NAME)),
        fields=record,
    )


def _build_note(record: Dict[str, Any]) -> Note:
    text = record.get(COL_NOTE_TEXT)
    return Note(
        text="" if text is None else str(text),
        title=_text(record.get(COL_NOTE_TITLE)),
        exercise_id=record.get(COL_NOTE_EXERCISE_ID),
        date=record.get(COL_NOTE_DATE),
        fields=record,
    )


def _route_routine_record(state: _SectionState, record: Dict[str, Any]) -> None:
    kind = classify_routine_record(record)
    if kind is RoutineRecordKind.ROUTINE:
        state.routines.append(_build_routine(record))
    elif kind is RoutineRecordKind.WORKOUT_DAY:
        state.workout_days.append(_build_workout_day(record))
    elif kind is RoutineRecordKind.EXERCISE:
        state.exercises.append(_build_exercise(record))
    else:
        logger.debug("Dropping unclassified routines record with columns %s", list(record))


def _route_record(state: _SectionState, record: Dict[str, Any]) -> None:
    if state.section == SECTION_SETTINGS:
        state.settings.update(record)
    elif state.section == SECTION_ROUTINES:
        _route_routine_record(state, record)
    elif state.section == SECTION_WORKOUT_SESSIONS:
        state.workout_sessions.append(_build_session(record))
    elif state.section == SECTION_NOTES:
        state.notes.append(_build_note(record))
    elif record.get(COL_EXERCISE_NAME) or record.get(COL_LOGS):
        state.exercise_logs.append(
            ExerciseLog(
                name=_text(record.get(COL_EXERCISE_NAME)),
                sets=_logs_to_sets(record.get(COL_LOGS)),
                fields=record,
            )
        )


def _consume_line(state: _SectionState, line: str, line_number: int, separator: str) -> None:
    """Advance the section state machine by one stripped line."""
    if not line:
        if state.section is not None:
            state.after_blank = True
        return

    if line.startswith(SECTION_MARKER_PREFIX):
        state.enter_section(section_kind(line))
        logger.debug("Line %d: entering section %s", line_number, state.section)
        return

    if line.startswith(COMMENT_PREFIX):
        return

    if state.section is None:
        logger.debug("Line %d: data outside any section, skipped", line_number)
        return

    fields = split_line(line, separator)
    if not any(fields):
        logger.debug("Line %d: no usable fields, skipped", line_number)
        return

    # The first line of a section is its header; a blank line may introduce
    # another sub-table whose header must also look like one.
    if state.awaiting_header or (state.after_blank and is_header_line(fields)):
        state.headers = fields
        state.awaiting_header = False
        state.after_blank = False
        return

    state.after_blank = False
    record = build_record(state.headers, fields)
    if not record:
        logger.debug("Line %d: no header columns to map, skipped", line_number)
        return
    _route_record(state, record)


def parse_multi_section(text: str, separator: str = DEFAULT_SEPARATOR) -> NormalizedData:
    """Parse multi-section export content into the normalized model.

    Args:
        text: Whole export file content.
        separator: Field separator. Default is a comma.

    Returns:
        NormalizedData tagged ``"multi-section"``. Malformed or foreign
        lines are skipped, so a partially broken file yields partial
        collections rather than an error.
    """
    state = _SectionState()
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        _consume_line(state, raw_line.strip(), line_number, separator)

    logger.debug(
        "Parsed %d routines, %d exercises, %d sessions, %d notes",
        len(state.routines),
        len(state.exercises),
        len(state.workout_sessions),
        len(state.notes),
    )
    return state.to_data()
