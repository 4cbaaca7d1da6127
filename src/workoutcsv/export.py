"""
Serialization and tabular export of parsed workout data.

``to_dict``/``from_dict`` convert NormalizedData to and from a JSON-safe
plain structure (datetimes become ISO-8601 strings and come back as
datetimes). ``sets_frame``/``sessions_frame`` flatten the model into pandas
DataFrames for CSV reports.
"""

import json
from dataclasses import asdict, fields as dataclass_fields, is_dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import numpy as np
import pandas as pd

from workoutcsv.constants import FORMAT_MULTI_SECTION
from workoutcsv.exceptions import ValidationError
from workoutcsv.models import (
    Exercise,
    ExerciseLog,
    NormalizedData,
    Note,
    Routine,
    SetEntry,
    WorkoutDay,
    WorkoutSession,
)
from workoutcsv.records import DATE_SEPARATORS, parse_timestamp

__all__ = [
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    "sets_frame",
    "sessions_frame",
    "report_to_json",
    "save_report",
]

SUMMARY_FILE = "workout_summary.json"
SETS_FILE = "sets.csv"
SESSIONS_FILE = "sessions.csv"


def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _decode_value(header: str, value: Any) -> Any:
    # Only "time" columns can hold datetimes after coercion
    if (
        isinstance(value, str)
        and "time" in header.lower()
        and any(sep in value for sep in DATE_SEPARATORS)
    ):
        parsed = parse_timestamp(value)
        if parsed is not None:
            return parsed
    return value


def _encode_fields(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: _encode_value(value) for key, value in mapping.items()}


def _decode_fields(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: _decode_value(key, value) for key, value in mapping.items()}


def _encode_sets(sets) -> List[Dict[str, Any]]:
    return [asdict(entry) for entry in sets]


def _decode_sets(items) -> tuple:
    return tuple(SetEntry(**item) for item in items)


def to_dict(data: NormalizedData) -> Dict[str, Any]:
    """Convert parsed data to a JSON-safe plain structure.

    Derived values (volumes, totals, efficiency, date range) are not
    stored: they are recomputed from the restored model.
    """
    return {
        "format": data.format,
        "settings": _encode_fields(data.settings),
        "routines": [
            {
                "name": r.name,
                "difficulty": r.difficulty,
                "focus": r.focus,
                "fields": _encode_fields(r.fields),
            }
            for r in data.routines
        ],
        "workout_days": [
            {
                "name": d.name,
                "day_index": d.day_index,
                "rest_day": d.rest_day,
                "completed_at": d.completed_at,
                "fields": _encode_fields(d.fields),
            }
            for d in data.workout_days
        ],
        "exercises": [
            {
                "name": ex.name,
                "sets": _encode_sets(ex.sets),
                "body_part": ex.body_part,
                "target_reps": ex.target_reps,
                "timestamp": _encode_value(ex.timestamp),
                "workout_id": ex.workout_id,
                "workout_name": ex.workout_name,
                "fields": _encode_fields(ex.fields),
            }
            for ex in data.exercises
        ],
        "workout_sessions": [
            {
                "session_id": s.session_id,
                "start_time": s.start_time,
                "total_time": s.total_time,
                "workout_time": s.workout_time,
                "rest_time": s.rest_time,
                "total_exercise": s.total_exercise,
                "total_weight": s.total_weight,
                "name": s.name,
                "fields": _encode_fields(s.fields),
            }
            for s in data.workout_sessions
        ],
        "exercise_logs": [
            {"name": log.name, "sets": _encode_sets(log.sets), "fields": _encode_fields(log.fields)}
            for log in data.exercise_logs
        ],
        "notes": [
            {
                "text": n.text,
                "title": n.title,
                "exercise_id": n.exercise_id,
                "date": n.date,
                "fields": _encode_fields(n.fields),
            }
            for n in data.notes
        ],
    }


def from_dict(payload: Dict[str, Any]) -> NormalizedData:
    """Rebuild NormalizedData from the structure produced by ``to_dict``.

    Raises:
        ValidationError: If the payload does not have the expected shape.
    """
    try:
        return NormalizedData(
            format=payload.get("format", FORMAT_MULTI_SECTION),
            settings=_decode_fields(payload.get("settings", {})),
            routines=tuple(
                Routine(
                    name=item["name"],
                    difficulty=item.get("difficulty"),
                    focus=item.get("focus"),
                    fields=_decode_fields(item.get("fields", {})),
                )
                for item in payload.get("routines", [])
            ),
            workout_days=tuple(
                WorkoutDay(
                    name=item["name"],
                    day_index=item.get("day_index"),
                    rest_day=item.get("rest_day", False),
                    completed_at=item.get("completed_at"),
                    fields=_decode_fields(item.get("fields", {})),
                )
                for item in payload.get("workout_days", [])
            ),
            exercises=tuple(
                Exercise(
                    name=item["name"],
                    sets=_decode_sets(item.get("sets", [])),
                    body_part=item.get("body_part"),
                    target_reps=item.get("target_reps"),
                    timestamp=parse_timestamp(item.get("timestamp")),
                    workout_id=item.get("workout_id"),
                    workout_name=item.get("workout_name"),
                    fields=_decode_fields(item.get("fields", {})),
                )
                for item in payload.get("exercises", [])
            ),
            workout_sessions=tuple(
                WorkoutSession(
                    session_id=item.get("session_id"),
                    start_time=item.get("start_time"),
                    total_time=item.get("total_time", 0.0),
                    workout_time=item.get("workout_time", 0.0),
                    rest_time=item.get("rest_time", 0.0),
                    total_exercise=item.get("total_exercise", 0),
                    total_weight=item.get("total_weight", 0.0),
                    name=item.get("name"),
                    fields=_decode_fields(item.get("fields", {})),
                )
                for item in payload.get("workout_sessions", [])
            ),
            exercise_logs=tuple(
                ExerciseLog(
                    name=item.get("name"),
                    sets=_decode_sets(item.get("sets", [])),
                    fields=_decode_fields(item.get("fields", {})),
                )
                for item in payload.get("exercise_logs", [])
            ),
            notes=tuple(
                Note(
                    text=item["text"],
                    title=item.get("title"),
                    exercise_id=item.get("exercise_id"),
                    date=item.get("date"),
                    fields=_decode_fields(item.get("fields", {})),
                )
                for item in payload.get("notes", [])
            ),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise ValidationError(f"Malformed workout data payload: {e}") from e


def _json_default(obj: Any) -> Any:
    """Encode report values json does not handle natively."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, SetEntry):
        return {**asdict(obj), "volume": obj.volume}
    if is_dataclass(obj):
        return {f.name: getattr(obj, f.name) for f in dataclass_fields(obj)}
    if isinstance(obj, Mapping):
        return dict(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to_json(data: NormalizedData, indent: int = 2) -> str:
    """Serialize parsed data to a JSON string."""
    return json.dumps(to_dict(data), indent=indent)


def from_json(text: str) -> NormalizedData:
    """Rebuild parsed data from ``to_json`` output."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid workout data JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ValidationError("Workout data JSON must be an object")
    return from_dict(payload)


def sets_frame(data: NormalizedData) -> pd.DataFrame:
    """Flatten every set of every exercise into one row.

    Returns:
        DataFrame with columns: workout_id, workout_name, exercise, body_part,
        timestamp, set_number, weight, reps, volume, distance, seconds, rpe,
        notes, sorted by timestamp. Empty DataFrame if there are no sets.
    """
    rows = [
        {
            "workout_id": ex.workout_id,
            "workout_name": ex.workout_name,
            "exercise": ex.name,
            "body_part": ex.body_part,
            "timestamp": ex.timestamp,
            "set_number": entry.set_number,
            "weight": entry.weight,
            "reps": entry.reps,
            "volume": entry.volume,
            "distance": entry.distance,
            "seconds": entry.seconds,
            "rpe": entry.rpe,
            "notes": entry.notes,
        }
        for ex in data.exercises
        for entry in ex.sets
    ]
    if not rows:
        return pd.DataFrame()

    df = pd.DataFrame(rows)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    return df.sort_values(["timestamp", "exercise", "set_number"], na_position="last", kind="stable")


def sessions_frame(data: NormalizedData) -> pd.DataFrame:
    """One row per workout session, with derived efficiency columns."""
    rows = [
        {
            "session_id": s.session_id,
            "name": s.name,
            "start_time": s.start_time,
            "total_time": s.total_time,
            "workout_time": s.workout_time,
            "rest_time": s.rest_time,
            "total_exercise": s.total_exercise,
            "total_weight": s.total_weight,
            "efficiency": s.efficiency,
            "avg_weight_per_exercise": s.avg_weight_per_exercise,
        }
        for s in data.workout_sessions
    ]
    if not rows:
        return pd.DataFrame()

    df = pd.DataFrame(rows)
    df["start"] = pd.to_datetime(df["start_time"], unit="s", utc=True)
    return df.sort_values("start_time", na_position="last", kind="stable")


def report_to_json(report: Dict[str, Any], indent: int = 2) -> str:
    """Serialize an analysis report (summary, records, progress) to JSON."""
    return json.dumps(report, indent=indent, default=_json_default)


def save_report(
    data: NormalizedData, output_dir: str, report: Optional[Dict[str, Any]] = None
) -> List[str]:
    """Write the analysis report and set/session tables to ``output_dir``.

    Args:
        data: Parsed export snapshot.
        output_dir: Directory for the output files; created if missing.
        report: Analysis report to store as JSON. When omitted only the
                CSV tables are written.

    Returns:
        Paths of the files written.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    written = []

    if report is not None:
        summary_path = out / SUMMARY_FILE
        summary_path.write_text(report_to_json(report), encoding="utf-8")
        written.append(str(summary_path))

    for filename, frame in ((SETS_FILE, sets_frame(data)), (SESSIONS_FILE, sessions_frame(data))):
        if frame.empty:
            continue
        csv_path = out / filename
        frame.to_csv(csv_path, index=False)
        written.append(str(csv_path))

    return written
