"""
Constants shared by the workout CSV parsers and analyzer.

Column names, section keywords and detection indicator words for the two
supported export formats live here so that parsers never hardcode them.
"""

# Format tags
FORMAT_SINGLE_TABLE = "single-table"
FORMAT_MULTI_SECTION = "multi-section"
SUPPORTED_FORMATS = (FORMAT_SINGLE_TABLE, FORMAT_MULTI_SECTION)

# Parsing defaults
DEFAULT_SEPARATOR = ","
SINGLE_TABLE_SEPARATOR = ";"
DEFAULT_PREVIEW_LINES = 5
DEFAULT_ENCODING = "utf-8-sig"
BYTE_ORDER_MARK = "\ufeff"

SECONDS_PER_DAY = 86400

# Column names whose literal presence marks a single-table export
SINGLE_TABLE_INDICATORS = (
    "Workout #",
    "Exercise Name",
    "Set Order",
    "Weight (kg)",
    "Reps",
    "Duration (sec)",
)

# Multi-section markers
SECTION_MARKER_PREFIX = "### "
COMMENT_PREFIX = "#"

# Section kinds
SECTION_SETTINGS = "settings"
SECTION_ROUTINES = "routines"
SECTION_WORKOUT_SESSIONS = "workoutSessions"
SECTION_NOTES = "notes"
SECTION_UNKNOWN = "unknown"

# Keyword (lowercase) -> section kind, checked in order
SECTION_KEYWORDS = (
    ("setting", SECTION_SETTINGS),
    ("routine", SECTION_ROUTINES),
    ("workout session", SECTION_WORKOUT_SESSIONS),
    ("notes", SECTION_NOTES),
)

# Canonical column names that identify a multi-section header row
HEADER_INDICATORS = frozenset(
    {
        "row_id",
        "USERID",
        "TIMESTAMP",
        "_id",
        "name",
        "exercise_id",
        "exercisename",
        "setcount",
        "logs",
        "total_time",
        "workout_time",
        "mynote",
        "title",
    }
)

# Multi-section columns
COL_TIMESTAMP = "TIMESTAMP"
COL_ID = "_id"
COL_NAME = "name"
COL_DIFFICULTY = "difficulty"
COL_FOCUS = "focus"
COL_DAY = "day"
COL_DAY_INDEX = "dayIndex"
COL_REST_DAY = "rest_day"
COL_DAY_COMPLETED = "day_completed_timestamp"
COL_EXERCISE_ID = "exercise_id"
COL_EXERCISE_NAME = "exercisename"
COL_LOGS = "logs"
COL_BODY_PART = "bodypart"
COL_TARGET_REPS = "targetrep"
COL_START_TIME = "starttime"
COL_TOTAL_TIME = "total_time"
COL_WORKOUT_TIME = "workout_time"
COL_REST_TIME = "rest_time"
COL_TOTAL_EXERCISE = "total_exercise"
COL_TOTAL_WEIGHT = "total_weight"
COL_NOTE_TEXT = "mynote"
COL_NOTE_TITLE = "title"
COL_NOTE_EXERCISE_ID = "eid"
COL_NOTE_DATE = "mydate"

# Single-table columns
ST_WORKOUT_NUMBER = "Workout #"
ST_DATE = "Date"
ST_WORKOUT_NAME = "Workout Name"
ST_DURATION = "Duration (sec)"
ST_EXERCISE_NAME = "Exercise Name"
ST_SET_ORDER = "Set Order"
ST_WEIGHT = "Weight (kg)"
ST_REPS = "Reps"
ST_DISTANCE = "Distance (meters)"
ST_SECONDS = "Seconds"
ST_RPE = "RPE"
ST_NOTES = "Notes"

UNKNOWN_BODY_PART = "Unknown"
UNKNOWN_WORKOUT_NAME = "Unknown"

# Units for reported average workout time
DURATION_SECONDS = "s"
DURATION_MINUTES = "min"
