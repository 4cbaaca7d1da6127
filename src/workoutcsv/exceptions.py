"""
Custom exceptions for workoutcsv.

Parsing never raises on malformed content; these are reserved for conditions
outside the parser's control, such as an unreadable export file.
"""


class WorkoutCsvError(Exception):
    """Base exception for all workoutcsv errors."""


class ExportFileError(WorkoutCsvError):
    """Exception raised when an export file cannot supply text."""


class ExportFileNotFoundError(ExportFileError):
    """Exception raised when an export file cannot be found."""


class ExportFileDecodeError(ExportFileError):
    """Exception raised when an export file is not valid text in the given encoding."""


class UnsupportedFormatError(WorkoutCsvError):
    """Exception raised for a format tag outside the supported set."""


class ConfigurationError(WorkoutCsvError):
    """Exception raised for configuration errors."""


class ValidationError(WorkoutCsvError):
    """Exception raised for data validation errors."""
