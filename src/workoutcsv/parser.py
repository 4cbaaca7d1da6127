"""
Workout export parser entry points and command-line interface.

This module ties format detection, the format strategies and the analyzer
together: ``parse`` turns raw export text into NormalizedData, and the
``get_*`` functions compute reports from it. ``main`` runs the
``workoutcsv-analyze`` command.
"""

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from workoutcsv.config import ParseConfig
from workoutcsv.constants import BYTE_ORDER_MARK, SUPPORTED_FORMATS
from workoutcsv.detection import detect_format
from workoutcsv.exceptions import (
    ExportFileDecodeError,
    ExportFileError,
    ExportFileNotFoundError,
)
from workoutcsv.export import save_report
from workoutcsv.formats import get_format
from workoutcsv.models import NormalizedData

__all__ = [
    "detect_format",
    "parse",
    "parse_file",
    "read_export",
    "get_summary",
    "get_personal_records",
    "get_exercise_progress",
    "get_workout_consistency",
    "build_report",
    "parse_arguments",
    "main",
]

logger = logging.getLogger(__name__)


def _resolve_config(config: Optional[ParseConfig], **kwargs) -> ParseConfig:
    if config is None:
        return ParseConfig(**kwargs)
    # Keyword overrides win over the given config
    return replace(config, **kwargs) if kwargs else config


def parse(text: str, config: Optional[ParseConfig] = None, **kwargs) -> NormalizedData:
    """Parse workout export text of either supported format.

    The format is detected from the leading lines unless
    ``config.format_override`` names one. Malformed content never raises;
    it yields partially filled collections.

    Args:
        text: Whole export file content.
        config: ParseConfig object. Keyword arguments build one when omitted
                or override its fields when given,
                e.g. ``parse(text, format_override="single-table")``.

    Returns:
        A fresh NormalizedData for this call.
    """
    config = _resolve_config(config, **kwargs)
    text = text.lstrip(BYTE_ORDER_MARK)
    tag = config.format_override or detect_format(text, config.preview_lines)
    return get_format(tag).parse(text, config)


def read_export(path: str, encoding: str) -> str:
    """Read a whole export file as text.

    Raises:
        ExportFileNotFoundError: If the file does not exist.
        ExportFileDecodeError: If the file is not text in ``encoding``.
        ExportFileError: If the file cannot be read for another reason.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ExportFileNotFoundError(f"Export file not found: {path}")
    try:
        return file_path.read_text(encoding=encoding)
    except UnicodeDecodeError as e:
        raise ExportFileDecodeError(f"Cannot decode {path} as {encoding}: {e}") from e
    except OSError as e:
        raise ExportFileError(f"Cannot read {path}: {e}") from e


def parse_file(path: str, config: Optional[ParseConfig] = None, **kwargs) -> NormalizedData:
    """Read an export file and parse it. See ``parse`` and ``read_export``."""
    config = _resolve_config(config, **kwargs)
    text = read_export(path, config.encoding)
    logger.debug("Read %d characters from %s", len(text), path)
    return parse(text, config)


def get_summary(data: NormalizedData) -> Dict[str, Any]:
    """Headline statistics (workouts, exercises, sets, volume, dates, frequency)."""
    return get_format(data.format).summarize(data)


def get_personal_records(data: NormalizedData) -> Dict[str, Dict[str, Any]]:
    """Heaviest weighted set per exercise name."""
    return get_format(data.format).records(data)


def get_exercise_progress(data: NormalizedData, exercise_name: str) -> List[Dict[str, Any]]:
    """Occurrences of one exercise in time order."""
    return get_format(data.format).progress(data, exercise_name)


def get_workout_consistency(data: NormalizedData) -> Optional[Dict[str, int]]:
    """Day gaps between consecutive sessions, or None with fewer than 2 sessions."""
    return get_format(data.format).consistency(data)


def build_report(data: NormalizedData, exercise_name: Optional[str] = None) -> Dict[str, Any]:
    """Collect summary, records and consistency (and one exercise's progress) in one dict."""
    report = {
        "summary": get_summary(data),
        "personal_records": get_personal_records(data),
        "consistency": get_workout_consistency(data),
    }
    if exercise_name:
        report["progress"] = {exercise_name: get_exercise_progress(data, exercise_name)}
    return report


def parse_arguments(args=None):
    """Parse command line arguments"""
    ap = argparse.ArgumentParser(description="Analyze workout CSV exports")
    ap.add_argument("csv_files", nargs="+")
    ap.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        default=None,
        help="Skip format detection and parse as this format",
    )
    ap.add_argument("--exercise", type=str, help="Report progress for this exercise")
    ap.add_argument("--output-dir", type=str, help="Directory for JSON and CSV reports")
    ap.add_argument("--encoding", type=str, default=ParseConfig().encoding)
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return ap.parse_args(args)


def _print_summary(path: str, data: NormalizedData, report: Dict[str, Any]) -> None:
    summary = report["summary"]
    print(f"\n📁 {path} ({data.format})")
    print(f"   Workouts: {summary['total_workouts']}")
    print(f"   Exercises: {summary['total_exercises']}")
    print(f"   Sets: {summary['total_sets']}")
    print(f"   Total volume: {round(summary['total_volume']):,} kg×reps")
    print(f"   Avg workout: {summary['avg_workout_time']} {summary['avg_workout_time_unit']}")
    print(f"   Unique exercises: {len(summary['exercise_types'])}")

    if summary["date_range"]:
        start = summary["date_range"]["start"].date().isoformat()
        end = summary["date_range"]["end"].date().isoformat()
        print(f"   Date range: {start} → {end} ({summary['date_range']['span']} days)")

    records = report["personal_records"]
    if records:
        name, best = max(records.items(), key=lambda item: item[1]["weight"])
        print(f"   🏆 Top PR: {name} - {best['weight']}kg × {best['reps']} reps")

    consistency = report["consistency"]
    if consistency:
        print(
            f"   📅 Gap between workouts: avg {consistency['average_gap']} days "
            f"(min {consistency['min_gap']}, max {consistency['max_gap']})"
        )

    for exercise_name, entries in report.get("progress", {}).items():
        print(f"\n   📈 {exercise_name}: {len(entries)} sessions")
        for entry in entries:
            date = entry["date"].date().isoformat() if entry["date"] else "unknown date"
            print(
                f"      {date}: max {entry['max_weight']}kg, "
                f"volume {round(entry['total_volume']):,}"
            )


def main_with_args(args):
    """Main function that takes parsed arguments"""
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = ParseConfig(encoding=args.encoding, format_override=args.format)
    parsed_any = False

    for csv_file in args.csv_files:
        try:
            data = parse_file(csv_file, config)
        except ExportFileError as e:
            print(f"❌ {e}")
            continue

        parsed_any = True
        report = build_report(data, args.exercise)
        _print_summary(csv_file, data, report)

        if args.output_dir:
            target = Path(args.output_dir)
            if len(args.csv_files) > 1:
                target = target / Path(csv_file).stem
            for written in save_report(data, str(target), report):
                print(f"   ✅ Created: {written}")

    if not parsed_any:
        print("No data to output.")
        return 1
    return 0


def main():
    """Main entry point for command line"""
    args = parse_arguments()
    return main_with_args(args)


if __name__ == "__main__":
    main()
