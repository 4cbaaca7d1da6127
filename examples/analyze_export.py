#!/usr/bin/env python3
"""
Example script demonstrating how to use the workoutcsv library.

This script shows how to:
1. Parse a workout CSV export of either format
2. Compute personal records and exercise progress
3. Print a body part and cardio breakdown
"""

import sys
from pathlib import Path

# Add src to path if running without installation
src_path = Path(__file__).parent.parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from workoutcsv import (
    cardio_exercises,
    exercises_by_body_part,
    get_exercise_progress,
    get_personal_records,
    get_summary,
    parse_file,
)
from workoutcsv.exceptions import WorkoutCsvError


def main():
    """Run example workout export analysis."""
    # Sample exports shipped with the tests
    data_dir = Path(__file__).parent.parent / "tests" / "fixtures"

    if not data_dir.exists():
        print(f"Error: Data directory not found: {data_dir}")
        return 1

    csv_files = sorted(data_dir.glob("*.csv"))
    if not csv_files:
        print(f"No CSV files found in {data_dir}")
        return 1

    for csv_file in csv_files:
        print(f"Analyzing: {csv_file.name}")
        print("=" * 60)

        try:
            data = parse_file(str(csv_file))
        except WorkoutCsvError as e:
            print(f"\n❌ Error analyzing file: {e}")
            return 1

        summary = get_summary(data)
        print(f"\n📊 Export Summary ({data.format}):")
        print(f"   Workouts: {summary['total_workouts']}")
        print(f"   Sets: {summary['total_sets']}")
        print(f"   Volume: {summary['total_volume']} kg×reps")

        records = get_personal_records(data)
        if records:
            print("\n🏆 Personal Records:")
            for name, record in sorted(records.items()):
                print(f"   {name}: {record['weight']}kg × {record['reps']}")
                for entry in get_exercise_progress(data, name):
                    print(f"      max {entry['max_weight']}kg over {entry['total_sets']} sets")

        print("\n💪 By body part:")
        for body_part, exercises in exercises_by_body_part(data).items():
            print(f"   {body_part}: {len(exercises)} exercises")

        for cardio in cardio_exercises(data):
            print(f"   🏃 {cardio['name']}: {cardio['total_distance']} m in {cardio['total_time']} s")

        print("\n" + "=" * 60)

    print("✅ Analysis complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
