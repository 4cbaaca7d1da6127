"""
Unit tests for training analytics.
Tests personal records, exercise progress, consistency and summaries.
"""

from datetime import datetime, timezone

import pytest

from workoutcsv.analyzer import (
    cardio_exercises,
    date_range,
    exercise_progress,
    exercises_by_body_part,
    personal_records,
    strength_exercises,
    summarize,
    workout_consistency,
    workout_frequency,
)
from workoutcsv.exceptions import ValidationError
from workoutcsv.models import Exercise, NormalizedData, SetEntry, WorkoutSession
from workoutcsv.multi_section import parse_multi_section
from workoutcsv.single_table import parse_single_table

DAY = 86400


@pytest.fixture
def multi(multi_section_text):
    return parse_multi_section(multi_section_text)


@pytest.fixture
def single(single_table_text):
    return parse_single_table(single_table_text)


def _sessions(*starts):
    return NormalizedData(
        workout_sessions=tuple(WorkoutSession(session_id=i, start_time=s) for i, s in enumerate(starts))
    )


class TestPersonalRecords:
    def test_multi_section_record(self, multi):
        records = personal_records(multi)
        assert set(records) == {"Barbell Deadlift"}
        record = records["Barbell Deadlift"]
        assert record["weight"] == 100
        assert record["reps"] == 5
        assert record["volume"] == 500
        assert record["date"] == datetime(2024, 12, 18, 16, 7, 17, tzinfo=timezone.utc)

    def test_single_table_records(self, single):
        records = personal_records(single)
        assert set(records) == {"Bench Press (Barbell)", "Deadlift (Barbell)"}
        bench = records["Bench Press (Barbell)"]
        assert (bench["weight"], bench["reps"]) == (85, 5)
        assert bench["workout_name"] == "Cardio"
        assert bench["date"] == datetime(2024, 3, 7, 8, 0, tzinfo=timezone.utc)
        deadlift = records["Deadlift (Barbell)"]
        assert (deadlift["weight"], deadlift["reps"], deadlift["volume"]) == (140, 3, 420)

    def test_bodyweight_set_before_weighted_set(self):
        data = NormalizedData(
            exercises=(
                Exercise(name="Pull Up", sets=(SetEntry(1, 0.0, 12), SetEntry(2, 20.0, 5))),
            )
        )
        record = personal_records(data)["Pull Up"]
        assert record["weight"] == 20
        assert record["reps"] == 5
        assert record["volume"] == 100

    def test_missing_workout_name_reported_as_unknown(self, multi):
        assert personal_records(multi)["Barbell Deadlift"]["workout_name"] == "Unknown"

    def test_ties_keep_first_set(self):
        data = NormalizedData(
            exercises=(
                Exercise(name="Row", sets=(SetEntry(1, 50.0, 10), SetEntry(2, 50.0, 12))),
            )
        )
        assert personal_records(data)["Row"]["reps"] == 10

    def test_bodyweight_only_exercise_has_no_record(self):
        data = NormalizedData(exercises=(Exercise(name="Dip", sets=(SetEntry(1, 0.0, 15),)),))
        assert personal_records(data) == {}

    def test_empty(self):
        assert personal_records(NormalizedData()) == {}


class TestExerciseProgress:
    def test_single_table_progress(self, single):
        progress = exercise_progress(single, "Bench Press (Barbell)", include_workout=True)
        assert [(p["max_weight"], p["total_volume"], p["total_sets"]) for p in progress] == [
            (80, 1120, 2),
            (85, 425, 1),
        ]
        assert [p["workout_id"] for p in progress] == [1, 3]
        assert progress[0]["workout_name"] == "Push Day"
        assert isinstance(progress[0]["sets"], list)

    def test_workout_fields_only_when_requested(self, single):
        progress = exercise_progress(single, "Bench Press (Barbell)")
        assert "workout_id" not in progress[0]

    def test_sorted_by_date_with_undated_last(self):
        later = datetime(2024, 5, 1, tzinfo=timezone.utc)
        earlier = datetime(2024, 4, 1, tzinfo=timezone.utc)
        data = NormalizedData(
            exercises=(
                Exercise(name="Squat", sets=(SetEntry(1, 10.0, 1),)),
                Exercise(name="Squat", sets=(SetEntry(1, 30.0, 1),), timestamp=later),
                Exercise(name="Squat", sets=(SetEntry(1, 20.0, 1),), timestamp=earlier),
            )
        )
        assert [p["max_weight"] for p in exercise_progress(data, "Squat")] == [20.0, 30.0, 10.0]

    def test_unknown_exercise(self, multi):
        assert exercise_progress(multi, "Nope") == []

    def test_name_match_is_exact(self, multi):
        assert exercise_progress(multi, "barbell deadlift") == []

    @pytest.mark.parametrize("name", ["", None])
    def test_invalid_name(self, multi, name):
        with pytest.raises(ValidationError):
            exercise_progress(multi, name)


class TestWorkoutConsistency:
    def test_single_table_gaps(self, single):
        assert workout_consistency(single) == {
            "average_gap": 3,
            "min_gap": 3,
            "max_gap": 3,
            "total_gaps": 2,
        }

    def test_single_session_gives_none(self, multi):
        assert workout_consistency(multi) is None

    def test_no_sessions_gives_none(self):
        assert workout_consistency(NormalizedData()) is None

    def test_partial_days_round_up(self):
        result = workout_consistency(_sessions(0, DAY // 2, 3 * DAY))
        assert result["min_gap"] == 1
        assert result["max_gap"] == 3
        assert result["average_gap"] == 2

    def test_start_times_sorted_first(self):
        result = workout_consistency(_sessions(10 * DAY, 0, 4 * DAY))
        assert (result["min_gap"], result["max_gap"]) == (4, 6)
        assert result["average_gap"] == 5

    def test_same_start_gives_zero_gap(self):
        assert workout_consistency(_sessions(100, 100))["max_gap"] == 0

    def test_sessions_without_start_are_ignored(self):
        assert workout_consistency(_sessions(None, 0)) is None


class TestDateRangeAndFrequency:
    def test_single_table_range(self, single):
        result = date_range(single)
        assert result["start"] == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
        assert result["end"] == datetime(2024, 3, 7, 8, 0, tzinfo=timezone.utc)
        assert result["span"] == 6

    def test_frequency(self, single):
        assert workout_frequency(single) == {
            "total_days": 6,
            "workouts_per_week": 3.5,
            "total_workouts": 3,
        }

    def test_zero_span_has_no_frequency(self, multi):
        assert date_range(multi)["span"] == 0
        assert workout_frequency(multi) is None

    def test_no_sessions(self):
        assert date_range(NormalizedData()) is None
        assert workout_frequency(NormalizedData()) is None


class TestSummarize:
    def test_multi_section_summary(self, multi):
        summary = summarize(multi)
        assert summary["total_workouts"] == 1
        assert summary["total_exercises"] == 1
        assert summary["total_sets"] == 6
        assert summary["total_volume"] == 2200
        assert summary["avg_workout_time"] == 6
        assert summary["exercise_types"] == ["Barbell Deadlift"]
        assert summary["date_range"]["span"] == 0
        assert summary["workout_frequency"] is None
        assert summary["format"] == "multi-section"

    def test_single_table_summary(self, single):
        summary = summarize(single)
        assert summary["total_workouts"] == 3
        assert summary["total_exercises"] == 5
        assert summary["total_sets"] == 7
        assert summary["total_volume"] == 2565
        assert summary["avg_workout_time"] == 45
        assert summary["exercise_types"] == [
            "Bench Press (Barbell)",
            "Deadlift (Barbell)",
            "Push Up",
            "Running",
        ]
        assert summary["workout_frequency"]["workouts_per_week"] == 3.5

    def test_empty_summary(self):
        summary = summarize(NormalizedData())
        assert summary["total_workouts"] == 0
        assert summary["total_volume"] == 0
        assert summary["avg_workout_time"] == 0
        assert summary["exercise_types"] == []
        assert summary["date_range"] is None

    def test_avg_time_in_seconds(self, multi):
        summary = summarize(multi, duration_unit="s")
        assert summary["avg_workout_time"] == 348
        assert summary["avg_workout_time_unit"] == "s"

    def test_avg_time_defaults_to_minutes(self, single):
        assert summarize(single)["avg_workout_time_unit"] == "min"

    def test_avg_time_ignores_zero_durations(self):
        data = NormalizedData(
            workout_sessions=(
                WorkoutSession(session_id=1, start_time=None, total_time=0),
                WorkoutSession(session_id=2, start_time=None, total_time=90),
            )
        )
        assert summarize(data)["avg_workout_time"] == 2


class TestExerciseCategories:
    def test_body_part_groups(self, multi, single):
        assert list(exercises_by_body_part(multi)) == ["0"]
        groups = exercises_by_body_part(single)
        assert list(groups) == ["Unknown"]
        assert len(groups["Unknown"]) == 5

    def test_cardio(self, single):
        cardio = cardio_exercises(single)
        assert len(cardio) == 1
        assert cardio[0]["name"] == "Running"
        assert cardio[0]["total_distance"] == 5000
        assert cardio[0]["total_time"] == 1500
        assert cardio[0]["sessions"] == 1

    def test_timed_zero_weight_set_is_cardio(self):
        data = NormalizedData(
            exercises=(Exercise(name="Bike", sets=(SetEntry(1, 0.0, 0, seconds=600.0),)),)
        )
        assert [c["name"] for c in cardio_exercises(data)] == ["Bike"]

    def test_strength(self, single):
        names = [ex.name for ex in strength_exercises(single)]
        assert names == ["Bench Press (Barbell)", "Deadlift (Barbell)", "Bench Press (Barbell)"]

    def test_analysis_does_not_modify_input(self, single):
        before = repr(single)
        summarize(single)
        personal_records(single)
        exercise_progress(single, "Running")
        workout_consistency(single)
        assert repr(single) == before
