"""
Tests for serialization and report export.
Covers JSON conversion of the normalized model and the pandas report tables.
"""

import json
import shutil
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd
import pytest

from workoutcsv.exceptions import ValidationError
from workoutcsv.export import (
    from_dict,
    from_json,
    report_to_json,
    save_report,
    sessions_frame,
    sets_frame,
    to_dict,
    to_json,
)
from workoutcsv.models import NormalizedData
from workoutcsv.multi_section import parse_multi_section
from workoutcsv.parser import build_report
from workoutcsv.single_table import parse_single_table

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _load(name):
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class TestJsonConversion:
    def test_single_table_restores_equal_model(self, single_table_text):
        data = parse_single_table(single_table_text)
        assert from_json(to_json(data)) == data

    def test_multi_section_restores_equal_model(self, multi_section_text):
        data = parse_multi_section(multi_section_text)
        restored = from_json(to_json(data))
        assert restored == data
        assert isinstance(restored.settings["TIMESTAMP"], datetime)

    def test_datetimes_become_iso_strings(self, single_table_text):
        payload = to_dict(parse_single_table(single_table_text))
        assert payload["exercises"][0]["timestamp"] == "2024-03-01T08:00:00+00:00"
        json.dumps(payload)

    def test_derived_values_not_stored(self, multi_section_text):
        payload = to_dict(parse_multi_section(multi_section_text))
        assert "volume" not in payload["exercises"][0]["sets"][0]
        assert "efficiency" not in payload["workout_sessions"][0]

    def test_empty_model(self):
        assert from_dict(to_dict(NormalizedData())) == NormalizedData()

    def test_invalid_json(self):
        with pytest.raises(ValidationError):
            from_json("{not json")

    def test_non_object_json(self):
        with pytest.raises(ValidationError):
            from_json("[1, 2, 3]")

    def test_malformed_payload(self):
        with pytest.raises(ValidationError):
            from_dict({"exercises": [{"sets": []}]})


class TestFrames:
    def test_sets_frame_rows(self, single_table_text):
        df = sets_frame(parse_single_table(single_table_text))
        assert len(df) == 7
        assert df["volume"].sum() == 2565
        assert str(df["timestamp"].dt.tz) == "UTC"
        assert df.iloc[0]["workout_name"] == "Push Day"

    def test_sets_frame_sorted_by_time(self, single_table_text):
        df = sets_frame(parse_single_table(single_table_text))
        assert df["timestamp"].is_monotonic_increasing

    def test_sessions_frame(self, multi_section_text):
        df = sessions_frame(parse_multi_section(multi_section_text))
        assert len(df) == 1
        row = df.iloc[0]
        assert row["efficiency"] == 40.2
        assert row["start"] == pd.Timestamp(1708195761, unit="s", tz="UTC")

    def test_empty_frames(self):
        assert sets_frame(NormalizedData()).empty
        assert sessions_frame(NormalizedData()).empty


class TestSaveReport(unittest.TestCase):
    """Test writing report files to disk"""

    def setUp(self):
        """Set up test environment"""
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        """Clean up test environment"""
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_writes_all_files(self):
        """Test summary JSON and both CSV tables are written"""
        data = parse_single_table(_load("single_table.csv"))
        report = build_report(data, "Bench Press (Barbell)")
        written = save_report(data, str(self.test_dir / "out"), report)

        names = sorted(Path(p).name for p in written)
        self.assertEqual(names, ["sessions.csv", "sets.csv", "workout_summary.json"])

        summary = json.loads((self.test_dir / "out" / "workout_summary.json").read_text())
        self.assertEqual(summary["summary"]["total_sets"], 7)
        self.assertEqual(summary["summary"]["date_range"]["start"], "2024-03-01T08:00:00+00:00")
        progress = summary["progress"]["Bench Press (Barbell)"]
        self.assertEqual(progress[0]["sets"][0]["volume"], 640)

        sets = pd.read_csv(self.test_dir / "out" / "sets.csv")
        self.assertEqual(len(sets), 7)

    def test_without_report(self):
        """Test only tables are written when no report is given"""
        data = parse_multi_section(_load("multi_section.csv"))
        written = save_report(data, str(self.test_dir))
        self.assertEqual(sorted(Path(p).name for p in written), ["sessions.csv", "sets.csv"])

    def test_empty_data_writes_only_report(self):
        """Test empty tables are skipped"""
        written = save_report(NormalizedData(), str(self.test_dir), {"summary": {}})
        self.assertEqual([Path(p).name for p in written], ["workout_summary.json"])


def test_report_to_json_handles_numpy_and_datetimes():
    import numpy as np

    text = report_to_json(
        {"n": np.int64(3), "x": np.float64(1.5), "when": datetime(2024, 1, 1, tzinfo=timezone.utc)}
    )
    assert json.loads(text) == {"n": 3, "x": 1.5, "when": "2024-01-01T00:00:00+00:00"}
