"""
Integration tests for the workoutcsv library.
Tests end-to-end scenarios through the public package API with the sample exports.

Test Fixtures:
- multi_section.csv: settings, one routine/day/exercise, one session, one note
- single_table.csv: three workouts three days apart, including a cardio row
"""

import importlib
import shutil
import tempfile
import unittest
from pathlib import Path

import workoutcsv


class TestLibraryIntegration(unittest.TestCase):
    """Integration tests for the workoutcsv library API"""

    def setUp(self):
        """Set up test environment"""
        self.test_dir = Path(tempfile.mkdtemp())
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def tearDown(self):
        """Clean up test environment"""
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_all_modules_import(self):
        """Test every package module loads"""
        for name in (
            "analyzer",
            "config",
            "constants",
            "detection",
            "exceptions",
            "export",
            "formats",
            "models",
            "multi_section",
            "parser",
            "records",
            "setlog",
            "single_table",
            "tokenizer",
        ):
            module = importlib.import_module(f"workoutcsv.{name}")
            self.assertTrue(module.__doc__)

    def test_multi_section_end_to_end(self):
        """Test parsing and analyzing the multi-section export with exact values"""
        data = workoutcsv.parse_file(str(self.fixtures_dir / "multi_section.csv"))

        summary = workoutcsv.get_summary(data)
        self.assertEqual(summary["total_workouts"], 1)
        self.assertEqual(summary["total_exercises"], 1)
        self.assertEqual(summary["total_sets"], 6)
        self.assertEqual(summary["total_volume"], 2200)
        self.assertEqual(summary["avg_workout_time"], 348)
        self.assertEqual(summary["avg_workout_time_unit"], "s")
        self.assertEqual(summary["date_range"]["span"], 0)
        self.assertIsNone(summary["workout_frequency"])

        records = workoutcsv.get_personal_records(data)
        self.assertEqual(records["Barbell Deadlift"]["weight"], 100)
        self.assertEqual(records["Barbell Deadlift"]["reps"], 5)
        self.assertEqual(records["Barbell Deadlift"]["volume"], 500)

        self.assertIsNone(workoutcsv.get_workout_consistency(data))

    def test_single_table_end_to_end(self):
        """Test parsing and analyzing the single-table export with exact values"""
        text = (self.fixtures_dir / "single_table.csv").read_text(encoding="utf-8")
        self.assertEqual(workoutcsv.detect_format(text), "single-table")
        data = workoutcsv.parse(text)

        progress = workoutcsv.get_exercise_progress(data, "Bench Press (Barbell)")
        self.assertEqual([p["max_weight"] for p in progress], [80, 85])
        self.assertEqual([p["total_volume"] for p in progress], [1120, 425])

        consistency = workoutcsv.get_workout_consistency(data)
        self.assertEqual(consistency["average_gap"], 3)
        self.assertEqual(consistency["total_gaps"], 2)

        self.assertEqual([c["name"] for c in workoutcsv.cardio_exercises(data)], ["Running"])
        self.assertEqual(len(workoutcsv.strength_exercises(data)), 3)

    def test_report_files(self):
        """Test report export through the package API"""
        data = workoutcsv.parse_file(str(self.fixtures_dir / "single_table.csv"))
        report = workoutcsv.build_report(data)
        written = workoutcsv.save_report(data, str(self.test_dir), report)
        self.assertEqual(len(written), 3)
        for path in written:
            self.assertTrue(Path(path).exists())

    def test_json_round_trip(self):
        """Test the normalized model survives JSON serialization"""
        data = workoutcsv.parse_file(str(self.fixtures_dir / "multi_section.csv"))
        self.assertEqual(workoutcsv.from_json(workoutcsv.to_json(data)), data)

    def test_set_log_and_tokenizer_exports(self):
        """Test the low-level helpers exposed at package level"""
        self.assertEqual(workoutcsv.split_line('"a,b",c'), ["a,b", "c"])
        sets = workoutcsv.decode_set_log("20x10,0x0,30x8")
        self.assertEqual([s.set_number for s in sets], [1, 2])


if __name__ == "__main__":
    unittest.main()
