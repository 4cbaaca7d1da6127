"""Shared fixtures for workoutcsv tests."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Directory holding the sample export files."""
    return FIXTURES_DIR


@pytest.fixture
def multi_section_text():
    """Multi-section export with one row per sub-table."""
    return (FIXTURES_DIR / "multi_section.csv").read_text(encoding="utf-8")


@pytest.fixture
def single_table_text():
    """Single-table export with three workouts three days apart."""
    return (FIXTURES_DIR / "single_table.csv").read_text(encoding="utf-8")
