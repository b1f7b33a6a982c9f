"""Input collection: number normalization, subject list handling and submission checks."""

import logging
import math
from datetime import date, datetime
from typing import Any, Iterable, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_DAILY_STUDY_HOURS = 4.0
DEFAULT_MISSED_STUDY_DAYS = 2
DEFAULT_TOPIC_DIFFICULTY = 50.0
DEFAULT_STRESS_LEVEL = 3

MAX_DAILY_STUDY_HOURS = 16.0
MAX_MISSED_STUDY_DAYS = 7

STRESS_LABELS = ["Very Low", "Low", "Moderate", "High", "Very High"]


class SubmissionError(ValueError):
    """Raised when a form submission cannot be turned into StudentData."""


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))


def _to_number(value: Any) -> Optional[float]:
    """
    Convert a raw form value to a float.

    Accepts numbers, numeric strings, percentages like '85%' and
    durations like '1:30' (hours:minutes). Returns None when the value
    is missing or cannot be parsed. Values too large for a float come
    back as +/-inf so they clamp like any other out-of-range number.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, np.integer, np.floating)):
        try:
            val = float(value)
        except OverflowError:
            val = np.inf if value > 0 else -np.inf
    elif isinstance(value, str):
        val_str = value.strip().replace('%', '').strip()
        if not val_str:
            return None
        try:
            if ':' in val_str:
                hours, minutes = val_str.split(':')
                val = float(hours) + float(minutes) / 60.0
            else:
                val = float(val_str)
        except (ValueError, TypeError):
            return None
    else:
        return None

    if np.isnan(val):
        return None
    return val


def normalize_hours(value: Any) -> float:
    """
    Normalize daily study hours to the 0-16 range.

    Args:
        value: Number, numeric string or 'H:MM' duration

    Returns:
        Hours as float (e.g., '1:30' -> 1.5, 20 -> 16.0, -2 -> 0.0)
    """
    val = _to_number(value)
    if val is None:
        return DEFAULT_DAILY_STUDY_HOURS
    return float(clamp(val, 0.0, MAX_DAILY_STUDY_HOURS))


def normalize_missed_days(value: Any) -> int:
    """Normalize missed study days (last 7 days) to an integer in 0-7."""
    val = _to_number(value)
    if val is None:
        return DEFAULT_MISSED_STUDY_DAYS
    return int(round(clamp(val, 0, MAX_MISSED_STUDY_DAYS)))


def normalize_difficulty(value: Any) -> float:
    """Normalize topic difficulty to 0-100. '75%' and 75 are equivalent."""
    val = _to_number(value)
    if val is None:
        return DEFAULT_TOPIC_DIFFICULTY
    return float(clamp(val, 0.0, 100.0))


def normalize_stress(value: Any) -> int:
    """Normalize stress level to an integer in 1-5."""
    val = _to_number(value)
    if val is None:
        return DEFAULT_STRESS_LEVEL
    return int(round(clamp(val, 1, 5)))


def add_subject(subjects: Iterable[str], name: Any) -> Tuple[str, ...]:
    """
    Add a subject to the list.

    Names are trimmed; empty names and names already present are ignored.

    Returns:
        New tuple of subjects (input is not modified)
    """
    current = tuple(subjects)
    if name is None:
        return current
    cleaned = str(name).strip()
    if not cleaned or cleaned in current:
        return current
    return current + (cleaned,)


def remove_subject(subjects: Iterable[str], name: str) -> Tuple[str, ...]:
    """Return the subjects without name."""
    return tuple(s for s in subjects if s != name)


def normalize_subjects(values: Any) -> Tuple[str, ...]:
    """Clean a raw subject list into a unique, ordered tuple."""
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]

    subjects: Tuple[str, ...] = ()
    for value in values:
        subjects = add_subject(subjects, value)
    return subjects


def parse_exam_date(value: Any) -> date:
    """
    Parse the exam date.

    Args:
        value: date, datetime or ISO string ('2025-06-01')

    Returns:
        Calendar date

    Raises:
        SubmissionError: if the value is empty or malformed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        raise SubmissionError("Exam date is required")

    raw = str(value).strip()
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        raise SubmissionError(f"Invalid exam date: {raw!r}. Expected YYYY-MM-DD")


def validate_submission(
    subjects: Tuple[str, ...],
    exam_date: Optional[date],
    today: Optional[date] = None
) -> None:
    """
    Check that a submission may reach the scoring engine.

    Raises:
        SubmissionError: no subjects, no exam date, or exam date in the past
    """
    today = today or date.today()
    problem = None
    if not subjects:
        problem = "Add at least one subject before submitting"
    elif exam_date is None:
        problem = "Exam date is required"
    elif exam_date < today:
        problem = f"Exam date {exam_date.isoformat()} is in the past"

    if problem:
        logger.warning("Rejected submission: %s", problem)
        raise SubmissionError(problem)


def get_difficulty_label(value: float) -> str:
    """Label a 0-100 difficulty as Easy/Medium/Hard."""
    if value < 33:
        return 'Easy'
    if value < 66:
        return 'Medium'
    return 'Hard'


def get_stress_label(value: int) -> str:
    """Label a 1-5 stress level; unknown values read as Moderate."""
    val = _to_number(value)
    if val is not None and val.is_integer() and 1 <= val <= len(STRESS_LABELS):
        return STRESS_LABELS[int(val) - 1]
    return 'Moderate'
