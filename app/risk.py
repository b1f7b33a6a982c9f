"""Risk scoring logic: academic and burnout scores, bands and per-subject risk."""

import logging
import math
import zlib
from datetime import date
from typing import List, Optional, Sequence

import numpy as np

from app.models import (
    RiskAnalysis,
    RiskColor,
    RiskLevel,
    StudentData,
    SubjectRisk,
)
from app.parsers import round_half_up
from app.advice import (
    generate_insights,
    generate_recommendations,
    generate_quick_tips,
)

logger = logging.getLogger(__name__)

MEDIUM_THRESHOLD = 35
HIGH_THRESHOLD = 65

SUBJECT_RISK_FLOOR = 10
SUBJECT_RISK_CEILING = 100
SUBJECT_JITTER = 15


def _bounded_score(total: float) -> int:
    return int(np.clip(round_half_up(total), 0, 100))


def days_until_exam(exam_date: date, today: Optional[date] = None) -> int:
    """
    Whole days remaining until the exam.

    An exam today or in the past still reports 1 day remaining.
    """
    today = today or date.today()
    delta_days = (exam_date - today).total_seconds() / 86400.0
    return max(1, math.ceil(delta_days))


def academic_risk(data: StudentData, days: int) -> int:
    """
    Academic underperformance risk (0-100).

    Combines time pressure, daily study volume, missed days and topic
    difficulty into a single bounded score.
    """
    score = 0.0

    if days < 7:
        score += 30
    elif days < 14:
        score += 20
    elif days < 30:
        score += 10

    hours = data.daily_study_hours
    if hours < 2:
        score += 25
    elif hours < 4:
        score += 15
    elif hours < 6:
        score += 5

    score += (data.missed_study_days / 7) * 25
    score += (data.topic_difficulty / 100) * 20

    return _bounded_score(score)


def burnout_risk(data: StudentData, days: int) -> int:
    """Burnout risk (0-100) from stress, study volume and time pressure."""
    score = (data.stress_level / 5) * 40

    hours = data.daily_study_hours
    if hours > 8:
        score += 30
    elif hours > 6:
        score += 15
    elif hours < 2:
        score += 20

    if days < 7:
        score += 30
    elif days < 14:
        score += 20
    elif days < 21:
        score += 10

    return _bounded_score(score)


def get_risk_level(risk_score: float) -> RiskLevel:
    """
    Categorize risk score into low/medium/high.

    Args:
        risk_score: Risk score (0-100)

    Returns:
        RiskLevel band (34 -> low, 35 -> medium, 65 -> high)
    """
    if risk_score < MEDIUM_THRESHOLD:
        return RiskLevel.LOW
    elif risk_score < HIGH_THRESHOLD:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.HIGH


def get_risk_color(risk_score: float) -> RiskColor:
    """Display color for the band the score falls in."""
    return {
        RiskLevel.LOW: RiskColor.LOW,
        RiskLevel.MEDIUM: RiskColor.MEDIUM,
        RiskLevel.HIGH: RiskColor.HIGH,
    }[get_risk_level(risk_score)]


def seeded_rng(data: StudentData) -> np.random.Generator:
    """Generator seeded from the subject names, stable across processes."""
    key = "\x1f".join(data.subjects).encode('utf-8')
    return np.random.default_rng(zlib.crc32(key))


def subject_risks(
    subjects: Sequence[str],
    academic: int,
    rng: Optional[np.random.Generator] = None
) -> List[SubjectRisk]:
    """
    Spread the academic risk across subjects.

    Even positions get +15, odd positions -10, plus a random 0-14 jitter;
    the result is bounded to 10-100.
    """
    if rng is None:
        rng = np.random.default_rng()

    results = []
    for index, name in enumerate(subjects):
        offset = 15 if index % 2 == 0 else -10
        base = academic + offset + int(rng.integers(0, SUBJECT_JITTER))
        risk = int(np.clip(base, SUBJECT_RISK_FLOOR, SUBJECT_RISK_CEILING))
        results.append(SubjectRisk(name=name, risk=risk, color_tag=get_risk_color(risk)))
    return results


def weakest_subject(risks: Sequence[SubjectRisk]) -> Optional[SubjectRisk]:
    """Subject with the highest risk; the first one listed wins ties."""
    if not risks:
        return None
    return sorted(risks, key=lambda s: -s.risk)[0]


def analyze(
    data: StudentData,
    today: Optional[date] = None,
    rng: Optional[np.random.Generator] = None
) -> RiskAnalysis:
    """
    Compute the full risk analysis for a student.

    Args:
        data: Validated student input
        today: Reference date (defaults to the current date)
        rng: Random source for the per-subject jitter (unseeded if omitted)

    Returns:
        RiskAnalysis with scores, bands, subject risks and advice
    """
    days = days_until_exam(data.exam_date, today)
    academic = academic_risk(data, days)
    burnout = burnout_risk(data, days)

    per_subject = subject_risks(data.subjects, academic, rng)
    weakest = weakest_subject(per_subject)

    analysis = RiskAnalysis(
        academic_risk=academic,
        burnout_risk=burnout,
        risk_level=get_risk_level(academic),
        burnout_level=get_risk_level(burnout),
        subject_risks=per_subject,
        days_until_exam=days,
        insights=generate_insights(data, academic, burnout, days, weakest),
        recommendations=generate_recommendations(data, academic, burnout, days, weakest),
        quick_tips=generate_quick_tips(data, days),
    )

    logger.info(
        "Analysis: %d subjects, %d days left, academic %d (%s), burnout %d (%s)",
        len(data.subjects), days, academic, analysis.risk_level.value,
        burnout, analysis.burnout_level.value
    )
    return analysis
