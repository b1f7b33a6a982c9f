"""Data models for the Study Risk Analyzer application."""

from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, List, Tuple

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from app.parsers import (
    normalize_difficulty,
    normalize_hours,
    normalize_missed_days,
    normalize_stress,
    normalize_subjects,
    parse_exam_date,
    validate_submission,
)


class RiskLevel(str, Enum):
    """Three-band classification of a risk score."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskColor(str, Enum):
    """Display hue for each risk band."""
    LOW = "hsl(145, 63%, 49%)"
    MEDIUM = "hsl(36, 100%, 55%)"
    HIGH = "hsl(4, 77%, 57%)"


class Severity(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys, accepting either spelling."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StudentData(CamelModel):
    """Self-reported study situation of one student."""
    model_config = ConfigDict(frozen=True)

    subjects: Tuple[str, ...] = ()
    exam_date: date
    daily_study_hours: float = 4.0
    missed_study_days: int = 2
    topic_difficulty: float = 50.0
    stress_level: int = 3

    @field_validator('daily_study_hours', mode='before')
    @classmethod
    def clamp_hours(cls, value):
        return normalize_hours(value)

    @field_validator('missed_study_days', mode='before')
    @classmethod
    def clamp_missed(cls, value):
        return normalize_missed_days(value)

    @field_validator('topic_difficulty', mode='before')
    @classmethod
    def clamp_difficulty(cls, value):
        return normalize_difficulty(value)

    @field_validator('stress_level', mode='before')
    @classmethod
    def clamp_stress(cls, value):
        return normalize_stress(value)

    @field_validator('subjects', mode='before')
    @classmethod
    def clean_subjects(cls, value):
        return normalize_subjects(value)

    @classmethod
    def from_form(cls, raw: Mapping[str, Any], today: Optional[date] = None) -> "StudentData":
        """
        Build a StudentData record from a raw form mapping.

        Keys may be camelCase ('dailyStudyHours') or snake_case
        ('daily_study_hours'). Numeric fields are clamped, missing ones fall
        back to the form defaults.

        Raises:
            SubmissionError: no subjects, missing or past exam date
        """
        def pick(snake: str, camel: str) -> Any:
            if snake in raw:
                return raw[snake]
            return raw.get(camel)

        subjects = normalize_subjects(pick('subjects', 'subjects'))
        exam_date = parse_exam_date(pick('exam_date', 'examDate'))
        validate_submission(subjects, exam_date, today)

        return cls(
            subjects=subjects,
            exam_date=exam_date,
            daily_study_hours=pick('daily_study_hours', 'dailyStudyHours'),
            missed_study_days=pick('missed_study_days', 'missedStudyDays'),
            topic_difficulty=pick('topic_difficulty', 'topicDifficulty'),
            stress_level=pick('stress_level', 'stressLevel'),
        )


class SubjectRisk(CamelModel):
    """Risk estimate for a single subject."""
    name: str
    risk: int
    color_tag: RiskColor


class Insight(CamelModel):
    title: str
    description: str
    severity: Severity


class Recommendation(CamelModel):
    title: str
    description: str
    steps: List[str]
    priority: Priority
    icon: str


class RiskAnalysis(CamelModel):
    """Full analysis derived from a StudentData record."""
    model_config = ConfigDict(frozen=True)

    academic_risk: int
    burnout_risk: int
    risk_level: RiskLevel
    burnout_level: RiskLevel
    subject_risks: List[SubjectRisk]
    days_until_exam: int
    insights: List[Insight]
    recommendations: List[Recommendation]
    quick_tips: List[str]


class NavigateRequest(CamelModel):
    """Navigation event sent by the client together with its current screen."""
    screen: str = "landing"
    event: str
    data: Optional[StudentData] = None
    student_data: Optional[StudentData] = None


class NavigateResponse(CamelModel):
    screen: str
    student_data: Optional[StudentData] = None
    analysis: Optional[RiskAnalysis] = None


class LabelsResponse(CamelModel):
    difficulty: str
    stress: str
