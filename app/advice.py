"""Insight, recommendation and quick-tip text for a risk analysis."""

import math
from typing import List, Optional

from app.models import (
    Insight,
    Priority,
    Recommendation,
    Severity,
    StudentData,
    SubjectRisk,
)
from app.parsers import round_half_up

MAX_QUICK_TIPS = 4


def _num(value: float) -> str:
    """Render a number the way the dashboard shows it: 4 not 4.0, 2.5 as is."""
    val = float(value)
    if val.is_integer():
        return str(int(val))
    return repr(val)


def generate_insights(
    data: StudentData,
    academic: int,
    burnout: int,
    days: int,
    weakest: Optional[SubjectRisk]
) -> List[Insight]:
    """
    Build the ordered insight list.

    Exactly one academic-band entry, then an optional burnout entry, then an
    optional spotlight on the weakest subject.
    """
    hours = _num(data.daily_study_hours)
    insights = []

    if academic >= 65:
        extra_hours = math.ceil((100 - academic) / 10)
        gap = round_half_up(data.missed_study_days * 2.5)
        insights.append(Insight(
            title="High Failure Risk Detected",
            description=(
                f"With {days} days left and {hours}h daily study, you need "
                f"{extra_hours} more hours/day to catch up. Your "
                f"{data.missed_study_days} missed days have created a {gap}% knowledge gap."
            ),
            severity=Severity.DANGER,
        ))
    elif academic >= 35:
        pace = "below average" if data.daily_study_hours < 4 else "adequate"
        insights.append(Insight(
            title="Moderate Risk - Room for Improvement",
            description=(
                f"You're studying {hours}h/day which is {pace}. With {days} days "
                f"left, increasing by 1-2 hours can reduce your risk by 15-20%."
            ),
            severity=Severity.WARNING,
        ))
    else:
        active_days = 7 - data.missed_study_days
        insights.append(Insight(
            title="You're On Track!",
            description=(
                f"Great progress! Your {hours}h daily study with {active_days} "
                f"active days/week puts you ahead of 70% of students."
            ),
            severity=Severity.SUCCESS,
        ))

    if burnout >= 65:
        pattern = "excessive" if data.daily_study_hours > 6 else "irregular"
        insights.append(Insight(
            title="Burnout Warning",
            description=(
                f"Stress level {data.stress_level}/5 combined with {pattern} study "
                f"hours indicates burnout. Energy typically drops 40% when burned "
                f"out, making study ineffective."
            ),
            severity=Severity.DANGER,
        ))
    elif burnout >= 35 and data.stress_level >= 3:
        insights.append(Insight(
            title="Stress Building Up",
            description=(
                f"Your stress level ({data.stress_level}/5) is elevated. Students at "
                f"this level retain 25% less information. Consider 10-min breaks "
                f"every 45 mins."
            ),
            severity=Severity.WARNING,
        ))

    if weakest is not None and weakest.risk >= 50:
        insights.append(Insight(
            title=f"Focus Area: {weakest.name}",
            description=(
                f"{weakest.name} shows {weakest.risk}% risk - allocate 40% of your "
                f"study time here. Start with foundational concepts before advanced topics."
            ),
            severity=Severity.DANGER if weakest.risk >= 65 else Severity.WARNING,
        ))

    return insights


def generate_recommendations(
    data: StudentData,
    academic: int,
    burnout: int,
    days: int,
    weakest: Optional[SubjectRisk]
) -> List[Recommendation]:
    """Build the ordered list of study plans that apply to this student."""
    recommendations = []

    if days <= 7:
        focus = weakest.name if weakest is not None else "weakest subject"
        recommendations.append(Recommendation(
            title="Emergency 7-Day Plan",
            description=(
                f"With only {days} days left, every hour counts. "
                f"Focus on high-yield topics only."
            ),
            steps=[
                f"Day 1-2: Review {focus} core concepts only",
                "Day 3-4: Practice problems from past papers (aim for 20+ questions/day)",
                "Day 5-6: Revise all formulas, definitions, and key facts",
                "Day 7: Light review + rest. Sleep 8 hours before exam",
            ],
            priority=Priority.HIGH,
            icon="zap",
        ))
    elif days <= 14:
        recommendations.append(Recommendation(
            title="2-Week Intensive Strategy",
            description="You have time to cover everything if you're strategic.",
            steps=[
                f"Week 1: Complete all {', '.join(data.subjects)} syllabus with notes",
                "Daily: 2 hours theory + 1 hour practice problems",
                "Week 2: Focus on weak areas and past paper practice",
                "Last 3 days: Revision only, no new topics",
            ],
            priority=Priority.HIGH,
            icon="target",
        ))

    hours = data.daily_study_hours
    if hours < 4:
        recommendations.append(Recommendation(
            title="Increase Study Time Gradually",
            description=(
                f"You're at {_num(hours)}h/day. Aim for {_num(min(6, hours + 2))}h "
                f"for optimal results."
            ),
            steps=[
                f"Tomorrow: Add 30 minutes (total {_num(hours + 0.5)}h)",
                "Day 3: Add another 30 minutes",
                "Use phone timer - study 25 min, break 5 min (Pomodoro)",
                "Study your hardest subject when most alert (usually morning)",
            ],
            priority=Priority.HIGH if academic >= 50 else Priority.MEDIUM,
            icon="clock",
        ))

    if data.missed_study_days >= 3:
        recommendations.append(Recommendation(
            title="Build Consistent Habits",
            description=(
                f"{data.missed_study_days} missed days/week creates gaps. "
                f"Consistency beats intensity."
            ),
            steps=[
                "Set a fixed study time (e.g., 6-8 PM daily)",
                "Start with just 30 minutes on 'off' days - something is better than nothing",
                "Use a habit tracker app or calendar to mark study days",
                "Reward yourself after completing a study streak",
            ],
            priority=Priority.MEDIUM,
            icon="book-open",
        ))

    if burnout >= 50 or data.stress_level >= 4:
        recommendations.append(Recommendation(
            title="Prevent Burnout Now",
            description="High stress reduces memory retention by 30%. Recovery is essential.",
            steps=[
                "Take a 10-min walk after every 2 hours of study",
                "Sleep 7-8 hours minimum - memory consolidates during sleep",
                "Try 4-7-8 breathing: inhale 4s, hold 7s, exhale 8s",
                "Schedule 1 hour of non-study activity daily (exercise, hobby)",
            ],
            priority=Priority.HIGH,
            icon="heart",
        ))

    if data.topic_difficulty >= 66:
        recommendations.append(Recommendation(
            title="Tackle Difficult Topics",
            description="Hard topics need different strategies than easy ones.",
            steps=[
                "Break complex topics into 3-5 smaller sub-topics",
                "Watch YouTube explanations before reading textbooks",
                "Teach the concept out loud (even to yourself)",
                "Do 5 practice problems per difficult concept",
            ],
            priority=Priority.MEDIUM,
            icon="brain",
        ))

    return recommendations


def generate_quick_tips(data: StudentData, days: int) -> List[str]:
    """Situational tips first, then the two general ones; at most four."""
    tips = []
    if days <= 3:
        tips.append("\U0001F3AF Focus on frequently tested topics only")
    if data.stress_level >= 4:
        tips.append("\U0001F9D8 Take 3 deep breaths before each study session")
    if data.daily_study_hours >= 8:
        tips.append("\u26A1 Quality > Quantity. 6 focused hours beat 10 distracted hours")
    if data.missed_study_days >= 2:
        tips.append("\U0001F4C5 Study at the same time daily to build momentum")
    tips.append("\U0001F4A1 Review notes within 24 hours - retention jumps from 20% to 80%")
    tips.append("\U0001F3A7 Lo-fi or classical music can improve focus by 15%")

    return tips[:MAX_QUICK_TIPS]
