"""
Statistics over a student's past attempts, as shown on the dashboard and
the results history page.
"""
from typing import Dict, Iterable, List, Literal, Optional

from pydantic import BaseModel, Field

from src.testmaxx import config
from src.testmaxx.models.attempt_models import TestAttempt, round_half_up_percentage
from src.testmaxx.models.question_models import Test

SortKey = Literal["date", "score", "subject"]

UNKNOWN_SUBJECT = "Unknown Subject"


class SubjectStats(BaseModel):
    attempts: int = 0
    total_score: int = 0
    total_marks: int = 0

    @property
    def percentage(self) -> int:
        return round_half_up_percentage(self.total_score, self.total_marks)


class PerformanceSummary(BaseModel):
    """Aggregate performance across attempts."""
    total_attempts: int = 0
    average_percentage: int = 0
    total_time_minutes: int = 0
    subject_stats: Dict[str, SubjectStats] = Field(default_factory=dict)
    best_subject: Optional[str] = None


def summarize_attempts(
    attempts: Iterable[TestAttempt],
    tests: Iterable[Test]
) -> PerformanceSummary:
    """
    Summarize attempts for the dashboard.

    The average is total score over total marks, so longer tests weigh more.
    The best subject is the one with the highest percentage; ties keep the
    subject seen first.
    """
    attempts = list(attempts)
    if not attempts:
        return PerformanceSummary()

    subjects = _subjects_by_test(tests)
    total_score = sum(attempt.score for attempt in attempts)
    total_marks = sum(attempt.total_marks for attempt in attempts)
    total_time = sum(attempt.time_spent for attempt in attempts)

    subject_stats: Dict[str, SubjectStats] = {}
    for attempt in attempts:
        stats = subject_stats.setdefault(
            subjects.get(attempt.test_id, UNKNOWN_SUBJECT), SubjectStats()
        )
        stats.attempts += 1
        stats.total_score += attempt.score
        stats.total_marks += attempt.total_marks

    best_subject = None
    best_percentage = -1
    for subject, stats in subject_stats.items():
        if stats.percentage > best_percentage:
            best_subject, best_percentage = subject, stats.percentage

    return PerformanceSummary(
        total_attempts=len(attempts),
        average_percentage=round_half_up_percentage(total_score, total_marks),
        total_time_minutes=(total_time + 30) // 60,
        subject_stats=subject_stats,
        best_subject=best_subject,
    )


def sort_attempts(
    attempts: Iterable[TestAttempt],
    tests: Iterable[Test],
    by: SortKey = "date"
) -> List[TestAttempt]:
    """Sort attempts by date (newest first), score (highest first) or subject (A-Z)."""
    attempts = list(attempts)
    if by == "score":
        return sorted(attempts, key=lambda a: a.score / a.total_marks if a.total_marks else 0, reverse=True)
    if by == "subject":
        subjects = _subjects_by_test(tests)
        return sorted(attempts, key=lambda a: subjects.get(a.test_id, UNKNOWN_SUBJECT))
    if by == "date":
        return sorted(attempts, key=lambda a: a.completed_at, reverse=True)
    raise ValueError(f"Unknown sort key: {by}")


def recent_attempts(
    attempts: Iterable[TestAttempt],
    limit: Optional[int] = None
) -> List[TestAttempt]:
    limit = config.RECENT_ATTEMPTS_LIMIT if limit is None else limit
    return sorted(attempts, key=lambda a: a.completed_at, reverse=True)[:limit]


def _subjects_by_test(tests: Iterable[Test]) -> Dict[str, str]:
    return {test.id: test.subject for test in tests}
