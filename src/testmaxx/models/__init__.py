"""
Data models for TestMaxx tests, results and attempts.
"""

from src.testmaxx.models.question_models import (
    AnswerValue,
    CHOICE_TYPES,
    Question,
    Test,
    TestCatalog,
)
from src.testmaxx.models.attempt_models import (
    AnswerMap,
    AttemptAnalysis,
    QuestionResult,
    SubmitConfirmation,
    TestAttempt,
    TestResults,
    TopicScore,
)

__all__ = [
    "AnswerValue",
    "CHOICE_TYPES",
    "Question",
    "Test",
    "TestCatalog",
    "AnswerMap",
    "AttemptAnalysis",
    "QuestionResult",
    "SubmitConfirmation",
    "TestAttempt",
    "TestResults",
    "TopicScore",
]
