"""
Core functionality: timer, session, scoring, presentation and stores.
"""

from src.testmaxx.core.history import summarize_attempts, sort_attempts, recent_attempts
from src.testmaxx.core.presenter import ResultsPresenter, performance_badge
from src.testmaxx.core.runner import TestRunner
from src.testmaxx.core.scoring import build_attempt, build_suggestions, score_test
from src.testmaxx.core.session import QuestionStatus, SessionState, TestSession
from src.testmaxx.core.store import (
    InMemoryAttemptStore,
    JsonAttemptStore,
    JsonTestRepository,
)
from src.testmaxx.core.timer import CountdownTimer, IntervalTicker, ManualTicker
from src.testmaxx.core.validation import ensure_startable, validate_test

__all__ = [
    "summarize_attempts",
    "sort_attempts",
    "recent_attempts",
    "ResultsPresenter",
    "performance_badge",
    "TestRunner",
    "build_attempt",
    "build_suggestions",
    "score_test",
    "QuestionStatus",
    "SessionState",
    "TestSession",
    "InMemoryAttemptStore",
    "JsonAttemptStore",
    "JsonTestRepository",
    "CountdownTimer",
    "IntervalTicker",
    "ManualTicker",
    "ensure_startable",
    "validate_test",
]
