"""
Pytest configuration and shared fixtures for TestMaxx tests.

This module provides reusable fixtures for building tests, questions,
sessions and attempts.
"""
import json
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List

import pytest

from src.testmaxx.core.session import TestSession
from src.testmaxx.core.store import InMemoryAttemptStore
from src.testmaxx.core.timer import ManualTicker
from src.testmaxx.models.attempt_models import AttemptAnalysis, TestAttempt, TopicScore
from src.testmaxx.models.question_models import Question, Test


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow running tests")


# ============================================================================
# FILE SYSTEM FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# BUILDERS
# ============================================================================

def make_mcq(question_id: str, correct_answer=0, topic: str = "Algebra", **kwargs) -> Question:
    """Build a four-option multiple choice question."""
    return Question(
        id=question_id,
        type="mcq",
        text=kwargs.pop("text", f"Question {question_id}?"),
        options=kwargs.pop("options", ["Option A", "Option B", "Option C", "Option D"]),
        correct_answer=correct_answer,
        topic=topic,
        difficulty=kwargs.pop("difficulty", "easy"),
        **kwargs
    )


def make_test(questions: List[Question], duration: int = 30, **kwargs) -> Test:
    """Build a test around a list of questions."""
    return Test(
        id=kwargs.pop("id", "test-1"),
        title=kwargs.pop("title", "Algebra Fundamentals"),
        description=kwargs.pop("description", "Basic algebraic concepts"),
        class_number=kwargs.pop("class_number", 7),
        subject=kwargs.pop("subject", "Mathematics"),
        duration=duration,
        questions=questions,
        **kwargs
    )


# ============================================================================
# MODEL FIXTURES - Question
# ============================================================================

@pytest.fixture
def sample_mcq() -> Question:
    """Create a sample multiple choice question."""
    return Question(
        id="q1",
        type="mcq",
        text="What is 2 + 3?",
        options=["4", "5", "6", "7"],
        correct_answer=1,
        explanation="2 + 3 = 5",
        topic="Arithmetic",
        difficulty="easy"
    )


@pytest.fixture
def sample_true_false() -> Question:
    """Create a sample true/false question."""
    return Question(
        id="q2",
        type="true-false",
        text="The sun rises in the east.",
        options=["True", "False"],
        correct_answer=0,
        topic="Geography",
        difficulty="easy"
    )


@pytest.fixture
def sample_fill_blank() -> Question:
    """Create a sample fill-in-the-blank question."""
    return Question(
        id="q3",
        type="fill-blank",
        text="The capital of India is ____.",
        correct_answer="Delhi",
        explanation="New Delhi is the capital of India.",
        topic="Geography",
        difficulty="medium"
    )


@pytest.fixture
def sample_assertion_reason() -> Question:
    """Create a sample assertion-reason question."""
    return Question(
        id="q4",
        type="assertion-reason",
        text="Assertion: Ice floats on water. Reason: Ice is less dense than water.",
        options=[
            "Both true, reason explains assertion",
            "Both true, reason does not explain assertion",
            "Assertion true, reason false",
            "Assertion false, reason true"
        ],
        correct_answer=0,
        topic="Physics",
        difficulty="hard"
    )


# ============================================================================
# MODEL FIXTURES - Test
# ============================================================================

@pytest.fixture
def mixed_test(sample_mcq, sample_true_false, sample_fill_blank, sample_assertion_reason) -> Test:
    """A test with one question of every type."""
    return Test(
        id="mixed-test",
        title="General Knowledge",
        description="One question of every type",
        class_number=6,
        subject="Science",
        duration=30,
        questions=[sample_mcq, sample_true_false, sample_fill_blank, sample_assertion_reason],
        created_at=datetime(2025, 1, 15, 10, 30)
    )


@pytest.fixture
def five_mcq_test() -> Test:
    """Five multiple choice questions whose correct answer is always the first option."""
    return make_test([make_mcq(f"q{i}", correct_answer=0) for i in range(1, 6)])


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def submissions():
    """Collects (attempt, results) pairs emitted by sessions."""
    return []


@pytest.fixture
def session(mixed_test, ticker, submissions) -> TestSession:
    """A running session over the mixed test."""
    return TestSession(
        mixed_test,
        "student-1",
        ticker=ticker,
        on_submit=lambda attempt, results: submissions.append((attempt, results))
    )


# ============================================================================
# ATTEMPT FIXTURES
# ============================================================================

@pytest.fixture
def sample_attempt() -> TestAttempt:
    """Create a sample attempt."""
    return TestAttempt(
        test_id="mixed-test",
        user_id="student-1",
        answers={"q1": 1, "q3": "Delhi"},
        score=2,
        total_marks=4,
        time_spent=600,
        analysis=AttemptAnalysis(
            topic_performance={
                "Arithmetic": TopicScore(correct=1, total=1),
                "Geography": TopicScore(correct=1, total=2),
                "Physics": TopicScore(correct=0, total=1),
            },
            suggestions=["Focus more on Physics - you got 0/1 questions correct."]
        ),
        completed_at=datetime(2025, 1, 15, 11, 0)
    )


@pytest.fixture
def memory_store() -> InMemoryAttemptStore:
    return InMemoryAttemptStore()


@pytest.fixture
def tests_json_file(temp_dir, mixed_test) -> Path:
    """Write a tests file containing the mixed test plus an inactive and an other-class test."""
    inactive = mixed_test.model_copy(update={"id": "inactive-test", "is_active": False})
    other_class = mixed_test.model_copy(
        update={"id": "class8-test", "class_number": 8, "title": "Forces and Motion", "subject": "Physics"}
    )
    newer = mixed_test.model_copy(
        update={"id": "newer-test", "title": "Grammar Essentials", "subject": "English",
                "created_at": datetime(2025, 2, 1, 9, 0)}
    )
    tests = [mixed_test, inactive, other_class, newer]

    json_file = temp_dir / "tests.json"
    with open(json_file, 'w', encoding='utf-8') as f:
        json.dump({"tests": [t.model_dump(mode="json", by_alias=True) for t in tests]}, f, indent=2)
    return json_file
