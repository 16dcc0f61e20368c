"""
Authoring-side checks for tests.

validate_test() reports every problem the admin test editor would flag.
ensure_startable() enforces the subset that prevents a session from starting.
"""
from typing import List

from src.testmaxx import config
from src.testmaxx.exceptions import TestConfigurationError
from src.testmaxx.models.question_models import Question, Test


def validate_test(test: Test) -> List[str]:
    """
    Collect human-readable problems with a test definition.

    Args:
        test: Test to check

    Returns:
        List of problems; empty when the test is valid
    """
    errors = []

    if not test.title.strip():
        errors.append("Test title is required")
    if not test.description.strip():
        errors.append("Test description is required")
    if not test.subject.strip():
        errors.append("Subject is required")
    errors.extend(_startup_problems(test))

    for index, question in enumerate(test.questions, 1):
        errors.extend(
            f"Question {index}: {problem}" for problem in _question_problems(question)
        )

    if test.questions and test.total_marks != len(test.questions):
        errors.append(
            f"Total marks ({test.total_marks}) must equal the number of questions ({len(test.questions)})"
        )

    return errors


def ensure_startable(test: Test) -> None:
    """Raise TestConfigurationError if a session cannot be started for this test."""
    problems = _startup_problems(test)
    if problems:
        raise TestConfigurationError(test.id, problems)


def _startup_problems(test: Test) -> List[str]:
    problems = []
    if test.duration < config.MIN_TEST_DURATION_MINUTES:
        problems.append(
            f"Duration must be at least {config.MIN_TEST_DURATION_MINUTES} minutes"
        )
    if not test.questions:
        problems.append("At least one question is required")
    return problems


def _question_problems(question: Question) -> List[str]:
    problems = []

    if not question.text.strip():
        problems.append("Question text is required")
    if not question.topic.strip():
        problems.append("Topic is required")

    if question.is_choice:
        options = question.options or []
        if len(options) < config.MIN_CHOICE_OPTIONS or any(not opt.strip() for opt in options):
            problems.append("All options must be filled")
        elif question.type == "true-false" and len(options) != config.TRUE_FALSE_OPTIONS:
            problems.append("True/false questions must have exactly 2 options")

        answer = question.correct_answer
        if isinstance(answer, bool) or not isinstance(answer, int):
            problems.append("Correct answer must be an option index")
        elif not 0 <= answer < len(options):
            problems.append("Correct answer must refer to one of the options")
    else:
        answer = question.correct_answer
        if not isinstance(answer, str) or not answer:
            problems.append("Correct answer is required")

    return problems
