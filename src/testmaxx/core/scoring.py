"""
Scoring engine for submitted tests.

score_test() is a pure function of the test, the answer map and the elapsed
time. It never raises on malformed question data: a question whose correct
answer is missing, or an answer of the wrong type, is simply scored incorrect.

Answers are compared with strict equality. Choice questions match on the
option index, fill-blank questions on the exact string (case and surrounding
whitespace included). Topic labels are grouped verbatim.
"""
import logging
from typing import Dict, List, Optional

from src.testmaxx import config
from src.testmaxx.models.attempt_models import (
    AnswerMap,
    AttemptAnalysis,
    QuestionResult,
    TestAttempt,
    TestResults,
    TopicScore,
    round_half_up_percentage,
)
from src.testmaxx.models.question_models import Question, Test

logger = logging.getLogger(__name__)


def score_test(test: Test, answers: AnswerMap, time_spent: int = 0) -> TestResults:
    """
    Score a submission.

    Args:
        test: The test that was taken
        answers: Mapping of question id to submitted index or text
        time_spent: Seconds elapsed when the test was submitted

    Returns:
        TestResults with per-question outcomes, topic performance and suggestions
    """
    correct_count = 0
    question_results: List[QuestionResult] = []
    topic_performance: Dict[str, TopicScore] = {}

    for question in test.questions:
        submitted = answers.get(question.id)
        correct = is_answer_correct(question, submitted)
        if correct:
            correct_count += 1

        topic = topic_performance.setdefault(question.topic, TopicScore())
        topic.total += 1
        if correct:
            topic.correct += 1

        question_results.append(
            QuestionResult(
                question_id=question.id,
                question=question.text,
                user_answer=render_answer(question, submitted),
                correct_answer=render_answer(question, question.correct_answer),
                is_correct=correct,
                explanation=question.explanation,
                topic=question.topic,
                difficulty=question.difficulty,
                options=list(question.options) if question.options is not None else None,
                user_index=option_index(question, submitted),
                correct_index=option_index(question, question.correct_answer),
            )
        )

    total_questions = len(test.questions)
    percentage = round_half_up_percentage(correct_count, total_questions)

    logger.debug(
        "Scored test %s: %d/%d (%d%%)", test.id, correct_count, total_questions, percentage
    )

    return TestResults(
        score=correct_count,
        total_questions=total_questions,
        percentage=percentage,
        time_spent=max(int(time_spent), 0),
        question_results=question_results,
        topic_performance=topic_performance,
        suggestions=build_suggestions(topic_performance, percentage),
    )


def is_answer_correct(question: Question, submitted) -> bool:
    """Strict comparison of a submitted value with the question's correct answer."""
    expected = question.correct_answer
    if submitted is None or expected is None:
        return False

    if question.is_choice:
        if not _is_index(submitted) or not _is_index(expected):
            return False
        return submitted == expected

    if not isinstance(submitted, str) or not isinstance(expected, str):
        return False
    return submitted == expected


def render_answer(question: Question, value) -> Optional[str]:
    """Return the text to display for an answer value, or None if there is none."""
    if value is None:
        return None
    if question.is_choice:
        return question.option_text(value) if _is_index(value) else None
    return value if isinstance(value, str) else None


def option_index(question: Question, value) -> Optional[int]:
    """Return value when it is a usable index into the question's options, else None."""
    if question.is_choice and question.option_text(value) is not None:
        return value
    return None


def build_suggestions(topic_performance: Dict[str, TopicScore], percentage: int) -> List[str]:
    """
    Build improvement suggestions.

    Weak topics come first, then fully correct topics, then exactly one
    closing message chosen by the overall percentage.
    """
    suggestions = []

    for topic, performance in topic_performance.items():
        if performance.total and performance.correct * 100 < config.TOPIC_FOCUS_THRESHOLD * performance.total:
            suggestions.append(
                config.FOCUS_TOPIC_TEMPLATE.format(
                    topic=topic, correct=performance.correct, total=performance.total
                )
            )

    for topic, performance in topic_performance.items():
        if performance.total and performance.correct == performance.total:
            suggestions.append(config.GREAT_JOB_TEMPLATE.format(topic=topic))

    suggestions.append(closing_message(percentage))
    return suggestions


def closing_message(percentage: int) -> str:
    if percentage >= config.OUTSTANDING_THRESHOLD:
        return config.OUTSTANDING_MESSAGE
    if percentage >= config.GOOD_THRESHOLD:
        return config.GOOD_MESSAGE
    if percentage >= config.ON_TRACK_THRESHOLD:
        return config.ON_TRACK_MESSAGE
    return config.NEEDS_REVIEW_MESSAGE


def build_attempt(
    test: Test,
    user_id: str,
    answers: AnswerMap,
    results: TestResults
) -> TestAttempt:
    """Build the attempt record persisted for a scored submission."""
    return TestAttempt(
        test_id=test.id,
        user_id=user_id,
        answers=dict(answers),
        score=results.score,
        total_marks=results.total_questions,
        time_spent=results.time_spent,
        analysis=AttemptAnalysis(
            topic_performance={
                topic: performance.model_copy()
                for topic, performance in results.topic_performance.items()
            },
            suggestions=list(results.suggestions),
        ),
    )


def _is_index(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
