"""
Pydantic models for scoring output and persisted test attempts.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel

from src.testmaxx.models.question_models import as_utc

# Strict so that a bool answer is never stored as an option index.
AnswerMap = Dict[str, Union[StrictInt, StrictStr]]


class TopicScore(BaseModel):
    """Correct and total counts for one topic label."""
    correct: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    @property
    def percentage(self) -> int:
        """Whole-number percentage, rounded half up."""
        return round_half_up_percentage(self.correct, self.total)


class QuestionResult(BaseModel):
    """Outcome for a single question, ready to render."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    question_id: str
    question: str = Field(description="The question prompt")
    user_answer: Optional[str] = Field(
        default=None,
        description="The submitted answer as text; None when unanswered"
    )
    correct_answer: Optional[str] = Field(
        default=None,
        description="The correct answer as text; None when the question has no usable answer"
    )
    is_correct: bool
    explanation: Optional[str] = None
    topic: str
    difficulty: str
    options: Optional[List[str]] = None
    user_index: Optional[int] = Field(
        default=None,
        description="Submitted option index for choice questions, when it refers to an option"
    )
    correct_index: Optional[int] = Field(
        default=None,
        description="Correct option index for choice questions, when it refers to an option"
    )


class TestResults(BaseModel):
    """Summary produced by the scoring engine for one submission."""
    __test__ = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    score: int = Field(ge=0, description="Number of correct answers")
    total_questions: int = Field(ge=0)
    percentage: int = Field(ge=0, le=100)
    time_spent: int = Field(ge=0, description="Seconds elapsed")
    question_results: List[QuestionResult] = Field(default_factory=list)
    topic_performance: Dict[str, TopicScore] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)


class AttemptAnalysis(BaseModel):
    """Analysis stored alongside an attempt."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    topic_performance: Dict[str, TopicScore] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)


class TestAttempt(BaseModel):
    """One completed run of a test by one user."""
    __test__ = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: Optional[str] = Field(default=None, description="Identifier assigned by the store")
    test_id: str
    user_id: str
    answers: AnswerMap = Field(default_factory=dict)
    score: int = Field(ge=0)
    total_marks: int = Field(ge=0)
    time_spent: int = Field(ge=0, description="Seconds elapsed")
    analysis: AttemptAnalysis = Field(default_factory=AttemptAnalysis)
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("completed_at")
    @classmethod
    def _completed_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @property
    def percentage(self) -> int:
        return round_half_up_percentage(self.score, self.total_marks)


class SubmitConfirmation(BaseModel):
    """Counts shown to the test-taker before a submission is finalized."""
    answered: int
    unanswered: int
    flagged: int
    total: int

    @property
    def has_unanswered(self) -> bool:
        return self.unanswered > 0

    def message(self) -> str:
        text = f"You have answered {self.answered} out of {self.total} questions."
        if self.has_unanswered:
            text += f" {self.unanswered} questions remain unanswered."
        return text


def round_half_up_percentage(part: int, whole: int) -> int:
    """Return part/whole as a whole percentage rounded half up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (2 * whole)
