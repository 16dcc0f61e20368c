"""
Pydantic models for TestMaxx tests and questions.

Field names follow Python conventions; the camelCase names used by the
document store (correctAnswer, isActive, class, ...) are accepted as aliases.
"""
from datetime import datetime, timezone
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

QuestionType = Literal["mcq", "fill-blank", "true-false", "assertion-reason"]
Difficulty = Literal["easy", "medium", "hard"]
ClassNumber = Literal[6, 7, 8]

# An index into the options for choice questions, free text for fill-blank.
AnswerValue = Union[int, str]

CHOICE_TYPES = ("mcq", "true-false", "assertion-reason")


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so stored and defaulted times compare."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Question(BaseModel):
    """Represents a single test question."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Unique identifier, stable for the lifetime of the test")
    type: QuestionType = Field(description="Question type")
    text: str = Field(alias="question", description="The question prompt")
    options: Optional[List[str]] = Field(
        default=None,
        description="Ordered answer options; absent for fill-blank questions"
    )
    correct_answer: Optional[AnswerValue] = Field(
        default=None,
        description="Zero-based option index, or the expected text for fill-blank"
    )
    explanation: Optional[str] = Field(
        default=None,
        description="Explanation shown after the test is scored"
    )
    topic: str = Field(default="", description="Free-text grouping label")
    difficulty: Difficulty = Field(default="medium", description="Question difficulty")

    @property
    def is_choice(self) -> bool:
        """Whether the answer is an index into the options."""
        return self.type in CHOICE_TYPES

    def option_text(self, index) -> Optional[str]:
        """Return the option at index, or None when the index is not usable."""
        if not self.options or isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self.options):
            return self.options[index]
        return None


class Test(BaseModel):
    """A timed test for one class and subject."""
    __test__ = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Unique identifier of the test")
    title: str = Field(description="Display title")
    description: str = Field(default="", description="Short description of the test")
    class_number: ClassNumber = Field(alias="class", description="Class the test is for (6, 7 or 8)")
    subject: str = Field(description="Subject name")
    duration: int = Field(description="Time allowed in minutes")
    questions: List[Question] = Field(default_factory=list, description="Ordered questions")
    total_marks: Optional[int] = Field(
        default=None,
        description="Marks available; one mark per question"
    )
    is_active: bool = Field(default=True, description="Whether students can take the test")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def _default_total_marks(self) -> "Test":
        if self.total_marks is None:
            self.total_marks = len(self.questions)
        return self

    @property
    def duration_seconds(self) -> int:
        return self.duration * 60

    def get_question(self, question_id: str) -> Optional[Question]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


class TestCatalog(BaseModel):
    """The JSON document holding every test known to a repository."""
    __test__ = False

    tests: List[Test] = Field(default_factory=list)
