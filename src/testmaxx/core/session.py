"""
Test session state machine.

A TestSession owns everything that changes while a student takes a test:
the current question, the answer map, the flagged questions and the
countdown. It is driven by user actions (answer, navigate, flag, submit,
abandon) and by the countdown timer.

States:
    IN_PROGRESS -> SUBMITTING -> SUBMITTED
    SUBMITTING  -> IN_PROGRESS   (submit confirmation cancelled)
    IN_PROGRESS -> SUBMITTED     (timer expiry)
    IN_PROGRESS -> CLOSED        (abandoned after confirmation)

The move to SUBMITTED runs at most once per session, whichever of the user
or the timer gets there first.
"""
import logging
import threading
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from src.testmaxx import config
from src.testmaxx.core.scoring import build_attempt, score_test
from src.testmaxx.core.timer import CountdownTimer, ManualTicker
from src.testmaxx.core.validation import ensure_startable
from src.testmaxx.models.attempt_models import (
    AnswerMap,
    SubmitConfirmation,
    TestAttempt,
    TestResults,
)
from src.testmaxx.models.question_models import AnswerValue, Question, Test

logger = logging.getLogger(__name__)

SubmitListener = Callable[[TestAttempt, TestResults], None]


class SessionState(str, Enum):
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    CLOSED = "closed"


class QuestionStatus(str, Enum):
    ANSWERED = "answered"
    FLAGGED = "flagged"
    ANSWERED_FLAGGED = "answered-flagged"
    UNANSWERED = "unanswered"


class SubmitTrigger(str, Enum):
    MANUAL = "manual"
    TIMEOUT = "timeout"


class TestSession:
    """In-memory state of one test being taken by one user."""
    __test__ = False

    def __init__(
        self,
        test: Test,
        user_id: str,
        ticker=None,
        on_submit: Optional[SubmitListener] = None,
        autostart: bool = True
    ):
        """
        Initialize a session for a test.

        Args:
            test: Test to take; treated as immutable for the session
            user_id: Opaque identifier of the current user
            ticker: Tick source for the countdown. Defaults to a ManualTicker.
            on_submit: Called once with the attempt and results after submission
            autostart: Start the countdown immediately

        Raises:
            TestConfigurationError: If the test has no questions or is too short
        """
        ensure_startable(test)

        self.test = test
        self.user_id = user_id
        self.on_submit = on_submit
        self.state = SessionState.IN_PROGRESS
        self.current_index = 0
        self.submit_trigger: Optional[SubmitTrigger] = None
        self.attempt: Optional[TestAttempt] = None
        self.results: Optional[TestResults] = None

        self._answers: Dict[str, AnswerValue] = {}
        self._flags: Set[str] = set()
        self._question_ids = {question.id for question in test.questions}
        self._submit_lock = threading.Lock()
        self._has_submitted = False

        self.timer = CountdownTimer(
            test.duration,
            ticker if ticker is not None else ManualTicker(),
            on_expire=self._on_timer_expired,
        )
        if autostart:
            self.start()

    def start(self):
        if self.state == SessionState.IN_PROGRESS:
            self.timer.start()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def answers(self) -> AnswerMap:
        return dict(self._answers)

    @property
    def flagged(self) -> Set[str]:
        return set(self._flags)

    @property
    def seconds_remaining(self) -> int:
        return self.timer.seconds_remaining

    @property
    def time_spent(self) -> int:
        return self.timer.elapsed_seconds

    @property
    def total_questions(self) -> int:
        return len(self.test.questions)

    @property
    def current_question(self) -> Question:
        return self.test.questions[self.current_index]

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def unanswered_count(self) -> int:
        return self.total_questions - self.answered_count

    @property
    def is_finished(self) -> bool:
        return self.state in (SessionState.SUBMITTED, SessionState.CLOSED)

    def question_status(self, question_id: str) -> QuestionStatus:
        is_answered = question_id in self._answers
        is_flagged = question_id in self._flags
        if is_answered and is_flagged:
            return QuestionStatus.ANSWERED_FLAGGED
        if is_answered:
            return QuestionStatus.ANSWERED
        if is_flagged:
            return QuestionStatus.FLAGGED
        return QuestionStatus.UNANSWERED

    def question_statuses(self) -> List[QuestionStatus]:
        """Status of every question, in test order."""
        return [self.question_status(question.id) for question in self.test.questions]

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def answer(self, question_id: str, value: AnswerValue):
        """Select an answer; selecting the current answer again clears it."""
        if self.state != SessionState.IN_PROGRESS:
            logger.debug("Ignoring answer for %s in state %s", question_id, self.state.value)
            return
        if question_id not in self._question_ids:
            logger.debug("Ignoring answer for unknown question %s", question_id)
            return
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            logger.debug("Ignoring answer of type %s for %s", type(value).__name__, question_id)
            return

        if question_id in self._answers and _same_answer(self._answers[question_id], value):
            del self._answers[question_id]
        else:
            self._answers[question_id] = value

    def navigate(self, index: int):
        if self.state != SessionState.IN_PROGRESS:
            return
        if 0 <= index < self.total_questions:
            self.current_index = index
        else:
            logger.debug("Ignoring navigation to out-of-range index %d", index)

    def next_question(self):
        self.navigate(self.current_index + 1)

    def previous_question(self):
        self.navigate(self.current_index - 1)

    def toggle_flag(self, question_id: str):
        if self.state != SessionState.IN_PROGRESS or question_id not in self._question_ids:
            return
        if question_id in self._flags:
            self._flags.remove(question_id)
        else:
            self._flags.add(question_id)

    def request_submit(self) -> Optional[SubmitConfirmation]:
        """
        Ask to submit the test.

        Returns:
            The counts to show in the confirmation prompt, or None if the
            session is no longer in progress
        """
        with self._submit_lock:
            if self.state != SessionState.IN_PROGRESS:
                return None
            self.state = SessionState.SUBMITTING
        return SubmitConfirmation(
            answered=self.answered_count,
            unanswered=self.unanswered_count,
            flagged=len(self._flags),
            total=self.total_questions,
        )

    def cancel_submit(self):
        """Return from the submit confirmation to the test."""
        with self._submit_lock:
            if self.state == SessionState.SUBMITTING:
                self.state = SessionState.IN_PROGRESS

    def confirm_submit(self) -> Optional[TestResults]:
        """Finalize the submission and return the scored results."""
        if self.state not in (SessionState.SUBMITTING, SessionState.IN_PROGRESS):
            return self.results
        return self._finalize(SubmitTrigger.MANUAL)

    def abandon(self, confirm: Callable[[str], bool]) -> bool:
        """
        Close the test without submitting. Progress is discarded.

        Args:
            confirm: Yes/no prompt shown to the user; receives the warning message

        Returns:
            True if the session was closed
        """
        if self.state != SessionState.IN_PROGRESS:
            return False
        if not confirm(config.ABANDON_CONFIRMATION_MESSAGE):
            return False

        with self._submit_lock:
            if self.state != SessionState.IN_PROGRESS:
                return False
            self.state = SessionState.CLOSED
            self.timer.stop()
            self._answers.clear()
            self._flags.clear()

        logger.info("Session for test %s abandoned by user %s", self.test.id, self.user_id)
        return True

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def _on_timer_expired(self):
        self._finalize(SubmitTrigger.TIMEOUT)

    def _finalize(self, trigger: SubmitTrigger) -> Optional[TestResults]:
        with self._submit_lock:
            if self._has_submitted or self.state == SessionState.CLOSED:
                logger.debug(
                    "Ignoring %s submission for test %s: already finished",
                    trigger.value, self.test.id
                )
                return self.results
            self._has_submitted = True
            self.state = SessionState.SUBMITTED
            self.timer.stop()
            answers = dict(self._answers)
            time_spent = self.timer.elapsed_seconds

        results = score_test(self.test, answers, time_spent)
        attempt = build_attempt(self.test, self.user_id, answers, results)

        self.results = results
        self.attempt = attempt
        self.submit_trigger = trigger

        logger.info(
            "Test %s submitted (%s) by user %s: %d/%d in %ds",
            self.test.id, trigger.value, self.user_id,
            results.score, results.total_questions, time_spent
        )

        if self.on_submit is not None:
            self.on_submit(attempt, results)
        return results


def _same_answer(current: AnswerValue, value: AnswerValue) -> bool:
    return type(current) is type(value) and current == value
