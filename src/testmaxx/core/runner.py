"""
TestMaxx Test Runner.

Connects the pieces around a test session:
- looks up tests in a test source
- starts a session for the current user
- persists the attempt when the session is submitted
- keeps the locally computed results even if persisting fails

Also provides a console front end for taking a test from a JSON tests file.
"""
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional

from src.testmaxx import config
from src.testmaxx.core.presenter import ResultsPresenter, option_label
from src.testmaxx.core.session import SessionState, SubmitTrigger, TestSession
from src.testmaxx.core.store import (
    AttemptSink,
    JsonAttemptStore,
    JsonTestRepository,
    TestSource,
)
from src.testmaxx.core.timer import IntervalTicker, format_clock
from src.testmaxx.exceptions import TestMaxxError, TestNotFoundError
from src.testmaxx.models.attempt_models import TestAttempt, TestResults
from src.testmaxx.models.question_models import Test
from src.testmaxx.utils.env_loader import load_env

logger = logging.getLogger(__name__)


class TestRunner:
    """Start sessions and persist their attempts."""
    __test__ = False

    def __init__(
        self,
        test_source: TestSource,
        attempt_sink: AttemptSink,
        user_provider: Callable[[], str],
        ticker_factory: Optional[Callable[[], object]] = None
    ):
        """
        Args:
            test_source: Where tests are read from
            attempt_sink: Where completed attempts are written
            user_provider: Returns the id of the signed-in user
            ticker_factory: Builds the ticker for each session. Defaults to IntervalTicker.
        """
        self.test_source = test_source
        self.attempt_sink = attempt_sink
        self.user_provider = user_provider
        self.ticker_factory = ticker_factory or IntervalTicker
        self.last_results: Optional[TestResults] = None
        self.last_attempt_id: Optional[str] = None
        self.failed_attempts: List[TestAttempt] = []

    def available_tests(self, class_number: int) -> List[Test]:
        return self.test_source.fetch_active_tests_for_class(class_number)

    def start_test(self, test_id: str) -> TestSession:
        """
        Start a session for a test.

        Raises:
            TestNotFoundError: If the test does not exist or is inactive
            TestConfigurationError: If the test cannot be taken
        """
        test = self.test_source.fetch_test_by_id(test_id)
        if test is None or not test.is_active:
            raise TestNotFoundError(test_id)

        user_id = self.user_provider()
        logger.info("Starting test %s for user %s", test.id, user_id)
        return TestSession(
            test,
            user_id,
            ticker=self.ticker_factory(),
            on_submit=self._handle_submission,
        )

    def _handle_submission(self, attempt: TestAttempt, results: TestResults):
        self.last_results = results
        try:
            self.last_attempt_id = self.attempt_sink.persist_attempt(attempt)
        except Exception:
            # Results stay visible to the student; the attempt is kept for a retry.
            logger.exception(
                "Failed to save attempt for test %s by user %s",
                attempt.test_id, attempt.user_id
            )
            self.last_attempt_id = None
            self.failed_attempts.append(attempt)

    def retry_failed(self) -> int:
        """Try to persist attempts whose first save failed. Returns how many succeeded."""
        pending, self.failed_attempts = self.failed_attempts, []
        saved = 0
        for attempt in pending:
            try:
                self.attempt_sink.persist_attempt(attempt)
                saved += 1
            except Exception:
                logger.exception("Retry failed for attempt on test %s", attempt.test_id)
                self.failed_attempts.append(attempt)
        return saved


def run_console_session(session: TestSession, input_fn=input):
    """
    Take a test in the terminal.

    Commands: an option letter or text answers the current question,
    'n'/'p' move, 'g <number>' jumps, 'f' flags, 's' submits, 'q' quits.
    """
    while session.state in (SessionState.IN_PROGRESS, SessionState.SUBMITTING):
        question = session.current_question
        status = session.question_status(question.id).value
        print(
            f"\n[{format_clock(session.seconds_remaining)}] "
            f"Question {session.current_index + 1} of {session.total_questions} ({status})"
        )
        print(f"{question.difficulty} • {question.topic}")
        print(question.text)
        if question.is_choice:
            for index, option in enumerate(question.options or []):
                print(f"  {option_label(index)}. {option}")

        command = input_fn("> ").strip()
        if session.is_finished:
            break

        if command == "n":
            session.next_question()
        elif command == "p":
            session.previous_question()
        elif command.startswith("g "):
            target = command[2:].strip()
            if target.isdigit():
                session.navigate(int(target) - 1)
        elif command == "f":
            session.toggle_flag(question.id)
        elif command == "s":
            confirmation = session.request_submit()
            if confirmation is None:
                break
            print(confirmation.message())
            if input_fn("Submit now? [y/N] ").strip().lower() == "y":
                session.confirm_submit()
            else:
                session.cancel_submit()
        elif command == "q":
            session.abandon(lambda message: input_fn(f"{message} [y/N] ").strip().lower() == "y")
        elif command:
            if question.is_choice:
                index = ord(command.upper()[0]) - ord("A")
                if len(command) == 1 and 0 <= index < len(question.options or []):
                    session.answer(question.id, index)
            else:
                session.answer(question.id, command)

    if session.submit_trigger == SubmitTrigger.TIMEOUT:
        print("\nTime is up! Your test was submitted automatically.")


def main():
    """Take a test from the configured tests file in the terminal."""
    load_env()
    logging.basicConfig(
        level=os.environ.get("TESTMAXX_LOG_LEVEL", config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    data_dir = Path(os.environ.get("TESTMAXX_DATA_DIR", config.DATA_DIR))
    tests_file = os.environ.get("TESTMAXX_TESTS_FILE", str(data_dir / config.TESTS_FILE))
    attempts_file = os.environ.get("TESTMAXX_ATTEMPTS_FILE", str(data_dir / config.ATTEMPTS_FILE))

    print("="*70)
    print("TESTMAXX - TIMED PRACTICE TESTS")
    print("="*70 + "\n")

    try:
        repository = JsonTestRepository(tests_file)
        store = JsonAttemptStore(attempts_file)
        user_id = os.environ.get("TESTMAXX_USER_ID") or input("Student id: ").strip()
        runner = TestRunner(repository, store, user_provider=lambda: user_id)

        class_number = int(input(f"Class {list(config.ALLOWED_CLASSES)}: ").strip())
        tests = runner.available_tests(class_number)
        if not tests:
            print(f"No active tests for class {class_number}.")
            return

        for number, test in enumerate(tests, 1):
            print(f"  {number}. {test.title} ({test.subject}, {test.duration}m, {len(test.questions)} questions)")
        choice = int(input("Choose a test: ").strip()) - 1
        if not 0 <= choice < len(tests):
            print("No such test.")
            return

        session = runner.start_test(tests[choice].id)
        run_console_session(session)

        if session.results is not None:
            ResultsPresenter(session.test, session.results).display_summary()
        else:
            print("Test closed without submitting.")

    except FileNotFoundError as e:
        print(f"\n✗ ERROR: {e}")
        print("\nSet TESTMAXX_TESTS_FILE or create data/tests.json and run again.")
    except (TestMaxxError, ValueError) as e:
        print(f"\n✗ ERROR: {e}")


if __name__ == "__main__":
    main()
