"""
Boundary contracts with the external document store, and file-backed
implementations of them.

TestSource and AttemptSink describe what the engine needs from the store.
JsonTestRepository reads tests from a JSON document shaped like the store's
`tests` collection; JsonAttemptStore appends attempts to a JSON Lines file.
"""
import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from pydantic import ValidationError

from src.testmaxx.exceptions import PersistenceError
from src.testmaxx.models.attempt_models import TestAttempt
from src.testmaxx.models.question_models import Test, TestCatalog

logger = logging.getLogger(__name__)


class TestSource(Protocol):
    """Read access to tests."""

    def fetch_active_tests_for_class(self, class_number: int) -> List[Test]:
        ...

    def fetch_test_by_id(self, test_id: str) -> Optional[Test]:
        ...


class AttemptSink(Protocol):
    """Write access for completed attempts."""

    def persist_attempt(self, attempt: TestAttempt) -> str:
        ...


class JsonTestRepository:
    """Tests loaded from a JSON file: either a list of tests or {"tests": [...]}."""

    def __init__(self, tests_file: str):
        self.tests_file = Path(tests_file)
        self._tests: Optional[List[Test]] = None

    def load(self) -> List[Test]:
        """
        (Re)load tests from disk.

        Raises:
            FileNotFoundError: If the tests file does not exist
            PersistenceError: If the file is not a valid test catalog
        """
        if not self.tests_file.exists():
            raise FileNotFoundError(f"Tests file '{self.tests_file}' not found.")

        try:
            with open(self.tests_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if isinstance(data, list):
                data = {"tests": data}
            catalog = TestCatalog.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise PersistenceError(f"Invalid tests file '{self.tests_file}': {e}", e) from e

        self._tests = catalog.tests
        logger.info("Loaded %d tests from %s", len(self._tests), self.tests_file)
        return self._tests

    @property
    def tests(self) -> List[Test]:
        if self._tests is None:
            self.load()
        return self._tests

    def fetch_active_tests_for_class(self, class_number: int) -> List[Test]:
        """Active tests for a class, newest first."""
        matching = [
            test for test in self.tests
            if test.class_number == class_number and test.is_active
        ]
        return sorted(matching, key=lambda test: test.created_at, reverse=True)

    def fetch_test_by_id(self, test_id: str) -> Optional[Test]:
        for test in self.tests:
            if test.id == test_id:
                return test
        return None

    def search(
        self,
        class_number: Optional[int] = None,
        subject: Optional[str] = None,
        term: str = ""
    ) -> List[Test]:
        """
        Filter active tests the way the tests page does.

        Args:
            class_number: Only tests for this class; None for all classes
            subject: Only tests for this subject; None for all subjects
            term: Case-insensitive substring of the title or subject
        """
        term = term.lower()
        results = []
        for test in self.tests:
            if not test.is_active:
                continue
            if class_number is not None and test.class_number != class_number:
                continue
            if subject is not None and test.subject != subject:
                continue
            if term and term not in test.title.lower() and term not in test.subject.lower():
                continue
            results.append(test)
        return results


class JsonAttemptStore:
    """Attempts appended to a JSON Lines file, one document per line."""

    def __init__(self, attempts_file: str):
        self.attempts_file = Path(attempts_file)
        self._lock = threading.Lock()

    def persist_attempt(self, attempt: TestAttempt) -> str:
        """
        Append an attempt. Persisting an attempt whose id is already stored is a no-op.

        Returns:
            The stored attempt id

        Raises:
            PersistenceError: If the file cannot be written
        """
        attempt_id = attempt.id or uuid.uuid4().hex
        stored = attempt.model_copy(update={"id": attempt_id})

        with self._lock:
            if attempt.id and self._find(attempt.id) is not None:
                logger.debug("Attempt %s already stored", attempt.id)
                return attempt.id

            try:
                self.attempts_file.parent.mkdir(parents=True, exist_ok=True)
                with open(self.attempts_file, 'a', encoding='utf-8') as f:
                    f.write(stored.model_dump_json(by_alias=True) + '\n')
            except OSError as e:
                raise PersistenceError(
                    f"Could not write attempt to '{self.attempts_file}': {e}", e
                ) from e

        logger.info("Stored attempt %s for test %s", attempt_id, attempt.test_id)
        return attempt_id

    def get_attempts_by_user(self, user_id: str) -> List[TestAttempt]:
        """All attempts by a user, most recent first."""
        attempts = [a for a in self._read_all() if a.user_id == user_id]
        return sorted(attempts, key=lambda a: a.completed_at, reverse=True)

    def _find(self, attempt_id: str) -> Optional[TestAttempt]:
        for attempt in self._read_all():
            if attempt.id == attempt_id:
                return attempt
        return None

    def _read_all(self) -> List[TestAttempt]:
        if not self.attempts_file.exists():
            return []

        attempts = []
        try:
            with open(self.attempts_file, 'r', encoding='utf-8') as f:
                for line_number, line in enumerate(f, 1):
                    if not line.strip():
                        continue
                    try:
                        attempts.append(TestAttempt.model_validate_json(line))
                    except ValidationError as e:
                        logger.warning(
                            "Skipping invalid attempt on line %d of %s: %s",
                            line_number, self.attempts_file, e
                        )
        except OSError as e:
            raise PersistenceError(
                f"Could not read attempts from '{self.attempts_file}': {e}", e
            ) from e
        return attempts


class InMemoryAttemptStore:
    """Attempts kept in a dictionary; for tests and demos."""

    def __init__(self):
        self.attempts: Dict[str, TestAttempt] = {}

    def persist_attempt(self, attempt: TestAttempt) -> str:
        attempt_id = attempt.id or uuid.uuid4().hex
        if attempt_id not in self.attempts:
            self.attempts[attempt_id] = attempt.model_copy(update={"id": attempt_id})
        return attempt_id

    def get_attempts_by_user(self, user_id: str) -> List[TestAttempt]:
        attempts = [a for a in self.attempts.values() if a.user_id == user_id]
        return sorted(attempts, key=lambda a: a.completed_at, reverse=True)
