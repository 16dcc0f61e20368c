"""
Exceptions raised by the TestMaxx engine.
"""
from typing import List, Optional


class TestMaxxError(Exception):
    """Base class for all TestMaxx errors."""


class TestConfigurationError(TestMaxxError):
    """A test cannot be started because its configuration is invalid."""

    __test__ = False

    def __init__(self, test_id: str, problems: List[str]):
        self.test_id = test_id
        self.problems = list(problems)
        details = "; ".join(self.problems)
        super().__init__(f"Test '{test_id}' cannot be started: {details}")


class TestNotFoundError(TestMaxxError):
    """The requested test does not exist or is not active."""

    __test__ = False

    def __init__(self, test_id: str):
        self.test_id = test_id
        super().__init__(f"Test '{test_id}' not found or not active.")


class PersistenceError(TestMaxxError):
    """Reading from or writing to a store failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)
