"""
TestMaxx Test-Taking and Scoring Engine.

A Python package for running timed K-8 practice tests: a countdown-driven
test session, client-side scoring with per-topic analysis, and improvement
suggestions for the student.
"""

__version__ = "1.0.0"
__author__ = "TestMaxx Development Team"

from src.testmaxx.core.runner import TestRunner
from src.testmaxx.core.scoring import score_test
from src.testmaxx.core.session import TestSession

__all__ = [
    "TestRunner",
    "TestSession",
    "score_test",
]
