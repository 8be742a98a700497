"""Suite execution: load policies, review objects, match assertions."""

from .matcher import Expectation, check_assertions
from .results import CaseResult, SuiteResult, TestResult
from .runner import Runner

__all__ = [
    "CaseResult",
    "Expectation",
    "Runner",
    "SuiteResult",
    "TestResult",
    "check_assertions",
]
