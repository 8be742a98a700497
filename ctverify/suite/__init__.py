"""Declarative test suites (suites as data, evaluation as code)."""

from .filter import Filter
from .load import parse_suite, read_suite, read_suites
from .schema import Assertion, Case, Suite, Test

__all__ = [
    "Assertion",
    "Case",
    "Filter",
    "Suite",
    "Test",
    "parse_suite",
    "read_suite",
    "read_suites",
]
