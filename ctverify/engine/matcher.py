"""
Assertion matching.

Every assertion is checked on its own against the full list of
violations, narrowed only by its own message filter. Assertions do not
consume violations, so two assertions with overlapping filters may both
count the same violation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal, Sequence

from ..errors import InvalidRegexError, InvalidYAMLError, NumViolationsError
from ..suite.schema import Assertion


# A case with no assertions expects the object to be allowed.
IMPLICIT_ALLOW = Assertion(violations="no")


@dataclass(frozen=True)
class Expectation:
    """Parsed violation-count specifier."""

    mode: Literal["any", "none", "exactly"]
    count: int = 0

    @classmethod
    def parse(cls, value: Any) -> "Expectation":
        # bool is an int subclass; treat it like the yes/no it came from.
        if value is None or value is True or value == "yes":
            return cls(mode="any")
        if value is False or value == "no":
            return cls(mode="none")
        if isinstance(value, int) and not isinstance(value, bool):
            if value < 0:
                raise InvalidYAMLError(f"violations must not be negative, got {value}")
            return cls(mode="exactly", count=value)
        if isinstance(value, str):
            raise InvalidYAMLError(f'violations must be "yes", "no" or an integer, got {value!r}')
        raise InvalidYAMLError(f"violations has unsupported type {type(value).__name__}")

    def satisfied_by(self, n: int) -> bool:
        if self.mode == "any":
            return n >= 1
        if self.mode == "none":
            return n == 0
        return n == self.count

    def __str__(self) -> str:
        if self.mode == "any":
            return "at least 1"
        if self.mode == "none":
            return "0"
        return str(self.count)


def filter_violations(assertion: Assertion, violations: Sequence[str]) -> list[str]:
    """Violations selected by the assertion's message pattern (all if it has none)."""
    if assertion.message is None:
        return list(violations)
    try:
        pattern = re.compile(assertion.message)
    except (re.error, TypeError) as e:
        raise InvalidRegexError(f"invalid message pattern {assertion.message!r}: {e}") from e
    return [v for v in violations if pattern.search(v)]


def check_assertion(assertion: Assertion, violations: Sequence[str]) -> None:
    """Raise if `violations` do not satisfy `assertion`."""
    matched = filter_violations(assertion, violations)
    expected = Expectation.parse(assertion.violations)
    if expected.satisfied_by(len(matched)):
        return

    what = "violations" if assertion.message is None else f"violations matching {assertion.message!r}"
    raise NumViolationsError(
        f"expected {expected} {what}, got {len(matched)}",
        assertion=assertion,
        expected=str(expected),
        got=len(matched),
    )


def check_assertions(assertions: Sequence[Assertion], violations: Sequence[str]) -> None:
    """
    Check a case's assertions in order, stopping at the first failure.

    Raises:
        InvalidRegexError: a message filter does not compile
        InvalidYAMLError: a violations specifier is malformed
        NumViolationsError: an expectation does not hold
    """
    for assertion in assertions or (IMPLICIT_ALLOW,):
        check_assertion(assertion, violations)
