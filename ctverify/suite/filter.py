from __future__ import annotations

import re
from dataclasses import dataclass

from .schema import Case, Test


SEPARATOR = "//"


@dataclass(frozen=True)
class Filter:
    """
    Select which Tests and Cases of a suite run.

    Both patterns are unanchored regular expressions matched against names.
    An empty pattern selects everything.
    """

    tests: str = ""
    cases: str = ""

    def __post_init__(self) -> None:
        # invalid patterns raise re.error here
        re.compile(self.tests)
        re.compile(self.cases)

    @classmethod
    def parse(cls, run: str | None) -> "Filter":
        """Parse "tests//cases" (either half may be empty)."""
        if not run:
            return cls()
        tests, _, cases = run.partition(SEPARATOR)
        return cls(tests=tests, cases=cases)

    def matches_test(self, test: Test) -> bool:
        return not self.tests or re.search(self.tests, test.name) is not None

    def matches_case(self, case: Case) -> bool:
        return not self.cases or re.search(self.cases, case.name) is not None
