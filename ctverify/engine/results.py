from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CaseResult:
    """Outcome of one Case. `error` is None when every assertion held."""

    name: str = ""
    error: BaseException | None = None
    runtime: float = field(default=0.0, compare=False)

    @property
    def passed(self) -> bool:
        return self.error is None


@dataclass
class TestResult:
    """
    Outcome of one Test.

    A test-level error (bad suite shape, template or constraint failure)
    means no Case ran, so `case_results` is empty.
    """

    __test__ = False  # not a pytest class

    name: str = ""
    error: BaseException | None = None
    case_results: list[CaseResult] = field(default_factory=list)
    runtime: float = field(default=0.0, compare=False)

    @property
    def passed(self) -> bool:
        return self.error is None and all(c.passed for c in self.case_results)


@dataclass
class SuiteResult:
    name: str = ""
    test_results: list[TestResult] = field(default_factory=list)
    runtime: float = field(default=0.0, compare=False)

    @property
    def passed(self) -> bool:
        return all(t.passed for t in self.test_results)
