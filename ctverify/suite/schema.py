from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Assertion:
    """
    Expectation about the violations observed for one Case.

    ``violations`` is kept as authored: None (unspecified, means "yes"),
    the strings "yes"/"no", or a non-negative int. Anything else is
    rejected by the matcher, not here.

    ``message`` is a regular expression; None considers every violation.
    """

    violations: int | str | None = None
    message: str | None = None


@dataclass(frozen=True)
class Case:
    object: str = ""
    name: str = ""
    assertions: tuple[Assertion, ...] = ()


@dataclass(frozen=True)
class Test:
    __test__ = False  # not a pytest class

    template: str = ""
    constraint: str = ""
    name: str = ""
    cases: tuple[Case, ...] = ()


@dataclass(frozen=True)
class Suite:
    tests: tuple[Test, ...] = ()
    name: str = ""
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
