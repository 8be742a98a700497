"""
Error taxonomy for suite verification.

Each class names the stage that detected the failure. Results store
instances of these; the underlying cause (yaml error, client error,
regex error) is chained on ``__cause__``.

File-not-found conditions are not part of the taxonomy: the file
provider's ``FileNotFoundError`` is stored unchanged.
"""

from __future__ import annotations

from typing import Any


class VerifyError(Exception):
    """Base class for every failure recorded in a result tree."""


class CreatingClientError(VerifyError):
    """The rule client factory failed; nothing could be evaluated."""


class InvalidSuiteError(VerifyError):
    """A Test is missing its template or constraint reference."""


class AddingTemplateError(VerifyError):
    """The template is undecodable, unsupported, invalid, or fails to compile."""


class NotATemplateError(VerifyError):
    """The template file does not declare a template kind."""


class AddingConstraintError(VerifyError):
    """The constraint is undecodable or was rejected by the client."""


class NotAConstraintError(VerifyError):
    """The constraint file is not shaped like any constraint."""


class InvalidCaseError(VerifyError):
    """A Case is missing its object reference."""


class InvalidRegexError(VerifyError):
    """An assertion's message filter is not a valid regular expression."""


class InvalidYAMLError(VerifyError):
    """A case document or an assertion's violation count is malformed."""


class NumViolationsError(VerifyError):
    """The observed violations do not satisfy an assertion."""

    def __init__(self, message: str, *, assertion: Any = None, expected: str = "", got: int = 0):
        super().__init__(message)
        self.assertion = assertion
        self.expected = expected
        self.got = got


class RunCancelledError(VerifyError):
    """The run was cancelled before this Test or Case started."""
