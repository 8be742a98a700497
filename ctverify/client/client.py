"""
Rule client protocol.

The runner never compiles or evaluates policy rules itself. It talks to a
client with three operations: register a template, bind a constraint,
and review an object against a bound constraint. Clients are built by a
zero-argument factory so the runner stays agnostic of the rule engine.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol


class ClientError(Exception):
    """Base class for errors raised by a rule client."""


class UnsupportedVersionError(ClientError):
    """The template's apiVersion is not one this client understands."""


class InvalidTemplateError(ClientError):
    """The template is well-formed YAML but not a valid template."""


class RuleCompileError(ClientError):
    """The template's rule body failed to compile."""


class UnrecognizedConstraintError(ClientError):
    """The document is not shaped like any constraint."""


class UnknownConstraintKindError(ClientError):
    """No registered template governs the constraint's kind."""


class InvalidConstraintError(ClientError):
    """The constraint was rejected by its template (e.g. bad parameters)."""


class ReviewError(ClientError):
    """Evaluating a constraint against an object failed."""


class Client(Protocol):
    """Protocol for compiling templates, binding constraints and reviewing objects."""

    def add_template(self, template: dict[str, Any]) -> str:
        """
        Validate, compile and register a decoded template.

        Returns:
            The constraint kind the template governs.
        """
        ...

    def add_constraint(self, constraint: dict[str, Any]) -> None:
        """Bind a decoded constraint to its registered template."""
        ...

    def review(self, constraint: dict[str, Any], obj: dict[str, Any]) -> list[str]:
        """
        Evaluate a bound constraint against an object.

        Returns:
            Violation messages in rule order; empty when the object complies.
        """
        ...


ClientFactory = Callable[[], Client]
