"""
Rule clients: compile templates, bind constraints, review objects.

The runner depends only on the Client protocol. LocalClient is the
default implementation; pass any other ClientFactory to the runner to
use a different rule engine.
"""

from __future__ import annotations

from .client import (
    Client,
    ClientError,
    ClientFactory,
    InvalidConstraintError,
    InvalidTemplateError,
    ReviewError,
    RuleCompileError,
    UnknownConstraintKindError,
    UnrecognizedConstraintError,
    UnsupportedVersionError,
)
from .drivers import DEFAULT_DRIVERS, Driver, JsonSchemaDriver
from .local import LocalClient, new_local_client

__all__ = [
    # Protocol
    "Client",
    "ClientFactory",
    # Errors
    "ClientError",
    "InvalidConstraintError",
    "InvalidTemplateError",
    "ReviewError",
    "RuleCompileError",
    "UnknownConstraintKindError",
    "UnrecognizedConstraintError",
    "UnsupportedVersionError",
    # Implementations
    "DEFAULT_DRIVERS",
    "Driver",
    "JsonSchemaDriver",
    "LocalClient",
    "new_local_client",
]
