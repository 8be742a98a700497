from __future__ import annotations

from typing import Any

import yaml

from ..client.client import Client, UnrecognizedConstraintError
from ..errors import (
    AddingConstraintError,
    AddingTemplateError,
    InvalidYAMLError,
    NotAConstraintError,
    NotATemplateError,
)
from ..fs import FileProvider


TEMPLATE_KIND = "ConstraintTemplate"


def _decode(data: bytes) -> Any:
    return yaml.safe_load(data.decode("utf-8"))


def _read(filesystem: FileProvider, path: str, error: type[Exception]) -> bytes:
    try:
        return filesystem.read(path)
    except FileNotFoundError:
        raise
    except OSError as e:
        raise error(f"reading {path}: {e}") from e


def read_template(filesystem: FileProvider, path: str, client: Client) -> str:
    """
    Load the template at `path` and register it with `client`.

    Returns:
        The constraint kind the template governs.

    Raises:
        FileNotFoundError: the file does not exist
        NotATemplateError: the document is not a ConstraintTemplate
        AddingTemplateError: the file is unreadable or undecodable, or the
            client rejected the template
    """
    data = _read(filesystem, path, AddingTemplateError)
    try:
        doc = _decode(data)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise AddingTemplateError(f"decoding template {path}: {e}") from e

    if not isinstance(doc, dict):
        raise AddingTemplateError(f"template {path} is not a mapping")
    if doc.get("kind") != TEMPLATE_KIND:
        raise NotATemplateError(f"{path} has kind {doc.get('kind')!r}, want {TEMPLATE_KIND!r}")

    try:
        return client.add_template(doc)
    except Exception as e:
        raise AddingTemplateError(f"adding template {path}: {e}") from e


def read_constraint(filesystem: FileProvider, path: str, client: Client, template_kind: str) -> dict[str, Any]:
    """
    Load the constraint at `path` and bind it with `client`.

    The constraint must be an instance of the template just loaded
    (`template_kind`); a constraint for some other registered template
    is rejected.

    Raises:
        FileNotFoundError: the file does not exist
        NotAConstraintError: the document is not shaped like a constraint
        AddingConstraintError: the file is unreadable or undecodable, the
            kind differs from `template_kind`, or the client rejected it
    """
    data = _read(filesystem, path, AddingConstraintError)
    try:
        doc = _decode(data)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise AddingConstraintError(f"decoding constraint {path}: {e}") from e

    if not isinstance(doc, dict):
        raise AddingConstraintError(f"constraint {path} is not a mapping")

    try:
        client.add_constraint(doc)
    except UnrecognizedConstraintError as e:
        raise NotAConstraintError(f"{path} is not a constraint: {e}") from e
    except Exception as e:
        raise AddingConstraintError(f"adding constraint {path}: {e}") from e

    if doc.get("kind") != template_kind:
        raise AddingConstraintError(
            f"constraint {path} has kind {doc.get('kind')!r}, but the template declares {template_kind!r}"
        )
    return doc


def read_object(filesystem: FileProvider, path: str) -> dict[str, Any]:
    """
    Load the object under review.

    Raises:
        FileNotFoundError: the file does not exist
        InvalidYAMLError: the file does not decode to a mapping
    """
    data = filesystem.read(path)
    try:
        doc = _decode(data)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise InvalidYAMLError(f"decoding object {path}: {e}") from e

    if not isinstance(doc, dict):
        raise InvalidYAMLError(f"object {path} is not a mapping")
    return doc
