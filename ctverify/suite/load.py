from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .schema import Assertion, Case, Suite, Test

logger = logging.getLogger(__name__)


SUITE_KIND = "Suite"
SUITE_EXTENSIONS = (".yaml", ".yml")


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _coerce_str(value: Any) -> str:
    return str(value).strip() if isinstance(value, str) else ""


def _coerce_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _yes_no(value: Any) -> Any:
    # YAML 1.1 reads bare yes/no as booleans.
    if value is True:
        return "yes"
    if value is False:
        return "no"
    return value


def _parse_assertion(raw: Any) -> Assertion:
    if not isinstance(raw, dict):
        raise ValueError(f"assertion must be a mapping, got {type(raw).__name__}")

    message = _yes_no(raw.get("message"))
    if message is not None and not isinstance(message, str):
        message = str(message)

    return Assertion(violations=_yes_no(raw.get("violations")), message=message)


def _parse_case(raw: Any) -> Case:
    if not isinstance(raw, dict):
        raise ValueError(f"case must be a mapping, got {type(raw).__name__}")

    assertions = [_parse_assertion(a) for a in _coerce_list(raw.get("assertions"), "assertions")]
    return Case(
        object=_coerce_str(raw.get("object")),
        name=_coerce_str(raw.get("name")),
        assertions=tuple(assertions),
    )


def _parse_test(raw: Any) -> Test:
    if not isinstance(raw, dict):
        raise ValueError(f"test must be a mapping, got {type(raw).__name__}")

    cases = [_parse_case(c) for c in _coerce_list(raw.get("cases"), "cases")]
    return Test(
        template=_coerce_str(raw.get("template")),
        constraint=_coerce_str(raw.get("constraint")),
        name=_coerce_str(raw.get("name")),
        cases=tuple(cases),
    )


def parse_suite(data: Any) -> Suite:
    """
    Build a Suite from a decoded YAML document.

    Structural problems raise ValueError. Missing template/constraint/object
    paths are *not* rejected here: the runner reports them per Test/Case.
    """
    if not isinstance(data, dict):
        raise ValueError("suite document must be a mapping")

    kind = _coerce_str(data.get("kind"))
    if kind != SUITE_KIND:
        raise ValueError(f"expected kind {SUITE_KIND!r}, got {kind or None!r}")

    metadata = _coerce_dict(data.get("metadata"))
    tests = [_parse_test(t) for t in _coerce_list(data.get("tests"), "tests")]

    return Suite(
        tests=tuple(tests),
        name=_coerce_str(metadata.get("name")),
        metadata=metadata,
    )


def is_suite_document(data: Any) -> bool:
    return isinstance(data, dict) and data.get("kind") == SUITE_KIND


def read_suite(path: Path) -> Suite:
    """Load a single suite file."""
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return parse_suite(data)


def read_suites(path: Path, *, recursive: bool = False) -> list[tuple[Path, Suite]]:
    """
    Discover suites under `path`.

    A file is read directly and must be a suite. For a directory, every
    .yaml/.yml file whose kind is Suite is loaded; other documents
    (templates, constraints, objects) are skipped.
    """
    if path.is_file():
        return [(path, read_suite(path))]

    if not path.is_dir():
        raise FileNotFoundError(f"no such file or directory: {path}")

    pattern = "**/*" if recursive else "*"
    suites: list[tuple[Path, Suite]] = []
    for candidate in sorted(path.glob(pattern)):
        if not candidate.is_file() or candidate.suffix.lower() not in SUITE_EXTENSIONS:
            continue
        try:
            data = yaml.safe_load(candidate.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            # test fixtures next to suites may be invalid YAML on purpose
            logger.warning("skipping %s: %s", candidate, e)
            continue
        if not is_suite_document(data):
            continue
        suites.append((candidate, parse_suite(data)))

    return suites
