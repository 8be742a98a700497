"""
In-process rule client.

Validates Gatekeeper-shaped ConstraintTemplates and constraints and
hands the rule bodies to drivers (see drivers.py).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .client import (
    InvalidConstraintError,
    InvalidTemplateError,
    ReviewError,
    RuleCompileError,
    UnknownConstraintKindError,
    UnrecognizedConstraintError,
    UnsupportedVersionError,
)
from .drivers import DEFAULT_DRIVERS, CompiledRule, Driver, compile_schema

logger = logging.getLogger(__name__)


TEMPLATE_GROUP = "templates.gatekeeper.sh"
TEMPLATE_VERSIONS = ("v1alpha1", "v1beta1", "v1")
TEMPLATE_KIND = "ConstraintTemplate"
CONSTRAINT_GROUP = "constraints.gatekeeper.sh"
ADMISSION_TARGET = "admission.k8s.gatekeeper.sh"


def split_api_version(api_version: Any) -> tuple[str, str]:
    """Split "group/version" into its parts; core resources have an empty group."""
    if not isinstance(api_version, str) or not api_version:
        return "", ""
    group, sep, version = api_version.rpartition("/")
    if not sep:
        return "", api_version
    return group, version


def _get_path(doc: Any, *keys: str) -> Any:
    cur = doc
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def is_constraint_shaped(doc: Any) -> bool:
    if not isinstance(doc, dict):
        return False
    group, version = split_api_version(doc.get("apiVersion"))
    kind = doc.get("kind")
    return group == CONSTRAINT_GROUP and bool(version) and isinstance(kind, str) and bool(kind)


@dataclass
class _Template:
    kind: str
    name: str
    rule: CompiledRule
    parameters_validator: Any = None


@dataclass
class _Constraint:
    kind: str
    name: str
    parameters: dict[str, Any] = field(default_factory=dict)


class LocalClient:
    """
    Rule client that runs entirely in process.

    Templates are keyed by the constraint kind they declare; registering
    a second template for the same kind replaces the first.
    """

    def __init__(self, drivers: Mapping[str, Driver] | None = None):
        self.drivers: Mapping[str, Driver] = DEFAULT_DRIVERS if drivers is None else drivers
        self._templates: dict[str, _Template] = {}
        self._constraints: dict[tuple[str, str], _Constraint] = {}

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------

    def add_template(self, template: dict[str, Any]) -> str:
        group, version = split_api_version(template.get("apiVersion"))
        if group != TEMPLATE_GROUP or version not in TEMPLATE_VERSIONS:
            raise UnsupportedVersionError(
                f"unsupported template apiVersion {template.get('apiVersion')!r}; "
                f"supported: {', '.join(f'{TEMPLATE_GROUP}/{v}' for v in TEMPLATE_VERSIONS)}"
            )
        if template.get("kind") != TEMPLATE_KIND:
            raise InvalidTemplateError(f"expected kind {TEMPLATE_KIND!r}, got {template.get('kind')!r}")

        name = _get_path(template, "metadata", "name")
        if not isinstance(name, str) or not name:
            raise InvalidTemplateError("template is missing metadata.name")

        spec = template.get("spec")
        if not isinstance(spec, dict):
            raise InvalidTemplateError(f"template spec must be a mapping, got {type(spec).__name__}")

        kind = _get_path(spec, "crd", "spec", "names", "kind")
        if not isinstance(kind, str) or not kind:
            raise InvalidTemplateError("template is missing spec.crd.spec.names.kind")
        if name != kind.lower():
            raise InvalidTemplateError(f"template name {name!r} must be the lowercase of its kind {kind!r}")

        parameters_validator = None
        schema = _get_path(spec, "crd", "spec", "validation", "openAPIV3Schema")
        if schema is not None:
            try:
                parameters_validator = compile_schema(schema, "openAPIV3Schema")
            except RuleCompileError as e:
                raise InvalidTemplateError(str(e)) from e

        target = self._single_target(spec)
        rule = self._compile(target)

        self._templates[kind] = _Template(
            kind=kind,
            name=name,
            rule=rule,
            parameters_validator=parameters_validator,
        )
        # constraints of a replaced template must be re-bound
        for key in [k for k in self._constraints if k[0] == kind]:
            del self._constraints[key]

        logger.debug("registered template %s (kind %s)", name, kind)
        return kind

    def _single_target(self, spec: dict[str, Any]) -> dict[str, Any]:
        targets = spec.get("targets")
        if not isinstance(targets, list) or len(targets) != 1:
            raise InvalidTemplateError("template must declare exactly one target")
        target = targets[0]
        if not isinstance(target, dict):
            raise InvalidTemplateError("template target must be a mapping")
        if target.get("target") != ADMISSION_TARGET:
            raise InvalidTemplateError(f"unknown target {target.get('target')!r}; expected {ADMISSION_TARGET!r}")
        return target

    def _compile(self, target: dict[str, Any]) -> CompiledRule:
        candidates: list[tuple[str, Any]] = []
        code = target.get("code")
        if isinstance(code, list):
            for entry in code:
                if isinstance(entry, dict) and isinstance(entry.get("engine"), str):
                    candidates.append((entry["engine"], entry.get("source")))
        if "rego" in target:
            candidates.append(("rego", {"rego": target.get("rego"), "libs": target.get("libs") or []}))

        if not candidates:
            raise RuleCompileError("template target declares no rule body")

        for engine, source in candidates:
            driver = self.drivers.get(engine)
            if driver is None:
                continue
            return driver.compile(source)

        engines = ", ".join(engine for engine, _ in candidates)
        raise RuleCompileError(f"no driver registered for engine(s): {engines}")

    # -------------------------------------------------------------------------
    # Constraints
    # -------------------------------------------------------------------------

    def add_constraint(self, constraint: dict[str, Any]) -> None:
        if not is_constraint_shaped(constraint):
            raise UnrecognizedConstraintError(
                f"expected apiVersion group {CONSTRAINT_GROUP!r} and a kind, "
                f"got apiVersion={constraint.get('apiVersion')!r} kind={constraint.get('kind')!r}"
            )

        kind = constraint["kind"]
        template = self._templates.get(kind)
        if template is None:
            raise UnknownConstraintKindError(f"no template registered for constraint kind {kind!r}")

        name = _get_path(constraint, "metadata", "name")
        if not isinstance(name, str) or not name:
            raise InvalidConstraintError("constraint is missing metadata.name")

        spec = constraint.get("spec")
        if spec is not None and not isinstance(spec, dict):
            raise InvalidConstraintError(f"constraint spec must be a mapping, got {type(spec).__name__}")

        parameters = _get_path(constraint, "spec", "parameters")
        if parameters is None:
            parameters = {}
        if not isinstance(parameters, dict):
            raise InvalidConstraintError("constraint spec.parameters must be a mapping")

        if template.parameters_validator is not None:
            errors = sorted(template.parameters_validator.iter_errors(parameters), key=lambda e: tuple(e.path))
            if errors:
                details = "; ".join(
                    f"{'.'.join(str(p) for p in e.path) or '<root>'}: {e.message}" for e in errors
                )
                raise InvalidConstraintError(f"parameters rejected by template {template.name}: {details}")

        self._constraints[(kind, name)] = _Constraint(kind=kind, name=name, parameters=parameters)
        logger.debug("bound constraint %s/%s", kind, name)

    # -------------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------------

    def review(self, constraint: dict[str, Any], obj: dict[str, Any]) -> list[str]:
        kind = constraint.get("kind")
        name = _get_path(constraint, "metadata", "name")
        bound = self._constraints.get((kind, name)) if isinstance(kind, str) and isinstance(name, str) else None
        if bound is None:
            raise UnknownConstraintKindError(f"constraint {kind}/{name} is not bound")

        template = self._templates[bound.kind]
        try:
            return list(template.rule.evaluate(obj, bound.parameters))
        except Exception as e:
            raise ReviewError(f"evaluating {kind}/{name} failed: {e}") from e


def new_local_client() -> LocalClient:
    """Default client factory."""
    return LocalClient()
