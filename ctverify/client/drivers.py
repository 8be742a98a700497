"""
Rule engine drivers.

A driver turns a template's rule body into something that can be
evaluated. The local client looks drivers up by engine name, the same
way templates declare them:

    code:
      - engine: jsonschema
        source: {...}

Only the jsonschema engine ships here. Rego bodies need a driver
supplied by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from .client import RuleCompileError


class CompiledRule(Protocol):
    def evaluate(self, obj: dict[str, Any], parameters: dict[str, Any]) -> list[str]:
        """Return violation messages for `obj` under `parameters`."""
        ...


class Driver(Protocol):
    name: str

    def compile(self, source: Any) -> CompiledRule:
        """
        Compile a rule body.

        Raises:
            RuleCompileError: if the body is malformed.
        """
        ...


def compile_schema(schema: Any, what: str):
    """Return a validator for `schema`, raising RuleCompileError if it is invalid."""
    if not isinstance(schema, dict):
        raise RuleCompileError(f"{what} must be a mapping, got {type(schema).__name__}")
    cls = validator_for(schema, default=Draft7Validator)
    try:
        cls.check_schema(schema)
    except SchemaError as e:
        raise RuleCompileError(f"{what} is not a valid schema: {e.message}") from e
    return cls(schema)


@dataclass(frozen=True)
class _SchemaRule:
    msg: str
    validator: Any


@dataclass(frozen=True)
class JsonSchemaProgram:
    """Compiled jsonschema rule body."""

    rules: tuple[_SchemaRule, ...]

    def evaluate(self, obj: dict[str, Any], parameters: dict[str, Any]) -> list[str]:
        document = {"object": obj, "parameters": parameters}
        metadata = obj.get("metadata") if isinstance(obj.get("metadata"), dict) else {}
        fields = {"name": metadata.get("name", ""), "kind": obj.get("kind", "")}

        violations: list[str] = []
        for rule in self.rules:
            if rule.validator.is_valid(document):
                violations.append(rule.msg.format(**fields))
        return violations


class JsonSchemaDriver:
    """
    Rules expressed as JSON Schemas over the review document.

    Source shape:

        violations:
          - msg: "{name} is missing the owner label"
            match:            # schema; a match emits msg
              properties:
                object:
                  properties:
                    metadata:
                      not: {required: [labels]}

    The review document is {"object": <object>, "parameters": <constraint parameters>}.
    `msg` may use {name} and {kind} from the reviewed object.
    """

    name = "jsonschema"

    def compile(self, source: Any) -> JsonSchemaProgram:
        if not isinstance(source, dict):
            raise RuleCompileError("jsonschema source must be a mapping")

        raw_rules = source.get("violations")
        if not isinstance(raw_rules, list) or not raw_rules:
            raise RuleCompileError("jsonschema source requires a non-empty 'violations' list")

        rules: list[_SchemaRule] = []
        for i, raw in enumerate(raw_rules):
            if not isinstance(raw, dict):
                raise RuleCompileError(f"violations[{i}] must be a mapping")

            msg = raw.get("msg")
            if not isinstance(msg, str) or not msg:
                raise RuleCompileError(f"violations[{i}].msg must be a non-empty string")
            try:
                msg.format(name="", kind="")
            except (KeyError, IndexError, ValueError) as e:
                raise RuleCompileError(f"violations[{i}].msg has a bad placeholder: {e}") from e

            validator = compile_schema(raw.get("match", {}), f"violations[{i}].match")
            rules.append(_SchemaRule(msg=msg, validator=validator))

        return JsonSchemaProgram(rules=tuple(rules))


DEFAULT_DRIVERS: Mapping[str, Driver] = {
    JsonSchemaDriver.name: JsonSchemaDriver(),
}
