"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from documents import (
    CONSTRAINT_NEVER_VALIDATE,
    CONSTRAINT_REQUIRED_LABELS,
    OBJECT,
    OBJECT_LABELED,
    TEMPLATE_NEVER_VALIDATE,
    TEMPLATE_REQUIRED_LABELS,
)
from helpers import write


@pytest.fixture
def suite_dir(tmp_path: Path) -> Path:
    """A directory holding a passing and a failing suite with their policies."""
    root = tmp_path / "suites"
    write(root / "labels" / "template.yaml", TEMPLATE_REQUIRED_LABELS)
    write(root / "labels" / "constraint.yaml", CONSTRAINT_REQUIRED_LABELS)
    write(root / "samples" / "unlabeled.yaml", OBJECT)
    write(root / "samples" / "labeled.yaml", OBJECT_LABELED)
    write(root / "deny" / "template.yaml", TEMPLATE_NEVER_VALIDATE)
    write(root / "deny" / "constraint.yaml", CONSTRAINT_NEVER_VALIDATE)

    write(
        root / "passing.yaml",
        """
kind: Suite
apiVersion: test.gatekeeper.sh/v1alpha1
metadata:
  name: passing
tests:
- name: required-labels
  template: labels/template.yaml
  constraint: labels/constraint.yaml
  cases:
  - name: unlabeled
    object: samples/unlabeled.yaml
    assertions:
    - violations: yes
      message: "Object object has no labels"
  - name: labeled
    object: samples/labeled.yaml
""",
    )
    write(
        root / "nested" / "failing.yaml",
        """
kind: Suite
apiVersion: test.gatekeeper.sh/v1alpha1
metadata:
  name: failing
tests:
- name: deny-all
  template: ../deny/template.yaml
  constraint: ../deny/constraint.yaml
  cases:
  - name: expects-allow
    object: ../samples/labeled.yaml
    assertions:
    - violations: no
""",
    )
    return root
