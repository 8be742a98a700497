from __future__ import annotations

from typing import Any

from ..client.client import Client, ClientError, ReviewError


def review_object(client: Client, constraint: dict[str, Any], obj: dict[str, Any]) -> list[str]:
    """
    Violation messages the bound `constraint` emits for `obj`.

    Pass/fail is not decided here; see matcher.check_assertions.
    """
    try:
        return [str(v) for v in client.review(constraint, obj)]
    except ClientError:
        raise
    except Exception as e:
        raise ReviewError(f"review failed: {e}") from e
