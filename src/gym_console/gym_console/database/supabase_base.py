from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Type

import httpx
from postgrest.exceptions import APIError

from ..core.exceptions import DomainError


@contextmanager
def remote_call(error_cls: Type[DomainError], action: str) -> Iterator[None]:
    """Translate PostgREST/transport failures into one domain error type."""
    try:
        yield
    except APIError as e:
        raise error_cls(f"{action} failed: {e.message or e}") from e
    except httpx.HTTPError as e:
        raise error_cls(f"{action} failed: {e}") from e


def rows_of(response: Any) -> List[Dict[str, Any]]:
    data = getattr(response, "data", None)
    if not data:
        return []
    return [dict(r) for r in data if isinstance(r, dict)]


def count_of(response: Any) -> int:
    return int(getattr(response, "count", None) or 0)
