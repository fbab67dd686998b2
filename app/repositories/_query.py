# app/repositories/_query.py
from typing import Any


def first_row(response) -> dict[str, Any] | None:
    """
    Return the single row of a response, or None.

    Handles both `maybe_single()` responses (data is a dict, or the
    response itself is None on some postgrest versions) and mutation
    responses (data is a list of returned rows).
    """
    if response is None:
        return None
    data = response.data
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


def all_rows(response) -> list[dict[str, Any]]:
    if response is None or not response.data:
        return []
    return list(response.data)
