"""Shared helpers for backend endpoint modules.

This module centralizes the most repeated patterns:
- validating a decoded JSON body against a response model
- validating a JSON array of models

Any shape mismatch is reported as :class:`SubwayDecodeError` so callers
only ever see the pysubway error taxonomy. Internal to pysubway.
"""

from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from pysubway.exceptions import SubwayDecodeError

M = TypeVar("M", bound=BaseModel)


def path_segment(value: object) -> str:
    """Quote a value for use as a single URL path segment."""
    return quote(str(value), safe="")


def validate_model(endpoint: str, model: type[M], payload: Any) -> M:
    if not isinstance(payload, dict):
        raise SubwayDecodeError(
            f"{endpoint} returned {type(payload).__name__}, expected an object",
            endpoint=endpoint,
        )
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise SubwayDecodeError(f"{endpoint} body does not match {model.__name__}: {exc}", endpoint=endpoint) from exc


def validate_list(endpoint: str, model: type[M], payload: Any) -> list[M]:
    if not isinstance(payload, list):
        raise SubwayDecodeError(
            f"{endpoint} returned {type(payload).__name__}, expected an array",
            endpoint=endpoint,
        )
    return [validate_model(endpoint, model, item) for item in payload]
