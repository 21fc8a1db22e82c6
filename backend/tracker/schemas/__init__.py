"""API Schemas — Pydantic models with field-level validation for engine and API boundaries.

Invariants:
    - Entity input validation is strict: bad fields raise, they are never coerced away
    - validate_input() converts Pydantic failures into the tracker ValidationError

Design Decisions:
    - Services accept either a schema instance or a plain mapping so non-HTTP callers
      get the same validation as routes
"""

from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from tracker.core.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def validate_input(model_cls: type[M], data: M | Mapping[str, Any]) -> M:
    """Return data as model_cls, raising ValidationError on the first bad field."""
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"]) or None
        raise ValidationError(first["msg"], field=field) from e
