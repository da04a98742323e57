"""Base Pydantic schema and helpers for coachrank models."""

from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict


class CoachRankBaseModel(BaseModel):
    """Base Pydantic model for all schemas with common configuration."""

    model_config = ConfigDict(
        # Allow building models from arbitrary objects
        from_attributes=True,
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# Utility Functions
# =============================================================================


def read_field(record: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping key or an attribute, whichever exists."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)
