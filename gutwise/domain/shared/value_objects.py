"""
Shared value objects.

Immutable, validated domain primitives.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserId(BaseModel):
    """
    User ID value object.

    Wraps string ID with validation and type safety.

    Example:
        >>> user_id = UserId(value="user_123")
        >>> assert str(user_id) == "user_123"
        >>> user_id2 = UserId.from_string("user_456")
    """

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., min_length=1, description="User identifier")

    @field_validator("value")
    @classmethod
    def not_empty(cls, v: str) -> str:
        """Ensure not empty or whitespace."""
        if not v.strip():
            raise ValueError("UserId cannot be empty or whitespace")
        return v.strip()

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"UserId('{self.value}')"

    def __hash__(self) -> int:
        return hash(self.value)

    @classmethod
    def from_string(cls, s: str) -> UserId:
        """Create from string."""
        return cls(value=s)


def new_record_id(prefix: str) -> str:
    """
    Generate an identifier for a meal or symptom record.

    Format: "<prefix>_<12_hex_chars>"

    Example:
        >>> record_id = new_record_id("meal")
        >>> assert record_id.startswith("meal_")
        >>> assert len(record_id) == 17
    """
    return f"{prefix}_{uuid.uuid4().hex[:12]}"
