"""Item Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - ItemWrite.name: 2-100 chars, stripped, non-empty
    - ItemWrite.description: at most 500 chars
    - ItemWrite.status: one of the four ItemStatus values
    - ItemWrite.email: syntactically valid address

Design Decisions:
    - One write schema for create and full-replace update (PUT semantics)
    - ItemResponse built from ORM objects via from_attributes
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.domain_types import ItemStatus


class ItemWrite(BaseModel):
    """Item create/replace payload."""
    name: str = Field(min_length=2, max_length=100)
    description: str | None = Field(None, max_length=500)
    status: ItemStatus
    email: EmailStr

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("name must be between 2 and 100 characters")
        return v


class ItemResponse(BaseModel):
    """Item response — public-facing item data."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    status: ItemStatus
    email: str
