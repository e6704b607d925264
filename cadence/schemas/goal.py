from typing import Optional

from pydantic import Field, field_validator

from cadence.schemas.common import CamelModel


class GoalOut(CamelModel):
    id: int
    text: str
    is_done: bool
    sort_order: Optional[int] = None
    created_at: Optional[str] = None


class GoalCreate(CamelModel):
    text: str = Field(max_length=2_000)

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class GoalUpdate(CamelModel):
    text: Optional[str] = Field(default=None, max_length=2_000)
    is_done: Optional[bool] = None
    sort_order: Optional[int] = None

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class GoalReorder(CamelModel):
    ids: list[int] = Field(min_length=1, description="Goal ids in their new display order.")


class GoalListResponse(CamelModel):
    goals: list[GoalOut]
