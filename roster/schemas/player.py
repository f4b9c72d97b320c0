"""Pydantic schemas for roster players."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlayerCreate(BaseModel):
    """New player. Ages and goal counts are non-negative integers."""

    name: str = Field(..., min_length=1, max_length=255)
    position: str = Field(default="", max_length=64)
    age: int = Field(..., ge=0, le=150)
    goals: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must be non-empty")
        return v.strip()


class PlayerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    position: str
    age: int
    goals: int


class DeletedResponse(BaseModel):
    ok: bool = True
