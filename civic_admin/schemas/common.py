"""Schemas shared across resources."""

from pydantic import BaseModel, Field


class SeedResponse(BaseModel):
    """Names or categories created by a seeding call; existing ones are skipped."""

    model_config = {"from_attributes": True}

    created: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


class ToggleRequest(BaseModel):
    enabled: bool
