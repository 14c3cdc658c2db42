"""Pydantic schemas for the players feature."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Rank(BaseModel):
    """Rank position together with the points it was computed from."""

    position: int = Field(..., ge=1, description="1-based rank position")
    points: int = Field(..., ge=0, description="Ranking points")

    model_config = ConfigDict(frozen=True)


class PlayerBase(BaseModel):
    """Base player schema with common fields."""

    first_name: str = Field(..., min_length=1, max_length=50, description="First name")
    last_name: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Last name; identifies the player, compared case-insensitively",
    )
    birth_date: date = Field(..., description="Birth date (ISO 8601)")

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v: object) -> object:
        """Strip surrounding whitespace so blank names fail min_length."""
        if isinstance(v, str):
            return v.strip()
        return v


class PlayerToSave(PlayerBase):
    """Schema for creating or updating a player. Rank is system computed."""

    points: int = Field(..., ge=0, description="Ranking points")

    @field_validator("birth_date")
    @classmethod
    def birth_date_not_in_future(cls, v: date) -> date:
        """Reject birth dates after today."""
        if v > date.today():
            raise ValueError("birth_date cannot be in the future")
        return v


class Player(PlayerBase):
    """Schema for player response data."""

    rank: Rank

    model_config = ConfigDict(from_attributes=True)
