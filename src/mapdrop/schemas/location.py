"""Location-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

VerificationStatus = Literal["normal", "pending", "verified", "flagged"]


class LocationCreate(BaseModel):
    """Schema for dropping a new location on the map."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    text: str = Field("", max_length=5000)
    media_urls: list[str] = Field(default_factory=list, description="Opaque media references")
    media_types: list[str] = Field(default_factory=list, description="MIME type per media reference")
    is_anonymous: bool = False
    credits: int = Field(0, ge=0, description="Credits moved from the creator's balance")
    auto_delete: bool = False
    delete_time: int | None = Field(None, gt=0)
    delete_unit: Literal["minutes", "hours", "days"] | None = None


class LocationUpdate(BaseModel):
    """Schema for editing a location's content."""

    text: str | None = Field(None, max_length=5000)
    is_anonymous: bool | None = None
    media_urls: list[str] = Field(default_factory=list, description="Media references to append")
    media_types: list[str] = Field(default_factory=list)
    delete_media_indexes: list[int] = Field(default_factory=list)


class LocationContent(BaseModel):
    """Post body as shown in map popups."""

    text: str
    media_urls: list[str]
    media_types: list[str]
    is_anonymous: bool


class CreatorSummary(BaseModel):
    """Public view of a location's author."""

    id: int
    display_name: str | None


class LocationResponse(BaseModel):
    """Schema for location information returned by the API."""

    id: int
    longitude: float
    latitude: float
    content: LocationContent
    creator: CreatorSummary | None
    upvotes: int
    downvotes: int
    total_points: int
    verification_status: VerificationStatus
    credits: int
    auto_delete: bool
    delete_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _from_orm_location(cls, data: object) -> object:
        if isinstance(data, dict):
            return data

        creator = None
        if not data.is_anonymous and data.creator is not None:
            creator = {"id": data.creator.id, "display_name": data.creator.display_name}

        return {
            "id": data.id,
            "longitude": data.longitude,
            "latitude": data.latitude,
            "content": data.content,
            "creator": creator,
            "upvotes": data.upvotes,
            "downvotes": data.downvotes,
            # Derived on read from the counters rather than the cached column.
            "total_points": data.upvotes - data.downvotes,
            "verification_status": data.verification_status,
            "credits": data.credits,
            "auto_delete": data.auto_delete,
            "delete_at": data.delete_at,
            "created_at": data.created_at,
            "updated_at": data.updated_at,
        }

    model_config = ConfigDict(from_attributes=True)
