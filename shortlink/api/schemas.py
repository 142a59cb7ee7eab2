"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization. Field names go over the wire in camelCase.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from shortlink.core.clock import to_iso
from shortlink.core.config import settings

_http_url = TypeAdapter(AnyHttpUrl)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortURLCreateRequest(CamelModel):
    """Request schema for creating a short URL."""
    url: str = Field(..., min_length=1, description="The long URL to shorten")
    validity: int = Field(
        settings.DEFAULT_VALIDITY_MINUTES,
        gt=0,
        description="Validity window in minutes"
    )
    shortcode: Optional[str] = Field(
        None,
        min_length=1,
        max_length=settings.CUSTOM_SHORTCODE_MAX_LENGTH,
        pattern=r"^[A-Za-z0-9]+$",
        description="Optional custom alphanumeric shortcode"
    )

    # Checked for shape only; the original string is what gets stored
    @field_validator("url")
    def validate_url(cls, v: str) -> str:
        try:
            _http_url.validate_python(v)
        except ValidationError:
            raise ValueError("url must be an absolute http or https URL")
        return v


class ShortURLCreateResponse(CamelModel):
    """Response schema for a created short URL."""
    short_link: str
    expiry: str
    shortcode: str


class ClickData(CamelModel):
    """Schema for one click in the statistics report."""
    timestamp: datetime
    referrer: str
    location: str

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        return to_iso(value)


class URLStatsResponse(CamelModel):
    """Response schema for URL statistics."""
    shortcode: str
    original_url: str
    created_at: datetime
    expiry: datetime
    click_count: int
    clicks: List[ClickData]

    @field_serializer("created_at", "expiry")
    def serialize_datetime(self, value: datetime) -> str:
        return to_iso(value)


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    detail: str
