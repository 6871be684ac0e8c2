from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from tourdesk.errors import InvalidInputError

# camelCase keys accepted from client-side records
CAMEL_KEYS = {
    "shortDescription": "short_description",
    "imageUrl": "image_url",
    "priceAmount": "price",
    "dateStart": "date_start",
    "dateEnd": "date_end",
}


class TourSummary(BaseModel):
    """Read-only view of a tour used to render a summary card."""

    id: int | str
    title: str | None = None
    short_description: str | None = None
    image_url: str | None = None
    price: float | None = None
    # Left as given so malformed dates reach the formatter untouched
    date_start: Any = None
    date_end: Any = None

    model_config = {"frozen": True, "from_attributes": True, "extra": "ignore"}

    @classmethod
    def coerce(cls, tour: Any) -> "TourSummary":
        """Accept a TourSummary, a plain mapping or an ORM row."""
        if isinstance(tour, TourSummary):
            return tour
        if tour is None:
            raise InvalidInputError("Tour data is required")
        try:
            if isinstance(tour, Mapping):
                data = {CAMEL_KEYS.get(k, k): v for k, v in tour.items()}
                if not data.get("id"):
                    raise InvalidInputError("Tour data is required")
                return cls.model_validate(data)
            if not getattr(tour, "id", None):
                raise InvalidInputError("Tour data is required")
            return cls.model_validate(tour, from_attributes=True)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid tour data: {e.error_count()} error(s)") from e


class TourProgram(BaseModel):
    day: int | None = None
    title: str
    description: str | None = None


class TourResponse(BaseModel):
    id: int
    title: str
    description: str | None
    short_description: str | None
    price: float
    duration: int | None
    location: str | None
    date_start: date | None
    date_end: date | None
    max_participants: int | None
    status: str
    image_url: str | None
    programs: list[TourProgram] = []
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}

    @field_validator("programs", mode="before")
    @classmethod
    def _null_programs(cls, value):
        return [] if value is None else value


class TourFilters(BaseModel):
    status: str | None = None
    search: str | None = None
    location: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None


class TourCreated(BaseModel):
    id: int
    message: str


class MessageResponse(BaseModel):
    message: str
