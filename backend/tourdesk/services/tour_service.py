"""Tour service — CRUD over tour records plus cover image storage."""

import json
import logging
import uuid
from decimal import Decimal
from pathlib import Path

from fastapi import UploadFile
from pydantic import ValidationError
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tourdesk.config import settings
from tourdesk.errors import TourValidationError
from tourdesk.models.tour import TOUR_STATUSES, Tour
from tourdesk.schemas.tour import TourFilters, TourProgram

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".avif"}
IMAGE_URL_PREFIX = "uploads/tours"

EDITABLE_FIELDS = (
    "title", "description", "short_description", "price", "duration", "location",
    "date_start", "date_end", "max_participants", "status", "programs",
)


class TourService:
    """Tour persistence and payload validation."""

    @property
    def image_dir(self) -> Path:
        return Path(settings.upload_dir) / "tours"

    async def list_tours(self, db: AsyncSession, filters: TourFilters) -> list[Tour]:
        query = select(Tour)

        if filters.status:
            query = query.where(Tour.status == filters.status)
        if filters.search:
            needle = filters.search.lower()
            query = query.where(
                or_(
                    func.lower(Tour.title).contains(needle, autoescape=True),
                    func.lower(Tour.description).contains(needle, autoescape=True),
                    func.lower(Tour.short_description).contains(needle, autoescape=True),
                )
            )
        if filters.location:
            query = query.where(func.lower(Tour.location).contains(filters.location.lower(), autoescape=True))
        if filters.min_price is not None:
            query = query.where(Tour.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.where(Tour.price <= filters.max_price)

        query = query.order_by(Tour.date_start.asc().nulls_first(), Tour.id.asc())
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_tour(self, db: AsyncSession, tour_id: int) -> Tour | None:
        return await db.get(Tour, tour_id)

    async def create_tour(self, db: AsyncSession, data: dict, image: UploadFile | None = None) -> Tour:
        cleaned = self.validate(data)
        tour = Tour(**cleaned)
        if image is not None and image.filename:
            tour.image_url = await self.save_image(image)

        db.add(tour)
        await db.commit()
        await db.refresh(tour)
        logger.info(f"Tour {tour.id} created: {tour.title}")
        return tour

    async def update_tour(
        self, db: AsyncSession, tour_id: int, data: dict, image: UploadFile | None = None
    ) -> Tour | None:
        tour = await self.get_tour(db, tour_id)
        if tour is None:
            return None

        cleaned = self.validate(data, current=tour)
        for field, value in cleaned.items():
            setattr(tour, field, value)

        previous, stored = None, None
        if image is not None and image.filename:
            previous = tour.image_url
            stored = await self.save_image(image)
            tour.image_url = stored

        # The old file goes only once the new URL is committed
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            self.remove_image(stored)
            raise
        await db.refresh(tour)
        self.remove_image(previous)
        logger.info(f"Tour {tour.id} updated: {', '.join(sorted(cleaned)) or 'image only'}")
        return tour

    async def delete_tour(self, db: AsyncSession, tour_id: int) -> bool:
        tour = await self.get_tour(db, tour_id)
        if tour is None:
            return False

        image_url = tour.image_url
        await db.delete(tour)
        await db.commit()
        self.remove_image(image_url)
        logger.info(f"Tour {tour_id} deleted")
        return True

    # ── Validation ──

    def validate(self, data: dict, current: Tour | None = None) -> dict:
        """Clean a create (current=None) or partial update payload.

        Raises TourValidationError listing every offending field.
        """
        cleaned = {k: v for k, v in data.items() if k in EDITABLE_FIELDS and v is not None}
        errors: list[dict] = []

        if current is None:
            for required in ("title", "price", "status"):
                if required not in cleaned:
                    errors.append({"field": required, "message": "Field is required"})

        if "title" in cleaned:
            cleaned["title"] = cleaned["title"].strip()
            if not cleaned["title"]:
                errors.append({"field": "title", "message": "Title must not be empty"})

        if "price" in cleaned:
            cleaned["price"] = Decimal(str(cleaned["price"]))
            if cleaned["price"] < 0:
                errors.append({"field": "price", "message": "Price must be non-negative"})

        if "status" in cleaned and cleaned["status"] not in TOUR_STATUSES:
            errors.append({
                "field": "status",
                "message": f"Status must be one of: {', '.join(TOUR_STATUSES)}",
            })

        for field in ("duration", "max_participants"):
            if field in cleaned and cleaned[field] < 1:
                errors.append({"field": field, "message": "Must be at least 1"})

        if "programs" in cleaned:
            programs, program_error = self._parse_programs(cleaned["programs"])
            if program_error:
                errors.append({"field": "programs", "message": program_error})
            else:
                cleaned["programs"] = programs

        date_start = cleaned.get("date_start", current.date_start if current else None)
        date_end = cleaned.get("date_end", current.date_end if current else None)
        if date_start and date_end and date_end < date_start:
            errors.append({"field": "date_end", "message": "End date must not precede start date"})

        if errors:
            raise TourValidationError("Validation error", errors)
        return cleaned

    def _parse_programs(self, raw: str | list) -> tuple[list[dict], str | None]:
        if isinstance(raw, str):
            if not raw.strip():
                return [], None
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError:
                return [], "Programs must be valid JSON"
        if not isinstance(raw, list):
            return [], "Programs must be a JSON array"
        try:
            programs = [TourProgram.model_validate(item) for item in raw]
        except ValidationError as e:
            return [], f"Invalid program entry: {e.errors()[0]['msg']}"
        return [p.model_dump() for p in programs], None

    # ── Images ──

    async def save_image(self, upload: UploadFile) -> str:
        """Store an uploaded cover image and return its site-relative URL."""
        if not (upload.content_type or "").startswith("image/"):
            raise TourValidationError(
                "Validation error", [{"field": "image", "message": "File must be an image"}]
            )
        suffix = Path(upload.filename or "").suffix.lower()
        if suffix not in IMAGE_EXTENSIONS:
            suffix = ".jpg"

        content = await upload.read()
        if len(content) > settings.max_upload_mb * 1024 * 1024:
            raise TourValidationError(
                "Validation error",
                [{"field": "image", "message": f"Image exceeds {settings.max_upload_mb} MB"}],
            )

        self.image_dir.mkdir(parents=True, exist_ok=True)
        name = f"{uuid.uuid4().hex}{suffix}"
        (self.image_dir / name).write_bytes(content)
        logger.debug(f"Stored tour image {name} ({len(content)} bytes)")
        return f"{IMAGE_URL_PREFIX}/{name}"

    def remove_image(self, image_url: str | None) -> None:
        """Delete a previously uploaded image. URLs outside the upload area are left alone."""
        if not image_url:
            return
        relative = image_url.lstrip("/")
        if not relative.startswith(f"{IMAGE_URL_PREFIX}/"):
            return
        path = self.image_dir / Path(relative).name
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove tour image {path}: {e}")


tour_service = TourService()
