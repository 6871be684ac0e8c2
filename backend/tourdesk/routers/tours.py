"""Tours router — public listing and card rendering, authenticated CRUD."""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tourdesk.cards import CardRenderer
from tourdesk.database import get_db
from tourdesk.dependencies import get_card_renderer, get_current_user
from tourdesk.models.user import User
from tourdesk.schemas.tour import MessageResponse, TourCreated, TourFilters, TourResponse
from tourdesk.services.cache_service import cache_service
from tourdesk.services.tour_service import tour_service

router = APIRouter()


def tour_filters(
    status: str | None = Query(None, description="active, inactive, completed or cancelled"),
    search: str | None = Query(None, description="Search in title or description"),
    location: str | None = Query(None),
    min_price: Decimal | None = Query(None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(None, alias="maxPrice", ge=0),
) -> TourFilters:
    return TourFilters(
        status=status,
        search=search,
        location=location,
        min_price=min_price,
        max_price=max_price,
    )


def tour_form(
    title: str | None = Form(None),
    description: str | None = Form(None),
    short_description: str | None = Form(None),
    price: Decimal | None = Form(None),
    duration: int | None = Form(None),
    location: str | None = Form(None),
    date_start: date | None = Form(None),
    date_end: date | None = Form(None),
    max_participants: int | None = Form(None),
    status: str | None = Form(None),
    programs: str | None = Form(None, description="JSON array of day programs"),
) -> dict:
    """Multipart tour fields. Required-ness is enforced by the service on create."""
    return {
        "title": title,
        "description": description,
        "short_description": short_description,
        "price": price,
        "duration": duration,
        "location": location,
        "date_start": date_start,
        "date_end": date_end,
        "max_participants": max_participants,
        "status": status,
        "programs": programs,
    }


@router.get("", response_model=list[TourResponse])
async def list_tours(
    filters: TourFilters = Depends(tour_filters),
    db: AsyncSession = Depends(get_db),
):
    """List tours, optionally filtered by status, text, location and price range."""
    cache_filters = filters.model_dump(mode="json")
    cached = await cache_service.get_tour_list(cache_filters)
    if cached is not None:
        return cached

    tours = await tour_service.list_tours(db, filters)
    data = [TourResponse.model_validate(t).model_dump(mode="json") for t in tours]
    await cache_service.set_tour_list(cache_filters, data)
    return data


@router.get("/cards", response_class=HTMLResponse)
async def render_tour_cards(
    filters: TourFilters = Depends(tour_filters),
    db: AsyncSession = Depends(get_db),
    renderer: CardRenderer = Depends(get_card_renderer),
):
    """Server-rendered travel cards for the filtered tours, earliest first."""
    tours = await tour_service.list_tours(db, filters)
    cards = renderer.render_many(tours)
    return HTMLResponse("".join(card.to_html() for card in cards))


@router.get("/{tour_id}", response_model=TourResponse)
async def get_tour(tour_id: int, db: AsyncSession = Depends(get_db)):
    cached = await cache_service.get_tour(tour_id)
    if cached is not None:
        return cached

    tour = await tour_service.get_tour(db, tour_id)
    if not tour:
        raise HTTPException(status_code=404, detail="Tour not found")

    data = TourResponse.model_validate(tour).model_dump(mode="json")
    await cache_service.set_tour(tour_id, data)
    return data


@router.post("", status_code=201, response_model=TourCreated)
async def create_tour(
    form: dict = Depends(tour_form),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
):
    """Create a tour from multipart form data; title, price and status are required."""
    tour = await tour_service.create_tour(db, form, image)
    await cache_service.invalidate_tours()
    return TourCreated(id=tour.id, message="Tour created")


@router.put("/{tour_id}", response_model=MessageResponse)
async def update_tour(
    tour_id: int,
    form: dict = Depends(tour_form),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
):
    """Partially update a tour. Omitted fields keep their values."""
    tour = await tour_service.update_tour(db, tour_id, form, image)
    if not tour:
        raise HTTPException(status_code=404, detail="Tour not found")

    await cache_service.invalidate_tours()
    return MessageResponse(message="Tour updated")


@router.delete("/{tour_id}", response_model=MessageResponse)
async def delete_tour(
    tour_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
):
    if not await tour_service.delete_tour(db, tour_id):
        raise HTTPException(status_code=404, detail="Tour not found")

    await cache_service.invalidate_tours()
    return MessageResponse(message="Tour deleted")
