"""Booking submission for custom tattoos and flash designs."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from notifications import error_message
from routers.common import raise_for_default
from studio import MissingFieldError, StudioData, get_studio

router = APIRouter(prefix="/bookings", tags=["bookings"])


class BookingCreate(BaseModel):
    """Schema for a booking request.

    Every field is optional here so that missing required fields are
    rejected by the data-access layer with its own message.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    is_custom: Optional[bool] = None
    status: Optional[str] = None
    flash_design_id: Optional[int] = None
    tattoo_size: Optional[str] = None
    tattoo_placement: Optional[str] = None
    tattoo_description: Optional[str] = None
    reference_images: Optional[list[str]] = None
    preferred_date: Optional[date] = None
    availability: Optional[list[str]] = None
    pronouns: Optional[str] = None
    allergies: Optional[str] = None
    instagram: Optional[str] = None
    special_requests: Optional[str] = None


class FlashDesignBookingCreate(BaseModel):
    """Schema for booking a flash design."""

    first_name: str
    last_name: str
    email: str
    phone: str
    flash_design_id: int
    tattoo_size: str
    tattoo_placement: str
    preferred_date: Optional[date] = None
    availability: Optional[list[str]] = None
    pronouns: Optional[str] = None
    allergies: Optional[str] = None
    instagram: Optional[str] = None
    special_requests: Optional[str] = None


class BookingResult(BaseModel):
    success: bool


@router.post("/", response_model=BookingResult)
async def create_booking(booking: BookingCreate, studio: StudioData = Depends(get_studio)):
    """Submit a custom or flash booking."""
    try:
        created = await studio.create_booking(booking.model_dump(mode="json", exclude_unset=True))
    except MissingFieldError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=error_message(e)
        )
    if not created:
        raise_for_default(studio)
    return BookingResult(success=True)


@router.post("/flash", response_model=BookingResult)
async def create_flash_design_booking(
    booking: FlashDesignBookingCreate, studio: StudioData = Depends(get_studio)
):
    """Book a flash design; stored as a pending, non-custom booking."""
    try:
        created = await studio.create_flash_design_booking(booking.model_dump(mode="json"))
    except Exception:
        raise_for_default(studio, "Failed to create booking")
    if not created:
        raise_for_default(studio)
    return BookingResult(success=True)
