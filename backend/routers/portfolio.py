"""Read-only portfolio listings."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from routers.common import raise_for_default
from studio import StudioData, get_studio

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get("/featured", response_model=list[dict])
async def list_featured_works(studio: StudioData = Depends(get_studio)):
    """Featured portfolio pieces, newest first."""
    works = await studio.get_featured_works()
    if works is None:
        raise_for_default(studio, "Failed to load featured works")
    return works


@router.get("/", response_model=list[dict])
async def list_portfolio_items(
    category: Optional[str] = Query(None, description="Filter by category"),
    studio: StudioData = Depends(get_studio),
):
    """List portfolio pieces, optionally filtered by category."""
    items = await studio.get_portfolio_items(category)
    if items is None:
        raise_for_default(studio, "Failed to load portfolio")
    return items
