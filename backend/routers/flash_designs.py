"""Flash design catalog."""
from fastapi import APIRouter, Depends, HTTPException, status

from routers.common import raise_for_default
from studio import StudioData, get_studio

router = APIRouter(prefix="/flash-designs", tags=["flash-designs"])


@router.get("/", response_model=list[dict])
async def list_flash_designs(studio: StudioData = Depends(get_studio)):
    """List all flash designs, newest first."""
    designs = await studio.get_flash_designs()
    if designs is None:
        raise_for_default(studio, "Failed to load flash designs")
    return designs


@router.get("/{design_id}", response_model=dict)
async def get_flash_design(design_id: int, studio: StudioData = Depends(get_studio)):
    """Get a single flash design by ID."""
    design = await studio.get_flash_design_by_id(design_id)
    if design is None:
        if not studio.is_supabase_available:
            raise_for_default(studio)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Flash design not found"
        )
    return design
