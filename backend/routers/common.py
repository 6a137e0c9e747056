"""HTTP mapping for the data-access defaults."""
from fastapi import HTTPException, status

from studio import StudioData


def raise_for_default(studio: StudioData, failure: str = "Supabase request failed") -> None:
    """Turn a None/False result into the matching HTTP error.

    Unconfigured backend is 503; a reported Supabase error is 502 with the
    message shown to the visitor.
    """
    if not studio.is_supabase_available:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Supabase is not configured",
        )
    notice = studio.notices.latest
    raise HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=notice.description if notice else failure,
    )
