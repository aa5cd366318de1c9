"""General API group — mounted at /api."""

from fastapi import APIRouter

router = APIRouter()

API_NAME = "L2RR2L API"
API_VERSION = "1.0.0"


@router.get("")
@router.get("/", include_in_schema=False)
async def api_info():
    """Identify the API and its version."""
    return {"message": API_NAME, "version": API_VERSION}
