"""Health check endpoints."""

from fastapi import APIRouter, HTTPException

from app.config import settings
from app.db.search_client import SearchClient
from app.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check."""
    return HealthResponse(status="healthy")


@router.get("/health/index", response_model=HealthResponse)
async def index_health():
    """Check OpenSearch connectivity."""
    try:
        reachable = await SearchClient.ping()
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=f"Search index unhealthy: {e}")
    if not reachable:
        raise HTTPException(status_code=503, detail="Search index unreachable")
    return HealthResponse(status="healthy", index=settings.SDN_INDEX)
