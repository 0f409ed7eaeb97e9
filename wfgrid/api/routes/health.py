"""
Health Check API Routes
System health and status endpoints
"""
from fastapi import APIRouter
from wfgrid.core.config import get_settings

router = APIRouter(tags=["Health"])

settings = get_settings()


@router.get("/health")
async def health_check():
    """
    Health check endpoint

    Returns service name, version and storage location
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "storage": str(settings.WORKFLOWS_PATH)
    }


@router.get("/ping")
async def ping():
    """
    Simple ping endpoint for load balancers
    """
    return {"status": "ok"}
