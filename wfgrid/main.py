"""
Workflow Grid Editor API
FastAPI host for the workflow edit session
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from wfgrid.api.routes import health, editor
from wfgrid.core.config import get_settings
from wfgrid.core.logging import setup_logging, get_logger

# Initialize logging
setup_logging()
logger = get_logger(__name__)

settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Grid editor for workflow graphs: layout, node placement and transition edits"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# CUSTOM EXCEPTION HANDLERS
# ============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Custom handler for request validation errors
    """
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(x) for x in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"]
        })

    logger.warning(f"Validation error on {request.url.path}: {errors}")

    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation Error",
            "message": "Request validation failed. Please check the required fields and formats.",
            "details": errors
        }
    )


# ============================================================================
# ROUTERS
# ============================================================================

app.include_router(health.router)
app.include_router(editor.router)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with API information"""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "endpoints": ["/health", "/editor"]
    }


# ============================================================================
# MAIN (for running directly)
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "wfgrid.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
