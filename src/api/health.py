"""Health check endpoint."""

from fastapi import APIRouter, Request

from src.api.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return application status and the number of registered option types."""
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        return HealthResponse(status="error", option_types=0)
    return HealthResponse(status="ok", option_types=registry.count())
