from fastapi import APIRouter

from app.system.schemas import HealthResponse

router = APIRouter(tags=["System"])


@router.get("/", response_model=HealthResponse, summary="Health check")
def health_route() -> HealthResponse:
    return HealthResponse(message="Fitness Tracker API Running")
