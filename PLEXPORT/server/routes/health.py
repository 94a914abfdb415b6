from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, status

from PLEXPORT.server.configurations import server_settings
from PLEXPORT.server.schemas.admin import HealthResponse
from PLEXPORT.server.utils.variables import env_variables


router = APIRouter(tags=["health"])


###############################################################################
@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
def get_health() -> HealthResponse:
    timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    environment = env_variables.environment or server_settings.runtime.environment
    return HealthResponse(status="ok", timestamp=timestamp, environment=environment)
