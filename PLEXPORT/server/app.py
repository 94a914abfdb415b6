from __future__ import annotations

# Load environment variables before the settings and database modules
from PLEXPORT.server.utils.variables import env_variables  # noqa: F401

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from PLEXPORT.server.configurations import server_settings
from PLEXPORT.server.routes.admin import router as admin_router
from PLEXPORT.server.routes.explorer import router as explorer_router
from PLEXPORT.server.routes.health import router as health_router

###############################################################################
app = FastAPI(
    title=server_settings.fastapi.title,
    version=server_settings.fastapi.version,
    description=server_settings.fastapi.description,
)

app.include_router(health_router)
app.include_router(admin_router)
app.include_router(explorer_router)


@app.get("/")
def redirect_to_docs() -> RedirectResponse:
    return RedirectResponse(url="/docs")
