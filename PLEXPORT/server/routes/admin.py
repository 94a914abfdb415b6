from __future__ import annotations

import sqlalchemy
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from PLEXPORT.server.database.dependencies import get_database_engine
from PLEXPORT.server.schemas.admin import (
    DatabaseStatsResponse,
    DatabaseTestResponse,
    LogEntryModel,
    LogListResponse,
    LogStatsModel,
    OperationResponse,
)
from PLEXPORT.server.services.explorer.introspection import to_count
from PLEXPORT.server.services.stats import DatabaseStatistics
from PLEXPORT.server.utils.constants import ADMIN_API_PREFIX, LOG_LEVELS
from PLEXPORT.server.utils.logger import LogBuffer, log_buffer, logger

MEDIA_TABLE = "media_items"


###############################################################################
class AdminEndpoint:
    """Admin dashboard helpers: log viewer and connectivity checks."""

    def __init__(self, router: APIRouter, buffer: LogBuffer) -> None:
        self.router = router
        self.buffer = buffer

    # -------------------------------------------------------------------------
    def get_logs(
        self,
        limit: int = Query(100, ge=1),
        level: str | None = Query(None),
        since: str | None = Query(None),
    ) -> LogListResponse:
        entries = self.buffer.get_all()
        if level in LOG_LEVELS:
            entries = [entry for entry in entries if entry.get("level") == level]
        if since:
            entries = [entry for entry in entries if entry.get("timestamp", "") >= since]
        entries = entries[-limit:]
        return LogListResponse(
            logs=[LogEntryModel.model_validate(entry) for entry in entries],
            stats=LogStatsModel.model_validate(self.buffer.get_stats()),
        )

    # -------------------------------------------------------------------------
    def clear_logs(self) -> OperationResponse:
        self.buffer.clear()
        return OperationResponse(success=True, message="System logs cleared")

    # -------------------------------------------------------------------------
    def test_database(
        self, engine: Engine | None = Depends(get_database_engine)
    ) -> DatabaseTestResponse:
        if engine is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Database is not configured.",
            )
        try:
            inspector = sqlalchemy.inspect(engine)
            table_names = inspector.get_table_names()
            record_count: int | None = None
            if MEDIA_TABLE in table_names:
                with engine.connect() as conn:
                    record_count = to_count(
                        conn.execute(
                            sqlalchemy.text(f'SELECT COUNT(*) FROM "{MEDIA_TABLE}"')
                        ).scalar()
                    )
        except SQLAlchemyError as exc:
            logger.exception("Database test failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Database test failed.",
            ) from exc

        return DatabaseTestResponse(
            success=True,
            message="Database connection successful",
            table_count=len(table_names),
            record_count=record_count,
        )

    # -------------------------------------------------------------------------
    def get_stats(
        self, engine: Engine | None = Depends(get_database_engine)
    ) -> DatabaseStatsResponse:
        if engine is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Database is not configured.",
            )
        try:
            stats = DatabaseStatistics(engine).collect()
        except SQLAlchemyError as exc:
            logger.exception("Failed to get database stats")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to get database stats.",
            ) from exc

        return DatabaseStatsResponse.model_validate(stats)

    # -------------------------------------------------------------------------
    def add_routes(self) -> None:
        self.router.add_api_route(
            "/logs",
            self.get_logs,
            methods=["GET"],
            response_model=LogListResponse,
            status_code=status.HTTP_200_OK,
        )
        self.router.add_api_route(
            "/logs",
            self.clear_logs,
            methods=["DELETE"],
            response_model=OperationResponse,
            status_code=status.HTTP_200_OK,
        )
        self.router.add_api_route(
            "/stats",
            self.get_stats,
            methods=["GET"],
            response_model=DatabaseStatsResponse,
            status_code=status.HTTP_200_OK,
        )
        self.router.add_api_route(
            "/test/database",
            self.test_database,
            methods=["POST"],
            response_model=DatabaseTestResponse,
            status_code=status.HTTP_200_OK,
        )


###############################################################################
router = APIRouter(prefix=ADMIN_API_PREFIX, tags=["admin"])
admin_endpoint = AdminEndpoint(router=router, buffer=log_buffer)
admin_endpoint.add_routes()
