from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.engine import Engine

from PLEXPORT.server.configurations import ExplorerSettings
from PLEXPORT.server.database.dependencies import get_database_engine, get_explorer_settings
from PLEXPORT.server.schemas.explorer import (
    DatabaseQueryRequest,
    DatabaseQueryResponse,
    TableListResponse,
    TableSummaryModel,
)
from PLEXPORT.server.services.explorer import DatabaseExplorer, ExplorerError, QueryResult
from PLEXPORT.server.utils.constants import EXPLORER_API_PREFIX
from PLEXPORT.server.utils.logger import logger


# -----------------------------------------------------------------------------
def read_query_payload(body: Any) -> dict[str, Any]:
    """Bodies that are not JSON objects carry no table and are rejected downstream."""
    if not isinstance(body, dict):
        return {}
    return DatabaseQueryRequest.model_validate(body).to_payload()


# -----------------------------------------------------------------------------
def build_query_response(result: QueryResult) -> DatabaseQueryResponse:
    return DatabaseQueryResponse.model_validate(
        {
            "table": result.table,
            "columns": [asdict(column) for column in result.columns],
            "schema": [asdict(column) for column in result.schema],
            "rows": result.rows,
            "pagination": asdict(result.pagination),
            "search": result.search,
            "order_by": result.order_by,
            "direction": result.direction,
            "searchable_columns": result.searchable_columns,
            "filter_options": asdict(result.filter_options),
            "applied_filters": result.applied_filters,
            "selected_columns": result.selected_columns,
        }
    )


###############################################################################
class DatabaseExplorerEndpoint:
    """Admin endpoints to browse any table of the application store."""

    def __init__(self, router: APIRouter) -> None:
        self.router = router

    # -------------------------------------------------------------------------
    def list_tables(
        self,
        engine: Engine | None = Depends(get_database_engine),
        settings: ExplorerSettings = Depends(get_explorer_settings),
    ) -> TableListResponse:
        try:
            explorer = DatabaseExplorer(engine, settings)
            summaries = explorer.list_tables()
        except ExplorerError as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
        except Exception as exc:
            logger.exception("Failed to list database tables")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to list database tables.",
            ) from exc

        return TableListResponse(
            tables=[
                TableSummaryModel(name=summary.name, row_count=summary.row_count)
                for summary in summaries
            ]
        )

    # -------------------------------------------------------------------------
    def query_table(
        self,
        body: Any = Body(None),
        engine: Engine | None = Depends(get_database_engine),
        settings: ExplorerSettings = Depends(get_explorer_settings),
    ) -> DatabaseQueryResponse:
        payload = read_query_payload(body)
        try:
            explorer = DatabaseExplorer(engine, settings)
            result = explorer.query(payload)
        except ExplorerError as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
        except Exception as exc:
            logger.exception(
                "Failed to execute database explorer query on table %r", payload.get("table")
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to execute query.",
            ) from exc

        return build_query_response(result)

    # -------------------------------------------------------------------------
    def add_routes(self) -> None:
        self.router.add_api_route(
            "/tables",
            self.list_tables,
            methods=["GET"],
            response_model=TableListResponse,
            status_code=status.HTTP_200_OK,
        )
        self.router.add_api_route(
            "/query",
            self.query_table,
            methods=["POST"],
            response_model=DatabaseQueryResponse,
            status_code=status.HTTP_200_OK,
        )


###############################################################################
router = APIRouter(prefix=EXPLORER_API_PREFIX, tags=["database explorer"])
explorer_endpoint = DatabaseExplorerEndpoint(router=router)
explorer_endpoint.add_routes()
