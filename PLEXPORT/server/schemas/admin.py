from __future__ import annotations

from typing import Any

from pydantic import Field

from PLEXPORT.server.schemas.base import CamelModel


###############################################################################
class HealthResponse(CamelModel):
    status: str = "ok"
    timestamp: str
    environment: str


###############################################################################
class LogEntryModel(CamelModel):
    timestamp: str
    level: str
    message: str
    context: dict[str, Any] | None = None


###############################################################################
class LogStatsModel(CamelModel):
    total: int = Field(..., ge=0)
    by_level: dict[str, int]
    max_size: int = Field(..., ge=1)


###############################################################################
class LogListResponse(CamelModel):
    logs: list[LogEntryModel]
    stats: LogStatsModel


###############################################################################
class OperationResponse(CamelModel):
    success: bool
    message: str


###############################################################################
class DatabaseTestResponse(OperationResponse):
    table_count: int = Field(..., ge=0)
    record_count: int | None = None


###############################################################################
class MediaCountsModel(CamelModel):
    total: int
    movies: int
    series: int
    seasons: int | None = None
    episodes: int | None = None


###############################################################################
class CastCountsModel(CamelModel):
    members: int | None = None


###############################################################################
class ThumbnailCountsModel(CamelModel):
    total: int
    movies: int
    series: int


###############################################################################
class DatabaseFileModel(CamelModel):
    path: str | None = None
    size: str | None = None


###############################################################################
class SeasonSampleModel(CamelModel):
    number: int | None = None
    title: str | None = None
    episode_count: int


###############################################################################
class CastSampleModel(CamelModel):
    name: str
    character: str | None = None
    order: int | None = None


###############################################################################
class SeriesSampleModel(CamelModel):
    title: str
    rating_key: str
    season_count: int
    episode_count: int
    seasons: list[SeasonSampleModel]
    cast: list[CastSampleModel]


###############################################################################
class DatabaseStatsResponse(CamelModel):
    media: MediaCountsModel
    cast: CastCountsModel
    thumbnails: ThumbnailCountsModel
    database: DatabaseFileModel
    series_samples: list[SeriesSampleModel] = Field(default_factory=list)
