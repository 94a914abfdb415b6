from __future__ import annotations

import os
from typing import Any

import sqlalchemy
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from PLEXPORT.server.database.schema import (
    CastMember,
    Episode,
    MediaCast,
    MediaItem,
    MediaThumbnail,
    Season,
)
from PLEXPORT.server.services.explorer.introspection import to_count
from PLEXPORT.server.utils.logger import logger

MOVIE_TYPE = "movie"
SERIES_TYPE = "tv"
SERIES_SAMPLE_SIZE = 3
CAST_SAMPLE_SIZE = 5
BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")


# -----------------------------------------------------------------------------
def format_bytes(size: int) -> str:
    if size <= 0:
        return "0 B"
    value = float(size)
    unit_index = 0
    while value >= 1024 and unit_index < len(BYTE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.2f} {BYTE_UNITS[unit_index]}"


# -----------------------------------------------------------------------------
def get_file_size(path: str | None) -> int:
    if not path:
        return 0
    try:
        return os.path.getsize(path)
    except OSError:
        return 0


###############################################################################
class DatabaseStatistics:
    """Library counters shown on the admin dashboard.

    Media and thumbnail counts are required; the season, episode and cast
    counters are reported as None when their tables cannot be read.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    # -------------------------------------------------------------------------
    @staticmethod
    def count(conn: Connection, statement: Any) -> int:
        return to_count(conn.execute(statement).scalar())

    # -------------------------------------------------------------------------
    def count_media(self, conn: Connection, media_type: str | None = None) -> int:
        statement = sqlalchemy.select(sqlalchemy.func.count()).select_from(MediaItem)
        if media_type is not None:
            statement = statement.where(MediaItem.type == media_type)
        return self.count(conn, statement)

    # -------------------------------------------------------------------------
    def count_thumbnails(self, conn: Connection, media_type: str) -> int:
        statement = (
            sqlalchemy.select(sqlalchemy.func.count())
            .select_from(MediaThumbnail)
            .join(MediaItem, MediaThumbnail.media_item_id == MediaItem.id)
            .where(MediaItem.type == media_type)
        )
        return self.count(conn, statement)

    # -------------------------------------------------------------------------
    def count_structure(self) -> dict[str, int | None]:
        structure: dict[str, int | None] = {
            "seasons": None,
            "episodes": None,
            "cast_members": None,
        }
        try:
            with self.engine.connect() as conn:
                for key, model in (
                    ("seasons", Season),
                    ("episodes", Episode),
                    ("cast_members", CastMember),
                ):
                    structure[key] = self.count(
                        conn, sqlalchemy.select(sqlalchemy.func.count()).select_from(model)
                    )
        except SQLAlchemyError as exc:
            logger.warning("Failed to compute series structure counts: %s", exc)
            return {key: None for key in structure}
        return structure

    # -------------------------------------------------------------------------
    def sample_series(self, conn: Connection) -> list[dict[str, Any]]:
        series_rows = conn.execute(
            sqlalchemy.select(MediaItem.id, MediaItem.title, MediaItem.tautulli_id)
            .where(MediaItem.type == SERIES_TYPE)
            .order_by(MediaItem.id)
            .limit(SERIES_SAMPLE_SIZE)
        ).all()

        samples: list[dict[str, Any]] = []
        for series in series_rows:
            season_rows = conn.execute(
                sqlalchemy.select(
                    Season.season_number,
                    Season.title,
                    sqlalchemy.func.count(Episode.id).label("episode_count"),
                )
                .outerjoin(Episode, Episode.season_id == Season.id)
                .where(Season.media_item_id == series.id)
                .group_by(Season.id, Season.season_number, Season.title)
                .order_by(Season.season_number)
            ).all()
            cast_rows = conn.execute(
                sqlalchemy.select(CastMember.name, MediaCast.character, MediaCast.order)
                .join(CastMember, MediaCast.cast_member_id == CastMember.id)
                .where(MediaCast.media_item_id == series.id)
                .order_by(MediaCast.order, MediaCast.id)
                .limit(CAST_SAMPLE_SIZE)
            ).all()
            seasons = [
                {
                    "number": row.season_number,
                    "title": row.title,
                    "episode_count": to_count(row.episode_count),
                }
                for row in season_rows
            ]
            samples.append(
                {
                    "title": series.title,
                    "rating_key": series.tautulli_id,
                    "season_count": len(seasons),
                    "episode_count": sum(season["episode_count"] for season in seasons),
                    "seasons": seasons,
                    "cast": [
                        {"name": row.name, "character": row.character, "order": row.order}
                        for row in cast_rows
                    ],
                }
            )
        return samples

    # -------------------------------------------------------------------------
    def describe_database_file(self) -> dict[str, str | None]:
        if self.engine.dialect.name != "sqlite":
            return {"path": None, "size": None}
        path = self.engine.url.database
        return {"path": path, "size": format_bytes(get_file_size(path))}

    # -------------------------------------------------------------------------
    def collect(self) -> dict[str, Any]:
        with self.engine.connect() as conn:
            total = self.count_media(conn)
            movies = self.count_media(conn, MOVIE_TYPE)
            series = self.count_media(conn, SERIES_TYPE)
            movie_thumbnails = self.count_thumbnails(conn, MOVIE_TYPE)
            series_thumbnails = self.count_thumbnails(conn, SERIES_TYPE)
            series_samples = self.sample_series(conn) if series else []

        structure = self.count_structure()
        return {
            "media": {
                "total": total,
                "movies": movies,
                "series": series,
                "seasons": structure["seasons"],
                "episodes": structure["episodes"],
            },
            "cast": {"members": structure["cast_members"]},
            "thumbnails": {
                "total": movie_thumbnails + series_thumbnails,
                "movies": movie_thumbnails,
                "series": series_thumbnails,
            },
            "database": self.describe_database_file(),
            "series_samples": series_samples,
        }
