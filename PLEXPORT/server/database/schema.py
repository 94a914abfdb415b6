from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import declarative_base

from PLEXPORT.server.database.types import JSONSequence

Base = declarative_base()

CURRENT_TIMESTAMP = text("CURRENT_TIMESTAMP")


###############################################################################
class MediaItem(Base):
    __tablename__ = "media_items"
    id = Column(Integer, primary_key=True, autoincrement=True)
    tautulli_id = Column(String(64), nullable=False)
    type = Column(String(16), nullable=False)
    title = Column(Text, nullable=False)
    sort_title = Column(Text)
    library_section_id = Column(Integer)
    year = Column(Integer)
    rating = Column(Float)
    content_rating = Column(String(32))
    summary = Column(Text)
    tagline = Column(Text)
    duration = Column(Integer)
    poster = Column(Text)
    backdrop = Column(Text)
    studio = Column(Text)
    genres = Column(JSONSequence)
    directors = Column(JSONSequence)
    writers = Column(JSONSequence)
    countries = Column(JSONSequence)
    collections = Column(JSONSequence)
    audience_rating = Column(Float)
    added_at = Column(String(32))
    originally_available_at = Column(String(32))
    guid = Column(Text)
    plex_updated_at = Column(String(32))
    plex_added_at = Column(String(32))
    last_synced_at = Column(String(32))
    created_at = Column(String(32), nullable=False, server_default=CURRENT_TIMESTAMP)
    updated_at = Column(String(32), nullable=False, server_default=CURRENT_TIMESTAMP)
    tmdb_id = Column(Integer)
    tmdb_rating = Column(Integer)
    tmdb_vote_count = Column(Integer)
    tmdb_enriched = Column(Boolean, nullable=False, server_default=text("0"))
    imdb_id = Column(String(32))
    __table_args__ = (UniqueConstraint("tautulli_id"),)


###############################################################################
class Season(Base):
    __tablename__ = "seasons"
    id = Column(Integer, primary_key=True, autoincrement=True)
    media_item_id = Column(
        Integer, ForeignKey("media_items.id", ondelete="CASCADE"), nullable=False
    )
    tautulli_id = Column(String(64), nullable=False)
    season_number = Column(Integer, nullable=False)
    title = Column(Text)
    summary = Column(Text)
    poster = Column(Text)
    episode_count = Column(Integer)
    __table_args__ = (UniqueConstraint("tautulli_id"),)


###############################################################################
class Episode(Base):
    __tablename__ = "episodes"
    id = Column(Integer, primary_key=True, autoincrement=True)
    season_id = Column(
        Integer, ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False
    )
    tautulli_id = Column(String(64), nullable=False)
    episode_number = Column(Integer, nullable=False)
    title = Column(Text, nullable=False)
    summary = Column(Text)
    duration = Column(Integer)
    rating = Column(String(16))
    air_date = Column(String(32))
    thumb = Column(Text)
    __table_args__ = (UniqueConstraint("tautulli_id"),)


###############################################################################
class CastMember(Base):
    __tablename__ = "cast_members"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    role = Column(Text)
    photo = Column(Text)
    __table_args__ = (UniqueConstraint("name"),)


###############################################################################
class MediaCast(Base):
    __tablename__ = "media_cast"
    id = Column(Integer, primary_key=True, autoincrement=True)
    media_item_id = Column(
        Integer, ForeignKey("media_items.id", ondelete="CASCADE"), nullable=False
    )
    cast_member_id = Column(
        Integer, ForeignKey("cast_members.id", ondelete="CASCADE"), nullable=False
    )
    character = Column(Text)
    order = Column(Integer)


###############################################################################
class MediaThumbnail(Base):
    __tablename__ = "media_thumbnails"
    id = Column(Integer, primary_key=True, autoincrement=True)
    media_item_id = Column(
        Integer, ForeignKey("media_items.id", ondelete="CASCADE"), nullable=False
    )
    path = Column(Text, nullable=False)
    created_at = Column(String(32), nullable=False, server_default=CURRENT_TIMESTAMP)


###############################################################################
class LibrarySection(Base):
    __tablename__ = "library_sections"
    id = Column(Integer, primary_key=True, autoincrement=True)
    section_id = Column(Integer, nullable=False)
    section_name = Column(Text, nullable=False)
    section_type = Column(String(16), nullable=False)
    enabled = Column(Boolean, nullable=False, server_default=text("1"))
    last_synced_at = Column(String(32))
    created_at = Column(String(32), nullable=False, server_default=CURRENT_TIMESTAMP)
    updated_at = Column(String(32), nullable=False, server_default=CURRENT_TIMESTAMP)
    __table_args__ = (UniqueConstraint("section_id"),)


###############################################################################
class IntegrationSetting(Base):
    __tablename__ = "integration_settings"
    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(Integer, nullable=False)


###############################################################################
class TautulliSnapshot(Base):
    __tablename__ = "tautulli_snapshots"
    id = Column(Integer, primary_key=True, autoincrement=True)
    captured_at = Column(String(32), nullable=False, server_default=CURRENT_TIMESTAMP)
    payload = Column(Text, nullable=False)
