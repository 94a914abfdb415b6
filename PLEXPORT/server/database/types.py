from __future__ import annotations

from typing import Any

from sqlalchemy.types import JSON, TypeDecorator


###############################################################################
class JSONSequence(TypeDecorator):
    """
    Stores string lists (genres, directors, countries...) as JSON.

    PostgreSQL keeps them as JSON, SQLite as JSON text. The declared type of
    the column stays JSON so the database explorer treats it as text-like.
    """

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, (list, tuple, set)):
            return [str(item) for item in value]
        return value

    def process_result_value(self, value: Any, dialect: Any) -> Any:
        return value
