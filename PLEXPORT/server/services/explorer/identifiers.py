from __future__ import annotations

import re
from typing import Any

from PLEXPORT.server.utils.constants import IDENTIFIER_PATTERN

IDENTIFIER_REGEX = re.compile(IDENTIFIER_PATTERN)
LIKE_ESCAPE_CHARACTER = "\\"
LIKE_METACHARACTERS = re.compile(r"[%_\\]")


# -----------------------------------------------------------------------------
def is_valid_identifier(name: Any) -> bool:
    """Syntactic gate for table and column names.

    Passing this check does not authorize a name: it must also belong to the
    live introspection result of the request before it is embedded in SQL.
    """
    if not isinstance(name, str):
        return False
    return IDENTIFIER_REGEX.fullmatch(name) is not None


# -----------------------------------------------------------------------------
def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


# -----------------------------------------------------------------------------
def quote_as_text(name: str, cast: bool = False) -> str:
    identifier = quote_identifier(name)
    return f"CAST({identifier} AS TEXT)" if cast else identifier


# -----------------------------------------------------------------------------
def escape_like_pattern(term: str) -> str:
    return LIKE_METACHARACTERS.sub(lambda match: LIKE_ESCAPE_CHARACTER + match.group(0), term)
