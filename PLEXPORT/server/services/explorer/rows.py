from __future__ import annotations

import base64
from collections.abc import Mapping
from typing import Any

from PLEXPORT.server.utils.constants import JSON_SAFE_INTEGER


# -----------------------------------------------------------------------------
def normalize_value(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and abs(value) > JSON_SAFE_INTEGER:
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


# -----------------------------------------------------------------------------
def normalize_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """Make a driver row safe for JSON transport.

    Integers beyond the 53-bit range become decimal strings and binary
    payloads become base64 strings.
    """
    return {str(key): normalize_value(value) for key, value in row.items()}
