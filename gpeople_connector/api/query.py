"""
Request path and query string construction.

Masks are serialized as one comma-joined parameter; resource-name batches
as one repeated parameter per name, which is how the People API expects
them on batchGet endpoints.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any
from urllib.parse import quote, urlencode

from gpeople_connector.models.fields import field_values

# Characters left unescaped in query values. Resource names contain "/".
_SAFE = "/,:"


def _separator(path: str) -> str:
    return "&" if "?" in path else "?"


def join_mask(param: str, values: str | Enum | Iterable[str | Enum]) -> str:
    """
    Serialize a field mask as its comma-joined wire value.

    Used for masks carried in request bodies (``readGroupFields``) as well
    as by with_mask.

    Raises:
        ValueError: If the mask is empty or contains an empty entry
    """
    names = field_values(values)
    if not names:
        raise ValueError(f"{param} requires at least one field")
    if not all(names):
        raise ValueError(f"{param} contains an empty field name")
    return ",".join(names)


def with_mask(
    path: str, param: str, values: str | Enum | Iterable[str | Enum]
) -> str:
    """
    Append a field mask parameter to a path.

    Args:
        path: Base path, with or without an existing query string
        param: Mask parameter name (e.g. "personFields", "readMask")
        values: Mask entries in order, or a single field name

    Returns:
        ``path?param=a,b,c`` (or ``&param=...`` if a query string exists)

    Raises:
        ValueError: If the mask is empty or contains an empty entry
    """
    mask = join_mask(param, values)
    return f"{path}{_separator(path)}{param}={quote(mask, safe=_SAFE)}"


def with_repeated(path: str, param: str, values: Iterable[str]) -> str:
    """
    Append one ``param=value`` pair per value.

    Args:
        path: Base path
        param: Parameter name (e.g. "resourceNames")
        values: Values in order; each becomes its own parameter

    Returns:
        Path with the repeated parameter appended; unchanged if values is empty
    """
    for value in values:
        path = f"{path}{_separator(path)}{param}={quote(value, safe=_SAFE)}"
    return path


def with_params(path: str, params: Mapping[str, Any]) -> str:
    """
    Append scalar query parameters, skipping ``None`` values.

    Booleans are written as ``true``/``false``.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, Enum):
            value = value.value
        pairs.append((key, str(value)))

    if not pairs:
        return path
    return f"{path}{_separator(path)}{urlencode(pairs, safe=_SAFE)}"
