"""
Turns query mappings into delivery API query parameters.

The API's search grammar (``fields.title[match]``, ``sys.createdAt[gte]``,
``order``, ``limit``...) is passed through as-is; this module only handles
the parts the client is responsible for.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

# Keys that configure the client and must never reach the API
CLIENT_OPTION_KEYS = frozenset({"resolve_links", "remove_unresolved", "resolveLinks", "removeUnresolved"})

SYNC_TOKEN_KEYS = ("next_page_token", "nextPageToken", "next_sync_token", "nextSyncToken", "sync_token")


def normalize_select(query: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Make sure a ``select`` projection keeps the sys fields link resolution needs.

    If ``select`` is given without ``sys``, ``sys.id`` and ``sys.type`` are
    appended. The input mapping is not modified.
    """
    query = dict(query or {})
    select = query.get("select")
    if not select:
        return query

    fields = select if isinstance(select, (list, tuple)) else str(select).split(",")
    fields = [f.strip() for f in fields if f and f.strip()]
    if "sys" in fields:
        query["select"] = ",".join(fields)
        return query

    for required in ("sys.id", "sys.type"):
        if required not in fields:
            fields.append(required)
    query["select"] = ",".join(fields)
    return query


def _format_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set)):
        return ",".join(str(_format_value(v)) for v in value)
    return value


def build_query_params(query: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Convert a query mapping into request parameters.

    Client options are dropped, as are None values; booleans are lowercased
    and sequences joined with commas (``[in]``, ``[all]``, ``order``...).
    """
    params: Dict[str, Any] = {}
    for key, value in (query or {}).items():
        if key in CLIENT_OPTION_KEYS or value is None:
            continue
        params[key] = _format_value(value)
    return params


def client_options(query: Optional[Mapping[str, Any]]) -> Dict[str, bool]:
    """Per-call resolve options carried in a query, under their snake_case names."""
    options: Dict[str, bool] = {}
    for key in ("resolve_links", "resolveLinks"):
        if query and key in query:
            options["resolve_links"] = bool(query[key])
    for key in ("remove_unresolved", "removeUnresolved"):
        if query and key in query:
            options["remove_unresolved"] = bool(query[key])
    return options


def validate_sync_query(query: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Check a sync query and fill in implied parameters.

    Raises:
        ValueError: If no starting point is given, or ``content_type`` is
            combined with a ``type`` other than Entry
    """
    query = dict(query or {})
    if not query.get("initial") and not any(query.get(key) for key in SYNC_TOKEN_KEYS):
        raise ValueError(
            "Please provide one of `initial`, `next_sync_token` or `next_page_token` parameters for syncing"
        )

    if query.get("content_type"):
        if not query.get("type"):
            query["type"] = "Entry"
        elif query["type"] != "Entry":
            raise ValueError(
                "When using the `content_type` filter your `type` parameter cannot be different from `Entry`."
            )
    return query


def sync_request_params(query: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Parameters for the first sync request.

    A continuation token replaces the whole query, since the API rejects
    filters on non-initial sync requests.
    """
    for key in SYNC_TOKEN_KEYS:
        if query.get(key):
            return {"sync_token": query[key]}
    return build_query_params(query)
