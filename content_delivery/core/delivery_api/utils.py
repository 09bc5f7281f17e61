from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlsplit


def extract_sync_token(url: str) -> str:
    """
    Extract the ``sync_token`` query parameter from a sync continuation URL.

    Args:
        url: A ``nextPageUrl`` or ``nextSyncUrl`` value returned by the sync endpoint
    Returns:
        The token, or an empty string if the URL carries none
    """
    query = urlsplit(url or "").query
    values = parse_qs(query).get("sync_token")
    return values[0] if values else ""


def decycle(value: Any, _path: Optional[List[int]] = None) -> Any:
    """
    Return a JSON-serialisable copy of ``value`` with back-references cut.

    Only containers on the current path count as circular, so an item shared
    by two sibling fields is written out in full both times.
    """
    path = _path if _path is not None else []
    if not isinstance(value, (dict, list)):
        return value
    if id(value) in path:
        return _circular_marker(value)

    path.append(id(value))
    try:
        if isinstance(value, list):
            return [decycle(element, path) for element in value]
        return {key: decycle(element, path) for key, element in value.items()}
    finally:
        path.pop()


def _circular_marker(value: Any) -> Dict[str, Any]:
    sys = value.get("sys") if isinstance(value, dict) else None
    if not isinstance(sys, dict):
        return {"circular": True}
    return {
        "sys": {
            "type": "Link",
            "linkType": sys.get("type", "Entry"),
            "id": sys.get("id"),
            "circular": True,
        }
    }
