"""
Data models for the delivery API client.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from content_delivery.core.delivery_api.utils import decycle

# (kind, id) identity shared by reference markers and the items they point at
EntityKey = Tuple[str, str]


# --- Enums ---

class ApiScope(Enum):
    """Which base URL a request is issued against."""
    SPACE = "space"
    ENVIRONMENT = "environment"


class FieldShape(Enum):
    """
    Runtime shapes a field value can take.

    - LINK: a reference marker ({"sys": {"type": "Link", ...}}).
    - ENTITY: an item that has already been resolved into place.
    - LIST: an ordered sequence (e.g. an array of links).
    - LOCALIZED: a mapping keyed by locale codes (all-locales responses).
    - OBJECT: any other mapping (rich text nodes, locations, JSON fields).
    - SCALAR: strings, numbers, booleans, None.
    """
    LINK = "link"
    ENTITY = "entity"
    LIST = "list"
    LOCALIZED = "localized"
    OBJECT = "object"
    SCALAR = "scalar"


class SysType(Enum):
    ENTRY = "Entry"
    ASSET = "Asset"
    DELETED_ENTRY = "DeletedEntry"
    DELETED_ASSET = "DeletedAsset"
    LINK = "Link"


@dataclass(frozen=True)
class ResolveOptions:
    """Options controlling link resolution for a single response."""
    resolve_links: bool = True
    remove_unresolved: bool = False


class ResolvedCollection(dict):
    """
    A response payload whose ``items`` have been passed through the link resolver.

    All other top-level keys (``total``, ``skip``, ``limit``, ``includes``,
    ``sys``...) are carried over untouched. Because resolved items may form a
    cyclic graph, ``json.dumps`` cannot serialise the collection directly;
    use ``stringify_safe`` instead.
    """

    def stringify_safe(self, indent: Optional[int] = None) -> str:
        """
        Serialise the collection, replacing back-references with link markers.

        A value is considered circular when it is already being serialised
        higher up the current path; such values are written as
        ``{"sys": {"type": "Link", "linkType": ..., "id": ..., "circular": true}}``.
        """
        return json.dumps(decycle(dict(self)), indent=indent)


@dataclass
class SyncCollection:
    """Aggregated result of a (possibly multi-page) sync run."""
    entries: List[Dict[str, Any]] = field(default_factory=list)
    assets: List[Dict[str, Any]] = field(default_factory=list)
    deleted_entries: List[Dict[str, Any]] = field(default_factory=list)
    deleted_assets: List[Dict[str, Any]] = field(default_factory=list)
    next_sync_token: Optional[str] = None
    next_page_token: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the collection using the API's camelCase keys."""
        data: Dict[str, Any] = {
            "entries": self.entries,
            "assets": self.assets,
            "deletedEntries": self.deleted_entries,
            "deletedAssets": self.deleted_assets,
        }
        if self.next_sync_token:
            data["nextSyncToken"] = self.next_sync_token
        if self.next_page_token:
            data["nextPageToken"] = self.next_page_token
        return data


@dataclass
class SyncPage:
    """Raw items gathered by the pagination loop before bucketing."""
    items: List[Dict[str, Any]]
    next_sync_token: Optional[str] = None
    next_page_token: Optional[str] = None
    pages_fetched: int = 0
