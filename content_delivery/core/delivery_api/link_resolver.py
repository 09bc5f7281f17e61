"""
Link resolution component.

Takes a raw delivery API response (``items`` plus an ``includes`` side table)
and replaces every reference marker reachable from ``items`` with the item it
points at. Resolution happens on a deep copy of the payload, so the caller's
data is never touched and the result depends only on (payload, options).

Core features:
- One lookup index keyed by (kind, id) over items and every includes bucket
- Explicit stack traversal: each addressable item has its fields walked once
- Cycle breaking: a target that is already being expanded or already resolved
  is linked in place without being walked again
- Structural sharing: every marker to the same (kind, id) ends up holding the
  identical object, so A -> B -> A produces a genuinely cyclic graph
- Locale-keyed fields, arrays of links and nested structures (rich text) are
  all walked by the same dispatcher
"""

import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from content_delivery.core.delivery_api.models import (
    EntityKey,
    FieldShape,
    ResolveOptions,
    ResolvedCollection,
    SysType,
)

logger = logging.getLogger(__name__)

# Locale codes as used by the delivery API: "en", "en-US", "zh-Hant-TW", "es-419"
LOCALE_CODE_PATTERN = re.compile(r"^[a-z]{2,3}(-[A-Za-z0-9]{2,8})*$")

# Kind assumed for primary items whose sys block carries no type
DEFAULT_ITEM_KIND = SysType.ENTRY.value

# Sentinel returned for unresolved markers when they are to be removed
_UNRESOLVED = object()


def is_link(value: Any) -> bool:
    """Return True if ``value`` is a reference marker."""
    if not isinstance(value, dict):
        return False
    sys = value.get("sys")
    return isinstance(sys, dict) and sys.get("type") == SysType.LINK.value


def link_key(link: Mapping[str, Any]) -> Optional[EntityKey]:
    """(linkType, id) of a reference marker, or None if it is incomplete."""
    sys = link["sys"]
    link_type, link_id = sys.get("linkType"), sys.get("id")
    if not link_type or not link_id:
        return None
    return link_type, link_id


def entity_key(entity: Any, default_kind: Optional[str] = None) -> Optional[EntityKey]:
    """
    (type, id) of a resolvable item.

    Args:
        entity: The item as returned by the API
        default_kind: Kind used when ``sys.type`` is missing (the includes
            bucket name, for example)

    Returns:
        The composite key, or None when the item has no usable identity
    """
    if not isinstance(entity, dict):
        return None
    sys = entity.get("sys")
    if not isinstance(sys, dict) or not sys.get("id"):
        return None
    kind = sys.get("type") or default_kind
    if not kind:
        return None
    return kind, sys["id"]


def classify_field_value(value: Any, single_locale: bool = False, top_level: bool = False) -> FieldShape:
    """
    Discriminate a field value by structural inspection.

    Args:
        value: The value to inspect
        single_locale: True when the owning item was fetched for one locale,
            in which case no mapping is treated as locale-keyed
        top_level: True when ``value`` is the direct value of a field; locale
            maps only ever appear there

    Returns:
        The FieldShape tag for ``value``
    """
    if isinstance(value, list):
        return FieldShape.LIST
    if not isinstance(value, dict):
        return FieldShape.SCALAR

    sys = value.get("sys")
    if isinstance(sys, dict):
        if sys.get("type") == SysType.LINK.value:
            return FieldShape.LINK
        if sys.get("id"):
            return FieldShape.ENTITY

    if (
        top_level
        and not single_locale
        and value
        and all(isinstance(key, str) and LOCALE_CODE_PATTERN.match(key) for key in value)
    ):
        return FieldShape.LOCALIZED
    return FieldShape.OBJECT


def build_entity_index(items: Iterable[Dict[str, Any]],
                       includes: Optional[Mapping[str, Iterable[Dict[str, Any]]]] = None) -> Dict[EntityKey, Dict[str, Any]]:
    """
    Index every addressable item of a response by (kind, id).

    ``items`` are indexed before ``includes`` and the first write wins, so a
    primary item always takes precedence over an include with the same
    identity. Within includes, earlier buckets and earlier positions win.
    """
    index: Dict[EntityKey, Dict[str, Any]] = {}

    def add(entity: Dict[str, Any], default_kind: str) -> None:
        key = entity_key(entity, default_kind)
        if key is None:
            return
        if key in index:
            logger.debug(f"Duplicate entity {key[0]}:{key[1]} ignored, keeping first occurrence")
            return
        index[key] = entity

    for item in items:
        add(item, DEFAULT_ITEM_KIND)
    for kind, bucket in (includes or {}).items():
        for item in bucket or []:
            add(item, kind)
    return index


@dataclass
class _ResolutionState:
    """Bookkeeping for one resolution pass."""
    index: Dict[EntityKey, Dict[str, Any]]
    expanding: Set[EntityKey] = field(default_factory=set)
    resolved: Set[EntityKey] = field(default_factory=set)
    pending: List[Tuple[Optional[EntityKey], Dict[str, Any]]] = field(default_factory=list)
    links_resolved: int = 0
    links_unresolved: int = 0


class LinkResolver:
    """
    Replaces reference markers in a response with the items they point at.

    Unresolved markers (no matching item in items or includes) are either left
    verbatim or removed from their field, array slot or locale key, depending
    on ``remove_unresolved``. The resolver never raises for them.
    """

    def __init__(self, remove_unresolved: bool = False):
        """
        Initialize the resolver.

        Args:
            remove_unresolved: Drop markers that cannot be matched instead of
                keeping them in place
        """
        self.remove_unresolved = remove_unresolved

    def resolve(self, payload: Mapping[str, Any]) -> ResolvedCollection:
        """
        Resolve all links reachable from ``payload["items"]``.

        Args:
            payload: Raw response with ``items`` and optional ``includes``;
                any other top-level keys are passed through untouched

        Returns:
            ResolvedCollection holding the resolved items and the copied metadata
        """
        metadata = {key: value for key, value in payload.items() if key != "items"}
        collection = ResolvedCollection(copy.deepcopy(metadata))

        # items and includes are copied together so shared objects stay shared
        graph = copy.deepcopy({
            "items": payload.get("items") or [],
            "includes": payload.get("includes") or {},
        })
        items = graph["items"]
        state = _ResolutionState(index=build_entity_index(items, graph["includes"]))

        for item in items:
            self._expand(item, state)

        if state.links_unresolved:
            action = "removed" if self.remove_unresolved else "left in place"
            logger.warning(f"{state.links_unresolved} unresolved links {action}")
        logger.debug(
            f"Resolved {state.links_resolved} links across {len(items)} items "
            f"({len(state.resolved)} entities expanded)"
        )

        collection["items"] = items
        return collection

    def _expand(self, root: Dict[str, Any], state: _ResolutionState) -> None:
        """Walk ``root`` and, through the pending stack, every item it reaches."""
        state.pending.append((entity_key(root, DEFAULT_ITEM_KIND), root))
        while state.pending:
            # The index key travels with the item; typeless includes are
            # keyed by their bucket name
            key, entity = state.pending.pop()
            # Only the indexed instance of a key counts as "the" item; a
            # duplicate in items is walked on its own account
            addressable = key is not None and state.index.get(key) is entity
            if addressable:
                if key in state.resolved or key in state.expanding:
                    continue
                state.expanding.add(key)

            self._walk_fields(entity, state)

            if addressable:
                state.expanding.discard(key)
                state.resolved.add(key)

    def _walk_fields(self, entity: Dict[str, Any], state: _ResolutionState) -> None:
        fields = entity.get("fields")
        if not isinstance(fields, dict):
            return
        sys = entity.get("sys") if isinstance(entity.get("sys"), dict) else {}
        single_locale = bool(sys.get("locale"))

        for name in list(fields):
            value = self._resolve_value(fields[name], state, single_locale, top_level=True)
            if value is _UNRESOLVED:
                del fields[name]
            else:
                fields[name] = value

    def _resolve_value(self, value: Any, state: _ResolutionState,
                       single_locale: bool, top_level: bool = False) -> Any:
        shape = classify_field_value(value, single_locale, top_level)

        if shape is FieldShape.LINK:
            return self._resolve_link(value, state)

        if shape is FieldShape.LIST:
            kept = []
            for element in value:
                resolved = self._resolve_value(element, state, single_locale)
                if resolved is not _UNRESOLVED:
                    kept.append(resolved)
            value[:] = kept
            return value

        if shape in (FieldShape.LOCALIZED, FieldShape.OBJECT):
            for key in list(value):
                resolved = self._resolve_value(value[key], state, single_locale)
                if resolved is _UNRESOLVED:
                    del value[key]
                else:
                    value[key] = resolved
            return value

        # ENTITY values are already resolved; scalars have nothing to resolve
        return value

    def _resolve_link(self, link: Dict[str, Any], state: _ResolutionState) -> Any:
        key = link_key(link)
        target = state.index.get(key) if key is not None else None
        if target is None:
            state.links_unresolved += 1
            return _UNRESOLVED if self.remove_unresolved else link

        state.links_resolved += 1
        if key not in state.resolved and key not in state.expanding:
            state.pending.append((key, target))
        return target


def resolve_response(payload: Mapping[str, Any], options: Optional[ResolveOptions] = None) -> ResolvedCollection:
    """
    Public resolution entry point.

    With ``options.resolve_links`` False the resolver is skipped and a copy
    of the raw payload is returned as-is.
    """
    options = options or ResolveOptions()
    if not options.resolve_links:
        return ResolvedCollection(copy.deepcopy(dict(payload)))
    return LinkResolver(remove_unresolved=options.remove_unresolved).resolve(payload)
