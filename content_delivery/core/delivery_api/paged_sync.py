"""
Sync pagination driver.

Follows the sync endpoint's continuation tokens page by page, aggregates the
changed and deleted entries and assets, and hands the aggregate to the link
resolver once at the end. Only initial syncs are resolved: a delta sync
contains just the changed items, so the graph needed to resolve their links
is not available.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Set

from content_delivery.core.delivery_api.http_transport import HttpTransport
from content_delivery.core.delivery_api.link_resolver import LinkResolver
from content_delivery.core.delivery_api.models import ApiScope, SyncCollection, SyncPage, SysType
from content_delivery.core.delivery_api.query_builder import sync_request_params, validate_sync_query
from content_delivery.core.delivery_api.utils import extract_sync_token

logger = logging.getLogger(__name__)

SYNC_PATH = "sync"


def fetch_sync_pages(transport: HttpTransport, query: Mapping[str, Any], paginate: bool = True) -> SyncPage:
    """
    Request sync pages until a terminal page is reached.

    A page with ``nextPageUrl`` continues the run (unless ``paginate`` is
    False, in which case its token is reported as ``next_page_token``). A
    page with ``nextSyncUrl`` ends it. A continuation token that was already
    requested also ends it, to guard against a server repeating itself.

    Args:
        transport: Transport used for the GET requests
        query: Validated sync query
        paginate: Follow nextPageUrl links

    Returns:
        SyncPage with all items gathered and the final token
    """
    params = sync_request_params(query)
    items: List[Dict[str, Any]] = []
    requested_tokens: Set[str] = set()
    if params.get("sync_token"):
        requested_tokens.add(params["sync_token"])
    pages = 0

    while True:
        data = transport.get(ApiScope.ENVIRONMENT, SYNC_PATH, params=params) or {}
        pages += 1
        page_items = data.get("items") or []
        items.extend(page_items)
        logger.debug(f"Sync page {pages}: {len(page_items)} items")

        if data.get("nextPageUrl"):
            token = extract_sync_token(data["nextPageUrl"])
            if not paginate:
                return SyncPage(items=items, next_page_token=token, pages_fetched=pages)
            if not token or token in requested_tokens:
                logger.warning(f"Sync page token repeated or empty after {pages} pages, stopping")
                return SyncPage(items=items, next_page_token=token or None, pages_fetched=pages)
            requested_tokens.add(token)
            params = {"sync_token": token}
            continue

        if data.get("nextSyncUrl"):
            return SyncPage(
                items=items,
                next_sync_token=extract_sync_token(data["nextSyncUrl"]),
                pages_fetched=pages,
            )

        logger.warning(
            f"Sync response carried neither nextPageUrl nor nextSyncUrl, "
            f"returning {len(items)} items without a token"
        )
        return SyncPage(items=items, pages_fetched=pages)


def bucket_sync_items(items: List[Dict[str, Any]]) -> SyncCollection:
    """Split sync items into entries, assets and deletions by sys.type."""
    collection = SyncCollection()
    buckets = {
        SysType.ENTRY.value: collection.entries,
        SysType.ASSET.value: collection.assets,
        SysType.DELETED_ENTRY.value: collection.deleted_entries,
        SysType.DELETED_ASSET.value: collection.deleted_assets,
    }
    for item in items:
        sys = item.get("sys") if isinstance(item, dict) else None
        bucket = buckets.get(sys.get("type")) if isinstance(sys, dict) else None
        if bucket is not None:
            bucket.append(item)
    return collection


def paged_sync(
    transport: HttpTransport,
    query: Optional[Mapping[str, Any]],
    resolve_links: bool = True,
    remove_unresolved: bool = False,
    paginate: bool = True,
) -> SyncCollection:
    """
    Run a sync and return the aggregated collection.

    Args:
        transport: Transport used for the GET requests
        query: Sync query with ``initial`` or a continuation token
        resolve_links: Resolve links between synced items (initial syncs only)
        remove_unresolved: Drop links that cannot be resolved
        paginate: Follow nextPageUrl links

    Returns:
        SyncCollection with entries, assets, deletions and the next token

    Raises:
        ValueError: If the query has no starting point or an invalid type filter
    """
    query = validate_sync_query(query)
    is_initial = bool(query.get("initial"))

    page = fetch_sync_pages(transport, query, paginate=paginate)
    items = page.items

    if resolve_links and is_initial:
        items = LinkResolver(remove_unresolved=remove_unresolved).resolve({"items": items})["items"]
    elif resolve_links:
        logger.debug("Skipping link resolution for delta sync")

    collection = bucket_sync_items(items)
    collection.next_sync_token = page.next_sync_token
    collection.next_page_token = page.next_page_token

    logger.info(
        f"Sync finished after {page.pages_fetched} pages: {len(collection.entries)} entries, "
        f"{len(collection.assets)} assets, {len(collection.deleted_entries)} deleted entries, "
        f"{len(collection.deleted_assets)} deleted assets"
    )
    return collection
