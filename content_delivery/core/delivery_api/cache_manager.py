"""
On-disk cache for raw delivery API responses.

Caches the parsed JSON body of GET requests so repeated runs against the
same content (scripts, exports, notebooks) do not hit the API again.

Key Features:
- Key generation from namespace, URL and query parameters
- JSON files on disk, one per response
- Bodies are re-read from disk on every hit, so callers that mutate a
  returned body (the link resolver works on copies, others may not) never
  corrupt the cache
- Corrupt entries are removed and treated as misses
"""

import hashlib
import json
import time
from pathlib import Path
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class ResponseCache:
    """
    File cache for delivery API response bodies.

    Entries are grouped by namespace (typically the request path such as
    ``entries`` or ``sync``) so they can be inspected and cleared per endpoint.
    """

    def __init__(self, cache_dir: str = "cache"):
        """Initialize the cache with a directory."""
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def _safe_namespace(namespace: str) -> str:
        return "".join(ch if ch.isalnum() else "-" for ch in namespace).strip("-") or "root"

    def _generate_cache_key(self, namespace: str, url: str, params: Optional[Dict[str, Any]]) -> str:
        """Generate a unique cache key for a request."""
        data_str = json.dumps({"url": url, "params": params or {}}, sort_keys=True, default=str)
        hash_value = hashlib.sha256(f"{namespace}:{data_str}".encode()).hexdigest()
        return f"response_{self._safe_namespace(namespace)}_{hash_value[:16]}"

    def get(self, namespace: str, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """
        Retrieve a cached response body.

        Args:
            namespace: Endpoint the request targeted
            url: Fully-qualified request URL
            params: Query parameters of the request

        Returns:
            The cached body if found, None otherwise
        """
        cache_key = self._generate_cache_key(namespace, url, params)
        cache_file = self.cache_dir / f"{cache_key}.json"

        if not cache_file.exists():
            return None

        try:
            with open(cache_file, "r", encoding="utf-8") as f:
                cached_data = json.load(f)
            self.logger.debug(f"Response cache HIT for {namespace}: {cache_key}")
            return cached_data["body"]
        except (OSError, ValueError, KeyError) as e:
            self.logger.error(f"Failed to load cache entry {cache_key}: {e}")
            cache_file.unlink(missing_ok=True)
            return None

    def set(self, namespace: str, url: str, params: Optional[Dict[str, Any]], body: Any) -> None:
        """
        Store a response body in the cache.

        Args:
            namespace: Endpoint the request targeted
            url: Fully-qualified request URL
            params: Query parameters of the request
            body: Parsed JSON body to store
        """
        cache_key = self._generate_cache_key(namespace, url, params)
        cache_file = self.cache_dir / f"{cache_key}.json"

        try:
            cached_data = {
                "namespace": namespace,
                "url": url,
                "timestamp": time.time(),
                "body": body,
            }
            with open(cache_file, "w", encoding="utf-8") as f:
                json.dump(cached_data, f)
            self.logger.debug(f"Response cache SET for {namespace}: {cache_key}")
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f"Failed to save cache entry {cache_key}: {e}")

    def clear(self) -> int:
        """
        Clear all cached responses.

        Returns:
            Number of entries cleared
        """
        cache_files = list(self.cache_dir.glob("response_*.json"))
        for cache_file in cache_files:
            cache_file.unlink(missing_ok=True)

        count = len(cache_files)
        if count > 0:
            self.logger.info(f"Cleared {count} cached responses")
        return count

    def clear_by_namespace(self, namespace: str) -> int:
        """
        Clear cached responses for one endpoint.

        Returns:
            Number of entries cleared for the namespace
        """
        cache_files = list(self.cache_dir.glob(f"response_{self._safe_namespace(namespace)}_*.json"))
        for cache_file in cache_files:
            cache_file.unlink(missing_ok=True)

        count = len(cache_files)
        if count > 0:
            self.logger.info(f"Cleared {count} cached responses for '{namespace}'")
        return count

    def get_stats(self, namespace: Optional[str] = None) -> dict:
        """
        Get cache statistics.

        Args:
            namespace: Optional endpoint to restrict the stats to

        Returns:
            Dictionary with cache statistics
        """
        if namespace is not None:
            cache_files = list(self.cache_dir.glob(f"response_{self._safe_namespace(namespace)}_*.json"))
            return {
                "namespace": namespace,
                "entries": len(cache_files),
                "size_bytes": sum(f.stat().st_size for f in cache_files if f.exists()),
            }

        cache_files = list(self.cache_dir.glob("response_*.json"))
        breakdown: Dict[str, int] = {}
        for cache_file in cache_files:
            # response_<namespace>_<hash>
            ns = cache_file.stem[len("response_"):].rsplit("_", 1)[0]
            breakdown[ns] = breakdown.get(ns, 0) + 1

        return {
            "total_entries": len(cache_files),
            "total_size_bytes": sum(f.stat().st_size for f in cache_files if f.exists()),
            "namespace_breakdown": breakdown,
        }
