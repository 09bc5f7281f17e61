#!/usr/bin/env python3
"""
Fetch entries from the delivery API and print them with links resolved.

Examples:
    python scripts/fetch_entries.py --content-type animal --limit 5
    python scripts/fetch_entries.py --entry-id oink --remove-unresolved
"""

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from content_delivery.core.delivery_api import ClientConfig, DeliveryClient, NotFoundError, TransportError


def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch entries with client-side link resolution")
    parser.add_argument("--content-type", help="Restrict to one content type id")
    parser.add_argument("--entry-id", help="Fetch a single entry by id")
    parser.add_argument("--limit", type=int, default=10)
    parser.add_argument("--include", type=int, default=2, help="Link depth the API should include (0-10)")
    parser.add_argument("--locale", help="Locale code, or '*' for all locales")
    parser.add_argument("--no-resolve", action="store_true", help="Return raw links")
    parser.add_argument("--remove-unresolved", action="store_true")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    project_root = Path(__file__).resolve().parents[1]
    load_dotenv(project_root / ".env.local")
    load_dotenv(project_root / ".env")

    config = ClientConfig.from_env(
        resolve_links=not args.no_resolve,
        remove_unresolved=args.remove_unresolved,
    )

    query = {"include": args.include}
    if args.locale:
        query["locale"] = args.locale

    with DeliveryClient(config) as client:
        try:
            if args.entry_id:
                entry = client.get_entry(args.entry_id, query)
                collection = client.parse_entries({"items": [entry]})
            else:
                query["limit"] = args.limit
                if args.content_type:
                    query["content_type"] = args.content_type
                collection = client.get_entries(query)
        except NotFoundError as e:
            print(json.dumps({"message": str(e), "sys": e.sys, "details": e.details}, indent=2))
            return 1
        except TransportError as e:
            print(f"Request failed: {e}")
            if e.body:
                print(json.dumps(e.body, indent=2) if isinstance(e.body, dict) else e.body)
            return 1

    print(collection.stringify_safe(indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
