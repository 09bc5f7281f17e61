#!/usr/bin/env python3
"""
Run an initial or delta sync and write the result to a JSON file.

The next sync token is stored next to the output so the following run can
pick up only the changes:

    python scripts/run_sync.py --output output/sync.json            # initial
    python scripts/run_sync.py --output output/sync.json --delta    # changes since last run
"""

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from content_delivery.core.delivery_api import ClientConfig, DeliveryClient
from content_delivery.core.delivery_api.utils import decycle

logger = logging.getLogger("run_sync")


def main() -> None:
    parser = argparse.ArgumentParser(description="Sync content from the delivery API")
    parser.add_argument("--output", default="output/sync.json", help="Where to write the sync result")
    parser.add_argument("--delta", action="store_true", help="Continue from the stored sync token")
    parser.add_argument("--type", choices=["Entry", "Asset", "Deletion", "DeletedEntry", "DeletedAsset"])
    parser.add_argument("--content-type", help="Only sync entries of this content type (initial sync)")
    parser.add_argument("--no-paginate", action="store_true", help="Stop after the first page")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    project_root = Path(__file__).resolve().parents[1]
    load_dotenv(project_root / ".env.local")
    load_dotenv(project_root / ".env")

    output_path = Path(args.output)
    token_path = output_path.with_suffix(".token")

    if args.delta:
        if not token_path.exists():
            parser.error(f"No stored sync token at {token_path}; run an initial sync first")
        query = {"next_sync_token": token_path.read_text(encoding="utf-8").strip()}
    else:
        query = {"initial": True}
        if args.type:
            query["type"] = args.type
        if args.content_type:
            query["content_type"] = args.content_type

    with DeliveryClient(ClientConfig.from_env()) as client:
        result = client.sync(query, paginate=not args.no_paginate)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(decycle(result.to_dict()), indent=2), encoding="utf-8")
    logger.info(f"✓ Wrote sync result to {output_path}")

    if result.next_sync_token:
        token_path.write_text(result.next_sync_token, encoding="utf-8")
        logger.info(f"✓ Stored next sync token in {token_path}")


if __name__ == "__main__":
    main()
