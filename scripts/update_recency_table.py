#!/usr/bin/env python3
"""
scripts/update_recency_table.py: Regenerate the set recency table
Fetch Scryfall's set list and weight the newest paper sets highest

Usage:
    python scripts/update_recency_table.py
    python scripts/update_recency_table.py --max-sets 60 --output data/recency_sets.json
    python scripts/update_recency_table.py --dry-run
"""

import json
import argparse
import logging
from pathlib import Path

import requests

from mtg_resolver.config import RECENCY_DEFAULT, RECENCY_TABLE_PATH
from mtg_resolver.matching.recency import RecencySet, build_recency_weights
from mtg_resolver.sources.scryfall import ScryfallClient

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Regenerate the set recency table from Scryfall")
    parser.add_argument(
        '--output', '-o',
        type=Path,
        default=RECENCY_TABLE_PATH,
        help=f"Output JSON path (default: {RECENCY_TABLE_PATH})"
    )
    parser.add_argument(
        '--max-sets',
        type=int,
        default=40,
        help="Number of recent sets to weight (default: 40)"
    )
    parser.add_argument(
        '--floor',
        type=float,
        default=RECENCY_DEFAULT,
        help=f"Weight of the oldest kept set (default: {RECENCY_DEFAULT})"
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help="Print the table instead of writing it"
    )
    args = parser.parse_args()

    client = ScryfallClient()
    try:
        sets = client.list_sets()
    except requests.RequestException as e:
        logger.error(f"Failed to fetch set list: {e}")
        raise SystemExit(1)
    finally:
        client.close()

    logger.info(f"Fetched {len(sets)} sets from Scryfall")

    weights = build_recency_weights(sets, max_sets=args.max_sets, floor=args.floor)
    if not weights:
        logger.error("No released sets found, keeping the existing table")
        raise SystemExit(1)

    recency = RecencySet(weights)

    if args.dry_run:
        print(json.dumps(recency.to_dict(), indent=2))
        return

    recency.save(args.output)

    newest = next(iter(weights))
    logger.info(f"Newest set: {newest} ({weights[newest]:.2f}), {len(weights)} sets total")


if __name__ == '__main__':
    main()
