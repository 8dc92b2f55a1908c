#!/usr/bin/env python3
"""Generate a mock listings seed file.

The file uses the camelCase mock-data layout understood by
``MemoryBackend.from_seed_file`` and can be pointed at with
``LISTINGS_SEED_PATH``.
"""

import argparse
import json
import logging
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from listing_engine.config import ListingEngineConfig
from listing_engine.generators import ListingGenerator
from listing_engine.logging import setup_logging
from listing_engine.models import SavedRecord
from listing_engine.serialization import property_to_record, saved_record_to_record

logger = logging.getLogger(__name__)


def generate_saved_records(property_ids: list[int], count: int, seed: int) -> list[SavedRecord]:
    """Bookmark ``count`` distinct listings."""
    rng = random.Random(seed)
    chosen = rng.sample(property_ids, k=min(count, len(property_ids)))
    now = datetime.now(timezone.utc)
    return [
        SavedRecord(
            id=index,
            property_id=property_id,
            saved_date=now - timedelta(days=rng.randint(0, 30)),
            notes=rng.choice(["", "", "Call the agent", "Visit on the weekend"]),
        )
        for index, property_id in enumerate(chosen, start=1)
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate mock listing data")
    parser.add_argument("--count", type=int, default=50, help="Number of listings")
    parser.add_argument("--saved", type=int, default=5, help="Number of saved listings")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "--output", type=Path, default=Path("local/listings.json"), help="Output file"
    )
    args = parser.parse_args()

    config = ListingEngineConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    properties = list(ListingGenerator(seed=args.seed).generate_batch(args.count))
    saved = generate_saved_records([p.id for p in properties], args.saved, args.seed)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with open(args.output, "w", encoding="utf-8") as f:
        json.dump(
            {
                "properties": [property_to_record(p) for p in properties],
                "savedProperties": [saved_record_to_record(r) for r in saved],
            },
            f,
            indent=2,
            ensure_ascii=False,
        )
    logger.info("Saved %d listings and %d saved records to %s", len(properties), len(saved), args.output)


if __name__ == "__main__":
    main()
