"""
CLI script to build and load the SDN search index.

Usage:
    python -m scripts.load_sdn                       # Transform source files and reload the index
    python -m scripts.load_sdn --transform-only      # Only write the transformed snapshot
    python -m scripts.load_sdn --from-snapshot       # Reload the index from the existing snapshot
    python -m scripts.load_sdn --updates FILE        # Apply a JSON list of {"id", "body"} updates
    python -m scripts.load_sdn --stats               # Show the indexing counter
    python -m scripts.load_sdn --delete              # Delete the index (careful!)
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.db.search_client import SearchClient
from ingestion.sdn.loader import LoadError, SDNLoader

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def load_sdn_data(loader: SDNLoader, from_snapshot: bool = False) -> dict:
    """Build (or read) the SDN documents and reload the index with them."""
    if from_snapshot:
        logger.info(f"Reading snapshot {loader.snapshot_path}...")
        documents = loader.read_snapshot()
    else:
        logger.info("Transforming SDN and Non-SDN records...")
        documents = loader.build_documents()

    logger.info(f"Loading {len(documents)} documents into {loader.index_name}...")
    await loader.reload_index(documents)
    return loader.stats


async def apply_updates(loader: SDNLoader, updates_file: Path) -> dict:
    """Apply bulk partial updates read from a JSON file."""
    operations = json.loads(updates_file.read_text(encoding="utf-8"))
    result = await loader.apply_updates(operations)
    return {"updated": result.succeeded, "total": result.total}


async def show_stats(loader: SDNLoader) -> dict:
    count = await SearchClient.indexing_stats(loader.index_name)
    logger.info(f"  Indexed documents: {count if count is not None else 'unavailable'}")
    return {"index": loader.index_name, "indexed_total": count}


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Build and load the SDN search index",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--update-dir",
        type=Path,
        default=None,
        help="Directory holding sdn.json, non_sdn.json and the snapshot",
    )
    parser.add_argument(
        "--index",
        default=None,
        help="Index name (defaults to SDN_INDEX)",
    )
    parser.add_argument(
        "--transform-only",
        action="store_true",
        help="Write the transformed snapshot without touching the index",
    )
    parser.add_argument(
        "--from-snapshot",
        action="store_true",
        help="Reload the index from the existing snapshot instead of re-transforming",
    )
    parser.add_argument(
        "--updates",
        type=Path,
        default=None,
        help="JSON file with a list of {\"id\": ..., \"body\": ...} bulk updates",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Only show the index's indexing counter",
    )
    parser.add_argument(
        "--delete",
        action="store_true",
        help="Delete the index",
    )

    args = parser.parse_args()
    loader = SDNLoader(update_dir=args.update_dir, index_name=args.index)

    if args.transform_only:
        try:
            documents = loader.build_documents()
        except LoadError as e:
            logger.error(str(e))
            return 1
        print(f"Wrote {len(documents)} documents to {loader.snapshot_path}")
        return 0

    await SearchClient.connect()

    try:
        results = {}

        if args.stats:
            results = await show_stats(loader)

        elif args.delete:
            confirm = input(f"Are you sure you want to delete the {loader.index_name} index? (yes/no): ")
            if confirm.lower() != "yes":
                logger.info("Cancelled")
                return 0
            results = {"deleted": await loader.drop_index()}

        elif args.updates:
            results["updates"] = await apply_updates(loader, args.updates)

        else:
            results["load"] = await load_sdn_data(loader, from_snapshot=args.from_snapshot)

        # Print final summary
        print("\n" + "=" * 60)
        print("SDN Load Complete")
        print("=" * 60)
        for key, value in results.items():
            print(f"\n{key.upper()}:")
            if isinstance(value, dict):
                for k, v in value.items():
                    print(f"  {k}: {v}")
            else:
                print(f"  {value}")
        return 0

    except LoadError as e:
        logger.error(str(e))
        return 1

    finally:
        await SearchClient.disconnect()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
