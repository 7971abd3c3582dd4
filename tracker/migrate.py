"""
Copy every partition from the document-file backend into the relational
backend.

    python -m tracker.migrate --data-dir data --database-url postgresql://...

Each target partition is fully replaced, so the command can be re-run.
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional

from tracker.config import get_settings
from tracker.db import SqlStorageBackend
from tracker.models import Reward, StateRecord, Task, coerce_records
from tracker.storage import FileStorageBackend, StorageBackend

logger = logging.getLogger(__name__)

_COLLECTIONS = (("tasks", Task), ("rewards", Reward))


def migrate_partition(
    source: FileStorageBackend, target: StorageBackend, key: str, *, dry_run: bool
) -> int:
    """Copy one partition; returns the number of collection records copied."""
    copied = 0
    for kind, record_type in _COLLECTIONS:
        records = coerce_records(source.load_collection(kind, key), record_type)
        copied += len(records)
        if not dry_run:
            target.replace_collection(kind, key, [r.as_dict() for r in records])
    state = source.load_state(key)
    if state is not None and not dry_run:
        target.upsert_state(key, StateRecord.from_dict(state).as_dict())
    return copied


def migrate(
    source: FileStorageBackend, target: StorageBackend, *, dry_run: bool = False
) -> tuple[int, int]:
    partitions = 0
    records = 0
    for key in source.partition_keys():
        records += migrate_partition(source, target, key, dry_run=dry_run)
        partitions += 1
        logger.info("Migrated partition %r", key)
    return partitions, records


def main(argv: Optional[list[str]] = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Copy document-file partitions into the relational backend"
    )
    parser.add_argument(
        "--data-dir",
        default=settings.data_dir,
        help="Root directory of the document-file backend",
    )
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="SQLAlchemy URL of the target database",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be copied without writing",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    if not args.database_url:
        logger.error("A target --database-url (or DATABASE_URL) is required")
        return 1

    source = FileStorageBackend(args.data_dir)
    target = SqlStorageBackend(args.database_url)
    partitions, records = migrate(source, target, dry_run=args.dry_run)
    logger.info("Copied %d records across %d partitions", records, partitions)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
