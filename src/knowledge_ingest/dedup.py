"""Content fingerprinting and duplicate detection."""

import hashlib
import logging
from typing import Optional

from .policy import OwnerScope
from .store import KnowledgeRecordStore

logger = logging.getLogger(__name__)


def generate_file_hash(data: bytes) -> str:
    """Return the SHA-256 hex digest of the raw file bytes."""
    file_hash = hashlib.sha256(data).hexdigest()
    logger.debug(f"[dedup] Generated hash {file_hash[:16]}... for {len(data)} bytes")
    return file_hash


async def check_for_duplicate(
    store: KnowledgeRecordStore,
    owner: OwnerScope,
    file_hash: str,
    file_name: Optional[str] = None,
) -> bool:
    """
    Check whether this owner already has records for the same file.

    Matches on content hash first, then on file name when one is given.
    Any lookup failure is logged and treated as "no match", whether the
    store wrapped it in StoreError or the driver raised it directly, so that
    a store outage does not block uploads.

    Args:
        store: Knowledge record store
        owner: Owner scope to search within
        file_hash: Content fingerprint of the upload
        file_name: Declared file name, optional

    Returns:
        True if a matching record exists for this owner
    """
    logger.info(
        "[dedup] Checking for duplicate file",
        extra={"owner_kind": owner.kind.value, "owner_id": owner.id, "file_hash": file_hash[:16]},
    )

    try:
        matches = await store.find_by_fingerprint(owner, file_hash)
    except Exception as e:
        logger.error(f"[dedup] Error checking for duplicate by hash: {type(e).__name__}: {e}")
    else:
        if matches:
            logger.warning(
                f"[dedup] Found {len(matches)} existing chunks with same hash "
                f"(first file: {matches[0].file_name})"
            )
            return True

    if file_name:
        try:
            matches = await store.find_by_name(owner, file_name)
        except Exception as e:
            logger.error(f"[dedup] Error checking for duplicate by name: {type(e).__name__}: {e}")
        else:
            if matches:
                logger.warning(
                    f"[dedup] Found {len(matches)} existing chunks with same file name: {file_name}"
                )
                return True

    logger.info("[dedup] No duplicates found, proceeding with upload")
    return False


__all__ = ["generate_file_hash", "check_for_duplicate"]
