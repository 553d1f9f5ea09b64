from __future__ import annotations

import hashlib
import logging

from dirstat.models import StatusMap, TreeDigest


logger = logging.getLogger(__name__)

EMPTY_DIGEST: TreeDigest = hashlib.sha1(b"").digest()


def _encode(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def sorted_status_paths(status_map: StatusMap) -> list[str]:
    """Paths in hashing order: by their on-disk bytes."""
    return sorted(status_map, key=_encode)


def serialize_dir_status(status_map: StatusMap) -> str:
    # ':' and ';' inside paths are not escaped; changing that changes every
    # existing digest.
    return "".join(
        f"{path}:{status_map[path].serialize()};"
        for path in sorted_status_paths(status_map)
    )


def hash_dir_status(
    status_map: StatusMap,
    *,
    log: logging.Logger | None = None,
) -> TreeDigest:
    log = log or logger
    status_str = serialize_dir_status(status_map)
    log.debug("Dir status string: %s", status_str)
    return hashlib.sha1(_encode(status_str)).digest()
