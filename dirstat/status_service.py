from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dirstat.filters import PathFilter, filter_status_map
from dirstat.hasher import hash_dir_status
from dirstat.models import StatusMap, TreeDigest
from dirstat.scanner import collect_dir_status


@dataclass(slots=True)
class DirStatusResult:
    root: str
    status_map: StatusMap
    digest: TreeDigest
    unreadable_dirs: list[str] = field(default_factory=list)

    @property
    def hexdigest(self) -> str:
        return self.digest.hex()

    @property
    def file_count(self) -> int:
        return len(self.status_map)

    @property
    def is_complete(self) -> bool:
        return not self.unreadable_dirs


def compute_dir_status(
    root: str | os.PathLike[str],
    *,
    path_filter: PathFilter | None = None,
    log: logging.Logger | None = None,
) -> DirStatusResult:
    """Collect, filter and hash the status of every file under ``root``.

    Raises ``MetadataUnavailable`` if any listed entry cannot be lstat'ed.
    """
    root_str = os.fsdecode(root)
    unreadable_dirs: list[str] = []

    def _on_unreadable(path: str, _error: OSError) -> None:
        unreadable_dirs.append(path)

    status_map = collect_dir_status(root_str, log=log, on_unreadable=_on_unreadable)
    if path_filter is not None:
        status_map = filter_status_map(status_map, root_str, path_filter)

    return DirStatusResult(
        root=root_str,
        status_map=status_map,
        digest=hash_dir_status(status_map, log=log),
        unreadable_dirs=sorted(unreadable_dirs),
    )


def digest_matches(result: DirStatusResult, expected_hex: str) -> bool:
    return result.hexdigest == expected_hex.strip().lower()
