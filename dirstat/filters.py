from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import PurePosixPath

from dirstat.models import StatusMap


def _normalize_pattern(pattern: str) -> str:
    normalized = pattern.strip().replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def _matches_any(relative_path: str, patterns: tuple[str, ...]) -> bool:
    path_obj = PurePosixPath(relative_path)
    for pattern in patterns:
        if not pattern:
            continue
        # "dir/" selects a whole subtree; anything else is a glob tried both
        # anchored at the scan root and at any depth.
        if pattern.endswith("/"):
            if relative_path.startswith(pattern):
                return True
        elif path_obj.match(pattern) or path_obj.match(f"**/{pattern}"):
            return True
    return False


@dataclass(slots=True)
class PathFilter:
    include_patterns: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.include_patterns and not self.exclude_patterns

    def matches(self, relative_path: str) -> bool:
        if self.include_patterns and not _matches_any(relative_path, self.include_patterns):
            return False
        return not _matches_any(relative_path, self.exclude_patterns)


def build_path_filter(
    include_patterns: list[str] | tuple[str, ...] | None = None,
    exclude_patterns: list[str] | tuple[str, ...] | None = None,
) -> PathFilter:
    include = tuple(_normalize_pattern(pattern) for pattern in (include_patterns or []) if pattern)
    exclude = tuple(_normalize_pattern(pattern) for pattern in (exclude_patterns or []) if pattern)
    return PathFilter(include_patterns=include, exclude_patterns=exclude)


def relative_status_path(path: str, root: str | os.PathLike[str]) -> str:
    prefix = os.fsdecode(root) + "/"
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def filter_status_map(
    status_map: StatusMap,
    root: str | os.PathLike[str],
    path_filter: PathFilter,
) -> StatusMap:
    """Keep the entries whose root-relative path passes ``path_filter``.

    Keys are left exactly as collected, so a filter that matches everything
    leaves the digest unchanged.
    """
    if path_filter.is_empty:
        return dict(status_map)
    return {
        path: status
        for path, status in status_map.items()
        if path_filter.matches(relative_status_path(path, root))
    }
