from __future__ import annotations

import logging
import os
import stat
from typing import Callable

from dirstat.models import StatusMap
from dirstat.status import extract_status


logger = logging.getLogger(__name__)

PSEUDO_ENTRIES = {".", ".."}


class MetadataUnavailable(RuntimeError):
    """Raised when an entry seen in a directory listing cannot be lstat'ed.

    A tree observed only in part is not hashed, so this aborts the whole scan.
    """

    def __init__(self, path: str, error: OSError) -> None:
        super().__init__(f"lstat({path}) failed: {error}")
        self.path = path
        self.error = error


def update_dir_status(
    root: str | os.PathLike[str],
    status_map: StatusMap,
    *,
    log: logging.Logger | None = None,
    on_unreadable: Callable[[str, OSError], None] | None = None,
) -> None:
    log = log or logger
    pending = [os.fsdecode(root)]

    while pending:
        directory = pending.pop()
        try:
            entries = os.scandir(directory)
        except OSError as exc:
            log.warning("Cannot open directory %s: %s", directory, exc)
            if on_unreadable is not None:
                on_unreadable(directory, exc)
            continue

        with entries:
            for entry in entries:
                if entry.name in PSEUDO_ENTRIES:
                    continue
                child = f"{directory}/{entry.name}"
                try:
                    st = os.lstat(child)
                except OSError as exc:
                    raise MetadataUnavailable(child, exc) from exc

                if stat.S_ISDIR(st.st_mode):
                    pending.append(child)
                    continue
                status_map[child] = extract_status(st)


def collect_dir_status(
    root: str | os.PathLike[str],
    *,
    log: logging.Logger | None = None,
    on_unreadable: Callable[[str, OSError], None] | None = None,
) -> StatusMap:
    status_map: StatusMap = {}
    update_dir_status(root, status_map, log=log, on_unreadable=on_unreadable)
    return status_map
