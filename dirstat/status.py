from __future__ import annotations

import os

from dirstat.models import FileStatus


NS_PER_SECOND = 1_000_000_000
KEY_MASK = 0xFFFF_FFFF_FFFF_FFFF


def time_key(total_ns: int) -> int:
    """Comparison key for one timestamp: the nanosecond part if set, else the seconds.

    The two parts are never combined, so timestamps without sub-second
    precision compare by seconds while others compare by nanoseconds only.
    Keys are unsigned 64-bit, so pre-epoch seconds wrap to large values.
    """
    seconds, nanoseconds = divmod(total_ns, NS_PER_SECOND)
    return nanoseconds if nanoseconds > 0 else seconds & KEY_MASK


def time_order(atime: int, mtime: int, ctime: int) -> str:
    if atime >= mtime and atime >= ctime:
        return "amc" if mtime >= ctime else "acm"
    if mtime >= ctime:
        return "mac" if atime >= ctime else "mca"
    return "cam" if atime >= mtime else "cma"


def format_time(st: os.stat_result) -> str:
    return time_order(
        time_key(st.st_atime_ns),
        time_key(st.st_mtime_ns),
        time_key(st.st_ctime_ns),
    )


def extract_status(st: os.stat_result) -> FileStatus:
    return FileStatus(
        mode=st.st_mode,
        nlink=st.st_nlink,
        uid=st.st_uid,
        gid=st.st_gid,
        size=st.st_size,
        time_order=format_time(st),
    )
