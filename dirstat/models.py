from __future__ import annotations

from dataclasses import dataclass


TIME_ORDER_LABELS = ("amc", "acm", "mac", "mca", "cam", "cma")


@dataclass(frozen=True, slots=True)
class FileStatus:
    mode: int
    nlink: int
    uid: int
    gid: int
    size: int
    time_order: str

    def serialize(self) -> str:
        return (
            f"{self.mode},{self.nlink},{self.uid},{self.gid},"
            f"{self.size},{self.time_order}"
        )

    def __str__(self) -> str:
        return self.serialize()


StatusMap = dict[str, FileStatus]
TreeDigest = bytes
