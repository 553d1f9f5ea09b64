import stat
from types import SimpleNamespace

import pytest

from dirstat.models import TIME_ORDER_LABELS, FileStatus
from dirstat.status import extract_status, format_time, time_key, time_order


NS = 1_000_000_000


def fake_stat(**overrides):
    values = dict(
        st_mode=stat.S_IFREG | 0o644,
        st_nlink=1,
        st_uid=1000,
        st_gid=100,
        st_size=42,
        st_atime_ns=30 * NS,
        st_mtime_ns=20 * NS,
        st_ctime_ns=10 * NS,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.mark.parametrize(
    ("atime", "mtime", "ctime", "expected"),
    [
        (3, 2, 1, "amc"),
        (3, 1, 2, "acm"),
        (2, 3, 1, "mac"),
        (1, 3, 2, "mca"),
        (2, 1, 3, "cam"),
        (1, 2, 3, "cma"),
    ],
)
def test_time_order_labels(atime, mtime, ctime, expected):
    assert time_order(atime, mtime, ctime) == expected


@pytest.mark.parametrize(
    ("atime", "mtime", "ctime", "expected"),
    [
        (5, 5, 1, "amc"),  # access = modify > change
        (1, 1, 5, "cam"),  # change > access = modify
        (5, 5, 5, "amc"),
        (5, 1, 5, "acm"),
        (1, 5, 5, "mca"),
    ],
)
def test_time_order_ties(atime, mtime, ctime, expected):
    assert time_order(atime, mtime, ctime) == expected


def test_time_order_covers_every_label():
    seen = {
        time_order(a, m, c)
        for a in range(3)
        for m in range(3)
        for c in range(3)
    }
    assert seen == set(TIME_ORDER_LABELS)


def test_time_key_prefers_nanoseconds():
    assert time_key(5 * NS + 7) == 7
    assert time_key(5 * NS) == 5
    assert time_key(0) == 0


def test_format_time_does_not_combine_seconds_and_nanoseconds():
    # Whole-second access time compares by seconds (10) against the modify
    # time's nanosecond part (500), so access loses despite being newer.
    st = fake_stat(
        st_atime_ns=10 * NS,
        st_mtime_ns=3 * NS + 500,
        st_ctime_ns=1 * NS + 5,
    )
    assert format_time(st) == "mac"


def test_extract_status_fields():
    status = extract_status(fake_stat())

    assert status == FileStatus(
        mode=stat.S_IFREG | 0o644,
        nlink=1,
        uid=1000,
        gid=100,
        size=42,
        time_order="amc",
    )
    assert status.serialize() == f"{stat.S_IFREG | 0o644},1,1000,100,42,amc"
    assert str(status) == status.serialize()


def test_extract_status_is_deterministic():
    assert extract_status(fake_stat()).serialize() == extract_status(fake_stat()).serialize()


def test_extract_status_ignores_absolute_time_shift():
    shifted = fake_stat(
        st_atime_ns=130 * NS,
        st_mtime_ns=120 * NS,
        st_ctime_ns=110 * NS,
    )
    assert extract_status(shifted) == extract_status(fake_stat())


def test_extract_status_large_size():
    status = extract_status(fake_stat(st_size=2**40 + 3))
    assert status.serialize().split(",")[4] == str(2**40 + 3)


def test_file_status_is_immutable():
    status = extract_status(fake_stat())
    with pytest.raises(AttributeError):
        status.size = 1


def test_pre_epoch_seconds_wrap_to_unsigned():
    assert time_key(-100 * NS) == 2**64 - 100
    assert time_key(-100 * NS + 5) == 5


def test_pre_epoch_time_sorts_as_newest():
    st = fake_stat(st_atime_ns=-100 * NS, st_mtime_ns=50 * NS, st_ctime_ns=10 * NS)
    assert format_time(st) == "amc"
