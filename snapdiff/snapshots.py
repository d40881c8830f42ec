"""Listing restic snapshots and matching them to a mounted repository."""

from __future__ import annotations

import os
import re
import subprocess
from dataclasses import dataclass
from datetime import datetime

# restic prints local times without an offset; this one is assumed.
TIMEZONE_OFFSET = "-03:00"

_TABLE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S%z"
_MOUNT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
_DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_LATEST_LINK = "latest"

_IEC_UNITS = {
    "B": 1,
    "KIB": 1024,
    "MIB": 1024**2,
    "GIB": 1024**3,
    "TIB": 1024**4,
    "PIB": 1024**5,
}
_SIZE_PATTERN = re.compile(r"^([0-9]+(?:\.[0-9]+)?)([A-Za-z]+)$")


class SnapshotError(Exception):
    """Raised when snapshots cannot be listed or matched to the mount."""


@dataclass
class Snapshot:
    id: str
    date: datetime
    size: int = 0
    size_str: str = ""
    path: str = ""

    def __str__(self) -> str:
        return f"{self.id}\t{self.date.strftime(_DISPLAY_TIME_FORMAT)}\t{self.size_str}"


@dataclass(frozen=True)
class SnapshotsMetadata:
    newer_full_path: str
    newer_id: str
    older_full_path: str
    older_id: str


def _size_in_bytes(size_str: str) -> int:
    match = _SIZE_PATTERN.match(size_str)
    if not match:
        return 0
    factor = _IEC_UNITS.get(match.group(2).upper())
    if factor is None:
        return 0
    return int(float(match.group(1)) * factor)


def parse_snapshots(output: str | bytes) -> list[Snapshot]:
    """Parse the table printed by ``restic snapshots``.

    The two header lines and the trailing separator, summary and empty
    line are dropped; every remaining line describes one snapshot.
    """
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="replace")
    lines = output.split("\n")
    body = lines[2 : len(lines) - 3]
    if not body:
        raise SnapshotError("expected at least 1 snapshot")

    snapshots = []
    for line in body:
        fields = line.split()
        if len(fields) < 5:
            raise SnapshotError(f"malformed snapshot line: {line!r}")
        stamp = f"{fields[1]} {fields[2]}{TIMEZONE_OFFSET}"
        try:
            date = datetime.strptime(stamp, _TABLE_TIME_FORMAT)
        except ValueError as exc:
            raise SnapshotError(f"bad snapshot time {stamp!r}: {exc}") from exc
        size_str = fields[-2] + fields[-1]
        snapshots.append(
            Snapshot(
                id=fields[0],
                date=date,
                size=_size_in_bytes(size_str),
                size_str=size_str,
            )
        )
    return snapshots


def find_snapshot_by_time(snapshots: list[Snapshot], moment: datetime) -> int | None:
    """Return the index of the first snapshot taken at ``moment``, or None."""
    return next(
        (index for index, snapshot in enumerate(snapshots) if snapshot.date == moment),
        None,
    )


def check_directories_consistency(snapshots: list[Snapshot], mount_path: str) -> list[Snapshot]:
    """Attach to each snapshot its directory under ``<mount>/snapshots``.

    Every directory there must correspond to a listed snapshot; the
    ``latest`` link is ignored.
    """
    snapshots_dir = os.path.join(mount_path, "snapshots")
    if not os.path.exists(snapshots_dir):
        raise SnapshotError(f"mount directory not found: {snapshots_dir}")
    try:
        names = sorted(os.listdir(snapshots_dir))
    except OSError as exc:
        raise SnapshotError(f"directory missing or not mounted: {exc}") from exc

    for name in names:
        if name == _LATEST_LINK:
            continue
        try:
            moment = datetime.strptime(name, _MOUNT_TIME_FORMAT)
        except ValueError as exc:
            raise SnapshotError(f"unexpected snapshot directory name {name!r}") from exc
        index = find_snapshot_by_time(snapshots, moment)
        if index is None:
            raise SnapshotError(f"mismatch entries for snapshot {name}")
        snapshots[index].path = os.path.join(snapshots_dir, name)
    return snapshots


def get_snapshots(repo_path: str, mount_path: str) -> list[Snapshot]:
    """Run ``restic snapshots`` on the repository and match it to the mount."""
    if not os.path.exists(repo_path):
        raise SnapshotError(f"mount directory not found: {repo_path}")

    try:
        completed = subprocess.run(
            ["restic", "-r", repo_path, "snapshots"],
            stdout=subprocess.PIPE,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise SnapshotError(f"error return from restic command: {exc}") from exc

    try:
        snapshots = parse_snapshots(completed.stdout)
    except SnapshotError as exc:
        raise SnapshotError(f"parsing command snapshot: {exc}") from exc
    try:
        return check_directories_consistency(snapshots, mount_path)
    except SnapshotError as exc:
        raise SnapshotError(f"directory consistency error: {exc}") from exc