"""On-disk JSON artifacts: daily snapshots and index shards."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, List, Union

from hkgflights.archive.errors import SnapshotParseFailure
from hkgflights.archive.models import DailySnapshot, FlightRecord

logger = logging.getLogger(__name__)

DAILY_DIR = "daily"
FLIGHTS_INDEX_DIR = os.path.join("indexes", "flights")
GATES_INDEX_DIR = os.path.join("indexes", "gates")

FLIGHTS = "flights"
GATES = "gates"


def _umask_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


# mkstemp creates 0600 files; artifacts get the mode open() would give them
FILE_MODE = _umask_file_mode()


def write_json_atomic(path: Path, data: Any, indent: int = 2) -> None:
    """Write JSON to a temp file in the same directory, then rename over path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write("\n")
        os.chmod(tmp, FILE_MODE)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


class SnapshotStore:
    """One JSON file per date under <root>/daily."""

    def __init__(self, root: Union[str, Path]):
        self.dir = Path(root) / DAILY_DIR

    def path_for(self, date: str) -> Path:
        return self.dir / f"{date}.json"

    def dates(self) -> List[str]:
        """Snapshot dates in ascending order."""
        if not self.dir.exists():
            return []
        return sorted(p.stem for p in self.dir.glob("*.json"))

    def write(self, snapshot: DailySnapshot) -> Path:
        """Replace the snapshot for its date."""
        path = self.path_for(snapshot.date)
        write_json_atomic(path, snapshot.to_dict(), indent=None)
        return path

    def read(self, date: str) -> DailySnapshot:
        path = self.path_for(date)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            return DailySnapshot.from_dict(data)
        except (OSError, ValueError) as e:
            raise SnapshotParseFailure(path, str(e)) from e


class ShardStore:
    """Index shards under <root>/indexes/flights and <root>/indexes/gates."""

    def __init__(self, root: Union[str, Path]):
        root = Path(root)
        self.dirs = {
            FLIGHTS: root / FLIGHTS_INDEX_DIR,
            GATES: root / GATES_INDEX_DIR,
        }

    def _dir(self, family: str) -> Path:
        try:
            return self.dirs[family]
        except KeyError:
            raise ValueError(f"Unknown shard family: {family}") from None

    def path_for(self, family: str, key: str) -> Path:
        return self._dir(family) / f"{key}.json"

    def write(self, family: str, key: str, records: Iterable[FlightRecord]) -> Path:
        path = self.path_for(family, key)
        write_json_atomic(path, [r.to_dict() for r in records])
        return path

    def read(self, family: str, key: str) -> List[FlightRecord]:
        with open(self.path_for(family, key), encoding="utf-8") as f:
            return [FlightRecord.from_dict(d) for d in json.load(f)]

    def keys(self, family: str) -> List[str]:
        d = self._dir(family)
        if not d.exists():
            return []
        return sorted(p.stem for p in d.glob("*.json"))

    def clean(self) -> int:
        """Delete every shard of both families. Returns the number removed."""
        removed = 0
        for family, d in self.dirs.items():
            if not d.exists():
                continue
            for p in d.glob("*.json"):
                p.unlink()
                removed += 1
            logger.info("Cleaned %s indexes", family)
        return removed
