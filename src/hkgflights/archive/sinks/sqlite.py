"""Local SQLite sink, same schema as the remote D1 database."""

import sqlite3
from importlib import resources
from pathlib import Path
from typing import List, Sequence, Union

from hkgflights.archive.errors import SinkBatchFailure
from hkgflights.archive.sinks.base import Statement


def load_schema() -> str:
    return resources.files("hkgflights.archive.sinks").joinpath("schema.sql").read_text()


class SQLiteSink:
    """Runs each batch in a single transaction."""

    def __init__(self, path: Union[str, Path] = ":memory:"):
        if str(path) != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self.path = path
        self.conn = sqlite3.connect(str(path))

    def ensure_schema(self) -> None:
        self.conn.executescript(load_schema())

    def execute_batch(self, statements: Sequence[Statement]) -> List[int]:
        counts = []
        try:
            with self.conn:
                for stmt in statements:
                    cur = self.conn.execute(stmt.sql, list(stmt.params))
                    counts.append(max(cur.rowcount, 0))
        except sqlite3.Error as e:
            raise SinkBatchFailure(str(e)) from e
        return counts

    def close(self) -> None:
        self.conn.close()
