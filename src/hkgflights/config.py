"""Runtime settings read from the environment (and a .env file when present)."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, TypeVar

from dotenv import load_dotenv

from hkgflights.archive.errors import ConfigError
from hkgflights.archive.sinks.base import SINK_BATCH_SIZE
from hkgflights.archive.sources.hk_airport import BASE_URL

T = TypeVar("T")

SINK_SQLITE = "sqlite"
SINK_D1 = "d1"


def _get(env: Mapping[str, str], name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ConfigError(f"Invalid value for {name}: {raw!r}") from None


@dataclass
class Settings:
    feed_url: str = BASE_URL
    feed_lang: str = "en"
    feed_timeout: int = 30
    fetch_delay: float = 1.0
    data_dir: Path = Path("data")
    sink: str = SINK_SQLITE
    sqlite_path: Path = Path("data") / "flights.db"
    cloudflare_account_id: str = ""
    cloudflare_api_token: str = ""
    d1_database_id: str = ""
    sink_timeout: int = 120
    batch_size: int = SINK_BATCH_SIZE

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "Settings":
        """Build settings from env (os.environ by default). Raises ConfigError."""
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ

        data_dir = _get(env, "HKG_DATA_DIR", Path("data"), Path)
        sink = _get(env, "HKG_SINK", SINK_SQLITE, str).lower()
        if sink not in (SINK_SQLITE, SINK_D1):
            raise ConfigError(f"HKG_SINK must be '{SINK_SQLITE}' or '{SINK_D1}', got {sink!r}")
        batch_size = _get(env, "HKG_BATCH_SIZE", SINK_BATCH_SIZE, int)
        if batch_size < 1:
            raise ConfigError(f"HKG_BATCH_SIZE must be positive, got {batch_size}")

        return cls(
            feed_url=_get(env, "HKG_FEED_URL", BASE_URL, str),
            feed_lang=_get(env, "HKG_FEED_LANG", "en", str),
            feed_timeout=_get(env, "HKG_FEED_TIMEOUT", 30, int),
            fetch_delay=_get(env, "HKG_FETCH_DELAY", 1.0, float),
            data_dir=data_dir,
            sink=sink,
            sqlite_path=_get(env, "HKG_SQLITE_PATH", data_dir / "flights.db", Path),
            cloudflare_account_id=env.get("CLOUDFLARE_ACCOUNT_ID", ""),
            cloudflare_api_token=env.get("CLOUDFLARE_API_TOKEN", ""),
            d1_database_id=env.get("D1_DATABASE_ID", ""),
            sink_timeout=_get(env, "HKG_SINK_TIMEOUT", 120, int),
            batch_size=batch_size,
        )
