from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from nre_tracker.models import DEFAULT_PORT


_REPO_ROOT = Path(__file__).resolve().parents[1]

STORE_BACKENDS = ("json", "sqlite")


@dataclass(frozen=True)
class TrackerConfig:
    """Process-wide runtime configuration, read once at start.

    Storage:
    - NRE_DATA_DIR: directory holding config.json / tasks.json / tasks.db.
      Falls back to $USER_DATA_PATH/Database, then <repo>/data/Database.
    - NRE_STORE_BACKEND: json|sqlite (default: json)
    - NRE_DATABASE_URL: SQLAlchemy URL for the sqlite backend
      (default: sqlite:///<data_dir>/tasks.db)

    API server:
    - NRE_API_HOST (default: 0.0.0.0)
    - PORT: overrides the port stored in config.json

    Client / UI:
    - NRE_API_URL: base URL the Task Service talks to
      (default: http://127.0.0.1:<port>)
    - NRE_HTTP_TIMEOUT_SECONDS (default: 10)

    Logging:
    - NRE_LOG_LEVEL (default: INFO)
    """

    data_dir: Path
    backend: str
    database_url: str
    api_host: str
    port_override: Optional[int]
    api_url: Optional[str]
    http_timeout_seconds: float
    log_level: str

    @property
    def config_path(self) -> Path:
        return self.data_dir / "config.json"

    @property
    def tasks_path(self) -> Path:
        return self.data_dir / "tasks.json"

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    def resolve_api_url(self, port: int = DEFAULT_PORT) -> str:
        if self.api_url:
            return self.api_url.rstrip("/")
        return f"http://127.0.0.1:{self.port_override or port}"

    @classmethod
    def from_env(cls) -> "TrackerConfig":
        data_dir_raw = _env_optional("NRE_DATA_DIR")
        if data_dir_raw:
            data_dir = Path(data_dir_raw).expanduser()
        else:
            base = _env_optional("USER_DATA_PATH")
            data_dir = (Path(base).expanduser() if base else _REPO_ROOT / "data") / "Database"

        backend = (_env_optional("NRE_STORE_BACKEND") or "json").lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(f"NRE_STORE_BACKEND must be one of {STORE_BACKENDS}, got {backend!r}")

        db_url = _env_optional("NRE_DATABASE_URL") or f"sqlite:///{(data_dir / 'tasks.db').as_posix()}"

        port_raw = _env_optional("PORT")
        port_override = None
        if port_raw:
            port_override = _env_int("PORT", DEFAULT_PORT)

        return cls(
            data_dir=data_dir,
            backend=backend,
            database_url=db_url,
            api_host=_env_optional("NRE_API_HOST") or "0.0.0.0",
            port_override=port_override,
            api_url=_env_optional("NRE_API_URL"),
            http_timeout_seconds=max(0.5, _env_float("NRE_HTTP_TIMEOUT_SECONDS", 10.0)),
            log_level=(_env_optional("NRE_LOG_LEVEL") or "INFO").upper(),
        )


def _env_optional(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return None
    return value.strip() or None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return int(default)
    try:
        return int(str(raw).strip())
    except ValueError:
        return int(default)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return float(default)
    try:
        return float(str(raw).strip())
    except ValueError:
        return float(default)
