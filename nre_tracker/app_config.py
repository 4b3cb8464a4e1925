"""Persisted application settings: server port and dropdown option lists.

Stored in ``<data_dir>/config.json`` as ``{"port": ..., "lists": {...}}``.
A missing or corrupt file yields defaults; missing lists are filled from the
defaults. Writes go to a temp file that then replaces the existing one.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from nre_tracker.models import DEFAULT_PORT, DropdownOptions, PortConfig


logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    port: int = DEFAULT_PORT
    lists: DropdownOptions = field(default_factory=DropdownOptions)

    def to_dict(self) -> Dict[str, Any]:
        return {"port": int(self.port), "lists": self.lists.to_wire()}


def _parse_app_config(raw: Any) -> AppConfig:
    default_cfg = AppConfig()
    if not isinstance(raw, dict):
        return default_cfg

    port = default_cfg.port
    try:
        port = PortConfig(port=raw.get("port")).port
    except ValidationError:
        pass

    lists = default_cfg.lists
    lists_raw = raw.get("lists")
    if isinstance(lists_raw, dict):
        merged = default_cfg.lists.to_wire()
        for k, v in lists_raw.items():
            if k in merged and isinstance(v, list):
                merged[k] = v
        lists = DropdownOptions.model_validate(merged)

    return AppConfig(port=port, lists=lists)


def write_json_atomic(path: Path, payload: Any) -> None:
    """Serialize ``payload`` next to ``path`` and swap it in with os.replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


class AppConfigStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> AppConfig:
        if not self.path.exists():
            return AppConfig()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Error reading config %s: %s", self.path, exc)
            return AppConfig()
        return _parse_app_config(raw)

    def save(self, cfg: AppConfig) -> None:
        with self._lock:
            write_json_atomic(self.path, cfg.to_dict())

    def ensure_file(self) -> AppConfig:
        """Load (or default) the config and write it back so the file exists."""
        cfg = self.load()
        self.save(cfg)
        return cfg

    def get_lists(self) -> DropdownOptions:
        return self.load().lists

    def set_lists(self, lists: DropdownOptions) -> DropdownOptions:
        with self._lock:
            cfg = self.load()
            cfg.lists = lists
            write_json_atomic(self.path, cfg.to_dict())
        logger.info("Dropdown lists saved (%d owners, %d device types)", len(lists.owners), len(lists.device_types))
        return lists

    def get_port(self) -> int:
        return self.load().port

    def set_port(self, port: int) -> int:
        port = PortConfig(port=port).port
        with self._lock:
            cfg = self.load()
            cfg.port = port
            write_json_atomic(self.path, cfg.to_dict())
        logger.info("Server port set to %d (applies on restart)", port)
        return port
