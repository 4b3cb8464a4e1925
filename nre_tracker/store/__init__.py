"""Record stores for NRE tasks (flat JSON file or SQL database)."""
from __future__ import annotations

import logging

from nre_tracker.config import TrackerConfig
from nre_tracker.store.base import TaskStore, sort_newest_first
from nre_tracker.store.json_store import JsonTaskStore
from nre_tracker.store.sql_store import SqlTaskStore


logger = logging.getLogger(__name__)


def build_store(config: TrackerConfig) -> TaskStore:
    if config.backend == "sqlite":
        config.data_dir.mkdir(parents=True, exist_ok=True)
        return SqlTaskStore(config.database_url)
    logger.info("JSON task store at %s", config.tasks_path)
    return JsonTaskStore(config.tasks_path)


__all__ = [
    "TaskStore",
    "JsonTaskStore",
    "SqlTaskStore",
    "build_store",
    "sort_newest_first",
]
