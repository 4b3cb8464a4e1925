"""Task store backed by SQLAlchemy.

Default storage: SQLite file ``<data_dir>/tasks.db`` in WAL mode. Any other
SQLAlchemy URL works as long as the driver is installed. The ``tasks`` table
maps 1:1 onto the Task fields.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import BigInteger, Column, Float, String, Text, create_engine, event, literal_column, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from nre_tracker.errors import DuplicateTaskError, StoreError, TaskNotFoundError
from nre_tracker.models import Task, TaskPatch
from nre_tracker.store.base import TaskStore


logger = logging.getLogger(__name__)

Base = declarative_base()


class TaskRow(Base):
    __tablename__ = "tasks"

    id = Column(String(64), primary_key=True)
    name = Column(String(512), nullable=False, default="")
    owner = Column(String(128), nullable=False, default="")
    device_type = Column(String(128), nullable=False, default="")
    platform = Column(String(128), nullable=False, default="")
    android_version = Column(String(64), nullable=False, default="")
    nre_number = Column(String(128), nullable=False, default="")
    status = Column(String(32), nullable=False, default="Pending", index=True)
    task_type = Column(String(128), nullable=False, default="")
    start_date = Column(String(10), nullable=False, default="")
    end_date = Column(String(10), nullable=False, default="")
    work_hours = Column(Float, nullable=False, default=0.0)
    content = Column(Text, nullable=False, default="")
    created_at = Column(BigInteger, nullable=False, index=True)

    def to_task(self) -> Task:
        return Task(
            id=self.id,
            name=self.name,
            owner=self.owner,
            device_type=self.device_type,
            platform=self.platform,
            android_version=self.android_version,
            nre_number=self.nre_number,
            status=self.status,
            task_type=self.task_type,
            start_date=self.start_date,
            end_date=self.end_date,
            work_hours=self.work_hours or 0.0,
            content=self.content,
            created_at=self.created_at,
        )

    def apply(self, fields: Dict[str, Any]) -> None:
        for key, value in fields.items():
            if key in ("id", "created_at"):
                continue
            setattr(self, key, value)


def _task_columns(task: Task) -> Dict[str, Any]:
    return task.model_dump(mode="json")


def _enable_sqlite_wal(dbapi_conn, _record) -> None:
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA journal_mode=WAL;")
    cur.close()


class SqlTaskStore(TaskStore):
    backend_name = "sqlite"

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self.database_url = database_url
        connect_args: Dict[str, Any] = {}
        if database_url.startswith("sqlite:"):
            # Request handlers may run on different threads.
            connect_args = {"check_same_thread": False}
        self._engine: Engine = create_engine(
            database_url,
            future=True,
            echo=echo,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        if self._engine.url.get_backend_name().startswith("sqlite"):
            event.listen(self._engine, "connect", _enable_sqlite_wal)
        self._sessionmaker = sessionmaker(bind=self._engine, autoflush=False, expire_on_commit=False, future=True)
        Base.metadata.create_all(self._engine)
        logger.info("SQL task store ready (%s)", self._engine.url.render_as_string(hide_password=True))

    @property
    def engine(self) -> Engine:
        return self._engine

    def list_tasks(self) -> List[Task]:
        with self._sessionmaker() as s:
            order = [TaskRow.created_at.desc()]
            if self._engine.dialect.name == "sqlite":
                # on equal createdAt the later insert goes first
                order.append(literal_column("tasks.rowid").desc())
            rows = s.execute(select(TaskRow).order_by(*order)).scalars().all()
            return [r.to_task() for r in rows]

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._sessionmaker() as s:
            row = s.get(TaskRow, task_id)
            return row.to_task() if row else None

    def insert_task(self, task: Task) -> Task:
        with self._sessionmaker() as s:
            if s.get(TaskRow, task.id) is not None:
                raise DuplicateTaskError(task.id)
            s.add(TaskRow(**_task_columns(task)))
            try:
                s.commit()
            except IntegrityError as exc:
                s.rollback()
                raise DuplicateTaskError(task.id) from exc
            except SQLAlchemyError as exc:
                s.rollback()
                raise StoreError(f"Failed to insert task: {exc}") from exc
        return task

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        with self._sessionmaker() as s:
            row = s.get(TaskRow, task_id)
            if row is None:
                raise TaskNotFoundError(task_id)
            merged = row.to_task().model_copy(update=patch.changes())
            row.apply(_task_columns(merged))
            try:
                s.commit()
            except SQLAlchemyError as exc:
                s.rollback()
                raise StoreError(f"Failed to update task: {exc}") from exc
            return row.to_task()

    def delete_task(self, task_id: str) -> None:
        with self._sessionmaker() as s:
            row = s.get(TaskRow, task_id)
            if row is None:
                raise TaskNotFoundError(task_id)
            s.delete(row)
            s.commit()

    def close(self) -> None:
        self._engine.dispose()
