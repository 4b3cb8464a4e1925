"""REST API over the task store and the persisted app settings.

Routes (all JSON):
- GET/POST        /api/tasks
- PUT/DELETE      /api/tasks/{task_id}
- GET/POST        /api/lists
- GET/POST        /api/config
- GET             /api/network-info
- GET             /healthz
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from nre_tracker import __version__
from nre_tracker.app_config import AppConfigStore
from nre_tracker.config import TrackerConfig
from nre_tracker.errors import DuplicateTaskError, StoreError, TaskNotFoundError
from nre_tracker.models import DropdownOptions, NetworkInfo, PortConfig, Task, TaskPatch
from nre_tracker.network import get_lan_ip
from nre_tracker.store import TaskStore, build_store


logger = logging.getLogger(__name__)


def get_store(request: Request) -> TaskStore:
    return request.app.state.store


def get_app_config(request: Request) -> AppConfigStore:
    return request.app.state.app_config


def create_app(
    config: Optional[TrackerConfig] = None,
    *,
    store: Optional[TaskStore] = None,
    app_config: Optional[AppConfigStore] = None,
    ip_resolver: Callable[[], str] = get_lan_ip,
) -> FastAPI:
    if config is None:
        config = TrackerConfig.from_env()
    if store is None:
        store = build_store(config)
    if app_config is None:
        app_config = AppConfigStore(config.config_path)
    app_config.ensure_file()

    app = FastAPI(title="nre-tracker", version=__version__)
    app.state.config = config
    app.state.store = store
    app.state.app_config = app_config
    app.state.ip_resolver = ip_resolver

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    @app.exception_handler(TaskNotFoundError)
    async def _not_found(_request: Request, _exc: TaskNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "Task not found"})

    @app.exception_handler(DuplicateTaskError)
    async def _duplicate(_request: Request, exc: DuplicateTaskError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"error": str(exc)})

    @app.exception_handler(StoreError)
    async def _store_error(_request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def _invalid(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid request body", "detail": jsonable_encoder(exc.errors())},
        )

    @app.get("/healthz")
    def healthz() -> Dict[str, Any]:
        return {"ok": True, "backend": store.backend_name}

    # --- tasks ---

    @app.get("/api/tasks")
    def list_tasks(s: TaskStore = Depends(get_store)) -> List[Dict[str, Any]]:
        return [t.to_wire() for t in s.list_tasks()]

    @app.post("/api/tasks")
    def create_task(task: Task, s: TaskStore = Depends(get_store)) -> Dict[str, Any]:
        stored = s.insert_task(task)
        logger.info("Created task %s (%s)", stored.id, stored.name)
        return stored.to_wire()

    @app.put("/api/tasks/{task_id}")
    def update_task(task_id: str, patch: TaskPatch, s: TaskStore = Depends(get_store)) -> Dict[str, Any]:
        return s.update_task(task_id, patch).to_wire()

    @app.delete("/api/tasks/{task_id}")
    def delete_task(task_id: str, s: TaskStore = Depends(get_store)) -> Dict[str, str]:
        s.delete_task(task_id)
        logger.info("Deleted task %s", task_id)
        return {"message": "Deleted"}

    # --- settings ---

    @app.get("/api/lists")
    def get_lists(cfg: AppConfigStore = Depends(get_app_config)) -> Dict[str, Any]:
        return cfg.get_lists().to_wire()

    @app.post("/api/lists")
    def save_lists(lists: DropdownOptions, cfg: AppConfigStore = Depends(get_app_config)) -> Dict[str, Any]:
        return cfg.set_lists(lists).to_wire()

    @app.get("/api/config")
    def get_config(cfg: AppConfigStore = Depends(get_app_config)) -> Dict[str, Any]:
        return {"port": cfg.get_port()}

    @app.post("/api/config")
    def save_config(payload: Dict[str, Any] = Body(...), cfg: AppConfigStore = Depends(get_app_config)):
        try:
            port = PortConfig.model_validate(payload).port
        except ValidationError:
            return JSONResponse(status_code=400, content={"error": "Invalid port"})
        cfg.set_port(port)
        return {"message": "Config saved", "port": port}

    @app.get("/api/network-info")
    def network_info(request: Request, cfg: AppConfigStore = Depends(get_app_config)) -> Dict[str, Any]:
        port = config.port_override or cfg.get_port()
        return NetworkInfo(ip=request.app.state.ip_resolver(), port=port).model_dump()

    return app
