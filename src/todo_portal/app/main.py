import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from todo_portal.app.middleware.access_log import AccessLogMiddleware
from todo_portal.app.routes import tasks, theme
from todo_portal.config import Settings
from todo_portal.domain.task_view import use_host_collation
from todo_portal.infra.db.snapshot_repo_sqlite import SQLiteSnapshotStore
from todo_portal.infra.db.snapshot_store import SnapshotStore
from todo_portal.observability.logging import setup_logging
from todo_portal.services.task_service import TaskService
from todo_portal.services.theme_service import ThemeService

logger = logging.getLogger("todo.system")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[SnapshotStore] = None,
    configure_logging: bool = True,
) -> FastAPI:
    settings = settings or Settings.from_env()
    if configure_logging:
        setup_logging(settings)
    logger.info("system.start", extra={"category": "system", "event": "system.start"})
    if not use_host_collation():
        logger.warning("system.locale.unavailable", extra={"category": "system", "event": "system.locale.unavailable"})

    app = FastAPI(title="Todo Portal")
    app.add_middleware(AccessLogMiddleware)

    # --- store wiring ---
    if store is None:
        store = SQLiteSnapshotStore.from_path(settings.db_path)

    svc = TaskService(store)
    theme_svc = ThemeService(store)
    tasks.get_service = lambda: svc
    theme.get_service = lambda: theme_svc
    app.state.task_service = svc
    app.state.theme_service = theme_svc
    app.state.store = store

    # Routers
    app.include_router(tasks.router)
    app.include_router(tasks.meta_router)
    app.include_router(theme.router)

    # Load the collection before serving
    @app.on_event("startup")
    async def _startup():
        await svc.start()
        logger.info(
            "store.ready",
            extra={"category": "system", "event": "store.ready", "db_path": str(settings.db_path)},
        )

    @app.on_event("shutdown")
    async def _shutdown():
        await store.close()

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def serve(settings: Optional[Settings] = None) -> None:
    """Console entrypoint (`todo-portal`): build the app and run it under uvicorn."""
    settings = settings or Settings.from_env()
    # log_config=None keeps the JSON handlers installed by setup_logging
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)
