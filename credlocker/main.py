import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from credlocker.core import config
from credlocker.core.errors import CredLockerError
from credlocker.auth.store import UserStore
from credlocker.gamification.tasks import TaskCatalog, default_catalog
from credlocker.reputation.client import ReputationClient

from credlocker.auth.routes import router as auth_router
from credlocker.gamification.routes import router as gamification_router
from credlocker.reputation.routes import router as reputation_router
from credlocker.web.debug_routes import router as debug_router

# Configure package logger to output to console
logger = logging.getLogger("credlocker")
logger.setLevel(config.LOG_LEVEL)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def create_app(
    store: Optional[UserStore] = None,
    catalog: Optional[TaskCatalog] = None,
    reputation: Optional[ReputationClient] = None,
    enable_debug_routes: bool = config.ENABLE_DEBUG_ROUTES,
) -> FastAPI:
    app = FastAPI(title="CredLocker", version="0.1.0")

    # One store per process; handlers reach it through core.deps
    if store is None:
        store = UserStore(config.USERS_FILE, seed_dev_users=config.SEED_DEV_USERS)
        print(f"[STORE] Using users file {store.path} users={len(store)}", flush=True)
    if reputation is None:
        reputation = ReputationClient()
        reputation.log_startup()

    app.state.store = store
    app.state.catalog = catalog or default_catalog
    app.state.reputation = reputation

    @app.exception_handler(CredLockerError)
    async def handle_domain_error(request: Request, exc: CredLockerError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    # Only expose debug routes (including diagnostics) when explicitly enabled.
    if enable_debug_routes:
        app.include_router(debug_router)

    # Include routers
    app.include_router(auth_router)
    app.include_router(gamification_router)
    app.include_router(reputation_router)

    @app.get("/", include_in_schema=False)
    def root():
        return {"name": "CredLocker", "status": "ok"}

    return app


app = create_app()
