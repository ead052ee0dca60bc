from fastapi import APIRouter, Depends

from credlocker.auth.store import UserStore
from credlocker.core.deps import get_reputation_client, get_store
from credlocker.reputation.client import ReputationClient, key_fingerprint

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/diagnostics/store")
def store_diagnostics(
    store: UserStore = Depends(get_store),
    client: ReputationClient = Depends(get_reputation_client),
):
    """
    Lightweight store diagnostics for debugging deployments.

    This endpoint is meant to be exposed only when ENABLE_DEBUG_ROUTES=1.
    It intentionally avoids leaking secrets while still being useful.
    """
    path = store.path.resolve()
    exists = path.exists()
    last_error = store.last_persistence_error

    return {
        "users_file": str(path),
        "users_file_exists": exists,
        "users_file_size_bytes": path.stat().st_size if exists else 0,
        "user_count": len(store),
        "last_persistence_error": str(last_error) if last_error else None,
        "ipqs_key": key_fingerprint(client.api_key),
    }
