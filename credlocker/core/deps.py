import logging

from fastapi import Depends, HTTPException, Request

from credlocker.auth.models import PublicUser
from credlocker.auth.store import UserStore
from credlocker.core.security import decode_access_token
from credlocker.gamification.tasks import TaskCatalog
from credlocker.reputation.client import ReputationClient

logger = logging.getLogger(__name__)


# Collaborators are built once in create_app() and hung on app.state
def get_store(request: Request) -> UserStore:
    return request.app.state.store


def get_catalog(request: Request) -> TaskCatalog:
    return request.app.state.catalog


def get_reputation_client(request: Request) -> ReputationClient:
    return request.app.state.reputation


def _read_token(request: Request):
    token = request.cookies.get("access_token")
    if not token:
        token = request.headers.get("authorization")
    if not token:
        return None

    # Support both "Bearer <token>" and raw token values
    if isinstance(token, str) and token.lower().startswith("bearer "):
        token = token[7:].strip()
    return token


def get_current_user(
    request: Request,
    store: UserStore = Depends(get_store),
) -> PublicUser:
    token = _read_token(request)
    if not token:
        logger.info("[AUTH] reject reason=missing_token path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_access_token(token)
    if not payload:
        logger.info("[AUTH] reject reason=invalid_token path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("uid")
    if not isinstance(user_id, int):
        logger.info("[AUTH] reject reason=no_user_in_token path=%s", request.url.path)
        raise HTTPException(status_code=401, detail="Invalid token payload")

    # Always re-read: level/XP change between requests
    user = store.find_by_id(user_id)
    if not user:
        logger.info("[AUTH] reject reason=user_not_found uid=%s path=%s", user_id, request.url.path)
        raise HTTPException(status_code=401, detail="User not found")

    return user


def get_admin(
    user: PublicUser = Depends(get_current_user)
) -> PublicUser:
    """Dependency to ensure the user has the admin role."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden: Access restricted to admins only.")

    return user
