import logging

from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.responses import JSONResponse

from credlocker.auth.models import PublicUser
from credlocker.auth.store import UserStore
from credlocker.auth.validation import validate_signup
from credlocker.core.deps import get_admin, get_current_user, get_store
from credlocker.core.security import ACCESS_TOKEN_EXPIRE_MINUTES, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# =========================
# SIGNUP
# =========================
@router.post("/auth/signup", status_code=201)
def signup(
    full_name: str = Form("", alias="fullName"),
    email: str = Form(""),
    username: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form("", alias="confirmPassword"),
    store: UserStore = Depends(get_store),
):
    # ValidationError / ConflictError are turned into 400 / 409 by main.py
    validate_signup(full_name, email, username, password, confirm_password)
    user = store.create(full_name.strip(), email.strip(), username.strip(), password)

    return {
        "message": "Account created successfully! You can now login.",
        "user": user.to_json(),
    }


# =========================
# LOGIN
# =========================
@router.post("/auth/login")
def login(
    username: str = Form(""),
    password: str = Form(""),
    store: UserStore = Depends(get_store),
):
    # Same normalisation as signup
    username = username.strip()
    logger.info("[AUTH] Attempting login for username: %s", username)
    user = store.find_by_username(username)

    if not user or not store.validate_password(user, password):
        logger.info("[AUTH] Invalid credentials for: %s", username)
        raise HTTPException(status_code=401, detail="Invalid username or password")

    token = create_access_token({"sub": user.username, "uid": user.id})
    logger.info("[AUTH] Login successful for: %s", user.username)

    response = JSONResponse({"access_token": token, "user": user.public().to_json()})
    response.set_cookie(
        "access_token",
        token,
        httponly=True,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return response


@router.post("/auth/logout")
def logout():
    response = JSONResponse({"message": "Logged out"})
    response.delete_cookie("access_token")
    return response


# =========================
# PROFILE / ADMIN
# =========================
@router.get("/profile")
def profile(user: PublicUser = Depends(get_current_user)):
    return user.to_json()


@router.get("/api/users")
def list_users(
    store: UserStore = Depends(get_store),
    admin: PublicUser = Depends(get_admin),
):
    return {"users": [u.to_json() for u in store.get_all_users()]}
