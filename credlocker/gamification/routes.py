"""
API routes for learning tasks, task completion and the leaderboard.
"""
import logging

from fastapi import APIRouter, Depends, Form, HTTPException

from credlocker.auth.models import PublicUser
from credlocker.auth.store import UserStore
from credlocker.core.deps import get_catalog, get_current_user, get_store
from credlocker.gamification.progression import (
    apply_task_completion, is_task_completed, rank, xp_to_next_level,
)
from credlocker.gamification.tasks import TaskCatalog

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gamification"])


def _progress_view(user: PublicUser) -> dict:
    return {
        **user.to_json(),
        "experienceToNextLevel": xp_to_next_level(user.level),
    }


@router.get("/gamification")
def gamification_overview(
    user: PublicUser = Depends(get_current_user),
    catalog: TaskCatalog = Depends(get_catalog),
):
    return {
        "user": _progress_view(user),
        "tasks": [t.to_json() for t in catalog.get_all_tasks()],
    }


# ======================================================
# COMPLETE TASK
# ======================================================
@router.post("/gamification/complete-task")
def complete_task_route(
    task_id: str = Form("", alias="taskId"),
    user: PublicUser = Depends(get_current_user),
    store: UserStore = Depends(get_store),
    catalog: TaskCatalog = Depends(get_catalog),
):
    if not task_id.strip():
        logger.warning("[PROGRESS] Task ID missing in form submission")
        raise HTTPException(status_code=400, detail="taskId is required")

    # NotFoundError (unknown task or user) -> 404 via main.py
    task = catalog.require_task(task_id)
    saved, update = apply_task_completion(store, user.id, task)

    return {
        "status": "already_completed" if update.already_completed else "completed",
        "taskId": task.id,
        "xpAwarded": update.xp_awarded,
        "leveledUp": update.leveled_up,
        "user": _progress_view(saved),
    }


@router.get("/gamification/{task_id}")
def gamification_task(
    task_id: str,
    user: PublicUser = Depends(get_current_user),
    catalog: TaskCatalog = Depends(get_catalog),
):
    task = catalog.require_task(task_id)
    return {
        "user": _progress_view(user),
        "task": task.to_json(),
        "completed": is_task_completed(user, task),
    }


# ======================================================
# LEADERBOARD
# ======================================================
@router.get("/api/leaderboard")
def leaderboard(
    store: UserStore = Depends(get_store),
    user: PublicUser = Depends(get_current_user),
):
    entries = rank(store.get_all_users())
    return {"success": True, "leaderboard": [e.to_json() for e in entries]}
