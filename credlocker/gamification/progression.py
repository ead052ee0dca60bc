"""
Progression rules for learning tasks.
Core rules:
  - A task pays its experienceReward once; repeat completions change nothing
  - Leaving level N costs N * 100 XP, the remainder carries over
  - At most ONE level-up per completion, even if the reward crosses two
    thresholds (the extra XP is kept, not converted)
  - Leaderboard: level desc, then XP desc, stable on exact ties
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable

from credlocker.auth.models import LeaderboardEntry, PublicUser
from credlocker.auth.store import UserStore
from credlocker.core.config import DEFAULT_TASK_REWARD, XP_PER_LEVEL
from credlocker.core.errors import NotFoundError
from credlocker.gamification.tasks import LearningTask, numeric_form

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressUpdate:
    """Next progression state for one user after one completion attempt."""
    level: int
    experience_points: int
    completed_tasks: list[str] = field(default_factory=list)
    already_completed: bool = False
    leveled_up: bool = False
    xp_awarded: int = 0


def xp_to_next_level(level: int) -> int:
    return level * XP_PER_LEVEL


def is_task_completed(user: PublicUser, task: LearningTask) -> bool:
    forms = {str(task.id)}
    numeric = numeric_form(task.id)
    if numeric is not None:
        forms.add(numeric)
    return any(task_id in forms for task_id in user.completed_tasks)


# ---------------------------------------------------------------------------
# COMPLETE TASK (pure: computes the next state, never writes)
# ---------------------------------------------------------------------------

def complete_task(user: PublicUser, task: LearningTask) -> ProgressUpdate:
    if is_task_completed(user, task):
        return ProgressUpdate(
            level=user.level,
            experience_points=user.experience_points,
            completed_tasks=list(user.completed_tasks),
            already_completed=True,
        )

    reward = task.experience_reward or DEFAULT_TASK_REWARD
    level = user.level
    experience_points = user.experience_points + reward
    completed_tasks = list(user.completed_tasks) + [str(task.id)]

    # Threshold uses the level from before this call; single step only
    threshold = xp_to_next_level(user.level)
    leveled_up = experience_points >= threshold
    if leveled_up:
        level += 1
        experience_points -= threshold

    return ProgressUpdate(
        level=level,
        experience_points=experience_points,
        completed_tasks=completed_tasks,
        leveled_up=leveled_up,
        xp_awarded=reward,
    )


def apply_task_completion(
    store: UserStore, user_id: int, task: LearningTask
) -> tuple[PublicUser, ProgressUpdate]:
    """
    Read the user, compute the completion, write it back, all under the
    user's lock so two completions for the same user cannot interleave.
    Returns (user after the call, update).
    """
    with store.user_lock(user_id):
        user = store.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")

        update = complete_task(user, task)
        if update.already_completed:
            logger.info("[PROGRESS] user=%s task=%s already completed", user.username, task.id)
            return user, update

        saved = store.update_gamification_progress(
            user.id,
            update.level,
            update.experience_points,
            update.completed_tasks,
        )

    logger.info(
        "[PROGRESS] user=%s completed task=%s +%dxp level=%d xp=%d",
        saved.username, task.id, update.xp_awarded, saved.level, saved.experience_points,
    )
    if update.leveled_up:
        logger.info("[LEVEL-UP] user=%s %d -> %d", saved.username, user.level, saved.level)
    return saved, update


# ---------------------------------------------------------------------------
# LEADERBOARD
# ---------------------------------------------------------------------------

def rank(users: Iterable[PublicUser]) -> list[LeaderboardEntry]:
    # sorted() is stable, so exact ties keep their input order
    ordered = sorted(users, key=lambda u: (-u.level, -u.experience_points))
    return [
        LeaderboardEntry(
            username=u.username,
            level=u.level,
            experience_points=u.experience_points,
        )
        for u in ordered
    ]
