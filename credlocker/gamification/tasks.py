"""
Learning task catalog.

Static, read-only for the life of the process. Order of DEFAULT_TASKS is the
display order.
"""
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from credlocker.core.errors import NotFoundError

TaskId = Union[str, int]


class LearningTask(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: str
    description: str = ""
    category: str = ""
    difficulty: str = "easy"
    # None means "not set"; progression falls back to DEFAULT_TASK_REWARD
    experience_reward: Optional[int] = Field(None, gt=0, alias="experienceReward")

    # Content shown on the task page, no effect on progression
    documentation: str = ""
    video_url: Optional[str] = Field(None, alias="videoUrl")
    image_url: Optional[str] = Field(None, alias="imageUrl")
    mini_task_description: str = Field("", alias="miniTaskDescription")
    game: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        return str(value)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


DEFAULT_TASKS = [
    {
        "id": "task-1",
        "title": "Secure Your Passwords",
        "description": "Learn to create strong, unique passwords and use a password manager.",
        "experienceReward": 50,
        "difficulty": "easy",
        "category": "Password Security",
        "documentation": (
            "Learn how to create strong, unique passwords and the benefits of using a password "
            "manager. Focus on length, complexity, and avoiding personal information."
        ),
        "videoUrl": "https://www.youtube.com/embed/pcIK4y_Qf3Q",
        "imageUrl": "/img/password-security.png",
        "miniTaskDescription": "Describe three characteristics of a strong password.",
        "game": "/games/password-challenge.html",
    },
    {
        "id": "task-2",
        "title": "Enable Two-Factor Authentication (2FA)",
        "description": "Understand the importance of 2FA and how to enable it on your accounts.",
        "experienceReward": 75,
        "difficulty": "medium",
        "category": "Account Security",
        "documentation": (
            "Two-factor authentication (2FA) adds an extra layer of security. Learn about different "
            "types of 2FA (SMS, authenticator apps, hardware keys) and why it's crucial."
        ),
        "videoUrl": "https://www.youtube.com/embed/0Gv0h_v7b-g",
        "imageUrl": "/img/2fa-security.png",
        "miniTaskDescription": "List two benefits of using 2FA.",
        "game": "/games/2fa-quiz.html",
    },
    {
        "id": "task-3",
        "title": "Identify Phishing Attempts",
        "description": (
            "Learn to recognize common phishing tactics and protect yourself from social engineering."
        ),
        "experienceReward": 100,
        "difficulty": "medium",
        "category": "Phishing Awareness",
        "documentation": (
            "Phishing attacks try to trick you into revealing sensitive information. Learn to spot "
            "red flags in emails, messages, and websites, and what to do if you suspect a phishing attempt."
        ),
        "videoUrl": "https://www.youtube.com/embed/K7yK2E5Qk4o",
        "imageUrl": "/img/phishing-awareness.png",
        "miniTaskDescription": "Identify one common sign of a phishing email.",
        "game": "/games/phishing-game.html",
    },
    {
        "id": "task-4",
        "title": "Update Your Software",
        "description": (
            "Understand why keeping your operating system and applications updated is crucial for security."
        ),
        "experienceReward": 60,
        "difficulty": "easy",
        "category": "System Security",
        "documentation": (
            "Software updates often include security patches that fix vulnerabilities. Learn why "
            "prompt updates are essential for protecting your devices from known threats."
        ),
        "videoUrl": "https://www.youtube.com/embed/wXw-FkR08s0",
        "imageUrl": "/img/software-update.png",
        "miniTaskDescription": "Why are software updates important for security?",
        "game": "/games/update-quiz.html",
    },
    {
        "id": "task-5",
        "title": "Backup Your Data",
        "description": "Discover best practices for backing up your important data to prevent loss.",
        "experienceReward": 80,
        "difficulty": "medium",
        "category": "Data Protection",
        "documentation": (
            "Regular data backups are critical for disaster recovery. Learn about different backup "
            "strategies (local, cloud) and what kind of data you should prioritize."
        ),
        "videoUrl": "https://www.youtube.com/embed/Y0J4Y64xV1o",
        "imageUrl": "/img/data-backup.png",
        "miniTaskDescription": "Name two places where you can back up your data.",
        "game": "/games/backup-scenario.html",
    },
    {
        "id": "task-6",
        "title": "Use a VPN",
        "description": "Learn how a Virtual Private Network (VPN) protects your online privacy and security.",
        "experienceReward": 120,
        "difficulty": "hard",
        "category": "Network Security",
        "documentation": (
            "A VPN encrypts your internet connection and masks your IP address, enhancing privacy and "
            "security, especially on public Wi-Fi. Understand how VPNs work and their benefits."
        ),
        "videoUrl": "https://www.youtube.com/embed/W_g9vA-t-Ts",
        "imageUrl": "/img/vpn-security.png",
        "miniTaskDescription": "How does a VPN protect your online privacy?",
        "game": "/games/vpn-use-case.html",
    },
    {
        "id": "task-7",
        "title": "Secure Your Wi-Fi Network",
        "description": "Steps to secure your home Wi-Fi network and prevent unauthorized access.",
        "experienceReward": 90,
        "difficulty": "medium",
        "category": "Network Security",
        "documentation": (
            "Securing your Wi-Fi network prevents unauthorized access and potential cyber threats. "
            "Learn about strong passwords, encryption (WPA3), and disabling WPS."
        ),
        "videoUrl": "https://www.youtube.com/embed/KjLwW4qG73M",
        "imageUrl": "/img/wifi-security.png",
        "miniTaskDescription": "What is one step you can take to secure your home Wi-Fi network?",
        "game": "/games/wifi-config-game.html",
    },
]


def numeric_form(task_id: TaskId) -> Optional[str]:
    """'03' -> '3', 3 -> '3', 'task-1' -> None. Plain ASCII digits only (no sign, no "1_0")."""
    text = str(task_id).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return str(int(text))


class TaskCatalog:
    def __init__(self, tasks: Iterable[Union[LearningTask, dict]]):
        self._tasks = tuple(
            t if isinstance(t, LearningTask) else LearningTask.model_validate(t)
            for t in tasks
        )
        ids = [t.id for t in self._tasks]
        if len(ids) != len(set(ids)):
            raise ValueError("Task ids must be unique")

    def get_all_tasks(self) -> list[LearningTask]:
        return list(self._tasks)

    def _match(self, task_id: str) -> Optional[LearningTask]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def get_task_by_id(self, task_id: TaskId) -> Optional[LearningTask]:
        """
        Exact match on the string form first, then on the integer form so
        that 3, "3" and "03" all find a task whose id is "3".
        """
        if task_id is None:
            return None
        task = self._match(str(task_id))
        if task is None:
            numeric = numeric_form(task_id)
            if numeric is not None:
                task = self._match(numeric)
        return task

    def require_task(self, task_id: TaskId) -> LearningTask:
        task = self.get_task_by_id(task_id)
        if task is None:
            raise NotFoundError(f"Task '{task_id}' not found")
        return task

    def __len__(self) -> int:
        return len(self._tasks)


default_catalog = TaskCatalog(DEFAULT_TASKS)
