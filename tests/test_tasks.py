import pytest

from credlocker.core.errors import NotFoundError
from credlocker.gamification.tasks import DEFAULT_TASKS, TaskCatalog, default_catalog


def test_default_catalog_keeps_declaration_order():
    ids = [t.id for t in default_catalog.get_all_tasks()]
    assert ids == [f"task-{i}" for i in range(1, 8)]
    assert all(t.experience_reward > 0 for t in default_catalog.get_all_tasks())


def test_task_json_uses_camel_case():
    data = default_catalog.get_task_by_id("task-1").to_json()
    assert data["experienceReward"] == 50
    assert data["videoUrl"].startswith("https://")
    assert data["miniTaskDescription"]


def test_lookup_by_native_id():
    assert default_catalog.get_task_by_id("task-3").title == "Identify Phishing Attempts"


def test_lookup_is_case_sensitive_and_exact():
    assert default_catalog.get_task_by_id("TASK-3") is None
    assert default_catalog.get_task_by_id("task-") is None
    assert default_catalog.get_task_by_id("3") is None


@pytest.mark.parametrize("task_id", ["3", 3, "03", " 3"])
def test_numeric_ids_are_equivalent(task_id):
    catalog = TaskCatalog([
        {"id": "1", "title": "One", "experienceReward": 10},
        {"id": "3", "title": "Three", "experienceReward": 30},
    ])
    assert catalog.get_task_by_id(task_id).title == "Three"


def test_missing_task_returns_none_and_require_raises():
    assert default_catalog.get_task_by_id("nope") is None
    assert default_catalog.get_task_by_id(None) is None
    with pytest.raises(NotFoundError):
        default_catalog.require_task("nope")


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        TaskCatalog([{"id": "a", "title": "A"}, {"id": "a", "title": "B"}])


def test_get_all_tasks_returns_a_copy():
    tasks = default_catalog.get_all_tasks()
    tasks.clear()
    assert len(default_catalog) == len(DEFAULT_TASKS)


@pytest.mark.parametrize("task_id", ["1_0", "+3", "٣", "3.0", "-3", ""])
def test_only_plain_ascii_digits_are_coerced(task_id):
    catalog = TaskCatalog([
        {"id": "10", "title": "Ten"},
        {"id": "3", "title": "Three"},
    ])
    assert catalog.get_task_by_id(task_id) is None
