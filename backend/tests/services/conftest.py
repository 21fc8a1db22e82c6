"""Service test fixtures — a small seeded task board.

Invariants:
    - Seed rows are inserted through the services, so every write path is exercised
    - Seed layout (by title):
        alpha   todo         high    alice  due 2024-03-01
        beta    in_progress  low     alice  no due date
        gamma   done         medium  bob    due 2024-01-15
        delta   todo         medium  none   due 2024-02-10
        epsilon todo         low     bob    no due date  (description mentions "database")
"""

import pytest

SEED = [
    {"title": "alpha", "status": "todo", "priority": "high", "due_date": "2024-03-01"},
    {"title": "beta", "status": "in_progress", "priority": "low"},
    {"title": "gamma", "status": "done", "priority": "medium", "due_date": "2024-01-15"},
    {"title": "delta", "status": "todo", "priority": "medium", "due_date": "2024-02-10"},
    {"title": "epsilon", "status": "todo", "priority": "low",
     "description": "Migrate the Database backups"},
]
ASSIGNEES = {"alpha": "alice", "beta": "alice", "gamma": "bob", "epsilon": "bob"}


@pytest.fixture
async def seeded(task_service, alice, bob) -> dict:
    """Create the seed board; returns tasks keyed by title."""
    users = {"alice": alice, "bob": bob}
    tasks = {}
    for row in SEED:
        data = dict(row)
        owner = ASSIGNEES.get(data["title"])
        if owner:
            data["assigned_to"] = users[owner].id
        tasks[data["title"]] = await task_service.create_task(data)
    return tasks
