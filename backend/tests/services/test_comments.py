"""Comment Service — comments need a live task and author."""

import pytest

from tracker.core.errors import NotFoundError, ReferentialIntegrityError


async def test_add_and_list_in_order(task_service, comment_service, alice, bob):
    task = await task_service.create_task({"title": "t"})
    first = await comment_service.add_comment(task.id, {"author_id": alice.id, "body": "first"})
    await comment_service.add_comment(task.id, {"author_id": bob.id, "body": "second"})

    comments = await comment_service.list_comments(task.id)
    assert [c.body for c in comments] == ["first", "second"]
    assert comments[0].id == first.id
    assert comments[0].task_id == task.id


async def test_comment_on_missing_task(comment_service, alice):
    with pytest.raises(NotFoundError):
        await comment_service.add_comment(99, {"author_id": alice.id, "body": "hi"})


async def test_comment_by_missing_author(task_service, comment_service):
    task = await task_service.create_task({"title": "t"})
    with pytest.raises(ReferentialIntegrityError) as exc_info:
        await comment_service.add_comment(task.id, {"author_id": 5, "body": "hi"})
    assert exc_info.value.field == "author_id"
    assert await comment_service.list_comments(task.id) == []


async def test_list_comments_of_missing_task(comment_service):
    with pytest.raises(NotFoundError):
        await comment_service.list_comments(99)
