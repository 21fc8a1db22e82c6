"""HTTP surface — status codes, envelopes and the list response shape."""


async def test_health(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "healthy"
    assert body["service"] == "Tracker API"


async def test_readiness(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    body = res.json()
    assert body["checks"]["database"] == "healthy"
    assert body["database"] == "sqlite"
    assert body["paging"] == {"default_limit": 20, "max_limit": 100}


async def test_create_user_and_conflict(client, make_user):
    await make_user("dana")
    res = await client.post("/api/v1/users", json={
        "username": "dana2", "email": "DANA@example.com", "full_name": "Dana",
    })
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_USER"


async def test_invalid_body_is_400_with_details(client):
    res = await client.post("/api/v1/users", json={"username": "x"})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["category"] == "validation"
    assert error["message"] == "Invalid body data"
    assert error["context"]["field"] in {"email", "full_name"}
    assert {d["field"] for d in error["details"]} >= {"email", "full_name"}
    assert {d["source"] for d in error["details"]} == {"body"}


async def test_missing_resources_are_404(client):
    assert (await client.get("/api/v1/users/999")).status_code == 404
    res = await client.get("/api/v1/tasks/999")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_task_list_shape_and_facets(client, make_user):
    user = await make_user("erin")
    for title, priority in [("one", "low"), ("two", "high"), ("three", "high")]:
        res = await client.post("/api/v1/tasks", json={
            "title": title, "priority": priority, "assigned_to": user["id"],
        })
        assert res.status_code == 201

    res = await client.get("/api/v1/tasks", params={
        "priority": "high", "limit": "1", "sort_by": "title", "sort_order": "asc",
    })
    assert res.status_code == 200
    body = res.json()
    assert set(body) >= {"items", "total", "count", "limit", "offset", "hasMore", "facets"}
    assert body["total"] == 2
    assert body["count"] == 1
    assert body["hasMore"] is True
    assert body["items"][0]["title"] == "three"
    assert body["items"][0]["assignee"]["username"] == "erin"
    assert body["facets"]["priority"] == {"low": 1, "medium": 0, "high": 2}
    assert body["facets"]["status"] == {"todo": 2, "in_progress": 0, "done": 0}


async def test_repeated_status_params_merge(client):
    await client.post("/api/v1/tasks", json={"title": "a"})
    await client.post("/api/v1/tasks", json={"title": "b", "status": "in_progress"})
    await client.post("/api/v1/tasks", json={"title": "c", "status": "done"})
    res = await client.get("/api/v1/tasks?status=todo&status=done")
    assert sorted(t["title"] for t in res.json()["items"]) == ["a", "c"]


async def test_garbage_list_params_degrade_to_defaults(client):
    res = await client.get("/api/v1/tasks", params={
        "limit": "lots", "offset": "-4", "sort_by": "1;DROP", "status": "nope",
    })
    assert res.status_code == 200
    body = res.json()
    assert body["limit"] == 20
    assert body["offset"] == 0


async def test_transition_endpoint(client):
    task = (await client.post("/api/v1/tasks", json={"title": "t"})).json()
    skip = await client.post(f"/api/v1/tasks/{task['id']}/transition", json={"status": "done"})
    assert skip.status_code == 409
    assert skip.json()["error"]["code"] == "ILLEGAL_TRANSITION"

    step = await client.post(f"/api/v1/tasks/{task['id']}/transition", json={"status": "in_progress"})
    assert step.status_code == 200
    assert step.json()["status"] == "in_progress"


async def test_assign_to_missing_user_is_400(client):
    res = await client.post("/api/v1/tasks", json={"title": "t", "assigned_to": 404})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "REFERENCE_NOT_FOUND"


async def test_patch_task_and_user(client, make_user):
    user = await make_user("finn")
    task = (await client.post("/api/v1/tasks", json={"title": "t"})).json()

    res = await client.patch(f"/api/v1/tasks/{task['id']}", json={"assigned_to": user["id"]})
    assert res.status_code == 200
    assert res.json()["assignee"]["id"] == user["id"]

    res = await client.patch(f"/api/v1/users/{user['id']}", json={"full_name": "Finn M."})
    assert res.status_code == 200
    assert res.json()["full_name"] == "Finn M."

    res = await client.patch(f"/api/v1/users/{user['id']}", json={})
    assert res.status_code == 400


async def test_delete_user_unassigns_over_http(client, make_user):
    user = await make_user("gail")
    task = (await client.post("/api/v1/tasks", json={
        "title": "t", "assigned_to": user["id"],
    })).json()

    res = await client.delete(f"/api/v1/users/{user['id']}")
    assert res.status_code == 204

    fetched = (await client.get(f"/api/v1/tasks/{task['id']}")).json()
    assert fetched["assigned_to"] is None
    assert fetched["assignee"] is None


async def test_comments_and_task_delete(client, make_user):
    user = await make_user("hal")
    task = (await client.post("/api/v1/tasks", json={"title": "t"})).json()
    res = await client.post(
        f"/api/v1/tasks/{task['id']}/comments",
        json={"author_id": user["id"], "body": "looks good"},
    )
    assert res.status_code == 201
    listed = await client.get(f"/api/v1/tasks/{task['id']}/comments")
    assert [c["body"] for c in listed.json()] == ["looks good"]

    assert (await client.delete(f"/api/v1/tasks/{task['id']}")).status_code == 204
    assert (await client.get(f"/api/v1/tasks/{task['id']}/comments")).status_code == 404


async def test_user_list_uses_has_more_key(client, make_user):
    await make_user("ivy")
    await make_user("jon")
    body = (await client.get("/api/v1/users", params={"limit": "1"})).json()
    assert body["total"] == 2
    assert body["hasMore"] is True


async def test_ids_beyond_column_range_are_400(client):
    huge = "99999999999999999999"
    res = await client.get(f"/api/v1/tasks/{huge}")
    assert res.status_code == 400
    detail = res.json()["error"]["details"][0]
    assert detail["source"] == "path"
    assert detail["field"] == "task_id"

    assert (await client.delete(f"/api/v1/users/{huge}")).status_code == 400
    res = await client.post("/api/v1/tasks", json={"title": "t", "assigned_to": int(huge)})
    assert res.status_code == 400
    assert res.json()["error"]["context"]["field"] == "assigned_to"


async def test_huge_list_params_are_not_errors(client):
    await client.post("/api/v1/tasks", json={"title": "only"})
    res = await client.get("/api/v1/tasks", params={
        "offset": "99999999999999999999", "assigned_to": "²",
    })
    assert res.status_code == 200
    body = res.json()
    assert body["items"] == []
    assert body["total"] == 1
    assert body["hasMore"] is False
