from helpers import days_from_today, goal_payload


def create(client, **overrides):
    response = client.post("/api/goals", json=goal_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_fetch_round_trip(client):
    payload = goal_payload()
    created = create(client)
    body = client.get(f"/api/goals/{created['id']}").json()
    for key, value in payload.items():
        assert body[key] == value
    assert body["createdAt"] and body["updatedAt"]


def test_optional_fields_default(client):
    payload = goal_payload()
    del payload["currentAmount"]
    del payload["notes"]
    body = client.post("/api/goals", json=payload).json()
    assert body["currentAmount"] == 0
    assert body["notes"] == ""


def test_current_amount_above_target_is_rejected(client):
    response = client.post("/api/goals", json=goal_payload(targetAmount=100, currentAmount=101))
    assert response.status_code == 400
    assert response.json()["details"] == [
        {"field": "currentAmount", "message": "Current amount cannot exceed target amount"}
    ]


def test_invalid_goal_reports_every_field(client):
    response = client.post(
        "/api/goals",
        json={"name": "", "targetAmount": 0, "deadline": days_from_today(-3), "color": "green"},
    )
    assert response.status_code == 400
    fields = {detail["field"] for detail in response.json()["details"]}
    assert fields == {"name", "targetAmount", "deadline", "color"}


def test_goals_listed_by_deadline(client):
    create(client, name="Car", deadline=days_from_today(300))
    create(client, name="Trip", deadline=days_from_today(20))
    create(client, name="Laptop", deadline=days_from_today(90))
    assert [goal["name"] for goal in client.get("/api/goals").json()] == ["Trip", "Laptop", "Car"]


def test_patch_goal(client):
    goal = create(client)
    response = client.patch(f"/api/goals/{goal['id']}", json={"currentAmount": 400, "notes": None})
    assert response.status_code == 200
    body = response.json()
    assert body["currentAmount"] == 400
    assert body["notes"] == ""
    assert body["name"] == goal["name"]


def test_patch_goal_empty_body(client):
    goal = create(client)
    response = client.patch(f"/api/goals/{goal['id']}", json={})
    assert response.status_code == 400
    assert response.json()["message"] == "No fields to update"


def test_patch_goal_amount_beyond_stored_target(client):
    goal = create(client, targetAmount=1000, currentAmount=0)
    response = client.patch(f"/api/goals/{goal['id']}", json={"currentAmount": 1001})
    assert response.status_code == 400
    assert response.json() == {"status": "error", "message": "Current amount cannot exceed target amount"}
    assert client.get(f"/api/goals/{goal['id']}").json()["currentAmount"] == 0


def test_missing_goal_is_not_found(client):
    for response in (
        client.get("/api/goals/nope"),
        client.patch("/api/goals/nope", json={"name": "New"}),
        client.delete("/api/goals/nope"),
    ):
        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "Goal not found"}


def test_delete_goal(client):
    goal = create(client)
    response = client.delete(f"/api/goals/{goal['id']}")
    assert response.json() == {"message": "Goal deleted successfully"}
    assert client.get(f"/api/goals/{goal['id']}").status_code == 404
