import pytest

GROUPS = [
    ("/api/checklist", {"title": "Pre-shift inspection"}),
    ("/api/hazards", {"title": "Loose roof bolt", "severity": "high"}),
    ("/api/incidents", {"title": "Conveyor stop", "description": "Belt jammed at level 2"}),
    ("/api/behavior", {"worker": "ravi", "observation": "Wore full PPE"}),
    ("/api/alerts", {"message": "Gas reading above limit", "role": "supervisor"}),
]


@pytest.mark.parametrize(("path", "payload"), GROUPS)
def test_crud_round(auth_client, path, payload):
    created = auth_client.post(path, json=payload)
    assert created.status_code == 201
    record = created.get_json()["data"]
    assert record["created_by"] == "dana"
    record_id = record["id"]

    listed = auth_client.get(path).get_json()["data"]
    assert [r["id"] for r in listed] == [record_id]

    fetched = auth_client.get(f"{path}/{record_id}").get_json()["data"]
    assert fetched["created_at"] == record["created_at"]

    updated = auth_client.patch(f"{path}/{record_id}", json={"note": "reviewed", "created_by": "mallory"})
    assert updated.status_code == 200
    assert updated.get_json()["data"]["note"] == "reviewed"
    assert updated.get_json()["data"]["created_by"] == "dana"

    assert auth_client.delete(f"{path}/{record_id}").status_code == 200
    assert auth_client.get(f"{path}/{record_id}").status_code == 404


@pytest.mark.parametrize(("path", "payload"), GROUPS)
def test_mutations_require_login(client, path, payload):
    assert client.post(path, json=payload).status_code == 401
    assert client.get(path).status_code == 200


def test_missing_required_fields(auth_client):
    response = auth_client.post("/api/incidents", json={"title": "No description"})
    assert response.status_code == 400
    assert "description" in response.get_json()["message"]


def test_body_must_be_an_object(auth_client):
    assert auth_client.post("/api/checklist", json=["not", "an", "object"]).status_code == 400


def test_hazard_severity_is_validated(auth_client):
    response = auth_client.post("/api/hazards", json={"title": "Dust", "severity": "apocalyptic"})
    assert response.status_code == 400

    created = auth_client.post("/api/hazards", json={"title": "Dust", "severity": "low"}).get_json()["data"]
    response = auth_client.patch(f"/api/hazards/{created['id']}", json={"severity": "extreme"})
    assert response.status_code == 400


def test_unknown_and_malformed_ids_are_404(auth_client):
    assert auth_client.get("/api/hazards/not-an-id").status_code == 404
    assert auth_client.get("/api/hazards/65f0c0ffee0000000000beef").status_code == 404
    assert auth_client.delete("/api/hazards/65f0c0ffee0000000000beef").status_code == 404
    assert auth_client.patch("/api/hazards/nope", json={"title": "x"}).status_code == 404


def test_empty_patch_is_rejected(auth_client):
    created = auth_client.post("/api/checklist", json={"title": "Shift"}).get_json()["data"]
    response = auth_client.patch(f"/api/checklist/{created['id']}", json={"id": "ignored"})
    assert response.status_code == 400


def test_list_limit(auth_client):
    for n in range(3):
        auth_client.post("/api/behavior", json={"worker": f"w{n}", "observation": "ok"})

    assert len(auth_client.get("/api/behavior?limit=2").get_json()["data"]) == 2
    assert auth_client.get("/api/behavior?limit=zero").status_code == 400


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "x", "$where": "1"},
        {"title": "x", "meta": {"$gt": ""}},
        {"title": "x", "items": [{"ok": 1}, {"bad\x00key": 2}]},
    ],
)
def test_operator_keys_rejected_on_create(auth_client, payload):
    response = auth_client.post("/api/checklist", json=payload)
    assert response.status_code == 400
    assert "Invalid field name" in response.get_json()["message"]
    assert auth_client.get("/api/checklist").get_json()["data"] == []


def test_operator_keys_rejected_on_update(auth_client):
    created = auth_client.post("/api/checklist", json={"title": "Shift"}).get_json()["data"]

    response = auth_client.patch(f"/api/checklist/{created['id']}", json={"$inc": 1})
    assert response.status_code == 400

    response = auth_client.patch(f"/api/checklist/{created['id']}", json={"notes": {"$set": "x"}})
    assert response.status_code == 400
    assert auth_client.get(f"/api/checklist/{created['id']}").get_json()["data"]["title"] == "Shift"
