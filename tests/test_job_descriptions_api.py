from sqlalchemy import text as sql_text

VALID = {
    "title": "Backend Engineer",
    "description": "Build and operate the services that power candidate interviews.",
}


def test_create_deactivates_previous(client):
    first = client.post("/api/job_descriptions", json={"job_description": VALID}).json()
    second = client.post("/api/job_descriptions", json={**VALID, "title": "Platform Engineer"})

    assert second.status_code == 201
    active = client.get("/api/job_descriptions").json()
    assert [jd["id"] for jd in active] == [second.json()["id"]]
    assert client.get(f"/api/job_descriptions/{first['id']}").json()["active"] is False


def test_current(client):
    assert client.get("/api/job_descriptions/current").status_code == 404

    created = client.post("/api/job_descriptions", json=VALID).json()
    body = client.get("/api/job_descriptions/current").json()

    assert body["id"] == created["id"]
    assert set(body) == {"id", "title", "description", "active", "created_at"}


def test_validation(client):
    res = client.post("/api/job_descriptions", json={"title": "Dev", "description": "too short"})
    assert res.status_code == 422
    assert len(res.json()["errors"]) == 2


def test_update_and_soft_delete(client):
    jd_id = client.post("/api/job_descriptions", json=VALID).json()["id"]

    res = client.patch(f"/api/job_descriptions/{jd_id}", json={"job_description": {"title": "Senior Backend Engineer"}})
    assert res.json()["title"] == "Senior Backend Engineer"

    res = client.delete(f"/api/job_descriptions/{jd_id}")
    assert res.json() == {"message": "Job description deactivated successfully"}
    assert client.get("/api/job_descriptions/current").status_code == 404


def test_missing(client):
    res = client.get("/api/job_descriptions/123")
    assert res.status_code == 404
    assert res.json() == {"error": "Job description not found"}


def test_raw_insert_is_current_by_default(client, db):
    db.execute(sql_text(
        "INSERT INTO job_descriptions (title, description) VALUES (:title, :description)"
    ), VALID)
    db.commit()

    assert client.get("/api/job_descriptions/current").json()["title"] == VALID["title"]
