from sqlalchemy import text as sql_text

from app.models.question import Question

VALID = {
    "text": "Tell us about a hard bug",
    "prompt": "Evaluate the debugging story. Return only an integer score between 1 and 5.",
    "order": 1,
}


def test_create_nested_and_list_ordered(client):
    client.post("/api/questions", json={"question": {**VALID, "order": 2, "text": "Second question here"}})
    res = client.post("/api/questions", json={"question": VALID})

    assert res.status_code == 201
    body = client.get("/api/questions").json()
    assert [q["order"] for q in body] == [1, 2]
    assert set(body[0]) == {"id", "text", "prompt", "order", "active"}


def test_create_flat_body(client):
    res = client.post("/api/questions", json=VALID)
    assert res.status_code == 201
    assert res.json()["active"] is True


def test_validation_errors(client):
    res = client.post("/api/questions", json={"question": {"text": "short", "prompt": "p", "order": 0}})

    assert res.status_code == 422
    errors = res.json()["errors"]
    assert len(errors) == 3
    assert any(e.startswith("Text") for e in errors)


def test_duplicate_order_rejected(client):
    client.post("/api/questions", json=VALID)
    res = client.post("/api/questions", json={**VALID, "text": "Another question text"})

    assert res.status_code == 422
    assert res.json() == {"errors": ["Order has already been taken"]}


def test_update_and_show(client):
    qid = client.post("/api/questions", json=VALID).json()["id"]

    res = client.put(f"/api/questions/{qid}", json={"question": {"text": "An updated question"}})
    assert res.status_code == 200

    body = client.get(f"/api/questions/{qid}").json()
    assert body["text"] == "An updated question"
    assert body["prompt"] == VALID["prompt"]


def test_update_invalid(client):
    qid = client.post("/api/questions", json=VALID).json()["id"]
    res = client.patch(f"/api/questions/{qid}", json={"order": -1})
    assert res.status_code == 422


def test_delete_is_soft(client, db):
    qid = client.post("/api/questions", json=VALID).json()["id"]

    res = client.delete(f"/api/questions/{qid}")

    assert res.json() == {"message": "Question deactivated successfully"}
    assert client.get("/api/questions").json() == []
    assert db.get(Question, qid).active is False


def test_missing_question(client):
    for res in (
        client.get("/api/questions/99"),
        client.put("/api/questions/99", json=VALID),
        client.delete("/api/questions/99"),
    ):
        assert res.status_code == 404
        assert res.json() == {"error": "Question not found"}


def test_list_omits_timestamps_but_detail_keeps_them(client):
    qid = client.post("/api/questions", json=VALID).json()["id"]

    listed = client.get("/api/questions").json()[0]
    assert "created_at" not in listed and "updated_at" not in listed
    assert "created_at" in client.get(f"/api/questions/{qid}").json()


def test_active_defaults_to_true_at_database_level(db):
    # ORM 기본값을 거치지 않는 INSERT 도 활성 상태로 저장된다
    db.execute(sql_text(
        'INSERT INTO questions (text, prompt, "order") VALUES (:text, :prompt, :order)'
    ), {"text": VALID["text"], "prompt": VALID["prompt"], "order": 7})
    db.commit()

    assert db.query(Question).filter(Question.order == 7).one().active is True
