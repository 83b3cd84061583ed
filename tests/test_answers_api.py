from app.models.answer import Answer


def _submit(client, video=b"webm-bytes", question_id="3"):
    files = {"video": ("answer.webm", video, "video/webm")} if video is not None else None
    data = {"questionId": question_id} if question_id is not None else None
    return client.post("/api/answers", files=files, data=data)


def test_submit_creates_queued_answer_and_enqueues_once(client, enqueued, db, media_store):
    res = _submit(client)

    assert res.status_code == 202
    answer_id = res.json()["id"]
    assert enqueued == [answer_id]

    answer = db.get(Answer, answer_id)
    assert answer.status == "queued"
    assert answer.question_id == "3"
    assert answer.transcript is None and answer.score is None
    assert media_store.download(answer.media_path) == b"webm-bytes"


def test_submit_requires_video_and_question(client, enqueued, db):
    for res in (_submit(client, video=None), _submit(client, question_id=None), _submit(client, video=b"")):
        assert res.status_code == 400
        assert res.json() == {"error": "Missing required parameters: video, questionId"}

    assert enqueued == []
    assert db.query(Answer).count() == 0


def test_submit_storage_failure_leaves_no_record(client, enqueued, db, media_store, monkeypatch):
    from app.services.errors import MediaStoreError

    def broken_attach(answer_id, data, filename=None):
        raise MediaStoreError("bucket missing")

    monkeypatch.setattr(media_store, "attach", broken_attach)

    assert _submit(client).status_code == 502
    assert enqueued == []
    assert db.query(Answer).count() == 0


def test_get_answer_exposes_resource_fields(client, make_answer):
    answer_id = make_answer(status="failed", transcript="Short answer.", failure_reason="scoring_failed")

    body = client.get(f"/api/answers/{answer_id}").json()

    assert set(body) == {"id", "question_id", "status", "score", "transcript", "failure_reason", "created_at"}
    assert body["status"] == "failed"
    assert body["transcript"] == "Short answer."
    assert body["score"] is None


def test_get_missing_answer(client):
    res = client.get("/api/answers/404")
    assert res.status_code == 404
    assert res.json() == {"error": "Answer not found"}


def test_list_answers_newest_first(client, make_answer):
    first = make_answer(question_id="1")
    second = make_answer(question_id="2", status="completed", transcript="t", score=5)

    body = client.get("/api/answers").json()

    assert [a["id"] for a in body] == [second, first]
    assert body[0]["score"] == 5


def test_submit_then_process_end_to_end(client, enqueued, make_pipeline, extractor):
    from fakes import FakeScorer, FakeSTT

    answer_id = _submit(client, question_id="3").json()["id"]
    pipeline = make_pipeline(stt=FakeSTT("I led a team of five engineers..."), scorer=FakeScorer(4))

    for queued_id in enqueued:
        pipeline.process(queued_id)

    body = client.get(f"/api/answers/{answer_id}").json()
    assert body["status"] == "completed"
    assert body["transcript"] == "I led a team of five engineers..."
    assert body["score"] == 4


def test_health(client):
    assert client.get("/").json() == {"ok": True}
    assert client.get("/up").json() == {"status": "up"}
