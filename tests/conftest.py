import os
import tempfile

import pytest

# app.config 가 import 시점에 Settings() 를 만들기 때문에 먼저 설정
_TMP = tempfile.mkdtemp(prefix="answer-scoring-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP}/test.db"
os.environ["MEDIA_BACKEND"] = "local"
os.environ["MEDIA_ROOT"] = os.path.join(_TMP, "media")
os.environ["ANSWER_LOCK_BACKEND"] = "local"

from fastapi.testclient import TestClient  # noqa: E402

from app.db.base import Base, SessionLocal, engine, load_models  # noqa: E402
from app.deps import get_enqueue, get_media_store  # noqa: E402
from app.main import app  # noqa: E402
from app.models.answer import Answer  # noqa: E402
from app.services.answer_lock import LocalAnswerLock  # noqa: E402
from app.services.answer_pipeline import AnswerPipeline  # noqa: E402
from app.services.storage_service import LocalMediaStore  # noqa: E402

from fakes import FakeExtractor, FakeScorer, FakeSTT  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_db():
    load_models()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    with SessionLocal() as session:
        yield session


@pytest.fixture
def media_store(tmp_path):
    return LocalMediaStore(str(tmp_path / "media"))


@pytest.fixture
def enqueued():
    return []


@pytest.fixture
def client(media_store, enqueued):
    app.dependency_overrides[get_media_store] = lambda: media_store
    app.dependency_overrides[get_enqueue] = lambda: enqueued.append
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_answer(db, media_store):
    def _make(question_id="3", status="queued", video=b"fake-webm-bytes", **fields):
        answer = Answer(question_id=question_id, status=status, **fields)
        db.add(answer)
        db.flush()
        if video is not None:
            answer.media_path = media_store.attach(answer.id, video, "answer.webm")
        db.commit()
        return answer.id

    return _make


@pytest.fixture
def load_answer():
    def _load(answer_id):
        with SessionLocal() as session:
            return session.get(Answer, answer_id)

    return _load


@pytest.fixture
def extractor(monkeypatch):
    fake = FakeExtractor()
    monkeypatch.setattr("app.services.answer_pipeline.extract_audio", fake)
    return fake


@pytest.fixture
def make_pipeline(media_store):
    def _make(stt=None, scorer=None, lock=None, **options):
        return AnswerPipeline(
            session_factory=SessionLocal,
            media_store=media_store,
            stt_service=stt or FakeSTT(),
            scoring_service=scorer or FakeScorer(),
            lock=lock or LocalAnswerLock(),
            **options,
        )

    return _make
