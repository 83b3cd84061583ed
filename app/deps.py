# app/deps.py
from functools import lru_cache

from app.config import settings
from app.db.base import SessionLocal
from app.services.storage_service import build_media_store

# ----------------------------
# DB 세션
# ----------------------------
def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()  # commit 포함
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

# ----------------------------
# 미디어 저장소 (프로세스당 1개)
# ----------------------------
@lru_cache
def get_media_store():
    return build_media_store(settings)

# ----------------------------
# 작업 큐 (테스트에서 dependency_overrides 로 교체)
# ----------------------------
def get_enqueue():
    from app.queue.tasks import enqueue_answer
    return enqueue_answer
