"""
공용 DB 베이스/세션 팩토리.
SessionLocal, engine, Base 정의는 app.db.session 한 곳에서 관리한다.
create_all 전에 모든 모델이 metadata에 등록되도록 load_models()를 호출한다.
"""
from app.db.session import engine, SessionLocal, Base


def load_models():
    # 테이블 등록용 import (순환 import 방지를 위해 함수 안에서)
    from app.models import answer, question, job_description  # noqa: F401
    return Base.metadata


__all__ = ["engine", "SessionLocal", "Base", "load_models"]
