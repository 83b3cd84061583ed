# app/models/answer.py
from sqlalchemy import Column, Integer, SmallInteger, String, Text, DateTime, Index, func
from app.db.base import Base

class Answer(Base):
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(String(64), nullable=False)  # 질문 참조 (처리 시 검증하지 않음)
    status = Column(String(20), nullable=False, server_default="queued")  # queued|processing|completed|failed
    score = Column(SmallInteger, nullable=True)   # 1~5, completed일 때만
    transcript = Column(Text, nullable=True)
    failure_reason = Column(String(32), nullable=True)  # 실패한 단계 코드만 저장
    media_path = Column(Text, nullable=True)     # 스토리지 키

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    __table_args__ = (
        Index('ix_answers_status', 'status'),
        Index('ix_answers_created_at', 'created_at'),
    )
