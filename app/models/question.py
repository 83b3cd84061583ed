# app/models/question.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, func, true
from app.db.base import Base

class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    text = Column(String(500), nullable=False)
    prompt = Column(Text, nullable=False)      # 평가 기준 프롬프트
    order = Column(Integer, nullable=False, unique=True, index=True)
    active = Column(Boolean, nullable=False, server_default=true(), default=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
