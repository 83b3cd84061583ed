# app/models/job_description.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, func, true
from app.db.base import Base

class JobDescription(Base):
    __tablename__ = "job_descriptions"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    active = Column(Boolean, nullable=False, server_default=true(), default=True, index=True)  # 활성 JD는 1개
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
