from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.services.answer_status import AnswerStatus


# -- Response --

# 답변 조회 (폴링용)
class AnswerOut(BaseModel):
    id: int
    question_id: str
    status: AnswerStatus
    score: Optional[int] = Field(None, ge=1, le=5)
    transcript: Optional[str] = None
    failure_reason: Optional[str] = Field(None, description="실패한 단계 코드 (예외 메시지는 포함하지 않음)")
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

# 답변 제출 - 응답
class AnswerCreated(BaseModel):
    id: int
