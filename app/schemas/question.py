from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# -- Request --

# 질문 등록
class QuestionCreate(BaseModel):
    text: str = Field(..., min_length=10, max_length=500, description="질문 문구")
    prompt: str = Field(..., min_length=10, max_length=1000, description="평가 기준 프롬프트")
    order: int = Field(..., gt=0, description="노출 순서")
    active: bool = True

# 질문 수정 (보낸 필드만 반영)
class QuestionUpdate(BaseModel):
    text: Optional[str] = Field(None, min_length=10, max_length=500)
    prompt: Optional[str] = Field(None, min_length=10, max_length=1000)
    order: Optional[int] = Field(None, gt=0)
    active: Optional[bool] = None


# -- Response --

# 목록용 (타임스탬프 제외)
class QuestionListItem(BaseModel):
    id: int
    text: str
    prompt: str
    order: int
    active: bool
    model_config = ConfigDict(from_attributes=True)


class QuestionOut(QuestionListItem):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
