# app/routers/answers.py
# 답변 제출(영상 업로드 + 큐 등록) / 목록 / 단건 조회(폴링)
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from app.deps import get_db, get_enqueue, get_media_store
from app.models.answer import Answer
from app.routers.common import error_response
from app.schemas.answer import AnswerCreated, AnswerOut
from app.services.answer_status import AnswerStatus
from app.services.errors import MediaStoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/answers", tags=["answers"])


# POST /api/answers  (multipart: video, questionId)
@router.post("", status_code=status.HTTP_202_ACCEPTED, response_model=AnswerCreated)
async def create_answer(
    video: Optional[UploadFile] = File(None),
    questionId: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    media_store=Depends(get_media_store),
    enqueue=Depends(get_enqueue),
):
    video_bytes = await video.read() if video is not None else b""
    if not video_bytes or not (questionId or "").strip():
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Missing required parameters: video, questionId",
        )

    # 1) queued 상태로 생성 (id 확보용 flush)
    answer = Answer(question_id=questionId.strip(), status=AnswerStatus.QUEUED.value)
    db.add(answer)
    db.flush()

    # 2) 영상 저장. 실패하면 레코드도 남기지 않음
    try:
        answer.media_path = media_store.attach(answer.id, video_bytes, video.filename)
    except MediaStoreError as e:
        db.rollback()
        logger.error("[ANSWERS] media_attach_failed question_id=%s error=%s", questionId, e)
        return error_response(status.HTTP_502_BAD_GATEWAY, "Failed to store video")

    # 3) 워커가 레코드를 볼 수 있도록 commit 후 큐 등록
    db.commit()
    enqueue(answer.id)
    logger.info("[ANSWERS] queued answer_id=%s question_id=%s bytes=%d", answer.id, answer.question_id, len(video_bytes))

    return AnswerCreated(id=answer.id)


# GET /api/answers
@router.get("", response_model=List[AnswerOut])
def list_answers(db: Session = Depends(get_db)):
    return (
        db.query(Answer)
        .order_by(Answer.created_at.desc(), Answer.id.desc())
        .all()
    )


# GET /api/answers/{answer_id}
@router.get("/{answer_id}", response_model=AnswerOut)
def get_answer(answer_id: int, db: Session = Depends(get_db)):
    answer = db.get(Answer, answer_id)
    if not answer:
        return error_response(status.HTTP_404_NOT_FOUND, "Answer not found")
    return answer
