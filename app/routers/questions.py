# app/routers/questions.py
from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.deps import get_db
from app.models.question import Question
from app.routers.common import BodyValidationError, error_response, errors_response, parse_body
from app.schemas.question import QuestionCreate, QuestionListItem, QuestionOut, QuestionUpdate

router = APIRouter(prefix="/api/questions", tags=["questions"])

NOT_FOUND = "Question not found"


def _order_taken(db: Session, order: int, exclude_id: int | None = None) -> bool:
    q = db.query(Question).filter(Question.order == order)
    if exclude_id is not None:
        q = q.filter(Question.id != exclude_id)
    return db.query(q.exists()).scalar()


# 활성 질문 목록 (order 오름차순)
@router.get("", response_model=List[QuestionListItem])
def list_questions(db: Session = Depends(get_db)):
    return (
        db.query(Question)
        .filter(Question.active.is_(True))
        .order_by(Question.order.asc())
        .all()
    )


@router.get("/{question_id}", response_model=QuestionOut)
def get_question(question_id: int, db: Session = Depends(get_db)):
    question = db.get(Question, question_id)
    if not question:
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return question


@router.post("", status_code=status.HTTP_201_CREATED, response_model=QuestionOut)
def create_question(payload: Any = Body(...), db: Session = Depends(get_db)):
    try:
        data = parse_body(payload, "question", QuestionCreate)
    except BodyValidationError as e:
        return errors_response(e.errors)

    if _order_taken(db, data.order):
        return errors_response(["Order has already been taken"])

    question = Question(**data.model_dump())
    db.add(question)
    db.commit()
    db.refresh(question)
    return question


@router.api_route("/{question_id}", methods=["PUT", "PATCH"], response_model=QuestionOut)
def update_question(question_id: int, payload: Any = Body(...), db: Session = Depends(get_db)):
    question = db.get(Question, question_id)
    if not question:
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND)

    try:
        data = parse_body(payload, "question", QuestionUpdate)
    except BodyValidationError as e:
        return errors_response(e.errors)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "order" in changes and _order_taken(db, changes["order"], exclude_id=question.id):
        return errors_response(["Order has already been taken"])

    for name, value in changes.items():
        setattr(question, name, value)
    db.commit()
    db.refresh(question)
    return question


# 삭제 = 비활성화 (soft delete)
@router.delete("/{question_id}")
def delete_question(question_id: int, db: Session = Depends(get_db)):
    question = db.get(Question, question_id)
    if not question:
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND)

    question.active = False
    db.commit()
    return {"message": "Question deactivated successfully"}
