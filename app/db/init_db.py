# app/db/init_db.py
# 테이블 생성 + 기본 데이터(질문 5개, 활성 JD 1개). 여러 번 실행해도 안전.
import logging

from sqlalchemy.orm import Session

from app.db.base import SessionLocal, engine, load_models
from app.models.job_description import JobDescription
from app.models.question import Question

logger = logging.getLogger(__name__)

DEFAULT_QUESTIONS = [
    {
        "text": "Tell us about yourself",
        "prompt": "Evaluate this self-introduction for clarity, confidence, and professionalism. Consider how well the candidate presents themselves and communicates their background. Look for structure, enthusiasm, and relevant information. Return only an integer score between 1 and 5.",
        "order": 1,
    },
    {
        "text": "What's your greatest achievement?",
        "prompt": "Assess this achievement story for impact, specificity, and demonstration of skills. Consider whether the candidate provides concrete details, explains the significance, and shows problem-solving abilities. Look for measurable results and personal growth. Return only an integer score between 1 and 5.",
        "order": 2,
    },
    {
        "text": "Where do you see yourself in 5 years?",
        "prompt": "Evaluate this career planning response for realism, ambition, and alignment with the role. Consider whether the candidate shows clear goals, understands career progression, and demonstrates commitment to growth. Look for thoughtful planning and realistic expectations. Return only an integer score between 1 and 5.",
        "order": 3,
    },
    {
        "text": "Why do you want to work with us?",
        "prompt": "Assess this motivation response for research, genuine interest, and cultural fit. Consider whether the candidate demonstrates knowledge of the company, shows enthusiasm for the role, and explains their interest clearly. Look for specific reasons and alignment with company values. Return only an integer score between 1 and 5.",
        "order": 4,
    },
    {
        "text": "How do you handle working under pressure?",
        "prompt": "Evaluate this stress management response for practical strategies, self-awareness, and resilience. Consider whether the candidate provides specific examples, shows emotional intelligence, and demonstrates effective coping mechanisms. Look for realistic approaches and learning from challenges. Return only an integer score between 1 and 5.",
        "order": 5,
    },
]

DEFAULT_JOB_DESCRIPTION = {
    "title": "Software Engineer",
    "description": "We are looking for a talented Software Engineer to join our dynamic team. The ideal candidate should have strong programming skills, experience with modern web technologies, and a passion for creating high-quality software solutions. Responsibilities include developing new features, maintaining existing code, collaborating with cross-functional teams, and contributing to technical architecture decisions. We value creativity, problem-solving abilities, and a commitment to continuous learning.",
}


def init_db(bind=None) -> None:
    load_models().create_all(bind=bind or engine)


def seed_defaults(db: Session) -> None:
    # 질문이 하나도 없을 때만
    if db.query(Question).count() == 0:
        db.add_all([Question(**q) for q in DEFAULT_QUESTIONS])
        db.commit()
        logger.info("[SEED] created %d default questions", len(DEFAULT_QUESTIONS))
    else:
        logger.info("[SEED] questions already exist, skipping")

    # 활성 JD가 없을 때만 (기존 것은 비활성화)
    if db.query(JobDescription).filter(JobDescription.active.is_(True)).count() == 0:
        db.query(JobDescription).update({JobDescription.active: False}, synchronize_session=False)
        db.add(JobDescription(active=True, **DEFAULT_JOB_DESCRIPTION))
        db.commit()
        logger.info("[SEED] created default job description")
    else:
        logger.info("[SEED] active job description already exists, skipping")


if __name__ == "__main__":
    from app.config import settings
    from app.logging_config import setup_logging

    setup_logging(settings.log_level)
    init_db()
    with SessionLocal() as db:
        seed_defaults(db)
