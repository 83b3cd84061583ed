# app/routers/common.py
# 라우터 공용: 에러 응답 형태 {"error": ...} / {"errors": [...]} 와 요청 본문 파싱
from typing import Any, Dict, Type, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)


class BodyValidationError(Exception):
    def __init__(self, errors):
        self.errors = errors
        super().__init__("; ".join(errors))


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def errors_response(errors) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": list(errors)})


def _humanize(err: Dict[str, Any]) -> str:
    field = ".".join(str(p) for p in err.get("loc", ()) if p != "body") or "body"
    return f"{field.capitalize()} {err.get('msg', 'is invalid')}"


def parse_body(payload: Any, key: str, model: Type[M]) -> M:
    """
    {"question": {...}} 처럼 감싼 형태와 평평한 형태 모두 허용.
    검증 실패 시 BodyValidationError(사람이 읽을 수 있는 메시지 목록).
    """
    if not isinstance(payload, dict):
        raise BodyValidationError([f"{key.capitalize()} payload must be an object"])
    data = payload.get(key, payload)
    if not isinstance(data, dict):
        raise BodyValidationError([f"{key.capitalize()} payload must be an object"])
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise BodyValidationError([_humanize(err) for err in e.errors()]) from e
