# app/services/storage_service.py
import os
import logging
from pathlib import Path

from storage3.exceptions import StorageApiError
from supabase import create_client

from app.services.errors import MediaStoreError, MissingMediaError

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"not_found", "NoSuchKey", "NotFound"}


def media_key(answer_id: int, filename: str | None) -> str:
    """스토리지 키: answers/{id}/video{ext}"""
    ext = os.path.splitext(filename or "")[1].lower() or ".webm"
    return f"answers/{answer_id}/video{ext}"


def _is_not_found(e: StorageApiError) -> bool:
    return str(getattr(e, "status", "")) == "404" or getattr(e, "code", None) in NOT_FOUND_CODES


class LocalMediaStore:
    """로컬 디렉터리 저장소 (개발/테스트용)"""

    def __init__(self, root: str):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise MediaStoreError(f"invalid media key: {key}")
        return path

    def attach(self, answer_id: int, data: bytes, filename: str | None = None) -> str:
        key = media_key(answer_id, filename)
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return key

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def download(self, key: str) -> bytes:
        path = self._path(key)
        if not path.exists():
            raise MissingMediaError(f"media not found: {key}")
        return path.read_bytes()

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


class SupabaseMediaStore:
    """
    Private Bucket 저장소
    - 업로드 시 bucket 내의 파일 경로(키)만 반환 (공개 URL 아님)
    - 404 / not_found 는 MissingMediaError, 그 외 오류는 MediaStoreError
    """

    def __init__(self, url: str, key: str, bucket: str, client=None):
        if client is None:
            if not url or not key:
                raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
            client = create_client(url, key)
        self.client = client
        self.bucket = bucket

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def attach(self, answer_id: int, data: bytes, filename: str | None = None) -> str:
        key = media_key(answer_id, filename)
        try:
            self._bucket().upload(key, data, {
                "content-type": "application/octet-stream",
                "upsert": "true",
            })
        except Exception as e:
            raise MediaStoreError(f"upload failed for {key}: {e}") from e
        return key

    def exists(self, key: str) -> bool:
        try:
            return bool(self._bucket().exists(key))
        except StorageApiError as e:
            if _is_not_found(e):
                return False
            raise MediaStoreError(f"exists check failed for {key}: {e}") from e
        except Exception as e:
            raise MediaStoreError(f"exists check failed for {key}: {e}") from e

    def download(self, key: str) -> bytes:
        try:
            data = self._bucket().download(key)
        except StorageApiError as e:
            if _is_not_found(e):
                raise MissingMediaError(f"media not found: {key}") from e
            raise MediaStoreError(f"download failed for {key}: {e}") from e
        except Exception as e:
            raise MediaStoreError(f"download failed for {key}: {e}") from e
        if not data:
            raise MissingMediaError(f"downloaded media is empty: {key}")
        return data

    def delete(self, key: str) -> None:
        try:
            self._bucket().remove([key])
        except Exception as e:
            raise MediaStoreError(f"delete failed for {key}: {e}") from e


def build_media_store(settings):
    backend = (settings.media_backend or "local").lower()
    if backend == "supabase":
        return SupabaseMediaStore(
            settings.supabase_url,
            settings.supabase_service_role_key,
            settings.supabase_video_bucket,
        )
    if backend == "local":
        return LocalMediaStore(settings.media_root)
    raise ValueError(f"unknown MEDIA_BACKEND: {settings.media_backend}")
