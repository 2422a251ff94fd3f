"""
Filesystem Routes: served root 아래 파일 다운로드 및 디렉터리 목록.

- GET /fs → root 디렉터리 목록 (redirect 없음)
- GET /fs/<path> → 파일 내용 또는 디렉터리 목록
- GET /fs/<dir>/?fmt=json → 디렉터리 목록 JSON

핸들러는 sync 함수 (stat/open/readdir가 blocking이므로 threadpool에서 실행).
"""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from src.app.services.responders import dispatch
from src.core.paths import decode_request_path

router = APIRouter()


def get_fs_root(request: Request) -> str:
    """Request에서 served root 경로 가져오기."""
    return request.app.state.fs_root


@router.get("", response_class=Response)
def fs_index(request: Request, fmt: str | None = None) -> Response:
    """served root 디렉터리 목록."""
    return dispatch(get_fs_root(request), "", fmt)


@router.get("/{fs_path:path}", response_class=Response)
def fs_get(request: Request, fs_path: str, fmt: str | None = None) -> Response:
    """파일 또는 디렉터리."""
    request_path = decode_request_path(request.scope.get("raw_path"), fs_path)
    return dispatch(get_fs_root(request), request_path, fmt)
