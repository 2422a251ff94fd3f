"""
Responders: 요청 경로 → HTTP 응답.

흐름:
1. route_request: 경로 정규화 + stat → FILE / DIRECTORY / NOT_FOUND
2. dispatch: 결정에 맞는 responder 호출
   - FILE → file_response (Content-Length = stat 크기, 스트리밍)
   - DIRECTORY → directory_response (HTML, chunked) 또는 directory_json_response
   - NOT_FOUND → not_found_response (고정 본문)

스트림 핸들은 generator의 finally와 background task 양쪽에서 close()가
호출된다. close()가 멱등이므로 실제 해제는 한 번.
CORS 헤더는 여기서 붙이지 않는다 (앱 미들웨어에서 응답당 한 번).
"""

import logging
import os
import stat

from fastapi.responses import (
    HTMLResponse,
    JSONResponse,
    RedirectResponse,
    Response,
    StreamingResponse,
)
from starlette.background import BackgroundTask

from src.core.listing import list_directory
from src.core.paths import has_trailing_separator, redirect_location, resolve_fs_path
from src.core.streams import DirListingStream, FileStream
from src.domain.constants import LISTING_FORMAT_JSON, PAGE_404, get_mime_type
from src.domain.errors import ErrorCodes, FsError
from src.domain.schemas import ResponseKind, RouteDecision

logger = logging.getLogger(__name__)


# =============================================================================
# Routing
# =============================================================================


def route_request(root: str, request_path: str) -> RouteDecision:
    """
    요청 경로를 stat하여 응답 종류 결정.

    Args:
        root: served root
        request_path: prefix가 제거된 요청 경로 (빈 문자열이면 "/")

    Returns:
        RouteDecision
    """
    if not request_path:
        request_path = "/"

    try:
        fs_path = resolve_fs_path(root, request_path)
        st = os.stat(fs_path)
    except (FsError, OSError, ValueError) as e:
        logger.info(f"Not found: {request_path} ({e})")
        return RouteDecision(kind=ResponseKind.NOT_FOUND, request_path=request_path)

    if stat.S_ISREG(st.st_mode):
        kind = ResponseKind.FILE
    else:
        kind = ResponseKind.DIRECTORY

    logger.debug(f"Dispatch {request_path} → {kind.value} ({fs_path})")
    return RouteDecision(
        kind=kind,
        request_path=request_path,
        fs_path=fs_path,
        size=st.st_size,
    )


def dispatch(root: str, request_path: str, fmt: str | None = None) -> Response:
    """
    요청 경로에 대한 응답 생성.

    Args:
        root: served root
        request_path: prefix가 제거된 요청 경로
        fmt: 디렉터리 목록 형식 ("json"이면 JSON, 그 외 HTML)
    """
    decision = route_request(root, request_path)

    if decision.kind is ResponseKind.NOT_FOUND:
        return not_found_response()

    if decision.kind is ResponseKind.FILE:
        return file_response(decision)

    if fmt == LISTING_FORMAT_JSON:
        return directory_json_response(decision)

    return directory_response(decision)


# =============================================================================
# Fixed Responses
# =============================================================================


def not_found_response() -> HTMLResponse:
    """404 + 고정 HTML 본문."""
    return HTMLResponse(content=PAGE_404, status_code=404)


def redirect_response(request_path: str, query: str | None = None) -> RedirectResponse:
    """301 → prefix + 요청 경로 + '/' (본문 없음)."""
    location = redirect_location(request_path)
    if query:
        location = f"{location}?{query}"
    return RedirectResponse(url=location, status_code=301)


# =============================================================================
# Streaming Responses
# =============================================================================


def _streaming_response(
    stream: FileStream | DirListingStream,
    media_type: str,
    headers: dict[str, str] | None = None,
) -> StreamingResponse:
    try:
        return StreamingResponse(
            iter(stream),
            media_type=media_type,
            headers=headers,
            background=BackgroundTask(stream.close),
        )
    except Exception as e:
        stream.close()
        raise FsError(
            ErrorCodes.RESPONSE_CONSTRUCTION_FAILED, path=stream.path, cause=e
        ) from e


def file_response(decision: RouteDecision) -> Response:
    """
    일반 파일 내용을 200으로 스트리밍.

    stat 이후 open이 실패하면 (경쟁 상태) 404.
    """
    if decision.fs_path is None:
        return not_found_response()

    try:
        stream = FileStream(decision.fs_path, decision.size)
    except OSError as e:
        logger.info(f"Open failed after stat: {decision.fs_path} ({e})")
        return not_found_response()

    return _streaming_response(
        stream,
        media_type=get_mime_type(decision.fs_path),
        headers={"Content-Length": str(decision.size)},
    )


def directory_response(decision: RouteDecision) -> Response:
    """
    디렉터리 목록 HTML을 200으로 스트리밍 (길이 미정, chunked).

    요청 경로가 '/'로 끝나지 않으면 디렉터리를 열지 않고 301.
    """
    if decision.fs_path is None:
        return not_found_response()

    if not has_trailing_separator(decision.request_path):
        return redirect_response(decision.request_path)

    try:
        stream = DirListingStream(decision.fs_path, decision.request_path)
    except OSError as e:
        logger.info(f"Open directory failed: {decision.fs_path} ({e})")
        return not_found_response()

    return _streaming_response(stream, media_type="text/html; charset=utf-8")


def directory_json_response(decision: RouteDecision) -> Response:
    """디렉터리 목록 JSON (스트리밍 없음). redirect 시 ?fmt=json 유지."""
    if decision.fs_path is None:
        return not_found_response()

    if not has_trailing_separator(decision.request_path):
        return redirect_response(decision.request_path, query=f"fmt={LISTING_FORMAT_JSON}")

    try:
        entries = list_directory(decision.fs_path)
    except OSError as e:
        logger.info(f"Open directory failed: {decision.fs_path} ({e})")
        return not_found_response()

    return JSONResponse(content=[entry.to_dict() for entry in entries])
