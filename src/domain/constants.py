"""
Domain Constants: 서버 전역 상수.

라우트 prefix, 고정 응답 본문, 스트리밍 청크 크기 등
시스템 전반에서 사용되는 값들.
"""

import mimetypes
import mmap
import os

# =============================================================================
# Routing (라우팅)
# =============================================================================
# GET /fs<path> → 파일 또는 디렉터리 목록
# URL에서 prefix("/fs")를 떼어낸 나머지가 요청 경로

FS_ROUTE_PREFIX = "/fs"

DEFAULT_FS_ROOT = "/"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080

# 디렉터리 목록 형식 (?fmt=...)
LISTING_FORMAT_JSON = "json"

# =============================================================================
# Fixed Bodies (고정 응답 본문)
# =============================================================================

PAGE_404 = (
    "<html>"
    "<head><title>File not found</title></head>"
    "<body>File not found</body>"
    "</html>"
)

CORS_ALLOW_ORIGIN_HEADER = "Access-Control-Allow-Origin"

# =============================================================================
# Streaming (스트리밍)
# =============================================================================
# 파일 청크: I/O 블록(페이지) 32개 단위
# 디렉터리 목록: 한 번의 호출에 최소 1개 단위(헤더/항목/푸터)를 보장하는 버퍼

PAGE_SIZE = mmap.PAGESIZE
READ_BLOCK_SIZE = 32 * PAGE_SIZE
LISTING_CHUNK_SIZE = 32 * PAGE_SIZE
MIN_LISTING_CHUNK = 512

# =============================================================================
# Directory Listing HTML (디렉터리 목록 HTML)
# =============================================================================

LISTING_HEADER_TEMPLATE = (
    "<!DOCTYPE html>"
    "<html>"
    "<head><title>Index of {path}</title></head>"
    "<body>"
    "<h1>Index of {path}</h1>"
    "<ul>"
)
LISTING_ENTRY_TEMPLATE = '<li><a href="{name}">{name}</a></li>'
LISTING_FOOTER = "</ul></body></html>"

# JSON 목록에서 제외되는 항목
IGNORED_ENTRY_NAMES = (".", "..")

# =============================================================================
# MIME Types
# =============================================================================

MIME_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".txt": "text/plain; charset=utf-8",
    ".json": "application/json",
    ".js": "text/javascript",
    ".css": "text/css",
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".zip": "application/zip",
}


def get_mime_type(filename: str) -> str:
    """
    파일명에서 MIME 타입 추출.

    Args:
        filename: 파일명 (확장자 포함)

    Returns:
        MIME 타입 문자열 (알 수 없으면 octet-stream)
    """
    ext = os.path.splitext(filename)[1].lower()
    if ext in MIME_TYPES:
        return MIME_TYPES[ext]

    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"
