"""
Core layer: 요청 경로 정규화와 스트리밍 상태 머신.

역할:
- 요청 경로 → served root 아래 파일시스템 경로
- 파일 / 디렉터리 목록 스트림 (핸들 소유, 멱등 close)
- JSON 디렉터리 목록
"""

from .listing import list_directory
from .paths import (
    has_trailing_separator,
    redirect_location,
    resolve_fs_path,
    decode_request_path,
)
from .streams import DirListingStream, FileStream

__all__ = [
    # paths
    "decode_request_path",
    "resolve_fs_path",
    "has_trailing_separator",
    "redirect_location",
    # streams
    "FileStream",
    "DirListingStream",
    # listing
    "list_directory",
]
