"""
Application Services.

역할:
- responders: 요청 경로 라우팅 + 파일/디렉터리/에러 응답 생성
"""

from .responders import (
    directory_json_response,
    directory_response,
    dispatch,
    file_response,
    not_found_response,
    redirect_response,
    route_request,
)

__all__ = [
    "route_request",
    "dispatch",
    "file_response",
    "directory_response",
    "directory_json_response",
    "not_found_response",
    "redirect_response",
]
