"""
FastAPI Routes.

파일시스템 라우트 (파일 다운로드 + 디렉터리 목록)
"""

from . import fs

__all__ = ["fs"]
