"""
JSON 디렉터리 목록 (?fmt=json).

HTML 목록과 달리 한 번에 생성 (스트리밍 없음):
- '.', '..' 제외, dot-file은 포함
- mode: ls -l 모드 문자열의 첫 글자 ('d', '-', 'l', ...)
- (mode, name) 순 정렬
"""

import logging
import os
import stat

from src.domain.constants import IGNORED_ENTRY_NAMES
from src.domain.schemas import DirEntry

logger = logging.getLogger(__name__)


def entry_mode(entry: os.DirEntry) -> str | None:
    """
    항목의 모드 문자 계산.

    symlink는 대상 기준. 대상 stat 실패 시 링크 자체 기준 ('l').
    항목이 열거 도중 사라졌으면 None.
    """
    try:
        st = entry.stat()
    except OSError:
        try:
            st = entry.stat(follow_symlinks=False)
        except OSError:
            return None
    return stat.filemode(st.st_mode)[0]


def display_name(name: str) -> str:
    """디코딩 불가 바이트가 섞인 파일명을 JSON에 넣을 수 있는 문자열로."""
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def list_directory(path: str) -> list[DirEntry]:
    """
    디렉터리 항목 목록.

    Args:
        path: 디렉터리 경로

    Returns:
        (mode, name) 순으로 정렬된 DirEntry 목록

    Raises:
        OSError: 디렉터리 열기 실패
    """
    entries: list[DirEntry] = []

    with os.scandir(path) as it:
        for entry in it:
            if entry.name in IGNORED_ENTRY_NAMES:
                continue

            mode = entry_mode(entry)
            if mode is None:
                logger.debug(f"Entry vanished during listing: {entry.path}")
                continue

            entries.append(DirEntry(name=display_name(entry.name), mode=mode))

    entries.sort(key=lambda e: (e.mode, e.name))
    return entries
