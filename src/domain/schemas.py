"""
Data schemas for the file server.

- DirPhase: 디렉터리 목록 스트림의 단계
- DirEntry: JSON 목록의 항목
- RouteDecision: 라우터가 선택한 응답 종류
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

# =============================================================================
# Enums
# =============================================================================

class DirPhase(str, Enum):
    """
    디렉터리 목록 상태 머신의 단계.

    HEADER → ENTRIES → FOOTER → DONE 순서로만 진행.
    """
    HEADER = "header"
    ENTRIES = "entries"
    FOOTER = "footer"
    DONE = "done"


class ResponseKind(str, Enum):
    """라우터가 선택한 응답 종류."""
    FILE = "file"
    DIRECTORY = "directory"
    NOT_FOUND = "not_found"

# =============================================================================
# Schemas
# =============================================================================

@dataclass(frozen=True)
class DirEntry:
    """디렉터리 항목 (JSON 목록용)."""
    name: str
    mode: str  # 'd', '-', 'l', ... (ls -l 모드 문자열의 첫 글자)

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용."""
        return {"name": self.name, "mode": self.mode}


@dataclass(frozen=True)
class RouteDecision:
    """
    요청 경로에 대한 라우팅 결정.

    fs_path는 served root 아래로 정규화된 파일시스템 경로.
    size는 FILE일 때만 의미가 있음 (stat 시점의 크기).
    """
    kind: ResponseKind
    request_path: str
    fs_path: str | None = None
    size: int = 0
