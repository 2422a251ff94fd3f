"""
Error definitions for the file server.

규칙:
- 모든 에러는 해당 요청에 대해 종결적 (재시도 없음)
- NotFound → 고정 404 응답으로 변환
- StreamIOError → 진행 중인 응답 중단
"""

from typing import Any


class FsError(Exception):
    """
    파일 서버 요청 처리 중 발생하는 에러.

    code로 분류하고, 나머지 컨텍스트는 키워드 인자로 전달:
    - 경로 조회/열기 실패 (NOT_FOUND)
    - 스트리밍 중 seek/read 실패 (STREAM_IO_ERROR)
    - 응답 객체 생성 실패 (RESPONSE_CONSTRUCTION_FAILED)

    Usage:
        raise FsError(ErrorCodes.STREAM_IO_ERROR, path=path, offset=pos, cause=e)
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **{k: str(v) for k, v in self.context.items()},
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Routing ===
    NOT_FOUND = "NOT_FOUND"
    PATH_OUTSIDE_ROOT = "PATH_OUTSIDE_ROOT"

    # === Streaming ===
    STREAM_IO_ERROR = "STREAM_IO_ERROR"

    # === Response ===
    RESPONSE_CONSTRUCTION_FAILED = "RESPONSE_CONSTRUCTION_FAILED"
