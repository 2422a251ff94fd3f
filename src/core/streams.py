"""
Streaming responders: 파일 / 디렉터리 목록을 청크 단위로 생성.

두 스트림 모두:
- 요청 1개가 단독 소유 (요청 간 공유 없음, 락 불필요)
- 호출은 HTTP 계층이 순차적으로 수행
- close()는 멱등. 정상 종료/에러/중단 어느 경로든 핸들은 한 번만 닫힘

HTTP 계층은 iter(stream)으로 청크를 당겨간다.
"""

import html
import logging
import os
from collections.abc import Iterator
from typing import BinaryIO

from src.domain.constants import (
    LISTING_CHUNK_SIZE,
    LISTING_ENTRY_TEMPLATE,
    LISTING_FOOTER,
    LISTING_HEADER_TEMPLATE,
    MIN_LISTING_CHUNK,
    READ_BLOCK_SIZE,
)
from src.domain.errors import ErrorCodes, FsError
from src.domain.schemas import DirPhase

logger = logging.getLogger(__name__)


def _encode(text: str) -> bytes:
    # 디코딩 불가 파일명은 surrogateescape로 들어오므로 원래 바이트로 복원
    return text.encode("utf-8", "surrogateescape")


def render_header(request_path: str) -> bytes:
    """목록 HTML 머리말 (title + h1)."""
    return _encode(LISTING_HEADER_TEMPLATE.format(path=html.escape(request_path)))


def render_entry(name: str) -> bytes:
    """목록 항목 1개 (<li><a href=name>name</a></li>)."""
    return _encode(LISTING_ENTRY_TEMPLATE.format(name=html.escape(name)))


def render_footer() -> bytes:
    return _encode(LISTING_FOOTER)


# =============================================================================
# File Stream
# =============================================================================


class FileStream:
    """
    일반 파일 내용 스트림.

    size는 라우터가 stat한 시점의 크기 (응답 Content-Length).
    스트리밍 중 파일이 바뀌어도 다시 stat하지 않는다.
    """

    def __init__(self, path: str, size: int, block_size: int = READ_BLOCK_SIZE) -> None:
        self.path = path
        self.size = size
        self.block_size = block_size
        # open 실패(OSError)는 호출자에게 전파 → 404
        self._file: BinaryIO | None = open(path, "rb")

    @property
    def closed(self) -> bool:
        return self._file is None

    def read(self, pos: int, max_bytes: int) -> bytes:
        """
        pos 위치부터 최대 max_bytes (block_size 상한) 읽기.

        Returns:
            읽은 바이트. b"" 이면 end-of-stream.

        Raises:
            FsError: seek/read 실패 (STREAM_IO_ERROR)
        """
        if self._file is None:
            raise FsError(ErrorCodes.STREAM_IO_ERROR, path=self.path, offset=pos, cause="closed")

        try:
            self._file.seek(pos)
            return self._file.read(min(max_bytes, self.block_size))
        except OSError as e:
            raise FsError(
                ErrorCodes.STREAM_IO_ERROR, path=self.path, offset=pos, cause=e
            ) from e

    def close(self) -> None:
        if self._file is None:
            return
        f, self._file = self._file, None
        f.close()

    def __iter__(self) -> Iterator[bytes]:
        pos = 0
        try:
            while True:
                chunk = self.read(pos, self.block_size)
                if not chunk:
                    return
                pos += len(chunk)
                yield chunk
        except FsError as e:
            logger.warning(f"File stream aborted: {e}")
            raise
        finally:
            self.close()

    def __enter__(self) -> "FileStream":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# =============================================================================
# Directory Listing Stream
# =============================================================================


class DirListingStream:
    """
    디렉터리 목록 HTML 스트림 (상태 머신).

    read() 한 번에 한 단계씩 진행:
    - HEADER: 머리말 출력 → ENTRIES
    - ENTRIES: 다음 항목 1개. 없으면 → FOOTER (출력 없음),
      '.'으로 시작하면 출력 없음, 그 외 <li> 1개
    - FOOTER: 닫는 태그 출력 → DONE
    - DONE: 항상 None (end-of-stream)
    """

    def __init__(
        self,
        path: str,
        request_path: str,
        chunk_size: int = LISTING_CHUNK_SIZE,
        min_chunk: int = MIN_LISTING_CHUNK,
    ) -> None:
        if chunk_size < min_chunk:
            raise ValueError(f"chunk_size {chunk_size} < min_chunk {min_chunk}")

        self.path = path
        self.request_path = request_path
        self.chunk_size = chunk_size
        self.min_chunk = min_chunk
        self.phase = DirPhase.HEADER
        # opendir 실패(OSError)는 호출자에게 전파 → 404
        self._entries: "os._ScandirIterator[str] | None" = os.scandir(path)

    @property
    def closed(self) -> bool:
        return self._entries is None

    def read(self, max_bytes: int) -> bytes | None:
        """
        상태 머신을 한 단계 진행.

        Returns:
            - None: end-of-stream
            - b"": 이번 호출에서 출력 없음 (버퍼 부족, 숨김 항목, FOOTER 전이)
            - 그 외: 이번 단계의 출력
        """
        if max_bytes < self.min_chunk:
            return b""

        if self.phase is DirPhase.HEADER:
            self.phase = DirPhase.ENTRIES
            return render_header(self.request_path)

        if self.phase is DirPhase.ENTRIES:
            entry = self._next_entry()
            if entry is None:
                self.phase = DirPhase.FOOTER
                return b""
            if entry.name.startswith("."):
                return b""
            return render_entry(entry.name)

        if self.phase is DirPhase.FOOTER:
            self.phase = DirPhase.DONE
            return render_footer()

        return None

    def _next_entry(self) -> os.DirEntry | None:
        if self._entries is None:
            return None
        try:
            return next(self._entries, None)
        except OSError as e:
            raise FsError(ErrorCodes.STREAM_IO_ERROR, path=self.path, cause=e) from e

    def close(self) -> None:
        if self._entries is None:
            return
        entries, self._entries = self._entries, None
        entries.close()

    def __iter__(self) -> Iterator[bytes]:
        try:
            while True:
                chunk = self.read(self.chunk_size)
                if chunk is None:
                    return
                if chunk:
                    yield chunk
        except FsError as e:
            logger.warning(f"Directory stream aborted: {e}")
            raise
        finally:
            self.close()

    def __enter__(self) -> "DirListingStream":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
