"""
/fs API 클라이언트.

- fs_list_dir: GET /fs<dir>/?fmt=json → DirectoryListing 목록
- fs_get_file_stream: GET /fs<file> → 바이트 청크 iterator
- fs_get_file_text: GET /fs<file> → 문자열

실패(비 2xx, 잘못된 경로 형식)는 예외 대신 None.
"""

from collections.abc import Iterator
from dataclasses import dataclass

import httpx

from src.domain.constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    FS_ROUTE_PREFIX,
    IGNORED_ENTRY_NAMES,
    LISTING_FORMAT_JSON,
)

DEFAULT_BASE_URL = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"


@dataclass(frozen=True)
class DirectoryListing:
    """디렉터리 항목."""
    name: str
    mode: str

    def is_dir(self) -> bool:
        return self.mode == "d" and self.name not in IGNORED_ENTRY_NAMES

    def is_file(self) -> bool:
        return self.mode == "-" and self.name not in IGNORED_ENTRY_NAMES


class ApiClient:
    """
    /fs 엔드포인트 래퍼.

    Args:
        base_url: 서버 origin (예: "http://127.0.0.1:8080")
        client: 외부에서 주입할 httpx.Client (테스트에서는 TestClient)
        timeout: client 미주입 시 요청 타임아웃(초)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{FS_ROUTE_PREFIX}{path}"

    @staticmethod
    def _is_file_path(path: str) -> bool:
        return path.startswith("/") and not path.endswith("/")

    def fs_list_dir(self, path: str) -> list[DirectoryListing] | None:
        """
        디렉터리 목록 조회.

        Returns:
            (mode, name) 순 정렬, '.'/'..' 제외. 실패 시 None.
        """
        if not path.endswith("/"):
            path += "/"

        response = self._client.get(self._url(path), params={"fmt": LISTING_FORMAT_JSON})
        if not response.is_success:
            return None

        data = response.json()
        data.sort(key=lambda entry: (entry["mode"], entry["name"]))

        return [
            DirectoryListing(name=entry["name"], mode=entry["mode"])
            for entry in data
            if entry["name"] not in IGNORED_ENTRY_NAMES
        ]

    def fs_get_file_stream(self, path: str) -> Iterator[bytes] | None:
        """파일 내용을 청크 단위로. 끝까지 읽거나 iterator가 닫히면 응답도 닫힘."""
        if not self._is_file_path(path):
            return None

        request = self._client.build_request("GET", self._url(path))
        response = self._client.send(request, stream=True)
        if not response.is_success:
            response.close()
            return None

        return self._iter_body(response)

    @staticmethod
    def _iter_body(response: httpx.Response) -> Iterator[bytes]:
        try:
            yield from response.iter_bytes()
        finally:
            response.close()

    def fs_get_file_text(self, path: str) -> str | None:
        """파일 내용을 문자열로."""
        if not self._is_file_path(path):
            return None

        response = self._client.get(self._url(path))
        if not response.is_success:
            return None
        return response.text

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
