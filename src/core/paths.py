"""
Request path → 파일시스템 경로 변환.

규칙:
- 요청 경로는 raw URL 바이트에서 복원 (UTF-8이 아닌 파일 이름도 그대로)
- 요청 경로는 served root 아래로만 해석 (".." 로 root 밖을 가리키면 reject)
- 정규화는 문자열 기준 (symlink는 따라가지 않음), trailing '/'는 유지
- 디렉터리 trailing '/' 판정은 정규화 전의 요청 경로로 함
"""

import os
from urllib.parse import quote, unquote_to_bytes

from src.domain.constants import FS_ROUTE_PREFIX
from src.domain.errors import ErrorCodes, FsError


def decode_request_path(raw_path: bytes | None, fs_path: str) -> str:
    """
    라우트가 잡은 경로에 해당하는 요청 경로를 raw URL에서 복원.

    ASGI의 scope["path"]는 UTF-8(replace)로 디코딩되어 있어서
    UTF-8이 아닌 파일 이름을 되돌릴 수 없다. raw_path를 바이트로
    unquote한 뒤 os.fsdecode(surrogateescape)로 변환하고, 라우트가
    잡은 경로와 같은 개수의 세그먼트만 뒤에서 잘라낸다.
    root_path 등 앞쪽 prefix는 결과에 영향 없음.

    Args:
        raw_path: scope["raw_path"] (없으면 None)
        fs_path: 라우트 path 파라미터 (예: "tmp/x/a.txt")

    Returns:
        요청 경로 (예: "/tmp/x/a.txt")
    """
    if not raw_path:
        return "/" + fs_path

    # 일부 서버는 query까지 넣어서 전달
    raw_path = raw_path.split(b"?", 1)[0]
    decoded = os.fsdecode(unquote_to_bytes(raw_path))

    # '/'는 scope["path"]와 raw 디코딩 양쪽에서 같은 위치에 나온다
    segments = fs_path.count("/") + 1
    parts = decoded.rsplit("/", segments)
    if len(parts) <= segments:
        return "/" + fs_path
    return "/" + "/".join(parts[1:])


def resolve_fs_path(root: str, request_path: str) -> str:
    """
    요청 경로를 served root 기준 파일시스템 경로로 변환.

    Args:
        root: served root (절대 경로)
        request_path: prefix가 제거된 요청 경로 (예: "/tmp/x/a.txt")

    Returns:
        정규화된 절대 경로

    Raises:
        FsError: NUL 문자 포함 또는 root 밖을 가리키는 경로
    """
    if "\x00" in request_path:
        raise FsError(ErrorCodes.NOT_FOUND, request_path=request_path)

    root = os.path.abspath(root)
    joined = os.path.normpath(os.path.join(root, request_path.lstrip("/")))

    if os.path.commonpath([root, joined]) != root:
        raise FsError(
            ErrorCodes.PATH_OUTSIDE_ROOT,
            root=root,
            request_path=request_path,
        )

    # trailing '/' 유지: "a.txt/" 처럼 파일 뒤에 '/'가 붙으면 stat이 실패해야 함
    if request_path.endswith("/") and not joined.endswith("/"):
        joined += "/"

    return joined


def has_trailing_separator(request_path: str) -> bool:
    """디렉터리 요청 경로가 '/'로 끝나는지."""
    return request_path.endswith("/")


def redirect_location(request_path: str) -> str:
    """
    디렉터리 redirect 대상: prefix 재부착 + trailing '/' 1개.

    요청 경로는 디코딩된 값이므로 다시 percent-encoding ('#', '%', 비 UTF-8 바이트).
    """
    return f"{FS_ROUTE_PREFIX}{quote(os.fsencode(request_path), safe='/')}/"
