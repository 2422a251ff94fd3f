"""
Pytest fixtures for the file server tests.

테스트 구성:
- served_tree: a.txt, b.txt, sub/, .hidden 을 가진 served root
- client: served_tree를 root로 하는 TestClient
- live_server: 실제 uvicorn 서버 (integration)
"""

import threading
import time
from collections.abc import Generator
from pathlib import Path

import httpx
import pytest
import uvicorn
import yaml
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.main import create_app

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Served Tree Fixtures
# =============================================================================

def build_served_tree(root: Path) -> Path:
    """
    served root 디렉터리 구성.

    포함:
    - x/a.txt, x/b.txt, x/sub/, x/.hidden
    - x/sub/c.bin (바이너리)
    """
    x = root / "x"
    (x / "sub").mkdir(parents=True)
    (x / "a.txt").write_text("hello a\n", encoding="utf-8")
    (x / "b.txt").write_text("hello b\n", encoding="utf-8")
    (x / ".hidden").write_text("secret", encoding="utf-8")
    (x / "sub" / "c.bin").write_bytes(bytes(range(256)) * 4)
    return root


@pytest.fixture
def served_tree(tmp_path: Path) -> Path:
    """테스트용 served root."""
    root = tmp_path / "root"
    root.mkdir()
    return build_served_tree(root)


@pytest.fixture
def app(served_tree: Path) -> FastAPI:
    """served_tree를 root로 하는 앱."""
    return create_app({"fs": {"root": str(served_tree)}})


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """FastAPI TestClient (redirect 자동 추적 안 함)."""
    with TestClient(app, follow_redirects=False) as client:
        yield client


# =============================================================================
# Live Server Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def live_served_tree(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """live_server용 served root (세션 단위)."""
    root = tmp_path_factory.mktemp("live_root")
    return build_served_tree(root)


@pytest.fixture(scope="session")
def live_server(live_served_tree: Path) -> Generator[str, None, None]:
    """
    앱을 백그라운드 uvicorn 서버로 실행하는 fixture.

    Returns:
        서버 URL (예: "http://127.0.0.1:8766")
    """
    app = create_app({"fs": {"root": str(live_served_tree)}})

    # 테스트용 포트
    port = 8766
    host = "127.0.0.1"

    # 별도 스레드에서 서버 실행
    config = uvicorn.Config(app, host=host, port=port, log_level="error")
    server = uvicorn.Server(config)

    def run_server() -> None:
        import asyncio
        asyncio.run(server.serve())

    thread = threading.Thread(target=run_server, daemon=True)
    thread.start()

    # 서버가 준비될 때까지 대기
    base_url = f"http://{host}:{port}"
    max_attempts = 50
    for _ in range(max_attempts):
        try:
            response = httpx.get(f"{base_url}/health", timeout=1.0)
            if response.status_code == 200:
                break
        except httpx.HTTPError:
            time.sleep(0.1)
    else:
        raise RuntimeError("Failed to start test server")

    yield base_url

    # 서버 종료
    server.should_exit = True
    thread.join(timeout=5)
