"""
test_main.py - 앱 설정 / 팩토리 / CLI 파서 테스트
"""

from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

from src.app.main import (
    apply_env_overrides,
    build_parser,
    create_app,
    load_config,
    resolve_served_root,
)
from src.domain.errors import ErrorCodes, FsError

# =============================================================================
# Configuration
# =============================================================================


class TestLoadConfig:
    """load_config 테스트."""

    def test_default_yaml(self, default_config_path: Path):
        """프로젝트 default.yaml 로드."""
        config = load_config(default_config_path)

        assert config["server"]["port"] == 8080
        assert config["fs"]["root"] == "/"

    def test_default_path_used_when_none(self, default_config: dict):
        """경로 미지정 시 default.yaml."""
        assert load_config() == default_config

    def test_missing_file_is_empty(self, tmp_path: Path):
        """파일 없음 → 빈 dict."""
        assert load_config(tmp_path / "missing.yaml") == {}

    def test_empty_file_is_empty(self, tmp_path: Path):
        """빈 YAML → 빈 dict."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == {}


class TestEnvOverrides:
    """apply_env_overrides 테스트."""

    def test_overrides_applied(self):
        config = {"server": {"host": "127.0.0.1", "port": 8080}, "fs": {"root": "/"}}
        environ = {"WEBSRV_ROOT": "/srv", "WEBSRV_PORT": "9090"}

        merged = apply_env_overrides(config, environ)

        assert merged["fs"]["root"] == "/srv"
        assert merged["server"]["port"] == 9090
        assert merged["server"]["host"] == "127.0.0.1"

    def test_original_not_mutated(self):
        config = {"fs": {"root": "/"}}

        apply_env_overrides(config, {"WEBSRV_ROOT": "/srv"})

        assert config["fs"]["root"] == "/"

    def test_missing_section_created(self):
        merged = apply_env_overrides({}, {"WEBSRV_LOG_LEVEL": "DEBUG"})

        assert merged == {"logging": {"level": "DEBUG"}}

    def test_empty_values_ignored(self):
        merged = apply_env_overrides({"fs": {"root": "/"}}, {"WEBSRV_ROOT": ""})

        assert merged["fs"]["root"] == "/"


class TestResolveServedRoot:
    """resolve_served_root 테스트."""

    def test_default_root(self):
        assert resolve_served_root({}) == "/"

    def test_configured_root_is_absolute(self, tmp_path: Path):
        assert resolve_served_root({"fs": {"root": str(tmp_path)}}) == str(tmp_path)


# =============================================================================
# App Factory
# =============================================================================


class TestCreateApp:
    """create_app / lifespan 테스트."""

    def test_state_from_given_config(self, served_tree: Path):
        """주어진 설정으로 served root 결정."""
        app = create_app({"fs": {"root": str(served_tree)}})

        with TestClient(app):
            assert app.state.fs_root == str(served_tree)

    def test_state_from_default_config(self, monkeypatch):
        """설정 미지정 → default.yaml + 환경 변수."""
        monkeypatch.setenv("WEBSRV_ROOT", "/tmp")
        monkeypatch.delenv("WEBSRV_PORT", raising=False)

        app = create_app()

        with TestClient(app):
            assert app.state.fs_root == "/tmp"
            assert app.state.config["server"]["port"] == 8080

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_index(self, client: TestClient):
        response = client.get("/")

        assert response.json()["endpoints"]["fs"] == "/fs/"

    def test_fs_error_becomes_500_with_cors(self, client: TestClient):
        """처리되지 않은 FsError → 500 JSON (CORS 헤더 포함)."""
        with patch(
            "src.app.routes.fs.dispatch",
            side_effect=FsError(ErrorCodes.RESPONSE_CONSTRUCTION_FAILED, path="/x"),
        ):
            response = client.get("/fs/x/")

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == ErrorCodes.RESPONSE_CONSTRUCTION_FAILED
        assert response.headers["access-control-allow-origin"] == "*"


# =============================================================================
# CLI
# =============================================================================


class TestBuildParser:
    """CLI 인자 파서 테스트."""

    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.root is None
        assert args.port is None
        assert args.config is None

    def test_all_options(self):
        args = build_parser().parse_args(
            ["--root", "/srv", "--host", "0.0.0.0", "--port", "9000", "--log-level", "DEBUG"]
        )

        assert args.root == "/srv"
        assert args.host == "0.0.0.0"
        assert args.port == 9000
        assert args.log_level == "DEBUG"

    def test_main_runs_uvicorn_with_overrides(self, tmp_path: Path, monkeypatch):
        """main() → create_app + uvicorn.run (인자가 설정보다 우선)."""
        from src.app import main as main_module

        monkeypatch.delenv("WEBSRV_ROOT", raising=False)
        monkeypatch.delenv("WEBSRV_PORT", raising=False)

        with patch("uvicorn.run") as run, patch("dotenv.load_dotenv"):
            main_module.main(["--root", str(tmp_path), "--port", "9001"])

        app = run.call_args.args[0]
        assert app.state.config["fs"]["root"] == str(tmp_path)
        assert run.call_args.kwargs["port"] == 9001
