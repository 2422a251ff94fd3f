"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- CLI: uv run python -m src.app.main --root /srv/files --port 8080
"""

import argparse
import logging
import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

# Routes
from src.app.routes import fs
from src.domain.constants import (
    CORS_ALLOW_ORIGIN_HEADER,
    DEFAULT_FS_ROOT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    FS_ROUTE_PREFIX,
)
from src.domain.errors import FsError

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================

# 환경 변수 → (섹션, 키)
ENV_OVERRIDES = {
    "WEBSRV_ROOT": ("fs", "root"),
    "WEBSRV_HOST": ("server", "host"),
    "WEBSRV_PORT": ("server", "port"),
    "WEBSRV_LOG_LEVEL": ("logging", "level"),
}


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def apply_env_overrides(config: dict, environ: dict[str, str] | None = None) -> dict:
    """WEBSRV_* 환경 변수로 설정 덮어쓰기 (원본은 수정하지 않음)."""
    if environ is None:
        environ = dict(os.environ)

    merged = {section: dict(values or {}) for section, values in config.items()}
    for env_key, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_key)
        if value:
            merged.setdefault(section, {})[key] = value

    if "port" in merged.get("server", {}):
        merged["server"]["port"] = int(merged["server"]["port"])

    return merged


def resolve_served_root(config: dict) -> str:
    """설정에서 served root 절대 경로."""
    root = config.get("fs", {}).get("root") or DEFAULT_FS_ROOT
    return os.path.abspath(os.path.expanduser(str(root)))


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, served root 결정 (이후 읽기 전용)
    """
    # Startup
    config = getattr(app.state, "config", None)
    if config is None:
        config = apply_env_overrides(load_config())
    app.state.config = config
    app.state.fs_root = resolve_served_root(config)

    logger.info(f"Serving {app.state.fs_root} under {FS_ROUTE_PREFIX}")

    yield


# =============================================================================
# App Factory
# =============================================================================


def create_app(config: dict | None = None) -> FastAPI:
    """
    FastAPI 앱 생성.

    Args:
        config: 설정 dict (None이면 시작 시 default.yaml + 환경 변수)
    """
    app = FastAPI(
        title="websrv-fs",
        description="Local filesystem browsing and file download over HTTP",
        version="0.1.0",
        lifespan=lifespan,
    )
    if config is not None:
        app.state.config = config

    @app.middleware("http")
    async def add_cors_header(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """모든 응답에 Access-Control-Allow-Origin: * (응답당 한 번)."""
        response = await call_next(request)
        response.headers[CORS_ALLOW_ORIGIN_HEADER] = "*"
        return response

    @app.exception_handler(FsError)
    async def fs_error_handler(request: Request, exc: FsError) -> JSONResponse:
        logger.error(f"Request failed: {request.url.path} {exc}")
        return JSONResponse(status_code=500, content={"detail": exc.to_dict()})

    # 파일시스템 라우트
    app.include_router(fs.router, prefix=FS_ROUTE_PREFIX, tags=["Filesystem"])

    @app.get("/")
    async def root() -> dict[str, Any]:
        """엔드포인트 안내."""
        return {
            "message": "websrv-fs",
            "endpoints": {
                "fs": f"{FS_ROUTE_PREFIX}/",
                "health": "/health",
            },
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        """헬스 체크."""
        return {"status": "ok"}

    return app


app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve a filesystem subtree over HTTP")
    parser.add_argument("--config", type=Path, default=None, help="YAML 설정 파일")
    parser.add_argument("--root", default=None, help="served root 디렉터리")
    parser.add_argument("--host", default=None, help=f"바인드 주소 (기본 {DEFAULT_HOST})")
    parser.add_argument("--port", type=int, default=None, help=f"포트 (기본 {DEFAULT_PORT})")
    parser.add_argument("--log-level", default=None, help="로그 레벨 (INFO, DEBUG, ...)")
    return parser


def main(argv: list[str] | None = None) -> None:
    import uvicorn
    from dotenv import load_dotenv

    load_dotenv()
    args = build_parser().parse_args(argv)

    config = apply_env_overrides(load_config(args.config))
    if args.root:
        config.setdefault("fs", {})["root"] = args.root
    if args.host:
        config.setdefault("server", {})["host"] = args.host
    if args.port:
        config.setdefault("server", {})["port"] = args.port
    if args.log_level:
        config.setdefault("logging", {})["level"] = args.log_level

    level = str(config.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    server = config.get("server", {})
    uvicorn.run(
        create_app(config),
        host=server.get("host", DEFAULT_HOST),
        port=int(server.get("port", DEFAULT_PORT)),
        log_level=level.lower(),
    )


if __name__ == "__main__":
    main()
