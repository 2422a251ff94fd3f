#!/usr/bin/env python
"""
서버 연결 확인 스크립트.

실행 중인 서버에 /health 요청 후, 디렉터리 하나를 JSON 목록으로 조회.

실행:
    uv run python scripts/check_server.py
    uv run python scripts/check_server.py --url http://127.0.0.1:8080 --path /tmp
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

# .env 파일 로드
from dotenv import load_dotenv
load_dotenv()

import httpx

from src.client.api_client import DEFAULT_BASE_URL, ApiClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def check_health(base_url: str) -> bool:
    """GET /health."""
    try:
        response = httpx.get(f"{base_url}/health", timeout=5.0)
    except httpx.HTTPError as e:
        logger.error(f"서버 연결 실패: {type(e).__name__}: {e}")
        return False

    if response.status_code != 200:
        logger.error(f"/health 응답 코드: {response.status_code}")
        return False

    cors = response.headers.get("access-control-allow-origin")
    logger.info(f"✅ /health OK (Access-Control-Allow-Origin: {cors})")
    return True


def check_listing(base_url: str, path: str) -> bool:
    """GET /fs<path>/?fmt=json."""
    with ApiClient(base_url) as client:
        entries = client.fs_list_dir(path)

    if entries is None:
        logger.error(f"❌ 목록 조회 실패: {path}")
        return False

    logger.info(f"✅ {path}: {len(entries)}개 항목")
    for entry in entries[:20]:
        print(f"  {entry.mode} {entry.name}")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="websrv-fs 연결 확인")
    parser.add_argument("--url", default=os.environ.get("WEBSRV_URL", DEFAULT_BASE_URL))
    parser.add_argument("--path", default="/")
    args = parser.parse_args()

    if not check_health(args.url):
        return 1
    if not check_listing(args.url, args.path):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
