"""
App layer: HTTP 서버 (FastAPI).

역할:
- /fs 라우트, 응답 생성 (services/responders)
- 설정 로드, CORS 헤더, 헬스 체크
- ⚠️ 스트리밍/경로 처리 로직은 core에 위임
"""
