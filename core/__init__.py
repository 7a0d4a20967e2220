# core/__init__.py
"""
core - VM 백업 커버리지 점검 엔진

아키텍처:
    core/
    ├── auth/           # 서비스 주체 토큰 발급
    ├── azure/          # ARM REST 클라이언트, 응답 스키마
    ├── inventory/      # VM 인벤토리 (페이지네이션, all-or-nothing)
    ├── protection/     # 제외 필터, 항목별 보호 상태 점검
    ├── parallel/       # 제한된 워커 풀 병렬 실행기
    ├── report/         # 집계, 텍스트 렌더링
    ├── engine.py       # 1회 점검 조립
    ├── config.py       # 중앙 설정 관리
    └── exceptions.py   # 통합 예외 계층

Usage:
    from core.config import CheckConfig, CheckRequest
    from core.engine import run_and_format

    config = CheckConfig.from_env()
    request = CheckRequest.from_params("11111111-2222-3333-4444-555555555555", "rg-sandbox")
    print(run_and_format(config, request), end="")
"""
