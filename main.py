"""
main.py — Exam Simulator API 서버 진입점

HOST / PORT 환경변수(config)로 주소를 정하고 uvicorn 을 포그라운드로 실행한다.
"""

import os
import sys
import logging

# ── 패키지 경로 설정 (반드시 최상단) ──────────────────────────────────────────
_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

from config import BASE_DIR, LOG_FILE, DEFAULT_HOST, DEFAULT_PORT

# ── 로깅 설정 ────────────────────────────────────────────────────────────────
try:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(LOG_FILE, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )
except PermissionError:
    # 로그 파일 점유 시 콘솔 출력만 사용
    logging.basicConfig(level=logging.INFO)

logger = logging.getLogger(__name__)


# ── 메인 실행 ────────────────────────────────────────────────────────────────

def main() -> None:
    import uvicorn
    from api.app import create_app

    logger.info("=== Exam Simulator Started ===")
    os.chdir(BASE_DIR)

    app = create_app()
    logger.info(f"API 서버: http://{DEFAULT_HOST}:{DEFAULT_PORT}/api/state")
    try:
        uvicorn.run(app, host=DEFAULT_HOST, port=DEFAULT_PORT, log_level="info")
    except KeyboardInterrupt:
        logger.info("사용자에 의해 종료되었습니다.")


if __name__ == "__main__":
    main()
