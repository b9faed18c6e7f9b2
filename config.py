import os

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
DATA_DIR = os.getenv("EXAM_SIM_DATA_DIR", os.path.join(BASE_DIR, "data"))
EXAMS_DIR_NAME = "exams"
HISTORY_FILE_NAME = "history.json"
SESSIONS_FILE_NAME = "sessions.json"
LOG_FILE = os.path.join(BASE_DIR, "launch.log")

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))

# 시험 설정
DEFAULT_PASS_SCORE = float(os.getenv("EXAM_SIM_PASS_SCORE", "70"))
TIMER_INTERVAL = 1.0        # 타이머 틱 간격 (초)
DEMO_EXAM_FILENAME = "demo-exam"   # 삭제 불가 데모 시험
