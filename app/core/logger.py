# app/core/logger.py
from loguru import logger
import sys
import os

from app.config import settings

# 로그 디렉토리 생성
LOG_DIR = settings.log_dir
os.makedirs(LOG_DIR, exist_ok=True)

# 기본 로거 제거
logger.remove()

# 요청 ID가 바인딩되지 않은 로그용 기본값
logger.configure(extra={"request_id": "-"})

# 콘솔 출력 (개발용)
logger.add(
    sys.stdout,
    colorize=True,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <magenta>{extra[request_id]}</magenta> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    level="INFO"
)

# 파일 출력 (모든 로그)
logger.add(
    f"{LOG_DIR}/ad_manager.log",
    rotation="10 MB",  # 10MB마다 새 파일
    retention="30 days",  # 30일 보관
    compression="zip",  # 압축
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[request_id]} | {name}:{function}:{line} - {message}",
    level="DEBUG"
)

# 에러 전용 파일
logger.add(
    f"{LOG_DIR}/error.log",
    rotation="10 MB",
    retention="30 days",
    compression="zip",
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[request_id]} | {name}:{function}:{line} - {message}",
    level="ERROR"
)
