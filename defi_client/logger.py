import logging
import sys
import os
from datetime import datetime
from config.config import config

# 모든 모듈 로거는 이 네임스페이스 아래에 둔다
ROOT_LOGGER_NAME = 'defi_client'


def _namespaced(name: str) -> str:
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + '.'):
        return name
    return f'{ROOT_LOGGER_NAME}.{name}'


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    # 핸들러는 최상위 로거에만 한 번 붙인다
    if root.handlers:
        return root

    # 로그 디렉토리 생성
    os.makedirs(config.log_dir, exist_ok=True)

    # 콘솔 핸들러
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)

    # 파일 핸들러
    file_handler = logging.FileHandler(
        os.path.join(config.log_dir, f'defi_client_{datetime.now().strftime("%Y%m%d")}.log')
    )
    file_handler.setLevel(logging.DEBUG)

    # 포매터
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)
    file_handler.setFormatter(formatter)

    root.addHandler(console_handler)
    root.addHandler(file_handler)

    return root


def setup_logger(name: str) -> logging.Logger:
    """로거 설정: ``defi_client.<name>`` 로거를 반환, 출력은 상위 로거로 전파"""
    _configure_root()
    return logging.getLogger(_namespaced(name))
