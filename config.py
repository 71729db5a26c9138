from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List
import logging


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    cors_allow_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()


def setup_logging(log_level: str = "INFO") -> None:
    """
    設定全域 logging

    只需在程式進入點呼叫一次，各模組使用 logging.getLogger(__name__) 即可

    參數：
        log_level: 日誌等級名稱（DEBUG / INFO / WARNING ...）
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
