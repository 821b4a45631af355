"""应用配置管理"""

from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """应用配置类"""

    # 项目信息
    PROJECT_NAME: str = "travel-planner-api"
    PROJECT_VERSION: str = "1.2.0"

    # 服务器设置
    ENV: str = "development"
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    DEBUG: bool = True

    # AI 服务设置 (openai | gemini)
    AI_PROVIDER: str = "openai"
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = ""  # 兼容 OpenAI 协议的第三方服务地址，留空使用官方地址
    OPENAI_MODEL: str = "gpt-4o-mini"
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-flash"

    # 超时设置（秒）：行程生成与区域识别是两个独立的失败域
    PLAN_TIMEOUT_SECONDS: float = 30.0
    REGION_AI_TIMEOUT_SECONDS: float = 5.0
    ENABLE_AI_REGION_EXTRACTION: bool = True

    # 高德地图 Web 服务
    AMAP_API_KEY: str = ""
    AMAP_BASE_URL: str = "https://restapi.amap.com"
    AMAP_TIMEOUT_SECONDS: float = 10.0
    AMAP_PAGE_SIZE: int = 10

    # POI 搜索节流（秒）
    SEARCH_INTERVAL_SECONDS: float = 0.2
    SEARCH_STRATEGY_INTERVAL_SECONDS: float = 0.15
    RATE_LIMIT_BACKOFF_SECONDS: float = 0.5
    RATE_LIMIT_BACKOFF_MAX_SECONDS: float = 2.0

    # 请求限制
    MAX_PROMPT_LENGTH: int = 1000
    MAX_KEYWORDS: int = 15

    # CORS 设置
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:3001"

    @property
    def allowed_origins_list(self) -> List[str]:
        """把 ALLOWED_ORIGINS 字符串转换为列表"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    # 日志设置
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "allow"
    }


# 全局配置实例
settings = Settings()
