"""
服务配置
从环境变量或 .env 文件加载配置
"""

import os
from pathlib import Path

from dotenv import load_dotenv

env_file = Path(".env")
if env_file.exists():
    load_dotenv(env_file)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    def __init__(self) -> None:
        # 服务器配置
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", "8090"))
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

        # 数据库配置 - 支持测试环境覆盖
        self._database_url = os.getenv("DATABASE_URL", "sqlite:///./enginehub.db")
        self.db_echo = _env_flag("DB_ECHO")

        self.environment = os.getenv("ENVIRONMENT", "development")

        # 引擎注册中心行为
        # ENGINE_STRICT_DISABLE: 禁用引擎时是否像卸载一样检查依赖方（默认不检查，不级联）
        self.engine_strict_disable = _env_flag("ENGINE_STRICT_DISABLE")
        # ENGINE_CONFLICT_RETRIES: enable_with_dependencies 遇到并发冲突时整体重试次数
        self.engine_conflict_retries = int(os.getenv("ENGINE_CONFLICT_RETRIES", "0"))

        self._validate_registry_config()

    def _validate_registry_config(self) -> None:
        if self.engine_conflict_retries < 0:
            raise ValueError(
                f"ENGINE_CONFLICT_RETRIES must be >= 0, got {self.engine_conflict_retries}"
            )

    @property
    def database_url(self) -> str:
        """数据库 URL"""
        return self._database_url

    @database_url.setter
    def database_url(self, value: str):
        """允许在测试中设置数据库 URL"""
        self._database_url = value

    def log_startup_warnings(self) -> None:
        """
        记录启动时的配置警告
        这个方法应该在 logger 初始化后调用
        """
        from enginehub.core.logger import logger

        if self.environment == "production" and self._database_url.startswith("sqlite"):
            logger.warning("SQLite database configured in production, use PostgreSQL instead")
        if self.engine_strict_disable:
            logger.info("Strict disable enabled: disabling a required engine will be rejected")

    def __repr__(self):
        """配置信息字符串表示"""
        return f"""
Configuration:
  Server: {self.host}:{self.port}
  Log Level: {self.log_level}
  Environment: {self.environment}
  Strict Disable: {self.engine_strict_disable}
  Conflict Retries: {self.engine_conflict_retries}
"""


# 创建全局配置实例
config = Config()
