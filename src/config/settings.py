"""应用配置管理模块."""

import random

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MissingAPIKeyError(RuntimeError):
    """未配置API Key."""


class Settings(BaseSettings):
    """应用配置类."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    openai_api_url: str = Field(default="https://api.openai.com")
    # 多个Key使用英文逗号分隔
    openai_api_keys: str = Field(default="")
    openai_model: str = Field(default="gpt-3.5-turbo")
    request_timeout: int = Field(default=60, ge=1, le=600)
    log_level: str = Field(default="INFO")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=18000)

    @property
    def api_keys(self):
        """解析后的API Key列表."""
        return [k.strip() for k in self.openai_api_keys.split(",") if k.strip()]


def get_api_key(current: Settings) -> str:
    """
    从配置中随机选择一个API Key.

    Args:
        current: 当前配置

    Returns:
        API Key

    Raises:
        MissingAPIKeyError: 没有配置任何API Key
    """
    keys = current.api_keys
    if not keys:
        raise MissingAPIKeyError("No API key configured, set OPENAI_API_KEYS")
    return random.choice(keys)


settings = Settings()
