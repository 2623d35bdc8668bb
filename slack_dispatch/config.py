from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from slack_dispatch.core.errors import ConfigError

SLACK_APP_TOKEN_PREFIX = "xapp-"
SLACK_BOT_TOKEN_PREFIX = "xoxb-"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class Settings(BaseSettings):
    """
    全局配置，从环境变量 / .env 中读取，进程启动时构造一次，之后只读。
    """

    # GitHub 配置
    GITHUB_TOKEN: str
    REPO_OWNER: str
    REPO_NAME: str
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TIMEOUT_S: float = 20.0
    GITHUB_VERIFY_SSL: bool = True

    # 触发 workflow 时使用的固定分支
    DEFAULT_REF: str = "main"

    # Slack 应用配置
    SLACK_APP_TOKEN: str
    SLACK_BOT_TOKEN: str

    # 服务配置
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @field_validator("GITHUB_TOKEN", "REPO_OWNER", "REPO_NAME", "DEFAULT_REF")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be set")
        return value

    @field_validator("SLACK_APP_TOKEN")
    @classmethod
    def _app_token_prefix(cls, value: str) -> str:
        if not value.startswith(SLACK_APP_TOKEN_PREFIX):
            raise ValueError(f'must have the prefix "{SLACK_APP_TOKEN_PREFIX}"')
        return value

    @field_validator("SLACK_BOT_TOKEN")
    @classmethod
    def _bot_token_prefix(cls, value: str) -> str:
        if not value.startswith(SLACK_BOT_TOKEN_PREFIX):
            raise ValueError(f'must have the prefix "{SLACK_BOT_TOKEN_PREFIX}"')
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return level


def load_settings(**overrides: Any) -> Settings:
    """
    构造配置；校验失败时转换为 ConfigError，列出出错的字段。
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        problems = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err.get("loc", ())) or "settings"
            problems.append(f"{field}: {err.get('msg')}")
        raise ConfigError("Invalid configuration: " + "; ".join(problems)) from exc


@lru_cache
def get_settings() -> Settings:
    """
    获取全局单例配置实例。
    """
    return load_settings()
