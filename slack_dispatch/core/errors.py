"""
中继服务异常定义

所有面向用户的失败都归一为 RelayError 的子类，由 CommandDispatcher 统一转换成回复文本。
"""
from __future__ import annotations

from typing import Optional


class RelayError(Exception):
    """
    统一的中继异常基类，message 即展示给最终用户的文本。
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParseError(RelayError):
    """
    入站 webhook 请求体无法解码（格式错误或超过大小上限）。
    """

    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(RelayError):
    """
    请求的 workflow 不在当前仓库的 workflow 列表中。
    """


class ProviderError(RelayError):
    """
    调用 GitHub API 失败（网络、鉴权、限流、响应格式异常统一归为此类）。
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigError(RelayError):
    """
    启动配置缺失或不合法。
    """
