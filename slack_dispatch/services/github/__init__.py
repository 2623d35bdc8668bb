"""
GitHub API 客户端模块

按领域划分：
- actions: workflow 列表与触发
"""
from __future__ import annotations

from typing import Optional

import httpx

from slack_dispatch.config import Settings
from slack_dispatch.services.github.actions import GitHubActionsClient
from slack_dispatch.services.github.base import GitHubBaseClient


class GitHubClient:
    """
    GitHub API 统一入口客户端

    组合各子客户端（共享 base 的鉴权与 http 能力）：
    - github.actions.xxx - Actions 相关操作
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base = GitHubBaseClient(settings, transport=transport)
        self.actions = GitHubActionsClient(self._base)

    async def aclose(self) -> None:
        await self._base.aclose()


__all__ = [
    "GitHubClient",
    "GitHubActionsClient",
    "GitHubBaseClient",
]
