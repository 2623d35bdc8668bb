"""
GitHub Actions API 客户端
"""
from __future__ import annotations

import logging
from typing import Any, Dict, TYPE_CHECKING

from slack_dispatch.core.errors import ProviderError

if TYPE_CHECKING:
    from slack_dispatch.services.github.base import GitHubBaseClient

logger = logging.getLogger(__name__)


class GitHubActionsClient:
    """
    GitHub Actions API 封装

    提供 workflow 相关操作：
    - 分页列出仓库的 workflow
    - 按文件名创建 workflow_dispatch 事件
    """

    def __init__(self, base: "GitHubBaseClient") -> None:
        self._base = base

    async def list_workflows_page(
        self,
        owner: str,
        repo: str,
        *,
        page: int = 1,
        per_page: int = 100,
    ) -> Dict[str, Any]:
        """
        获取一页 workflow 列表

        API: GET /repos/{owner}/{repo}/actions/workflows

        Returns:
            dict: {"total_count": int, "workflows": [{"id", "name", "path", "state", ...}]}
        """
        data = await self._base.request(
            "GET",
            f"/repos/{owner}/{repo}/actions/workflows",
            params={"per_page": per_page, "page": page},
        )
        if not data or not isinstance(data.get("workflows"), list):
            raise ProviderError("GitHub API returned a malformed workflow listing")
        return data

    async def create_dispatch_event(
        self,
        owner: str,
        repo: str,
        *,
        workflow_file: str,
        ref: str,
    ) -> None:
        """
        按 workflow 文件名触发一次运行

        API: POST /repos/{owner}/{repo}/actions/workflows/{workflow_file}/dispatches
        """
        await self._base.request(
            "POST",
            f"/repos/{owner}/{repo}/actions/workflows/{workflow_file}/dispatches",
            json={"ref": ref},
        )
        logger.info(
            "create_dispatch_event succeeded: repo=%s/%s, workflow=%s, ref=%s",
            owner,
            repo,
            workflow_file,
            ref,
        )
