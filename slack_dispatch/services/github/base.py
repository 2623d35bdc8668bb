"""
GitHub API 基础客户端

提供鉴权头注入和 HTTP 请求封装，供所有子客户端共享
"""
from __future__ import annotations

import logging
from json import JSONDecodeError
from typing import Any, Dict, Optional

import httpx

from slack_dispatch.config import Settings
from slack_dispatch.core.errors import ProviderError

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


def mask_token(token: str) -> str:
    # Token 打码显示（前4后4）
    return f"{token[:4]}...{token[-4:]}" if len(token) > 8 else "***"


class GitHubBaseClient:
    """
    GitHub REST API 基础客户端

    负责：
    - Bearer Token 注入
    - HTTP 请求封装（带日志、错误处理）
    - 所有失败（网络、鉴权、限流、非 JSON 响应）统一折叠为 ProviderError
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.GITHUB_API_URL,
            timeout=settings.GITHUB_TIMEOUT_S,
            verify=settings.GITHUB_VERIFY_SSL,
            transport=transport,
            headers={
                "Authorization": f"Bearer {settings.GITHUB_TOKEN}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        发送 HTTP 请求到 GitHub API

        成功时返回解析后的 JSON；204 等无响应体的情况返回 None。
        """
        logger.info(
            "GitHub API Request: %s %s params=%s token=%s",
            method,
            path,
            params,
            mask_token(self.settings.GITHUB_TOKEN),
        )

        try:
            resp = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.error("GitHub API transport error: %s %s -> %s", method, path, exc)
            raise ProviderError(f"GitHub API request failed: {exc}") from exc

        logger.info(
            "GitHub API Response: %s %s -> status=%s",
            method,
            path,
            resp.status_code,
        )

        if resp.status_code >= 400:
            detail = self._error_detail(resp)
            logger.error(
                "GitHub API error: %s %s -> status=%s, detail=%s",
                method,
                path,
                resp.status_code,
                detail,
            )
            raise ProviderError(
                f"GitHub API error: {method} {path}: {resp.status_code} {detail}",
                status_code=resp.status_code,
            )

        if not resp.content:
            return None

        try:
            data = resp.json()
        except JSONDecodeError as exc:
            logger.error(
                "GitHub API non-JSON response: %s %s -> status=%s, body=%s",
                method,
                path,
                resp.status_code,
                resp.text[:200],
            )
            raise ProviderError(
                f"GitHub API returned non-JSON response. Status: {resp.status_code}",
                status_code=resp.status_code,
            ) from exc

        if not isinstance(data, dict):
            raise ProviderError(
                f"GitHub API returned unexpected payload type: {type(data).__name__}",
                status_code=resp.status_code,
            )
        return data

    @staticmethod
    def _error_detail(resp: httpx.Response) -> str:
        # GitHub 的错误体一般形如 {"message": "...", "documentation_url": "..."}
        try:
            data = resp.json()
        except JSONDecodeError:
            return resp.text[:200]
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return str(data)[:200]
