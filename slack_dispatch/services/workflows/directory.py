from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from slack_dispatch.core.errors import ProviderError
from slack_dispatch.services.github.actions import GitHubActionsClient

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


@dataclass(frozen=True)
class Repository:
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


def short_id_from_path(path: str) -> str:
    """
    由 workflow 定义文件路径推导短 id：取最后一个 "/" 之后的部分，再取第一个 "." 之前的部分。

    例如 .github/workflows/trigger.yml -> trigger。
    这是用户输入与真实 workflow 匹配的唯一依据，规则必须保持精确。
    """
    return path.split("/")[-1].split(".")[0]


@dataclass(frozen=True)
class WorkflowDescriptor:
    display_name: str
    provider_path: str
    short_id: str = field(init=False)
    workflow_id: Optional[int] = None
    state: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "short_id", short_id_from_path(self.provider_path))

    def render(self) -> str:
        return f"{self.display_name}({self.short_id})"

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "WorkflowDescriptor":
        path = item.get("path")
        if not isinstance(path, str):
            raise ProviderError(f"GitHub API returned a workflow without a path: {item}")
        return cls(
            display_name=str(item.get("name") or ""),
            provider_path=path,
            workflow_id=item.get("id"),
            state=item.get("state"),
        )


class WorkflowDirectory:
    """
    查询仓库中定义的 workflow 集合。

    每次调用都重新拉取，不做跨请求缓存；拉取失败直接抛出 ProviderError。
    """

    def __init__(self, actions: GitHubActionsClient) -> None:
        self._actions = actions

    async def list_workflows(self, repository: Repository) -> List[WorkflowDescriptor]:
        descriptors: List[WorkflowDescriptor] = []
        page = 1
        while True:
            data = await self._actions.list_workflows_page(
                repository.owner, repository.name, page=page, per_page=PAGE_SIZE
            )
            items = data["workflows"]
            descriptors.extend(WorkflowDescriptor.from_api(item) for item in items)

            total = data.get("total_count")
            if not items or not isinstance(total, int) or len(descriptors) >= total:
                break
            page += 1

        logger.info(
            "Listed workflows for %s: %s",
            repository.full_name,
            [d.short_id for d in descriptors],
        )
        return descriptors

    async def find(
        self, repository: Repository, short_id: str
    ) -> Optional[WorkflowDescriptor]:
        for descriptor in await self.list_workflows(repository):
            if descriptor.short_id == short_id:
                return descriptor
        return None
