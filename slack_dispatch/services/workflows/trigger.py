from __future__ import annotations

import logging
from dataclasses import dataclass

from slack_dispatch.core.errors import NotFoundError
from slack_dispatch.services.github.actions import GitHubActionsClient
from slack_dispatch.services.workflows.directory import Repository, WorkflowDirectory

logger = logging.getLogger(__name__)

WORKFLOW_FILE_SUFFIX = ".yml"


@dataclass(frozen=True)
class DispatchRequest:
    workflow_short_id: str
    target_ref: str

    @property
    def file_name(self) -> str:
        return self.workflow_short_id + WORKFLOW_FILE_SUFFIX


class WorkflowTrigger:
    """
    先确认 workflow 存在，再发起 workflow_dispatch 事件。

    GitHub 的 dispatch 接口对未知文件只返回笼统错误，因此先查列表给出明确的 "workflow not found"。
    检查与触发之间 workflow 被删除的情况不做特殊处理，由 GitHub 的错误直接透出。
    """

    def __init__(
        self,
        *,
        directory: WorkflowDirectory,
        actions: GitHubActionsClient,
        target_ref: str,
    ) -> None:
        self._directory = directory
        self._actions = actions
        self._target_ref = target_ref

    async def trigger(self, repository: Repository, short_id: str) -> DispatchRequest:
        descriptor = await self._directory.find(repository, short_id)
        if descriptor is None:
            logger.error("Workflow not found: repo=%s, workflow=%s", repository.full_name, short_id)
            raise NotFoundError("workflow not found")

        request = DispatchRequest(workflow_short_id=descriptor.short_id, target_ref=self._target_ref)
        logger.info(
            "Triggering workflow: repo=%s, file=%s, ref=%s",
            repository.full_name,
            request.file_name,
            request.target_ref,
        )
        await self._actions.create_dispatch_event(
            repository.owner,
            repository.name,
            workflow_file=request.file_name,
            ref=request.target_ref,
        )
        return request
