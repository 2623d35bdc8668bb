from __future__ import annotations

import logging
from textwrap import dedent
from typing import Awaitable, Callable, Dict, List

from slack_dispatch.core.command import Command, parse_command
from slack_dispatch.core.errors import RelayError
from slack_dispatch.services.workflows.directory import (
    Repository,
    WorkflowDescriptor,
    WorkflowDirectory,
)
from slack_dispatch.services.workflows.trigger import WorkflowTrigger

logger = logging.getLogger(__name__)

HELP_TEXT = dedent(
    """\
    Available commands:
    • help - show this message
    • list - list the workflows defined in the repository as Name(id)
    • trigger <id> - run the workflow with the given id on the default branch"""
)
TRIGGER_USAGE = "Usage: trigger <workflow>"
TRIGGER_SUCCESS = "Workflow Triggered Successfully"
INVALID_COMMAND = "Invalid Command..."
EMPTY_LISTING = "No workflows found"


def render_listing(descriptors: List[WorkflowDescriptor]) -> str:
    if not descriptors:
        return EMPTY_LISTING
    return "".join(f"{d.render()}, " for d in descriptors)


class CommandDispatcher:
    """
    根据 verb 选择动作（help / trigger / list / 其他），返回一段回复文本。

    不在请求之间保存任何状态；协作方抛出的 RelayError 在这里统一转换为用户可见文本，不向外传播。
    """

    def __init__(
        self,
        *,
        repository: Repository,
        directory: WorkflowDirectory,
        trigger: WorkflowTrigger,
    ) -> None:
        self._repository = repository
        self._directory = directory
        self._trigger = trigger
        self._handlers: Dict[str, Callable[[Command], Awaitable[str]]] = {
            "help": self._help,
            "trigger": self._trigger_workflow,
            "list": self._list_workflows,
        }

    async def handle_text(self, text: str) -> str:
        return await self.dispatch(parse_command(text))

    async def dispatch(self, command: Command) -> str:
        handler = self._handlers.get(command.verb)
        if handler is None:
            logger.info("Invalid command: verb=%r", command.verb)
            return INVALID_COMMAND
        try:
            return await handler(command)
        except RelayError as exc:
            return self.describe_error(exc)

    @staticmethod
    def describe_error(exc: RelayError) -> str:
        return exc.message

    async def _help(self, command: Command) -> str:
        _ = command
        return HELP_TEXT

    async def _trigger_workflow(self, command: Command) -> str:
        short_id = command.argument(0)
        if short_id is None:
            return TRIGGER_USAGE

        logger.info(
            "Trigger command, triggering workflow %s for %s",
            short_id,
            self._repository.full_name,
        )
        await self._trigger.trigger(self._repository, short_id)
        return TRIGGER_SUCCESS

    async def _list_workflows(self, command: Command) -> str:
        _ = command
        logger.info("List command, retrieving workflows for %s", self._repository.full_name)
        descriptors = await self._directory.list_workflows(self._repository)
        return render_listing(descriptors)
