"""
Workflow 层

- directory: 列出仓库 workflow，并把定义文件路径映射为短 id
- trigger: 校验 workflow 存在后发起 dispatch
"""
from __future__ import annotations

from slack_dispatch.services.workflows.directory import (
    Repository,
    WorkflowDescriptor,
    WorkflowDirectory,
    short_id_from_path,
)
from slack_dispatch.services.workflows.trigger import DispatchRequest, WorkflowTrigger

__all__ = [
    "DispatchRequest",
    "Repository",
    "WorkflowDescriptor",
    "WorkflowDirectory",
    "WorkflowTrigger",
    "short_id_from_path",
]
