from __future__ import annotations

import unittest
from unittest.mock import AsyncMock, Mock, call

from slack_dispatch.core.errors import NotFoundError, ProviderError
from slack_dispatch.services.workflows import (
    Repository,
    WorkflowDescriptor,
    WorkflowDirectory,
    WorkflowTrigger,
    short_id_from_path,
)

REPO = Repository(owner="acme", name="widgets")


def workflow(name: str, path: str, wid: int = 1) -> dict:
    return {"id": wid, "name": name, "path": path, "state": "active"}


def listing(*items: dict, total: int | None = None) -> dict:
    return {"total_count": len(items) if total is None else total, "workflows": list(items)}


class TestShortId(unittest.TestCase):
    def test_examples(self) -> None:
        self.assertEqual(short_id_from_path(".github/workflows/trigger.yml"), "trigger")
        self.assertEqual(short_id_from_path("workflows/deploy-prod.yaml"), "deploy-prod")
        self.assertEqual(short_id_from_path("a/b/c.ext"), "c")

    def test_only_first_dot_segment_is_kept(self) -> None:
        self.assertEqual(short_id_from_path(".github/workflows/release.v2.yml"), "release")

    def test_path_without_slash_or_extension(self) -> None:
        self.assertEqual(short_id_from_path("build.yml"), "build")
        self.assertEqual(short_id_from_path(".github/workflows/build"), "build")

    def test_descriptor_derives_short_id(self) -> None:
        d = WorkflowDescriptor(display_name="Build", provider_path=".github/workflows/build.yml")
        self.assertEqual(d.short_id, "build")
        self.assertEqual(d.render(), "Build(build)")


class TestWorkflowDirectory(unittest.IsolatedAsyncioTestCase):
    async def test_lists_descriptors_in_provider_order(self) -> None:
        actions = Mock()
        actions.list_workflows_page = AsyncMock(
            return_value=listing(
                workflow("Deploy", ".github/workflows/deploy.yml", 2),
                workflow("Build", ".github/workflows/build.yml", 1),
            )
        )

        out = await WorkflowDirectory(actions).list_workflows(REPO)

        actions.list_workflows_page.assert_awaited_once_with("acme", "widgets", page=1, per_page=100)
        self.assertEqual([d.short_id for d in out], ["deploy", "build"])
        self.assertEqual(out[0].display_name, "Deploy")
        self.assertEqual(out[0].workflow_id, 2)

    async def test_follows_pagination(self) -> None:
        actions = Mock()
        actions.list_workflows_page = AsyncMock(
            side_effect=[
                listing(workflow("A", "w/a.yml"), total=3),
                listing(workflow("B", "w/b.yml"), workflow("C", "w/c.yml"), total=3),
            ]
        )

        out = await WorkflowDirectory(actions).list_workflows(REPO)

        self.assertEqual([d.short_id for d in out], ["a", "b", "c"])
        self.assertEqual(
            actions.list_workflows_page.await_args_list,
            [
                call("acme", "widgets", page=1, per_page=100),
                call("acme", "widgets", page=2, per_page=100),
            ],
        )

    async def test_stops_on_empty_page(self) -> None:
        actions = Mock()
        actions.list_workflows_page = AsyncMock(
            side_effect=[listing(workflow("A", "w/a.yml"), total=5), listing(total=5)]
        )

        out = await WorkflowDirectory(actions).list_workflows(REPO)

        self.assertEqual([d.short_id for d in out], ["a"])
        self.assertEqual(actions.list_workflows_page.await_count, 2)

    async def test_listing_failure_propagates(self) -> None:
        actions = Mock()
        actions.list_workflows_page = AsyncMock(side_effect=ProviderError("boom"))

        with self.assertRaises(ProviderError):
            await WorkflowDirectory(actions).list_workflows(REPO)

    async def test_workflow_without_path_is_provider_error(self) -> None:
        actions = Mock()
        actions.list_workflows_page = AsyncMock(return_value=listing({"id": 1, "name": "X"}))

        with self.assertRaises(ProviderError):
            await WorkflowDirectory(actions).list_workflows(REPO)

    async def test_find(self) -> None:
        actions = Mock()
        actions.list_workflows_page = AsyncMock(
            return_value=listing(workflow("Build", ".github/workflows/build.yml"))
        )
        directory = WorkflowDirectory(actions)

        found = await directory.find(REPO, "build")
        missing = await directory.find(REPO, "deploy")

        self.assertEqual(found.display_name, "Build")
        self.assertIsNone(missing)
        # 每次调用都重新拉取
        self.assertEqual(actions.list_workflows_page.await_count, 2)


class TestWorkflowTrigger(unittest.IsolatedAsyncioTestCase):
    def make_trigger(self, payload) -> tuple:
        actions = Mock()
        if isinstance(payload, Exception):
            actions.list_workflows_page = AsyncMock(side_effect=payload)
        else:
            actions.list_workflows_page = AsyncMock(return_value=payload)
        actions.create_dispatch_event = AsyncMock()
        trigger = WorkflowTrigger(
            directory=WorkflowDirectory(actions), actions=actions, target_ref="main"
        )
        return trigger, actions

    async def test_unknown_workflow_is_not_dispatched(self) -> None:
        trigger, actions = self.make_trigger(
            listing(workflow("Build", ".github/workflows/build.yml"))
        )

        with self.assertRaises(NotFoundError) as ctx:
            await trigger.trigger(REPO, "deploy")

        self.assertEqual(ctx.exception.message, "workflow not found")
        actions.create_dispatch_event.assert_not_called()

    async def test_known_workflow_is_dispatched_once(self) -> None:
        trigger, actions = self.make_trigger(
            listing(
                workflow("Build", ".github/workflows/build.yml"),
                workflow("Deploy", ".github/workflows/deploy.yaml"),
            )
        )

        request = await trigger.trigger(REPO, "deploy")

        actions.create_dispatch_event.assert_awaited_once_with(
            "acme", "widgets", workflow_file="deploy.yml", ref="main"
        )
        self.assertEqual(request.workflow_short_id, "deploy")
        self.assertEqual(request.target_ref, "main")
        self.assertEqual(request.file_name, "deploy.yml")

    async def test_listing_failure_skips_dispatch(self) -> None:
        trigger, actions = self.make_trigger(ProviderError("rate limited", status_code=403))

        with self.assertRaises(ProviderError):
            await trigger.trigger(REPO, "build")

        actions.create_dispatch_event.assert_not_called()

    async def test_dispatch_failure_propagates(self) -> None:
        trigger, actions = self.make_trigger(
            listing(workflow("Build", ".github/workflows/build.yml"))
        )
        actions.create_dispatch_event.side_effect = ProviderError("No ref found for: main")

        with self.assertRaises(ProviderError) as ctx:
            await trigger.trigger(REPO, "build")
        self.assertEqual(ctx.exception.message, "No ref found for: main")


if __name__ == "__main__":
    unittest.main()
