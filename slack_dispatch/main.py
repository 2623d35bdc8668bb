import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from slack_dispatch.api.routes import router
from slack_dispatch.config import Settings, get_settings
from slack_dispatch.core.dispatcher import CommandDispatcher
from slack_dispatch.core.errors import ConfigError
from slack_dispatch.services.github import GitHubClient
from slack_dispatch.services.workflows import Repository, WorkflowDirectory, WorkflowTrigger

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def build_dispatcher(settings: Settings, github: GitHubClient) -> CommandDispatcher:
    """
    按配置组装 Directory / Trigger / Dispatcher，所有组件共享同一份只读配置。
    """
    directory = WorkflowDirectory(github.actions)
    trigger = WorkflowTrigger(
        directory=directory,
        actions=github.actions,
        target_ref=settings.DEFAULT_REF,
    )
    return CommandDispatcher(
        repository=Repository(owner=settings.REPO_OWNER, name=settings.REPO_NAME),
        directory=directory,
        trigger=trigger,
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    github_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    创建 FastAPI 应用，并挂载路由与全局依赖。
    """
    settings = settings or get_settings()
    github = GitHubClient(settings, transport=github_transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Relaying slash commands to %s/%s (ref=%s)",
            settings.REPO_OWNER,
            settings.REPO_NAME,
            settings.DEFAULT_REF,
        )
        yield
        await github.aclose()

    app = FastAPI(
        title="Slack Workflow Dispatch",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.dispatcher = build_dispatcher(settings, github)
    app.include_router(router)
    return app


def run() -> None:
    load_dotenv()
    try:
        settings = get_settings()
    except ConfigError as exc:
        configure_logging()
        logger.error("%s", exc.message)
        sys.exit(1)

    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
