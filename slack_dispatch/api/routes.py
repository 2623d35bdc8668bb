from __future__ import annotations

import logging
from typing import Dict, Literal
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ValidationError

from slack_dispatch.core.dispatcher import CommandDispatcher
from slack_dispatch.core.errors import ParseError

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_BODY_BYTES = 1048576
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class SlashCommand(BaseModel):
    """
    Slack slash command 回调的表单字段（只有 text 参与命令解析）。
    """

    token: str = ""
    team_id: str = ""
    team_domain: str = ""
    enterprise_id: str = ""
    enterprise_name: str = ""
    channel_id: str = ""
    channel_name: str = ""
    user_id: str = ""
    user_name: str = ""
    command: str = ""
    text: str = ""
    response_url: str = ""
    trigger_id: str = ""
    api_app_id: str = ""


class SlackResponse(BaseModel):
    text: str
    response_type: Literal["ephemeral", "in_channel"] = "ephemeral"


async def read_slash_command(request: Request) -> SlashCommand:
    """
    解码表单请求体，限制大小为 1 MiB；任何解码失败都抛出 ParseError。
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type and not content_type.startswith(FORM_CONTENT_TYPE):
        raise ParseError(f"Unsupported content type: {content_type}", status_code=415)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > MAX_BODY_BYTES:
            raise ParseError("Request body too large", status_code=413)

    try:
        fields = dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True))
        return SlashCommand.model_validate(fields)
    except (UnicodeDecodeError, ValueError, ValidationError) as exc:
        raise ParseError(f"Malformed slash command payload: {exc}") from exc


def get_dispatcher(request: Request) -> CommandDispatcher:
    return request.app.state.dispatcher


@router.get("/", summary="简单连通性测试", response_class=PlainTextResponse)
async def hello() -> str:
    return "Hello, World!"


@router.get("/health", summary="健康检查")
async def health_check() -> Dict[str, str]:
    return {"status": "ok"}


@router.post("/trigger", summary="Slack slash command 入口", response_model=SlackResponse)
async def slash_command(
    request: Request,
    dispatcher: CommandDispatcher = Depends(get_dispatcher),
) -> SlackResponse:
    try:
        slash = await read_slash_command(request)
    except ParseError as exc:
        logger.error("Error parsing request: %s", exc.message)
        raise HTTPException(
            status_code=exc.status_code, detail="Please provide valid request"
        ) from exc

    logger.info(
        "Slash command: command=%s text=%r user=%s channel=%s",
        slash.command,
        slash.text,
        slash.user_name or slash.user_id,
        slash.channel_id,
    )
    text = await dispatcher.handle_text(slash.text)
    return SlackResponse(text=text)
