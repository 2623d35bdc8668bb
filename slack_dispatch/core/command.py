from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

TOKEN_DELIMITER = " "


@dataclass(frozen=True)
class Command:
    """
    一次 slash command 的结构化表示：verb + 参数。
    """

    verb: str
    raw_text: str
    arguments: Tuple[str, ...] = ()

    def argument(self, index: int) -> str | None:
        if index < len(self.arguments):
            return self.arguments[index]
        return None


def parse_command(text: str) -> Command:
    """
    按单个空格切分命令文本：第一个 token 为 verb，其余为参数。

    不做引号/转义/空白归一化处理；空文本得到 verb="" 且无参数，永不抛异常。
    """
    raw = text or ""
    tokens = raw.split(TOKEN_DELIMITER)
    return Command(verb=tokens[0], raw_text=raw, arguments=tuple(tokens[1:]))
