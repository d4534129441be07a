"""将流式响应事件转发给调用方回调."""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import ValidationError

from config.logging_config import get_logger
from models.models import ChatCompletionChunk

logger = get_logger(__name__)

# 模型有时会在输出开头带上与输入对应的引号
LEADING_QUOTES = ("“", '"', "「")


@dataclass(frozen=True)
class Message:
    """一段增量输出."""

    content: str
    role: Optional[str] = None


async def invoke_callback(callback: Callable[[Any], Any], arg: Any) -> None:
    """调用回调，支持同步函数和协程函数."""
    result = callback(arg)
    if inspect.isawaitable(result):
        await result


class StreamRelay:
    """单次请求的事件转发器."""

    def __init__(
        self,
        on_message: Callable[[Message], Any],
        on_finish: Callable[[str], Any],
    ):
        self.on_message = on_message
        self.on_finish = on_finish
        self.is_first = True
        self.finished = False

    async def feed(self, data: str) -> bool:
        """
        处理一个事件的data内容.

        Args:
            data: 事件data字符串

        Returns:
            是否继续读取后续事件
        """
        try:
            chunk = ChatCompletionChunk.model_validate_json(data)
        except ValidationError:
            # 包括结束标记[DONE]
            await self._finish("stop")
            return False

        if not chunk.choices:
            logger.debug(f"Ignoring event without choices: {data}")
            return True

        choice = chunk.choices[0]
        if choice.finish_reason:
            await self._finish(choice.finish_reason)
            return False

        delta = choice.delta
        content = (delta.content if delta else None) or ""
        role = delta.role if delta else None

        if self.is_first and content and content[0] in LEADING_QUOTES:
            content = content[1:]
        if not role:
            self.is_first = False

        await invoke_callback(self.on_message, Message(content=content, role=role))
        return True

    async def _finish(self, reason: str) -> None:
        self.finished = True
        await invoke_callback(self.on_finish, reason)
