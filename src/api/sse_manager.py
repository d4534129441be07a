"""SSE管理器，用于向客户端推送翻译结果."""

import asyncio
import json
from typing import Any, AsyncGenerator, Dict, Optional

from models.models import SSEMessageType


class SSEManager:
    """SSE管理器类."""

    def __init__(self):
        self.clients = {}  # 存储客户端连接

    async def send_message(
        self, task_id: str, content: str, role: Optional[str] = None
    ) -> None:
        """发送增量译文."""
        message_data = {"type": SSEMessageType.MESSAGE, "content": content}
        if role:
            message_data["role"] = role
        await self._send_sse_message(task_id, message_data)

    async def send_finish(self, task_id: str, reason: str) -> None:
        """发送完成消息."""
        message_data = {"type": SSEMessageType.FINISH, "reason": reason}
        await self._send_sse_message(task_id, message_data, terminal=True)

    async def send_error(self, task_id: str, message: str) -> None:
        """发送错误消息."""
        message_data = {"type": SSEMessageType.ERROR, "message": message}
        await self._send_sse_message(task_id, message_data, terminal=True)

    async def _send_sse_message(
        self, task_id: str, message_data: Dict[str, Any], terminal: bool = False
    ) -> None:
        """发送SSE消息，terminal为True时客户端流在该消息后结束."""
        if task_id in self.clients:
            queue = self.clients[task_id]
            message = f"data: {json.dumps(message_data, ensure_ascii=False)}\n\n"
            await queue.put((message, terminal))

    async def register_client(self, task_id: str) -> asyncio.Queue:
        """注册客户端连接."""
        queue = asyncio.Queue()
        self.clients[task_id] = queue
        return queue

    async def unregister_client(self, task_id: str) -> None:
        """注销客户端连接."""
        self.clients.pop(task_id, None)

    async def stream_messages(self, task_id: str) -> AsyncGenerator[str, None]:
        """流式传输消息，收到完成或错误消息后结束."""
        queue = self.clients.get(task_id)
        if queue is None:
            queue = await self.register_client(task_id)
        try:
            while True:
                message, terminal = await queue.get()
                yield message
                queue.task_done()
                if terminal:
                    break
        finally:
            await self.unregister_client(task_id)
