"""基于httpx的Server-Sent Events客户端."""

import asyncio
import json
from typing import Any, AsyncIterator, Awaitable, Dict, List, Optional, TypeVar

import httpx

from config.logging_config import get_logger

logger = get_logger(__name__)

ABORTED_MESSAGE = "The user aborted a request."

T = TypeVar("T")


class FetchSSEError(Exception):
    """流式请求失败."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RequestAborted(FetchSSEError):
    """请求被调用方取消."""

    def __init__(self):
        super().__init__(ABORTED_MESSAGE)


def _error_message(status_code: int, content: bytes) -> str:
    """从错误响应中提取错误信息."""
    text = content.decode("utf-8", errors="ignore").strip()
    try:
        data = json.loads(text)
    except ValueError:
        return text or f"HTTP {status_code}"
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return text


async def _iter_events(resp: httpx.Response) -> AsyncIterator[str]:
    data_lines: List[str] = []
    async for line in resp.aiter_lines():
        if not line:
            if data_lines:
                yield "\n".join(data_lines)
                data_lines = []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "data":
            data_lines.append(value)
    if data_lines:
        yield "\n".join(data_lines)


async def iter_sse_events(
    url: str,
    *,
    headers: Dict[str, str],
    body: Any,
    method: str = "POST",
    timeout: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> AsyncIterator[str]:
    """
    发送请求并逐个返回SSE事件的data内容.

    Args:
        url: 请求地址
        headers: 请求头
        body: JSON请求体
        method: 请求方法
        timeout: 超时时间（秒）
        client: 复用的httpx客户端，默认每次新建

    Yields:
        每个事件的data字符串

    Raises:
        FetchSSEError: 非2xx响应或网络错误
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=httpx.Timeout(timeout or 60.0))
    try:
        async with client.stream(method, url, headers=headers, json=body) as resp:
            if not resp.is_success:
                content = await resp.aread()
                raise FetchSSEError(
                    _error_message(resp.status_code, content), resp.status_code
                )
            async for data in _iter_events(resp):
                yield data
    except httpx.HTTPError as e:
        raise FetchSSEError(str(e) or type(e).__name__) from e
    finally:
        if owns_client:
            await client.aclose()


async def run_abortable(coro: Awaitable[T], signal: Optional[asyncio.Event]) -> T:
    """
    运行协程，signal被设置时取消并抛出RequestAborted.

    Args:
        coro: 要运行的协程
        signal: 取消信号，为None时不可取消

    Returns:
        协程的返回值
    """
    if signal is None:
        return await coro
    task = asyncio.ensure_future(coro)
    if signal.is_set():
        task.cancel()
    else:
        waiter = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()
        if task.done():
            return task.result()
        task.cancel()
    # 外层任务被取消时asyncio.wait会抛出CancelledError
    await asyncio.wait({task})
    logger.info("Request aborted by caller")
    raise RequestAborted()
