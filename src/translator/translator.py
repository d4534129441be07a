"""流式翻译入口."""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from config.logging_config import get_logger
from config.settings import Settings, get_api_key, settings as default_settings
from translator.prompts import TranslateMode, build_prompts
from translator.request_builder import build_request
from translator.sse_client import FetchSSEError, iter_sse_events, run_abortable
from translator.stream_relay import Message, StreamRelay, invoke_callback

logger = get_logger(__name__)


@dataclass(frozen=True)
class TranslateQuery:
    """一次翻译请求."""

    text: str
    detect_from: str
    detect_to: str
    mode: Union[TranslateMode, str]
    on_message: Callable[[Message], Any]
    on_error: Callable[[str], Any]
    on_finish: Callable[[str], Any]
    signal: Optional[asyncio.Event] = None


async def translate(query: TranslateQuery, settings: Optional[Settings] = None) -> None:
    """
    发起流式请求，通过回调返回结果.

    译文只通过on_message逐段返回；结束时调用on_finish，请求失败或被取消时
    调用一次on_error。

    Args:
        query: 翻译请求
        settings: 配置，默认使用全局配置

    Raises:
        MissingAPIKeyError: 未配置API Key
        ValueError: 未知的模式
    """
    current = settings or default_settings
    api_key = get_api_key(current)
    prompts = build_prompts(query.mode, query.detect_from, query.detect_to)
    request = build_request(
        query.text, prompts, current.openai_api_url, api_key, current.openai_model
    )
    relay = StreamRelay(query.on_message, query.on_finish)

    async def consume():
        events = iter_sse_events(
            request.url,
            headers=request.headers,
            body=request.body.model_dump(),
            timeout=current.request_timeout,
        )
        try:
            async for data in events:
                if not await relay.feed(data):
                    break
        finally:
            await events.aclose()

    logger.info(
        f"Start {TranslateMode(query.mode).value} request: "
        f"{query.detect_from} -> {query.detect_to}, model {current.openai_model}"
    )
    try:
        await run_abortable(consume(), query.signal)
    except FetchSSEError as e:
        # on_finish已触发，关闭连接期间的取消不再上报
        if relay.finished:
            logger.debug(f"Ignoring error after finish: {e.message}")
            return
        logger.warning(f"Translate request failed: {e.message}")
        await invoke_callback(query.on_error, e.message)
