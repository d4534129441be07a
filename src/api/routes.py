"""Translator API 路由."""

import asyncio
import uuid
from typing import List

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from .sse_manager import SSEManager
from config.logging_config import get_logger
from models.models import LanguageInfo, TranslateRequest
from translator.lang import supported_languages
from translator.prompts import TranslateMode
from translator.stream_relay import Message
from translator.translator import TranslateQuery, translate

logger = get_logger(__name__)

# 创建路由实例
router = APIRouter(prefix="/api/v1/translator")

# 创建SSE管理器实例
sse_manager = SSEManager()


@router.get("/languages", response_model=List[LanguageInfo])
async def list_languages():
    """返回支持的语言列表."""
    return [LanguageInfo(code=code, name=name) for code, name in supported_languages]


@router.post("/translate")
async def translate_text(request: TranslateRequest):
    """
    翻译文本并返回SSE流式响应

    Args:
        request: 翻译请求

    Returns:
    SSE消息格式：
       - 增量消息：data: {"type": "message", "content": "你好", "role": "assistant"}
       - 完成消息：data: {"type": "finish", "reason": "stop"}
       - 错误消息：data: {"type": "error", "message": "错误详情"}
    """
    try:
        mode = TranslateMode(request.mode)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid mode: {request.mode}")

    task_id = str(uuid.uuid4())
    return StreamingResponse(
        translate_stream(task_id, request, mode),
        media_type="text/event-stream",
    )


async def translate_stream(task_id: str, request: TranslateRequest, mode: TranslateMode):
    """翻译文本并流式返回结果

    客户端断开连接时设置取消信号，中止上游请求。
    """
    # 注册客户端连接，确保所有消息都能被发送
    await sse_manager.register_client(task_id)
    signal = asyncio.Event()
    ended = False

    async def on_message(message: Message):
        await sse_manager.send_message(task_id, message.content, message.role)

    async def on_finish(reason: str):
        nonlocal ended
        ended = True
        await sse_manager.send_finish(task_id, reason)

    async def on_error(error: str):
        nonlocal ended
        ended = True
        await sse_manager.send_error(task_id, error)

    async def translation_task():
        try:
            await translate(
                TranslateQuery(
                    text=request.text,
                    detect_from=request.detect_from,
                    detect_to=request.detect_to,
                    mode=mode,
                    on_message=on_message,
                    on_error=on_error,
                    on_finish=on_finish,
                    signal=signal,
                )
            )
            # 上游未返回结束标记就关闭了连接
            if not ended:
                await sse_manager.send_finish(task_id, "stop")
        except Exception as e:
            logger.exception(f"翻译失败: {str(e)}")
            await sse_manager.send_error(task_id, f"翻译失败: {str(e)}")

    # 启动翻译任务作为后台任务
    task = asyncio.create_task(translation_task())

    try:
        async for message in sse_manager.stream_messages(task_id):
            yield message
    finally:
        signal.set()
        await asyncio.wait({task})
