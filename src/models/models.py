"""数据模型定义."""

from typing import List, Optional

from pydantic import BaseModel


class TranslateRequest(BaseModel):
    """翻译请求数据模型."""

    text: str
    detect_from: str
    detect_to: str
    mode: str = "translate"


class LanguageInfo(BaseModel):
    """语言信息."""

    code: str
    name: str


class SSEMessageType:
    """SSE消息类型常量."""

    MESSAGE = "message"
    FINISH = "finish"
    ERROR = "error"


class ChatMessage(BaseModel):
    """对话消息."""

    role: str
    content: str


class ChatCompletionRequest(BaseModel):
    """流式chat completion请求体."""

    model: str
    temperature: float = 0
    max_tokens: int = 2000
    top_p: float = 1
    frequency_penalty: float = 1
    presence_penalty: float = 1
    messages: List[ChatMessage]
    stream: bool = True


class Delta(BaseModel):
    """流式响应中的增量内容."""

    content: Optional[str] = None
    role: Optional[str] = None


class ChunkChoice(BaseModel):
    """流式响应中的单个choice."""

    delta: Optional[Delta] = None
    finish_reason: Optional[str] = None


class ChatCompletionChunk(BaseModel):
    """每个SSE事件的payload."""

    choices: Optional[List[ChunkChoice]] = None
