"""组装chat completion请求."""

from dataclasses import dataclass
from typing import Dict

from models.models import ChatCompletionRequest, ChatMessage
from translator.prompts import PromptPair

CHAT_COMPLETIONS_PATH = "/v1/chat/completions"


@dataclass(frozen=True)
class ChatRequest:
    """待发送的请求."""

    url: str
    headers: Dict[str, str]
    body: ChatCompletionRequest


def build_headers(api_key: str) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }


def build_request(
    text: str, prompts: PromptPair, api_url: str, api_key: str, model: str
) -> ChatRequest:
    """
    组装请求地址、请求头和请求体.

    Args:
        text: 待处理文本，会被包在双引号中
        prompts: 提示词
        api_url: API基础地址
        api_key: API Key
        model: 模型名称

    Returns:
        ChatRequest
    """
    body = ChatCompletionRequest(
        model=model,
        messages=[
            ChatMessage(role="system", content=prompts.system_prompt),
            ChatMessage(role="user", content=prompts.assistant_prompt),
            ChatMessage(role="user", content=f'"{text}"'),
        ],
    )
    return ChatRequest(
        url=api_url.rstrip("/") + CHAT_COMPLETIONS_PATH,
        headers=build_headers(api_key),
        body=body,
    )
