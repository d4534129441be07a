"""按模式生成system/assistant提示词."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from translator.lang import get_language_name

CHINESE_LANGS = frozenset({"zh-Hans", "zh-Hant", "wyw", "yue"})

DEFAULT_SYSTEM_PROMPT = (
    "You are a translation engine that can only translate text and cannot interpret it."
)


class TranslateMode(str, Enum):
    """翻译模式."""

    TRANSLATE = "translate"
    POLISHING = "polishing"
    SUMMARIZE = "summarize"
    ANALYZE = "analyze"
    EXPLAIN_CODE = "explain-code"


@dataclass(frozen=True)
class PromptPair:
    """一次请求使用的提示词."""

    system_prompt: str
    assistant_prompt: str


def build_prompts(
    mode: Union[TranslateMode, str], detect_from: str, detect_to: str
) -> PromptPair:
    """
    根据模式和源/目标语言生成提示词.

    Args:
        mode: 翻译模式
        detect_from: 源语言代码
        detect_to: 目标语言代码

    Returns:
        PromptPair

    Raises:
        ValueError: 未知的模式
    """
    mode = TranslateMode(mode)
    from_name = get_language_name(detect_from)
    to_name = get_language_name(detect_to)
    from_chinese = detect_from in CHINESE_LANGS
    to_chinese = detect_to in CHINESE_LANGS

    system_prompt = DEFAULT_SYSTEM_PROMPT
    assistant_prompt = f"translate from {from_name} to {to_name}"

    if mode is TranslateMode.TRANSLATE:
        if detect_to in ("wyw", "yue"):
            assistant_prompt = f"翻译成{to_name}"
        elif detect_to == "zh-Hant":
            assistant_prompt = "翻譯成台灣常用用法之繁體中文白話文"
        elif detect_to == "zh-Hans":
            assistant_prompt = "翻译成简体白话文"
    elif mode is TranslateMode.POLISHING:
        system_prompt = (
            "Revise the following sentences to make them more clear, concise, and coherent."
        )
        if from_chinese:
            assistant_prompt = f"使用 {from_name} 语言润色此段文本"
        else:
            assistant_prompt = f"polish this text in {from_name}"
    elif mode is TranslateMode.SUMMARIZE:
        system_prompt = (
            "You are a text summarizer, you can only summarize the text, "
            "don't interpret it."
        )
        if to_chinese:
            assistant_prompt = "用最简洁的语言使用中文总结此段文本"
        else:
            assistant_prompt = (
                "summarize this text in the most concise language "
                f"and must use {to_name} language!"
            )
    elif mode is TranslateMode.ANALYZE:
        system_prompt = "You are a translation engine and grammar analyzer."
        if to_chinese:
            assistant_prompt = (
                "请使用中文解释此段文本并解析原文语法分析，"
                "以及分词及词语日文注音，每个词语的来源用法分析"
            )
        else:
            assistant_prompt = (
                f"translate this text to {to_name} and explain the grammar "
                f"in the original text using {to_name}"
            )
    elif mode is TranslateMode.EXPLAIN_CODE:
        system_prompt = (
            "You are a code explanation engine, you can only explain the code, "
            "do not interpret or translate it. Also, please report any bugs you "
            "find in the code to the author of the code."
        )
        if to_chinese:
            assistant_prompt = (
                "用最简洁的语言使用中文解释此段代码、正则表达式或脚本。"
                "如果内容不是代码，请返回错误提示。如果代码有明显的错误，请指出。"
            )
        else:
            assistant_prompt = (
                "explain the provided code, regex or script in the most concise "
                f"language and must use {to_name} language! If the content is not "
                "code, return an error message. If the code has obvious errors, "
                "point them out."
            )
    else:
        raise ValueError(f"Unsupported translate mode: {mode}")

    return PromptPair(system_prompt=system_prompt, assistant_prompt=assistant_prompt)
