"""
AI 模型调用适配层
OpenAI 兼容接口与 Google Gemini 使用同一套消息格式（role/content 列表）
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

Messages = List[Dict[str, str]]


def strip_code_fence(text: str) -> str:
    """去掉模型回复外层的 Markdown 代码块（```json ... ```）"""
    cleaned = (text or "").strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


class AIModelHandler(ABC):
    def __init__(self, client, model_name: str):
        self.client = client
        self.model_name = model_name

    @abstractmethod
    async def get_completion(
        self,
        messages: Messages,
        temperature: float = 0.7,
        json_mode: bool = False,
        timeout: Optional[float] = None,
    ) -> str:
        pass

    def parse_json_response(self, response_text: str) -> dict:
        if not response_text:
            raise ValueError("AI 回复为空")
        # 代码块中间的 JSON 优先
        match = re.search(r"```(json)?\n(.*?)```", response_text, re.DOTALL)
        json_string = match.group(2).strip() if match else response_text.strip()
        if not json_string:
            raise ValueError("清理后的 AI 回复为空")
        return json.loads(json_string)


class OpenAIHandler(AIModelHandler):
    """client 为 openai.AsyncOpenAI 实例（也可指向任意 OpenAI 兼容服务）"""

    async def get_completion(
        self,
        messages: Messages,
        temperature: float = 0.7,
        json_mode: bool = False,
        timeout: Optional[float] = None,
    ) -> str:
        kwargs = {
            "model": self.model_name,
            "messages": messages,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if timeout is not None:
            kwargs["timeout"] = timeout

        response = await self.client.chat.completions.create(**kwargs)
        result = response.choices[0].message.content or ""
        return strip_code_fence(result) if json_mode else result.strip()


class GeminiHandler(AIModelHandler):
    """client 为 google.generativeai.GenerativeModel 实例"""

    @staticmethod
    def _flatten(messages: Messages) -> str:
        # Gemini 单轮调用：系统提示在前，历史对话按角色标注拼接
        parts = []
        for message in messages:
            role = message.get("role")
            content = message.get("content", "")
            if role == "system":
                parts.append(content)
            elif role == "assistant":
                parts.append(f"助手：{content}")
            else:
                parts.append(f"用户：{content}")
        return "\n\n".join(parts)

    async def get_completion(
        self,
        messages: Messages,
        temperature: float = 0.7,
        json_mode: bool = False,
        timeout: Optional[float] = None,
    ) -> str:
        generation_config = {"temperature": temperature}
        if json_mode:
            generation_config["response_mime_type"] = "application/json"
        request_options = {"timeout": timeout} if timeout is not None else None

        response = await self.client.generate_content_async(
            self._flatten(messages),
            generation_config=generation_config,
            request_options=request_options,
        )
        result = getattr(response, "text", str(response))
        return strip_code_fence(result) if json_mode else result.strip()
