"""AI 服务测试：错误分类、消息组装、提供方适配"""

import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest

from app.config import settings
from app.schemas.plan import ChatMessage
from app.services.ai_handlers import AIModelHandler, GeminiHandler, OpenAIHandler, strip_code_fence
from app.services.ai_service import (
    AI_ERROR_MESSAGES, AIErrorKind, AIServiceError, TravelAIService, build_planning_messages,
    classify_ai_error
)

_REQUEST = httpx.Request("POST", "https://api.test/v1/chat/completions")


class RecordingHandler(AIModelHandler):
    """记录调用参数并返回固定文本"""

    def __init__(self, reply="", delay=0.0):
        super().__init__(client=None, model_name="fake-model")
        self.reply = reply
        self.delay = delay
        self.calls = []

    async def get_completion(self, messages, temperature=0.7, json_mode=False, timeout=None):
        self.calls.append({"messages": messages, "temperature": temperature, "json_mode": json_mode, "timeout": timeout})
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.reply


@pytest.mark.parametrize("error, kind", [
    (asyncio.TimeoutError(), AIErrorKind.TIMEOUT),
    (openai.APITimeoutError(request=_REQUEST), AIErrorKind.TIMEOUT),
    (httpx.ReadTimeout("read timed out", request=_REQUEST), AIErrorKind.TIMEOUT),
    (AIServiceError("未配置"), AIErrorKind.AUTH),
    (openai.RateLimitError("slow down", response=httpx.Response(429, request=_REQUEST), body=None), AIErrorKind.RATE_LIMIT),
    (openai.APIConnectionError(request=_REQUEST), AIErrorKind.NETWORK),
    (httpx.ConnectError("refused", request=_REQUEST), AIErrorKind.NETWORK),
    (RuntimeError("HTTP 401 Unauthorized"), AIErrorKind.AUTH),
    (RuntimeError("Error 429: quota exceeded"), AIErrorKind.RATE_LIMIT),
    (RuntimeError("getaddrinfo ENOTFOUND api.test"), AIErrorKind.NETWORK),
    (RuntimeError("request timed out"), AIErrorKind.TIMEOUT),
    (ValueError("unexpected token"), AIErrorKind.GENERIC),
])
def test_classify_ai_error(error, kind):
    assert classify_ai_error(error) == (kind, AI_ERROR_MESSAGES[kind])


def test_generic_error_never_leaks_raw_message():
    _, message = classify_ai_error(ValueError("secret internal detail"))
    assert "secret" not in message


def test_planning_messages_carry_history_and_scope():
    history = [
        ChatMessage(type="user", content="杭州三日游"),
        ChatMessage(type="ai", content="标题：杭州三日游"),
    ]
    messages = build_planning_messages("第二天怎么玩", history, "杭州")

    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert "严格限定在 杭州 地区内" in messages[0]["content"]
    assert "关键景点：" in messages[0]["content"]
    assert messages[-1]["content"] == "第二天怎么玩"


def test_planning_messages_without_scope_have_no_constraint():
    messages = build_planning_messages("随便走走")
    assert len(messages) == 2
    assert "严格限定" not in messages[0]["content"]


def test_generate_itinerary_uses_plan_timeout():
    handler = RecordingHandler("标题：杭州三日游")
    service = TravelAIService(handler=handler, provider="openai")

    result = asyncio.run(service.generate_itinerary("杭州三日游", scope_name="杭州"))

    assert result == "标题：杭州三日游"
    call = handler.calls[0]
    assert call["timeout"] == settings.PLAN_TIMEOUT_SECONDS
    assert call["json_mode"] is False


def test_generate_itinerary_times_out(monkeypatch):
    monkeypatch.setattr(settings, "PLAN_TIMEOUT_SECONDS", 0.01)
    service = TravelAIService(handler=RecordingHandler("late", delay=1), provider="openai")
    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(service.generate_itinerary("杭州"))


def test_extract_region_requests_json():
    handler = RecordingHandler('```json\n{"name": "浙江省", "level": "province"}\n```')
    service = TravelAIService(handler=handler, provider="openai")

    payload = asyncio.run(service.extract_region("想去浙江玩"))

    assert payload == {"name": "浙江省", "level": "province"}
    call = handler.calls[0]
    assert call["json_mode"] is True
    assert call["temperature"] == 0
    assert call["timeout"] == settings.REGION_AI_TIMEOUT_SECONDS


def test_unconfigured_service_raises(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")
    service = TravelAIService(provider="openai")
    assert not service.is_configured
    assert service.get_provider_info()["status"] == "not_configured"
    with pytest.raises(AIServiceError):
        asyncio.run(service.generate_itinerary("杭州"))


def test_openai_handler_passes_json_mode_and_timeout():
    captured = {}

    async def create(**kwargs):
        captured.update(kwargs)
        message = SimpleNamespace(content='```json\n{"name": null}\n```')
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    handler = OpenAIHandler(client, "gpt-test")
    text = asyncio.run(handler.get_completion([{"role": "user", "content": "x"}], temperature=0, json_mode=True, timeout=5))

    assert text == '{"name": null}'
    assert captured["response_format"] == {"type": "json_object"}
    assert captured["timeout"] == 5
    assert captured["model"] == "gpt-test"


def test_gemini_handler_flattens_messages():
    captured = {}

    async def generate_content_async(prompt, generation_config=None, request_options=None):
        captured.update(prompt=prompt, generation_config=generation_config, request_options=request_options)
        return SimpleNamespace(text="  行程  ")

    handler = GeminiHandler(SimpleNamespace(generate_content_async=generate_content_async), "gemini-test")
    messages = [
        {"role": "system", "content": "系统"},
        {"role": "user", "content": "杭州"},
        {"role": "assistant", "content": "标题：杭州"},
    ]
    text = asyncio.run(handler.get_completion(messages, timeout=3))

    assert text == "行程"
    assert captured["prompt"] == "系统\n\n用户：杭州\n\n助手：标题：杭州"
    assert captured["generation_config"] == {"temperature": 0.7}
    assert captured["request_options"] == {"timeout": 3}


def test_strip_code_fence():
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence("plain") == "plain"
