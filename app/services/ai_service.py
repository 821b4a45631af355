"""
旅游规划 AI 服务
根据 AI_PROVIDER 选择 OpenAI 兼容接口或 Google Gemini，负责：
- 生成行程（带对话历史、区域一致性约束）
- 目的地识别（返回单个 JSON 对象）
- 把调用失败归类为固定的用户提示语
"""

import asyncio
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import google.generativeai as genai
import httpx
import openai

from app.config import settings
from app.schemas.plan import ChatMessage
from app.services.ai_handlers import AIModelHandler, GeminiHandler, Messages, OpenAIHandler
from app.utils.logger import get_logger

logger = get_logger(__name__)


class AIServiceError(Exception):
    """AI 服务未配置或配置错误"""


class AIErrorKind(str, Enum):
    TIMEOUT = "timeout"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    GENERIC = "generic"


AI_ERROR_MESSAGES: Dict[AIErrorKind, str] = {
    AIErrorKind.TIMEOUT: "AI响应超时，请稍后重试",
    AIErrorKind.AUTH: "AI服务认证失败，请检查API密钥配置",
    AIErrorKind.RATE_LIMIT: "AI服务请求过于频繁，请稍后重试",
    AIErrorKind.NETWORK: "网络连接失败，请检查网络设置",
    AIErrorKind.GENERIC: "AI服务暂时出现问题，请稍后重试",
}


def classify_ai_error(error: BaseException) -> Tuple[AIErrorKind, str]:
    """
    把 AI 调用异常归为 超时/认证/限流/网络/其他 五类，返回 (类别, 用户提示语)。
    原始错误信息只写日志，不返回给调用方。
    """
    # APITimeoutError 是 APIConnectionError 的子类，必须先判断
    if isinstance(error, (asyncio.TimeoutError, openai.APITimeoutError, httpx.TimeoutException)):
        kind = AIErrorKind.TIMEOUT
    elif isinstance(error, (AIServiceError, openai.AuthenticationError, openai.PermissionDeniedError)):
        kind = AIErrorKind.AUTH
    elif isinstance(error, openai.RateLimitError):
        kind = AIErrorKind.RATE_LIMIT
    elif isinstance(error, (openai.APIConnectionError, httpx.NetworkError)):
        kind = AIErrorKind.NETWORK
    else:
        message = str(error)
        lowered = message.lower()
        if "timeout" in lowered or "timed out" in lowered:
            kind = AIErrorKind.TIMEOUT
        elif "401" in message or "unauthorized" in lowered or "api key" in lowered:
            kind = AIErrorKind.AUTH
        elif "429" in message or "rate limit" in lowered or "quota" in lowered:
            kind = AIErrorKind.RATE_LIMIT
        elif "network" in lowered or "enotfound" in lowered or "connection" in lowered:
            kind = AIErrorKind.NETWORK
        else:
            kind = AIErrorKind.GENERIC
    return kind, AI_ERROR_MESSAGES[kind]


PLANNING_SYSTEM_PROMPT = """你是专业的旅游规划师。根据用户需求制定详细行程，提供完整的旅游规划服务。你能够基于对话历史提供上下文相关的回答。

核心要求：
- 仔细阅读对话历史，准确理解用户的具体需求
- 识别用户是否要求重新规划行程（关键词包括：重新规划、重新安排、换个地方、改变路线、重新设计、换条线路、重新来、再规划一个、重新制定、修改行程等）
- 如果是重新规划请求，必须提供新的景点和完整的新行程，并在回答末尾包含"关键景点："部分
- 地区一致性：如果对话历史中用户之前咨询的是某个地区，重新规划时必须保持在同一地区内推荐景点
- 如果是第一个问题（没有对话历史），这必然是全新的旅游规划请求
- 如果用户询问具体某天的行程（如"第三天的行程安排"、"第四天怎么玩"），请：
  1. 查看对话历史中助手的回复，找到完整的多日行程规划
  2. 精确定位用户询问的那一天，提取该天的景点和活动安排
  3. 基于这些景点提供详细的时间、交通、用餐建议
  4. 不要混淆不同天数的行程安排，也不要自己编造景点
- 如果是全新的旅游规划请求或重新规划请求，严格按用户指定地区推荐景点，景点名要准确
- 提供详细完整的规划内容，包括时间安排、交通建议、费用估算、实用贴士等"""

REGION_CONSTRAINT_TEMPLATE = (
    "\n\n**重要提示：当前的旅游规划需要严格限定在 {scope} 地区内。"
    "所有推荐的景点、餐厅、住宿都必须位于 {scope} 及其周边区域。不要推荐其他城市或地区的景点。**"
)

ANSWER_FORMAT_PROMPT = """

回答格式：

如果是询问具体某天的详细安排：
请严格按照对话历史中该天的安排来回答，格式如下：
【详细规划】第X天具体行程安排：
8:00-9:00 [具体活动]
9:00-12:00 [具体景点] - [游览建议]
12:00-13:00 [用餐建议]
13:00-17:00 [下午安排]
17:00-19:00 [晚餐和休息]
交通：[具体交通方案]
费用：[预估费用]
小贴士：[实用建议]

如果是新的旅游规划或重新规划：
标题：[简洁的行程标题]
📍 推荐景点：[详细的每日行程安排，包括具体时间、景点介绍、交通方式、费用估算等]
💡 实用贴士：[交通建议、注意事项、最佳游览时间等]
💰 费用预算：[详细的费用分解]
关键景点：[所有景点名称，用逗号分隔]

重要：
1. 对于重新规划请求，必须提供全新的景点和路线，不要重复之前的推荐
2. 必须在回答末尾包含"关键景点："部分，以便系统在地图上标记新的地点"""

REGION_EXTRACTION_PROMPT = """你是中国行政区划识别助手。请从用户的旅游需求中识别唯一的目的地，并判断它是城市还是省级行政区。

规则：
- 北京、上海、天津、重庆是直辖市，一律按城市（city）处理
- 省、自治区、特别行政区按省份（province）处理，名称使用中文
- 无法确定目的地时，name 返回 null

只返回一个 JSON 对象，不要有其他文字：
{"name": "目的地名称或null", "level": "city 或 province"}"""


def build_planning_messages(
    prompt: str,
    history: Sequence[ChatMessage] = (),
    scope_name: Optional[str] = None,
) -> Messages:
    """组装行程生成的消息列表：系统提示 + 历史对话 + 当前输入"""
    system_prompt = PLANNING_SYSTEM_PROMPT
    if scope_name:
        system_prompt += REGION_CONSTRAINT_TEMPLATE.format(scope=scope_name)
    system_prompt += ANSWER_FORMAT_PROMPT

    messages: Messages = [{"role": "system", "content": system_prompt}]
    for message in history:
        role = "user" if message.type == "user" else "assistant"
        messages.append({"role": role, "content": message.content})
    messages.append({"role": "user", "content": prompt})
    return messages


class TravelAIService:
    """按配置选择 AI 提供方的旅游规划服务"""

    def __init__(self, handler: Optional[AIModelHandler] = None, provider: Optional[str] = None):
        self.provider = (provider or settings.AI_PROVIDER or "openai").lower()
        self.handler = handler if handler is not None else self._create_handler()

    def _create_handler(self) -> Optional[AIModelHandler]:
        """初始化 AI 客户端，缺少密钥时返回 None（调用时再报错）"""
        if self.provider == "gemini":
            if not settings.GEMINI_API_KEY:
                logger.warning("⚠️ GEMINI_API_KEY 未设置，AI 服务不可用")
                return None
            genai.configure(api_key=settings.GEMINI_API_KEY)
            logger.info(f"✅ Gemini 客户端初始化完成 ({settings.GEMINI_MODEL})")
            return GeminiHandler(genai.GenerativeModel(settings.GEMINI_MODEL), settings.GEMINI_MODEL)

        if not settings.OPENAI_API_KEY:
            logger.warning("⚠️ OPENAI_API_KEY 未设置，AI 服务不可用")
            return None
        client = openai.AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL or None,
        )
        logger.info(f"✅ OpenAI 客户端初始化完成 ({settings.OPENAI_MODEL})")
        return OpenAIHandler(client, settings.OPENAI_MODEL)

    @property
    def is_configured(self) -> bool:
        return self.handler is not None

    def _require_handler(self) -> AIModelHandler:
        if self.handler is None:
            raise AIServiceError(f"AI 提供方 {self.provider} 未配置 API 密钥")
        return self.handler

    async def generate_itinerary(
        self,
        prompt: str,
        history: Sequence[ChatMessage] = (),
        scope_name: Optional[str] = None,
    ) -> str:
        """生成行程文本，超过 PLAN_TIMEOUT_SECONDS 抛出 asyncio.TimeoutError"""
        handler = self._require_handler()
        messages = build_planning_messages(prompt, history, scope_name)

        logger.info(f"🤖 [AI_START] 开始生成行程 (提供方: {self.provider}, 限定区域: {scope_name or '无'})")
        logger.info(f"📏 [AI_CONTEXT] 消息数: {len(messages)}, 历史条数: {len(history)}")

        timeout = settings.PLAN_TIMEOUT_SECONDS
        result = await asyncio.wait_for(
            handler.get_completion(messages, temperature=0.7, timeout=timeout),
            timeout=timeout,
        )

        logger.info(f"✅ [AI_SUCCESS] 行程生成完成，长度 {len(result)}")
        logger.debug(f"📄 [AI_PREVIEW] {result[:200]}")
        return result

    async def extract_region(self, text: str) -> Dict[str, Any]:
        """让 AI 识别目的地，返回 {"name", "level"}，超时时间短于行程生成"""
        handler = self._require_handler()
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": REGION_EXTRACTION_PROMPT},
            {"role": "user", "content": text},
        ]
        timeout = settings.REGION_AI_TIMEOUT_SECONDS
        raw = await asyncio.wait_for(
            handler.get_completion(messages, temperature=0, json_mode=True, timeout=timeout),
            timeout=timeout,
        )
        return handler.parse_json_response(raw)

    def get_provider_info(self) -> Dict[str, Any]:
        """当前 AI 提供方状态（健康检查使用）"""
        return {
            "provider": self.provider,
            "model": settings.GEMINI_MODEL if self.provider == "gemini" else settings.OPENAI_MODEL,
            "status": "available" if self.is_configured else "not_configured",
        }
