"""
AI 行程回复解析
区分“新规划/重新规划”与“针对已有行程的追问”，并抽取标题、正文和待搜索的景点名
"""

import re
from typing import Iterable, List, Optional, Sequence

from app.config import settings
from app.data.keywords import (
    BODY_MARKER, DETAIL_MARKER, KEYWORD_MARKER, LANDMARK_SUFFIXES, REPLANNING_KEYWORDS, TITLE_MARKER,
    TOKEN_BOUNDARY_CHARS
)
from app.data.regions import BASIC_FALLBACK_CITIES
from app.schemas.plan import ChatMessage, ConversationState, PlanDraft
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PLAN_TITLE = "旅游行程规划"
DEFAULT_DETAIL_TITLE = "详细规划"
MAX_KEYWORD_LENGTH = 50
BASIC_KEYWORD_LIMIT = 5
BASIC_KEYWORD_PREFIX_LENGTH = 10

_KEYWORD_SEPARATORS = re.compile(r"[|,，、\n]")
_TITLE_LINE = re.compile(re.escape(TITLE_MARKER) + r"(.+)")
_TITLE_LINE_WITH_BREAK = re.compile(re.escape(TITLE_MARKER) + r"[^\n]*\n?")
_KEYWORD_LINE = re.compile(re.escape(KEYWORD_MARKER) + r"(.+)")
_BODY_SECTION = re.compile(re.escape(BODY_MARKER) + r"([\s\S]*?)(?=" + re.escape(KEYWORD_MARKER) + r"|$)")
_DETAIL_TITLE = re.compile(re.escape(DETAIL_MARKER) + r"(.+?)：")
# 景点名前缀不跨越动词、助词和标点（“先去西溪湿地公园” → “西溪湿地公园”）
_LANDMARK_PREFIX = r"[^\n" + "".join(re.escape(char) for char in sorted(TOKEN_BOUNDARY_CHARS)) + r"]{2,6}"
_LANDMARK_PATTERNS = tuple(
    re.compile("(" + _LANDMARK_PREFIX + suffix + ")") for suffix in LANDMARK_SUFFIXES
)

_MARKDOWN_RULES = (
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),        # **粗体**
    (re.compile(r"\*([^*]+)\*"), r"\1"),            # *斜体*
    (re.compile(r"^#+\s*", re.MULTILINE), ""),      # 标题
    (re.compile(r"```[\s\S]*?```"), ""),            # 代码块
    (re.compile(r"`([^`]+)`"), r"\1"),              # 行内代码
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), "• "),
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),
    (re.compile(r"\[([^\]]+)\]"), r"\1"),
    (re.compile(r"【([^】]+)】"), r"\1"),
)


def clean_markdown(text: Optional[str]) -> str:
    """去掉 Markdown 标记和方括号装饰，只保留纯文本"""
    cleaned = text or ""
    for pattern, replacement in _MARKDOWN_RULES:
        cleaned = pattern.sub(replacement, cleaned)
    return cleaned.strip()


def detect_replanning_intent(user_prompt: Optional[str]) -> bool:
    """用户当前输入是否要求重新规划"""
    if not user_prompt:
        return False
    return any(keyword in user_prompt for keyword in REPLANNING_KEYWORDS)


def has_previous_plan(history: Sequence[ChatMessage]) -> bool:
    """历史中是否有带地点结果的 AI 回复"""
    return any(message.type == "ai" and message.pois for message in history)


def build_conversation_state(history: Sequence[ChatMessage], user_prompt: str) -> ConversationState:
    return ConversationState(
        is_first_question=len(history) == 0,
        has_previous_plan=has_previous_plan(history),
        is_replanning=detect_replanning_intent(user_prompt),
    )


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def split_keywords(keyword_text: str, limit: Optional[int] = None) -> List[str]:
    """按 | , ， 、 换行 切分关键景点"""
    limit = limit or settings.MAX_KEYWORDS
    parts = (part.strip() for part in _KEYWORD_SEPARATORS.split(keyword_text or ""))
    keywords = _dedupe(part for part in parts if 0 < len(part) < MAX_KEYWORD_LENGTH)
    return keywords[:limit]


def extract_landmarks(text: str, limit: Optional[int] = None) -> List[str]:
    """没有关键景点列表时，按“XX公园/XX寺/XX山……”的后缀从正文中找景点"""
    limit = limit or settings.MAX_KEYWORDS
    found = []
    for pattern in _LANDMARK_PATTERNS:
        for match in pattern.findall(text or ""):
            found.append(match.strip())
    return _dedupe(found)[:limit]


def extract_basic_keywords(prompt: str) -> List[str]:
    """
    AI 调用失败时的降级关键词：输入里出现的主要城市名，
    一个都没有时用输入的前 10 个字
    """
    keywords = [city for city in BASIC_FALLBACK_CITIES if city in (prompt or "")]
    if not keywords:
        head = (prompt or "").strip()[:BASIC_KEYWORD_PREFIX_LENGTH]
        if head:
            keywords.append(head)
    return keywords[:BASIC_KEYWORD_LIMIT]


class PlanParser:
    """把 AI 的回复文本解析为 PlanDraft"""

    @staticmethod
    def is_follow_up(response_text: str, state: ConversationState) -> bool:
        """
        判断是否为对已有行程的追问：
        - 用户要求重新规划时一律按新规划处理
        - 回复带【详细规划】标记
        - 非首轮、已有规划，且回复既没有标题也没有关键景点
        """
        if state.is_replanning:
            return False
        if DETAIL_MARKER in response_text:
            return True
        if state.is_first_question or not state.has_previous_plan:
            return False
        return TITLE_MARKER not in response_text and KEYWORD_MARKER not in response_text

    @staticmethod
    def _extract_body(text: str) -> str:
        # 有“推荐景点”段落时取到“关键景点”为止，否则去掉标题行和关键景点行
        body_match = _BODY_SECTION.search(text)
        if body_match:
            return body_match.group(1).strip()
        without_title = _TITLE_LINE_WITH_BREAK.sub("", text, count=1)
        return _KEYWORD_LINE.sub("", without_title, count=1).strip()

    def parse(self, response_text: str, state: ConversationState) -> PlanDraft:
        text = response_text or ""

        if self.is_follow_up(text, state):
            detail = _DETAIL_TITLE.search(text)
            title = detail.group(1).strip() if detail else DEFAULT_DETAIL_TITLE
            logger.info("💬 [PLAN_PARSE] 识别为行程追问，保留现有地图标记")
            return PlanDraft(
                title=clean_markdown(title) or DEFAULT_DETAIL_TITLE,
                description=text.strip(),
                keywords=[],
            )

        title_match = _TITLE_LINE.search(text)
        keyword_match = _KEYWORD_LINE.search(text)

        body = self._extract_body(text) or text

        title = title_match.group(1).strip() if title_match else DEFAULT_PLAN_TITLE
        keyword_text = keyword_match.group(1).strip() if keyword_match else ""
        keywords = split_keywords(keyword_text) if keyword_text else extract_landmarks(body)

        logger.info(f"📝 [PLAN_PARSE] 新规划: {title}, 关键词 {len(keywords)} 个: {keywords}")
        return PlanDraft(
            title=clean_markdown(title) or DEFAULT_PLAN_TITLE,
            description=clean_markdown(body),
            keywords=keywords,
        )
