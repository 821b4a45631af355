"""
目的地识别服务
从一段文本中识别出旅游目的地及其行政级别（城市/省份）

识别策略按固定顺序执行，命中即返回：
1. 直辖市名称 → 城市
2. 带“省/自治区/特别行政区”后缀的省级全称 → 省份
3. 大区/城市群名称（“长三角”、“东北”）→ 代表省份；京津冀、华北 → 北京
4. 自然语言出行句式（“在X旅游”、“以X为中心”、“去X玩”）→ 城市
5. 省份简称 → 省份
6. 带“市”后缀的城市名 → 城市
7. 紧跟出行意图后缀的 2~4 字地名（“X美食”、“X三日游”）→ 城市
8. 整句就是一个 2~4 字的词 → 城市

可选的 AI 识别在规则之前执行，结果合法时优先采用，任何失败都只会回退到规则识别。
"""

import re
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Tuple

from app.config import settings
from app.data.keywords import (
    LOCATIVE_PREPOSITIONS, NON_LOCATIVE_WORDS, TOKEN_BOUNDARY_CHARS, TRAVEL_ACTION_WORDS, TRAVEL_INTENT_SUFFIXES
)
from app.data.regions import (
    INTERNATIONAL_KEYWORDS, KNOWN_CITIES, MUNICIPALITIES, PROVINCE_SHORT_NAMES, PROVINCE_SYNONYMS, REGION_ALIASES
)
from app.schemas.region import RegionLevel, RegionMatch
from app.services.region_normalizer import clean_city_name, normalize_province, strip_city_suffix
from app.utils.logger import get_logger

logger = get_logger(__name__)

RegionStrategy = Callable[[str], Optional[RegionMatch]]

_CJK_TOKEN = re.compile(r"^[\u4e00-\u9fa5]+$")
_BARE_TOKEN = re.compile(r"^[\u4e00-\u9fa5]{2,4}$")
_DAY_COUNT = r"[一二两三四五六七八九十\d]+"

# 明显不是地名的片段（“第三天”、“这里”、“怎么”等）
_NON_PLACE_PATTERN = re.compile(
    r"第|" + _DAY_COUNT + r"[天日晚]|今天|明天|后天|这|那|哪|什么|怎么|一下|一个|推荐|安排|规划|计划|帮|请|我们|大家"
    r"|可以|还有|还能|能不能|能否|是否"
)

# 省级后缀（通用匹配，已知全称在此之前单独处理）
_PROVINCE_SUFFIX_PATTERN = re.compile(r"(维吾尔自治区|壮族自治区|回族自治区|特别行政区|自治区|省)")
# “省”后面跟这些字时是动词（省钱、省时……）
_NON_REGION_FOLLOWERS = frozenset("钱时力心去事略")
# “省”前面是这些字时是普通词（节省、反省、俭省……）
_NON_REGION_PRECEDERS = frozenset("节反俭内自")

# 以“市”结尾但不是城市的常用词
_NON_CITY_MARKET_WORDS = ("城市", "超市", "夜市", "集市", "门市", "股市", "都市", "上市", "菜市", "早市")

_NL_TRAVEL_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"以([\u4e00-\u9fa5]{2,4}?)为中心"),
    re.compile(
        r"(?:" + "|".join(LOCATIVE_PREPOSITIONS) + r")([\u4e00-\u9fa5]{2,4}?)"
        r"(?:" + "|".join(sorted(TRAVEL_ACTION_WORDS, key=len, reverse=True)) + r"|" + _DAY_COUNT + r"(?:日游|天))"
    ),
)

_TRAVEL_SUFFIX_PATTERN = re.compile(
    r"(?:" + "|".join(sorted(TRAVEL_INTENT_SUFFIXES, key=len, reverse=True)) + r"|" + _DAY_COUNT + r"日游)"
)

# 已知省级全称（不含直辖市），按长度从长到短，保证“广西壮族自治区”先于“广西省”类写法
_PROVINCE_LONG_FORMS: Tuple[str, ...] = tuple(sorted(
    (name for name in PROVINCE_SYNONYMS if not name.endswith("市") and name not in PROVINCE_SHORT_NAMES),
    key=len,
    reverse=True,
))

_PROVINCE_ONLY_SHORT_NAMES: Tuple[str, ...] = tuple(
    name for name in PROVINCE_SHORT_NAMES if name not in MUNICIPALITIES
)


def is_international_travel(text: str) -> bool:
    """检测是否为国外旅游需求（服务范围仅限国内）"""
    if not text:
        return False
    lowered = text.lower()
    return any(keyword in text or keyword.lower() in lowered for keyword in INTERNATIONAL_KEYWORDS)


def _is_valid_place_token(token: Optional[str]) -> bool:
    if not token or not (2 <= len(token) <= 4):
        return False
    if not _CJK_TOKEN.match(token):
        return False
    if any(char in TOKEN_BOUNDARY_CHARS for char in token):
        return False
    return _NON_PLACE_PATTERN.search(token) is None


def _is_province_token(token: str) -> bool:
    return token in _PROVINCE_ONLY_SHORT_NAMES or token in _PROVINCE_LONG_FORMS


def _token_before(text: str, end: int, max_len: int = 4, min_len: int = 2) -> Optional[str]:
    """
    截取 end 位置之前的地名。
    优先匹配已知城市（从长到短），否则以最近的边界字符（动词、标点等）为起点。
    """
    for length in range(max_len, min_len - 1, -1):
        start = end - length
        if start < 0:
            continue
        candidate = text[start:end]
        if candidate in KNOWN_CITIES:
            return candidate

    window = text[max(0, end - max_len):end]
    cut = max((i for i, char in enumerate(window) if char in TOKEN_BOUNDARY_CHARS), default=-1)
    token = window[cut + 1:]
    if len(token) < min_len:
        return None
    return token


def _prefer_known_city(token: str) -> str:
    """“杭州西湖” → “杭州”：以已知城市开头时只保留城市"""
    for length in range(len(token), 1, -1):
        if token[:length] in KNOWN_CITIES:
            return token[:length]
    return token


def _city(raw: str, name: str) -> RegionMatch:
    return RegionMatch(raw=raw, name=strip_city_suffix(name), level=RegionLevel.CITY)


def _province(raw: str, name: str) -> RegionMatch:
    return RegionMatch(raw=raw, name=normalize_province(name), level=RegionLevel.PROVINCE)


# --- 规则策略，每个都是 text -> RegionMatch | None 的纯函数 ---

def match_municipality(text: str) -> Optional[RegionMatch]:
    """直辖市：无论上下文一律按城市处理"""
    hits = [(text.find(name), name) for name in MUNICIPALITIES if name in text]
    if not hits:
        return None
    position, name = min(hits)
    raw = name + "市" if text[position + len(name):position + len(name) + 1] == "市" else name
    return _city(raw, name)


def match_explicit_province(text: str) -> Optional[RegionMatch]:
    """带省级后缀的全称，例如“浙江省”、“广西壮族自治区”"""
    hits = [(text.find(name), -len(name), name) for name in _PROVINCE_LONG_FORMS if name in text]
    if hits:
        _, _, name = min(hits)
        return _province(name, name)

    for match in _PROVINCE_SUFFIX_PATTERN.finditer(text):
        if match.group(1) == "省":
            follower = text[match.end():match.end() + 1]
            preceder = text[match.start() - 1:match.start()] if match.start() else ""
            if follower in _NON_REGION_FOLLOWERS or preceder in _NON_REGION_PRECEDERS:
                continue
        token = _token_before(text, match.start())
        if not _is_valid_place_token(token):
            continue
        if any(word in token for word in TRAVEL_ACTION_WORDS):
            continue
        raw = token + match.group(1)
        return _province(raw, raw)
    return None


def _mentions_specific_place(text: str) -> bool:
    return any(name in text for name in KNOWN_CITIES) or any(name in text for name in PROVINCE_SHORT_NAMES)


def match_macro_region(text: str) -> Optional[RegionMatch]:
    """
    “长三角”、“东北”这类大区名称，映射到代表省份。
    句子里同时出现具体城市或省份时让位给后面的规则。
    """
    hits = [(text.find(alias), -len(alias), alias) for alias in REGION_ALIASES if alias in text]
    if not hits or _mentions_specific_place(text):
        return None
    _, _, alias = min(hits)
    target = REGION_ALIASES[alias]
    if target in MUNICIPALITIES:
        return _city(alias, target)
    return _province(alias, target)


def _search_all(pattern: re.Pattern, text: str) -> Iterator[re.Match]:
    # 逐个起点查找，被跳过的匹配不会吞掉与它重叠的后续候选
    position = 0
    while position <= len(text):
        match = pattern.search(text, position)
        if match is None:
            return
        yield match
        position = match.start() + 1


def match_travel_phrase(text: str) -> Optional[RegionMatch]:
    """自然语言出行句式：“在X旅游”、“以X为中心”、“去X玩”、“到X三日游”"""
    for pattern in _NL_TRAVEL_PATTERNS:
        for match in _search_all(pattern, text):
            start = match.start()
            # “现在”、“后来”这类词里的介词字不算
            if start and text[start - 1:start + 1] in NON_LOCATIVE_WORDS:
                continue
            token = _prefer_known_city(strip_city_suffix(match.group(1)))
            if not _is_valid_place_token(token):
                continue
            # 省份交给简称规则处理，避免把“去甘肃旅游”识别成城市
            if _is_province_token(token) or token in REGION_ALIASES:
                continue
            return _city(match.group(1), token)
    return None


def match_province_short_name(text: str) -> Optional[RegionMatch]:
    """省份简称，“吉林市”这类带“市”的写法留给城市规则"""
    hits = []
    for name in _PROVINCE_ONLY_SHORT_NAMES:
        start = text.find(name)
        while start != -1:
            if text[start + len(name):start + len(name) + 1] != "市":
                hits.append((start, name))
                break
            start = text.find(name, start + 1)
    if not hits:
        return None
    _, name = min(hits)
    return _province(name, name)


def match_city_with_suffix(text: str) -> Optional[RegionMatch]:
    """带“市”后缀的城市名，例如“丹东市”"""
    for index, char in enumerate(text):
        if char != "市" or index < 2:
            continue
        token = _token_before(text, index)
        if token is None:
            continue
        if token not in KNOWN_CITIES:
            if text[index - 1:index + 1] in _NON_CITY_MARKET_WORDS or not _is_valid_place_token(token):
                continue
        return _city(token + "市", token)
    return None


def match_intent_suffix(text: str) -> Optional[RegionMatch]:
    """出行意图后缀前的地名，例如“大理美食”、“杭州三日游”"""
    for match in _TRAVEL_SUFFIX_PATTERN.finditer(text):
        token = _token_before(text, match.start())
        if token is None:
            continue
        if token not in KNOWN_CITIES and not _is_valid_place_token(token):
            continue
        return _city(token, token)
    return None


def match_bare_token(text: str) -> Optional[RegionMatch]:
    """
    整句只有一个 2~4 字的词时当作城市名。
    这条规则非常宽松，单独输入的普通名词也会被当成目的地。
    """
    stripped = text.strip()
    if not _BARE_TOKEN.match(stripped):
        return None
    if _NON_PLACE_PATTERN.search(stripped):
        return None
    return _city(stripped, stripped)


HEURISTIC_STRATEGIES: Tuple[RegionStrategy, ...] = (
    match_municipality,
    match_explicit_province,
    match_macro_region,
    match_travel_phrase,
    match_province_short_name,
    match_city_with_suffix,
    match_intent_suffix,
    match_bare_token,
)


def extract_region(text: str, strategies: Sequence[RegionStrategy] = HEURISTIC_STRATEGIES) -> Optional[RegionMatch]:
    """按顺序执行规则策略，返回第一个命中的结果"""
    if not text or not text.strip():
        return None
    for strategy in strategies:
        result = strategy(text)
        if result is not None:
            logger.debug(f"🧭 [REGION_RULE] {strategy.__name__} 命中: {result.raw} → {result.name} ({result.level.value})")
            return result
    return None


def region_from_ai_payload(payload: Any) -> Optional[RegionMatch]:
    """
    校验 AI 返回的 {"name", "level"}，不合法时返回 None。
    直辖市一律视为城市；已知省份无论标成什么级别都按省份处理，
    其他名称即使标成省份也按城市处理（“苏州”不会变成“苏州省”）。
    """
    if not isinstance(payload, dict):
        return None
    name = payload.get("name")
    level = payload.get("level")
    if not isinstance(name, str) or not isinstance(level, str):
        return None
    name = name.strip()
    level = level.strip().lower()
    if not (2 <= len(name) <= 12) or not _CJK_TOKEN.match(name):
        return None
    if level not in (RegionLevel.CITY.value, RegionLevel.PROVINCE.value):
        return None

    short = strip_city_suffix(name)
    if short in MUNICIPALITIES or name in MUNICIPALITIES:
        return _city(name, short)
    if name in PROVINCE_SYNONYMS:
        return _province(name, name)
    if level == RegionLevel.PROVINCE.value:
        logger.info(f"ℹ️ [REGION_AI] {name} 不是已知省级行政区，按城市处理")
    return _city(name, clean_city_name(name))


class RegionExtractor:
    """规则识别 + 可选的 AI 识别"""

    def __init__(self, ai_service=None, enable_ai: Optional[bool] = None):
        self.ai_service = ai_service
        self.enable_ai = settings.ENABLE_AI_REGION_EXTRACTION if enable_ai is None else enable_ai

    def extract(self, text: str) -> Optional[RegionMatch]:
        """只用规则识别"""
        return extract_region(text)

    async def extract_with_ai(self, text: str) -> Optional[RegionMatch]:
        """先尝试 AI 识别，失败或结果不合法时回退到规则识别"""
        if self.enable_ai and self.ai_service is not None and text and text.strip():
            try:
                payload: Dict[str, Any] = await self.ai_service.extract_region(text)
                match = region_from_ai_payload(payload)
                if match is not None:
                    logger.info(f"🤖 [REGION_AI] AI 识别目的地: {match.name} ({match.level.value})")
                    return match
                logger.info(f"ℹ️ [REGION_AI] AI 结果不可用，使用规则识别: {payload}")
            except Exception as e:
                logger.warning(f"⚠️ [REGION_AI_FALLBACK] AI 区域识别失败，使用规则识别: {type(e).__name__}: {e}")

        return self.extract(text)
