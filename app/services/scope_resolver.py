"""
搜索范围解析
把“前端指定城市 → 当前输入 → 历史用户消息 → 历史地点结果”中识别到的区域排成候选列表，
选出唯一的城市作为搜索范围；只确定到省份或完全没有目的地时返回澄清状态。
"""

import re
from typing import List, Optional, Sequence

from app.data.regions import FLAGSHIP_CITIES, PROVINCE_CITY_CATALOGUE, PROVINCIAL_CAPITALS
from app.schemas.plan import ChatMessage
from app.schemas.region import RegionLevel, RegionMatch, ResolvedScope, ScopeState, Suggestion
from app.services.region_extractor import RegionExtractor
from app.services.region_normalizer import clean_city_name, normalize_province
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TRIP_LENGTH = "三日游"
_TRIP_LENGTH_PATTERN = re.compile(r"([一二两三四五六七八九十\d]+)(?:日游|天)")


def trip_length_phrase(text: Optional[str]) -> str:
    """沿用用户输入里的天数（“五天” → “五日游”），没有时默认三日游"""
    match = _TRIP_LENGTH_PATTERN.search(text or "")
    if match:
        return f"{match.group(1)}日游"
    return DEFAULT_TRIP_LENGTH


def _suggestion(city: str, reason: str, trip_length: str) -> Suggestion:
    return Suggestion(label=f"{city}：{reason}", prompt=f"{city}{trip_length}")


def build_general_suggestions(trip_length: str = DEFAULT_TRIP_LENGTH) -> List[Suggestion]:
    """没有任何目的地信息时的热门城市推荐"""
    return [_suggestion(city, reason, trip_length) for city, reason in FLAGSHIP_CITIES]


def build_province_suggestions(province: str, trip_length: str = DEFAULT_TRIP_LENGTH) -> List[Suggestion]:
    """
    省份内的推荐城市。
    目录里没有的省份退回到省会；连省会都查不到时使用全国热门城市。
    """
    canonical = normalize_province(province)
    catalogue = PROVINCE_CITY_CATALOGUE.get(canonical)
    if catalogue:
        return [_suggestion(city, reason, trip_length) for city, reason in catalogue]

    capital = PROVINCIAL_CAPITALS.get(canonical)
    if capital:
        return [_suggestion(capital, f"{canonical}省会", trip_length)]

    logger.warning(f"⚠️ [SCOPE_CATALOGUE] 未收录的省份: {canonical}，使用热门城市推荐")
    return build_general_suggestions(trip_length)


def select_candidate(candidates: Sequence[RegionMatch]) -> Optional[RegionMatch]:
    """优先第一个城市级候选，没有时取第一个候选"""
    for candidate in candidates:
        if candidate.level == RegionLevel.CITY:
            return candidate
    return candidates[0] if candidates else None


def scope_from_candidates(candidates: Sequence[RegionMatch], trip_length: str = DEFAULT_TRIP_LENGTH) -> ResolvedScope:
    """根据候选列表决定解析状态"""
    best = select_candidate(candidates)
    if best is None:
        return ResolvedScope(state=ScopeState.GENERAL, suggestions=build_general_suggestions(trip_length))

    if best.level == RegionLevel.PROVINCE:
        province = normalize_province(best.name)
        return ResolvedScope(
            state=ScopeState.PROVINCE,
            match=best,
            display_name=best.raw,
            province=province,
            suggestions=build_province_suggestions(province, trip_length),
        )

    return ResolvedScope(
        state=ScopeState.RESOLVED,
        match=best,
        scope_name=clean_city_name(best.name),
        display_name=best.raw,
    )


class ScopeResolver:
    """搜索范围解析器，每次请求调用一次，不保存任何状态"""

    def __init__(self, extractor: Optional[RegionExtractor] = None):
        self.extractor = extractor or RegionExtractor()

    def _explicit_candidate(self, explicit_scope: str) -> Optional[RegionMatch]:
        # 前端传来的城市可能是“杭州市”、“浙江”这类写法，也可能是识别规则覆盖不到的小地名
        match = self.extractor.extract(explicit_scope)
        if match is not None:
            return match
        name = clean_city_name(explicit_scope)
        if not name:
            return None
        return RegionMatch(raw=explicit_scope.strip(), name=name, level=RegionLevel.CITY)

    def _history_candidates(self, history: Sequence[ChatMessage]) -> List[RegionMatch]:
        """
        历史消息从新到旧扫描：先看用户消息，遇到城市级结果即停止；
        用户消息里没有城市时，再看 AI 回复中已返回地点的城市。
        """
        candidates: List[RegionMatch] = []
        for message in reversed(history):
            if message.type != "user":
                continue
            match = self.extractor.extract(message.content)
            if match is None:
                continue
            candidates.append(match)
            if match.is_city:
                logger.info(f"🕘 [SCOPE_HISTORY] 从历史用户消息推断目的地: {match.name}")
                return candidates

        for message in reversed(history):
            if message.type != "ai":
                continue
            city = next((poi.get("city") for poi in message.pois if poi.get("city")), None)
            if not isinstance(city, str):
                continue
            name = clean_city_name(city)
            if name:
                logger.info(f"🕘 [SCOPE_HISTORY] 从历史地点结果推断目的地: {name}")
                candidates.append(RegionMatch(raw=city, name=name, level=RegionLevel.CITY))
                break
        return candidates

    async def build_candidates(
        self,
        explicit_scope: Optional[str],
        current_text: str,
        history: Sequence[ChatMessage] = (),
    ) -> List[RegionMatch]:
        candidates: List[RegionMatch] = []

        if explicit_scope and explicit_scope.strip():
            explicit = self._explicit_candidate(explicit_scope)
            if explicit is not None:
                candidates.append(explicit)

        current = await self.extractor.extract_with_ai(current_text)
        if current is not None:
            candidates.append(current)

        if not any(candidate.is_city for candidate in candidates) and history:
            candidates.extend(self._history_candidates(history))

        return candidates

    async def resolve(
        self,
        explicit_scope: Optional[str],
        current_text: str,
        history: Sequence[ChatMessage] = (),
    ) -> ResolvedScope:
        candidates = await self.build_candidates(explicit_scope, current_text, history)
        resolved = scope_from_candidates(candidates, trip_length_phrase(current_text))

        summary = ", ".join(f"{c.name}({c.level.value})" for c in candidates) or "无"
        logger.info(f"🔍 [SCOPE_RESOLVE] 候选: {summary} → {resolved.state.value} {resolved.scope_name or resolved.province or ''}")
        return resolved
