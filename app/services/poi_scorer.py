"""
POI 候选评分与区域校验

每个阶段都是纯函数：接收候选列表，返回新的候选列表（分数通过 with_bonus 累加），
不修改传入的对象，便于单独测试每个阶段。

评分规则：
- 基础分：城市前缀搜索 100，普通搜索 50
- 区域预过滤：城市/地址包含范围名 +50，“市”后缀放宽匹配 +30，东北三省（含下辖城市）所属省份匹配 +20，其余丢弃
- 名称包含关键词 +40
- 类型或名称带旅游类标识 +20
"""

import re
from typing import Iterable, List, Optional, Sequence

from app.data.keywords import POI_STATUS_MARKERS, TOURIST_TYPE_MARKERS
from app.data.regions import NORTHEAST_CITY_PROVINCES, NORTHEAST_PROVINCES
from app.schemas.poi import POICandidate, PoiResult, SearchType
from app.services.region_normalizer import province_short_name, strip_city_suffix

BASE_SCORES = {
    SearchType.CITY_PREFIXED: 100,
    SearchType.PLAIN: 50,
}

EXACT_REGION_BONUS = 50
RELAXED_SUFFIX_BONUS = 30
PROVINCE_RELAXED_BONUS = 20
KEYWORD_NAME_BONUS = 40
TOURIST_CATEGORY_BONUS = 20

_STATUS_PATTERN = re.compile(
    r"[(（](?:" + "|".join(re.escape(marker) for marker in POI_STATUS_MARKERS) + r")[)）]"
)


def _contains(candidate: POICandidate, needle: str) -> bool:
    if not needle:
        return False
    return needle in (candidate.city_name or "") or needle in (candidate.address or "")


def tag_candidates(candidates: Iterable[POICandidate], search_type: SearchType) -> List[POICandidate]:
    """标记搜索方式并赋基础分"""
    base = BASE_SCORES[search_type]
    return [c.model_copy(update={"search_type": search_type, "score": base}) for c in candidates]


def northeast_province(scope: str) -> Optional[str]:
    """范围属于东北三省时返回省份简称（范围可以是省份或其下辖城市）"""
    city = strip_city_suffix(scope)
    if city in NORTHEAST_CITY_PROVINCES:
        return NORTHEAST_CITY_PROVINCES[city]
    short = province_short_name(scope)
    return short if short in NORTHEAST_PROVINCES else None


def region_match_bonus(candidate: POICandidate, scope: str) -> Optional[int]:
    """区域匹配加分，不匹配时返回 None"""
    if _contains(candidate, scope):
        return EXACT_REGION_BONUS

    relaxed = scope[:-1] if scope.endswith("市") else scope + "市"
    if len(relaxed) >= 2 and _contains(candidate, relaxed):
        return RELAXED_SUFFIX_BONUS

    province_short = northeast_province(scope)
    if province_short and _contains(candidate, province_short):
        return PROVINCE_RELAXED_BONUS
    return None


def apply_region_filter(candidates: Sequence[POICandidate], scope: Optional[str]) -> List[POICandidate]:
    """区域预过滤：丢弃不在范围内的候选，保留的按匹配程度加分"""
    if not scope:
        return list(candidates)
    survivors = []
    for candidate in candidates:
        bonus = region_match_bonus(candidate, scope)
        if bonus is not None:
            survivors.append(candidate.with_bonus(bonus))
    return survivors


def keyword_bonus(candidate: POICandidate, keyword: str) -> int:
    return KEYWORD_NAME_BONUS if keyword and keyword in candidate.name else 0


def category_bonus(candidate: POICandidate) -> int:
    candidate_type = candidate.type or ""
    if any(marker in candidate_type or marker in candidate.name for marker in TOURIST_TYPE_MARKERS):
        return TOURIST_CATEGORY_BONUS
    return 0


def apply_bonuses(candidates: Sequence[POICandidate], keyword: str) -> List[POICandidate]:
    return [c.with_bonus(keyword_bonus(c, keyword) + category_bonus(c)) for c in candidates]


def select_best(candidates: Sequence[POICandidate]) -> Optional[POICandidate]:
    """分数最高的候选；同分时保持原有顺序（城市前缀搜索的结果在前）"""
    if not candidates:
        return None
    return sorted(candidates, key=lambda c: c.score, reverse=True)[0]


def verify_region(candidate: POICandidate, scope: Optional[str]) -> bool:
    """
    最终校验：城市/地址包含范围名（或去掉“市”的范围名），
    或者候选自身的城市简称包含在范围名中。
    """
    if not scope:
        return True
    if _contains(candidate, scope):
        return True
    short_scope = strip_city_suffix(scope)
    if short_scope != scope and _contains(candidate, short_scope):
        return True
    candidate_city = strip_city_suffix(candidate.city_name or "")
    return len(candidate_city) >= 2 and candidate_city in scope


def clean_poi_name(name: str) -> str:
    """去掉“(暂停开放)”之类的营业状态标注"""
    cleaned = _STATUS_PATTERN.sub("", name or "")
    return re.sub(r"\s+", " ", cleaned).strip()


def to_poi_result(candidate: POICandidate, scope: Optional[str] = None) -> Optional[PoiResult]:
    """没有坐标的候选无法在地图上标记，返回 None"""
    if candidate.location is None:
        return None
    return PoiResult(
        name=clean_poi_name(candidate.name),
        city=candidate.city_name or scope,
        address=candidate.address or None,
        lat=candidate.location.lat,
        lng=candidate.location.lng,
    )


def result_in_region(result: PoiResult, scope: str) -> bool:
    short_scope = scope.replace("市", "")
    for field in (result.city or "", result.address or ""):
        if scope in field or (short_scope and short_scope in field):
            return True
    return False


def filter_results_by_region(results: Sequence[PoiResult], scope: Optional[str]) -> List[PoiResult]:
    """全部关键词处理完后的最后一道区域校验"""
    if not scope:
        return list(results)
    return [result for result in results if result_in_region(result, scope)]


def dedupe_results(results: Iterable[PoiResult]) -> List[PoiResult]:
    """按名称 + 坐标去重，保留先出现的"""
    seen = set()
    unique = []
    for result in results:
        key = (result.name, round(result.lat, 6), round(result.lng, 6))
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)
    return unique
