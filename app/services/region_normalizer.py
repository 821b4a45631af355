"""
行政区名称规范化
省级名称统一为全称，城市名称去掉“市”和出行意图后缀
"""

from app.data.keywords import TRAVEL_INTENT_SUFFIXES
from app.data.regions import PROVINCE_LONG_TO_SHORT, PROVINCE_SUFFIXES, PROVINCE_SYNONYMS


def normalize_province(name: str) -> str:
    """
    把省级行政区的任意写法转换为标准全称。

    - "浙江" / "浙江省" → "浙江省"
    - "广西" / "广西自治区" → "广西壮族自治区"
    - "北京" → "北京市"
    - 未知名称默认按普通省份处理："某某" → "某某省"
    已经是全称的名称原样返回，因此重复调用结果不变。
    """
    cleaned = (name or "").strip()
    if cleaned in PROVINCE_SYNONYMS:
        return PROVINCE_SYNONYMS[cleaned]
    if cleaned.endswith(PROVINCE_SUFFIXES):
        return cleaned
    return cleaned + "省"


def province_short_name(name: str) -> str:
    """省级全称 → 简称（"黑龙江省" → "黑龙江"），未知名称去掉后缀后返回"""
    canonical = normalize_province(name)
    if canonical in PROVINCE_LONG_TO_SHORT:
        return PROVINCE_LONG_TO_SHORT[canonical]
    for suffix in PROVINCE_SUFFIXES:
        if canonical.endswith(suffix) and len(canonical) > len(suffix):
            return canonical[: -len(suffix)]
    return canonical


def strip_city_suffix(name: str) -> str:
    """去掉末尾的“市”"""
    cleaned = (name or "").strip()
    if cleaned.endswith("市") and len(cleaned) > 2:
        return cleaned[:-1]
    return cleaned


def clean_city_name(name: str) -> str:
    """
    用作搜索范围的城市名：去掉出行意图后缀和“市”后缀。
    "杭州旅游" → "杭州"，"丹东市" → "丹东"
    """
    cleaned = (name or "").strip()
    changed = True
    while changed:
        changed = False
        for suffix in TRAVEL_INTENT_SUFFIXES:
            if cleaned.endswith(suffix) and len(cleaned) - len(suffix) >= 2:
                cleaned = cleaned[: -len(suffix)]
                changed = True
                break
    return strip_city_suffix(cleaned)
