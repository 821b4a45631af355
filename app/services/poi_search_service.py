"""
POI 搜索流程
对每个关键词依次执行：候选搜索 → 区域预过滤 → 评分 → 选优 → 最终校验 → 输出。
关键词严格串行处理，两次搜索之间留出间隔以避开高德的 QPS 限制。
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

from app.config import settings
from app.schemas.poi import POICandidate, PoiResult, SearchType
from app.services.amap_service import AmapAPIError, AmapPlacesService
from app.services.poi_scorer import (
    apply_bonuses, apply_region_filter, dedupe_results, filter_results_by_region,
    select_best, tag_candidates, to_poi_result, verify_region
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class PoiSearchService:
    """把关键词列表解析为经过区域校验的地点列表"""

    def __init__(self, places_service: Optional[AmapPlacesService] = None, sleep: Sleep = asyncio.sleep):
        self.places_service = places_service or AmapPlacesService()
        self._sleep = sleep

    async def collect_candidates(self, keyword: str, scope: Optional[str]) -> List[POICandidate]:
        """有范围时先搜“范围+关键词”，再在范围内搜关键词本身；没有范围时只搜一次"""
        if not scope:
            plain = await self.places_service.search_poi(keyword)
            return tag_candidates(plain, SearchType.PLAIN)

        query = keyword if keyword.startswith(scope) else f"{scope}{keyword}"
        prefixed = await self.places_service.search_poi(query, scope)
        logger.debug(f"🔎 [POI_STRATEGY_1] 城市前缀搜索 {query}: {len(prefixed)} 个")

        await self._sleep(settings.SEARCH_STRATEGY_INTERVAL_SECONDS)

        plain = await self.places_service.search_poi(keyword, scope)
        logger.debug(f"🔎 [POI_STRATEGY_2] 常规搜索 {keyword}: {len(plain)} 个")

        return tag_candidates(prefixed, SearchType.CITY_PREFIXED) + tag_candidates(plain, SearchType.PLAIN)

    async def resolve_poi(self, keyword: str, scope: Optional[str]) -> Optional[PoiResult]:
        """单个关键词的完整流程，最优候选未通过最终校验时直接放弃该关键词"""
        candidates = await self.collect_candidates(keyword, scope)
        filtered = apply_region_filter(candidates, scope)
        if scope and len(filtered) < len(candidates):
            logger.info(f"🧹 [POI_FILTER] {keyword}: {len(filtered)}/{len(candidates)} 个候选位于 {scope}")

        scored = apply_bonuses(filtered, keyword)
        best = select_best(scored)
        if best is None:
            logger.info(f"⚠️ [POI_NOT_FOUND] 关键词 {keyword} 在 {scope or '全国'} 范围内没有有效地点")
            return None

        if not verify_region(best, scope):
            logger.info(f"❌ [POI_VERIFY_FAIL] {best.name} ({best.city_name}) 不属于 {scope}，放弃关键词 {keyword}")
            return None

        result = to_poi_result(best, scope)
        if result is None:
            logger.info(f"⚠️ [POI_NO_LOCATION] {best.name} 没有可用坐标")
            return None

        logger.info(f"✅ [POI_SELECTED] {result.name} (评分 {best.score}, 城市 {result.city}, 方式 {best.search_type.value})")
        return result

    async def resolve_all(self, keywords: Sequence[str], scope: Optional[str]) -> List[PoiResult]:
        """
        依次处理所有关键词。
        单个关键词失败只记录日志并跳过；遇到限流时逐步加长下一次搜索前的等待。
        """
        results: List[PoiResult] = []
        backoff = 0.0

        for keyword in keywords:
            if backoff:
                await self._sleep(backoff)
            elif results:
                await self._sleep(settings.SEARCH_INTERVAL_SECONDS)

            try:
                result = await self.resolve_poi(keyword, scope)
            except AmapAPIError as e:
                if e.is_rate_limited:
                    backoff = min(
                        backoff * 2 if backoff else settings.RATE_LIMIT_BACKOFF_SECONDS,
                        settings.RATE_LIMIT_BACKOFF_MAX_SECONDS,
                    )
                    logger.warning(f"🚦 [POI_RATE_LIMIT] 搜索 {keyword} 触发限流，{backoff} 秒后继续: {e}")
                else:
                    logger.error(f"❌ [POI_SEARCH_ERROR] 搜索 {keyword} 失败: {e}")
                continue
            except Exception as e:
                logger.error(f"❌ [POI_SEARCH_ERROR] 搜索 {keyword} 失败: {type(e).__name__}: {e}")
                continue

            backoff = 0.0
            if result is not None:
                results.append(result)

        unique = dedupe_results(results)
        final = filter_results_by_region(unique, scope)
        if scope:
            logger.info(f"✅ [POI_FINAL_CHECK] {len(final)}/{len(unique)} 个地点符合 {scope} 范围")
        return final
