"""
旅游规划主流程

国内范围检查 → 搜索范围解析（可能直接返回澄清提示）→ AI 生成行程 → 解析关键词 → POI 搜索与区域校验
"""

from typing import Optional

from app.schemas.plan import PlanDraft, TravelPlanRequest, TravelPlanResponse
from app.schemas.region import ResolvedScope, ScopeState
from app.services.ai_service import TravelAIService, classify_ai_error
from app.services.plan_parser import DEFAULT_PLAN_TITLE, PlanParser, build_conversation_state, extract_basic_keywords
from app.services.poi_search_service import PoiSearchService
from app.services.region_extractor import RegionExtractor, is_international_travel
from app.services.region_normalizer import province_short_name
from app.services.scope_resolver import ScopeResolver
from app.utils.logger import get_logger

logger = get_logger(__name__)

OUT_OF_SCOPE_ERROR = "抱歉，我们的旅游规划服务目前仅支持中国大陆地区。"
OUT_OF_SCOPE_TITLE = "服务范围提醒"
OUT_OF_SCOPE_DESCRIPTION = (
    "我们专注于为您提供国内旅游的精准规划服务，包括景点推荐、路线规划、美食指南等。"
    "如需国内旅游规划，请重新输入您的需求。"
)

GENERAL_CLARIFICATION_TITLE = "请告诉我您想去哪里"
GENERAL_CLARIFICATION_DESCRIPTION = "为了给您规划准确的行程，请先告诉我具体的目的地城市。以下是一些热门目的地推荐："
FALLBACK_DESCRIPTION = "AI 暂时无法生成详细行程，以下是根据您的输入找到的相关地点。"


def out_of_scope_response() -> TravelPlanResponse:
    return TravelPlanResponse(
        title=OUT_OF_SCOPE_TITLE,
        description=OUT_OF_SCOPE_DESCRIPTION,
        pois=[],
        error=OUT_OF_SCOPE_ERROR,
    )


def clarification_response(scope: ResolvedScope) -> TravelPlanResponse:
    """目的地不明确时，返回推荐目的地让用户选择"""
    if scope.state == ScopeState.PROVINCE:
        short = province_short_name(scope.province or "")
        title = f"{short}旅游：请选择城市"
        description = f"{scope.province}有很多值得一去的城市，请选择一个具体城市，我会为您规划详细行程："
    else:
        title = GENERAL_CLARIFICATION_TITLE
        description = GENERAL_CLARIFICATION_DESCRIPTION

    return TravelPlanResponse(
        title=title,
        description=description,
        pois=[],
        requires_location=True,
        suggestions=scope.suggestions,
    )


class TravelPlannerService:
    """一次请求的完整处理流程，所有中间状态都只在本次调用内有效"""

    def __init__(
        self,
        ai_service: Optional[TravelAIService] = None,
        poi_search: Optional[PoiSearchService] = None,
        scope_resolver: Optional[ScopeResolver] = None,
        plan_parser: Optional[PlanParser] = None,
    ):
        self.ai_service = ai_service or TravelAIService()
        self.poi_search = poi_search or PoiSearchService()
        # 没有配置密钥时不做 AI 区域识别，直接走规则
        region_ai = self.ai_service if getattr(self.ai_service, "is_configured", True) else None
        self.scope_resolver = scope_resolver or ScopeResolver(RegionExtractor(ai_service=region_ai))
        self.plan_parser = plan_parser or PlanParser()

    async def _draft_plan(self, request: TravelPlanRequest, scope: ResolvedScope):
        """生成并解析行程；AI 失败时降级为基础关键词，同时返回用户可读的错误信息"""
        state = build_conversation_state(request.chat_history, request.prompt)
        try:
            response_text = await self.ai_service.generate_itinerary(
                request.prompt, request.chat_history, scope.scope_name
            )
        except Exception as e:
            kind, message = classify_ai_error(e)
            logger.error(f"❌ [AI_ERROR] 行程生成失败 ({kind.value}): {type(e).__name__}: {e}")
            draft = PlanDraft(
                title=DEFAULT_PLAN_TITLE,
                description=FALLBACK_DESCRIPTION,
                keywords=extract_basic_keywords(request.prompt),
            )
            logger.info(f"🛟 [AI_FALLBACK] 使用基础关键词: {draft.keywords}")
            return draft, message

        return self.plan_parser.parse(response_text, state), None

    async def plan(self, request: TravelPlanRequest) -> TravelPlanResponse:
        logger.info(f"🚀 [PLAN_START] 收到规划请求: {request.prompt[:50]} (历史 {len(request.chat_history)} 条)")

        if is_international_travel(request.prompt):
            logger.info(f"🌏 [OUT_OF_SCOPE] 检测到国外旅游请求: {request.prompt[:50]}")
            return out_of_scope_response()

        scope = await self.scope_resolver.resolve(request.city, request.prompt, request.chat_history)
        if scope.requires_clarification:
            logger.info(f"❓ [CLARIFY] 目的地不明确 ({scope.state.value})，返回 {len(scope.suggestions)} 个推荐")
            return clarification_response(scope)

        draft, ai_error = await self._draft_plan(request, scope)

        if not draft.keywords:
            logger.info("⏭️ [POI_SKIP] 无需搜索新地点（追问或无关键词）")
            return TravelPlanResponse(title=draft.title, description=draft.description, pois=[], error=ai_error)

        pois = await self.poi_search.resolve_all(draft.keywords, scope.scope_name)
        logger.info(f"🏁 [PLAN_DONE] {draft.title}: {len(pois)} 个地点")
        return TravelPlanResponse(title=draft.title, description=draft.description, pois=pois, error=ai_error)
