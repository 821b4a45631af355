"""
AI 旅游规划路由
POST /api/v1/ai/plan
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.schemas.plan import TravelPlanRequest, TravelPlanResponse
from app.services.travel_planner_service import TravelPlannerService
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/v1/ai",
    tags=["AI Travel Plan"],
)

SERVICE_UNAVAILABLE_ERROR = "服务暂时不可用，请稍后重试"

# 服务实例全局复用，AI/高德客户端只初始化一次
_planner_service_instance = None


def get_travel_planner_service() -> TravelPlannerService:
    """TravelPlannerService 单例依赖"""
    global _planner_service_instance
    if _planner_service_instance is None:
        logger.info("🔧 [PLANNER] 创建 TravelPlannerService 实例")
        _planner_service_instance = TravelPlannerService()
    return _planner_service_instance


@router.post("/plan", response_model=TravelPlanResponse, response_model_exclude_none=True, response_model_by_alias=True)
async def create_travel_plan(
    request: TravelPlanRequest,
    service: TravelPlannerService = Depends(get_travel_planner_service),
):
    """
    根据用户输入（及对话历史）生成行程并返回地图地点。
    目的地不明确时返回 requiresLocation + suggestions，国外目的地返回服务范围提醒。
    """
    try:
        return await service.plan(request)
    except Exception as e:
        # 原始错误只写日志，不返回给调用方
        logger.error(f"❌ [PLAN_ERROR] 旅游规划处理失败: {type(e).__name__}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": SERVICE_UNAVAILABLE_ERROR,
                "title": "旅游规划",
                "description": "抱歉，服务暂时不可用，请稍后重试。",
                "pois": [],
            },
        )
