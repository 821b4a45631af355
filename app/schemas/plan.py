"""旅游规划请求/响应模型"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.config import settings
from app.schemas.poi import PoiResult
from app.schemas.region import Suggestion


class ChatMessage(BaseModel):
    """对话历史中的一条消息"""
    type: Literal["user", "ai"] = Field(..., description="消息作者")
    content: str = Field(..., description="消息内容")
    data: Optional[Dict[str, Any]] = Field(None, description="AI 消息附带的结构化结果（含 pois）")

    @property
    def pois(self) -> List[Dict[str, Any]]:
        if not self.data:
            return []
        pois = self.data.get("pois") or []
        return [poi for poi in pois if isinstance(poi, dict)]


class TravelPlanRequest(BaseModel):
    """旅游规划请求"""
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(
        ...,
        min_length=1,
        max_length=settings.MAX_PROMPT_LENGTH,
        description="用户的旅游需求",
        examples=["北京故宫一日游"],
    )
    city: Optional[str] = Field(None, description="前端明确指定的城市/省份")
    chat_history: List[ChatMessage] = Field(default_factory=list, alias="chatHistory", description="对话历史（按时间顺序）")


class PlanDraft(BaseModel):
    """从 AI 回复中解析出的行程草案"""
    title: str = Field(..., description="行程标题")
    description: Optional[str] = Field(None, description="行程正文")
    keywords: List[str] = Field(default_factory=list, description="待搜索的景点名，为空表示无需新搜索")


class ConversationState(BaseModel):
    """解析 AI 回复时需要的对话上下文"""
    is_first_question: bool = True
    has_previous_plan: bool = False
    is_replanning: bool = False


class TravelPlanResponse(BaseModel):
    """旅游规划响应"""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, description="行程标题")
    description: Optional[str] = Field(None, description="行程正文或提示信息")
    pois: List[PoiResult] = Field(default_factory=list, description="经过区域校验的地点")
    error: Optional[str] = Field(None, description="面向用户的一句话错误信息")
    requires_location: Optional[bool] = Field(None, alias="requiresLocation", description="是否需要用户补充目的地")
    suggestions: Optional[List[Suggestion]] = Field(None, description="推荐目的地")
