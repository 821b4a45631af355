"""区域识别与范围解析相关的数据模型"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RegionLevel(str, Enum):
    """行政级别"""
    CITY = "city"
    PROVINCE = "province"


class RegionMatch(BaseModel):
    """一次区域识别的结果，创建后不可修改"""
    model_config = ConfigDict(frozen=True)

    raw: str = Field(..., description="原文中匹配到的片段")
    name: str = Field(..., description="规范化后的名称（省级为全称，市级不带“市”后缀）")
    level: RegionLevel = Field(..., description="行政级别")

    @property
    def is_city(self) -> bool:
        return self.level == RegionLevel.CITY


class ScopeState(str, Enum):
    """范围解析的三种结果"""
    RESOLVED = "resolved"      # 已确定城市，可以规划
    PROVINCE = "province"      # 只确定到省，需要用户选择城市
    GENERAL = "general"        # 完全没有目的地信息


class Suggestion(BaseModel):
    """澄清提示中的候选项，prompt 可以原样作为下一次请求提交"""
    label: str = Field(..., description="展示文本")
    prompt: str = Field(..., description="可直接重新提交的请求文本")


class ResolvedScope(BaseModel):
    """范围解析器的输出"""
    state: ScopeState = Field(..., description="解析状态")
    match: Optional[RegionMatch] = Field(None, description="选中的区域")
    scope_name: Optional[str] = Field(None, description="用于 POI 搜索的城市名")
    display_name: Optional[str] = Field(None, description="原文中的目的地写法")
    province: Optional[str] = Field(None, description="省级澄清时的省份全称")
    suggestions: List[Suggestion] = Field(default_factory=list, description="澄清时的推荐目的地")

    @property
    def requires_clarification(self) -> bool:
        return self.state != ScopeState.RESOLVED
