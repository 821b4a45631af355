"""POI 候选与结果模型"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SearchType(str, Enum):
    """候选来源的搜索方式"""
    CITY_PREFIXED = "cityPrefixed"  # “城市+关键词”搜索
    PLAIN = "plain"                 # 只用关键词搜索


class Location(BaseModel):
    lat: float
    lng: float


class POICandidate(BaseModel):
    """地图搜索返回的单个候选，评分在各阶段累加"""
    name: str = Field(..., description="POI 名称")
    city_name: Optional[str] = Field(None, description="所属城市")
    address: str = Field(default="", description="地址（多段地址已合并）")
    location: Optional[Location] = Field(None, description="坐标")
    type: Optional[str] = Field(None, description="POI 类型描述")
    search_type: SearchType = Field(default=SearchType.PLAIN, description="搜索方式")
    score: float = Field(default=0, ge=0, description="累计评分")

    def with_bonus(self, delta: float) -> "POICandidate":
        """返回加分后的新候选，原对象保持不变"""
        return self.model_copy(update={"score": self.score + delta})


class PoiResult(BaseModel):
    """最终返回给前端的地点"""
    name: str = Field(..., description="清理后的名称")
    city: Optional[str] = Field(None, description="城市")
    address: Optional[str] = Field(None, description="地址")
    lat: float = Field(..., description="纬度")
    lng: float = Field(..., description="经度")
