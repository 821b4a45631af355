"""
高德地图 Web 服务 - 关键字搜索（/v3/place/text）
"""

from typing import Any, Dict, List, Optional

import httpx

from app.config import settings
from app.schemas.poi import Location, POICandidate, SearchType
from app.utils.logger import get_logger

logger = get_logger(__name__)

PLACE_TEXT_PATH = "/v3/place/text"

# 高德的限流错误码
RATE_LIMIT_INFOCODES = frozenset({"10004", "10019", "10020", "10021"})
RATE_LIMIT_INFO_MARKERS = ("EXCEEDED_THE_LIMIT", "ACCESS_TOO_FREQUENT")


class AmapAPIError(Exception):
    """高德接口返回 status != "1" 或请求失败"""

    def __init__(self, info: str, infocode: str = ""):
        self.info = info or "UNKNOWN_ERROR"
        self.infocode = infocode or ""
        super().__init__(f"{self.info} ({self.infocode})" if self.infocode else self.info)

    @property
    def is_rate_limited(self) -> bool:
        if self.infocode in RATE_LIMIT_INFOCODES:
            return True
        return any(marker in self.info for marker in RATE_LIMIT_INFO_MARKERS)


def parse_location(value: Any) -> Optional[Location]:
    """解析 "lng,lat" 格式的坐标，格式不对时返回 None"""
    if not isinstance(value, str) or "," not in value:
        return None
    lng_text, _, lat_text = value.partition(",")
    try:
        lng = float(lng_text.strip())
        lat = float(lat_text.strip())
    except ValueError:
        return None
    return Location(lat=lat, lng=lng)


def _as_text(value: Any, separator: str = "") -> str:
    # 高德在字段为空时返回 []，多段地址也可能是列表
    if isinstance(value, list):
        return separator.join(str(item) for item in value if item)
    if value is None:
        return ""
    return str(value)


def to_candidate(poi: Dict[str, Any]) -> POICandidate:
    """把高德返回的单条 POI 转换为候选对象"""
    return POICandidate(
        name=_as_text(poi.get("name")),
        city_name=_as_text(poi.get("cityname")) or None,
        address=_as_text(poi.get("address")),
        location=parse_location(poi.get("location")),
        type=_as_text(poi.get("type")) or None,
        search_type=SearchType.PLAIN,
    )


class AmapPlacesService:
    """高德关键字搜索客户端"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.AMAP_API_KEY
        self.base_url = (base_url or settings.AMAP_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.AMAP_TIMEOUT_SECONDS
        self.page_size = page_size if page_size is not None else settings.AMAP_PAGE_SIZE
        self._transport = transport

        if not self.api_key:
            logger.warning("⚠️ AMAP_API_KEY 未设置，地点搜索将不可用")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def search_poi(self, keywords: str, city: Optional[str] = None) -> List[POICandidate]:
        """
        关键字搜索。传入 city 时限定在该城市内（citylimit=true）。
        返回的候选未打分；search_type 由调用方标记。
        """
        if not self.api_key:
            raise AmapAPIError("AMAP_API_KEY_NOT_CONFIGURED")

        params = {
            "key": self.api_key,
            "keywords": keywords,
            "offset": self.page_size,
            "page": 1,
            "extensions": "base",
        }
        if city:
            params["city"] = city
            params["citylimit"] = "true"

        logger.debug(f"🗺️ [AMAP_SEARCH] keywords={keywords}, city={city or '-'}")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.get(self.base_url + PLACE_TEXT_PATH, params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(f"❌ [AMAP_HTTP_ERROR] HTTP 错误: {e.response.status_code}")
                raise AmapAPIError(f"HTTP_{e.response.status_code}") from e
            except httpx.TimeoutException as e:
                logger.error(f"⏰ [AMAP_TIMEOUT] 高德接口请求超时: {keywords}")
                raise AmapAPIError("REQUEST_TIMEOUT") from e
            except httpx.HTTPError as e:
                logger.error(f"❌ [AMAP_NETWORK_ERROR] 请求失败: {e}")
                raise AmapAPIError("NETWORK_ERROR") from e

        data = response.json()
        if str(data.get("status")) != "1":
            error = AmapAPIError(str(data.get("info", "")), str(data.get("infocode", "")))
            logger.warning(f"⚠️ [AMAP_API_ERROR] {keywords}: {error}")
            raise error

        pois = data.get("pois") or []
        candidates = [to_candidate(poi) for poi in pois if isinstance(poi, dict) and poi.get("name")]
        logger.info(f"✅ [AMAP_RESULT] {keywords}: {len(candidates)} 个候选")
        return candidates
