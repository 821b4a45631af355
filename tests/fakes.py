"""测试用的假服务与候选构造函数"""

from typing import Dict, List, Optional, Tuple

from app.schemas.poi import Location, POICandidate


def make_candidate(
    name: str,
    city_name: Optional[str] = None,
    address: str = "",
    poi_type: Optional[str] = None,
    lat: float = 39.9,
    lng: float = 116.4,
    with_location: bool = True,
) -> POICandidate:
    return POICandidate(
        name=name,
        city_name=city_name,
        address=address,
        location=Location(lat=lat, lng=lng) if with_location else None,
        type=poi_type,
    )


class FakeAIService:
    """按顺序返回预设回复的 AI 服务"""

    is_configured = True

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None, region: Optional[dict] = None):
        self.replies = list(replies or [])
        self.error = error
        self.region = region if region is not None else {"name": None, "level": None}
        self.calls: List[Tuple[str, list, Optional[str]]] = []
        self.region_calls: List[str] = []

    async def generate_itinerary(self, prompt, history=(), scope_name=None):
        self.calls.append((prompt, list(history), scope_name))
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""

    async def extract_region(self, text):
        self.region_calls.append(text)
        return self.region


class FakePlacesService:
    """
    以 (keywords, city) 为键返回预设候选；
    值为异常实例时抛出该异常。
    """

    def __init__(self, responses: Optional[Dict[Tuple[str, Optional[str]], object]] = None):
        self.responses = responses or {}
        self.calls: List[Tuple[str, Optional[str]]] = []

    async def search_poi(self, keywords, city=None):
        self.calls.append((keywords, city))
        response = self.responses.get((keywords, city), [])
        if isinstance(response, Exception):
            raise response
        return list(response)


class SleepRecorder:
    """代替 asyncio.sleep，只记录等待时长"""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds):
        self.delays.append(seconds)
