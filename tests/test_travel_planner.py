"""规划主流程测试：AI 与高德均为假实现"""

import asyncio

import pytest

from app.config import settings
from app.schemas.plan import ChatMessage, TravelPlanRequest
from app.services.poi_search_service import PoiSearchService
from app.services.travel_planner_service import (
    FALLBACK_DESCRIPTION, GENERAL_CLARIFICATION_TITLE, OUT_OF_SCOPE_ERROR, OUT_OF_SCOPE_TITLE, TravelPlannerService
)
from tests.fakes import FakeAIService, FakePlacesService, SleepRecorder, make_candidate

HANGZHOU_PLAN = """标题：杭州三日游
📍 推荐景点：
第一天：西湖
第二天：灵隐寺
关键景点：西湖，灵隐寺"""

DETAIL_REPLY = "【详细规划】第三天具体行程安排：\n9:00-12:00 灵隐寺 - 建议早到"

HANGZHOU_PLACES = {
    ("杭州西湖", "杭州"): [make_candidate("西湖风景名胜区", "杭州市", "西湖区", lat=30.24, lng=120.14)],
    ("西湖", "杭州"): [make_candidate("西湖公园", "福州市", "鼓楼区", lat=26.1, lng=119.3)],
    ("杭州灵隐寺", "杭州"): [make_candidate("灵隐寺(营业中)", "杭州市", "法云弄1号", lat=30.24, lng=120.10)],
}


def _planner(ai, places, scope_resolver):
    poi_search = PoiSearchService(places_service=places, sleep=SleepRecorder())
    return TravelPlannerService(ai_service=ai, poi_search=poi_search, scope_resolver=scope_resolver)


def _plan(planner, prompt, history=(), city=None):
    request = TravelPlanRequest(prompt=prompt, city=city, chat_history=list(history))
    return asyncio.run(planner.plan(request))


def test_city_request_produces_verified_pois(scope_resolver):
    ai = FakeAIService(replies=[HANGZHOU_PLAN])
    places = FakePlacesService(HANGZHOU_PLACES)

    response = _plan(_planner(ai, places, scope_resolver), "杭州三日游")

    assert response.title == "杭州三日游"
    assert response.error is None
    assert response.requires_location is None
    assert [poi.name for poi in response.pois] == ["西湖风景名胜区", "灵隐寺"]
    assert all(poi.city == "杭州市" for poi in response.pois)
    # 行程生成带上了区域约束
    assert ai.calls[0][2] == "杭州"


def test_province_request_asks_for_city(scope_resolver):
    ai = FakeAIService(replies=[HANGZHOU_PLAN])
    places = FakePlacesService()

    response = _plan(_planner(ai, places, scope_resolver), "河南省旅游")

    assert response.requires_location is True
    assert response.title == "河南旅游：请选择城市"
    assert response.pois == []
    assert any(s.prompt.startswith("郑州") for s in response.suggestions)
    assert ai.calls == []
    assert places.calls == []


def test_province_short_name_asks_for_city(scope_resolver):
    ai = FakeAIService(replies=[HANGZHOU_PLAN])
    places = FakePlacesService()

    response = _plan(_planner(ai, places, scope_resolver), "甘肃三日游")

    assert response.requires_location is True
    assert response.title == "甘肃旅游：请选择城市"
    assert "兰州三日游" in [s.prompt for s in response.suggestions]
    assert ai.calls == []
    assert places.calls == []


def test_municipality_landmark_request_searches_with_city_prefix(scope_resolver):
    ai = FakeAIService(replies=["标题：北京故宫一日游\n关键景点：故宫"])
    places = FakePlacesService({("北京故宫", "北京"): [make_candidate("故宫博物院", "北京市", "东城区")]})

    response = _plan(_planner(ai, places, scope_resolver), "北京故宫一日游")

    assert ai.calls[0][2] == "北京"
    assert places.calls[0] == ("北京故宫", "北京")
    assert response.title == "北京故宫一日游"
    assert [poi.name for poi in response.pois] == ["故宫博物院"]


def test_unknown_destination_asks_for_city(scope_resolver):
    ai = FakeAIService()
    response = _plan(_planner(ai, FakePlacesService(), scope_resolver), "我想出去玩几天")
    assert response.requires_location is True
    assert response.title == GENERAL_CLARIFICATION_TITLE
    assert response.suggestions
    assert ai.calls == []


def test_international_request_is_rejected(scope_resolver):
    ai = FakeAIService(replies=[HANGZHOU_PLAN])
    places = FakePlacesService()

    response = _plan(_planner(ai, places, scope_resolver), "日本东京五日游")

    assert response.title == OUT_OF_SCOPE_TITLE
    assert response.error == OUT_OF_SCOPE_ERROR
    assert response.pois == []
    assert ai.calls == []
    assert places.calls == []


def test_follow_up_keeps_existing_markers(scope_resolver):
    history = [
        ChatMessage(type="user", content="杭州三日游"),
        ChatMessage(type="ai", content=HANGZHOU_PLAN, data={"pois": [{"name": "西湖", "city": "杭州市"}]}),
    ]
    ai = FakeAIService(replies=[DETAIL_REPLY])
    places = FakePlacesService(HANGZHOU_PLACES)

    response = _plan(_planner(ai, places, scope_resolver), "第三天怎么玩", history)

    assert response.title == "第三天具体行程安排"
    assert response.description == DETAIL_REPLY
    assert response.pois == []
    assert places.calls == []
    # 范围从历史中推断
    assert ai.calls[0][2] == "杭州"
    assert len(ai.calls[0][1]) == 2


def test_explicit_city_is_used_as_scope(scope_resolver):
    ai = FakeAIService(replies=["标题：成都美食\n关键景点：宽窄巷子"])
    places = FakePlacesService({("成都宽窄巷子", "成都"): [make_candidate("宽窄巷子", "成都市")]})

    response = _plan(_planner(ai, places, scope_resolver), "推荐些美食", city="成都市")

    assert ai.calls[0][2] == "成都"
    assert [poi.name for poi in response.pois] == ["宽窄巷子"]


def test_ai_failure_degrades_to_basic_keywords(scope_resolver):
    ai = FakeAIService(error=asyncio.TimeoutError())
    places = FakePlacesService({("北京", "北京"): [make_candidate("天安门广场", "北京市", "东城区")]})

    response = _plan(_planner(ai, places, scope_resolver), "北京三日游")

    assert response.error == "AI响应超时，请稍后重试"
    assert response.description == FALLBACK_DESCRIPTION
    assert [poi.name for poi in response.pois] == ["天安门广场"]
    assert places.calls[0] == ("北京", "北京")


def test_ai_failure_message_hides_raw_error(scope_resolver):
    ai = FakeAIService(error=ValueError("internal stack detail"))
    response = _plan(_planner(ai, FakePlacesService(), scope_resolver), "杭州三日游")
    assert response.error == "AI服务暂时出现问题，请稍后重试"
    assert "internal" not in (response.description or "")


def test_region_ai_pass_identifies_province(monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_AI_REGION_EXTRACTION", True)
    ai = FakeAIService(region={"name": "浙江省", "level": "province"})
    planner = TravelPlannerService(ai_service=ai, poi_search=PoiSearchService(FakePlacesService(), sleep=SleepRecorder()))

    response = _plan(planner, "想去那边看看海")

    assert ai.region_calls == ["想去那边看看海"]
    assert response.requires_location is True
    assert response.title == "浙江旅游：请选择城市"


def test_region_ai_pass_is_off_without_credentials():
    ai = FakeAIService()
    ai.is_configured = False
    planner = TravelPlannerService(ai_service=ai, poi_search=PoiSearchService(FakePlacesService(), sleep=SleepRecorder()))
    assert planner.scope_resolver.extractor.ai_service is None


@pytest.mark.parametrize("prompt", ["韩国首尔", "想出国看看", "巴厘岛度假"])
def test_international_keywords(scope_resolver, prompt):
    response = _plan(_planner(FakeAIService(), FakePlacesService(), scope_resolver), prompt)
    assert response.error == OUT_OF_SCOPE_ERROR
