"""AI 回复解析测试"""

from app.schemas.plan import ChatMessage, ConversationState
from app.services.plan_parser import (
    PlanParser, build_conversation_state, clean_markdown, detect_replanning_intent,
    extract_basic_keywords, extract_landmarks, split_keywords
)

NEW_PLAN = """标题：杭州三日游
📍 推荐景点：
**第一天**：西湖、断桥残雪
第二天：灵隐寺、飞来峰
💡 实用贴士：建议地铁出行
💰 费用预算：约 1500 元
关键景点：西湖，灵隐寺、飞来峰|河坊街,西湖"""

DETAIL_REPLY = """【详细规划】第三天具体行程安排：
8:00-9:00 早餐
9:00-12:00 灵隐寺 - 建议早到"""

FOLLOW_UP_STATE = ConversationState(is_first_question=False, has_previous_plan=True, is_replanning=False)

parser = PlanParser()


def test_new_plan_is_parsed():
    draft = parser.parse(NEW_PLAN, ConversationState())
    assert draft.title == "杭州三日游"
    assert draft.keywords == ["西湖", "灵隐寺", "飞来峰", "河坊街"]
    assert "第一天：西湖" in draft.description
    assert "关键景点" not in draft.description
    assert "**" not in draft.description


def test_detail_marker_means_follow_up():
    draft = parser.parse(DETAIL_REPLY, FOLLOW_UP_STATE)
    assert draft.keywords == []
    assert draft.title == "第三天具体行程安排"
    assert draft.description == DETAIL_REPLY


def test_reply_without_markers_on_later_turn_is_follow_up():
    reply = "第三天可以去灵隐寺，然后去龙井村喝茶。"
    draft = parser.parse(reply, FOLLOW_UP_STATE)
    assert draft.keywords == []
    assert draft.description == reply


def test_replanning_forces_new_plan():
    state = ConversationState(is_first_question=False, has_previous_plan=True, is_replanning=True)
    draft = parser.parse(NEW_PLAN, state)
    assert draft.keywords

    reply = "推荐去西溪湿地公园和宋城，还有南宋御街。"
    draft = parser.parse(reply, state)
    assert draft.keywords  # 没有关键景点标记时从正文中提取


def test_first_question_without_markers_uses_landmark_fallback():
    reply = "可以先去西溪湿地公园，再去六和塔和雷峰塔，晚上逛河坊街"
    draft = parser.parse(reply, ConversationState())
    assert draft.title == "旅游行程规划"
    assert draft.keywords == ["西溪湿地公园", "河坊街"]


def test_body_without_recommend_marker():
    reply = "标题：成都美食之旅\n第一天：宽窄巷子\n关键景点：宽窄巷子"
    draft = parser.parse(reply, ConversationState())
    assert draft.title == "成都美食之旅"
    assert draft.description == "第一天：宽窄巷子"
    assert draft.keywords == ["宽窄巷子"]


def test_split_keywords_filters_and_caps():
    text = "，".join(f"景点{i}" for i in range(20)) + "，" + "长" * 60 + "， ，景点1"
    keywords = split_keywords(text)
    assert len(keywords) == 15
    assert len(set(keywords)) == 15
    assert all(0 < len(k) < 50 for k in keywords)


def test_extract_landmarks_dedupes_and_caps():
    text = "\n".join(f"第{i}站景点公园" for i in range(30))
    keywords = extract_landmarks(text)
    assert len(keywords) <= 15
    assert len(keywords) == len(set(keywords))


def test_detect_replanning_intent():
    assert detect_replanning_intent("帮我重新规划一下")
    assert detect_replanning_intent("换个方案吧")
    assert not detect_replanning_intent("第三天怎么玩")
    assert not detect_replanning_intent("")


def test_build_conversation_state():
    history = [
        ChatMessage(type="user", content="杭州三日游"),
        ChatMessage(type="ai", content=NEW_PLAN, data={"pois": [{"name": "西湖", "city": "杭州市", "lat": 30.2, "lng": 120.1}]}),
    ]
    state = build_conversation_state(history, "第三天怎么玩")
    assert state == FOLLOW_UP_STATE
    assert build_conversation_state([], "杭州").is_first_question
    assert not build_conversation_state([ChatMessage(type="ai", content="x", data={"pois": []})], "x").has_previous_plan


def test_clean_markdown():
    text = "# 标题\n**粗体** 和 *斜体*\n- 列表项\n1. 第一项\n`code`\n```\nblock\n```\n[链接]【提示】"
    cleaned = clean_markdown(text)
    assert cleaned == "标题\n粗体 和 斜体\n• 列表项\n第一项\ncode\n\n链接提示"


def test_extract_basic_keywords():
    assert extract_basic_keywords("北京和上海五日游") == ["北京", "上海"]
    assert extract_basic_keywords("带父母去看海边的日出和日落") == ["带父母去看海边的日出"]
    assert extract_basic_keywords("  ") == []
