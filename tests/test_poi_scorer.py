"""POI 评分与区域校验测试"""

from app.schemas.poi import PoiResult, SearchType
from app.services.poi_scorer import (
    apply_bonuses, apply_region_filter, category_bonus, clean_poi_name, dedupe_results,
    filter_results_by_region, keyword_bonus, northeast_province, region_match_bonus, select_best,
    tag_candidates, to_poi_result, verify_region
)
from tests.fakes import make_candidate


def test_tag_candidates_sets_base_scores_without_mutating_input():
    source = [make_candidate("西湖", "杭州市")]
    prefixed = tag_candidates(source, SearchType.CITY_PREFIXED)
    plain = tag_candidates(source, SearchType.PLAIN)
    assert prefixed[0].score == 100
    assert plain[0].score == 50
    assert prefixed[0].search_type == SearchType.CITY_PREFIXED
    assert source[0].score == 0


def test_region_bonus_levels():
    assert region_match_bonus(make_candidate("x", "丹东市"), "丹东") == 50
    assert region_match_bonus(make_candidate("x", "丹东", "振兴区"), "丹东市") == 30
    assert region_match_bonus(make_candidate("x", "吉林市"), "吉林省") == 20
    assert region_match_bonus(make_candidate("x", "福州市", "福建省福州市"), "丹东") is None


def test_northeast_city_scope_accepts_same_province():
    assert northeast_province("丹东") == "辽宁"
    assert northeast_province("哈尔滨市") == "黑龙江"
    assert northeast_province("吉林省") == "吉林"
    assert northeast_province("杭州") is None
    assert region_match_bonus(make_candidate("凤凰山", None, "辽宁省凤城市"), "丹东") == 20
    assert region_match_bonus(make_candidate("x", "沈阳市", "辽宁省沈阳市"), "丹东") == 20
    assert region_match_bonus(make_candidate("x", "长春市", "吉林省长春市"), "丹东") is None

    survivors = apply_region_filter([make_candidate("凤凰山", None, "辽宁省凤城市")], "丹东")
    assert [c.score for c in survivors] == [20]


def test_exact_city_outranks_province_relaxed_match():
    scope = "吉林省"
    exact = make_candidate("北山公园", city_name="吉林省")
    relaxed = make_candidate("北山公园", city_name="吉林市")
    candidates = tag_candidates([relaxed, exact], SearchType.PLAIN)
    scored = apply_bonuses(apply_region_filter(candidates, scope), "北山公园")
    assert select_best(scored).city_name == "吉林省"


def test_region_filter_drops_out_of_scope_candidates():
    candidates = tag_candidates(
        [make_candidate("西湖", "杭州市"), make_candidate("西湖公园", "福州市")],
        SearchType.PLAIN,
    )
    filtered = apply_region_filter(candidates, "杭州")
    assert [c.city_name for c in filtered] == ["杭州市"]
    assert filtered[0].score == 100
    assert candidates[0].score == 50


def test_region_filter_without_scope_keeps_everything():
    candidates = [make_candidate("西湖", "杭州市"), make_candidate("西湖公园", "福州市")]
    assert apply_region_filter(candidates, None) == candidates


def test_keyword_and_category_bonus():
    assert keyword_bonus(make_candidate("灵隐寺"), "灵隐寺") == 40
    assert keyword_bonus(make_candidate("飞来峰"), "灵隐寺") == 0
    assert category_bonus(make_candidate("灵隐寺")) == 20
    assert category_bonus(make_candidate("某酒店", poi_type="风景名胜;公园广场;公园")) == 20
    assert category_bonus(make_candidate("某酒店", poi_type="住宿服务")) == 0


def test_select_best_is_stable_for_ties():
    first = make_candidate("A").with_bonus(100)
    second = make_candidate("B").with_bonus(100)
    assert select_best([first, second]).name == "A"
    assert select_best([]) is None


def test_verify_region():
    assert verify_region(make_candidate("x", "杭州市"), "杭州")
    assert verify_region(make_candidate("x", None, "浙江省杭州市西湖区"), "杭州市")
    # 候选城市简称包含在范围名中
    assert verify_region(make_candidate("x", "吉林市"), "吉林省")
    assert not verify_region(make_candidate("x", "福州市", "鼓楼区"), "杭州")
    assert verify_region(make_candidate("x", "福州市"), None)


def test_clean_poi_name():
    assert clean_poi_name("故宫博物院(暂停开放)") == "故宫博物院"
    assert clean_poi_name("西湖  游船（营业中）") == "西湖 游船"


def test_to_poi_result_requires_location():
    candidate = make_candidate("西湖(临时关闭)", "杭州市", "西湖区", lat=30.25, lng=120.15)
    result = to_poi_result(candidate, "杭州")
    assert result == PoiResult(name="西湖", city="杭州市", address="西湖区", lat=30.25, lng=120.15)
    assert to_poi_result(make_candidate("x", with_location=False)) is None
    assert to_poi_result(make_candidate("x", None), "杭州").city == "杭州"


def test_final_region_filter_and_dedupe():
    results = [
        PoiResult(name="西湖", city="杭州市", lat=30.25, lng=120.15),
        PoiResult(name="西湖", city="杭州市", lat=30.25, lng=120.15),
        PoiResult(name="西湖", city="福州市", address="鼓楼区", lat=26.1, lng=119.3),
    ]
    unique = dedupe_results(results)
    assert len(unique) == 2
    assert filter_results_by_region(unique, "杭州") == [results[0]]
    assert filter_results_by_region(unique, None) == unique
