from adlens.analyzer.ranking_engine import get_top_creatives
from adlens.models.campaign_models import CampaignRecord


def _rows(make_record):
    return [
        make_record(creative_id="a", spend=10, conversions=1, impressions=100, engagement=5),
        make_record(creative_id="b", spend=30, conversions=4, impressions=300, engagement=9),
        make_record(creative_id="a", spend=15, conversions=2, impressions=100, engagement=5),
        make_record(creative_id="c", spend=5, conversions=0, impressions=50, engagement=1),
        make_record(creative_id="d", spend=8, conversions=3, impressions=80, engagement=2),
    ]


def test_groups_by_creative_and_sums_window(make_record):
    top = get_top_creatives(_rows(make_record), 6)

    a = next(p for p in top if p.creative_id == "a")
    assert a.spend == 25
    assert a.conversions == 3
    assert a.impressions == 200
    assert a.cpa == 25 / 3
    assert a.ctr == 5.0


def test_orders_by_conversions_with_spend_then_key_tie_breaks(make_record):
    top = get_top_creatives(_rows(make_record), 6)

    # a and d both have 3 conversions; d spent less.
    assert [p.creative_id for p in top] == ["b", "d", "a", "c"]
    assert [p.rank for p in top] == [1, 2, 3, 4]
    assert all(p.primary_kpi == "conversions" for p in top)
    values = [p.primary_value for p in top]
    assert values == sorted(values, reverse=True)


def test_identical_ties_fall_back_to_creative_key(make_record):
    rows = [
        make_record(creative_id="zeta", spend=10, conversions=1),
        make_record(creative_id="alpha", spend=10, conversions=1),
    ]
    assert [p.creative_id for p in get_top_creatives(rows)] == ["alpha", "zeta"]


def test_limit_is_respected(make_record):
    rows = _rows(make_record)

    assert len(get_top_creatives(rows, 2)) == 2
    assert len(get_top_creatives(rows, 10)) == 4
    assert get_top_creatives(rows, 0) == []
    assert get_top_creatives([], 6) == []


def test_default_limit_is_six(make_record):
    rows = [make_record(creative_id=f"c{i}", conversions=i) for i in range(9)]
    top = get_top_creatives(rows)
    assert len(top) == 6
    assert top[0].creative_id == "c8"


def test_repeat_calls_are_deterministic(make_record):
    rows = _rows(make_record)
    first = [p.creative_id for p in get_top_creatives(rows, 3)]
    assert all([p.creative_id for p in get_top_creatives(rows, 3)] == first for _ in range(5))


def test_falls_back_to_creative_name_and_carries_labels():
    rows = [
        CampaignRecord(date="2024-01-29", creative_name="Banner", campaign_name="Launch", conversions=2),
        CampaignRecord(date="2024-01-30", creative_name="Banner", campaign_name="Launch", conversions=1,
                       thumbnail_url="https://img.example/banner.png"),
        CampaignRecord(date="2024-01-30", conversions=1),
    ]

    top = get_top_creatives(rows)

    assert top[0].creative_id == "Banner"
    assert top[0].creative_name == "Banner"
    assert top[0].campaign_name == "Launch"
    assert top[0].thumbnail_url == "https://img.example/banner.png"
    assert top[0].conversions == 3
    assert top[1].creative_id == "(unknown)"
