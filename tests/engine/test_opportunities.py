"""Target selection and opportunity ranking tests."""

from __future__ import annotations

import math

import pytest

from linkfinder.engine.candidates import best_target
from linkfinder.engine.index import analyze
from linkfinder.engine.records import parse_keyword_metrics

from .conftest import make_document, make_keyword, make_page_metrics

SOURCE_URL = "https://example.com/blog/gardening-basics"
TARGET_URL = "https://example.com/guides/advanced-gardening"
OTHER_URL = "https://example.com/recipes/pasta"


@pytest.fixture()
def site():
    documents = [
        make_document(SOURCE_URL, "Gardening tools, gardening tips for beginners", title="Gardening Basics"),
        make_document(TARGET_URL, "Advanced gardening techniques and pruning"),
        make_document(OTHER_URL, "Kitchen recipes: pasta"),
    ]
    keyword_metrics = {
        "gardening": make_keyword("gardening", volume=1000, difficulty=9, impressions=500),
        "tools": make_keyword("tools", volume=10, difficulty=0, impressions=5),
    }
    page_metrics = {
        SOURCE_URL: make_page_metrics(SOURCE_URL, impressions=400, clicks=20, position=5),
        TARGET_URL: make_page_metrics(TARGET_URL, impressions=1000, clicks=50, position=10, incoming_links=1),
    }
    return documents, keyword_metrics, page_metrics


def test_best_target_picks_highest_page_score():
    source = make_document("s", "widget overview")
    weak = make_document("weak", "widget manual")
    strong = make_document("strong", "Widget buying guide")
    unscored = make_document("unscored", "widget history")
    page_metrics = {
        "s": make_page_metrics("s", impressions=99999, position=1),
        "weak": make_page_metrics("weak", impressions=100, position=20),
        "strong": make_page_metrics("strong", impressions=5000, position=8),
    }

    choice = best_target(source, "widget", [source, weak, strong, unscored], page_metrics)

    assert choice is not None
    assert choice.document.url == "strong"


def test_best_target_ties_go_to_first_page():
    source = make_document("s", "widget")
    first = make_document("first", "widget one")
    second = make_document("second", "widget two")
    page_metrics = {
        "first": make_page_metrics("first"),
        "second": make_page_metrics("second"),
    }

    choice = best_target(source, "widget", [source, first, second], page_metrics)
    assert choice.document.url == "first"

    choice = best_target(source, "widget", [source, second, first], page_metrics)
    assert choice.document.url == "second"


def test_best_target_requires_positive_page_score():
    source = make_document("s", "widget")
    buried = make_document("buried", "widget")
    page_metrics = {"buried": make_page_metrics("buried", position=150)}

    assert best_target(source, "widget", [source, buried], page_metrics) is None


def test_analyze_ranks_opportunities_by_priority(site, engine_config):
    documents, keyword_metrics, page_metrics = site

    result = analyze(documents, keyword_metrics, page_metrics, engine_config)

    assert [(item.source_url, item.target_url) for item in result.opportunities] == [
        (SOURCE_URL, TARGET_URL),
        (TARGET_URL, SOURCE_URL),
    ]
    top = result.opportunities[0]
    relevance = 0.5 + 1 / 7
    assert top.keyword == "gardening"
    assert top.anchor_text == "Learn more about gardening"
    assert math.isclose(top.relevance, relevance)
    assert math.isclose(top.keyword_score, 50000 * relevance)
    assert math.isclose(top.page_score, 126)
    assert math.isclose(top.priority, top.keyword_score * top.page_score)
    assert top.source_title == "Gardening Basics"
    assert top.target_title == TARGET_URL
    assert top.expected_impact.estimated == 76
    assert top.impact_label == "+26 clicks/month"

    priorities = [item.priority for item in result.opportunities]
    assert priorities == sorted(priorities, reverse=True)


def test_keywords_below_threshold_never_emitted(site, engine_config):
    documents, keyword_metrics, page_metrics = site

    result = analyze(documents, keyword_metrics, page_metrics, engine_config)

    assert all(item.keyword != "tools" for item in result.opportunities)
    assert all(item.keyword_score >= 100 for item in result.opportunities)


def test_relevance_can_push_keyword_below_threshold(site, engine_config):
    documents, _, page_metrics = site
    keyword_metrics = {"gardening": make_keyword("gardening", volume=12, difficulty=9, impressions=100)}

    assert analyze(documents, keyword_metrics, page_metrics, engine_config).opportunities == []

    engine_config.raw["relevance_policy"] = "search_console"
    result = analyze(documents, keyword_metrics, page_metrics, engine_config)
    assert [math.isclose(item.keyword_score, 120) for item in result.opportunities] == [True, True]


def test_search_console_policy_uses_flat_relevance(site, engine_config):
    documents, keyword_metrics, page_metrics = site
    engine_config.raw["relevance_policy"] = "search_console"

    result = analyze(documents, keyword_metrics, page_metrics, engine_config)

    assert result.opportunities[0].keyword_score == 50000
    assert result.opportunities[0].relevance == 1.0


def test_keyword_impressions_fall_back_to_source_page(site, engine_config):
    documents, _, page_metrics = site
    engine_config.raw["relevance_policy"] = "search_console"
    keyword_metrics = {"gardening": make_keyword("gardening", volume=1000, difficulty=9)}

    result = analyze(documents, keyword_metrics, page_metrics, engine_config)

    by_source = {item.source_url: item for item in result.opportunities}
    assert by_source[SOURCE_URL].keyword_score == 40000
    # The target page's impressions are used when it acts as the source.
    assert by_source[TARGET_URL].keyword_score == 100000


def test_missing_metrics_are_skipped(site, engine_config):
    documents, keyword_metrics, _ = site

    result = analyze(documents, keyword_metrics, {}, engine_config)
    assert result.opportunities == []

    result = analyze(documents, {}, site[2], engine_config)
    assert result.opportunities == []


def test_analysis_is_deterministic(site, engine_config):
    documents, keyword_metrics, page_metrics = site

    first = analyze(documents, keyword_metrics, page_metrics, engine_config)
    second = analyze(documents, keyword_metrics, page_metrics, engine_config)

    assert first.as_dict() == second.as_dict()


def test_stats_describe_full_list_while_output_is_capped(site, engine_config):
    documents, keyword_metrics, page_metrics = site
    engine_config.raw["max_opportunities"] = 1

    result = analyze(documents, keyword_metrics, page_metrics, engine_config)

    assert len(result.opportunities) == 1
    assert result.stats.total_pages == 3
    assert result.stats.total_keywords == 11
    assert result.stats.total_opportunities == 2
    relevance = 0.5 + 1 / 7
    assert math.isclose(result.stats.avg_keyword_score, 50000 * relevance)
    expected_avg_priority = 50000 * relevance * (126 + 110.2) / 2
    assert math.isclose(result.stats.avg_priority, expected_avg_priority)


def test_empty_site_produces_zeroed_stats(engine_config):
    result = analyze([], {}, {}, engine_config)

    assert result.opportunities == []
    assert result.stats.total_pages == 0
    assert result.stats.avg_priority == 0
    assert result.stats.avg_keyword_score == 0


def test_repeated_url_counts_once(engine_config):
    documents = [
        make_document("https://example.com/a", "first version of content"),
        make_document("https://example.com/a", "second version of content"),
    ]

    result = analyze(documents, {}, {}, engine_config)

    assert result.stats.total_pages == 1
    assert result.pages == [{"url": "https://example.com/a", "title": "https://example.com/a"}]


def test_mixed_case_keyword_metrics_still_match(site, engine_config):
    documents, _, page_metrics = site
    keyword_metrics = parse_keyword_metrics({"Gardening": {"volume": 1000, "difficulty": 9, "impressions": 500}})

    result = analyze(documents, keyword_metrics, page_metrics, engine_config)

    assert [item.keyword for item in result.opportunities] == ["gardening", "gardening"]


def test_default_config_caps_output_at_fifty(engine_config):
    hub_url = "https://example.com/guides/hub"
    keywords = [f"keyword{index:03d}" for index in range(60)]
    documents = [
        make_document(f"https://example.com/blog/{keyword}", f"Notes on {keyword}") for keyword in keywords
    ]
    documents.append(make_document(hub_url, " ".join(keywords)))
    keyword_metrics = {
        keyword: make_keyword(keyword, volume=1000, difficulty=9, impressions=500) for keyword in keywords
    }
    page_metrics = {hub_url: make_page_metrics(hub_url)}

    result = analyze(documents, keyword_metrics, page_metrics, engine_config)

    assert engine_config.max_opportunities == 50
    assert len(result.opportunities) == 50
    assert result.stats.total_opportunities == 60
    assert {item.target_url for item in result.opportunities} == {hub_url}
    priorities = [item.priority for item in result.opportunities]
    assert priorities == sorted(priorities, reverse=True)
