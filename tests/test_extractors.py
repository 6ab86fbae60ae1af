"""Unit tests for source extractors."""

import json
from datetime import datetime, timezone

import pytest

from platform_monitor.config.exceptions import ConfigurationError
from platform_monitor.config.models import CriteriaConfig, SourceConfig
from platform_monitor.domain.models import RecordKind
from platform_monitor.extractors import (
    CardExtractor,
    EmbeddedJsonExtractor,
    ExtractionPath,
    SearchApiExtractor,
    get_extractor,
)
from platform_monitor.extractors.base import BaseExtractor, ExtractionResult
from platform_monitor.transport.models import RawResponse


def raw(text, url="https://example.com/"):
    return RawResponse(url=url, status_code=200, text=text)


# ============================================================================
# Embedded JSON (Product Hunt)
# ============================================================================


def next_data_page(edges):
    payload = {"props": {"initialState": {"homefeed": {"edges": edges}}}}
    return (
        "<html><head><title>Product Hunt</title></head><body>"
        f'<script id="__NEXT_DATA__" type="application/json">{json.dumps(payload)}</script>'
        "</body></html>"
    )


class TestEmbeddedJsonExtractor:
    """Product Hunt style pages with a __NEXT_DATA__ payload."""

    def test_primary_path(self):
        page = next_data_page(
            [
                {"node": {"name": "Ledgerly", "tagline": "Bookkeeping for freelancers", "slug": "ledgerly", "votesCount": 342}},
                {"node": {"name": "Plotline", "tagline": "Story maps", "url": "https://plotline.app", "votesCount": 12}},
            ]
        )
        extractor = EmbeddedJsonExtractor("ProductHunt")

        result = extractor.extract(raw(page, "https://www.producthunt.com/"))

        assert result.path == ExtractionPath.PRIMARY
        assert not result.is_degraded
        assert [r.name for r in result.records] == ["Ledgerly", "Plotline"]

        first = result.records[0]
        assert first.url == "https://www.producthunt.com/posts/ledgerly"
        assert first.tagline == "Bookkeeping for freelancers"
        assert first.popularity == 342
        assert first.source == "ProductHunt"
        assert first.kind == RecordKind.STARTUP
        assert result.records[1].url == "https://plotline.app"

    def test_nodes_without_name_or_url_are_discarded(self):
        page = next_data_page(
            [
                {"node": {"name": "", "slug": "nameless"}},
                {"node": {"name": "Linkless"}},
                {"node": {"name": "Kept", "slug": "kept", "votesCount": None}},
                {"not_a_node": True},
            ]
        )

        result = EmbeddedJsonExtractor("ProductHunt").extract(raw(page))

        assert [r.name for r in result.records] == ["Kept"]
        assert result.records[0].popularity == 0

    def test_missing_payload_falls_back_to_name_scan(self, caplog):
        page = '<div>{"name":"Alpha Tool","x":1}{"name":"Beta \\u00e9"}{"name":"Alpha Tool"}</div>'

        with caplog.at_level("WARNING"):
            result = EmbeddedJsonExtractor("ProductHunt").extract(raw(page, "https://www.producthunt.com/"))

        assert result.path == ExtractionPath.DEGRADED
        assert result.is_degraded
        assert [r.name for r in result.records] == ["Alpha Tool", "Beta é", "Alpha Tool"]
        assert all(r.url == "https://www.producthunt.com/" for r in result.records)
        assert all(r.tagline == "" and r.popularity == 0 for r in result.records)
        assert result.notes == ["embedded JSON payload not found"]
        assert any(getattr(rec, "event", None) == "extraction.degraded" for rec in caplog.records)

    def test_invalid_payload_json_falls_back(self):
        page = '<script id="__NEXT_DATA__">{"props": {"name":"Broken"</script>'

        result = EmbeddedJsonExtractor("ProductHunt").extract(raw(page))

        assert result.path == ExtractionPath.DEGRADED
        assert [r.name for r in result.records] == ["Broken"]
        assert "not valid JSON" in result.notes[0]

    def test_unresolved_path_falls_back(self):
        payload = {"props": {"pageProps": {"posts": [{"name": "Moved"}]}}}
        page = f'<script id="__NEXT_DATA__">{json.dumps(payload)}</script>'

        result = EmbeddedJsonExtractor("ProductHunt").extract(raw(page))

        assert result.path == ExtractionPath.DEGRADED
        assert [r.name for r in result.records] == ["Moved"]

    def test_max_records(self):
        edges = [{"node": {"name": f"Tool {i}", "slug": f"tool-{i}"}} for i in range(30)]

        result = EmbeddedJsonExtractor("ProductHunt", max_records=20).extract(raw(next_data_page(edges)))

        assert len(result.records) == 20
        assert result.records[-1].name == "Tool 19"

    def test_empty_page_is_degraded_and_empty(self):
        result = EmbeddedJsonExtractor("ProductHunt").extract(raw(""))

        assert result.path == ExtractionPath.DEGRADED
        assert result.records == []


# ============================================================================
# Search API (Hacker News Algolia)
# ============================================================================


def hits_body(*hits):
    return json.dumps({"hits": list(hits), "nbHits": len(hits)})


class TestSearchApiExtractor:
    """Algolia search responses."""

    def test_filters_and_maps_launch_posts(self):
        body = hits_body(
            {
                "title": "Launch HN: Tallyfy (YC S24) - Workflow automation",
                "url": "https://tallyfy.example",
                "points": 85,
                "created_at": "2025-03-04T16:20:00.000Z",
                "objectID": "1001",
            },
            {"title": "Ask HN: Who is hiring?", "url": "https://x.example", "points": 500, "objectID": "1002"},
            {"title": "launch hn: quietly lowercase", "url": None, "points": None, "objectID": "1003"},
        )

        result = SearchApiExtractor("HackerNews").extract(raw(body))

        assert result.path == ExtractionPath.PRIMARY
        assert [r.name for r in result.records] == [
            "Tallyfy (YC S24) - Workflow automation",
            "quietly lowercase",
        ]

        first, second = result.records
        assert first.url == "https://tallyfy.example"
        assert first.popularity == 85
        assert first.published_at == datetime(2025, 3, 4, 16, 20, tzinfo=timezone.utc)
        assert first.kind == RecordKind.STARTUP
        assert second.url == "https://news.ycombinator.com/item?id=1003"
        assert second.popularity == 0

    @pytest.mark.parametrize(
        "body",
        [
            "<html>Service Unavailable</html>",
            '{"hits": [{"title": "Launch HN: Trunc',
            "",
            "[1, 2, 3]",
            '{"nbHits": 0}',
            '{"hits": "nope"}',
        ],
    )
    def test_unusable_body_yields_empty_failed_result(self, body):
        result = SearchApiExtractor("HackerNews").extract(raw(body))

        assert result.records == []
        assert result.path == ExtractionPath.FAILED
        assert result.notes

    def test_hit_without_url_or_object_id_is_discarded(self):
        body = hits_body({"title": "Launch HN: Ghost"})

        result = SearchApiExtractor("HackerNews").extract(raw(body))

        assert result.records == []
        assert result.path == ExtractionPath.PRIMARY

    def test_custom_title_marker(self):
        body = hits_body(
            {"title": "Show HN: Gadget", "url": "https://gadget.example"},
            {"title": "Launch HN: Other", "url": "https://other.example"},
        )

        result = SearchApiExtractor("HackerNews", title_marker="Show HN").extract(raw(body))

        assert [r.name for r in result.records] == ["Gadget"]

    def test_max_records(self):
        hits = [{"title": f"Launch HN: Co {i}", "objectID": str(i)} for i in range(15)]

        result = SearchApiExtractor("HackerNews", max_records=10).extract(raw(hits_body(*hits)))

        assert len(result.records) == 10

    def test_empty_marker_rejected(self):
        with pytest.raises(ValueError):
            SearchApiExtractor("HackerNews", title_marker=" ")


# ============================================================================
# Card HTML (bank bonuses)
# ============================================================================


class TestCardExtractor:
    """Card-style offer listings."""

    def test_single_card(self):
        page = '<div class="card">Acme Bank Bonus $500 ... <h2>Acme Bank</h2></div>'

        result = CardExtractor("BankBonuses", min_bonus_amount=50).extract(raw(page))

        assert len(result.records) == 1
        record = result.records[0]
        assert record.name == "Acme Bank"
        assert record.monetary_amount == 500
        assert record.kind == RecordKind.SIGNUP_BONUS
        assert record.url == "https://example.com/"

    def test_full_card_fields(self):
        page = """
        <section class="offers">
          <article class="offer-card featured">
            <h3 class="card-title">Chase <em>Total Checking</em></h3>
            <span class="amount">$1,250.50 bonus</span>
            <p>Open an account &amp; set up direct deposit.</p>
            <a href="/go/chase">Details</a>
          </article>
        </section>
        """

        result = CardExtractor("BankBonuses", min_bonus_amount=50).extract(
            raw(page, "https://bonuses.example.com/list/")
        )

        assert len(result.records) == 1
        record = result.records[0]
        assert record.name == "Chase Total Checking"
        assert record.monetary_amount == 1250.50
        assert record.tagline == "Open an account & set up direct deposit."
        assert record.url == "https://bonuses.example.com/go/chase"

    def test_title_class_used_without_heading(self):
        page = '<li class="card"><span class="offer-title">SoFi</span> get $300</li>'

        result = CardExtractor("BankBonuses").extract(raw(page))

        assert [r.name for r in result.records] == ["SoFi"]

    def test_below_threshold_and_incomplete_cards_skipped(self):
        page = (
            '<div class="card"><h2>Tiny Bank</h2>$25 bonus</div>'
            '<div class="card"><h2>No Amount Bank</h2>Great rates</div>'
            '<div class="card">$400 with no title</div>'
            '<div class="card"><h2>Big Bank</h2>$200</div>'
        )

        result = CardExtractor("BankBonuses", min_bonus_amount=50).extract(raw(page))

        assert [r.name for r in result.records] == ["Big Bank"]

    def test_amount_equal_to_threshold_is_kept(self):
        page = '<div class="card"><h2>Edge Bank</h2>$50</div>'

        result = CardExtractor("BankBonuses", min_bonus_amount=50).extract(raw(page))

        assert [r.monetary_amount for r in result.records] == [50]

    def test_seen_names_are_skipped(self):
        page = (
            '<div class="card"><h2>Ally Bank</h2>$100</div>'
            '<div class="card"><h2>  ally   BANK </h2>$250</div>'
        )

        result = CardExtractor("BankBonuses").extract(raw(page))

        assert len(result.records) == 1
        assert result.records[0].monetary_amount == 100

    def test_text_pass_finds_offers_outside_cards(self):
        page = (
            '<div class="card"><h2>Acme Bank</h2>$500</div>'
            "<p>Also worth a look: Capital One Bonus: $350 for new checking customers.</p>"
            "<p>Acme Bank Bonus $500 again.</p>"
        )

        result = CardExtractor("BankBonuses", min_bonus_amount=50).extract(raw(page, "https://list.example/"))

        assert [(r.name, r.monetary_amount) for r in result.records] == [
            ("Acme Bank", 500),
            ("Capital One", 350),
        ]
        assert result.records[1].url == "https://list.example/"

    def test_amount_after_card_does_not_leak_in(self):
        page = (
            '<div class="card"><h2>Acme Bank</h2><p>Great rates</p></div>'
            "<footer>Win $1,000 in our sweepstakes</footer>"
        )

        result = CardExtractor("BankBonuses").extract(raw(page))

        assert result.records == []

    def test_amount_from_sidebar_does_not_reach_last_card(self):
        page = (
            '<div class="card"><h2>First Bank</h2>$200</div>'
            '<div class="card"><h2>Second Bank</h2>No offer today</div>'
            '<aside><div class="promo">$900 cash</div></aside>'
        )

        result = CardExtractor("BankBonuses").extract(raw(page))

        assert [(r.name, r.monetary_amount) for r in result.records] == [("First Bank", 200)]

    def test_subtitle_class_is_not_a_title(self):
        page = (
            '<div class="card"><span class="card-subtitle">No monthly fees</span>'
            '<span class="title">Acme Bank</span> $300</div>'
        )

        result = CardExtractor("BankBonuses").extract(raw(page))

        assert [r.name for r in result.records] == ["Acme Bank"]

    def test_text_pass_ignores_accepted_card_content(self):
        page = '<div class="card"><h2>Chase</h2><p>Chase Total Checking Bonus $300</p></div>'

        result = CardExtractor("BankBonuses").extract(raw(page))

        assert [(r.name, r.monetary_amount) for r in result.records] == [("Chase", 300)]
        assert result.records[0].tagline == "Chase Total Checking Bonus $300"

    def test_text_pass_recovers_card_without_title(self):
        page = '<div class="card"><span>Marcus Savings Bonus $150</span></div>'

        result = CardExtractor("BankBonuses").extract(raw(page))

        assert [(r.name, r.monetary_amount) for r in result.records] == [("Marcus Savings", 150)]

    def test_nested_cards_use_innermost(self):
        page = (
            '<section class="card-list card">'
            '<div class="card"><h3>Inner One</h3>$100</div>'
            '<div class="card"><h3>Inner Two</h3>$200</div>'
            "</section>"
        )

        result = CardExtractor("BankBonuses").extract(raw(page))

        assert [(r.name, r.monetary_amount) for r in result.records] == [
            ("Inner One", 100),
            ("Inner Two", 200),
        ]

    def test_script_text_is_ignored(self):
        page = (
            '<div class="card"><h2>Acme Bank</h2><script>var promo = "$999";</script>$250</div>'
            '<script>document.write("Fake Bank Bonus $5,000")</script>'
        )

        result = CardExtractor("BankBonuses").extract(raw(page))

        assert [(r.name, r.monetary_amount) for r in result.records] == [("Acme Bank", 250)]

    def test_fragment_links_fall_back_to_next_href(self):
        page = (
            '<div class="card"><h2>Acme Bank</h2>$250'
            '<a href="#top">Top</a><a href="javascript:void(0)">x</a><a href="/apply">Apply</a></div>'
        )

        result = CardExtractor("BankBonuses").extract(raw(page, "https://list.example/bonuses/"))

        assert result.records[0].url == "https://list.example/apply"

    def test_page_without_cards(self):
        result = CardExtractor("BankBonuses").extract(raw("<html><body>Nothing here</body></html>"))

        assert result.records == []
        assert result.path == ExtractionPath.PRIMARY

    def test_custom_card_marker(self):
        page = (
            '<div class="tile"><h2>Tile Bank</h2>$300</div>'
            '<div class="card"><h2>Card Bank</h2>$300</div>'
        )

        result = CardExtractor("BankBonuses", card_marker="tile").extract(raw(page))

        assert [r.name for r in result.records] == ["Tile Bank"]

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            CardExtractor("BankBonuses", min_bonus_amount=-1)
        with pytest.raises(ValueError):
            CardExtractor("BankBonuses", card_marker="")


# ============================================================================
# Base behaviour and factory
# ============================================================================


class ExplodingExtractor(BaseExtractor):
    EXTRACTOR_NAME = "exploding"

    def _extract(self, response):
        raise RuntimeError("boom")


class TestBaseExtractor:
    """Shared extractor behaviour."""

    def test_unexpected_exception_becomes_failed_result(self, caplog):
        with caplog.at_level("ERROR"):
            result = ExplodingExtractor("Broken").extract(raw("x"))

        assert result.path == ExtractionPath.FAILED
        assert result.records == []
        assert result.notes == ["RuntimeError: boom"]
        assert "exploding extractor failed" in caplog.text

    def test_failed_factory(self):
        result = ExtractionResult.failed("bad input")
        assert result.path == ExtractionPath.FAILED
        assert result.notes == ["bad input"]

    def test_invalid_constructor_arguments(self):
        with pytest.raises(ValueError):
            ExplodingExtractor("  ")
        with pytest.raises(ValueError):
            ExplodingExtractor("Name", max_records=-1)

    def test_describe(self):
        assert ExplodingExtractor("Name", max_records=3).describe() == {
            "extractor": "exploding",
            "source": "Name",
            "max_records": 3,
        }


class TestGetExtractor:
    """Factory selection by source kind."""

    @pytest.mark.parametrize(
        "kind,expected",
        [
            ("embedded-json", EmbeddedJsonExtractor),
            ("search-api", SearchApiExtractor),
            ("card-html", CardExtractor),
        ],
    )
    def test_kind_selects_extractor(self, kind, expected):
        source = SourceConfig(name="Src", kind=kind, url="https://example.com/", max_records=7)

        extractor = get_extractor(source, CriteriaConfig())

        assert isinstance(extractor, expected)
        assert extractor.source_name == "Src"
        assert extractor.max_records == 7

    def test_card_extractor_gets_criteria_and_marker(self):
        source = SourceConfig(name="Bonuses", kind="card-html", url="https://example.com/", card_marker="tile")

        extractor = get_extractor(source, CriteriaConfig(min_bonus_amount=150))

        assert extractor.min_bonus_amount == 150
        assert extractor.card_marker == "tile"

    def test_search_extractor_gets_title_marker(self):
        source = SourceConfig(name="HN", kind="search-api", url="https://example.com/", title_marker="Show HN")

        assert get_extractor(source, CriteriaConfig()).title_marker == "Show HN"

    def test_unknown_kind_is_configuration_error(self):
        source = SourceConfig.model_construct(
            name="Feed", kind="rss", url="https://example.com/feed", max_records=0,
            title_marker="Launch HN", card_marker="card", enabled=True,
        )

        with pytest.raises(ConfigurationError) as exc_info:
            get_extractor(source, CriteriaConfig())

        assert "Unknown source kind" in str(exc_info.value)
        assert "card-html" in str(exc_info.value)

    def test_creation_is_logged_with_description(self, caplog):
        caplog.set_level("DEBUG", logger="platform_monitor.extractors.factory")
        source = SourceConfig(name="HN", kind="search-api", url="https://example.com/", max_records=4)

        get_extractor(source, CriteriaConfig())

        created = [r for r in caplog.records if getattr(r, "event", None) == "extractor.created"]
        assert len(created) == 1
        assert created[0].extractor == "search-api"
        assert created[0].source == "HN"
        assert created[0].max_records == 4
