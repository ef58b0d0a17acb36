"""
Unit tests for article summary extraction and text helpers.
"""

import httpx

from livestock_news.services.http_client import create_client
from livestock_news.services.summary_extractor import (
    MAX_SUMMARY_LENGTH,
    clean_text,
    extract_from_html,
    extract_summary,
    summary_from_html,
    truncate,
)
from tests.fixtures.sample_data import article_page, mock_transport

ARTICLE_URL = "https://news.example.com/news/bluetongue-update"

LONG_PARAGRAPHS = [
    "Bluetongue virus has been confirmed in a cattle herd in Norfolk, officials said on Tuesday.",
    "A temporary control zone has been put in place and movement licences are now required.",
    "Farmers are urged to report suspected cases to the Animal and Plant Health Agency immediately.",
    "A fourth paragraph that is also long enough but should not be included in the excerpt.",
]


class TestSummaryFromHtml:
    """Tests for summary_from_html heuristics."""

    def test_takes_first_three_long_paragraphs(self):
        summary = summary_from_html(article_page(LONG_PARAGRAPHS))
        assert summary.startswith("Bluetongue virus has been confirmed")
        assert "Animal and Plant Health Agency" in summary
        assert "fourth paragraph" not in summary

    def test_skips_short_paragraphs(self):
        summary = summary_from_html(article_page(["Short.", "Too short too."] + LONG_PARAGRAPHS[:2]))
        assert "Short." not in summary
        assert summary.startswith("Bluetongue virus")

    def test_strips_non_content_elements(self):
        summary = summary_from_html(article_page(LONG_PARAGRAPHS))
        assert "Site header" not in summary
        assert "sidebar" not in summary

    def test_falls_through_selectors(self):
        html = "<html><body><main>" + "".join(f"<p>{p}</p>" for p in LONG_PARAGRAPHS[:2]) + "</main></body></html>"
        summary = summary_from_html(html)
        assert summary.startswith("Bluetongue virus")

    def test_too_little_text_returns_none(self):
        assert summary_from_html(article_page(["Only one short line."])) is None

    def test_bounded_length(self):
        paragraphs = ["word " * 60, "more " * 60, "text " * 60]
        summary = summary_from_html(article_page(paragraphs))
        assert len(summary) <= MAX_SUMMARY_LENGTH
        assert summary.endswith("...")


class TestExtractSummary:
    """Tests for extract_summary network handling."""

    def test_fetches_and_extracts(self):
        transport = mock_transport({ARTICLE_URL: article_page(LONG_PARAGRAPHS)})
        with create_client(5, transport=transport) as client:
            summary = extract_summary(ARTICLE_URL, client=client)
        assert summary.startswith("Bluetongue virus")

    def test_http_error_returns_none(self):
        transport = mock_transport({ARTICLE_URL: (500, "Server Error")})
        with create_client(5, transport=transport) as client:
            assert extract_summary(ARTICLE_URL, client=client) is None

    def test_network_error_returns_none(self):
        transport = mock_transport({ARTICLE_URL: httpx.ConnectError("connection refused")})
        with create_client(5, transport=transport) as client:
            assert extract_summary(ARTICLE_URL, client=client) is None

    def test_missing_page_returns_none(self):
        with create_client(5, transport=mock_transport({})) as client:
            assert extract_summary(ARTICLE_URL, client=client) is None


class TestTextHelpers:
    """Tests for clean_text, truncate and extract_from_html."""

    def test_clean_text_collapses_whitespace(self):
        assert clean_text("  Lamb \n\n prices\trise  ") == "Lamb prices rise"

    def test_clean_text_keeps_literal_ampersands(self):
        assert clean_text("R&D; spend on  pig genetics") == "R&D; spend on pig genetics"

    def test_truncate_short_text_unchanged(self):
        assert truncate("short", 400) == "short"

    def test_truncate_at_word_boundary(self):
        text = "alpha beta gamma delta epsilon zeta"
        result = truncate(text, 20)
        assert len(result) <= 20
        assert result.endswith("...")
        assert result[:-3].strip() in text

    def test_extract_from_html_strips_markup(self):
        html = '<p>Cull ewe trade <strong>strong</strong> at Skipton &amp; Bentham</p>'
        assert extract_from_html(html) == "Cull ewe trade strong at Skipton & Bentham"

    def test_extract_from_html_plain_text(self):
        assert extract_from_html("  plain  text ") == "plain text"
