"""
Tests for server-side rendering: escaping, markdown, sanitising and the
page shell.
"""

from __future__ import annotations

import pytest

from src.components.catalog import DEFAULT_PRICE_BRACKETS
from src.components.render import (
    LayoutContext,
    build_metadata,
    escape_html,
    format_date,
    format_price,
    render_footer,
    render_header,
    render_home,
    render_markdown,
    render_meta_tags_html,
    render_page,
    render_post_card,
    render_product,
    render_rating_widget,
    render_reviews,
    render_sitemap_xml,
    sanitize_html,
    sitemap_entries,
    truncate_description,
)
from src.domain.entities import Post, SiteSettings


@pytest.fixture
def site() -> SiteSettings:
    return SiteSettings()


@pytest.fixture
def post() -> Post:
    return Post(
        id="p1",
        slug="aurora-x2",
        title="Aurora X2 <Earbuds>",
        excerpt="Small & loud",
        content="## Sound\n\nGreat **bass**.",
        date="2025-01-15T12:00:00.000000Z",
        category="Audio & Headphones",
        product_name="Aurora X2",
        product_price=129.99,
        affiliate_url="https://amazon.example/x2",
        pros=["Battery"],
        cons=["Case is bulky"],
        specs={"Weight": "5g"},
    )


# --- Text Helpers ---


class TestTextHelpers:
    def test_escape_html(self) -> None:
        assert escape_html('<a href="x">') == "&lt;a href=&quot;x&quot;&gt;"
        assert escape_html(None) == ""

    def test_format_price(self) -> None:
        assert format_price(129.99) == "$129.99"
        assert format_price(39) == "$39"
        assert format_price(1899) == "$1,899"
        assert format_price(None) == ""

    def test_format_date(self) -> None:
        assert format_date("2025-01-15T12:00:00.000000Z") == "01/15/2025"
        assert format_date("sometime") == "sometime"
        assert format_date("") == ""

    def test_truncate_description(self) -> None:
        text = "word " * 60
        out = truncate_description(text, 50)
        assert len(out) <= 53
        assert out.endswith("...")


class TestMarkdown:
    def test_renders_markdown(self) -> None:
        html = render_markdown("## Title\n\n- one\n- two")
        assert "<h2>Title</h2>" in html
        assert "<li>one</li>" in html

    def test_raw_html_shown_as_text(self) -> None:
        html = render_markdown("Hello <script>alert(1)</script> <b>bold</b>")
        assert "<script>" not in html
        assert "<b>" not in html
        assert "&lt;script&gt;" in html

    def test_blockquote_survives(self) -> None:
        assert "<blockquote>" in render_markdown("> quoted")

    def test_javascript_links_removed(self) -> None:
        html = render_markdown("[click](javascript:void)")
        assert "javascript:" not in html

    def test_external_links_get_rel(self) -> None:
        html = render_markdown("[shop](https://example.com)")
        assert 'rel="noopener noreferrer"' in html

    def test_empty(self) -> None:
        assert render_markdown(None) == ""


class TestSanitize:
    def test_strips_scripts_and_handlers(self) -> None:
        html = sanitize_html('<p onclick="x()">Hi</p><script>alert(1)</script>')
        assert "<script" not in html
        assert "onclick" not in html
        assert "<p>Hi</p>" in html

    def test_keeps_allowed_markup(self) -> None:
        html = sanitize_html('<h2>Heading</h2><ul><li><a href="/about">About</a></li></ul>')
        assert '<a href="/about">About</a>' in html
        assert "<h2>Heading</h2>" in html


# --- Shell ---


class TestMetadata:
    def test_page_title_suffix(self, site: SiteSettings) -> None:
        meta = build_metadata(site, path="/reviews", title="Product Reviews")
        assert meta.title == "Product Reviews | TechReview"

    def test_home_uses_meta_title(self, site: SiteSettings) -> None:
        assert build_metadata(site, path="/").title == site.meta_title

    def test_analytics_snippet_only_with_id(self, site: SiteSettings) -> None:
        without = render_meta_tags_html(build_metadata(site, path="/"))
        with_id = render_meta_tags_html(build_metadata(site, path="/", measurement_id="G-TEST"))

        assert "googletagmanager" not in without
        assert "G-TEST" in with_id


class TestLayout:
    def test_header_marks_active_link(self, site: SiteSettings) -> None:
        html = render_header(LayoutContext(settings=site, path="/reviews"))
        assert 'href="/reviews" aria-current="page"' in html

    def test_theme_toggle_label(self, site: SiteSettings) -> None:
        assert "Dark mode" in render_header(LayoutContext(settings=site, theme="light"))
        assert "Light mode" in render_header(LayoutContext(settings=site, theme="dark"))

    def test_footer_social_and_categories(self) -> None:
        site = SiteSettings(twitter="https://twitter.com/techreview")
        html = render_footer(LayoutContext(settings=site))

        assert "https://twitter.com/techreview" in html
        assert "Facebook" not in html
        assert "/reviews?category=Electronics" in html
        assert "/privacy-policy" in html

    def test_rating_widget_before_and_after(self, site: SiteSettings) -> None:
        before = render_rating_widget(LayoutContext(settings=site))
        after = render_rating_widget(LayoutContext(settings=site, rated=True, user_rating=4))

        assert 'action="/api/rating"' in before
        assert 'value="5"' in before
        assert "Thank you for rating! (4/5)" in after
        assert "4.8" in after

    def test_page_theme_class(self, site: SiteSettings) -> None:
        ctx = LayoutContext(settings=site, theme="dark")
        html = render_page(ctx, build_metadata(site, path="/"), "<p>Body</p>")
        assert '<html lang="en" class="dark">' in html
        assert "<p>Body</p>" in html


# --- Pages ---


class TestPublicPages:
    def test_post_card_escapes_and_links(self, post: Post, site: SiteSettings) -> None:
        html = render_post_card(post, site)

        assert 'href="/product/aurora-x2"' in html
        assert "Aurora X2 &lt;Earbuds&gt;" in html
        assert "$129.99" in html

    def test_post_card_respects_display_toggles(self, post: Post) -> None:
        site = SiteSettings(show_categories=False, show_author=False)
        html = render_post_card(post, site)
        assert "Audio &amp; Headphones" not in html
        assert "By Admin" not in html

    def test_home_empty_state(self, site: SiteSettings) -> None:
        html = render_home(site, {"heroTitle": "Hero"}, [])
        assert "Hero" in html
        assert "No featured reviews yet." in html

    def test_reviews_custom_inputs_only_for_custom(self, site: SiteSettings) -> None:
        fields = {"pageTitle": "Product Reviews", "pageDescription": "d"}
        plain = render_reviews(site, fields, [], "0 results", brackets=DEFAULT_PRICE_BRACKETS)
        custom = render_reviews(
            site,
            fields,
            [],
            "0 results",
            brackets=DEFAULT_PRICE_BRACKETS,
            price_range="custom",
            custom_min="10",
        )

        assert 'name="min"' not in plain
        assert 'name="min"' in custom
        assert "0 results" in plain
        assert "No reviews match your filters." in plain

    def test_product_page(self, post: Post, site: SiteSettings) -> None:
        html = render_product(post, site)

        assert "<h2>Sound</h2>" in html
        assert "Buy on Amazon" in html
        assert 'rel="sponsored nofollow noopener noreferrer"' in html
        assert "Technical Specifications" in html
        assert "Case is bulky" in html
        assert "affiliate_click" in html

    def test_product_without_affiliate_link(self, post: Post, site: SiteSettings) -> None:
        html = render_product(post.model_copy(update={"affiliate_url": ""}), site)
        assert "Buy on Amazon" not in html


class TestSitemap:
    def test_entries_and_xml(self, post: Post) -> None:
        entries = sitemap_entries([post], ["/", "/reviews", "/about"])
        xml = render_sitemap_xml("http://testserver/", entries)

        assert entries[0].priority == "1.0"
        assert entries[2].changefreq == "monthly"
        assert "<loc>http://testserver/product/aurora-x2</loc>" in xml
        assert "<lastmod>2025-01-15</lastmod>" in xml
