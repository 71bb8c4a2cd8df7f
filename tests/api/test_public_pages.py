"""
Tests for the server-rendered pages: public site, theme toggle, admin shell
and the 404 fallback.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.adapters.clock import FixedClock
from src.adapters.memory_store import InMemoryDocumentStore
from src.components.content import CreatePostInput, run_create
from src.components.settings import SETTINGS_PATH


@pytest.fixture
def post_slug(store: InMemoryDocumentStore, clock: FixedClock) -> str:
    result = run_create(
        CreatePostInput(
            data={
                "title": "Aurora X2",
                "excerpt": "Tiny earbuds",
                "content": "## Sound\n\nGreat bass.",
                "category": "Audio & Headphones",
                "productPrice": 129.99,
                "affiliateUrl": "https://amazon.example/x2",
                "featured": True,
            }
        ),
        store=store,
        clock=clock,
    )
    assert result.post is not None
    return result.post.slug


def events(store: InMemoryDocumentStore, event_type: str) -> list[dict]:
    return store.query("analytics_events", "eventType", "==", event_type)


# --- Public Site ---


class TestPublicSite:
    def test_home(
        self, client: TestClient, store: InMemoryDocumentStore, post_slug: str
    ) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert "The Best Product For You" in response.text
        assert f'href="/product/{post_slug}"' in response.text
        [view] = events(store, "page_view")
        assert view["data"]["pagePath"] == "/"

    def test_reviews_filter(self, client: TestClient, post_slug: str) -> None:
        matching = client.get("/reviews", params={"category": "Audio & Headphones"})
        other = client.get("/reviews", params={"category": "Laptops"})

        assert "Aurora X2" in matching.text
        assert "1 result" in matching.text
        assert "Aurora X2" not in other.text
        assert "No reviews match your filters." in other.text

    def test_reviews_unknown_category_shows_all(
        self, client: TestClient, post_slug: str
    ) -> None:
        response = client.get("/reviews", params={"category": "Spaceships"})

        assert "Aurora X2" in response.text
        assert "1 result" in response.text
        assert '<option value="all" selected>All Categories</option>' in response.text

    def test_product_page_records_post_view(
        self, client: TestClient, store: InMemoryDocumentStore, post_slug: str
    ) -> None:
        response = client.get(f"/product/{post_slug}")

        assert response.status_code == 200
        assert "<h2>Sound</h2>" in response.text
        assert "$129.99" in response.text
        assert '<meta property="og:type" content="article"' in response.text
        [view] = events(store, "post_view")
        assert view["data"]["postTitle"] == "Aurora X2"

    def test_unknown_product_is_404(
        self, client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        response = client.get("/product/nope")

        assert response.status_code == 404
        assert "Page not found" in response.text
        assert events(store, "post_view") == []

    def test_contact(self, client: TestClient) -> None:
        response = client.get("/contact")
        assert response.status_code == 200
        assert "Contact Us" in response.text

    @pytest.mark.parametrize(
        "path,title",
        [
            ("/about", "About Us"),
            ("/sitemap", "Sitemap"),
            ("/privacy-policy", "Privacy Policy"),
            ("/terms-of-service", "Terms of Service"),
            ("/disclaimer", "Disclaimer"),
        ],
    )
    def test_html_pages(self, client: TestClient, path: str, title: str) -> None:
        response = client.get(path)

        assert response.status_code == 200
        assert f"<title>{title} | TechReview</title>" in response.text

    def test_edited_html_is_sanitised(
        self, admin_client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        admin_client.put(
            "/api/admin/pages/about",
            json={"content": "<h2>Team</h2><script>alert(1)</script>"},
        )

        response = admin_client.get("/about")

        assert "<h2>Team</h2>" in response.text
        assert "<script>alert(1)" not in response.text

    def test_sitemap_xml(self, client: TestClient, post_slug: str) -> None:
        response = client.get("/sitemap.xml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert f"<loc>http://testserver/product/{post_slug}</loc>" in response.text
        assert "<loc>http://testserver/about</loc>" in response.text


# --- Shell State ---


class TestShellState:
    def test_theme_toggle(self, client: TestClient) -> None:
        response = client.post("/theme", data={"next": "/reviews"}, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/reviews"
        assert response.cookies.get("theme") == "dark"
        assert 'class="dark"' in client.get("/").text

        client.post("/theme", data={"next": "/"}, follow_redirects=False)
        assert client.cookies.get("theme") == "light"

    def test_rating_shown_after_rating(self, client: TestClient) -> None:
        client.post("/api/rating", data={"rating": "4"})

        assert "Thank you for rating! (4/5)" in client.get("/").text

    def test_analytics_session_cookie_set_once(self, client: TestClient) -> None:
        first = client.get("/")
        second = client.get("/reviews")

        assert first.cookies.get("analytics_session_id")
        assert "analytics_session_id" not in second.headers.get("set-cookie", "")


# --- Admin Shell ---


class TestAdminShell:
    def test_login_form_when_signed_out(self, client: TestClient) -> None:
        response = client.get("/dashboard")

        assert response.status_code == 200
        assert "Admin Login" in response.text
        assert 'action="/api/auth/login"' in response.text

    def test_login_error_message(self, client: TestClient) -> None:
        response = client.get("/dashboard", params={"error": "login"})
        assert "Invalid email or password" in response.text

    def test_dashboard_when_signed_in(self, admin_client: TestClient) -> None:
        response = admin_client.get("/dashboard")

        assert "Welcome, Site Admin" in response.text
        assert "Users" in response.text

    def test_dashboard_uses_saved_site_settings(
        self, admin_client: TestClient, store: InMemoryDocumentStore
    ) -> None:
        store.upsert_singleton(SETTINGS_PATH, {"siteName": "Gadget Desk"}, merge=True)

        response = admin_client.get("/dashboard")

        assert response.status_code == 200
        assert "Gadget Desk" in response.text

    def test_section_requires_session(self, client: TestClient) -> None:
        response = client.get("/dashboard/users", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"

    def test_section_when_signed_in(self, admin_client: TestClient) -> None:
        response = admin_client.get("/dashboard/posts")

        assert response.status_code == 200
        assert "Post Management" in response.text

    def test_unknown_section(self, admin_client: TestClient) -> None:
        assert admin_client.get("/dashboard/billing").status_code == 404


# --- Fallback ---


class TestNotFound:
    def test_html_404(self, client: TestClient) -> None:
        response = client.get("/no/such/page")

        assert response.status_code == 404
        assert "Page not found" in response.text
        assert "/no/such/page" in response.text

    def test_api_404_stays_json(self, client: TestClient) -> None:
        response = client.get("/api/no-such-endpoint")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}
