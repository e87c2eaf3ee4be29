from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from core.domain.models import DomainSuggestion, SearchQuery


class _StaticSuggester:
    async def suggest(self, query: SearchQuery) -> list[DomainSuggestion]:
        return [DomainSuggestion(domain=f"{query.keywords[0]}.com", confidence=0.7)]


class _ExplodingPipeline:
    async def process_bulk(self, raw, *, hooks=None):
        raise RuntimeError("database exploded with secret details")


@pytest.fixture
def app(settings, scenario_aggregator):
    return create_app(settings=settings, aggregator=scenario_aggregator, suggester=_StaticSuggester())


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def _assert_error(response, status: int, message: str) -> None:
    assert response.status_code == status
    body = response.json()
    assert body["success"] is False
    assert body["error"] == message
    assert "timestamp" in body


def test_bulk_with_json_domain_list(client) -> None:
    response = client.post("/api/availability/bulk", json={"domains": ["Free.com", "free.com", "other.io"]})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["total"] == 2
    assert data["processed"] == 2
    assert "durationMs" in data
    first = data["results"][0]
    assert first["domain"] == "free.com"
    assert first["available"] is True
    assert first["bestPrice"] == {"registrar": "R3", "price": 8.03, "currency": "USD"}
    assert len(first["registrars"]) == 5


def test_bulk_with_json_text(client) -> None:
    response = client.post("/api/availability/bulk", json={"text": "visit example.com or Mybrand.IO now"})

    assert response.status_code == 200
    assert [r["domain"] for r in response.json()["data"]["results"]] == ["example.com", "mybrand.io"]


def test_bulk_with_uploaded_file(client) -> None:
    files = {"file": ("domains.csv", b"\xef\xbb\xbfalpha.com,beta.io\ngamma.dev\n", "text/csv")}
    response = client.post("/api/availability/bulk", files=files)

    assert response.status_code == 200
    assert [r["domain"] for r in response.json()["data"]["results"]] == ["alpha.com", "beta.io", "gamma.dev"]


def test_bulk_with_uploaded_html_page(client) -> None:
    page = b"<html><body><p>Try shop.com</p><script>var x='hidden.com'</script></body></html>"
    files = {"file": ("saved.html", page, "text/html")}
    response = client.post("/api/availability/bulk", files=files)

    assert response.status_code == 200
    assert [r["domain"] for r in response.json()["data"]["results"]] == ["shop.com"]


def test_bulk_with_form_text(client) -> None:
    response = client.post(
        "/api/availability/bulk",
        data={"text": "one.com two.com"},
        files={"unused": ("x.txt", b"", "text/plain")},
    )

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 2


def test_bulk_with_plain_text_body(client) -> None:
    response = client.post(
        "/api/availability/bulk",
        content="one.com\ntwo.com",
        headers={"content-type": "text/plain"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 2


def test_bulk_rejects_unsupported_content_type(client) -> None:
    response = client.post(
        "/api/availability/bulk",
        content="<domains/>",
        headers={"content-type": "application/xml"},
    )

    _assert_error(response, 400, "Unsupported content type")


@pytest.mark.parametrize("payload", [{"domains": []}, {"text": "nothing here"}, {}])
def test_bulk_without_domains_is_a_bad_request(client, scenario_registrars, payload) -> None:
    response = client.post("/api/availability/bulk", json=payload)

    _assert_error(response, 400, "No domains provided")
    assert all(r.calls == [] for r in scenario_registrars)


def test_bulk_with_malformed_json(client) -> None:
    response = client.post(
        "/api/availability/bulk",
        content="{not json",
        headers={"content-type": "application/json"},
    )

    _assert_error(response, 400, "Invalid JSON body")


def test_bulk_unexpected_failure_is_a_generic_500(app, client) -> None:
    app.state.bulk_pipeline = _ExplodingPipeline()

    response = client.post("/api/availability/bulk", json={"domains": ["a.com"]})

    _assert_error(response, 500, "Internal server error")
    assert "secret" not in response.text


def test_single_domain_availability(client) -> None:
    response = client.get("/api/availability", params={"domain": "free.com"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["bestPrice"]["price"] == 8.03
    prices = [q["price"] for q in data["registrars"]]
    assert prices == sorted(prices)


def test_single_domain_invalid_name(client) -> None:
    response = client.get("/api/availability", params={"domain": "not a domain"})

    _assert_error(response, 400, "Invalid domain: 'not a domain'")


def test_single_domain_missing_parameter(client) -> None:
    _assert_error(client.get("/api/availability"), 400, "Invalid request")


def test_search_prices_suggestions(client) -> None:
    response = client.post("/api/search", json={"keywords": ["brew"], "preferredTlds": ["com"]})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["totalResults"] == 1
    suggestion = data["suggestions"][0]
    assert suggestion["domain"] == "brew.com"
    assert suggestion["available"] is True
    assert suggestion["bestPrice"]["price"] == 8.03
    assert len(suggestion["pricing"]) == 5
    assert data["query"]["keywords"] == ["brew"]
    assert data["aiInsights"]


def test_search_requires_keywords(client) -> None:
    _assert_error(client.post("/api/search", json={"keywords": []}), 400, "Keywords are required")


def test_search_rejects_malformed_query(client) -> None:
    _assert_error(client.post("/api/search", json={"keywords": "brew", "budget": -5}), 400, "Invalid search query")


def test_search_get_is_not_allowed(client) -> None:
    _assert_error(client.get("/api/search"), 405, "Method not allowed. Use POST to search for domains.")
