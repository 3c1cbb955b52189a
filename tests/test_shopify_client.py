import json

import httpx
import pytest

from channels.base import CatalogClient, TransportError, get_client
from channels.shopify import ShopifyAdminClient
from rate_limit.limiter import TokenBucketLimiter


def _client(handler, **kw) -> ShopifyAdminClient:
    return ShopifyAdminClient(
        shop_domain="https://demo.myshopify.com/",
        access_token="shpat_test",
        limiter=TokenBucketLimiter(rate_per_sec=1000, burst=100),
        transport=httpx.MockTransport(handler),
        **kw,
    )


def test_execute_posts_query_and_returns_envelope():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["token"] = request.headers["X-Shopify-Access-Token"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"shop": {"name": "Demo"}}, "extensions": {"cost": {}}})

    c = _client(handler, api_version="2024-04")
    out = c.execute("query { shop { name } }", {"a": 1})

    assert out == {"data": {"shop": {"name": "Demo"}}, "errors": None}
    assert seen["url"] == "https://demo.myshopify.com/admin/api/2024-04/graphql.json"
    assert seen["token"] == "shpat_test"
    assert seen["body"] == {"query": "query { shop { name } }", "variables": {"a": 1}}


def test_execute_passes_graphql_errors_through():
    c = _client(lambda r: httpx.Response(200, json={"errors": [{"message": "Throttled"}]}))
    assert c.execute("query { shop { name } }") == {"data": None, "errors": [{"message": "Throttled"}]}


@pytest.mark.parametrize("response", [
    httpx.Response(401, json={"errors": "[API] Invalid API key or access token"}),
    httpx.Response(502, text="Bad Gateway"),
    httpx.Response(200, text="<html>maintenance</html>"),
    httpx.Response(200, json=["not", "an", "object"]),
])
def test_execute_raises_transport_error(response):
    c = _client(lambda r: response)
    with pytest.raises(TransportError):
        c.execute("query { shop { name } }")


def test_execute_wraps_network_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError, match="connection refused"):
        _client(handler).execute("query { shop { name } }")


def test_list_products_flattens_edges():
    def handler(request):
        assert json.loads(request.content)["variables"] == {"first": 10}
        return httpx.Response(200, json={"data": {"products": {"edges": [
            {"node": {"id": "gid://shopify/Product/1", "title": "Shirt", "handle": "shirt", "featuredImage": None}},
            {"node": {"id": "gid://shopify/Product/2", "title": "Mug", "handle": "mug",
                      "featuredImage": {"url": "https://cdn/x.png", "altText": ""}}},
        ]}}})

    products = _client(handler).list_products()
    assert [p["handle"] for p in products] == ["shirt", "mug"]


def test_list_collections_raises_on_graphql_errors():
    c = _client(lambda r: httpx.Response(200, json={"errors": [{"message": "Access denied for collections"}]}))
    with pytest.raises(TransportError, match="Access denied"):
        c.list_collections(5)


def test_from_env(monkeypatch):
    monkeypatch.setenv("SHOPIFY_SHOP_DOMAIN", "demo.myshopify.com")
    monkeypatch.setenv("SHOPIFY_ACCESS_TOKEN", "shpat_env")
    monkeypatch.delenv("SHOPIFY_API_VERSION", raising=False)
    c = get_client()
    assert isinstance(c, ShopifyAdminClient)
    assert isinstance(c, CatalogClient)
    assert c.endpoint == "https://demo.myshopify.com/admin/api/2024-01/graphql.json"
    c.close()


def test_get_client_unconfigured(monkeypatch):
    monkeypatch.delenv("SHOPIFY_SHOP_DOMAIN", raising=False)
    monkeypatch.setenv("SHOPIFY_ACCESS_TOKEN", "shpat_env")
    assert get_client() is None


def test_from_env_names_missing_variable(monkeypatch):
    monkeypatch.setenv("SHOPIFY_SHOP_DOMAIN", "demo.myshopify.com")
    monkeypatch.delenv("SHOPIFY_ACCESS_TOKEN", raising=False)
    with pytest.raises(RuntimeError, match="SHOPIFY_ACCESS_TOKEN"):
        ShopifyAdminClient.from_env()


def test_unencodable_variables_are_reported_without_sending():
    sent = []
    c = _client(lambda r: sent.append(r) or httpx.Response(200, json={"data": {}}))
    with pytest.raises(TransportError, match="not JSON-encodable") as err:
        c.execute("mutation { x }", {"input": {"price": float("inf")}})
    assert "response body is not JSON" not in str(err.value)
    assert sent == []


def test_only_a_non_json_body_is_reported_as_such():
    c = _client(lambda r: httpx.Response(200, text="<html>maintenance</html>"))
    with pytest.raises(TransportError, match="response body is not JSON"):
        c.execute("query { shop { name } }")

    c = _client(lambda r: httpx.Response(503, text="<html>maintenance</html>"))
    with pytest.raises(TransportError) as err:
        c.execute("query { shop { name } }")
    assert "503" in str(err.value)
    assert "not JSON" not in str(err.value)


def test_list_products_string_errors():
    c = _client(lambda r: httpx.Response(200, json={"errors": "Not Found"}))
    with pytest.raises(TransportError, match="products: Not Found$"):
        c.list_products()


@pytest.mark.parametrize("value", ["soon", "30s"])
def test_from_env_rejects_bad_timeout(monkeypatch, value):
    monkeypatch.setenv("SHOPIFY_SHOP_DOMAIN", "demo.myshopify.com")
    monkeypatch.setenv("SHOPIFY_ACCESS_TOKEN", "shpat_env")
    monkeypatch.setenv("SHOPIFY_TIMEOUT_SECONDS", value)
    with pytest.raises(RuntimeError, match="SHOPIFY_TIMEOUT_SECONDS"):
        ShopifyAdminClient.from_env()


def test_from_env_reads_timeout(monkeypatch):
    monkeypatch.setenv("SHOPIFY_SHOP_DOMAIN", "demo.myshopify.com")
    monkeypatch.setenv("SHOPIFY_ACCESS_TOKEN", "shpat_env")
    monkeypatch.setenv("SHOPIFY_TIMEOUT_SECONDS", "2.5")
    c = ShopifyAdminClient.from_env()
    assert c._http.timeout.read == 2.5
    c.close()
