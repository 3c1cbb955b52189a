# src/channels/shopify.py
# Shopify Admin GraphQL client matching the base.py interface:
#   execute(document, variables) -> {"data": ..., "errors": ...}
#
# Uses:
#  - a private-app / offline access token (X-Shopify-Access-Token)
#  - the per-channel rate limiter around every POST
#  - list_products / list_collections for the catalog pages

from __future__ import annotations
from typing import Dict, Any, List, Optional
import os

import httpx
from loguru import logger

from rate_limit.limiter import TokenBucketLimiter, get_limiter
from .base import TransportError, error_messages
from .operations import PRODUCTS_QUERY, COLLECTIONS_QUERY

DEFAULT_API_VERSION = "2024-01"


def _env(name: str, default: Optional[str] = None) -> str:
    v = os.getenv(name, default)
    if v is None or v == "":
        raise RuntimeError(f"Missing env var: {name}")
    return v


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return default
    try:
        return float(v)
    except ValueError:
        raise RuntimeError(f"Invalid env var: {name}={v!r} is not a number") from None


def _normalize_shop_domain(val: str) -> str:
    v = (val or "").strip()
    for scheme in ("https://", "http://"):
        if v.lower().startswith(scheme):
            v = v[len(scheme):]
    return v.strip().strip("/")


class ShopifyAdminClient:
    name = "shopify"

    def __init__(
        self,
        *,
        shop_domain: str,
        access_token: str,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 30.0,
        limiter: Optional[TokenBucketLimiter] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.shop = _normalize_shop_domain(shop_domain)
        if not self.shop:
            raise RuntimeError("Shopify shop domain is empty")
        self.api_version = api_version
        self.endpoint = f"https://{self.shop}/admin/api/{api_version}/graphql.json"
        self._token = access_token
        self._limiter = limiter or get_limiter(self.name)
        self._http = httpx.Client(timeout=timeout, transport=transport)

    @classmethod
    def from_env(cls) -> "ShopifyAdminClient":
        return cls(
            shop_domain=_env("SHOPIFY_SHOP_DOMAIN"),
            access_token=_env("SHOPIFY_ACCESS_TOKEN"),
            api_version=os.getenv("SHOPIFY_API_VERSION") or DEFAULT_API_VERSION,
            timeout=_env_float("SHOPIFY_TIMEOUT_SECONDS", 30.0),
        )

    def _headers(self) -> dict:
        return {
            "X-Shopify-Access-Token": self._token,
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": "shopify-product-composer/0.1",
        }

    def close(self) -> None:
        self._http.close()

    # ---------- transport ----------
    def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body = {"query": document, "variables": variables or {}}
        logger.debug(f"POST {self.endpoint} ({len(document)} chars, vars={sorted(body['variables'])})")
        try:
            request = self._http.build_request("POST", self.endpoint, headers=self._headers(), json=body)
        except (TypeError, ValueError) as exc:
            raise TransportError(f"{self.shop}: request variables are not JSON-encodable: {exc}") from exc
        try:
            with self._limiter():
                r = self._http.send(request)
            r.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"{self.shop}: {exc}") from exc
        try:
            payload = r.json()
        except ValueError as exc:
            raise TransportError(f"{self.shop}: response body is not JSON") from exc
        if not isinstance(payload, dict):
            raise TransportError(f"{self.shop}: response body is not a JSON object")
        return {"data": payload.get("data"), "errors": payload.get("errors")}

    # ---------- catalog reads ----------
    def _nodes(self, document: str, root: str, first: int) -> List[Dict[str, Any]]:
        resp = self.execute(document, {"first": first})
        if resp.get("errors"):
            raise TransportError(f"{root}: {'; '.join(error_messages(resp['errors']))}")
        conn = (resp.get("data") or {}).get(root) or {}
        return [e["node"] for e in conn.get("edges") or [] if isinstance(e, dict) and e.get("node")]

    def list_products(self, first: int = 10) -> List[Dict[str, Any]]:
        return self._nodes(PRODUCTS_QUERY, "products", first)

    def list_collections(self, first: int = 10) -> List[Dict[str, Any]]:
        return self._nodes(COLLECTIONS_QUERY, "collections", first)
