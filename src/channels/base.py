# src/channels/base.py
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable
import os


class TransportError(RuntimeError):
    """The GraphQL call could not be completed (network, HTTP status, non-JSON body)."""


@runtime_checkable
class GraphQLClient(Protocol):
    name: str

    def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run one operation; returns {"data": ..., "errors": ...} as sent by the server."""
        ...


@runtime_checkable
class CatalogClient(GraphQLClient, Protocol):
    """What the HTTP layer needs: the mutations plus catalog reads and cleanup."""

    def list_products(self, first: int = 10) -> List[Dict[str, Any]]: ...

    def list_collections(self, first: int = 10) -> List[Dict[str, Any]]: ...

    def close(self) -> None: ...


def error_messages(errors: Any) -> List[str]:
    # GraphQL says a list of {message}; Shopify also answers a bare string or object
    if errors is None:
        return []
    if not isinstance(errors, list):
        errors = [errors]
    return [str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors]


def _has_all(names: List[str]) -> bool:
    return all(os.getenv(n) for n in names)


SHOPIFY_ENV = ["SHOPIFY_SHOP_DOMAIN", "SHOPIFY_ACCESS_TOKEN"]


def shopify_configured() -> bool:
    return _has_all(SHOPIFY_ENV)


def get_client() -> Optional[CatalogClient]:
    if shopify_configured():
        from .shopify import ShopifyAdminClient
        return ShopifyAdminClient.from_env()
    return None
