"""
Shared fixtures: a scripted in-memory GraphQL client and canned Shopify
responses for the four product mutations.
"""

import threading
from typing import Any, Dict, List, Optional, Tuple

import pytest

from channels.base import TransportError
from pipeline.state import CreationRequest

PRODUCT_ID = "gid://shopify/Product/1001"
VARIANT_ID = "gid://shopify/ProductVariant/2002"
COLLECTION_ID = "gid://shopify/Collection/C1"

ROOTS = ["productCreate", "productVariantUpdate", "collectionAddProducts", "productCreateMedia"]


def product_created(product_id: str = PRODUCT_ID, variant_id: str = VARIANT_ID) -> Dict[str, Any]:
    return {
        "data": {
            "productCreate": {
                "product": {
                    "id": product_id,
                    "title": "Shirt",
                    "descriptionHtml": "<p>desc</p>",
                    "variants": {"edges": [{"node": {"id": variant_id, "price": "0.00"}}]},
                },
                "userErrors": [],
            }
        }
    }


def variant_updated(price: str = "25.00") -> Dict[str, Any]:
    return {
        "data": {
            "productVariantUpdate": {
                "productVariant": {
                    "id": VARIANT_ID,
                    "price": price,
                    "barcode": None,
                    "createdAt": "2024-05-01T10:00:00Z",
                },
                "userErrors": [],
            }
        }
    }


def collection_added() -> Dict[str, Any]:
    return {
        "data": {
            "collectionAddProducts": {
                "collection": {"id": COLLECTION_ID, "title": "Summer"},
                "userErrors": [],
            }
        }
    }


def media_created() -> Dict[str, Any]:
    return {
        "data": {
            "productCreateMedia": {
                "media": [{"mediaContentType": "IMAGE", "status": "UPLOADED"}],
                "mediaUserErrors": [],
            }
        }
    }


def user_errors(root: str, *messages: Tuple[str, str], key: str = "userErrors") -> Dict[str, Any]:
    return {"data": {root: {key: [{"field": [f], "message": m} for f, m in messages]}}}


def happy_responses() -> Dict[str, Any]:
    return {
        "productCreate": product_created(),
        "productVariantUpdate": variant_updated(),
        "collectionAddProducts": collection_added(),
        "productCreateMedia": media_created(),
    }


class FakeShopify:
    """Answers each mutation from a script keyed by its root field.

    A scripted value that is an exception is raised instead of returned.
    Calls are recorded as (root, variables).
    """

    name = "fake"

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses = happy_responses()
        self.responses.update(responses or {})
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self._lock = threading.Lock()

    def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        root = next(r for r in ROOTS if f"{r}(" in document)
        with self._lock:
            self.calls.append((root, variables or {}))
        resp = self.responses[root]
        if isinstance(resp, Exception):
            raise resp
        return resp

    def called(self) -> List[str]:
        return [root for root, _ in self.calls]

    def variables_for(self, root: str) -> Dict[str, Any]:
        return next(v for r, v in self.calls if r == root)


@pytest.fixture
def fake_shopify():
    return FakeShopify()


@pytest.fixture
def shirt_request() -> CreationRequest:
    return CreationRequest(
        title="Shirt",
        price="25.00",
        descriptionHtml="<p>desc</p>",
        collectionId=COLLECTION_ID,
        imageUrl="http://x/y.png",
    )


@pytest.fixture
def transport_down() -> TransportError:
    return TransportError("demo.myshopify.com: connection refused")
